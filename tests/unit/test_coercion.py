"""Unit tests for operator input coercion."""

import pytest

from http_client_manager.coercion import (
    array_value,
    boolean_value,
    coerce_parameters,
    coerce_value,
    get_value_callback,
    integer_value,
    number_value,
)
from http_client_manager.errors import InvalidParameterError
from http_client_manager.models import Operation, Parameter


def param(**kwargs) -> Parameter:
    return Parameter.model_validate({"name": "p", **kwargs})


class TestIntegerValue:
    """Test integer casting."""

    def test_numeric_text(self):
        assert integer_value(param(type="integer"), " 42 ") == 42

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_blank_is_none(self, raw):
        assert integer_value(param(type="integer"), raw) is None

    @pytest.mark.parametrize("raw, expected", [(1.5, 1), (-2.9, -2), (3.0, 3)])
    def test_float_truncated(self, raw, expected):
        assert integer_value(param(type="integer"), raw) == expected

    def test_invalid_text(self):
        with pytest.raises(InvalidParameterError) as exc_info:
            integer_value(param(type="integer"), "abc")

        assert exc_info.value.parameter == "p"
        assert "must be an integer" in str(exc_info.value)


class TestArrayValue:
    """Test newline separated array input."""

    def test_blank_lines_dropped(self):
        assert array_value(param(type="array"), "a\nb\n\nc") == ["a", "b", "c"]

    def test_lines_trimmed(self):
        assert array_value(param(type="array"), "  a \r\n b\n") == ["a", "b"]

    def test_blank_input_is_empty_list(self):
        assert array_value(param(type="array"), "  ") == []

    def test_absent_input_is_none(self):
        assert array_value(param(type="array"), None) is None

    def test_items_coerced_with_item_type(self):
        array_param = param(type="array", items={"type": "integer"})
        assert array_value(array_param, "1\n2\n\n3") == [1, 2, 3]

    def test_invalid_item_names_parameter(self):
        array_param = param(type="array", items={"type": "integer"})

        with pytest.raises(InvalidParameterError) as exc_info:
            array_value(array_param, "1\nx")

        assert exc_info.value.parameter == "p"

    def test_list_input(self):
        assert array_value(param(type="array"), [" a ", "", "b"]) == ["a", "b"]


class TestOtherTypes:
    """Test number, boolean and pass-through conversion."""

    def test_number(self):
        assert number_value(param(type="number"), "1.5") == 1.5
        assert number_value(param(type="number"), "") is None

    @pytest.mark.parametrize("raw, expected", [("true", True), ("Yes", True), ("0", False), ("off", False)])
    def test_boolean(self, raw, expected):
        assert boolean_value(param(type="boolean"), raw) is expected

    def test_invalid_boolean(self):
        with pytest.raises(InvalidParameterError):
            boolean_value(param(type="boolean"), "maybe")

    def test_unknown_type_is_identity(self):
        assert get_value_callback(param(type="string")) is None
        assert coerce_value(param(type="string"), " keep ") == " keep "
        assert coerce_value(param(), {"a": 1}) == {"a": 1}


class TestCoerceParameters:
    """Test conversion of a whole input mapping."""

    def test_declared_undeclared_and_blank_values(self):
        operation = Operation.model_validate(
            {
                "parameters": {
                    "userId": {"type": "integer"},
                    "tags": {"type": "array"},
                    "page": {"type": "integer", "default": 1},
                }
            }
        )

        values = coerce_parameters(
            operation, {"userId": "3", "tags": "x\n\ny", "page": "", "extra": "raw"}
        )

        assert values == {"userId": 3, "tags": ["x", "y"], "extra": "raw"}
