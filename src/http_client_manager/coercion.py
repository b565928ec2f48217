"""Conversion of operator text input into typed parameter values.

Values typed by an operator (CLI ``-p name=value`` options, saved request
edits) arrive as text. The declared parameter type selects a value
callback; types without a callback pass the input through unchanged.
"""

from typing import Any, Callable, Dict, List, Mapping, Optional

from .errors import InvalidParameterError
from .models import Operation, Parameter

ValueCallback = Callable[[Parameter, Any], Any]

TRUE_VALUES = {"true", "1", "yes", "on"}
FALSE_VALUES = {"false", "0", "no", "off"}


def _blank(raw: Any) -> bool:
    return raw is None or (isinstance(raw, str) and not raw.strip())


def integer_value(param: Parameter, raw: Any) -> Optional[int]:
    """Cast input to an integer; blank or absent input yields ``None``."""
    if _blank(raw):
        return None
    if isinstance(raw, bool):
        return int(raw)
    if isinstance(raw, int):
        return raw
    try:
        if isinstance(raw, float):
            return int(raw)
        return int(str(raw).strip())
    except (ValueError, OverflowError):
        raise InvalidParameterError(
            param.name, f'Parameter "{param.name}" must be an integer, got "{raw}"'
        )


def number_value(param: Parameter, raw: Any) -> Optional[float]:
    """Cast input to a float; blank or absent input yields ``None``."""
    if _blank(raw):
        return None
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return raw
    try:
        return float(str(raw).strip())
    except ValueError:
        raise InvalidParameterError(param.name, f'Parameter "{param.name}" must be a number, got "{raw}"')


def boolean_value(param: Parameter, raw: Any) -> Optional[bool]:
    if _blank(raw):
        return None
    if isinstance(raw, bool):
        return raw
    text = str(raw).strip().lower()
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    raise InvalidParameterError(param.name, f'Parameter "{param.name}" must be a boolean, got "{raw}"')


def array_value(param: Parameter, raw: Any) -> Optional[List[Any]]:
    """Split newline separated input into a list.

    Each line is trimmed and blank lines are dropped. Items are converted
    with the callback of the declared item type, if there is one. Blank
    input yields an empty list; absent input yields ``None``.
    """
    if raw is None:
        return None

    if isinstance(raw, (list, tuple)):
        items = [item.strip() if isinstance(item, str) else item for item in raw]
    else:
        text = str(raw).strip()
        if not text:
            return []
        items = [line.strip() for line in text.splitlines()]

    items = [item for item in items if not _blank(item)]

    item_param = param.items
    callback = get_value_callback(item_param) if item_param is not None else None
    if callback is None:
        return items

    item_param = item_param.model_copy(update={"name": param.name})
    return [callback(item_param, item) for item in items]


VALUE_CALLBACKS: Dict[str, ValueCallback] = {
    "integer": integer_value,
    "number": number_value,
    "boolean": boolean_value,
    "array": array_value,
}


def get_value_callback(param: Parameter) -> Optional[ValueCallback]:
    """The value callback of a parameter's declared type, if any."""
    if param.type is None:
        return None
    return VALUE_CALLBACKS.get(param.type)


def coerce_value(param: Parameter, raw: Any) -> Any:
    callback = get_value_callback(param)
    if callback is None:
        return raw
    return callback(param, raw)


def coerce_parameters(operation: Operation, raw_values: Mapping[str, Any]) -> Dict[str, Any]:
    """Convert raw input for an operation.

    Declared parameters go through their value callback, undeclared ones
    are kept as given. Parameters that end up absent are left out so that
    declared defaults still apply at execution time.
    """
    values: Dict[str, Any] = {}
    for name, raw in raw_values.items():
        param = operation.get_param(name)
        value = coerce_value(param, raw) if param is not None else raw
        if value is not None:
            values[name] = value
    return values
