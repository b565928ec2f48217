"""Unit tests for error categories and descriptions."""

from http_client_manager.errors import (
    ConfigurationError,
    ErrorCategory,
    InvalidParameterError,
    RequestFailedError,
    UnknownOperationError,
    UnknownServiceError,
    describe_error,
)


class TestErrors:
    """Test categories and user-facing descriptions."""

    def test_categories(self):
        assert ConfigurationError("x").category == ErrorCategory.CONFIGURATION_ERROR
        assert UnknownServiceError("svc").category == ErrorCategory.NOT_FOUND
        assert UnknownOperationError("svc", "Op").category == ErrorCategory.NOT_FOUND
        assert InvalidParameterError("title").category == ErrorCategory.VALIDATION_ERROR
        assert RequestFailedError("boom").category == ErrorCategory.REQUEST_ERROR

    def test_missing_parameter_message(self):
        error = InvalidParameterError("title", operation="CreatePost")
        assert str(error) == 'Missing required parameter "title" for operation "CreatePost"'

    def test_describe_error(self):
        description = describe_error(InvalidParameterError("title"))

        assert description["error"] == 'Missing required parameter "title"'
        assert description["error_category"] == "validation_error"
        assert description["technical_details"]["parameter"] == "title"
        assert description["technical_details"]["exception_type"] == "InvalidParameterError"
        assert description["suggested_actions"]

    def test_describe_error_for_response_status(self):
        description = describe_error(RequestFailedError("failed", status_code=500))

        assert description["technical_details"]["status_code"] == 500
        assert "Inspect the remote response body for details" in description["suggested_actions"]

    def test_describe_unexpected_error(self):
        description = describe_error(RuntimeError("boom"), ["Retry later"])

        assert description["error_category"] == "configuration_error"
        assert description["suggested_actions"] == ["Retry later"]
