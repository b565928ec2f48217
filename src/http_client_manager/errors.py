"""Error taxonomy for service API discovery and command execution."""

from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorCategory(str, Enum):
    """Error categorization used for reporting and HTTP status mapping."""

    CONFIGURATION_ERROR = "configuration_error"  # Broken or incomplete definitions
    NOT_FOUND = "not_found"  # Unknown service, operation or saved request
    VALIDATION_ERROR = "validation_error"  # Invalid or missing parameters
    REQUEST_ERROR = "request_error"  # Transport failure or non-success response


class HttpClientManagerError(Exception):
    """Base error carrying a category and optional details."""

    category = ErrorCategory.CONFIGURATION_ERROR

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.details = details or {}


class ConfigurationError(HttpClientManagerError):
    """Malformed or incomplete service definition or description."""

    category = ErrorCategory.CONFIGURATION_ERROR


class NotFoundError(HttpClientManagerError):
    """Requested item does not exist."""

    category = ErrorCategory.NOT_FOUND


class UnknownServiceError(NotFoundError):
    """Service API id is not registered."""

    def __init__(self, service_id: str):
        super().__init__(f'Undefined Http Service Api id "{service_id}"', {"service_api": service_id})
        self.service_id = service_id


class UnknownOperationError(NotFoundError):
    """Operation is not declared by the service description."""

    def __init__(self, service_id: str, operation: str):
        super().__init__(
            f'Operation "{operation}" is not defined by "{service_id}" service api',
            {"service_api": service_id, "operation": operation},
        )
        self.service_id = service_id
        self.operation = operation


class InvalidParameterError(HttpClientManagerError):
    """A parameter is missing or cannot be converted to its declared type."""

    category = ErrorCategory.VALIDATION_ERROR

    def __init__(self, parameter: str, message: Optional[str] = None, operation: Optional[str] = None):
        if message is None:
            message = f'Missing required parameter "{parameter}"'
            if operation:
                message += f' for operation "{operation}"'
        super().__init__(message, {"parameter": parameter, "operation": operation})
        self.parameter = parameter
        self.operation = operation


class RequestFailedError(HttpClientManagerError):
    """Transport failure or non-success response, wrapping the original cause."""

    category = ErrorCategory.REQUEST_ERROR

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ):
        super().__init__(message, {"status_code": status_code})
        self.cause = cause
        self.status_code = status_code
        self.body = body


def _get_default_suggestions(error: HttpClientManagerError) -> List[str]:
    if error.category == ErrorCategory.VALIDATION_ERROR:
        return [
            "Check that all required parameters are provided",
            "Verify parameter types and values are correct",
            "Review the operation parameters with 'hcm operation'",
        ]
    elif error.category == ErrorCategory.NOT_FOUND:
        return [
            "List registered services with 'hcm services'",
            "List the operations of a service with 'hcm operations'",
        ]
    elif error.category == ErrorCategory.REQUEST_ERROR:
        if error.details.get("status_code"):
            return [
                "Inspect the remote response body for details",
                "Verify the parameter values sent to the remote API",
            ]
        return [
            "Check network connectivity to the remote API",
            "Verify base_uri and timeout settings of the service api",
        ]
    return [
        "Check the service api definition files",
        "Verify override settings for the service api",
    ]


def describe_error(error: Exception, suggested_actions: Optional[List[str]] = None) -> Dict[str, Any]:
    """Create a user-friendly error description with actionable guidance.

    Args:
        error: Raised exception
        suggested_actions: Optional list of suggested user actions

    Returns:
        Structured error dictionary
    """
    if isinstance(error, HttpClientManagerError):
        category = error.category
        details = dict(error.details)
        if not suggested_actions:
            suggested_actions = _get_default_suggestions(error)
    else:
        category = ErrorCategory.CONFIGURATION_ERROR
        details = {}
        suggested_actions = suggested_actions or ["Contact support with error details"]

    details["exception_type"] = type(error).__name__
    return {
        "error": str(error),
        "error_category": category.value,
        "suggested_actions": suggested_actions,
        "technical_details": details,
    }
