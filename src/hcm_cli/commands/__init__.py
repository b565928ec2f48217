"""Command implementations for HCM CLI."""

from http_client_manager.errors import ErrorCategory, HttpClientManagerError, describe_error

from ..render import Renderer

EXIT_CODES = {
    ErrorCategory.VALIDATION_ERROR: 1,
    ErrorCategory.NOT_FOUND: 1,
    ErrorCategory.CONFIGURATION_ERROR: 2,
    ErrorCategory.REQUEST_ERROR: 2,
}


def report_error(renderer: Renderer, error: HttpClientManagerError) -> int:
    """Print an error with its suggested actions and return the exit code."""
    description = describe_error(error)
    if renderer.json_output:
        renderer.print_json(description)
    else:
        renderer.print_error(description["error"])
        for action in description["suggested_actions"]:
            renderer.print(f"  - {action}")
    return EXIT_CODES.get(error.category, 2)
