"""
Saved request commands.

Implements 'hcm requests list|show|save|run|delete'.
"""

from typing import List, Optional

from pydantic import ValidationError

from http_client_manager.container import Container
from http_client_manager.errors import HttpClientManagerError, NotFoundError
from http_client_manager.saved_requests import SavedRequest, build_parameters

from ..render import Renderer
from . import report_error
from .call import parse_parameters


def list_requests_command(
    container: Container, renderer: Renderer, service_api: Optional[str] = None
) -> int:
    """List saved requests."""
    try:
        saved = container.store.load_multiple(service_api)

        if renderer.json_output:
            renderer.print_json([request.model_dump() for request in saved])
            return 0

        if not saved:
            renderer.print("No saved requests found")
            return 0

        rows = [
            {
                "ID": request.id,
                "Label": request.label,
                "Service API": request.service_api,
                "Operation": request.command_name,
            }
            for request in saved
        ]
        renderer.print_table(rows, title="Saved Requests")
        return 0

    except HttpClientManagerError as e:
        return report_error(renderer, e)


def show_request_command(container: Container, renderer: Renderer, request_id: str) -> int:
    """Show a saved request."""
    request = container.store.load(request_id)
    if request is None:
        return report_error(renderer, NotFoundError(f'Saved request "{request_id}" does not exist'))

    renderer.print_json(request.model_dump())
    return 0


def save_request_command(
    container: Container,
    renderer: Renderer,
    request_id: str,
    label: str,
    service_api: str,
    operation_name: str,
    params: List[str],
) -> int:
    """Create or update a saved request."""
    try:
        raw_values = parse_parameters(params)
    except ValueError as e:
        renderer.print_error(str(e))
        return 1

    try:
        operation = container.factory.get_operation(service_api, operation_name)
        request = SavedRequest(
            id=request_id,
            label=label,
            service_api=service_api,
            command_name=operation_name,
            parameters=build_parameters(operation, raw_values),
        )
        status = container.store.save(request)

        if renderer.json_output:
            renderer.print_json({**request.model_dump(), "status": status.value})
        else:
            renderer.print_success(f"Saved request {request_id} ({status.value})")
        return 0

    except ValidationError as e:
        renderer.print_error(f"Invalid saved request: {e}")
        return 1
    except HttpClientManagerError as e:
        return report_error(renderer, e)


def run_request_command(container: Container, renderer: Renderer, request_id: str) -> int:
    """Execute a saved request."""
    try:
        result = container.store.execute(request_id)

        if renderer.json_output:
            renderer.print_json(result.to_dict())
        else:
            renderer.print_success(f"Request {request_id}: {result.status_code}")
            if result.data is not None:
                renderer.print_json(result.data)
        return 0

    except HttpClientManagerError as e:
        return report_error(renderer, e)


def delete_request_command(container: Container, renderer: Renderer, request_id: str) -> int:
    """Delete a saved request."""
    if not container.store.delete(request_id):
        return report_error(renderer, NotFoundError(f'Saved request "{request_id}" does not exist'))

    renderer.print_success(f"Deleted saved request {request_id}")
    return 0
