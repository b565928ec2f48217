"""
Service api and operation listing commands.

Implements 'hcm services', 'hcm operations' and 'hcm operation'.
"""

from http_client_manager.container import Container
from http_client_manager.errors import HttpClientManagerError

from ..render import Renderer
from . import report_error


def services_command(container: Container, renderer: Renderer) -> int:
    """List registered service apis."""
    try:
        services = container.registry.discover()

        if renderer.json_output:
            renderer.print_json([service.redacted().model_dump() for service in services.values()])
            return 0

        if not services:
            renderer.print("No service apis registered")
            return 0

        rows = [
            {
                "ID": service.id,
                "Title": service.title,
                "Provider": service.provider,
                "Base URL": service.base_url,
            }
            for service in services.values()
        ]
        renderer.print_table(rows, title="Service APIs")
        return 0

    except HttpClientManagerError as e:
        return report_error(renderer, e)


def operations_command(container: Container, renderer: Renderer, service_api: str) -> int:
    """List the operations of a service api."""
    try:
        operations = container.factory.get_operations(service_api)

        if renderer.json_output:
            renderer.print_json(
                {name: operation.model_dump(by_alias=True) for name, operation in operations.items()}
            )
            return 0

        rows = [
            {
                "Name": name,
                "Method": operation.http_method,
                "URI": operation.uri,
                "Summary": operation.summary,
            }
            for name, operation in operations.items()
        ]
        renderer.print_table(rows, title=f"{service_api} operations")
        return 0

    except HttpClientManagerError as e:
        return report_error(renderer, e)


def operation_command(
    container: Container, renderer: Renderer, service_api: str, operation_name: str
) -> int:
    """Show an operation and its parameters."""
    try:
        operation = container.factory.get_operation(service_api, operation_name)

        if renderer.json_output:
            renderer.print_json(operation.model_dump(by_alias=True))
            return 0

        renderer.print(f"[bold]{operation.name}[/bold]: {operation.http_method} {operation.uri}")
        if operation.summary:
            renderer.print(operation.summary)

        rows = [
            {
                "Name": param.name,
                "Type": param.type or "",
                "Required": "yes" if param.required else "no",
                "Default": param.default,
                "Location": param.location.value if param.location else "",
                "Description": param.description,
            }
            for param in operation.get_params()
        ]
        if rows:
            renderer.print_table(rows, title="Parameters")
        else:
            renderer.print("No parameters")
        return 0

    except HttpClientManagerError as e:
        return report_error(renderer, e)
