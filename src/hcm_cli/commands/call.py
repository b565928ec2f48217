"""
Call command implementation.

Implements 'hcm call' for executing an operation with ``-p name=value``
parameters converted using the declared parameter types.
"""

from typing import Dict, List

from http_client_manager.coercion import coerce_parameters
from http_client_manager.container import Container
from http_client_manager.errors import HttpClientManagerError

from ..render import Renderer
from . import report_error


def parse_parameters(params: List[str]) -> Dict[str, str]:
    """Parse -p name=value parameters.

    Repeating a name joins its values with newlines, which array
    parameters split back into items.
    """
    result: Dict[str, str] = {}

    for param in params:
        if "=" not in param:
            raise ValueError(f"Invalid parameter format: {param}. Use -p name=value")

        name, value = param.split("=", 1)
        name = name.strip()
        if name in result:
            result[name] = f"{result[name]}\n{value}"
        else:
            result[name] = value

    return result


def call_command(
    container: Container,
    renderer: Renderer,
    service_api: str,
    operation_name: str,
    params: List[str],
) -> int:
    """Execute an operation and print the decoded response."""
    try:
        raw_values = parse_parameters(params)
    except ValueError as e:
        renderer.print_error(str(e))
        return 1

    try:
        operation = container.factory.get_operation(service_api, operation_name)
        values = coerce_parameters(operation, raw_values)
        result = container.dispatcher.execute(service_api, operation_name, values)

        if renderer.json_output:
            renderer.print_json(result.to_dict())
        else:
            renderer.print_success(f"{operation.http_method} {operation.uri}: {result.status_code}")
            if result.data is not None:
                renderer.print_json(result.data)
        return 0

    except HttpClientManagerError as e:
        return report_error(renderer, e)
