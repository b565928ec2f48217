"""
Main CLI application for HTTP Client Manager.

Provides the main Typer application with global flags and
command routing for all HCM CLI functionality.
"""

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from typing_extensions import Annotated

from http_client_manager.config import Settings, configure_logging
from http_client_manager.container import Container, build_container
from http_client_manager.errors import HttpClientManagerError

from .commands import report_error
from .commands.call import call_command
from .commands.requests import (
    delete_request_command,
    list_requests_command,
    run_request_command,
    save_request_command,
    show_request_command,
)
from .commands.services import operation_command, operations_command, services_command
from .render import Renderer

app = typer.Typer(
    name="hcm",
    help="HCM CLI - Command-line interface for HTTP Client Manager",
    no_args_is_help=True,
    add_completion=False,
)

_settings: Optional[Settings] = None
_container: Optional[Container] = None
_renderer: Optional[Renderer] = None


def get_settings() -> Settings:
    """Get global settings instance."""
    if _settings is None:
        raise RuntimeError("Settings not initialized")
    return _settings


def get_container() -> Container:
    """Get global container, built on first use."""
    global _container
    if _container is None:
        _container = build_container(get_settings())
    return _container


def get_renderer() -> Renderer:
    """Get global renderer instance."""
    if _renderer is None:
        raise RuntimeError("Renderer not initialized")
    return _renderer


@app.callback()
def main(
    provider_path: Annotated[
        Optional[List[Path]],
        typer.Option("--provider-path", "-P", help="Provider directory (repeatable)"),
    ] = None,
    no_entry_points: Annotated[
        bool, typer.Option("--no-entry-points", help="Skip providers of installed packages")
    ] = False,
    data_root: Annotated[
        Optional[Path], typer.Option("--data-root", help="Directory of the saved request database")
    ] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Machine-output mode")] = False,
    quiet: Annotated[
        bool, typer.Option("--quiet", "-q", help="Suppress non-essential output")
    ] = False,
    log_level: Annotated[Optional[str], typer.Option("--log-level", help="Logging level")] = None,
):
    """
    HCM CLI - Command-line interface for HTTP Client Manager.

    Examples:
      hcm services

      hcm operations jsonplaceholder

      hcm call jsonplaceholder FindPost -p postId=1

      hcm requests save create_post --label "Create post" \\
        --service jsonplaceholder --operation CreatePost -p title=Hello
    """
    global _settings, _container, _renderer

    overrides: Dict[str, Any] = {}
    if provider_path:
        overrides["provider_paths"] = provider_path
    if no_entry_points:
        overrides["use_entry_points"] = False
    if data_root is not None:
        overrides["data_root"] = data_root
    if log_level is not None:
        overrides["log_level"] = log_level

    _settings = Settings(**overrides)
    _container = None
    _renderer = Renderer(json_output=json_output, quiet=quiet)

    configure_logging("ERROR" if quiet else _settings.log_level)


def _run(command, *args: Any) -> None:
    """Run a command with the global container and exit with its code."""
    try:
        container = get_container()
    except HttpClientManagerError as e:
        raise typer.Exit(report_error(get_renderer(), e))
    raise typer.Exit(command(container, get_renderer(), *args))


@app.command()
def services():
    """List registered service apis."""
    _run(services_command)


@app.command()
def operations(
    service_api: Annotated[str, typer.Argument(help="Service api id (see 'hcm services')")],
):
    """List the operations of a service api."""
    _run(operations_command, service_api)


@app.command()
def operation(
    service_api: Annotated[str, typer.Argument(help="Service api id (see 'hcm services')")],
    operation_name: Annotated[str, typer.Argument(help="Operation name (see 'hcm operations')")],
):
    """Show an operation and its parameters."""
    _run(operation_command, service_api, operation_name)


@app.command()
def call(
    service_api: Annotated[str, typer.Argument(help="Service api id (see 'hcm services')")],
    operation_name: Annotated[str, typer.Argument(help="Operation name (see 'hcm operations')")],
    params: Annotated[
        Optional[List[str]],
        typer.Option(
            "-p",
            help="Operation parameters in name=value format (repeatable). "
            "Repeat a name to pass several array items.",
        ),
    ] = None,
):
    """
    Call an operation of a service api.

    Examples:
      hcm call jsonplaceholder FindPosts -p userId=1

      hcm call jsonplaceholder CreatePost -p title=Hello -p tags=a -p tags=b
    """
    _run(call_command, service_api, operation_name, params or [])


requests_app = typer.Typer(name="requests", help="Saved request management commands")

app.add_typer(requests_app)


@requests_app.command("list")
def requests_list(
    service_api: Annotated[
        Optional[str], typer.Option("--service", help="Only requests of this service api")
    ] = None,
):
    """List saved requests."""
    _run(list_requests_command, service_api)


@requests_app.command("show")
def requests_show(
    request_id: Annotated[str, typer.Argument(help="Saved request id")],
):
    """Show a saved request."""
    _run(show_request_command, request_id)


@requests_app.command("save")
def requests_save(
    request_id: Annotated[str, typer.Argument(help="Saved request id (lowercase letters, digits, _)")],
    label: Annotated[str, typer.Option("--label", help="Human readable label")],
    service_api: Annotated[str, typer.Option("--service", help="Service api id")],
    operation_name: Annotated[str, typer.Option("--operation", help="Operation name")],
    params: Annotated[
        Optional[List[str]],
        typer.Option("-p", help="Operation parameters in name=value format (repeatable)"),
    ] = None,
):
    """Create or update a saved request."""
    _run(save_request_command, request_id, label, service_api, operation_name, params or [])


@requests_app.command("run")
def requests_run(
    request_id: Annotated[str, typer.Argument(help="Saved request id")],
):
    """Execute a saved request."""
    _run(run_request_command, request_id)


@requests_app.command("delete")
def requests_delete(
    request_id: Annotated[str, typer.Argument(help="Saved request id")],
):
    """Delete a saved request."""
    _run(delete_request_command, request_id)


@app.command()
def serve(
    host: Annotated[Optional[str], typer.Option("--host", help="Bind address")] = None,
    port: Annotated[Optional[int], typer.Option("--port", help="Bind port")] = None,
):
    """Serve the HTTP Client Manager API."""
    import uvicorn

    from http_client_manager.api.server import create_app

    settings = get_settings()
    try:
        application = create_app(container=get_container())
    except HttpClientManagerError as e:
        raise typer.Exit(report_error(get_renderer(), e))

    uvicorn.run(
        application,
        host=host or settings.host,
        port=port or settings.port,
        log_level=settings.log_level.lower(),
    )


def cli_main():
    """Entry point for console script."""
    try:
        app()
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        sys.exit(130)
    finally:
        if _container is not None:
            _container.close()


if __name__ == "__main__":
    cli_main()
