"""HTTP client bound to one service api."""

import copy
import logging
import threading
from typing import Any, Callable, Dict, Mapping, Optional

import httpx

from . import __version__
from .dispatcher import CommandResult, execute_command
from .errors import UnknownOperationError
from .events import HANDLER_STACK, EventDispatcher, HandlerStack, HandlerStackEvent
from .loaders import load_description
from .models import ApiDescription, Operation, ServiceDescription
from .registry import ServiceRegistry

logger = logging.getLogger(__name__)

USER_AGENT = f"http-client-manager/{__version__}"


def _build_timeout(config: Mapping[str, Any]) -> Optional[httpx.Timeout]:
    timeout = config.get("timeout")
    connect_timeout = config.get("connect_timeout")
    if timeout is None and connect_timeout is None:
        return None
    if connect_timeout is None:
        return httpx.Timeout(timeout)
    return httpx.Timeout(timeout, connect=connect_timeout)


def _build_auth(config: Mapping[str, Any]) -> Optional[Any]:
    auth = config.get("auth")
    if isinstance(auth, (list, tuple)) and len(auth) >= 2:
        return (str(auth[0]), str(auth[1]))
    return None


class HttpClient:
    """Client executing the operations of one service api.

    The description file and the underlying ``httpx.Client`` are loaded
    lazily on first use. Operations can be called through :meth:`call` or
    as methods named after the operation::

        client.call("FindPost", {"postId": 1})
        client.FindPost({"postId": 1})
    """

    def __init__(
        self,
        service_api: str,
        registry: ServiceRegistry,
        events: Optional[EventDispatcher] = None,
    ):
        self.service_api = service_api
        self.registry = registry
        self.events = events or EventDispatcher()
        self.api: ServiceDescription = registry.get(service_api)
        self._client: Optional[httpx.Client] = None
        self._description: Optional[ApiDescription] = None
        self._lock = threading.RLock()

    def get_description(self) -> ApiDescription:
        """The parsed service description, base url taken from the service api."""
        if self._description is None:
            with self._lock:
                if self._description is None:
                    self._description = load_description(self.api.source, self.api.base_url)
        return self._description

    def get_client_config(self) -> Dict[str, Any]:
        """Build the ``httpx.Client`` arguments for this service api.

        Dispatches the ``HANDLER_STACK`` event so listeners can alter the
        outbound pipeline before the client is created.
        """
        config = copy.deepcopy(self.api.config)
        handler_stack = HandlerStack()
        self.events.dispatch(
            HANDLER_STACK, HandlerStackEvent(handler_stack, self.service_api, config)
        )

        headers = {"User-Agent": USER_AGENT, **(config.get("headers") or {}), **handler_stack.headers}
        client_config: Dict[str, Any] = {
            "base_url": self.api.base_url or self.get_description().base_url,
            "headers": headers,
            "verify": config.get("verify", True),
            "follow_redirects": config.get("follow_redirects", True),
            "event_hooks": handler_stack.event_hooks(),
        }

        timeout = _build_timeout(config)
        if timeout is not None:
            client_config["timeout"] = timeout

        auth = handler_stack.auth or _build_auth(config)
        if auth is not None:
            client_config["auth"] = auth

        if handler_stack.transport is not None:
            client_config["transport"] = handler_stack.transport

        return client_config

    def get_client(self) -> httpx.Client:
        """The configured ``httpx.Client``, created on first use."""
        if self._client is None:
            with self._lock:
                if self._client is None:
                    self._setup_client()
        return self._client

    def _setup_client(self) -> None:
        description = self.get_description()
        self._client = httpx.Client(**self.get_client_config())
        logger.info(
            f"Created HTTP client for {self.service_api} "
            f"({len(description.operations)} operation(s), base url {self._client.base_url})"
        )

    @property
    def is_initialized(self) -> bool:
        return self._client is not None

    def get_commands(self) -> Dict[str, Operation]:
        """All operations of the service description keyed by name."""
        return dict(self.get_description().operations)

    def get_command(self, command_name: str) -> Operation:
        """Get an operation by name.

        Raises:
            UnknownOperationError: If the operation is not declared
        """
        operation = self.get_description().get_operation(command_name)
        if operation is None:
            raise UnknownOperationError(self.service_api, command_name)
        return operation

    def call(self, command_name: str, params: Optional[Mapping[str, Any]] = None) -> CommandResult:
        """Execute an operation with the given parameters."""
        operation = self.get_command(command_name)
        client = self.get_client()
        config = self.api.config
        request_options = (config.get("command.params") or {}).get("command.request_options") or {}

        return execute_command(
            client,
            operation,
            params or {},
            http_errors=config.get("http_errors", True),
            request_options=request_options,
        )

    def __getattr__(self, name: str) -> Callable[..., CommandResult]:
        if name.startswith("_") or not self.get_description().has_operation(name):
            raise AttributeError(
                f"{type(self).__name__!r} for {self.service_api!r} has no attribute or operation {name!r}"
            )

        def command(params: Optional[Mapping[str, Any]] = None) -> CommandResult:
            return self.call(name, params or {})

        command.__name__ = name
        return command

    def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
