"""Events dispatched while HTTP clients are being built."""

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx

logger = logging.getLogger(__name__)

HANDLER_STACK = "http_client_manager.handler_stack"

Listener = Callable[[Any], None]


class HandlerStack:
    """Mutable outbound pipeline of a service client.

    Listeners of the ``HANDLER_STACK`` event may add headers, set
    authentication, push request/response hooks or replace the transport
    before the ``httpx.Client`` is created.
    """

    def __init__(self, transport: Optional[httpx.BaseTransport] = None):
        self.transport = transport
        self.headers: Dict[str, str] = {}
        self.auth: Optional[httpx.Auth] = None
        self._request_hooks: List[Callable[[httpx.Request], None]] = []
        self._response_hooks: List[Callable[[httpx.Response], None]] = []

    def push_request(self, hook: Callable[[httpx.Request], None]) -> None:
        self._request_hooks.append(hook)

    def push_response(self, hook: Callable[[httpx.Response], None]) -> None:
        self._response_hooks.append(hook)

    def event_hooks(self) -> Dict[str, List[Callable]]:
        return {"request": list(self._request_hooks), "response": list(self._response_hooks)}

    def __len__(self) -> int:
        return len(self._request_hooks) + len(self._response_hooks)


@dataclass
class HandlerStackEvent:
    """Event carrying the handler stack of the client being built."""

    handler_stack: HandlerStack
    service_api: str
    config: Dict[str, Any] = field(default_factory=dict)


class EventDispatcher:
    """Synchronous listener registry keyed by event name."""

    def __init__(self):
        self._listeners: Dict[str, List[Tuple[int, Listener]]] = {}
        self._lock = threading.Lock()

    def add_listener(self, event_name: str, listener: Listener, priority: int = 0) -> None:
        """Register a listener; higher priorities run first."""
        with self._lock:
            listeners = self._listeners.setdefault(event_name, [])
            listeners.append((priority, listener))
            listeners.sort(key=lambda item: item[0], reverse=True)

    def remove_listener(self, event_name: str, listener: Listener) -> None:
        with self._lock:
            self._listeners[event_name] = [
                item for item in self._listeners.get(event_name, []) if item[1] is not listener
            ]

    def get_listeners(self, event_name: str) -> List[Listener]:
        with self._lock:
            return [listener for _, listener in self._listeners.get(event_name, [])]

    def dispatch(self, event_name: str, event: Any) -> Any:
        """Call every listener of ``event_name`` with ``event`` and return it."""
        listeners = self.get_listeners(event_name)
        logger.debug(f"Dispatching {event_name} to {len(listeners)} listener(s)")
        for listener in listeners:
            listener(event)
        return event
