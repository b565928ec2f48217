"""Factory creating and caching one HTTP client per service api."""

import logging
import threading
from typing import Dict, Optional

from .client import HttpClient
from .events import EventDispatcher
from .models import Operation
from .registry import ServiceRegistry

logger = logging.getLogger(__name__)


class HttpClientFactory:
    """Builds :class:`HttpClient` instances on demand and keeps them for reuse."""

    def __init__(self, registry: ServiceRegistry, events: Optional[EventDispatcher] = None):
        self.registry = registry
        self.events = events or EventDispatcher()
        self._clients: Dict[str, HttpClient] = {}
        self._lock = threading.Lock()

    def get(self, service_api: str) -> HttpClient:
        """Get the client of a service api, building it on first request.

        The handler stack event fires while the client is built, so it
        fires once per service api for the lifetime of the factory.

        Raises:
            UnknownServiceError: If the service api is not registered
            ConfigurationError: If its description cannot be loaded
        """
        client = self._clients.get(service_api)
        if client is not None:
            return client

        with self._lock:
            client = self._clients.get(service_api)
            if client is None:
                client = HttpClient(service_api, self.registry, self.events)
                client.get_client()
                self._clients[service_api] = client
                logger.debug(f"Cached HTTP client for {service_api}")
        return client

    get_client = get

    def get_operations(self, service_api: str) -> Dict[str, Operation]:
        return self.get(service_api).get_commands()

    def get_operation(self, service_api: str, operation_name: str) -> Operation:
        """Get an operation of a service api.

        Raises:
            UnknownOperationError: If the operation is not declared
        """
        return self.get(service_api).get_command(operation_name)

    def close(self) -> None:
        """Close every cached client."""
        with self._lock:
            for client in self._clients.values():
                client.close()
            self._clients.clear()
