"""Unit tests for the client factory and per-service clients."""

import threading

import httpx
import pytest

from http_client_manager.client import HttpClient
from http_client_manager.errors import ConfigurationError, UnknownOperationError, UnknownServiceError
from http_client_manager.events import HANDLER_STACK, EventDispatcher
from http_client_manager.factory import HttpClientFactory
from http_client_manager.registry import ServiceRegistry, StaticOverrideProvider


class TestHttpClientFactory:
    """Test client construction and caching."""

    def test_same_instance_returned(self, registry, events):
        factory = HttpClientFactory(registry, events)

        first = factory.get("acme_users")
        second = factory.get_client("acme_users")

        assert first is second
        assert isinstance(first, HttpClient)
        assert first.is_initialized

    def test_handler_stack_fires_once_per_service(self, registry, events):
        seen = []
        events.add_listener(HANDLER_STACK, lambda event: seen.append(event.service_api))
        factory = HttpClientFactory(registry, events)

        factory.get("acme_users")
        factory.get("acme_users")
        factory.get("acme_orders")

        assert seen == ["acme_users", "acme_orders"]

    def test_concurrent_construction_fires_once(self, registry, events):
        seen = []
        events.add_listener(HANDLER_STACK, lambda event: seen.append(event.service_api))
        factory = HttpClientFactory(registry, events)
        clients = []

        threads = [
            threading.Thread(target=lambda: clients.append(factory.get("acme_users")))
            for _ in range(8)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert seen == ["acme_users"]
        assert all(client is clients[0] for client in clients)

    def test_unknown_service(self, registry, events):
        factory = HttpClientFactory(registry, events)

        with pytest.raises(UnknownServiceError):
            factory.get("nope")

    def test_unsupported_description_format(self, registry, events):
        factory = HttpClientFactory(registry, events)

        with pytest.raises(ConfigurationError, match="json, yml, yaml, toml"):
            factory.get("acme_legacy")

    def test_get_operations(self, registry, events):
        factory = HttpClientFactory(registry, events)

        operations = factory.get_operations("acme_users")

        assert "CreateUser" in operations
        assert factory.get_operation("acme_users", "GetUser").uri == "users/{userId}"

    def test_unknown_operation(self, registry, events):
        factory = HttpClientFactory(registry, events)

        with pytest.raises(UnknownOperationError) as exc_info:
            factory.get_operation("acme_users", "Nope")

        assert exc_info.value.operation == "Nope"

    def test_close_releases_clients(self, registry, events):
        factory = HttpClientFactory(registry, events)
        client = factory.get("acme_users")

        factory.close()

        assert not client.is_initialized
        assert factory.get("acme_users") is not client


class TestHttpClient:
    """Test client configuration built from the service definition."""

    def test_client_config_from_definition(self, registry):
        client = HttpClient("acme_users", registry, EventDispatcher())

        config = client.get_client_config()

        assert config["base_url"] == "http://acme.test/v1/"
        assert config["headers"]["X-Client"] == "tests"
        assert config["headers"]["User-Agent"].startswith("http-client-manager/")
        assert config["timeout"] == httpx.Timeout(5, connect=2)
        assert "transport" not in config

    def test_handler_stack_changes_applied(self, registry):
        events = EventDispatcher()
        transport = httpx.MockTransport(lambda request: httpx.Response(204))

        def customize(event):
            event.handler_stack.headers["Authorization"] = "Bearer token"
            event.handler_stack.transport = transport
            event.handler_stack.push_request(lambda request: None)

        events.add_listener(HANDLER_STACK, customize)
        client = HttpClient("acme_users", registry, events)

        config = client.get_client_config()

        assert config["headers"]["Authorization"] == "Bearer token"
        assert config["transport"] is transport
        assert len(config["event_hooks"]["request"]) == 1

    def test_basic_auth_from_config(self, make_provider):
        overrides = StaticOverrideProvider({"acme_orders": {"config": {"auth": ["user", "secret"]}}})
        registry = ServiceRegistry([make_provider("acme")], overrides, enable_overriding=True)
        client = HttpClient("acme_orders", registry)

        assert client.get_client_config()["auth"] == ("user", "secret")

    def test_description_loaded_lazily(self, registry):
        client = HttpClient("acme_users", registry)

        assert not client.is_initialized
        assert client.get_command("ListUsers").http_method == "GET"
        assert not client.is_initialized

    def test_context_manager_closes(self, registry, events):
        with HttpClient("acme_users", registry, events) as client:
            client.get_client()
            assert client.is_initialized

        assert not client.is_initialized

    def test_listener_changes_do_not_reach_registry(self, registry, events):
        def inject_auth(event):
            event.config["headers"]["Authorization"] = "Bearer secret"
            event.config["command.params"]["command.request_options"]["timeout"] = 1
            event.config["auth"] = ["user", "secret"]

        events.add_listener(HANDLER_STACK, inject_auth)
        before = registry.get("acme_users").model_dump()

        client = HttpClientFactory(registry, events).get("acme_users")

        assert client.get_client().headers["Authorization"] == "Bearer secret"
        assert registry.get("acme_users").model_dump() == before
        assert registry.get("acme_users").config["headers"] == {"X-Client": "tests"}
        assert registry.discover(refresh=True)["acme_users"].model_dump() == before

    def test_empty_headers_in_config(self, make_provider):
        overrides = StaticOverrideProvider({"acme_orders": {"config": {"headers": None}}})
        registry = ServiceRegistry([make_provider("acme")], overrides, enable_overriding=True)
        client = HttpClient("acme_orders", registry)

        headers = client.get_client_config()["headers"]

        assert list(headers) == ["User-Agent"]

    def test_operations_exposed_as_attributes(self, registry):
        client = HttpClient("acme_users", registry)

        assert callable(client.GetUser)
        assert client.GetUser.__name__ == "GetUser"
        assert not hasattr(client, "GetUserz")
        with pytest.raises(AttributeError, match="GetUserz"):
            client.GetUserz
