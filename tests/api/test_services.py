"""Tests for service api and operation endpoints."""

import httpx
from fastapi.testclient import TestClient

from http_client_manager.api.server import create_app
from http_client_manager.container import build_container
from http_client_manager.models import REDACTED
from http_client_manager.registry import ServiceRegistry, StaticOverrideProvider
from http_client_manager.saved_requests import SavedRequestStore


class TestServiceEndpoints:
    """Test service api listing and lookup."""

    def test_list_services(self, api_client):
        response = api_client.get("/v1/services")

        assert response.status_code == 200
        services = {service["id"]: service for service in response.json()}
        assert set(services) == {"acme_users", "acme_orders", "acme_legacy", "jsonplaceholder"}
        assert services["jsonplaceholder"]["provider"] == "http_client_manager_example"
        assert services["acme_users"]["base_url"] == "http://acme.test/v1/"

    def test_get_service(self, api_client):
        response = api_client.get("/v1/services/acme_users")

        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "Acme Users"
        assert data["config"]["timeout"] == 5
        assert data["config"]["headers"] == {"X-Client": REDACTED}

    def test_service_credentials_not_exposed(self, settings, events, make_provider):
        overrides = StaticOverrideProvider({"acme_orders": {"config": {"auth": ["user", "secret"]}}})
        registry = ServiceRegistry([make_provider("acme")], overrides, enable_overriding=True)
        container = build_container(
            settings, events=events, registry=registry, store=SavedRequestStore("sqlite:///:memory:")
        )

        with TestClient(create_app(container=container)) as client:
            response = client.get("/v1/services/acme_orders")

        assert response.status_code == 200
        assert response.json()["config"] == {"http_errors": False, "auth": REDACTED}
        assert "secret" not in response.text
        assert registry.get("acme_orders").config["auth"] == ["user", "secret"]

    def test_unknown_service(self, api_client):
        response = api_client.get("/v1/services/nope")

        assert response.status_code == 404
        data = response.json()
        assert data["error_category"] == "not_found"
        assert data["error_code"] == "not_found.UnknownServiceError"
        assert data["user_message"] == 'Undefined Http Service Api id "nope"'
        assert data["suggested_actions"]


class TestOperationEndpoints:
    """Test operation listing and execution."""

    def test_list_operations(self, api_client):
        response = api_client.get("/v1/services/jsonplaceholder/operations")

        assert response.status_code == 200
        operations = response.json()
        assert {"FindPosts", "FindPost", "CreatePost"} <= set(operations)

    def test_get_operation(self, api_client):
        response = api_client.get("/v1/services/jsonplaceholder/operations/FindPost")

        assert response.status_code == 200
        data = response.json()
        assert data["httpMethod"] == "GET"
        assert data["parameters"]["postId"]["required"] is True

    def test_unknown_operation(self, api_client):
        response = api_client.get("/v1/services/jsonplaceholder/operations/Nope")

        assert response.status_code == 404
        assert response.json()["error_code"] == "not_found.UnknownOperationError"

    def test_broken_description_is_server_error(self, api_client):
        response = api_client.get("/v1/services/acme_legacy/operations")

        assert response.status_code == 500
        assert response.json()["error_category"] == "configuration_error"

    def test_execute_operation(self, api_client, handler):
        handler.route(
            "GET", "/posts/1", lambda request: httpx.Response(200, json={"id": 1, "title": "First"})
        )

        response = api_client.post(
            "/v1/services/jsonplaceholder/operations/FindPost", json={"params": {"postId": 1}}
        )

        assert response.status_code == 200
        assert response.json() == {
            "service_api": "jsonplaceholder",
            "operation": "FindPost",
            "status_code": 200,
            "data": {"id": 1, "title": "First"},
        }

    def test_execute_missing_parameter(self, api_client, handler):
        response = api_client.post(
            "/v1/services/jsonplaceholder/operations/CreatePost", json={"params": {}}
        )

        assert response.status_code == 422
        data = response.json()
        assert data["error_category"] == "validation_error"
        assert data["technical_details"]["parameter"] == "title"
        assert handler.requests == []

    def test_remote_failure_is_bad_gateway(self, api_client, handler):
        handler.route("GET", "/v1/broken", lambda request: httpx.Response(503))

        response = api_client.post("/v1/services/acme_users/operations/Broken", json={})

        assert response.status_code == 502
        data = response.json()
        assert data["error_category"] == "request_error"
        assert data["technical_details"]["status_code"] == 503
