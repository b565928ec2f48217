import sys
from pathlib import Path
from typing import Callable, Dict, List, Tuple

import httpx
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import http_client_manager_example
from http_client_manager.config import Settings
from http_client_manager.container import build_container
from http_client_manager.discovery import Provider
from http_client_manager.events import HANDLER_STACK, EventDispatcher
from http_client_manager.registry import ServiceRegistry
from http_client_manager.saved_requests import SavedRequestStore

PROVIDERS_DIR = Path(__file__).parent / "fixtures" / "providers"

Route = Callable[[httpx.Request], httpx.Response]


class RecordingHandler:
    """MockTransport handler recording requests and answering from routes.

    Unrouted requests get a 200 JSON echo of method, path and query.
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.routes: Dict[Tuple[str, str], Route] = {}

    def route(self, method: str, path: str, responder: Route) -> None:
        self.routes[(method, path)] = responder

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        responder = self.routes.get((request.method, request.url.path))
        if responder is not None:
            return responder(request)
        return httpx.Response(
            200,
            json={
                "method": request.method,
                "path": request.url.path,
                "query": dict(request.url.params),
            },
        )

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


def provider(name: str) -> Provider:
    return Provider(name=name, path=PROVIDERS_DIR / name)


@pytest.fixture
def providers_dir() -> Path:
    return PROVIDERS_DIR


@pytest.fixture
def acme_provider() -> Provider:
    return provider("acme")


@pytest.fixture
def example_provider() -> Provider:
    return Provider(
        name="http_client_manager_example",
        path=Path(http_client_manager_example.__file__).parent,
    )


@pytest.fixture
def registry(acme_provider, example_provider) -> ServiceRegistry:
    return ServiceRegistry([acme_provider, example_provider])


@pytest.fixture
def handler() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture
def events(handler) -> EventDispatcher:
    """Event dispatcher routing every client through the recording handler."""
    dispatcher = EventDispatcher()

    def use_mock_transport(event):
        event.handler_stack.transport = httpx.MockTransport(handler)

    dispatcher.add_listener(HANDLER_STACK, use_mock_transport)
    return dispatcher


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(data_root=tmp_path / "data", use_entry_points=False)


@pytest.fixture
def container(settings, events, registry):
    container = build_container(
        settings,
        events=events,
        registry=registry,
        store=SavedRequestStore("sqlite:///:memory:"),
    )
    yield container
    container.close()


@pytest.fixture
def make_provider():
    """Factory for fixture providers under tests/fixtures/providers."""
    return provider


@pytest.fixture
def api_client(container):
    """TestClient for an app served from the test container."""
    from fastapi.testclient import TestClient

    from http_client_manager.api.server import create_app

    with TestClient(create_app(container=container)) as client:
        yield client
