"""Wiring of the registry, factory, dispatcher and saved request store."""

from dataclasses import dataclass
from typing import Optional

from .config import Settings
from .dispatcher import CommandDispatcher
from .events import EventDispatcher
from .factory import HttpClientFactory
from .registry import ServiceRegistry
from .saved_requests import SavedRequestStore


@dataclass
class Container:
    """Services shared by the API and the CLI for one process."""

    settings: Settings
    registry: ServiceRegistry
    events: EventDispatcher
    factory: HttpClientFactory
    dispatcher: CommandDispatcher
    store: SavedRequestStore

    def close(self) -> None:
        self.factory.close()


def build_container(
    settings: Optional[Settings] = None,
    events: Optional[EventDispatcher] = None,
    registry: Optional[ServiceRegistry] = None,
    store: Optional[SavedRequestStore] = None,
) -> Container:
    """Build the services for ``settings``; explicit arguments replace the defaults."""
    settings = settings or Settings()
    events = events or EventDispatcher()
    registry = registry or ServiceRegistry.from_settings(settings)
    factory = HttpClientFactory(registry, events)
    dispatcher = CommandDispatcher(factory)

    if store is None:
        store = SavedRequestStore.from_settings(settings, dispatcher)
    else:
        store.dispatcher = dispatcher

    return Container(
        settings=settings,
        registry=registry,
        events=events,
        factory=factory,
        dispatcher=dispatcher,
        store=store,
    )
