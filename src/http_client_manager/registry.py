"""Service api registry built from provider definition files."""

import logging
import threading
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol

from .config import Settings
from .discovery import Provider, YamlDiscovery, directory_providers, entry_point_providers
from .errors import ConfigurationError, UnknownServiceError
from .merge import deep_merge
from .models import ServiceDescription

logger = logging.getLogger(__name__)

OVERRIDABLE_PROPERTIES = ("title", "api_path", "config")


class OverrideProvider(Protocol):
    """Source of per service api overrides keyed by id."""

    def get_overrides(self) -> Mapping[str, Mapping[str, Any]]: ...


class StaticOverrideProvider:
    """Overrides held in memory."""

    def __init__(self, overrides: Optional[Mapping[str, Mapping[str, Any]]] = None):
        self.overrides = dict(overrides or {})

    def get_overrides(self) -> Mapping[str, Mapping[str, Any]]:
        return self.overrides


class SettingsOverrideProvider:
    """Overrides taken from settings and the configured overrides file."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def get_overrides(self) -> Mapping[str, Mapping[str, Any]]:
        return self.settings.get_service_overrides()


class ServiceRegistry:
    """Registry of all service apis declared by the known providers."""

    def __init__(
        self,
        providers: Iterable[Provider],
        override_provider: Optional[OverrideProvider] = None,
        enable_overriding: bool = False,
    ):
        self.discovery = YamlDiscovery(providers)
        self.override_provider = override_provider
        self.enable_overriding = enable_overriding
        self._services: Optional[Dict[str, ServiceDescription]] = None
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> "ServiceRegistry":
        """Create a registry for the providers and overrides configured in settings."""
        providers = directory_providers(settings.provider_paths)
        if settings.use_entry_points:
            providers.extend(entry_point_providers())
        return cls(
            providers,
            override_provider=SettingsOverrideProvider(settings),
            enable_overriding=settings.enable_overriding_service_definitions,
        )

    @staticmethod
    def get_overridable_properties() -> List[str]:
        return list(OVERRIDABLE_PROPERTIES)

    def discover(self, refresh: bool = False) -> Dict[str, ServiceDescription]:
        """Build the registry from all provider definitions.

        The result is cached; later calls return the same content unless
        ``refresh`` is set.

        Raises:
            ConfigurationError: If a definition is incomplete or an id is
                declared twice
        """
        if self._services is not None and not refresh:
            return self._services

        with self._lock:
            if self._services is not None and not refresh:
                return self._services
            self._services = self._build_services()
            logger.info(f"Discovered {len(self._services)} service api(s)")
            return self._services

    def _build_services(self) -> Dict[str, ServiceDescription]:
        services: Dict[str, ServiceDescription] = {}
        overrides = self._get_overrides()

        for provider_name, definitions in self.discovery.find_all().items():
            provider = self.discovery.get_provider(provider_name)

            for service_id, definition in definitions.items():
                if service_id in services:
                    raise ConfigurationError(
                        f'Service api "{service_id}" is declared by both '
                        f'"{services[service_id].provider}" and "{provider_name}"'
                    )

                definition = self._override_definition(service_id, definition, overrides)
                self._validate_definition(service_id, definition)

                config = definition["config"] or {}
                if not isinstance(config, dict):
                    raise ConfigurationError(
                        f'Parameter "config" of "{service_id}" service api definition must be a mapping'
                    )

                services[service_id] = ServiceDescription(
                    id=service_id,
                    title=definition["title"],
                    api_path=definition["api_path"],
                    source=str(provider.path / definition["api_path"]),
                    base_url=config.get("base_uri") or definition.get("base_url"),
                    provider=provider_name,
                    config=config,
                )

        return services

    def _get_overrides(self) -> Mapping[str, Mapping[str, Any]]:
        if not self.enable_overriding or self.override_provider is None:
            return {}
        return self.override_provider.get_overrides()

    def _override_definition(
        self,
        service_id: str,
        definition: Dict[str, Any],
        overrides: Mapping[str, Mapping[str, Any]],
    ) -> Dict[str, Any]:
        """Merge the allow-listed override properties into a definition."""
        override = overrides.get(service_id)
        if not override:
            return definition

        allowed = {key: value for key, value in override.items() if key in OVERRIDABLE_PROPERTIES}
        ignored = sorted(set(override) - set(allowed))
        if ignored:
            logger.warning(
                f"Ignoring non overridable properties for service api {service_id}: {', '.join(ignored)}"
            )
        logger.debug(f"Overriding service api {service_id}: {', '.join(sorted(allowed))}")
        return deep_merge(definition, allowed)

    def _validate_definition(self, service_id: str, definition: Dict[str, Any]) -> None:
        for prop in OVERRIDABLE_PROPERTIES:
            if definition.get(prop) is None:
                raise ConfigurationError(
                    f'Missing required parameter "{prop}" in "{service_id}" service api definition',
                    {"service_api": service_id, "parameter": prop},
                )

    def get(self, service_id: str) -> ServiceDescription:
        """Get a service api by id.

        Raises:
            UnknownServiceError: If the id is not registered
        """
        services = self.discover()
        if service_id not in services:
            raise UnknownServiceError(service_id)
        return services[service_id]

    def list_services(self) -> Dict[str, ServiceDescription]:
        return dict(self.discover())

    def provider_for(self, service_id: str) -> str:
        return self.get(service_id).provider

    def has_services_from(self, provider_name: str) -> bool:
        return any(service.provider == provider_name for service in self.discover().values())
