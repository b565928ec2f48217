"""Provider lookup and discovery of service api definition files."""

import logging
from dataclasses import dataclass
from importlib import metadata
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from .errors import ConfigurationError
from .loaders import YamlLoader

logger = logging.getLogger(__name__)

DEFINITION_NAME = "http_services_api"
ENTRY_POINT_GROUP = "http_client_manager.providers"


@dataclass(frozen=True)
class Provider:
    """A directory contributing service api definitions."""

    name: str
    path: Path

    @property
    def definition_file(self) -> Optional[Path]:
        """The ``<name>.http_services_api.yml`` file of this provider, if any."""
        for extension in ("yml", "yaml"):
            candidate = self.path / f"{self.name}.{DEFINITION_NAME}.{extension}"
            if candidate.is_file():
                return candidate
        return None


def directory_providers(paths: Iterable[Path]) -> List[Provider]:
    """Providers for explicit directories, named after the directory."""
    providers = []
    for path in paths:
        path = Path(path).expanduser().resolve()
        if not path.is_dir():
            raise ConfigurationError(f"Provider directory {path} does not exist")
        providers.append(Provider(name=path.name, path=path))
    return providers


def entry_point_providers(group: str = ENTRY_POINT_GROUP) -> List[Provider]:
    """Providers registered by installed distributions.

    Each entry point names a package; the package directory is the provider
    directory and the entry point name is the provider name.
    """
    providers = []
    for entry_point in metadata.entry_points(group=group):
        try:
            module = entry_point.load()
        except ImportError as exc:
            raise ConfigurationError(
                f'Unable to load service api provider "{entry_point.name}": {exc}'
            ) from exc

        module_file = getattr(module, "__file__", None)
        if not module_file:
            raise ConfigurationError(
                f'Service api provider "{entry_point.name}" must be a package or module'
            )
        providers.append(Provider(name=entry_point.name, path=Path(module_file).resolve().parent))
    return providers


class YamlDiscovery:
    """Finds and parses the definition file of every provider."""

    def __init__(self, providers: Iterable[Provider]):
        self.providers: Dict[str, Provider] = {}
        for provider in providers:
            existing = self.providers.get(provider.name)
            if existing is not None and existing.path != provider.path:
                raise ConfigurationError(
                    f'Provider "{provider.name}" is defined by both {existing.path} and {provider.path}'
                )
            self.providers[provider.name] = provider

    def get_provider(self, name: str) -> Provider:
        return self.providers[name]

    def find_all(self) -> Dict[str, Dict[str, Any]]:
        """Parse all definition files.

        Returns:
            Mapping of provider name to the service api definitions it declares
        """
        loader = YamlLoader()
        all_definitions: Dict[str, Dict[str, Any]] = {}

        for name, provider in self.providers.items():
            definition_file = provider.definition_file
            if definition_file is None:
                logger.debug(f"Provider {name} does not declare any service api")
                continue

            definitions = loader.load(definition_file)
            for service_id, definition in definitions.items():
                if not isinstance(definition, dict):
                    raise ConfigurationError(
                        f'Service api definition "{service_id}" in {definition_file} must be a mapping'
                    )
            all_definitions[name] = definitions
            logger.debug(f"Provider {name} declares service apis: {', '.join(definitions)}")

        return all_definitions
