"""Service description file loaders.

A loader is selected by the file extension of the description source. Each
loader turns the file contents into a raw mapping; ``includes`` listed in a
description are loaded relative to it and merged underneath it.
"""

import json
import logging
import tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import ValidationError

from .errors import ConfigurationError
from .merge import merge_all
from .models import ApiDescription

logger = logging.getLogger(__name__)


class FileLoader:
    """Base loader for a single description file format."""

    extensions: tuple = ()

    def parse(self, content: str, path: Path) -> Any:
        raise NotImplementedError

    def load(self, path: Path) -> Dict[str, Any]:
        """Read and parse a description file into a mapping."""
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigurationError(f"Unable to read service description {path}: {exc}") from exc

        data = self.parse(content, path)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"Service description {path} must contain a mapping")
        return data


class JsonLoader(FileLoader):
    extensions = ("json",)

    def parse(self, content: str, path: Path) -> Any:
        try:
            return json.loads(content)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"Invalid JSON in service description {path}: {exc}") from exc


class YamlLoader(FileLoader):
    extensions = ("yml", "yaml")

    def parse(self, content: str, path: Path) -> Any:
        try:
            return yaml.safe_load(content)
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Invalid YAML in service description {path}: {exc}") from exc


class TomlLoader(FileLoader):
    extensions = ("toml",)

    def parse(self, content: str, path: Path) -> Any:
        try:
            return tomllib.loads(content)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigurationError(f"Invalid TOML in service description {path}: {exc}") from exc


LOADERS: Dict[str, FileLoader] = {
    extension: loader
    for loader in (JsonLoader(), YamlLoader(), TomlLoader())
    for extension in loader.extensions
}


def allowed_extensions() -> List[str]:
    return list(LOADERS)


def get_loader(path: Path) -> FileLoader:
    """Select the loader for a description file by its extension.

    Raises:
        ConfigurationError: If the extension is not supported.
    """
    extension = path.suffix.lstrip(".").lower()
    loader = LOADERS.get(extension)
    if loader is None:
        raise ConfigurationError(
            f'Invalid HTTP Services Api source provided: "{path.name}". '
            f"File extension must be one of {', '.join(allowed_extensions())}."
        )
    return loader


def locate(source: str) -> Path:
    """Resolve a description source to an existing file."""
    path = Path(source)
    if not path.is_file():
        raise ConfigurationError(f'The service description file "{source}" does not exist.')
    return path


def load_description_data(path: Path, _seen: Optional[List[Path]] = None) -> Dict[str, Any]:
    """Load a description file and its includes into one raw mapping."""
    seen = list(_seen or [])
    resolved = path.resolve()
    if resolved in seen:
        raise ConfigurationError(f"Circular include of service description {path}")
    seen.append(resolved)

    data = get_loader(path).load(path)
    includes = data.pop("includes", None) or []
    if isinstance(includes, str):
        includes = [includes]

    documents = []
    for include in includes:
        include_path = locate(str(path.parent / include))
        logger.debug(f"Including {include_path} in service description {path}")
        documents.append(load_description_data(include_path, seen))

    return merge_all(documents + [data])


def load_description(source: str, base_url: Optional[str] = None) -> ApiDescription:
    """Load and validate a service description.

    Args:
        source: Path of the description file
        base_url: Base URL replacing the one declared in the file

    Returns:
        Parsed service description

    Raises:
        ConfigurationError: If the file is missing, unsupported or invalid
    """
    get_loader(Path(source))
    path = locate(source)
    data = load_description_data(path)
    if base_url:
        data["baseUrl"] = base_url

    try:
        return ApiDescription.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid service description {path}: {exc}") from exc
