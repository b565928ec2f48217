"""Service configuration management for HTTP Client Manager."""

import json
import logging
import os
import tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class Settings(BaseSettings):
    """HTTP Client Manager configuration."""

    model_config = SettingsConfigDict(env_prefix="HCM_", env_file=".env", case_sensitive=False)

    # Discovery
    provider_paths: List[Path] = Field(
        default_factory=list, description="Provider directories, each named after its provider"
    )
    use_entry_points: bool = Field(
        default=True, description="Discover providers registered as installed entry points"
    )

    # Overrides
    enable_overriding_service_definitions: bool = Field(
        default=False, description="Apply environment overrides to service api definitions"
    )
    service_overrides: Dict[str, Dict[str, Any]] = Field(
        default_factory=dict, description="Per service api overrides keyed by id"
    )
    overrides_file: Optional[Path] = Field(
        default=None, description="JSON or TOML file holding per service api overrides"
    )

    # Storage
    data_root: Path = Field(
        default_factory=lambda: Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local/share"))
        / "http-client-manager"
    )

    # Service
    log_level: str = Field(default="INFO", description="Logging level")
    host: str = Field(default="127.0.0.1", description="API host address")
    port: int = Field(default=8080, description="API port")
    enable_example_routes: bool = Field(default=False, description="Mount the example routes")

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Normalize log level to uppercase for logging compatibility."""
        return v.upper()

    @property
    def requests_db_path(self) -> Path:
        return self.data_root / "requests.db"

    def ensure_directories(self) -> None:
        """Create the data directory."""
        self.data_root.mkdir(parents=True, exist_ok=True)

    def get_service_overrides(self) -> Dict[str, Dict[str, Any]]:
        """Overrides from the overrides file, updated with those set inline."""
        overrides: Dict[str, Dict[str, Any]] = {}
        if self.overrides_file is not None:
            overrides.update(load_overrides_file(self.overrides_file))
        overrides.update(self.service_overrides)
        return overrides


def load_overrides_file(path: Path) -> Dict[str, Any]:
    """Load service api overrides from a JSON or TOML file.

    Args:
        path: Path to the overrides file.

    Returns:
        Parsed mapping of service api id to partial definition. A missing
        file yields an empty mapping.

    Raises:
        ConfigurationError: If the file contents cannot be parsed.
    """
    path = Path(path)
    if not path.exists():
        return {}

    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Error reading overrides file {path}: {exc}") from exc

    if path.suffix.lower() == ".toml":
        return _parse_toml_content(content, path)

    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        if path.suffix.lower() == ".json":
            raise ConfigurationError(f"Invalid JSON in overrides file {path}: {exc}") from exc
        data = _parse_toml_content(content, path)

    if not isinstance(data, dict):
        raise ConfigurationError(f"Overrides file {path} must contain a mapping")
    return data


def _parse_toml_content(content: str, path: Path) -> Dict[str, Any]:
    try:
        return tomllib.loads(content)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f"Invalid TOML in overrides file {path}: {exc}") from exc


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for the CLI and API entry points."""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
