"""Unit tests for settings and override files."""

import json
from unittest.mock import patch

import pytest

from http_client_manager.config import Settings, load_overrides_file
from http_client_manager.errors import ConfigurationError


class TestSettings:
    """Test settings defaults and environment handling."""

    def test_defaults(self, tmp_path):
        settings = Settings(data_root=tmp_path)

        assert settings.use_entry_points is True
        assert settings.enable_overriding_service_definitions is False
        assert settings.requests_db_path == tmp_path / "requests.db"
        assert settings.port == 8080

    @patch.dict(
        "os.environ",
        {
            "HCM_LOG_LEVEL": "debug",
            "HCM_ENABLE_OVERRIDING_SERVICE_DEFINITIONS": "true",
            "HCM_SERVICE_OVERRIDES": '{"acme_users": {"title": "Env"}}',
        },
    )
    def test_from_environment(self):
        settings = Settings()

        assert settings.log_level == "DEBUG"
        assert settings.enable_overriding_service_definitions is True
        assert settings.get_service_overrides() == {"acme_users": {"title": "Env"}}

    def test_ensure_directories(self, tmp_path):
        settings = Settings(data_root=tmp_path / "nested" / "data")
        settings.ensure_directories()
        assert (tmp_path / "nested" / "data").is_dir()

    def test_inline_overrides_win_over_file(self, tmp_path):
        overrides_file = tmp_path / "overrides.json"
        overrides_file.write_text(
            json.dumps({"acme_users": {"title": "File"}, "acme_orders": {"title": "Orders"}})
        )
        settings = Settings(
            data_root=tmp_path,
            overrides_file=overrides_file,
            service_overrides={"acme_users": {"title": "Inline"}},
        )

        assert settings.get_service_overrides() == {
            "acme_users": {"title": "Inline"},
            "acme_orders": {"title": "Orders"},
        }


class TestOverridesFile:
    """Test JSON and TOML override files."""

    def test_toml(self, tmp_path):
        path = tmp_path / "overrides.toml"
        path.write_text('[acme_users.config]\nbase_uri = "http://staging.test/"\n')

        assert load_overrides_file(path) == {"acme_users": {"config": {"base_uri": "http://staging.test/"}}}

    def test_missing_file_is_empty(self, tmp_path):
        assert load_overrides_file(tmp_path / "missing.json") == {}

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "overrides.json"
        path.write_text("{oops")

        with pytest.raises(ConfigurationError, match="Invalid JSON"):
            load_overrides_file(path)

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "overrides.json"
        path.write_text("[1, 2]")

        with pytest.raises(ConfigurationError, match="must contain a mapping"):
            load_overrides_file(path)
