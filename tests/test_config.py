# Area: Shared Tests
"""Tests for configuration loading."""

import json
import os

import pytest

from ringside import ConfigurationError, EngineConfig, load_config
from ringside._config import ENV_MAPPINGS


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate tests from RINGSIDE_* variables and any .env in the cwd."""
    for key in ENV_MAPPINGS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    yield
    for key in ENV_MAPPINGS:
        os.environ.pop(key, None)


class TestEngineConfig:
    """Tests for EngineConfig validation."""

    def test_defaults(self):
        config = EngineConfig()
        assert config.database_path == "ringside.db"
        assert config.log_file == "ringside.log"
        assert config.log_level == "INFO"
        assert config.busy_timeout_seconds == 5.0

    def test_level_normalised(self):
        assert EngineConfig(log_level="debug").log_level == "DEBUG"

    def test_invalid_level(self):
        with pytest.raises(ValueError):
            EngineConfig(log_level="LOUD")

    def test_unknown_key(self):
        with pytest.raises(ValueError):
            EngineConfig(database="x.db")


class TestLoadConfig:
    """Tests for load_config."""

    def test_without_sources(self):
        assert load_config() == EngineConfig()

    def test_json_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"database_path": "promo.db", "log_level": "warning"}))

        config = load_config(path)

        assert config.database_path == "promo.db"
        assert config.log_level == "WARNING"

    def test_environment_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"database_path": "promo.db"}))
        monkeypatch.setenv("RINGSIDE_DATABASE_PATH", "env.db")
        monkeypatch.setenv("RINGSIDE_BUSY_TIMEOUT", "2.5")

        config = load_config(path)

        assert config.database_path == "env.db"
        assert config.busy_timeout_seconds == 2.5

    def test_env_file(self, tmp_path):
        env_file = tmp_path / "custom.env"
        env_file.write_text("RINGSIDE_LOG_FILE=engine.log\n")

        assert load_config(env_file=env_file).log_file == "engine.log"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(tmp_path / "missing.json")
        assert "not found" in str(exc_info.value)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json")
        with pytest.raises(ConfigurationError):
            load_config(path)

    def test_top_level_must_be_object(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("[1, 2]")
        with pytest.raises(ConfigurationError):
            load_config(path)

    def test_invalid_value(self, tmp_path, monkeypatch):
        """Test validation errors are reported per field."""
        monkeypatch.setenv("RINGSIDE_BUSY_TIMEOUT", "0")
        with pytest.raises(ConfigurationError) as exc_info:
            load_config()
        assert exc_info.value.errors[0].startswith("busy_timeout_seconds")
