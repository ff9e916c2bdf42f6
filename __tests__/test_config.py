"""Tests for configuration loading and logging setup."""
import logging

import pytest
from pydantic import ValidationError
from chatcomposer.config import ComposerConfig, get_config, set_config, setup_logging


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("COMPOSER_DEBOUNCE_MS", "COMPOSER_HISTORY_LIMIT", "COMPOSER_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    set_config(None)
    yield
    set_config(None)


class TestComposerConfig:
    """Tests for defaults and validation."""

    def test_defaults(self):
        config = ComposerConfig.from_env()
        assert config.debounce_seconds == 0.5
        assert config.history_limit == 100
        assert config.log_level == "INFO"

    def test_rejects_negative_values(self):
        with pytest.raises(ValidationError):
            ComposerConfig(debounce_seconds=-1)
        with pytest.raises(ValidationError):
            ComposerConfig(history_limit=-1)


class TestFromEnv:
    """Tests for environment and .env loading."""

    def test_environment_variables(self, monkeypatch):
        monkeypatch.setenv("COMPOSER_DEBOUNCE_MS", "250")
        monkeypatch.setenv("COMPOSER_HISTORY_LIMIT", "5")
        monkeypatch.setenv("COMPOSER_LOG_LEVEL", "debug")
        config = ComposerConfig.from_env()
        assert config.debounce_seconds == 0.25
        assert config.history_limit == 5
        assert config.log_level == "DEBUG"

    def test_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("COMPOSER_DEBOUNCE_MS=1000\nCOMPOSER_HISTORY_LIMIT=7\n")
        config = ComposerConfig.from_env(env_file)
        assert config.debounce_seconds == 1.0
        assert config.history_limit == 7

    def test_environment_overrides_env_file(self, tmp_path, monkeypatch):
        env_file = tmp_path / ".env"
        env_file.write_text("COMPOSER_HISTORY_LIMIT=7\n")
        monkeypatch.setenv("COMPOSER_HISTORY_LIMIT", "9")
        assert ComposerConfig.from_env(env_file).history_limit == 9


class TestGlobalConfig:
    """Tests for the cached process-wide config."""

    def test_get_config_is_cached(self, monkeypatch):
        first = get_config()
        monkeypatch.setenv("COMPOSER_HISTORY_LIMIT", "3")
        assert get_config() is first

    def test_set_config_none_reloads(self, monkeypatch):
        get_config()
        monkeypatch.setenv("COMPOSER_HISTORY_LIMIT", "3")
        set_config(None)
        assert get_config().history_limit == 3

    def test_set_config(self):
        config = ComposerConfig(history_limit=1)
        set_config(config)
        assert get_config() is config


class TestSetupLogging:
    """Tests for logging configuration."""

    @pytest.fixture(autouse=True)
    def restore_root_logger(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_explicit_level(self):
        setup_logging("WARNING")
        assert logging.getLogger().level == logging.WARNING

    def test_level_from_config(self):
        set_config(ComposerConfig(log_level="DEBUG"))
        setup_logging()
        assert logging.getLogger().level == logging.DEBUG
