"""
Configuration for the composer.

Loaded from:
1. Defaults (this file)
2. A .env file, when one is passed to `ComposerConfig.from_env`
3. Environment variables (COMPOSER_*), which override the file
"""

from __future__ import annotations
import logging
import os
from pathlib import Path

from dotenv import dotenv_values
from pydantic import BaseModel, Field


class ComposerConfig(BaseModel):
    """Tunable settings of an editor instance."""
    debounce_seconds: float = Field(default=0.5, ge=0)
    history_limit: int = Field(default=100, ge=0)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> ComposerConfig:
        """
        Build a config from the environment.

        Args:
            env_file: Optional .env file; real environment variables win

        Variables:
            COMPOSER_DEBOUNCE_MS: quiescence window before emitting text
            COMPOSER_HISTORY_LIMIT: undo steps kept per editor
            COMPOSER_LOG_LEVEL: level used by setup_logging
        """
        env: dict[str, str | None] = {}
        if env_file is not None:
            env.update(dotenv_values(env_file))
        env.update(os.environ)

        values: dict[str, object] = {}
        if (debounce_ms := env.get("COMPOSER_DEBOUNCE_MS")) is not None:
            values["debounce_seconds"] = float(debounce_ms) / 1000
        if (history_limit := env.get("COMPOSER_HISTORY_LIMIT")) is not None:
            values["history_limit"] = int(history_limit)
        if (log_level := env.get("COMPOSER_LOG_LEVEL")) is not None:
            values["log_level"] = log_level.upper()
        return cls(**values)


_config: ComposerConfig | None = None


def get_config() -> ComposerConfig:
    """Get the process-wide config, loading it from the environment once."""
    global _config
    if _config is None:
        _config = ComposerConfig.from_env()
    return _config


def set_config(config: ComposerConfig | None) -> None:
    """Replace the process-wide config. None forces a reload on next use."""
    global _config
    _config = config


def setup_logging(level: str | int | None = None) -> None:
    """Configure root logging for hosts that do not configure it themselves."""
    logging.basicConfig(
        level=level if level is not None else get_config().log_level,
        format='%(levelname)s:%(name)s: %(message)s',
        force=True,
    )
