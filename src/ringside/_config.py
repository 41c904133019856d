# Area: Shared
"""
ringside._config — Engine Configuration
=======================================

Configuration model and loader. Values come from an optional JSON file,
then ``.env`` and the process environment override them.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigurationError

logger = logging.getLogger("ringside.config")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Environment variable -> config key
ENV_MAPPINGS = {
    "RINGSIDE_DATABASE_PATH": "database_path",
    "RINGSIDE_LOG_FILE": "log_file",
    "RINGSIDE_LOG_LEVEL": "log_level",
    "RINGSIDE_BUSY_TIMEOUT": "busy_timeout_seconds",
}


class EngineConfig(BaseModel):
    """
    Settings for a RosterEngine.

    Attributes:
        database_path: SQLite database file
        log_file: JSON log file; None or "" disables file logging
        log_level: Standard logging level name
        busy_timeout_seconds: How long a transition waits for a competing writer
    """

    model_config = ConfigDict(extra="forbid")

    database_path: str = "ringside.db"
    log_file: Optional[str] = "ringside.log"
    log_level: str = "INFO"
    busy_timeout_seconds: float = Field(default=5.0, gt=0)

    @field_validator("log_level")
    @classmethod
    def _check_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"must be one of {', '.join(LOG_LEVELS)}")
        return level

    @field_validator("database_path")
    @classmethod
    def _check_database_path(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value


def load_config(
    config_path: Optional[Union[str, Path]] = None,
    env_file: Optional[Union[str, Path]] = None,
) -> EngineConfig:
    """
    Load config from file and environment.

    Args:
        config_path: Optional JSON file
        env_file: Optional .env file; defaults to searching from the cwd

    Returns:
        Validated EngineConfig

    Raises:
        ConfigurationError: If the file is unreadable or a value is invalid
    """
    values: Dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if not path.exists():
            raise ConfigurationError([f"config file not found: {path}"], str(path))
        try:
            with open(path, encoding="utf-8") as f:
                values = json.load(f)
        except json.JSONDecodeError as exc:
            raise ConfigurationError([f"invalid JSON: {exc}"], str(path)) from exc
        if not isinstance(values, dict):
            raise ConfigurationError(["top level must be a JSON object"], str(path))

    load_dotenv(dotenv_path=env_file or find_dotenv(usecwd=True), override=False)

    # Override with environment variables
    for env_key, config_key in ENV_MAPPINGS.items():
        if env_key in os.environ:
            values[config_key] = os.environ[env_key]

    try:
        config = EngineConfig(**values)
    except ValidationError as exc:
        errors = [
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in exc.errors()
        ]
        raise ConfigurationError(errors, str(config_path) if config_path else None) from exc

    logger.debug(f"Loaded configuration: {config.model_dump()}")
    return config
