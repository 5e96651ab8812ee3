"""Configuration management using Pydantic Settings.

Loads ``CUDDLEFISH_*`` environment variables (and a ``.env`` file) and fills
anything left unset from a YAML config file.
"""

import logging
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from cuddlefish.exceptions import ConfigFileError
from cuddlefish.vcs.git import DEFAULT_DESCRIBE_PATTERN

logger = logging.getLogger(__name__)

REPO_CONFIG_NAME = ".cuddlefish.yml"
USER_CONFIG_PATH = Path("~/.cuddlefish/config.yml")

_FILE_KEYS = ("git", "describe_pattern", "log_level", "status_to_version")
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Config(BaseSettings):
    """Settings for reading version metadata out of a git repository.

    Precedence: explicit arguments, then environment, then the YAML config
    file, then defaults.

    YAML files are looked up in order:
    1. ``config_file`` when given (must exist)
    2. ``<repo>/.cuddlefish.yml``
    3. ``~/.cuddlefish/config.yml``
    """

    model_config = SettingsConfigDict(
        env_prefix="CUDDLEFISH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_assignment=True,
    )

    git: str = "git"
    """Path or name of the git executable."""

    # Left untyped; ensure_pattern rejects anything but str / re.Pattern
    describe_pattern: Any = DEFAULT_DESCRIBE_PATTERN
    """Pattern with tag, ahead, ref and dirty groups for git describe output."""

    repo: Path = Path(".")
    """Repository working directory git is run in."""

    log_level: str = "WARNING"
    """Python logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."""

    config_file: Optional[Path] = None
    """Explicit YAML config file."""

    status_to_version: Optional[str] = None
    """``module:function`` import path of a status-to-version strategy."""

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize to an upper-case standard logging level name."""
        level = v.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        return level

    def __init__(self, **data) -> None:
        super().__init__(**data)
        self._load_file_config()

    def _config_paths(self) -> list[Path]:
        if self.config_file is not None:
            return [self.config_file]
        return [self.repo / REPO_CONFIG_NAME, USER_CONFIG_PATH.expanduser()]

    def _load_file_config(self) -> None:
        """Apply YAML settings to fields not set explicitly or via environment."""
        explicit = self.config_file is not None

        config_file_path = None
        for path in self._config_paths():
            if path.exists():
                config_file_path = path
                break

        if config_file_path is None:
            if explicit:
                raise ConfigFileError(
                    "Config file not found", context={"path": str(self.config_file)}
                )
            return

        try:
            with open(config_file_path) as f:
                file_config = yaml.safe_load(f) or {}
            if not isinstance(file_config, dict):
                raise ConfigFileError(
                    "Config file must contain a mapping", context={"path": str(config_file_path)}
                )
        except (OSError, yaml.YAMLError, ConfigFileError) as e:
            if explicit:
                if isinstance(e, ConfigFileError):
                    raise
                raise ConfigFileError(
                    f"Failed to load config file: {e}", context={"path": str(config_file_path)}
                ) from e
            logger.warning(f"Failed to load config from {config_file_path}: {e}")
            return

        logger.info(f"Loaded config from {config_file_path}")
        previous = {key: getattr(self, key) for key in _FILE_KEYS}
        try:
            for key in _FILE_KEYS:
                if key in file_config and key not in self.model_fields_set:
                    setattr(self, key, file_config[key])
        except ValidationError as e:
            for key, value in previous.items():
                setattr(self, key, value)
            if explicit:
                raise ConfigFileError(
                    f"Invalid value in config file: {e}", context={"path": str(config_file_path)}
                ) from e
            logger.warning(f"Ignoring config from {config_file_path}: {e}")
            return

        logger.debug(
            f"Config loaded: git={self.git}, repo={self.repo}, "
            f"describe_pattern={self.describe_pattern!r}"
        )
