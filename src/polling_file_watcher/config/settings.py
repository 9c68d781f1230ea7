"""
Configuration management for the polling file watcher.

Handles environment variables and ``.env`` loading, and provides default
settings with validation. Every watcher instance is built from its own
configuration object; there is no process-wide configuration.
"""

import fnmatch
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from polling_file_watcher.models.exceptions import ConfigurationError


class LogLevel(str, Enum):
    """Logging level enumeration."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class WatcherConfig(BaseSettings):
    """
    Central configuration class for the polling file watcher.

    Handles all configuration options with environment variable support,
    validation, and defaults suitable for watching moderately sized trees.
    """

    model_config = SettingsConfigDict(
        env_prefix="POLLING_FILE_WATCHER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_assignment=True,
        extra="ignore",
    )

    # === Scheduling Configuration ===
    interval_ms: int = Field(default=2000, gt=0, description="Delay between scan cycles in milliseconds")
    initial_scan_notification_required: bool = Field(
        default=False, description="Dispatch creation events for everything found by the first scan"
    )
    join_timeout_seconds: float = Field(
        default=5.0, gt=0.0, le=300.0, description="How long shutdown waits for the scan thread"
    )

    # === Registration Configuration ===
    prune_unwatched_roots: bool = Field(
        default=False, description="Stop scanning a root once no listener is registered at or under it"
    )

    # === Scanning Configuration ===
    ignored_patterns: list[str] = Field(
        default_factory=list, description="Glob patterns for entries (and subtrees) to leave out of scans"
    )

    # === Logging Configuration ===
    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")
    log_file: Path | None = Field(default=None, description="Log file path (stderr if None)")
    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s", description="Log message format"
    )

    @field_validator('ignored_patterns')
    @classmethod
    def validate_ignored_patterns(cls, v):
        """Strip whitespace, reject blank patterns and drop duplicates."""
        validated = []
        for pattern in v:
            pattern = pattern.strip()
            if not pattern:
                raise ConfigurationError(
                    "ignored_patterns must not contain blank patterns",
                    config_key="ignored_patterns",
                    expected_type="non-blank glob pattern",
                    actual_value=v,
                )
            if pattern not in validated:
                validated.append(pattern)
        return validated

    @model_validator(mode='after')
    def validate_log_file(self):
        """Ensure the log file, when set, is not an existing directory."""
        if self.log_file is not None and self.log_file.is_dir():
            raise ConfigurationError(
                "log_file must not be a directory",
                config_key="log_file",
                expected_type="file path",
                actual_value=self.log_file,
            )
        return self

    @property
    def interval_seconds(self) -> float:
        """Scan interval expressed in seconds."""
        return self.interval_ms / 1000.0

    def should_ignore(self, path: str | Path) -> bool:
        """Check if an entry should be left out of scans based on patterns."""
        if not self.ignored_patterns:
            return False

        path_str = str(path)
        name = Path(path_str).name
        return any(
            fnmatch.fnmatch(name, pattern) or fnmatch.fnmatch(path_str, pattern) for pattern in self.ignored_patterns
        )

    def get_log_config(self) -> dict[str, Any]:
        """Get logging configuration dictionary for ``logging.config.dictConfig``."""
        level = LogLevel(self.log_level).value
        config = {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"standard": {"format": self.log_format}},
            "handlers": {
                "default": {
                    "level": level,
                    "formatter": "standard",
                    "class": "logging.StreamHandler" if not self.log_file else "logging.FileHandler",
                }
            },
            "loggers": {"polling_file_watcher": {"handlers": ["default"], "level": level, "propagate": False}},
        }

        if self.log_file:
            config["handlers"]["default"]["filename"] = str(self.log_file)

        return config
