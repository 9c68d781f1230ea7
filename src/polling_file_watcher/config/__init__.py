"""Configuration management and settings."""

from polling_file_watcher.config.settings import LogLevel, WatcherConfig

__all__ = ["WatcherConfig", "LogLevel"]
