"""Settings and logging configuration."""

from .logging_config import LoggingConfig, get_logger, setup_logging
from .settings import Settings, get_settings, parse_duration

__all__ = [
    "LoggingConfig",
    "Settings",
    "get_logger",
    "get_settings",
    "parse_duration",
    "setup_logging",
]
