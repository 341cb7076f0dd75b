"""Logging configuration for the filebrowser service.

Verbosity and format are controlled through ``LOG_LEVEL`` and ``LOG_FORMAT``;
chatty client libraries are capped so service logs stay readable.
"""

import json
import logging
import logging.config
import os
from enum import Enum
from typing import Any, Dict


class LogLevel(str, Enum):
    """Supported log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log format options."""
    SIMPLE = "simple"
    DETAILED = "detailed"
    JSON = "json"


FORMAT_STRINGS = {
    LogFormat.SIMPLE: "%(asctime)s - %(levelname)s - %(message)s",
    LogFormat.DETAILED: "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
}


class JsonFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "module": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class LoggingConfig:
    """Logging configuration manager."""

    # Client libraries that only report warnings and above
    QUIET_MODULES = [
        "asyncpg",
        "redis",
        "httpx",
        "httpcore",
        "uvicorn.access",
    ]

    @classmethod
    def build(cls, level: str = "INFO", log_format: str = "simple") -> Dict[str, Any]:
        """Build a dictConfig mapping for the given level and format."""
        try:
            effective_level = LogLevel(level.upper()).value
        except ValueError:
            effective_level = LogLevel.INFO.value
        try:
            effective_format = LogFormat(log_format.lower())
        except ValueError:
            effective_format = LogFormat.SIMPLE

        if effective_format is LogFormat.JSON:
            formatter: Dict[str, Any] = {"()": JsonFormatter}
        else:
            formatter = {"format": FORMAT_STRINGS[effective_format]}
        formatter["datefmt"] = "%Y-%m-%d %H:%M:%S"

        config: Dict[str, Any] = {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": formatter,
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "level": effective_level,
                    "formatter": "default",
                    "stream": "ext://sys.stdout",
                },
            },
            "root": {
                "level": effective_level,
                "handlers": ["console"],
            },
            "loggers": {},
        }

        for module in cls.QUIET_MODULES:
            config["loggers"][module] = {
                "level": "WARNING" if effective_level != "DEBUG" else "INFO",
                "handlers": ["console"],
                "propagate": False,
            }

        return config

    @classmethod
    def configure(cls) -> None:
        """Configure logging based on environment variables."""
        log_level = os.getenv("LOG_LEVEL", "INFO")
        log_format = os.getenv("LOG_FORMAT", "simple")

        config = cls.build(log_level, log_format)
        logging.config.dictConfig(config)

        logger = logging.getLogger(__name__)
        logger.debug(f"Logging configured: level={config['root']['level']}, format={log_format}")

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """Get a configured logger for the given module name."""
        return logging.getLogger(name)


def setup_logging() -> None:
    """Setup logging configuration from environment variables.

    Called once at application startup.
    """
    LoggingConfig.configure()


def get_logger(name: str) -> logging.Logger:
    return LoggingConfig.get_logger(name)
