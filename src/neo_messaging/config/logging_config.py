"""Centralized logging configuration for the messaging service.

Log level and format are controlled through environment variables so the
same build can run quiet in production and verbose during development.
"""

import logging
import logging.config
import os
from typing import Optional
from enum import Enum


class LogLevel(str, Enum):
    """Supported log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Supported log line formats."""
    SIMPLE = "simple"
    DETAILED = "detailed"
    JSON = "json"


FORMAT_STRINGS = {
    LogFormat.SIMPLE: "%(asctime)s - %(levelname)s - %(message)s",
    LogFormat.DETAILED: "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
    LogFormat.JSON: '{"time":"%(asctime)s","level":"%(levelname)s","module":"%(name)s","message":"%(message)s"}',
}


def resolve_log_level(value: Optional[str]) -> str:
    """Normalize a log level name, falling back to INFO."""
    try:
        return LogLevel((value or "INFO").upper()).value
    except ValueError:
        return LogLevel.INFO.value


def resolve_format_string(value: Optional[str]) -> str:
    """Map a LOG_FORMAT value to a logging format string."""
    try:
        return FORMAT_STRINGS[LogFormat((value or "simple").lower())]
    except ValueError:
        return FORMAT_STRINGS[LogFormat.SIMPLE]


class LoggingConfig:
    """Centralized logging configuration manager."""

    # Third-party modules that only log errors
    ERROR_ONLY_MODULES = [
        "httpx",
        "httpcore",
        "asyncio",
    ]

    # Third-party modules held at WARNING
    WARNING_ONLY_MODULES = [
        "asyncpg",
        "redis",
        "uvicorn.access",
    ]

    @classmethod
    def configure(cls, log_level: Optional[str] = None, log_format: Optional[str] = None) -> None:
        """Configure logging from arguments or environment variables."""
        effective_log_level = resolve_log_level(log_level or os.getenv("LOG_LEVEL"))
        format_string = resolve_format_string(log_format or os.getenv("LOG_FORMAT"))

        logging_config = {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": format_string,
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "level": effective_log_level,
                    "formatter": "default",
                    "stream": "ext://sys.stdout",
                },
            },
            "root": {
                "level": effective_log_level,
                "handlers": ["console"],
            },
            "loggers": {}
        }

        for module in cls.WARNING_ONLY_MODULES:
            logging_config["loggers"][module] = {
                "level": "WARNING",
                "propagate": True,
            }

        for module in cls.ERROR_ONLY_MODULES:
            logging_config["loggers"][module] = {
                "level": "ERROR",
                "propagate": True,
            }

        logging.config.dictConfig(logging_config)

        logger = logging.getLogger(__name__)
        logger.debug(f"Logging configured: level={effective_log_level}")
