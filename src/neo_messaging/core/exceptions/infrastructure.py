"""Infrastructure exceptions for database, cache and configuration failures."""

from typing import Any, Dict, Optional

from .base import NeoMessagingError


class ConfigurationError(NeoMessagingError):
    """Raised when required configuration is missing or invalid."""

    def __init__(self, message: str, config_key: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", None) or {}
        if config_key:
            details["config_key"] = config_key
        super().__init__(message, details=details, **kwargs)


class DatabaseError(NeoMessagingError):
    """Raised when a database operation fails."""

    def __init__(self, message: str, operation: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        details = dict(details or {})
        if operation:
            details["operation"] = operation
        super().__init__(message, details=details)
        self.operation = operation


class CacheError(NeoMessagingError):
    """Raised when a cache operation fails."""

    def __init__(self, message: str, key: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        details = dict(details or {})
        if key:
            details["key"] = key
        super().__init__(message, details=details)
        self.key = key


class CacheConnectionError(CacheError):
    """Raised when the cache server cannot be reached."""
