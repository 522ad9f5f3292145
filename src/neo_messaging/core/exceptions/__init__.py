"""Exception hierarchy for neo-messaging."""

from .base import NeoMessagingError, create_error_response
from .domain import (
    FileUploadError,
    ProcessingFailedError,
    UnsupportedPlatformError,
    ValidationError,
)
from .infrastructure import (
    CacheConnectionError,
    CacheError,
    ConfigurationError,
    DatabaseError,
)
from .http_mapping import HTTP_STATUS_MAP, get_http_status_code

__all__ = [
    "NeoMessagingError",
    "create_error_response",
    "ValidationError",
    "UnsupportedPlatformError",
    "FileUploadError",
    "ProcessingFailedError",
    "DatabaseError",
    "CacheError",
    "CacheConnectionError",
    "ConfigurationError",
    "HTTP_STATUS_MAP",
    "get_http_status_code",
]
