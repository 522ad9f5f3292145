"""HTTP status code mapping for exceptions."""

from typing import Dict, Type

from .base import NeoMessagingError
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


HTTP_STATUS_MAP: Dict[Type[Exception], int] = {
    # 400 Bad Request
    ValidationError: 400,
    UnsupportedPlatformError: 400,

    # 502 Bad Gateway
    FileUploadError: 502,

    # 500 Internal Server Error
    ProcessingFailedError: 500,
    DatabaseError: 500,
    CacheError: 500,
    CacheConnectionError: 500,
    ConfigurationError: 500,

    # Default for NeoMessagingError
    NeoMessagingError: 500,
}


def get_http_status_code(exception: Exception) -> int:
    """Get HTTP status code for exception, walking the class hierarchy."""
    for exception_type in type(exception).__mro__:
        if exception_type in HTTP_STATUS_MAP:
            return HTTP_STATUS_MAP[exception_type]
    return 500
