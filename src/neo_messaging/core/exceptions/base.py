"""Base exceptions for neo-messaging.

All exceptions inherit from NeoMessagingError and carry an error code and
a details mapping that the API layer renders into error responses.
"""

from typing import Any, Dict, Optional


class NeoMessagingError(Exception):
    """Base exception for all neo-messaging errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the error for API responses."""
        return {
            "code": self.error_code,
            "message": self.message,
            "details": self.details,
        }


def create_error_response(exception: NeoMessagingError) -> Dict[str, Any]:
    """Create standardized error payload from exception."""
    return {
        "error": {
            **exception.to_dict(),
            "type": exception.__class__.__name__,
        }
    }
