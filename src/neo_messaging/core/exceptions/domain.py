"""Domain exceptions raised while validating and dispatching messages."""

from typing import Any, Dict, List, Optional

from .base import NeoMessagingError


class ValidationError(NeoMessagingError):
    """Raised when message input fails validation."""

    def __init__(self, message: str, field: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", None) or {}
        if field:
            details["field"] = field
        super().__init__(message, details=details, **kwargs)
        self.field = field


class UnsupportedPlatformError(ValidationError):
    """Raised when no sender strategy is registered for a platform tag."""

    def __init__(self, platform: str, valid_platforms: List[str]):
        super().__init__(
            f"Unsupported platform '{platform}'. Valid platforms: {', '.join(valid_platforms)}",
            field="platform",
            details={"platform": platform, "valid_platforms": list(valid_platforms)},
        )
        self.platform = platform
        self.valid_platforms = list(valid_platforms)


class FileUploadError(NeoMessagingError):
    """Raised when an attachment cannot be uploaded to file storage."""

    def __init__(self, message: str = "File upload failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details=details)


class ProcessingFailedError(NeoMessagingError):
    """Opaque failure of the dispatch pipeline.

    The underlying cause is logged, never exposed to callers.
    """

    def __init__(self, message: str = "Failed to process message dispatch"):
        super().__init__(message)
