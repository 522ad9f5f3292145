"""Validation rules for outbound messages.

Centralized so that entities and the dispatch service apply the same
checks before any I/O happens.
"""

from typing import Iterable, List, Optional

from ....config.constants import (
    ALLOWED_ATTACHMENT_MIME_TYPES,
    DEFAULT_MAX_FILE_SIZE_MB,
    MAX_CONTENT_LENGTH,
    MIN_CONTENT_LENGTH,
)
from ....core.exceptions import ValidationError


class MessageValidationRules:
    """Validation rules for message content, recipients and attachments."""

    @staticmethod
    def validate_content(content: Optional[str]) -> str:
        """Return trimmed content or raise ValidationError."""
        if content is None:
            raise ValidationError("Content is required", field="content")
        trimmed = content.strip()
        if len(trimmed) < MIN_CONTENT_LENGTH:
            raise ValidationError("Content cannot be empty", field="content")
        if len(trimmed) > MAX_CONTENT_LENGTH:
            raise ValidationError(
                f"Content cannot exceed {MAX_CONTENT_LENGTH} characters",
                field="content",
                details={"length": len(trimmed), "max_length": MAX_CONTENT_LENGTH},
            )
        return trimmed

    @staticmethod
    def validate_recipients(recipients: Optional[Iterable[str]]) -> List[str]:
        """Return recipients as a list, order preserved, or raise ValidationError."""
        if recipients is None or isinstance(recipients, str):
            raise ValidationError("Recipients must be a list of identifiers", field="recipients")

        normalized = []
        for recipient in recipients:
            if not isinstance(recipient, str) or not recipient.strip():
                raise ValidationError("Recipients must be non-empty strings", field="recipients")
            normalized.append(recipient.strip())

        if not normalized:
            raise ValidationError("At least one recipient is required", field="recipients")
        return normalized

    @staticmethod
    def validate_attachment(
        size: int,
        mime_type: str,
        max_size_mb: int = DEFAULT_MAX_FILE_SIZE_MB,
    ) -> None:
        """Check attachment size and mime type."""
        if size <= 0:
            raise ValidationError("Attachment is empty", field="file")

        max_bytes = max_size_mb * 1024 * 1024
        if size > max_bytes:
            raise ValidationError(
                f"Attachment exceeds the maximum size of {max_size_mb} MB",
                field="file",
                details={"size": size, "max_size": max_bytes},
            )

        if mime_type not in ALLOWED_ATTACHMENT_MIME_TYPES:
            raise ValidationError(
                f"Attachment type '{mime_type}' is not allowed",
                field="file",
                details={"allowed_types": sorted(ALLOWED_ATTACHMENT_MIME_TYPES)},
            )
