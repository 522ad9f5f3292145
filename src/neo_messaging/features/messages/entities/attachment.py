"""File attachment entity."""

from dataclasses import dataclass

from ....config.constants import DEFAULT_MAX_FILE_SIZE_MB
from ..utils.validation import MessageValidationRules


@dataclass(frozen=True)
class Attachment:
    """Raw file supplied with a send request, prior to upload."""

    content: bytes
    filename: str
    mime_type: str

    @property
    def size(self) -> int:
        return len(self.content)

    def validate(self, max_size_mb: int = DEFAULT_MAX_FILE_SIZE_MB) -> None:
        """Raise ValidationError if the file is too large or of a disallowed type."""
        MessageValidationRules.validate_attachment(self.size, self.mime_type, max_size_mb)
