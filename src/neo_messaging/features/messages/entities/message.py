"""Outbound message entity.

One record is created for every accepted send, after the delivery attempt
has settled. Records are never updated or deleted.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import UUID, uuid4

from ....config.constants import MessagePlatform
from ....core.exceptions import ValidationError
from ..utils.validation import MessageValidationRules


@dataclass
class OutboundMessage:
    """A message sent by a user to one or more recipients on one platform."""

    sender_id: str
    platform: MessagePlatform
    recipients: List[str]
    content: str
    sent: bool
    file_url: Optional[str] = None
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self):
        """Post-init validation and normalization."""
        if not self.sender_id:
            raise ValidationError("Sender is required", field="sender_id")

        if not isinstance(self.platform, MessagePlatform):
            try:
                self.platform = MessagePlatform(self.platform)
            except ValueError:
                raise ValidationError(f"Invalid platform: {self.platform}", field="platform")

        self.recipients = MessageValidationRules.validate_recipients(self.recipients)
        self.content = MessageValidationRules.validate_content(self.content)

        if isinstance(self.id, str):
            self.id = UUID(self.id)

        if not isinstance(self.created_at, datetime):
            raise ValidationError("created_at must be a datetime", field="created_at")
        if self.created_at.tzinfo is None:
            self.created_at = self.created_at.replace(tzinfo=timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        """Convert message to a JSON-safe dictionary."""
        return {
            "id": str(self.id),
            "sender_id": self.sender_id,
            "platform": self.platform.value,
            "recipients": list(self.recipients),
            "content": self.content,
            "file_url": self.file_url,
            "sent": self.sent,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OutboundMessage":
        """Create message from a dictionary produced by ``to_dict``.

        Raises:
            ValueError: A field has the wrong type or format
        """
        created_at = data["created_at"]
        if not isinstance(created_at, str):
            raise ValueError(f"created_at must be an ISO timestamp, got {type(created_at).__name__}")

        recipients = data["recipients"]
        if not isinstance(recipients, list):
            raise ValueError(f"recipients must be a list, got {type(recipients).__name__}")

        sent = data["sent"]
        if not isinstance(sent, bool):
            raise ValueError(f"sent must be a boolean, got {type(sent).__name__}")

        return cls(
            id=UUID(str(data["id"])),
            sender_id=data["sender_id"],
            platform=MessagePlatform(data["platform"]),
            recipients=list(recipients),
            content=data["content"],
            file_url=data.get("file_url"),
            sent=sent,
            created_at=datetime.fromisoformat(created_at),
        )


@dataclass(frozen=True)
class MessagePage:
    """A page of message history and where it was read from."""

    items: List[OutboundMessage]
    from_cache: bool

    @property
    def count(self) -> int:
        return len(self.items)


@dataclass(frozen=True)
class MessageStats:
    """Delivery statistics for one user."""

    total: int
    sent: int
    failed: int
    by_platform: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "sent": self.sent,
            "failed": self.failed,
            "by_platform": dict(self.by_platform),
        }
