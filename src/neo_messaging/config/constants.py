"""
Shared constants for the messaging service.
"""
from enum import Enum
from typing import FrozenSet, List


class MessagePlatform(str, Enum):
    """Messaging platforms a message can be routed to."""
    TELEGRAM = "telegram"
    SLACK = "slack"
    DISCORD = "discord"
    WHATSAPP = "whatsapp"

    @classmethod
    def values(cls) -> List[str]:
        return [platform.value for platform in cls]


# Message content limits (applied after trimming)
MIN_CONTENT_LENGTH = 1
MAX_CONTENT_LENGTH = 5000

# Attachments
ALLOWED_ATTACHMENT_MIME_TYPES: FrozenSet[str] = frozenset({
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/webp",
    "application/pdf",
})
DEFAULT_MAX_FILE_SIZE_MB = 10

# Cache
MESSAGES_CACHE_NAMESPACE = "messages"
DEFAULT_MESSAGES_CACHE_TTL = 86400  # 24 hours

# Pagination
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
