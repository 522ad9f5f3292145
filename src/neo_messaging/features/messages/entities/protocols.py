"""Protocol interfaces for the messages feature.

Services depend on these protocols rather than on asyncpg, Redis or the
upload provider directly.
"""

from typing import Dict, List, Optional, Protocol, runtime_checkable

from .message import OutboundMessage


@runtime_checkable
class MessageRepositoryProtocol(Protocol):
    """Persistent store for outbound message records."""

    async def save(self, message: OutboundMessage) -> OutboundMessage:
        """Persist a message record."""
        ...

    async def find_by_sender(self, sender_id: str, limit: int, offset: int) -> List[OutboundMessage]:
        """Return a page of a user's messages, newest first."""
        ...

    async def count_by_sender(self, sender_id: str, sent: Optional[bool] = None) -> int:
        """Count a user's messages, optionally filtered by delivery outcome."""
        ...

    async def count_by_platform(self, sender_id: str) -> Dict[str, int]:
        """Count a user's messages grouped by platform."""
        ...


@runtime_checkable
class MessageCacheProtocol(Protocol):
    """String key/value cache with TTL and pattern delete."""

    async def get(self, key: str) -> Optional[str]:
        """Get a cached value, None on miss."""
        ...

    async def set(self, key: str, value: str, ttl: int) -> bool:
        """Store a value with a time-to-live in seconds."""
        ...

    async def delete_pattern(self, pattern: str) -> int:
        """Delete every key matching a glob pattern."""
        ...


@runtime_checkable
class FileStorageProtocol(Protocol):
    """Object storage for attachments."""

    async def upload(self, content: bytes, filename: str, mime_type: str) -> str:
        """Upload a file and return its public URL."""
        ...
