"""Message history queries with a read-through cache."""

import json
import logging
from typing import List, Optional

from ....config.constants import DEFAULT_MESSAGES_CACHE_TTL
from ....cache.keys import MessageCacheKeys
from ....core.exceptions import ValidationError
from ..entities.message import MessagePage, MessageStats, OutboundMessage
from ..entities.protocols import MessageCacheProtocol, MessageRepositoryProtocol

logger = logging.getLogger(__name__)


class MessageQueryService:
    """Serves a user's message history, caching each page for a fixed TTL.

    Cached pages are dropped by the dispatch service after every send, so a
    read never returns a page older than the user's last write. Cache
    problems degrade to a store read and are never surfaced.
    """

    def __init__(
        self,
        repository: MessageRepositoryProtocol,
        cache: Optional[MessageCacheProtocol] = None,
        cache_ttl: int = DEFAULT_MESSAGES_CACHE_TTL,
    ):
        self.repository = repository
        self.cache = cache
        self.cache_ttl = cache_ttl

    async def list_messages(self, owner_id: str, limit: int, offset: int) -> MessagePage:
        """Get one page of a user's messages, newest first."""
        key = MessageCacheKeys.page_key(owner_id, limit, offset)

        cached = await self._read_cache(key)
        if cached is not None:
            logger.debug(f"Message cache hit: {key}")
            return MessagePage(items=cached, from_cache=True)

        logger.debug(f"Message cache miss: {key}")
        items = await self.repository.find_by_sender(owner_id, limit, offset)
        if items:
            await self._write_cache(key, items)
        return MessagePage(items=items, from_cache=False)

    async def count_messages(self, owner_id: str) -> int:
        """Total number of messages recorded for a user."""
        return await self.repository.count_by_sender(owner_id)

    async def get_stats(self, owner_id: str) -> MessageStats:
        """Delivery statistics for a user."""
        total = await self.repository.count_by_sender(owner_id)
        sent = await self.repository.count_by_sender(owner_id, sent=True)
        by_platform = await self.repository.count_by_platform(owner_id)
        return MessageStats(
            total=total,
            sent=sent,
            failed=total - sent,
            by_platform=by_platform,
        )

    async def _read_cache(self, key: str) -> Optional[List[OutboundMessage]]:
        if self.cache is None:
            return None
        try:
            raw = await self.cache.get(key)
        except Exception as e:
            logger.warning(f"Message cache read failed for {key}: {e}")
            return None
        if raw is None:
            return None

        try:
            return [OutboundMessage.from_dict(item) for item in json.loads(raw)]
        except (ValueError, TypeError, KeyError, ValidationError) as e:
            logger.warning(f"Discarding unreadable message cache entry {key}: {e}")
            return None

    async def _write_cache(self, key: str, items: List[OutboundMessage]) -> None:
        if self.cache is None:
            return
        try:
            await self.cache.set(key, json.dumps([item.to_dict() for item in items]), self.cache_ttl)
        except Exception as e:
            logger.warning(f"Message cache write failed for {key}: {e}")
