"""Pytest configuration and fixtures for neo-messaging tests."""

import re
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional
from unittest.mock import AsyncMock

import pytest

from neo_messaging.config.constants import MessagePlatform
from neo_messaging.config.settings import MessagingSettings
from neo_messaging.core.exceptions import CacheError
from neo_messaging.features.messages.entities.message import OutboundMessage
from neo_messaging.features.messages.senders.base import (
    MassSenderStrategy,
    SenderStrategy,
    SendResult,
)
from neo_messaging.features.messages.senders.selector import SenderSelector


def redis_glob_to_regex(pattern: str) -> "re.Pattern":
    """Translate a Redis glob pattern (with backslash escapes) to a regex."""
    parts = []
    i = 0
    while i < len(pattern):
        char = pattern[i]
        if char == "\\" and i + 1 < len(pattern):
            parts.append(re.escape(pattern[i + 1]))
            i += 2
            continue
        if char == "*":
            parts.append(".*")
        elif char == "?":
            parts.append(".")
        elif char == "[":
            end = pattern.index("]", i + 1)
            parts.append(f"[{pattern[i + 1:end]}]")
            i = end
        else:
            parts.append(re.escape(char))
        i += 1
    return re.compile("^" + "".join(parts) + "$", re.DOTALL)


class InMemoryCache:
    """Cache double with Redis-like glob deletes and call recording."""

    def __init__(self):
        self.store: Dict[str, str] = {}
        self.ttls: Dict[str, int] = {}
        self.deleted_patterns: List[str] = []
        self.fail_reads = False
        self.fail_writes = False
        self.fail_deletes = False

    async def get(self, key: str) -> Optional[str]:
        if self.fail_reads:
            raise CacheError("cache unavailable", key=key)
        return self.store.get(key)

    async def set(self, key: str, value: str, ttl: int) -> bool:
        if self.fail_writes:
            raise CacheError("cache unavailable", key=key)
        self.store[key] = value
        self.ttls[key] = ttl
        return True

    async def delete_pattern(self, pattern: str) -> int:
        self.deleted_patterns.append(pattern)
        if self.fail_deletes:
            raise CacheError("cache unavailable", key=pattern)
        regex = redis_glob_to_regex(pattern)
        matched = [key for key in self.store if regex.match(key)]
        for key in matched:
            del self.store[key]
            self.ttls.pop(key, None)
        return len(matched)


class InMemoryMessageRepository:
    """Message store double keeping records in a list."""

    def __init__(self):
        self.messages: List[OutboundMessage] = []
        self.save_calls = 0
        self.find_calls = 0
        self.fail_saves = False

    async def save(self, message: OutboundMessage) -> OutboundMessage:
        self.save_calls += 1
        if self.fail_saves:
            raise RuntimeError("database unavailable")
        self.messages.append(message)
        return message

    async def find_by_sender(self, sender_id: str, limit: int, offset: int) -> List[OutboundMessage]:
        self.find_calls += 1
        owned = [m for m in self.messages if m.sender_id == sender_id]
        owned.sort(key=lambda m: m.created_at, reverse=True)
        return owned[offset:offset + limit]

    async def count_by_sender(self, sender_id: str, sent: Optional[bool] = None) -> int:
        return sum(
            1 for m in self.messages
            if m.sender_id == sender_id and (sent is None or m.sent == sent)
        )

    async def count_by_platform(self, sender_id: str) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for m in self.messages:
            if m.sender_id == sender_id:
                counts[m.platform.value] = counts.get(m.platform.value, 0) + 1
        return counts


class RecordingSender(SenderStrategy):
    """Single-recipient strategy that records calls."""

    def __init__(self, platform: MessagePlatform, results: Optional[Dict[str, bool]] = None):
        super().__init__()
        self.platform = platform
        self.results = results or {}
        self.send_one_calls: List[tuple] = []

    @property
    def is_configured(self) -> bool:
        return True

    async def send_one(self, recipient: str, content: str, file_url: Optional[str] = None) -> SendResult:
        self.send_one_calls.append((recipient, content, file_url))
        success = self.results.get(recipient, True)
        return SendResult(success=success, status_code=200 if success else 400)


class RecordingMassSender(MassSenderStrategy):
    """Mass-capable strategy that records calls."""

    def __init__(self, platform: MessagePlatform, mass_success: bool = True):
        super().__init__()
        self.platform = platform
        self.mass_success = mass_success
        self.send_one_calls: List[tuple] = []
        self.send_many_calls: List[tuple] = []

    @property
    def is_configured(self) -> bool:
        return True

    async def send_one(self, recipient: str, content: str, file_url: Optional[str] = None) -> SendResult:
        self.send_one_calls.append((recipient, content, file_url))
        return SendResult(success=True, status_code=200)

    async def send_many(self, recipients: List[str], content: str, file_url: Optional[str] = None) -> SendResult:
        self.send_many_calls.append((list(recipients), content, file_url))
        return SendResult(success=self.mass_success, message=f"{len(recipients)} recipients")


@pytest.fixture
def cache():
    """In-memory cache."""
    return InMemoryCache()


@pytest.fixture
def repository():
    """In-memory message repository."""
    return InMemoryMessageRepository()


@pytest.fixture
def telegram_sender():
    return RecordingMassSender(MessagePlatform.TELEGRAM)


@pytest.fixture
def slack_sender():
    return RecordingSender(MessagePlatform.SLACK)


@pytest.fixture
def selector(telegram_sender, slack_sender):
    """Selector with a mass-capable telegram and single-only slack strategy."""
    return SenderSelector([telegram_sender, slack_sender])


@pytest.fixture
def mock_file_storage():
    """Mock file storage returning a fixed URL."""
    storage = AsyncMock()
    storage.upload = AsyncMock(return_value="https://files.example.com/report.pdf")
    return storage


@pytest.fixture
def settings():
    """Settings isolated from the environment."""
    return MessagingSettings(
        _env_file=None,
        telegram_bot_token="123:abc",
        slack_bot_token="xoxb-test",
        discord_bot_token="discord-test",
        whatsapp_access_token="wa-test",
        whatsapp_phone_number_id="1098765",
    )


@pytest.fixture
def make_message():
    """Factory for message records with increasing timestamps."""
    base = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    def factory(sender_id: str = "user-1", index: int = 0, **overrides) -> OutboundMessage:
        values = {
            "sender_id": sender_id,
            "platform": MessagePlatform.TELEGRAM,
            "recipients": ["100"],
            "content": f"message {index}",
            "sent": True,
            "created_at": base + timedelta(minutes=index),
        }
        values.update(overrides)
        return OutboundMessage(**values)

    return factory


@pytest.fixture
def glob_regex():
    """Redis glob pattern to regex translator."""
    return redis_glob_to_regex


@pytest.fixture
def make_sender():
    """Factory for single-recipient recording strategies."""
    return RecordingSender
