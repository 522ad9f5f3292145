"""API models for the messages feature."""
from .requests import parse_recipients
from .responses import (
    CacheInfo,
    MessageListData,
    MessageResponse,
    MessageStatsData,
    MessageStatsResponse,
    PaginationMeta,
    SentByResponse,
    SentMessageResponse,
)

__all__ = [
    "parse_recipients",
    "CacheInfo",
    "MessageListData",
    "MessageResponse",
    "MessageStatsData",
    "MessageStatsResponse",
    "PaginationMeta",
    "SentByResponse",
    "SentMessageResponse",
]
