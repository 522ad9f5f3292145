"""Entities and protocols for the messages feature."""
from .attachment import Attachment
from .message import MessagePage, MessageStats, OutboundMessage
from .protocols import (
    FileStorageProtocol,
    MessageCacheProtocol,
    MessageRepositoryProtocol,
)

__all__ = [
    "Attachment",
    "MessagePage",
    "MessageStats",
    "OutboundMessage",
    "FileStorageProtocol",
    "MessageCacheProtocol",
    "MessageRepositoryProtocol",
]
