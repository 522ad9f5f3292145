"""Message response models."""

import math
from typing import Dict, List, Optional
from datetime import datetime
from pydantic import BaseModel, Field

from ..entities.message import MessageStats, OutboundMessage


class SentByResponse(BaseModel):
    """Identity of the user who sent a message."""

    id: str = Field(..., description="User ID")
    username: Optional[str] = Field(None, description="Username")


class MessageResponse(BaseModel):
    """Outbound message record."""

    id: str = Field(..., description="Message ID")
    platform: str = Field(..., description="Platform the message was routed to")
    recipients: List[str] = Field(..., description="Recipient identifiers in request order")
    content: str = Field(..., description="Message content")
    file_url: Optional[str] = Field(None, description="Public URL of the attachment")
    sent: bool = Field(..., description="Whether every recipient was reached")
    created_at: datetime = Field(..., description="Creation timestamp")

    @classmethod
    def from_entity(cls, message: OutboundMessage) -> "MessageResponse":
        return cls(
            id=str(message.id),
            platform=message.platform.value,
            recipients=list(message.recipients),
            content=message.content,
            file_url=message.file_url,
            sent=message.sent,
            created_at=message.created_at,
        )


class SentMessageResponse(MessageResponse):
    """Message record returned by the send endpoint."""

    sent_by: SentByResponse = Field(..., description="Sending user")


class PaginationMeta(BaseModel):
    """Offset pagination metadata."""

    total: int = Field(..., description="Total number of messages")
    count: int = Field(..., description="Messages in this page")
    limit: int = Field(..., description="Page size")
    offset: int = Field(..., description="Offset of the first message")
    current_page: int = Field(..., description="1-based page number")
    total_pages: int = Field(..., description="Number of pages")
    has_next_page: bool = Field(..., description="Whether a further page exists")
    has_previous_page: bool = Field(..., description="Whether an earlier page exists")

    @classmethod
    def create(cls, total: int, count: int, limit: int, offset: int) -> "PaginationMeta":
        return cls(
            total=total,
            count=count,
            limit=limit,
            offset=offset,
            current_page=offset // limit + 1,
            total_pages=math.ceil(total / limit),
            has_next_page=offset + limit < total,
            has_previous_page=offset > 0,
        )


class CacheInfo(BaseModel):
    """Provenance of a history page."""

    hit: bool = Field(..., description="Whether the page was served from cache")
    ttl_seconds: int = Field(..., description="Cache lifetime of a page")
    source: str = Field(..., description="'cache' or 'database'")


class MessageListData(BaseModel):
    """Payload of the history endpoint."""

    user: SentByResponse
    messages: List[MessageResponse]
    pagination: PaginationMeta
    cache: CacheInfo


class MessageStatsResponse(BaseModel):
    """Delivery statistics."""

    total: int
    sent: int
    failed: int
    by_platform: Dict[str, int] = Field(default_factory=dict)

    @classmethod
    def from_entity(cls, stats: MessageStats) -> "MessageStatsResponse":
        return cls(**stats.to_dict())


class MessageStatsData(BaseModel):
    """Payload of the statistics endpoint."""

    user: SentByResponse
    statistics: MessageStatsResponse
