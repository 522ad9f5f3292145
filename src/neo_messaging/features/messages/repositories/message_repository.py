"""Message repository for database operations."""

import logging
import re
from typing import Dict, List, Optional

import asyncpg

from ....core.exceptions import DatabaseError
from ..entities.message import OutboundMessage

logger = logging.getLogger(__name__)

_SCHEMA_NAME_RE = re.compile(r"^[a-z_][a-z0-9_]{0,62}$")


class MessageRepository:
    """Repository for outbound message records in PostgreSQL."""

    def __init__(self, database_manager, schema_name: str = "messaging"):
        """Initialize message repository."""
        if not database_manager:
            raise ValueError("Database manager is required")
        self.db = database_manager
        self.schema = self._validate_schema_name(schema_name)

    def _validate_schema_name(self, schema_name: str) -> str:
        """Validate schema name to prevent SQL injection."""
        if _SCHEMA_NAME_RE.match(schema_name):
            return schema_name
        raise ValueError(f"Invalid schema name: {schema_name}")

    async def ensure_schema(self) -> None:
        """Create the schema, table and index if they do not exist."""
        async with self.db.acquire() as conn:
            await conn.execute(f"CREATE SCHEMA IF NOT EXISTS {self.schema}")
            await conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {self.schema}.messages (
                    id UUID PRIMARY KEY,
                    sender_id TEXT NOT NULL,
                    recipients TEXT[] NOT NULL,
                    platform TEXT NOT NULL,
                    content TEXT NOT NULL,
                    file_url TEXT,
                    sent BOOLEAN NOT NULL DEFAULT FALSE,
                    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
                )
                """
            )
            await conn.execute(
                f"""
                CREATE INDEX IF NOT EXISTS idx_messages_sender_created
                ON {self.schema}.messages (sender_id, created_at DESC)
                """
            )
        logger.info(f"Ensured message table in schema {self.schema}")

    async def save(self, message: OutboundMessage) -> OutboundMessage:
        """Insert a message record."""
        try:
            async with self.db.acquire() as conn:
                await conn.execute(
                    f"""
                    INSERT INTO {self.schema}.messages
                    (id, sender_id, recipients, platform, content, file_url, sent, created_at)
                    VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
                    """,
                    message.id,
                    message.sender_id,
                    message.recipients,
                    message.platform.value,
                    message.content,
                    message.file_url,
                    message.sent,
                    message.created_at,
                )
        except (asyncpg.PostgresError, OSError) as e:
            logger.error(f"Failed to save message {message.id}: {e}")
            raise DatabaseError("Failed to save message", operation="save") from e

        logger.debug(f"Saved message {message.id} for sender {message.sender_id}")
        return message

    async def find_by_sender(self, sender_id: str, limit: int, offset: int) -> List[OutboundMessage]:
        """Get a page of a sender's messages, newest first."""
        try:
            async with self.db.acquire() as conn:
                rows = await conn.fetch(
                    f"""
                    SELECT id, sender_id, recipients, platform, content, file_url, sent, created_at
                    FROM {self.schema}.messages
                    WHERE sender_id = $1
                    ORDER BY created_at DESC, id DESC
                    LIMIT $2 OFFSET $3
                    """,
                    sender_id, limit, offset
                )
        except (asyncpg.PostgresError, OSError) as e:
            logger.error(f"Failed to list messages for sender {sender_id}: {e}")
            raise DatabaseError("Failed to list messages", operation="find_by_sender") from e

        return [self._map_row(row) for row in rows]

    async def count_by_sender(self, sender_id: str, sent: Optional[bool] = None) -> int:
        """Count a sender's messages, optionally filtered by delivery outcome."""
        query = f"SELECT COUNT(*) FROM {self.schema}.messages WHERE sender_id = $1"
        args = [sender_id]
        if sent is not None:
            query += " AND sent = $2"
            args.append(sent)

        try:
            async with self.db.acquire() as conn:
                return await conn.fetchval(query, *args)
        except (asyncpg.PostgresError, OSError) as e:
            logger.error(f"Failed to count messages for sender {sender_id}: {e}")
            raise DatabaseError("Failed to count messages", operation="count_by_sender") from e

    async def count_by_platform(self, sender_id: str) -> Dict[str, int]:
        """Count a sender's messages grouped by platform."""
        try:
            async with self.db.acquire() as conn:
                rows = await conn.fetch(
                    f"""
                    SELECT platform, COUNT(*) AS count
                    FROM {self.schema}.messages
                    WHERE sender_id = $1
                    GROUP BY platform
                    ORDER BY count DESC
                    """,
                    sender_id
                )
        except (asyncpg.PostgresError, OSError) as e:
            logger.error(f"Failed to aggregate messages for sender {sender_id}: {e}")
            raise DatabaseError("Failed to aggregate messages", operation="count_by_platform") from e

        return {row["platform"]: row["count"] for row in rows}

    def _map_row(self, row) -> OutboundMessage:
        return OutboundMessage(
            id=row["id"],
            sender_id=row["sender_id"],
            recipients=list(row["recipients"]),
            platform=row["platform"],
            content=row["content"],
            file_url=row["file_url"],
            sent=row["sent"],
            created_at=row["created_at"],
        )
