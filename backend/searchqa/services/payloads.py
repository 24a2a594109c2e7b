"""
Payload Sink

Every pipeline step is published as a row in `message_history`. The client
polls that table (GET /messages) and renders the rows in id order.

Most payloads are append-only. The streamed answer is the exception: one
`GPT` row is created up front and then updated in place with the accumulated
text after every delta.
"""

import logging
from enum import Enum
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from searchqa.models.message import MessageHistory

logger = logging.getLogger(__name__)


class PayloadType(str, Enum):
    QUERY = "Query"
    SOURCES = "Sources"
    VECTOR_CREATION = "VectorCreation"
    HEADING = "Heading"
    GPT = "GPT"
    FOLLOW_UP = "FollowUp"
    ERROR = "Error"


def make_payload(payload_type: PayloadType, content: Any) -> dict:
    return {"type": payload_type.value, "content": content}


class PayloadSink:
    """Appends and updates payload rows. Each call uses its own session."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def send_payload(self, content: dict) -> int:
        """Insert a new payload row and return its id."""
        try:
            async with self._session_factory() as session:
                row = MessageHistory(payload=content)
                session.add(row)
                await session.commit()
                return row.id
        except Exception:
            logger.exception("[Payload] Error sending payload type=%s", content.get("type"))
            raise

    async def send(self, payload_type: PayloadType, content: Any) -> int:
        return await self.send_payload(make_payload(payload_type, content))

    async def create_row(self, payload: dict) -> int:
        """Create a row that will be updated later (the streamed answer)."""
        return await self.send_payload(payload)

    async def update_row(self, row_id: int | None, payload: dict) -> int | None:
        """Replace the payload of an existing row; None if there is no such row."""
        if not row_id:
            logger.error("[Payload] Invalid row id provided to update_row: %r", row_id)
            return None

        try:
            async with self._session_factory() as session:
                row = await session.get(MessageHistory, row_id)
                if row is None:
                    logger.error("[Payload] Row %s not found for update", row_id)
                    return None
                row.payload = payload
                await session.commit()
                return row.id
        except Exception:
            logger.exception("[Payload] Error updating row %s", row_id)
            raise

    async def list_since(self, after_id: int = 0, limit: int = 100) -> list[MessageHistory]:
        """Rows with id > after_id, oldest first."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(MessageHistory)
                .where(MessageHistory.id > after_id)
                .order_by(MessageHistory.id)
                .limit(limit)
            )
            return list(result.scalars().all())


# ── Singleton ─────────────────────────────────────────────────────────────────

_sink: PayloadSink | None = None


def get_payload_sink() -> PayloadSink:
    """Get or create the payload sink bound to the application database."""
    global _sink
    if _sink is None:
        from searchqa.core.database import async_session_factory
        _sink = PayloadSink(async_session_factory)
    return _sink
