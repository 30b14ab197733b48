"""PostgreSQL implementation of MessageStore.

Uses asyncpg through the shared PostgresPool. Ids come from the
``messages.id`` identity column and ``time`` from the column default,
so both are assigned by the database.
"""

import asyncpg

from probebot.db.errors import ConnectionError, StoreError, ValidationError
from probebot.db.pool import PostgresPool
from probebot.messages.models import MessageRecord
from probebot.messages.store import MessageStore
from probebot.observability.logging import get_logger

logger = get_logger(__name__)

# Server-side unavailability rather than a rejected statement
_UNAVAILABLE_ERRORS = (
    asyncpg.PostgresConnectionError,
    asyncpg.OperatorInterventionError,
    TimeoutError,
)


def _store_error(message: str, error: Exception) -> StoreError:
    if isinstance(error, _UNAVAILABLE_ERRORS):
        return ConnectionError(f"{message}: {error}", cause=error)
    return ValidationError(f"{message}: {error}", cause=error)


class PostgresMessageStore(MessageStore):
    """PostgreSQL implementation of MessageStore.

    Each append is a single INSERT ... RETURNING statement, so a write
    either commits fully or not at all, including on cancellation.
    """

    def __init__(self, pool: PostgresPool) -> None:
        """Initialize with connection pool.

        Args:
            pool: PostgreSQL connection pool
        """
        self._pool = pool

    async def append(self, content: str) -> MessageRecord:
        """Persist ``content`` and return the stored record."""
        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    """
                    INSERT INTO messages (content)
                    VALUES ($1)
                    RETURNING id, time, content
                    """,
                    content,
                )
        except (asyncpg.PostgresError, TimeoutError) as e:
            logger.error("postgres_append_message_error", error=str(e))
            raise _store_error("Failed to append message", e) from e

        record = self._row_to_record(row)
        logger.debug("message_appended", message_id=record.id)
        return record

    async def query_recent(self, limit: int) -> list[MessageRecord]:
        """Return up to ``limit`` records, newest first."""
        if limit <= 0:
            return []

        try:
            async with self._pool.acquire() as conn:
                rows = await conn.fetch(
                    """
                    SELECT id, time, content
                    FROM messages
                    ORDER BY id DESC
                    LIMIT $1
                    """,
                    limit,
                )
        except (asyncpg.PostgresError, TimeoutError) as e:
            logger.error("postgres_query_recent_error", limit=limit, error=str(e))
            raise _store_error("Failed to query messages", e) from e

        return [self._row_to_record(row) for row in rows]

    async def health_check(self) -> bool:
        """Return whether the database answers a trivial query."""
        return await self._pool.health_check()

    @staticmethod
    def _row_to_record(row: asyncpg.Record) -> MessageRecord:
        return MessageRecord(id=row["id"], time=row["time"], content=row["content"])
