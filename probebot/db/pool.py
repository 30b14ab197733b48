"""PostgreSQL connection pool management.

Provides a shared asyncpg pool for the PostgreSQL-backed stores.
"""

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import asyncpg

from probebot.db.errors import ConnectionError
from probebot.observability.logging import get_logger

logger = get_logger(__name__)

DSN_ENV_VARS = ("PROBEBOT_DATABASE_URL", "DATABASE_URL")


def resolve_dsn() -> str | None:
    """Return the first DSN set in PROBEBOT_DATABASE_URL or DATABASE_URL."""
    return next((os.environ[name] for name in DSN_ENV_VARS if os.environ.get(name)), None)


class PostgresPool:
    """Manages an asyncpg connection pool with health checks.

    Usage:
        pool = PostgresPool(dsn="postgresql://...")
        await pool.connect()
        try:
            async with pool.acquire() as conn:
                result = await conn.fetch("SELECT * FROM messages")
        finally:
            await pool.close()
    """

    def __init__(
        self,
        dsn: str | None = None,
        min_size: int = 1,
        max_size: int = 10,
        command_timeout: float = 30.0,
    ) -> None:
        """Initialize pool configuration.

        Args:
            dsn: Database connection string. Defaults to ``resolve_dsn()``.
            min_size: Minimum number of connections to keep open.
            max_size: Maximum number of connections in the pool.
            command_timeout: Default timeout for queries (seconds).

        Raises:
            ConnectionError: If no DSN is given or set in the environment
        """
        resolved = dsn or resolve_dsn()
        if not resolved:
            raise ConnectionError(
                "No PostgreSQL DSN: set PROBEBOT_DATABASE_URL or DATABASE_URL"
            )
        self._dsn = resolved
        self._min_size = min_size
        self._max_size = max_size
        self._command_timeout = command_timeout
        self._pool: asyncpg.Pool | None = None

    async def connect(self) -> None:
        """Create the asyncpg pool. Does nothing when already connected.

        Raises:
            ConnectionError: If the server cannot be reached or refuses the login
        """
        if self._pool is not None:
            return

        try:
            self._pool = await asyncpg.create_pool(
                dsn=self._dsn,
                min_size=self._min_size,
                max_size=self._max_size,
                command_timeout=self._command_timeout,
            )
        except (OSError, TimeoutError, asyncpg.PostgresError) as e:
            logger.error("postgres_pool_connection_failed", error=str(e))
            raise ConnectionError(f"Failed to connect to PostgreSQL: {e}", cause=e) from e
        logger.info("postgres_pool_connected", min_size=self._min_size, max_size=self._max_size)

    async def close(self) -> None:
        """Close the pool, waiting for checked-out connections to be released."""
        pool, self._pool = self._pool, None
        if pool is not None:
            await pool.close()
            logger.info("postgres_pool_closed")

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[asyncpg.Connection]:
        """Check out a connection, connecting the pool on first use.

        Lost connections surface as ConnectionError; statement errors raised
        inside the block propagate unchanged for the store to classify.
        """
        await self.connect()
        try:
            async with self._pool.acquire() as connection:
                yield connection
        except (OSError, asyncpg.InterfaceError) as e:
            logger.error("postgres_connection_error", error=str(e))
            raise ConnectionError(f"PostgreSQL unavailable: {e}", cause=e) from e

    async def health_check(self) -> bool:
        """Run ``SELECT 1``; False when disconnected or the server does not answer."""
        if self._pool is None:
            return False
        try:
            return await self._pool.fetchval("SELECT 1") == 1
        except (OSError, TimeoutError, asyncpg.PostgresError, asyncpg.InterfaceError) as e:
            logger.warning("postgres_health_check_failed", error=str(e))
            return False

    @property
    def is_connected(self) -> bool:
        """Whether connect() has created the pool."""
        return self._pool is not None
