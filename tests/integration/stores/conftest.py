"""Pytest fixtures for store integration tests.

Tests run against real PostgreSQL and Redis instances named by
TEST_DATABASE_URL and TEST_REDIS_URL, and skip when either is unset
or unreachable.
"""

import os
from collections.abc import AsyncIterator
from uuid import uuid4

import pytest
import pytest_asyncio
import redis.asyncio as redis

from probebot.db.errors import ConnectionError
from probebot.db.pool import PostgresPool

MESSAGES_TABLE_DDL = """
CREATE TABLE IF NOT EXISTS messages (
    id BIGINT GENERATED ALWAYS AS IDENTITY PRIMARY KEY,
    time TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    content TEXT NOT NULL
)
"""


@pytest_asyncio.fixture(scope="function")
async def postgres_pool() -> AsyncIterator[PostgresPool]:
    """Create a PostgreSQL pool on an empty messages table.

    Uses function scope to avoid event loop issues across tests.
    """
    dsn = os.environ.get("TEST_DATABASE_URL")
    if not dsn:
        pytest.skip("TEST_DATABASE_URL not set")

    pool = PostgresPool(dsn=dsn, min_size=2, max_size=5)
    try:
        await pool.connect()
    except ConnectionError as e:
        pytest.skip(f"PostgreSQL not available: {e}")

    async with pool.acquire() as conn:
        await conn.execute(MESSAGES_TABLE_DDL)
        await conn.execute("TRUNCATE messages RESTART IDENTITY")

    yield pool

    await pool.close()


@pytest_asyncio.fixture(scope="function")
async def redis_client() -> AsyncIterator[redis.Redis]:
    """Create a Redis client for tests.

    Uses function scope to avoid event loop issues across tests.
    """
    url = os.environ.get("TEST_REDIS_URL")
    if not url:
        pytest.skip("TEST_REDIS_URL not set")

    client = redis.from_url(url, decode_responses=True)
    try:
        await client.ping()
    except redis.ConnectionError:
        await client.aclose()
        pytest.skip("Redis connection failed")

    yield client

    await client.aclose()


@pytest.fixture
def key_prefix() -> str:
    """Unique key prefix for test isolation."""
    return f"test_probebot:{uuid4().hex}"


@pytest_asyncio.fixture
async def clean_redis(redis_client: redis.Redis, key_prefix: str) -> AsyncIterator[None]:
    """Delete this test's Redis keys afterwards."""
    yield

    async for key in redis_client.scan_iter(match=f"{key_prefix}:*"):
        await redis_client.delete(key)
