"""Dependency injection for API routes.

Builds the shared stores, telemetry sink, dispatcher and turn host from
settings. Instances are created once and reused across requests, and
can be overridden for testing through ``app.dependency_overrides``.
"""

import asyncio
import os
from functools import lru_cache
from typing import Annotated

import redis.asyncio as redis
from fastapi import Depends

from probebot.api.exceptions import StoreUnavailableError
from probebot.config.loader import load_config
from probebot.config.settings import Settings, set_toml_config
from probebot.conversation.store import ConversationStateStore
from probebot.conversation.stores.inmemory import InMemoryConversationStateStore
from probebot.conversation.stores.redis import RedisConversationStateStore
from probebot.db.errors import StoreError
from probebot.db.pool import PostgresPool
from probebot.dispatcher.dispatcher import TurnDispatcher
from probebot.dispatcher.host import TurnHost
from probebot.messages.store import MessageStore
from probebot.messages.stores.inmemory import InMemoryMessageStore
from probebot.messages.stores.postgres import PostgresMessageStore
from probebot.observability.logging import get_logger
from probebot.observability.telemetry import TelemetrySink, create_telemetry_sink

logger = get_logger(__name__)

# Connection pool and client instances - shared across stores
_postgres_pool: PostgresPool | None = None
_redis_client: redis.Redis | None = None
_postgres_pool_lock = asyncio.Lock()

# Long-lived collaborators - created once and reused by every turn
_message_store: MessageStore | None = None
_state_store: ConversationStateStore | None = None
_telemetry_sink: TelemetrySink | None = None
_dispatcher: TurnDispatcher | None = None
_turn_host: TurnHost | None = None


@lru_cache
def get_settings() -> Settings:
    """Get application settings.

    Loads configuration from TOML files and environment variables,
    falling back to model defaults when no config file exists.
    """
    try:
        set_toml_config(load_config())
    except FileNotFoundError:
        logger.warning("config_file_not_found", msg="Using default configuration")
        set_toml_config({})

    return Settings()


async def get_postgres_pool(
    settings: Annotated[Settings, Depends(get_settings)],
) -> PostgresPool:
    """Get the shared PostgreSQL connection pool, connecting on first access.

    Concurrent first callers wait on one connect and share its pool.
    """
    global _postgres_pool
    if _postgres_pool is not None:
        return _postgres_pool

    async with _postgres_pool_lock:
        if _postgres_pool is None:
            config = settings.storage.messages
            pool = PostgresPool(
                min_size=config.min_pool_size,
                max_size=config.max_pool_size,
                command_timeout=config.command_timeout,
            )
            await pool.connect()
            _postgres_pool = pool
    return _postgres_pool


def get_redis_client(settings: Annotated[Settings, Depends(get_settings)]) -> redis.Redis:
    """Get the shared Redis client. REDIS_URL overrides the configured URL."""
    global _redis_client
    if _redis_client is None:
        redis_url = os.environ.get("REDIS_URL", settings.storage.state.redis_url)
        _redis_client = redis.from_url(redis_url, decode_responses=True)
        # Log without credentials
        logger.info("redis_client_created", url=redis_url.split("@")[-1])
    return _redis_client


async def get_message_store(
    settings: Annotated[Settings, Depends(get_settings)],
) -> MessageStore:
    """Get the MessageStore for the configured backend.

    Raises:
        StoreUnavailableError: If the PostgreSQL backend cannot be reached
    """
    global _message_store
    if _message_store is None:
        backend = settings.storage.messages.backend
        if backend == "postgres":
            try:
                pool = await get_postgres_pool(settings)
            except StoreError as e:
                logger.error("message_store_unavailable", backend=backend, error=str(e))
                raise StoreUnavailableError("Message store is unavailable") from e
            # Another caller may have finished first while the pool connected
            if _message_store is None:
                _message_store = PostgresMessageStore(pool)
        else:
            _message_store = InMemoryMessageStore()
        logger.info("message_store_initialized", store_type=backend)
    return _message_store


def get_state_store(
    settings: Annotated[Settings, Depends(get_settings)],
) -> ConversationStateStore:
    """Get the ConversationStateStore for the configured backend."""
    global _state_store
    if _state_store is None:
        config = settings.storage.state
        if config.backend == "redis":
            _state_store = RedisConversationStateStore(
                get_redis_client(settings),
                key_prefix=config.key_prefix,
            )
        else:
            _state_store = InMemoryConversationStateStore()
        logger.info("state_store_initialized", store_type=config.backend)
    return _state_store


def get_telemetry_sink(
    settings: Annotated[Settings, Depends(get_settings)],
) -> TelemetrySink:
    """Get the telemetry sink built from the configured sink backends."""
    global _telemetry_sink
    if _telemetry_sink is None:
        sinks = settings.observability.telemetry.sinks
        _telemetry_sink = create_telemetry_sink(sinks)
        logger.info("telemetry_sink_initialized", sinks=sinks)
    return _telemetry_sink


def get_dispatcher(
    message_store: Annotated[MessageStore, Depends(get_message_store)],
    state_store: Annotated[ConversationStateStore, Depends(get_state_store)],
    telemetry: Annotated[TelemetrySink, Depends(get_telemetry_sink)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> TurnDispatcher:
    """Get the TurnDispatcher wired to the shared stores."""
    global _dispatcher
    if _dispatcher is None:
        _dispatcher = TurnDispatcher(
            message_store=message_store,
            state_store=state_store,
            telemetry=telemetry,
            config=settings.dispatcher,
        )
        logger.info("turn_dispatcher_initialized")
    return _dispatcher


def get_turn_host(
    dispatcher: Annotated[TurnDispatcher, Depends(get_dispatcher)],
    telemetry: Annotated[TelemetrySink, Depends(get_telemetry_sink)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> TurnHost:
    """Get the TurnHost applying the turn failure policy."""
    global _turn_host
    if _turn_host is None:
        _turn_host = TurnHost(
            dispatcher,
            telemetry,
            apology_message=settings.dispatcher.apology_message,
        )
    return _turn_host


# Type aliases for dependency injection
MessageStoreDep = Annotated[MessageStore, Depends(get_message_store)]
StateStoreDep = Annotated[ConversationStateStore, Depends(get_state_store)]
TurnHostDep = Annotated[TurnHost, Depends(get_turn_host)]


async def reset_dependencies() -> None:
    """Reset all cached dependencies, closing connections first.

    Used at shutdown and in tests to ensure fresh instances.
    """
    global _postgres_pool, _postgres_pool_lock, _redis_client
    global _message_store, _state_store, _telemetry_sink, _dispatcher, _turn_host

    if _postgres_pool is not None:
        await _postgres_pool.close()
        _postgres_pool = None
    # A lock binds to the event loop that first waits on it
    _postgres_pool_lock = asyncio.Lock()

    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None

    _message_store = None
    _state_store = None
    _telemetry_sink = None
    _dispatcher = None
    _turn_host = None
    get_settings.cache_clear()
