"""Command handlers.

Each handler implements one command's side effect and returns the raw
result; reply wording belongs to the dispatcher.
"""

import asyncio
import random
from typing import NoReturn

from probebot.db.errors import StoreError
from probebot.dispatcher.errors import InjectedFault, PersistenceFailure
from probebot.messages.store import MessageStore
from probebot.observability.logging import get_logger
from probebot.observability.metrics import MESSAGES_STORED, SIMULATED_DELAY

logger = get_logger(__name__)

INJECTED_FAULT_MESSAGE = "Some random exception"


class FaultInjectionHandler:
    """Fails every time, to exercise the failure-reporting path."""

    def inject(self) -> NoReturn:
        """Raise InjectedFault. Touches nothing else."""
        logger.info("fault_injected")
        raise InjectedFault(INJECTED_FAULT_MESSAGE)


class LatencySimulationHandler:
    """Suspends the current turn for a random delay.

    The delay is drawn uniformly from ``[0, max_delay_ms)`` using a
    process-local random source. The wait is an ``asyncio.sleep``, so
    other turns keep running and the caller may cancel it.
    """

    def __init__(
        self,
        max_delay_ms: int = 5000,
        rng: random.Random | None = None,
    ) -> None:
        self._max_delay_ms = max_delay_ms
        self._rng = rng or random.Random()

    async def simulate(self) -> int:
        """Sleep for a random delay and return it in milliseconds."""
        delay_ms = int(self._rng.random() * self._max_delay_ms)
        logger.debug("latency_simulation_started", delay_ms=delay_ms)
        await asyncio.sleep(delay_ms / 1000)
        SIMULATED_DELAY.observe(delay_ms / 1000)
        return delay_ms


class StoreWriteHandler:
    """Appends message content to the message store."""

    def __init__(self, store: MessageStore) -> None:
        self._store = store

    async def write(self, content: str) -> None:
        """Append one record.

        Raises:
            PersistenceFailure: If the store is unreachable or rejects the write
        """
        try:
            record = await self._store.append(content)
        except StoreError as e:
            logger.error("store_write_failed", error=str(e))
            raise PersistenceFailure(f"Failed to save message: {e}", cause=e) from e

        MESSAGES_STORED.labels(backend=type(self._store).__name__).inc()
        logger.info("message_saved", message_id=record.id)


class StoreReadHandler:
    """Reads the most recently stored message contents."""

    def __init__(self, store: MessageStore, default_limit: int = 5) -> None:
        self._store = store
        self._default_limit = default_limit

    async def read_recent(self, limit: int | None = None) -> list[str]:
        """Return up to ``limit`` contents, newest first.

        An empty store yields an empty list.

        Raises:
            PersistenceFailure: If the store is unreachable
        """
        limit = self._default_limit if limit is None else limit
        try:
            records = await self._store.query_recent(limit)
        except StoreError as e:
            logger.error("store_read_failed", limit=limit, error=str(e))
            raise PersistenceFailure(f"Failed to load messages: {e}", cause=e) from e

        logger.debug("messages_loaded", count=len(records))
        return [record.content for record in records[:limit]]
