"""Unit tests for command handlers."""

import asyncio
import random

import pytest

from probebot.db.errors import ConnectionError
from probebot.dispatcher.errors import InjectedFault, PersistenceFailure, TurnErrorCode
from probebot.dispatcher.handlers import (
    INJECTED_FAULT_MESSAGE,
    FaultInjectionHandler,
    LatencySimulationHandler,
    StoreReadHandler,
    StoreWriteHandler,
)
from probebot.messages.models import MessageRecord
from probebot.messages.store import MessageStore
from probebot.messages.stores.inmemory import InMemoryMessageStore


class UnreachableMessageStore(MessageStore):
    """Message store whose backend is always down."""

    async def append(self, content: str) -> MessageRecord:
        raise ConnectionError("database unreachable")

    async def query_recent(self, limit: int) -> list[MessageRecord]:
        raise ConnectionError("database unreachable")


class FixedRandom(random.Random):
    """Random source that always returns the same value."""

    def __init__(self, value: float) -> None:
        super().__init__()
        self._value = value

    def random(self) -> float:
        return self._value


class TestFaultInjectionHandler:
    """Tests for FaultInjectionHandler."""

    def test_always_raises(self) -> None:
        with pytest.raises(InjectedFault) as exc_info:
            FaultInjectionHandler().inject()

        assert exc_info.value.message == INJECTED_FAULT_MESSAGE
        assert exc_info.value.error_code is TurnErrorCode.INJECTED_FAULT


class TestLatencySimulationHandler:
    """Tests for LatencySimulationHandler."""

    async def test_delay_within_bounds(self) -> None:
        """Every delay is an integer in [0, max_delay_ms)."""
        handler = LatencySimulationHandler(max_delay_ms=5, rng=random.Random(7))
        for _ in range(20):
            delay = await handler.simulate()
            assert isinstance(delay, int)
            assert 0 <= delay < 5

    async def test_delay_follows_random_source(self) -> None:
        """The reported delay is the random draw scaled to the bound."""
        handler = LatencySimulationHandler(max_delay_ms=20, rng=random.Random(42))
        expected = int(random.Random(42).random() * 20)
        assert await handler.simulate() == expected

    async def test_waits_for_reported_delay(self) -> None:
        """The handler actually suspends for the delay it reports."""
        handler = LatencySimulationHandler(max_delay_ms=100, rng=FixedRandom(0.3))
        loop = asyncio.get_running_loop()

        start = loop.time()
        delay = await handler.simulate()
        elapsed_ms = (loop.time() - start) * 1000

        assert delay == 30
        assert elapsed_ms >= 25

    async def test_wait_is_cancellable(self) -> None:
        """Cancelling the turn interrupts the sleep."""
        handler = LatencySimulationHandler(max_delay_ms=10_000, rng=FixedRandom(0.9))
        task = asyncio.create_task(handler.simulate())
        await asyncio.sleep(0)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task


class TestStoreHandlers:
    """Tests for StoreWriteHandler and StoreReadHandler."""

    async def test_write_then_read(self) -> None:
        store = InMemoryMessageStore()
        writer = StoreWriteHandler(store)
        reader = StoreReadHandler(store, default_limit=2)

        for content in ("a", "b", "c"):
            await writer.write(content)

        assert await reader.read_recent() == ["c", "b"]
        assert await reader.read_recent(limit=5) == ["c", "b", "a"]

    async def test_write_failure_becomes_persistence_failure(self) -> None:
        with pytest.raises(PersistenceFailure) as exc_info:
            await StoreWriteHandler(UnreachableMessageStore()).write("x")

        assert isinstance(exc_info.value.cause, ConnectionError)
        assert exc_info.value.error_code is TurnErrorCode.PERSISTENCE_FAILURE

    async def test_read_failure_becomes_persistence_failure(self) -> None:
        with pytest.raises(PersistenceFailure):
            await StoreReadHandler(UnreachableMessageStore()).read_recent()
