"""Turn Dispatcher - classifies a turn and runs its command.

The dispatcher holds no per-turn state and is safe to call from many
concurrent turns. It never catches handler failures: InjectedFault and
PersistenceFailure propagate to the caller (see ``TurnHost``).
"""

import random
import time

import structlog

from probebot.config.models.dispatcher import DispatcherConfig
from probebot.conversation.models import TURN_COUNT_PROPERTY
from probebot.conversation.store import ConversationStateStore
from probebot.db.errors import StoreError
from probebot.dispatcher.classifier import classify_command
from probebot.dispatcher.errors import PersistenceFailure
from probebot.dispatcher.handlers import (
    FaultInjectionHandler,
    LatencySimulationHandler,
    StoreReadHandler,
    StoreWriteHandler,
)
from probebot.dispatcher.models import Command, CommandMatch, Turn
from probebot.messages.store import MessageStore
from probebot.observability.logging import get_logger
from probebot.observability.metrics import TURN_LATENCY, TURNS_PROCESSED
from probebot.observability.telemetry import TelemetrySink, emit_event
from probebot.observability.tracing import create_span

logger = get_logger(__name__)

MESSAGE_EVENT_NAME = "BotQuestion"
LOAD_HEADER = "Loaded these messages from the DB:\n"


class TurnDispatcher:
    """Turns inbound turns into reply text.

    Args:
        message_store: Shared message store used by save/load
        state_store: Shared per-conversation state
        telemetry: Sink receiving one event per non-empty message turn
        config: Command settings (recent limit, delay bound)
        rng: Random source for the slow command
    """

    def __init__(
        self,
        message_store: MessageStore,
        state_store: ConversationStateStore,
        telemetry: TelemetrySink,
        config: DispatcherConfig | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._config = config or DispatcherConfig()
        self._state_store = state_store
        self._telemetry = telemetry

        self._fault = FaultInjectionHandler()
        self._latency = LatencySimulationHandler(self._config.max_delay_ms, rng=rng)
        self._writer = StoreWriteHandler(message_store)
        self._reader = StoreReadHandler(message_store, self._config.recent_limit)

    async def process_turn(self, turn: Turn) -> str:
        """Process one turn and return the reply text.

        Raises:
            InjectedFault: For the ``error`` command
            PersistenceFailure: When a store fails
        """
        if not turn.is_message:
            logger.debug("event_turn_received", kind=turn.kind)
            return f"{turn.kind} event detected"

        text = turn.text or ""
        with structlog.contextvars.bound_contextvars(
            conversation_id=turn.conversation_id,
            channel_id=turn.channel_id,
        ):
            self._track_message(turn, text)
            turn_count = await self._count_turn(turn.conversation_id)

            match = classify_command(text)
            TURNS_PROCESSED.labels(command=match.command.value).inc()
            logger.info(
                "turn_dispatched",
                command=match.command.value,
                turn_count=turn_count,
            )

            start_time = time.perf_counter()
            try:
                with create_span(
                    f"probebot.command.{match.command.value}",
                    attributes={
                        "probebot.conversation_id": turn.conversation_id,
                        "probebot.channel_id": turn.channel_id,
                        "probebot.command": match.command.value,
                    },
                ):
                    return await self._execute(match)
            finally:
                TURN_LATENCY.labels(command=match.command.value).observe(
                    time.perf_counter() - start_time
                )

    async def _execute(self, match: CommandMatch) -> str:
        if match.command is Command.FAULT:
            self._fault.inject()

        if match.command is Command.SLOW:
            delay_ms = await self._latency.simulate()
            return f"That was slow... {delay_ms}ms"

        if match.command is Command.SAVE:
            await self._writer.write(match.payload)
            return f"Saved {match.payload} to the DB"

        if match.command is Command.LOAD:
            contents = await self._reader.read_recent()
            return LOAD_HEADER + "".join(f"{content}\n" for content in contents)

        return f"You sent '{match.payload}'"

    def _track_message(self, turn: Turn, text: str) -> None:
        if text == "":
            return
        emit_event(
            self._telemetry,
            MESSAGE_EVENT_NAME,
            {
                "BotQuestion": text,
                "Name": turn.sender_name,
                "Channel": turn.channel_id,
                "ConversationId": turn.conversation_id,
            },
        )

    async def _count_turn(self, conversation_id: str) -> int:
        try:
            return await self._state_store.increment(conversation_id, TURN_COUNT_PROPERTY)
        except StoreError as e:
            logger.error("conversation_state_failed", error=str(e))
            raise PersistenceFailure(
                f"Failed to update conversation state: {e}", cause=e
            ) from e
