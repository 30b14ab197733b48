"""Top-level turn error policy.

Wraps the dispatcher the way a hosting adapter's turn-error hook does:
any failure escaping a turn is logged, reported to telemetry and
answered with a fixed apology, and the service keeps running.
"""

from opentelemetry.trace import SpanKind

from probebot.config.models.dispatcher import DEFAULT_APOLOGY
from probebot.dispatcher.dispatcher import TurnDispatcher
from probebot.dispatcher.models import Turn, TurnReply
from probebot.observability.logging import get_logger
from probebot.observability.metrics import TURN_ERRORS
from probebot.observability.telemetry import TelemetrySink, emit_exception
from probebot.observability.tracing import create_span

logger = get_logger(__name__)


class TurnHost:
    """Runs turns through a dispatcher and absorbs their failures.

    Cancellation is not a failure: ``asyncio.CancelledError`` passes
    through untouched and no reply is produced.
    """

    def __init__(
        self,
        dispatcher: TurnDispatcher,
        telemetry: TelemetrySink,
        apology_message: str = DEFAULT_APOLOGY,
    ) -> None:
        self._dispatcher = dispatcher
        self._telemetry = telemetry
        self._apology_message = apology_message

    async def run_turn(self, turn: Turn) -> TurnReply:
        """Process a turn, replacing any failure with the apology reply."""
        with create_span(
            "probebot.turn",
            kind=SpanKind.SERVER,
            attributes={
                "probebot.conversation_id": turn.conversation_id,
                "probebot.channel_id": turn.channel_id,
                "probebot.turn_kind": turn.kind,
            },
        ):
            try:
                reply = await self._dispatcher.process_turn(turn)
            except Exception as e:
                TURN_ERRORS.labels(error_type=type(e).__name__).inc()
                logger.error(
                    "turn_failed",
                    conversation_id=turn.conversation_id,
                    error_type=type(e).__name__,
                    error=str(e),
                    exc_info=e,
                )
                emit_exception(
                    self._telemetry,
                    e,
                    {
                        "Channel": turn.channel_id,
                        "ConversationId": turn.conversation_id,
                    },
                )
                return TurnReply(
                    conversation_id=turn.conversation_id,
                    reply=self._apology_message,
                    failed=True,
                )

        return TurnReply(conversation_id=turn.conversation_id, reply=reply)
