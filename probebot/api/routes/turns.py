"""Turn processing endpoint."""

from fastapi import APIRouter

from probebot.api.dependencies import TurnHostDep
from probebot.api.models.turns import TurnRequest, TurnResponse
from probebot.observability.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post("/turns", response_model=TurnResponse)
async def process_turn(request: TurnRequest, host: TurnHostDep) -> TurnResponse:
    """Process one inbound turn and return the bot's reply.

    Failures inside the turn do not produce an error status: the reply
    carries the apology text and ``failed`` is set.
    """
    logger.debug(
        "turn_request_received",
        conversation_id=request.conversation_id,
        kind=request.kind,
    )

    reply = await host.run_turn(request.to_turn())
    return TurnResponse.from_reply(reply)
