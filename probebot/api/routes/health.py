"""Health check and metrics endpoints."""

import time
from datetime import UTC, datetime

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from probebot import __version__
from probebot.api.dependencies import MessageStoreDep, StateStoreDep
from probebot.api.models.health import ComponentHealth, HealthResponse, HealthStatus
from probebot.conversation.store import ConversationStateStore
from probebot.messages.store import MessageStore
from probebot.observability.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


async def _check_store_health(
    store: MessageStore | ConversationStateStore, name: str
) -> ComponentHealth:
    """Run a store's health check and time it."""
    start = time.perf_counter()
    healthy = await store.health_check()

    return ComponentHealth(
        name=name,
        status="healthy" if healthy else "unhealthy",
        backend=type(store).__name__,
        latency_ms=(time.perf_counter() - start) * 1000,
    )


@router.get("/health", response_model=HealthResponse)
async def health_check(
    message_store: MessageStoreDep,
    state_store: StateStoreDep,
) -> HealthResponse:
    """Check service health status.

    Reports the overall status along with the status of each store.
    """
    components = [
        await _check_store_health(message_store, "message_store"),
        await _check_store_health(state_store, "state_store"),
    ]

    overall_status: HealthStatus = (
        "healthy" if all(c.status == "healthy" for c in components) else "unhealthy"
    )
    logger.debug("health_check_completed", status=overall_status)

    return HealthResponse(
        status=overall_status,
        version=__version__,
        components=components,
        timestamp=datetime.now(UTC),
    )


@router.get("/metrics")
async def get_metrics() -> Response:
    """Get Prometheus metrics in text format for scraping."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
