"""Request context middleware for observability."""

import uuid
from collections.abc import Awaitable, Callable

import structlog
from fastapi import Request, Response
from opentelemetry import trace
from starlette.middleware.base import BaseHTTPMiddleware

from probebot.observability.logging import get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
TRACE_ID_HEADER = "X-Trace-ID"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Binds a request id (and trace id, when tracing) to every log line.

    An inbound X-Request-ID header is reused; otherwise one is generated.
    Both ids are echoed back as response headers.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        span_context = trace.get_current_span().get_span_context()
        trace_id = format(span_context.trace_id, "032x") if span_context.is_valid else None
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())

        with structlog.contextvars.bound_contextvars(
            request_id=request_id,
            trace_id=trace_id,
        ):
            logger.debug("request_started", method=request.method, path=request.url.path)
            response = await call_next(request)
            logger.debug(
                "request_completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
            )

        response.headers[REQUEST_ID_HEADER] = request_id
        if trace_id:
            response.headers[TRACE_ID_HEADER] = trace_id
        return response
