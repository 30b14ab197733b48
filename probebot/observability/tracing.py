"""OpenTelemetry tracing setup.

Provides tracer initialization, span creation and exception recording.
"""

import os
from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.trace import Span, SpanKind, Status, StatusCode, Tracer

_tracer: Tracer | None = None


def setup_tracing(
    service_name: str = "probebot",
    otlp_endpoint: str | None = None,
    console_export: bool = False,
) -> Tracer:
    """Initialize OpenTelemetry tracing.

    Args:
        service_name: Name to identify this service in traces
        otlp_endpoint: OTLP gRPC endpoint (e.g., "localhost:4317").
                       Falls back to OTEL_EXPORTER_OTLP_ENDPOINT env var
        console_export: Also export spans to console (for debugging)

    Returns:
        Configured Tracer instance
    """
    global _tracer

    provider = TracerProvider(resource=Resource.create({SERVICE_NAME: service_name}))

    endpoint = otlp_endpoint or os.environ.get("OTEL_EXPORTER_OTLP_ENDPOINT")
    if endpoint:
        provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint, insecure=True))
        )

    if console_export:
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(provider)
    _tracer = trace.get_tracer(service_name)
    return _tracer


def get_tracer() -> Tracer:
    """Get the configured tracer, or the global (possibly no-op) tracer."""
    if _tracer is None:
        return trace.get_tracer("probebot")
    return _tracer


@contextmanager
def create_span(
    name: str,
    kind: SpanKind = SpanKind.INTERNAL,
    attributes: dict[str, Any] | None = None,
) -> Generator[Span, None, None]:
    """Create a new span as the current span.

    Args:
        name: Span name
        kind: Span kind (INTERNAL, SERVER, CLIENT, etc.)
        attributes: Initial span attributes; None values are dropped

    Yields:
        The created span
    """
    clean = {k: v for k, v in (attributes or {}).items() if v is not None}
    with get_tracer().start_as_current_span(name, kind=kind, attributes=clean) as span:
        yield span


def record_exception(
    span: Span,
    exception: BaseException,
    attributes: dict[str, Any] | None = None,
) -> None:
    """Record an exception on a span and mark the span as failed."""
    span.record_exception(exception, attributes=attributes)
    span.set_status(Status(StatusCode.ERROR, type(exception).__name__))
