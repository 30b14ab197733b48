"""Telemetry sinks for turn events and escaped failures.

A sink receives one named event per message turn and one exception
report per failure that escapes turn processing. Emission is
best-effort: use ``emit_event`` / ``emit_exception`` so a broken sink
never fails the turn it instruments.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from datetime import UTC, datetime

from opentelemetry import trace
from pydantic import BaseModel, ConfigDict, Field

from probebot.observability.logging import get_logger
from probebot.observability.metrics import TELEMETRY_FAILURES
from probebot.observability.tracing import record_exception

logger = get_logger(__name__)

Properties = Mapping[str, str | None]


def _utc_now() -> datetime:
    return datetime.now(UTC)


class TelemetryEvent(BaseModel):
    """A named event captured by ``InMemoryTelemetrySink``."""

    model_config = ConfigDict(frozen=True)

    name: str
    properties: dict[str, str | None] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=_utc_now)


class TelemetryException(BaseModel):
    """An exception report captured by ``InMemoryTelemetrySink``."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    exception: BaseException
    properties: dict[str, str | None] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=_utc_now)


class TelemetrySink(ABC):
    """Abstract interface for telemetry emission."""

    @abstractmethod
    def track_event(self, name: str, properties: Properties) -> None:
        """Record a named event with string properties."""
        pass

    @abstractmethod
    def track_exception(
        self, exception: BaseException, properties: Properties | None = None
    ) -> None:
        """Record a failure."""
        pass


class LoggingTelemetrySink(TelemetrySink):
    """Writes telemetry as structured log lines."""

    def track_event(self, name: str, properties: Properties) -> None:
        logger.info("telemetry_event", telemetry_name=name, properties=dict(properties))

    def track_exception(
        self, exception: BaseException, properties: Properties | None = None
    ) -> None:
        logger.error(
            "telemetry_exception",
            error_type=type(exception).__name__,
            error=str(exception),
            properties=dict(properties or {}),
            exc_info=exception,
        )


class OpenTelemetrySink(TelemetrySink):
    """Attaches telemetry to the current OpenTelemetry span.

    Events become span events; exceptions are recorded on the span,
    which is marked failed. Outside a recording span both are no-ops.
    """

    @staticmethod
    def _attributes(properties: Properties | None) -> dict[str, str]:
        return {k: v for k, v in (properties or {}).items() if v is not None}

    def track_event(self, name: str, properties: Properties) -> None:
        span = trace.get_current_span()
        if span.is_recording():
            span.add_event(name, attributes=self._attributes(properties))

    def track_exception(
        self, exception: BaseException, properties: Properties | None = None
    ) -> None:
        span = trace.get_current_span()
        if span.is_recording():
            record_exception(span, exception, attributes=self._attributes(properties))


class CompositeTelemetrySink(TelemetrySink):
    """Fans telemetry out to several sinks in order."""

    def __init__(self, sinks: Sequence[TelemetrySink]) -> None:
        self._sinks = list(sinks)

    def track_event(self, name: str, properties: Properties) -> None:
        for sink in self._sinks:
            emit_event(sink, name, properties)

    def track_exception(
        self, exception: BaseException, properties: Properties | None = None
    ) -> None:
        for sink in self._sinks:
            emit_exception(sink, exception, properties)


class InMemoryTelemetrySink(TelemetrySink):
    """Keeps telemetry in lists for testing and local debugging."""

    def __init__(self) -> None:
        self.events: list[TelemetryEvent] = []
        self.exceptions: list[TelemetryException] = []

    def track_event(self, name: str, properties: Properties) -> None:
        self.events.append(TelemetryEvent(name=name, properties=dict(properties)))

    def track_exception(
        self, exception: BaseException, properties: Properties | None = None
    ) -> None:
        self.exceptions.append(
            TelemetryException(exception=exception, properties=dict(properties or {}))
        )


def emit_event(sink: TelemetrySink, name: str, properties: Properties) -> None:
    """Send an event to ``sink``, logging and dropping any sink failure."""
    try:
        sink.track_event(name, properties)
    except Exception as e:
        TELEMETRY_FAILURES.labels(operation="track_event").inc()
        logger.warning("telemetry_event_dropped", telemetry_name=name, error=str(e))


def emit_exception(
    sink: TelemetrySink,
    exception: BaseException,
    properties: Properties | None = None,
) -> None:
    """Send an exception report to ``sink``, logging and dropping any sink failure."""
    try:
        sink.track_exception(exception, properties)
    except Exception as e:
        TELEMETRY_FAILURES.labels(operation="track_exception").inc()
        logger.warning(
            "telemetry_exception_dropped",
            error_type=type(exception).__name__,
            error=str(e),
        )


def create_telemetry_sink(backends: Sequence[str]) -> TelemetrySink:
    """Build a sink from configured backend names.

    Args:
        backends: Any of "logging", "opentelemetry", "inmemory"

    Raises:
        ValueError: On an unknown backend name
    """
    factories: dict[str, type[TelemetrySink]] = {
        "logging": LoggingTelemetrySink,
        "opentelemetry": OpenTelemetrySink,
        "inmemory": InMemoryTelemetrySink,
    }
    sinks: list[TelemetrySink] = []
    for backend in backends:
        if backend not in factories:
            raise ValueError(f"Unknown telemetry sink backend: {backend}")
        sinks.append(factories[backend]())

    if len(sinks) == 1:
        return sinks[0]
    return CompositeTelemetrySink(sinks)
