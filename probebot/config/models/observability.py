"""Observability configuration models."""

from typing import Literal

from pydantic import BaseModel, Field

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LogFormat = Literal["json", "console"]
TelemetryBackend = Literal["logging", "opentelemetry", "inmemory"]


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(default="INFO", description="Log level")
    format: LogFormat = Field(default="json", description="Output format")
    redact_pii: bool = Field(default=True, description="Redact PII from log lines")


class TracingConfig(BaseModel):
    """Distributed tracing configuration."""

    enabled: bool = Field(default=False, description="Enable tracing")
    service_name: str = Field(default="probebot", description="Service name for traces")
    otlp_endpoint: str | None = Field(
        default=None,
        description="OTLP exporter endpoint",
    )
    console_export: bool = Field(default=False, description="Print spans to stdout")


class TelemetryConfig(BaseModel):
    """Telemetry sink configuration."""

    sinks: list[TelemetryBackend] = Field(
        default_factory=lambda: ["logging", "opentelemetry"],
        description="Sinks receiving turn events and escaped failures",
    )


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging settings",
    )
    tracing: TracingConfig = Field(
        default_factory=TracingConfig,
        description="Tracing settings",
    )
    telemetry: TelemetryConfig = Field(
        default_factory=TelemetryConfig,
        description="Telemetry sink settings",
    )
