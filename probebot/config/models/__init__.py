"""Configuration models for probebot."""

from probebot.config.models.api import APIConfig
from probebot.config.models.dispatcher import DEFAULT_APOLOGY, DispatcherConfig
from probebot.config.models.observability import (
    LoggingConfig,
    ObservabilityConfig,
    TelemetryConfig,
    TracingConfig,
)
from probebot.config.models.storage import (
    ConversationStateConfig,
    MessageStoreConfig,
    StorageConfig,
)

__all__ = [
    "APIConfig",
    "DEFAULT_APOLOGY",
    "DispatcherConfig",
    "LoggingConfig",
    "ObservabilityConfig",
    "TelemetryConfig",
    "TracingConfig",
    "ConversationStateConfig",
    "MessageStoreConfig",
    "StorageConfig",
]
