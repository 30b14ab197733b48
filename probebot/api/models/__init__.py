"""API request and response models."""

from probebot.api.models.errors import ErrorBody, ErrorCode, ErrorDetail, ErrorResponse
from probebot.api.models.health import ComponentHealth, HealthResponse
from probebot.api.models.turns import TurnRequest, TurnResponse

__all__ = [
    "ErrorBody",
    "ErrorCode",
    "ErrorDetail",
    "ErrorResponse",
    "ComponentHealth",
    "HealthResponse",
    "TurnRequest",
    "TurnResponse",
]
