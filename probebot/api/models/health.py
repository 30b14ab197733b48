"""Health check response models."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

HealthStatus = Literal["healthy", "unhealthy"]


class ComponentHealth(BaseModel):
    """Health of one backing component."""

    name: str
    status: HealthStatus
    backend: str
    latency_ms: float | None = None


class HealthResponse(BaseModel):
    """Overall service health."""

    status: HealthStatus
    version: str
    components: list[ComponentHealth] = Field(default_factory=list)
    timestamp: datetime
