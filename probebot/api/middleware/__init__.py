"""API middleware package."""

from probebot.api.middleware.context import RequestContextMiddleware

__all__ = ["RequestContextMiddleware"]
