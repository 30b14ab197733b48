"""API exception hierarchy.

All API exceptions inherit from ProbebotAPIError, whose status_code and
error_code drive the global exception handler's ErrorResponse.
"""

from probebot.api.models.errors import ErrorCode


class ProbebotAPIError(Exception):
    """Base exception for all API errors."""

    status_code: int = 500
    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class StoreUnavailableError(ProbebotAPIError):
    """Raised when a configured store cannot be initialized."""

    status_code = 503
    error_code = ErrorCode.STORE_UNAVAILABLE
