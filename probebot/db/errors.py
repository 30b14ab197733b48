"""Store error hierarchy for storage backends.

All store implementations raise these errors so callers can handle
backend failures without knowing which driver is in use.
"""


class StoreError(Exception):
    """Base exception for all store errors.

    Backends wrap driver-specific errors in one of the subclasses
    and keep the original exception on ``cause``.
    """

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class ConnectionError(StoreError):
    """Raised when the backend cannot be reached.

    Examples:
        - Database connection timeout
        - Redis server unavailable
        - Network errors
    """

    pass


class ValidationError(StoreError):
    """Raised when the backend rejects the data it was given."""

    pass
