"""Turn failure taxonomy.

The dispatcher never catches these; they propagate to the turn host,
which reports them and replies with a fixed apology.
"""

from enum import Enum


class TurnErrorCode(str, Enum):
    """Machine-readable classification of turn failures."""

    INJECTED_FAULT = "INJECTED_FAULT"
    PERSISTENCE_FAILURE = "PERSISTENCE_FAILURE"
    INVALID_INPUT = "INVALID_INPUT"


class TurnError(Exception):
    """Base exception for failures raised while processing a turn."""

    error_code: TurnErrorCode

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InjectedFault(TurnError):
    """Deliberate failure raised by the ``error`` command."""

    error_code = TurnErrorCode.INJECTED_FAULT


class PersistenceFailure(TurnError):
    """Raised when a store is unreachable or rejects a read or write."""

    error_code = TurnErrorCode.PERSISTENCE_FAILURE

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class InvalidInput(TurnError):
    """Raised for malformed turns. No command currently raises it."""

    error_code = TurnErrorCode.INVALID_INPUT
