"""Error response models for consistent API error handling."""

from enum import Enum

from pydantic import BaseModel


class ErrorCode(str, Enum):
    """Standardized error codes for API responses."""

    INVALID_INPUT = "INVALID_INPUT"
    """Request validation failed (malformed JSON, missing fields, etc.)."""

    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"
    """A storage backend could not be reached."""

    INTERNAL_ERROR = "INTERNAL_ERROR"
    """An unexpected internal error occurred."""


class ErrorDetail(BaseModel):
    """Field-level error information for validation failures."""

    field: str | None = None
    message: str


class ErrorBody(BaseModel):
    """Error body content for API error responses."""

    code: ErrorCode
    message: str
    details: list[ErrorDetail] | None = None


class ErrorResponse(BaseModel):
    """Standard error response format for all API errors.

    Example:
        {
            "error": {
                "code": "INVALID_INPUT",
                "message": "Request validation failed"
            }
        }
    """

    error: ErrorBody
