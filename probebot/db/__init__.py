"""Database utilities for probebot.

This module contains:
- Connection pool management
- Store error hierarchy
- Alembic migrations
"""

from probebot.db.errors import (
    ConnectionError,
    StoreError,
    ValidationError,
)

__all__ = [
    "StoreError",
    "ConnectionError",
    "ValidationError",
]
