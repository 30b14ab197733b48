"""Turn dispatcher configuration."""

from pydantic import BaseModel, Field

DEFAULT_APOLOGY = "Sorry, it looks like something went wrong."


class DispatcherConfig(BaseModel):
    """Command behavior settings."""

    recent_limit: int = Field(
        default=5,
        gt=0,
        description="Maximum messages returned by the load command",
    )
    max_delay_ms: int = Field(
        default=5000,
        gt=0,
        description="Exclusive upper bound of the slow command's delay",
    )
    apology_message: str = Field(
        default=DEFAULT_APOLOGY,
        description="Reply sent when a turn fails",
    )
