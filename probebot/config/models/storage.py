"""Storage backend configuration models."""

from typing import Literal

from pydantic import BaseModel, Field

MessageBackendType = Literal["inmemory", "postgres"]
StateBackendType = Literal["inmemory", "redis"]


class MessageStoreConfig(BaseModel):
    """Configuration for the message store backend.

    The PostgreSQL DSN comes from PROBEBOT_DATABASE_URL or DATABASE_URL,
    never from config files.
    """

    backend: MessageBackendType = Field(
        default="inmemory",
        description="Backend type",
    )
    min_pool_size: int = Field(
        default=1,
        gt=0,
        description="Minimum connections to keep open",
    )
    max_pool_size: int = Field(
        default=10,
        gt=0,
        description="Maximum connections in pool",
    )
    command_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Default timeout for queries (seconds)",
    )


class ConversationStateConfig(BaseModel):
    """Configuration for the conversation state backend."""

    backend: StateBackendType = Field(
        default="inmemory",
        description="Backend type",
    )
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis URL, overridden by REDIS_URL",
    )
    key_prefix: str = Field(
        default="probebot:conversation",
        description="Redis key prefix for conversation state hashes",
    )


class StorageConfig(BaseModel):
    """Configuration for all storage backends."""

    messages: MessageStoreConfig = Field(
        default_factory=MessageStoreConfig,
        description="MessageStore backend",
    )
    state: ConversationStateConfig = Field(
        default_factory=ConversationStateConfig,
        description="ConversationStateStore backend",
    )
