"""Create the messages table.

Revision ID: 001
Revises:
Create Date: 2026-10-18

Tables: messages
"""

import sqlalchemy as sa
from alembic import op

revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create the append-only messages table."""
    op.create_table(
        "messages",
        sa.Column("id", sa.BigInteger, sa.Identity(always=True), primary_key=True),
        sa.Column(
            "time",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column("content", sa.Text, nullable=False),
    )


def downgrade() -> None:
    """Drop the messages table."""
    op.drop_table("messages")
