"""Chat session table

Revision ID: 001
Revises:
Create Date: 2026-10-18

Creates the durable session tier:
- chat_session (session_id, payload, completeness, created_at, updated_at)
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create chat_session table."""
    op.create_table(
        "chat_session",
        sa.Column("session_id", sa.String(length=128), primary_key=True),
        sa.Column(
            "payload",
            sa.JSON().with_variant(postgresql.JSONB(), "postgresql"),
            nullable=False,
        ),
        sa.Column("completeness", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("idx_chat_session_updated", "chat_session", ["updated_at"])


def downgrade() -> None:
    """Drop chat_session table."""
    op.drop_index("idx_chat_session_updated", table_name="chat_session")
    op.drop_table("chat_session")
