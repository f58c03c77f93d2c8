"""SQLAlchemy ORM models for durable chat session storage."""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Index, Integer, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql import func


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class ChatSessionRecord(Base):
    """Chat session table - one row per session id, full session as JSON."""

    __tablename__ = "chat_session"
    __table_args__ = (Index("idx_chat_session_updated", "updated_at"),)

    session_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    # JSONB on Postgres, plain JSON elsewhere (SQLite in tests)
    payload: Mapped[dict[str, Any]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"), nullable=False
    )
    completeness: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
