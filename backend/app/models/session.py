"""Chat session models - conversation history and per-session state."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Literal

from pydantic import Field

from backend.app.models.checklist import TripChecklist
from backend.app.models.common import CamelModel
from backend.app.models.itinerary import Itinerary


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


class ConversationState(str, Enum):
    """Lifecycle of a planning conversation."""

    new = "new"
    collecting = "collecting"
    ready = "ready"
    supporting = "supporting"


class ConversationMessage(CamelModel):
    """One turn of the conversation."""

    role: Literal["user", "assistant"]
    content: str
    timestamp: datetime = Field(default_factory=utcnow)
    # Delta extracted from this user turn, kept for audit/debugging
    extracted_fields: dict[str, Any] | None = None


class ChatSession(CamelModel):
    """Aggregate state for one session id."""

    session_id: str
    checklist: TripChecklist = Field(default_factory=TripChecklist)
    history: list[ConversationMessage] = Field(default_factory=list)
    completeness: int = Field(0, ge=0, le=100)
    state: ConversationState = ConversationState.new
    itinerary_generated: bool = False
    itinerary: Itinerary | None = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
