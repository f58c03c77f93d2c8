"""Chat endpoint request/response models."""

from datetime import datetime
from typing import Literal

from pydantic import Field, field_validator

from backend.app.models.checklist import TripChecklist
from backend.app.models.common import CamelModel
from backend.app.models.itinerary import Itinerary
from backend.app.models.session import ChatSession, ConversationMessage, ConversationState

ChatStatus = Literal["incomplete", "complete", "ready"]


class ChatRequest(CamelModel):
    """Request body for POST /api/chat."""

    session_id: str = Field(..., max_length=128)
    message: str = Field(..., max_length=4000)

    @field_validator("session_id", "message")
    @classmethod
    def not_blank(cls, v: str) -> str:
        """Reject blank values and trim surrounding whitespace."""
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class ChatResponse(CamelModel):
    """Full result of one conversation turn."""

    session_id: str
    completeness: int
    status: ChatStatus
    state: ConversationState
    checklist: TripChecklist
    history: list[ConversationMessage]
    next_question: str | None = None
    itinerary: Itinerary | None = None
    suggestions: list[str] = Field(default_factory=list)
    confidence: float | None = None
    reasoning: str | None = None
    processing_time_ms: float | None = None
    timestamp: datetime | None = None


class SessionSnapshot(CamelModel):
    """Response for GET /api/session/{session_id}."""

    session: ChatSession
    completeness: int
    message_count: int
    created_at: datetime
    last_updated: datetime


class ResetResponse(CamelModel):
    """Response for POST /api/session/{session_id}/reset."""

    success: bool
    message: str
    session: ChatSession


class FeedbackRequest(CamelModel):
    """Request body for POST /api/feedback."""

    session_id: str = Field(..., max_length=128)
    trip_id: str = Field(..., max_length=128)
    rating: int | None = Field(default=None, ge=1, le=5)
    comments: str | None = Field(default=None, max_length=4000)

    @field_validator("session_id", "trip_id")
    @classmethod
    def not_blank(cls, v: str) -> str:
        """Reject blank ids and trim surrounding whitespace."""
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class FeedbackRecord(FeedbackRequest):
    """Feedback as acknowledged, stamped with its receipt time."""

    timestamp: datetime


class FeedbackResponse(CamelModel):
    """Response for POST /api/feedback."""

    success: bool
    message: str
    feedback: FeedbackRecord
