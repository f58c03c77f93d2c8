"""Chat endpoints - POST /api/chat, session inspection/reset and trip feedback."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, status

from backend.app.api.deps import get_conversation_engine
from backend.app.models.chat import (
    ChatRequest,
    ChatResponse,
    FeedbackRecord,
    FeedbackRequest,
    FeedbackResponse,
    ResetResponse,
    SessionSnapshot,
)
from backend.app.models.session import utcnow
from backend.app.orchestration.conversation import ConversationEngine

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])

APOLOGY = "Sorry, something went wrong while planning your trip. Please try again."

SessionId = Annotated[str, Path(min_length=1, max_length=128)]
Engine = Annotated[ConversationEngine, Depends(get_conversation_engine)]


@router.post("/chat", response_model=ChatResponse)
async def chat(request: ChatRequest, engine: Engine) -> ChatResponse:
    """Process one chat message.

    Args:
        request: Session id and message (blank values rejected with 422)
        engine: Conversation engine

    Returns:
        Updated checklist, history, completeness and optional itinerary

    Raises:
        HTTPException: 500 with a generic message on unexpected errors
    """
    try:
        return await engine.chat(request.session_id, request.message)
    except Exception as e:
        logger.error(f"Chat turn failed for session {request.session_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=APOLOGY
        ) from e


@router.get("/session/{session_id}", response_model=SessionSnapshot)
async def get_session(session_id: SessionId, engine: Engine) -> SessionSnapshot:
    """Get the current state of a session (created empty if unknown)."""
    session = await engine.get_session(session_id)
    return SessionSnapshot(
        session=session,
        completeness=session.completeness,
        message_count=len(session.history),
        created_at=session.created_at,
        last_updated=session.updated_at,
    )


@router.post("/session/{session_id}/reset", response_model=ResetResponse)
async def reset_session(session_id: SessionId, engine: Engine) -> ResetResponse:
    """Clear a session's checklist and history."""
    session = await engine.reset_session(session_id)
    return ResetResponse(success=True, message="Session reset successfully", session=session)


@router.post("/feedback", response_model=FeedbackResponse)
async def submit_feedback(request: FeedbackRequest) -> FeedbackResponse:
    """Acknowledge a rating for a generated trip.

    Feedback is logged, not stored.
    """
    record = FeedbackRecord(**request.model_dump(), timestamp=utcnow())
    rating = f"{record.rating}/5" if record.rating is not None else "unrated"
    logger.info(
        f"Feedback for trip {record.trip_id}: {rating} - {record.comments or ''}",
        extra={"structured": record.model_dump(mode="json")},
    )
    return FeedbackResponse(success=True, message="Feedback recorded", feedback=record)
