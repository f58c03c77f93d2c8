"""Conversation engine - runs one chat turn end to end.

Turn pipeline:
1. Load or create the session (works on a private copy)
2. Ask the responder, with the pre-turn completeness and missing fields
3. Rule-based parse of the raw message
4. Merge extractions, apply first-write-wins, conservative refine pass
5. Recompute completeness and record both messages
6. Generate an itinerary when the threshold is met and the responder agrees
7. Commit, then persist in the background
"""

import logging
import time
from collections.abc import Callable
from datetime import date
from typing import Any

from backend.app.config import Settings
from backend.app.db.repositories import LayeredSessionRepository
from backend.app.extraction.parser import parse_message
from backend.app.llm.responder import AIResponder, generate_suggestions
from backend.app.models.chat import ChatResponse, ChatStatus
from backend.app.models.checklist import (
    TripChecklist,
    calculate_completeness,
    field_alias,
    missing_fields,
)
from backend.app.models.itinerary import Itinerary
from backend.app.models.responder import AIResponse, ConversationContext, NextAction
from backend.app.models.session import (
    ChatSession,
    ConversationMessage,
    ConversationState,
    utcnow,
)
from backend.app.orchestration.hooks import ChatMetrics, TurnContext, TurnLogger
from backend.app.orchestration.itinerary import synthesize_itinerary
from backend.app.orchestration.merge import apply_update, merge_extractions, refine_checklist

logger = logging.getLogger(__name__)

CELEBRATION = "Perfect! I have enough info to create your itinerary!"


def _audit_delta(applied: dict[str, Any]) -> dict[str, Any] | None:
    """camelCase, JSON-ready view of the fields written this turn."""
    if not applied:
        return None
    dumped = TripChecklist(**applied).model_dump(mode="json", by_alias=True)
    return {field_alias(name): dumped[field_alias(name)] for name in applied}


def turn_status(completeness: int, threshold: int, itinerary_generated: bool) -> ChatStatus:
    """Classify a finished turn for the response and metrics."""
    if itinerary_generated:
        return "ready"
    if completeness >= threshold:
        return "complete"
    return "incomplete"


def next_state(session: ChatSession, itinerary_generated: bool) -> ConversationState:
    """Advance the conversation lifecycle after a turn."""
    if itinerary_generated:
        return ConversationState.ready
    if session.state in (ConversationState.ready, ConversationState.supporting):
        return ConversationState.supporting
    return ConversationState.collecting


class ConversationEngine:
    """Stateful chat orchestration over an injected session repository."""

    def __init__(
        self,
        sessions: LayeredSessionRepository,
        responder: AIResponder,
        settings: Settings,
        metrics: ChatMetrics | None = None,
        turn_logger: TurnLogger | None = None,
        today_fn: Callable[[], date] | None = None,
    ) -> None:
        """Initialize engine.

        Args:
            sessions: Layered session repository
            responder: AI responder (never raises)
            settings: Conversation policy settings
            metrics: Metrics recorder (optional, defaults to no-op)
            turn_logger: Structured turn logger (optional, defaults to no-op)
            today_fn: Injectable clock for relative dates (default: date.today)
        """
        self._sessions = sessions
        self._responder = responder
        self._settings = settings
        self._metrics = metrics or ChatMetrics()
        self._turn_logger = turn_logger or TurnLogger()
        self._today = today_fn or date.today

    async def _load_or_create(self, session_id: str) -> ChatSession:
        session = await self._sessions.load(session_id)
        if session is None:
            logger.info(f"Creating new chat session {session_id}")
            return ChatSession(session_id=session_id)
        return session.model_copy(deep=True)

    def _try_synthesize(self, checklist: TripChecklist, today: date) -> Itinerary | None:
        try:
            return synthesize_itinerary(
                checklist, today=today, default_days=self._settings.default_trip_days
            )
        except Exception as e:
            logger.error(f"Itinerary synthesis failed: {e}", exc_info=True)
            return None

    async def chat(self, session_id: str, message: str) -> ChatResponse:
        """Process one user message.

        Args:
            session_id: Conversation identifier
            message: Raw user message (already validated non-blank)

        Returns:
            ChatResponse describing the updated session
        """
        start_time = time.monotonic()
        settings = self._settings
        threshold = settings.generation_threshold
        today = self._today()

        session = await self._load_or_create(session_id)

        # Responder sees the session as it was before this message
        pre_completeness = calculate_completeness(session.checklist)
        context = ConversationContext(
            recent_messages=session.history[-settings.history_window :],
            checklist=session.checklist,
            completeness=pre_completeness,
            missing_fields=missing_fields(session.checklist),
        )
        ai: AIResponse = await self._responder.respond(message, context)

        rule_based = parse_message(message, today=today)
        update = merge_extractions(
            rule_based,
            ai.extracted_fields,
            ai.confidence,
            threshold=settings.extraction_confidence_threshold,
        )
        checklist, applied = apply_update(session.checklist, update)
        refined = refine_checklist(
            checklist,
            ai.extracted_fields,
            ai.confidence,
            threshold=settings.refine_confidence_threshold,
        )
        if refined is not checklist:
            checklist, refine_applied = apply_update(checklist, refined)
            applied.update(refine_applied)

        completeness = calculate_completeness(checklist)
        # First-write-wins means fields never clear mid-session
        if completeness < session.completeness:
            logger.error(
                f"Completeness dropped for {session_id}: {session.completeness} -> {completeness}"
            )

        session.checklist = checklist
        session.completeness = completeness
        session.history.append(
            ConversationMessage(
                role="user",
                content=message,
                timestamp=utcnow(),
                extracted_fields=_audit_delta(applied),
            )
        )

        suggestions = generate_suggestions(checklist)
        itinerary: Itinerary | None = None
        reply = ai.message
        if completeness >= threshold and ai.next_action == NextAction.generate_itinerary:
            itinerary = self._try_synthesize(checklist, today)
            if itinerary is not None:
                itinerary.recommendations = list(suggestions)
                reply = f"{CELEBRATION} {reply}"
                session.itinerary = itinerary
                session.itinerary_generated = True
                self._metrics.inc_itinerary()

        session.history.append(
            ConversationMessage(role="assistant", content=reply, timestamp=utcnow())
        )
        session.state = next_state(session, itinerary is not None)
        session.updated_at = utcnow()

        await self._sessions.commit(session)
        self._sessions.schedule_persist(session)

        status = turn_status(completeness, threshold, itinerary is not None)
        latency_ms = (time.monotonic() - start_time) * 1000
        self._metrics.record_turn(status, latency_ms)
        self._turn_logger.log_turn(
            TurnContext(session_id=session_id, turn=sum(m.role == "user" for m in session.history)),
            completeness=completeness,
            next_action=ai.next_action.value,
            source=ai.source,
            latency_ms=latency_ms,
            itinerary_generated=itinerary is not None,
            applied_fields=sorted(applied),
        )

        return ChatResponse(
            session_id=session_id,
            completeness=completeness,
            status=status,
            state=session.state,
            checklist=checklist,
            history=session.history,
            next_question=None if itinerary is not None else ai.message,
            itinerary=itinerary,
            suggestions=suggestions,
            confidence=ai.confidence,
            reasoning=ai.reasoning,
            processing_time_ms=round(latency_ms, 2),
            timestamp=session.updated_at,
        )

    async def get_session(self, session_id: str) -> ChatSession:
        """Get a session, creating (and committing) an empty one if unknown."""
        session = await self._sessions.load(session_id)
        if session is None:
            session = ChatSession(session_id=session_id)
            await self._sessions.commit(session)
        return session

    async def reset_session(self, session_id: str) -> ChatSession:
        """Discard everything collected for a session.

        This is the only operation that clears filled checklist fields.
        """
        await self._sessions.delete(session_id)
        session = ChatSession(session_id=session_id)
        await self._sessions.commit(session)
        await self._sessions.persist(session)
        logger.info(f"Reset chat session {session_id}")
        return session

    async def drain(self) -> None:
        """Wait for background persistence (shutdown and tests)."""
        await self._sessions.drain()
