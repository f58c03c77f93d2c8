"""Tests for the conversation engine turn pipeline.

The engine runs over in-memory storage with a fixed clock; the LLM is either
absent (rule-based fallback), scripted, or failing.
"""

import asyncio
import json
from collections.abc import Callable
from datetime import date
from unittest.mock import ANY, MagicMock, patch

import pytest

from backend.app.db.inmemory import InMemorySessionStore
from backend.app.db.repositories import LayeredSessionRepository
from backend.app.models.common import GroupType, StayPreference
from backend.app.models.session import ChatSession, ConversationState
from backend.app.orchestration.conversation import CELEBRATION, ConversationEngine
from backend.app.orchestration.hooks import ChatMetrics, TurnContext, TurnLogger


def reply(message: str = "ok", next_action: str = "ask_question", **kwargs: object) -> str:
    """Build a JSON completion in the responder's contract."""
    return json.dumps({"message": message, "nextAction": next_action, **kwargs})


class BrokenStore:
    """Session store whose writes always fail."""

    async def get(self, session_id: str) -> ChatSession | None:
        return None

    async def put(self, session: ChatSession) -> None:
        raise ConnectionError("cache unavailable")

    async def delete(self, session_id: str) -> None:
        raise ConnectionError("cache unavailable")


class UnreliableCache(InMemorySessionStore):
    """Cache tier whose writes start failing once fail_writes is set."""

    def __init__(self) -> None:
        super().__init__()
        self.fail_writes = False

    async def put(self, session: ChatSession) -> None:
        if self.fail_writes:
            raise ConnectionError("cache write timed out")
        await super().put(session)


class TestTurnPipeline:
    @pytest.mark.asyncio
    async def test_first_turn_without_llm(self, make_engine: Callable) -> None:
        engine: ConversationEngine = make_engine()

        response = await engine.chat("s1", "hello")

        assert response.completeness == 0
        assert response.status == "incomplete"
        assert response.state == ConversationState.collecting
        assert response.next_question is not None
        assert response.next_question.startswith("Hi!")
        assert [m.role for m in response.history] == ["user", "assistant"]
        assert response.itinerary is None

    @pytest.mark.asyncio
    async def test_itinerary_generated_over_three_turns(self, make_engine: Callable) -> None:
        engine: ConversationEngine = make_engine()

        first = await engine.chat("s1", "Trip to Goa from 20th to 23rd December")
        assert first.completeness == 43
        assert first.status == "incomplete"

        second = await engine.chat("s1", "Budget 15k, going with friends, staying in hostels")
        assert second.completeness == 86
        assert second.status == "complete"
        assert second.checklist.group_type == GroupType.team
        assert second.checklist.stay_preference == StayPreference.hostel
        assert second.itinerary is None

        third = await engine.chat("s1", "Sounds good")
        assert third.status == "ready"
        assert third.state == ConversationState.ready
        assert third.itinerary is not None
        assert len(third.itinerary.days) == 3
        assert third.itinerary.destination == "Goa"
        assert third.next_question is None
        assert third.history[-1].content.startswith(CELEBRATION)

        session = await engine.get_session("s1")
        assert session.itinerary_generated is True
        assert session.itinerary == third.itinerary

    @pytest.mark.asyncio
    async def test_itinerary_carries_suggestions(self, make_engine: Callable) -> None:
        engine: ConversationEngine = make_engine()

        await engine.chat("s1", "Family trip to Delhi from 20th to 23rd December")
        await engine.chat("s1", "Budget 4000, staying in a homestay")
        response = await engine.chat("s1", "ok")

        assert response.itinerary is not None
        assert response.itinerary.recommendations == response.suggestions
        assert any(tip.startswith("Family travel") for tip in response.suggestions)

    @pytest.mark.asyncio
    async def test_confident_llm_extraction_is_applied(
        self, make_engine: Callable, scripted_llm: Callable
    ) -> None:
        client = scripted_llm(
            reply(
                "Nice! What's your budget?",
                extractedFields={"groupType": "couple", "stayPreference": "homestay"},
                confidence=0.9,
            )
        )
        engine: ConversationEngine = make_engine(client=client)

        response = await engine.chat("s1", "Goa please")

        assert response.checklist.starting_city == "goa"
        assert response.checklist.group_type == GroupType.couple
        assert response.checklist.stay_preference == StayPreference.homestay
        assert response.completeness == 43
        assert response.next_question == "Nice! What's your budget?"
        assert response.confidence == 0.9

    @pytest.mark.asyncio
    async def test_low_confidence_llm_extraction_is_ignored(
        self, make_engine: Callable, scripted_llm: Callable
    ) -> None:
        client = scripted_llm(reply(extractedFields={"groupType": "couple"}, confidence=0.5))
        engine: ConversationEngine = make_engine(client=client)

        response = await engine.chat("s1", "Goa please")

        assert response.checklist.starting_city == "goa"
        assert response.checklist.group_type is None

    @pytest.mark.asyncio
    async def test_llm_generate_below_threshold_does_not_generate(
        self, make_engine: Callable, scripted_llm: Callable
    ) -> None:
        engine: ConversationEngine = make_engine(
            client=scripted_llm(reply(next_action="generate_itinerary", confidence=0.9))
        )

        response = await engine.chat("s1", "Goa please")

        assert response.itinerary is None
        assert response.status == "incomplete"

    @pytest.mark.asyncio
    async def test_state_moves_to_supporting_after_itinerary(
        self, make_engine: Callable, scripted_llm: Callable
    ) -> None:
        client = scripted_llm(
            reply(),
            reply(),
            reply(next_action="generate_itinerary", confidence=0.95),
            reply("Anything else?", next_action="refine_preferences"),
        )
        engine: ConversationEngine = make_engine(client=client)

        await engine.chat("s1", "Trip to Goa from 20th to 23rd December")
        await engine.chat("s1", "Budget 15k, going with friends, staying in hostels")
        generated = await engine.chat("s1", "Great")
        after = await engine.chat("s1", "Thanks!")

        assert generated.state == ConversationState.ready
        assert after.state == ConversationState.supporting
        assert after.itinerary is None
        assert after.status == "complete"


class TestChecklistInvariants:
    @pytest.mark.asyncio
    async def test_first_write_wins(self, make_engine: Callable) -> None:
        engine: ConversationEngine = make_engine()

        await engine.chat("s1", "Trip to Goa")
        response = await engine.chat("s1", "Actually Manali sounds better")

        assert response.checklist.starting_city == "goa"

    @pytest.mark.asyncio
    async def test_later_dates_do_not_contradict_trip_length(
        self, make_engine: Callable
    ) -> None:
        engine: ConversationEngine = make_engine()

        await engine.chat("s1", "a 5 day trip to Goa")
        response = await engine.chat("s1", "from 20th to 23rd December")

        checklist = response.checklist
        assert checklist.travel_days == 5
        assert checklist.start_date == date(2026, 12, 20)
        assert checklist.end_date == date(2026, 12, 25)

    @pytest.mark.asyncio
    async def test_completeness_never_decreases(
        self, make_engine: Callable, failing_llm: object
    ) -> None:
        engine: ConversationEngine = make_engine(client=failing_llm)
        messages = [
            "Trip to Goa",
            "hmm",
            "Budget 20k",
            "with my family",
            "actually budget 2 lakh",
            "from 20th to 23rd December",
            "nothing else",
            "staying at a resort",
            "relaxed pace please",
            "random words 123",
        ]

        previous = 0
        for i in range(100):
            response = await engine.chat("s1", messages[i % len(messages)])
            assert response.completeness >= previous
            previous = response.completeness

        assert failing_llm.calls == 100
        assert previous == 100

    @pytest.mark.asyncio
    async def test_audit_delta_recorded_on_user_message(self, make_engine: Callable) -> None:
        engine: ConversationEngine = make_engine()

        response = await engine.chat("s1", "Trip to Goa from 20th to 23rd December")

        user, assistant = response.history
        assert user.extracted_fields == {
            "startDate": "2026-12-20",
            "endDate": "2026-12-23",
            "travelDays": 3,
            "startingCity": "goa",
        }
        assert assistant.extracted_fields is None

    @pytest.mark.asyncio
    async def test_no_delta_when_nothing_new(self, make_engine: Callable) -> None:
        engine: ConversationEngine = make_engine()

        response = await engine.chat("s1", "hello")

        assert response.history[0].extracted_fields is None


class TestFailureHandling:
    @pytest.mark.asyncio
    async def test_failed_turn_leaves_session_untouched(self, make_engine: Callable) -> None:
        engine: ConversationEngine = make_engine()
        await engine.chat("s1", "Trip to Goa")

        with patch(
            "backend.app.orchestration.conversation.parse_message",
            side_effect=RuntimeError("parser bug"),
        ):
            with pytest.raises(RuntimeError):
                await engine.chat("s1", "Budget 15k")

        session = await engine.get_session("s1")
        assert len(session.history) == 2
        assert session.checklist.total_budget is None

    @pytest.mark.asyncio
    async def test_synthesis_failure_keeps_collecting(self, make_engine: Callable) -> None:
        engine: ConversationEngine = make_engine()
        await engine.chat("s1", "Trip to Goa from 20th to 23rd December")
        await engine.chat("s1", "Budget 15k, going with friends, staying in hostels")

        with patch(
            "backend.app.orchestration.conversation.synthesize_itinerary",
            side_effect=RuntimeError("template error"),
        ):
            response = await engine.chat("s1", "Sounds good")

        assert response.itinerary is None
        assert response.status == "complete"
        assert not response.history[-1].content.startswith(CELEBRATION)
        session = await engine.get_session("s1")
        assert session.itinerary_generated is False

    @pytest.mark.asyncio
    async def test_persist_failure_does_not_fail_turn(self, make_engine: Callable) -> None:
        metrics = MagicMock(spec=ChatMetrics)
        sessions = LayeredSessionRepository(
            memory=InMemorySessionStore(), cache=BrokenStore(), metrics=metrics
        )
        engine: ConversationEngine = make_engine(sessions=sessions, metrics=metrics)

        response = await engine.chat("s1", "Trip to Goa")
        await engine.drain()

        assert response.checklist.starting_city == "goa"
        metrics.inc_persist_error.assert_called_once_with("cache")
        session = await engine.get_session("s1")
        assert session.checklist.starting_city == "goa"

    @pytest.mark.asyncio
    async def test_failed_cache_write_does_not_lose_fields(self, make_engine: Callable) -> None:
        cache = UnreliableCache()
        sessions = LayeredSessionRepository(memory=InMemorySessionStore(), cache=cache)
        engine: ConversationEngine = make_engine(sessions=sessions)

        await engine.chat("s1", "Trip to Goa")
        await engine.drain()
        cache.fail_writes = True
        await engine.chat("s1", "Budget 15k")
        await engine.drain()
        response = await engine.chat("s1", "hello")

        assert response.checklist.starting_city == "goa"
        assert response.checklist.total_budget == 15_000
        assert response.completeness == 29

    @pytest.mark.asyncio
    async def test_concurrent_turns_last_writer_wins(self, make_engine: Callable) -> None:
        class YieldingClient:
            async def complete(self, prompt: str) -> str:
                await asyncio.sleep(0)
                return reply()

        engine: ConversationEngine = make_engine(client=YieldingClient())

        await asyncio.gather(
            engine.chat("s1", "Trip to Goa"),
            engine.chat("s1", "Budget 15k"),
        )

        session = await engine.get_session("s1")
        assert len(session.history) == 2


class TestSessionOperations:
    @pytest.mark.asyncio
    async def test_get_unknown_session_creates_empty(self, make_engine: Callable) -> None:
        engine: ConversationEngine = make_engine()

        session = await engine.get_session("fresh")

        assert session.session_id == "fresh"
        assert session.history == []
        assert session.completeness == 0
        assert session.state == ConversationState.new

    @pytest.mark.asyncio
    async def test_reset_clears_everything(self, make_engine: Callable) -> None:
        engine: ConversationEngine = make_engine()
        await engine.chat("s1", "Trip to Goa from 20th to 23rd December")

        reset = await engine.reset_session("s1")
        session = await engine.get_session("s1")

        assert reset.history == []
        assert session.completeness == 0
        assert session.checklist.starting_city is None

    @pytest.mark.asyncio
    async def test_sessions_are_isolated(self, make_engine: Callable) -> None:
        engine: ConversationEngine = make_engine()

        await engine.chat("a", "Trip to Goa")
        other = await engine.chat("b", "hello")

        assert other.checklist.starting_city is None


class TestInstrumentation:
    @pytest.mark.asyncio
    async def test_metrics_and_turn_log(self, make_engine: Callable) -> None:
        metrics = MagicMock(spec=ChatMetrics)
        turn_logger = MagicMock(spec=TurnLogger)
        engine: ConversationEngine = make_engine(metrics=metrics, turn_logger=turn_logger)

        await engine.chat("s1", "Trip to Goa")

        metrics.record_turn.assert_called_once_with("incomplete", ANY)
        metrics.inc_itinerary.assert_not_called()
        turn_logger.log_turn.assert_called_once()
        call = turn_logger.log_turn.call_args
        assert call.args[0] == TurnContext(session_id="s1", turn=1)
        assert call.kwargs["source"] == "fallback"
        assert call.kwargs["applied_fields"] == ["starting_city"]
