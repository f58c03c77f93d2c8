"""AI responder - LLM replies with a deterministic fallback.

The responder never raises: provider errors, timeouts, empty completions and
malformed JSON all degrade to the fallback reply.
"""

import asyncio
import json
import logging

from openai import APITimeoutError

from backend.app.llm.client import LLMClient, LLMError
from backend.app.llm.prompts import build_prompt
from backend.app.models.checklist import TripChecklist
from backend.app.models.common import AdventureLevel, GroupType, TripTheme
from backend.app.models.responder import AIResponse, ConversationContext, NextAction
from backend.app.orchestration.hooks import ChatMetrics

logger = logging.getLogger(__name__)

DEFAULT_MESSAGE = "Got it!"
DEFAULT_CONFIDENCE = 0.8
FALLBACK_CONFIDENCE = 0.7
GENERATE_CONFIDENCE = 0.95

ACKNOWLEDGMENT = "Thanks for that info!"
GREETING = "Hi! Let's plan your trip."
READY_MESSAGE = "I have enough info! Generating your personalized itinerary now..."
OPEN_QUESTION = "Is there anything else you'd like me to know about your trip?"

QUESTION_TEMPLATES: dict[str, str] = {
    "starting_city": "Where would you like to go, or which city are you starting from?",
    "total_budget": "What's your total budget for the trip (for example 20k or 1 lakh)?",
    "group_type": "Are you traveling solo, with a partner, with family, or with a team?",
    "trip_theme": (
        "What kind of trip appeals to you - adventure, relaxation, food & culture, "
        "beaches, or mountains?"
    ),
    "start_date": "When are you thinking of traveling? Give me dates or duration.",
    "end_date": "When would you like the trip to end?",
    "travel_days": "How many days would you like the trip to last?",
    "transport_mode": "How do you prefer to travel - flight, train, car, bus, or bike?",
    "stay_preference": (
        "What's your accommodation preference - budget hotels, hostels, homestays, "
        "mid-range hotels, or luxury resorts?"
    ),
    "adventure_level": "How adventurous should the trip be - low, moderate, or high?",
    "food_preference": "Any food preference - vegetarian, vegan, non-vegetarian, or anything?",
    "schedule_preference": (
        "Do you like a relaxed pace, a busy schedule, a packed itinerary, or keeping it flexible?"
    ),
    "comfort_level": "What comfort level do you expect - basic, standard, or premium?",
    "weather_preference": "What weather do you enjoy most - cold, hot, rainy, sunny, or mild?",
    "safety_needs": "Do you have any safety or accessibility needs I should plan around?",
    "special_requirements": "Any special requirements, like dietary restrictions or allergies?",
    "avoid_places": "Are there any places you'd like to avoid?",
    "visited_places": "Any places you've already visited that I should skip?",
}


class ResponseParseError(ValueError):
    """Completion text did not contain a usable JSON reply."""


def parse_ai_response(text: str) -> AIResponse:
    """Parse the provider's JSON reply.

    The JSON object is taken from the first "{" to the last "}", so prose or
    code fences around it are ignored. Missing message and confidence fall
    back to defaults.

    Raises:
        ResponseParseError: no JSON object, invalid JSON or invalid fields
    """
    start, end = text.find("{"), text.rfind("}")
    if start == -1 or end <= start:
        raise ResponseParseError("No JSON object in completion")

    try:
        payload = json.loads(text[start : end + 1])
    except json.JSONDecodeError as e:
        raise ResponseParseError(f"Invalid JSON in completion: {e}") from e

    if not isinstance(payload, dict):
        raise ResponseParseError("Completion JSON is not an object")

    extracted = payload.get("extractedFields") or payload.get("extracted_fields") or {}
    confidence = payload.get("confidence")

    try:
        return AIResponse(
            message=payload.get("message") or DEFAULT_MESSAGE,
            extracted_fields=extracted if isinstance(extracted, dict) else {},
            next_action=payload.get("nextAction")
            or payload.get("next_action")
            or NextAction.ask_question,
            confidence=DEFAULT_CONFIDENCE if confidence is None else confidence,
            reasoning=payload.get("reasoning") or "",
            source="llm",
        )
    except ValueError as e:
        raise ResponseParseError(f"Completion failed validation: {e}") from e


def fallback_response(context: ConversationContext, threshold: int = 75) -> AIResponse:
    """Deterministic reply used whenever the provider is unavailable.

    Args:
        context: Session snapshot taken before extraction
        threshold: Completeness at which an itinerary is generated

    Returns:
        AIResponse with source="fallback" and no extracted fields
    """
    if context.completeness >= threshold:
        return AIResponse(
            message=READY_MESSAGE,
            next_action=NextAction.generate_itinerary,
            confidence=GENERATE_CONFIDENCE,
            reasoning=f"Sufficient data collected at {context.completeness}% completeness",
            source="fallback",
        )

    prefix = ACKNOWLEDGMENT if context.recent_messages else GREETING

    if not context.missing_fields:
        return AIResponse(
            message=f"{prefix} {OPEN_QUESTION}",
            next_action=NextAction.refine_preferences,
            confidence=FALLBACK_CONFIDENCE,
            reasoning="Fallback: no missing fields, asking an open follow-up",
            source="fallback",
        )

    missing = context.missing_fields[0]
    question = QUESTION_TEMPLATES.get(
        missing, f"Tell me more about your {missing.replace('_', ' ')} preference."
    )
    return AIResponse(
        message=f"{prefix} {question}",
        next_action=NextAction.ask_question,
        confidence=FALLBACK_CONFIDENCE,
        reasoning=f"Fallback: asking about missing field {missing}",
        source="fallback",
    )


def _fallback_reason(error: Exception) -> str:
    if isinstance(error, (APITimeoutError, asyncio.TimeoutError)):
        return "timeout"
    if isinstance(error, LLMError):
        return "empty_response"
    if isinstance(error, ResponseParseError):
        return "parse_error"
    return "provider_error"


class AIResponder:
    """Produces the assistant reply and AI-side field extraction for a turn."""

    def __init__(
        self,
        client: LLMClient | None,
        metrics: ChatMetrics | None = None,
        threshold: int = 75,
        history_turns: int = 4,
    ) -> None:
        """Initialize responder.

        Args:
            client: LLM provider, or None to always use the fallback
            metrics: Metrics recorder (optional, defaults to no-op)
            threshold: Completeness generation threshold
            history_turns: History messages included in the prompt
        """
        self._client = client
        self._metrics = metrics or ChatMetrics()
        self._threshold = threshold
        self._history_turns = history_turns

    async def respond(self, user_message: str, context: ConversationContext) -> AIResponse:
        """Get the reply for one user message. Never raises."""
        if self._client is None:
            self._metrics.inc_llm_fallback("no_client")
            return fallback_response(context, self._threshold)

        try:
            prompt = build_prompt(
                user_message,
                context,
                threshold=self._threshold,
                history_turns=self._history_turns,
            )
            text = await self._client.complete(prompt)
            response = parse_ai_response(text)
            logger.debug(f"LLM reply: {response.message[:100]}")
            return response
        except Exception as e:
            reason = _fallback_reason(e)
            logger.warning(f"LLM reply failed ({reason}): {e}; using deterministic fallback")
            self._metrics.inc_llm_fallback(reason)
            return fallback_response(context, self._threshold)


def generate_suggestions(checklist: TripChecklist) -> list[str]:
    """Fixed travel tips keyed on the collected preferences."""
    suggestions: list[str] = []

    if checklist.total_budget and checklist.total_budget < 5000:
        suggestions.append(
            "Budget tip: Focus on local transport and homestays to maximize your budget"
        )

    if checklist.adventure_level == AdventureLevel.high:
        suggestions.append(
            "Adventure hint: Consider monsoon season for water sports, summer for trekking"
        )

    if checklist.group_type == GroupType.family:
        suggestions.append(
            "Family travel: Look for destinations with kid-friendly activities "
            "and safe infrastructure"
        )

    if checklist.trip_theme == TripTheme.foodie:
        suggestions.append(
            "Food lover: Visit local markets and street food areas for authentic experiences"
        )

    if checklist.starting_city in ("delhi", "bangalore"):
        suggestions.append("Location tip: Consider nearby hill stations for quick getaways")

    return suggestions

