"""Prompt construction for the conversational responder."""

import json
from enum import Enum

from backend.app.models.checklist import field_alias, known_fields
from backend.app.models.common import (
    AdventureLevel,
    ComfortLevel,
    FoodPreference,
    GroupType,
    SchedulePreference,
    StayPreference,
    TransportMode,
    TripTheme,
    WeatherPreference,
)
from backend.app.models.responder import ConversationContext, NextAction

ENUM_CHOICES: dict[str, type[Enum]] = {
    "trip_theme": TripTheme,
    "group_type": GroupType,
    "transport_mode": TransportMode,
    "stay_preference": StayPreference,
    "adventure_level": AdventureLevel,
    "food_preference": FoodPreference,
    "comfort_level": ComfortLevel,
    "schedule_preference": SchedulePreference,
    "weather_preference": WeatherPreference,
}


def _allowed_values() -> list[str]:
    return [
        f"- {field_alias(name)}: {' | '.join(member.value for member in enum_type)}"
        for name, enum_type in ENUM_CHOICES.items()
    ]


def build_prompt(
    user_message: str,
    context: ConversationContext,
    threshold: int = 75,
    history_turns: int = 4,
) -> str:
    """Build the JSON-contract prompt for one user message.

    Args:
        user_message: Latest user message
        context: Session snapshot taken before extraction
        threshold: Completeness at which an itinerary should be generated
        history_turns: Number of trailing history messages to include

    Returns:
        Prompt text
    """
    recent = context.recent_messages[-history_turns:] if history_turns > 0 else []
    history = "\n".join(f"{m.role}: {m.content}" for m in recent) or "(no previous messages)"

    known = known_fields(context.checklist)
    known_lines = "\n".join(f"- {k}: {json.dumps(v)}" for k, v in known.items()) or "- None yet"
    missing = ", ".join(field_alias(name) for name in context.missing_fields) or "None"

    return "\n".join(
        [
            "You are a friendly travel planning assistant collecting trip details.",
            "Respond ONLY with valid JSON.",
            "",
            "CONVERSATION SO FAR:",
            history,
            "",
            "KNOWN TRIP DETAILS:",
            known_lines,
            "",
            "CONTEXT:",
            f"- Completeness: {context.completeness}%",
            f"- Missing (most important first): {missing}",
            "",
            f'USER: "{user_message}"',
            "",
            "ALLOWED VALUES:",
            *_allowed_values(),
            "- startDate, endDate: YYYY-MM-DD",
            "- totalBudget, travelDays: integers",
            "",
            "RULES:",
            f'1. If completeness >= {threshold}%, set nextAction to "{NextAction.generate_itinerary.value}"',
            f'2. Otherwise, set nextAction to "{NextAction.ask_question.value}" and ask about '
            "the first missing detail",
            "3. Keep message SHORT (1-2 sentences)",
            "4. Extract any travel details the user mentioned into extractedFields",
            "5. Return VALID JSON ONLY - no other text",
            "",
            "RESPOND WITH THIS JSON EXACTLY:",
            "{",
            '  "message": "Your response here",',
            '  "extractedFields": {},',
            '  "nextAction": "ask_question|generate_itinerary|refine_preferences|clarify",',
            '  "confidence": 0.8,',
            '  "reasoning": "Your reasoning"',
            "}",
        ]
    )
