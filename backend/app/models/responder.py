"""AI responder contract - context in, reply plus extracted fields out."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field

from backend.app.models.checklist import TripChecklist
from backend.app.models.session import ConversationMessage


class NextAction(str, Enum):
    """What the conversation should do next."""

    ask_question = "ask_question"
    generate_itinerary = "generate_itinerary"
    refine_preferences = "refine_preferences"
    clarify = "clarify"


@dataclass
class ConversationContext:
    """Snapshot of the session handed to the responder before extraction."""

    recent_messages: list[ConversationMessage]
    checklist: TripChecklist
    completeness: int
    missing_fields: list[str] = field(default_factory=list)


class AIResponse(BaseModel):
    """Responder output for one user message."""

    message: str = Field(..., min_length=1)
    # Untrusted; validated per field at the merge boundary
    extracted_fields: dict[str, Any] = Field(default_factory=dict)
    next_action: NextAction = NextAction.ask_question
    confidence: float = Field(0.8, ge=0.0, le=1.0)
    reasoning: str = ""
    source: Literal["llm", "fallback"] = "llm"
