"""Models package - re-exports for convenience."""

from backend.app.models.chat import (
    ChatRequest,
    ChatResponse,
    FeedbackRecord,
    FeedbackRequest,
    FeedbackResponse,
    ResetResponse,
    SessionSnapshot,
)
from backend.app.models.checklist import (
    CHECKLIST_FIELDS,
    CRITICAL_FIELDS,
    PRIORITY_ORDER,
    TripChecklist,
    calculate_completeness,
    missing_fields,
)
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
from backend.app.models.itinerary import (
    BudgetBreakdown,
    Itinerary,
    ItineraryBlock,
    ItineraryBudget,
    ItineraryDay,
)
from backend.app.models.responder import AIResponse, ConversationContext, NextAction
from backend.app.models.session import ChatSession, ConversationMessage, ConversationState

__all__ = [
    # Enums
    "GroupType",
    "TripTheme",
    "TransportMode",
    "StayPreference",
    "AdventureLevel",
    "FoodPreference",
    "ComfortLevel",
    "SchedulePreference",
    "WeatherPreference",
    # Checklist
    "TripChecklist",
    "CHECKLIST_FIELDS",
    "CRITICAL_FIELDS",
    "PRIORITY_ORDER",
    "calculate_completeness",
    "missing_fields",
    # Session
    "ChatSession",
    "ConversationMessage",
    "ConversationState",
    # Responder
    "AIResponse",
    "ConversationContext",
    "NextAction",
    # Itinerary
    "Itinerary",
    "ItineraryDay",
    "ItineraryBlock",
    "ItineraryBudget",
    "BudgetBreakdown",
    # API
    "ChatRequest",
    "ChatResponse",
    "SessionSnapshot",
    "ResetResponse",
    "FeedbackRequest",
    "FeedbackRecord",
    "FeedbackResponse",
]
