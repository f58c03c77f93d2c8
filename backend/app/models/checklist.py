"""Trip checklist model - the structured record collected from conversation."""

from datetime import date
from typing import Annotated, Any

from pydantic import ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from backend.app.models.common import (
    AdventureLevel,
    CamelModel,
    ComfortLevel,
    FoodPreference,
    GroupType,
    SchedulePreference,
    StayPreference,
    TransportMode,
    TripTheme,
    WeatherPreference,
)

# Upper bound rejects unrelated large numbers (phone numbers, pin codes)
MAX_BUDGET = 10_000_000

ENUM_FIELDS = (
    "trip_theme",
    "group_type",
    "transport_mode",
    "stay_preference",
    "adventure_level",
    "food_preference",
    "comfort_level",
    "schedule_preference",
    "weather_preference",
)

TEXT_FIELDS = ("starting_city", "safety_needs", "special_requirements")

LIST_FIELDS = ("avoid_places", "visited_places")


class TripChecklist(CamelModel):
    """Structured trip attributes; every field is absent (None) until learned.

    Assignment is validated, so a field can only ever hold a value of its
    own type or enumeration.
    """

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    # Dates and duration
    start_date: date | None = None
    end_date: date | None = None
    travel_days: Annotated[int, Field(gt=0, le=365)] | None = None

    # Budget
    total_budget: Annotated[int, Field(gt=0, lt=MAX_BUDGET)] | None = None

    # Destination
    starting_city: Annotated[str, Field(min_length=1, max_length=80)] | None = None

    # Trip style
    trip_theme: TripTheme | None = None
    group_type: GroupType | None = None

    # Transport and accommodation
    transport_mode: TransportMode | None = None
    stay_preference: StayPreference | None = None

    # Preferences
    adventure_level: AdventureLevel | None = None
    food_preference: FoodPreference | None = None
    comfort_level: ComfortLevel | None = None
    schedule_preference: SchedulePreference | None = None
    weather_preference: WeatherPreference | None = None

    # Safety and special needs
    safety_needs: Annotated[str, Field(min_length=1, max_length=500)] | None = None
    special_requirements: Annotated[str, Field(min_length=1, max_length=500)] | None = None

    # Places
    avoid_places: list[str] | None = None
    visited_places: list[str] | None = None

    @field_validator(*ENUM_FIELDS, mode="before")
    @classmethod
    def normalize_enum_text(cls, v: Any) -> Any:
        """Accept enum values regardless of case or underscores."""
        if isinstance(v, str):
            v = v.strip().lower().replace("_", "-")
            return v or None
        return v

    @field_validator(*TEXT_FIELDS, mode="before")
    @classmethod
    def blank_text_is_absent(cls, v: Any) -> Any:
        """Treat blank strings as absent."""
        if isinstance(v, str):
            return v.strip() or None
        return v

    @field_validator("starting_city")
    @classmethod
    def lowercase_city(cls, v: str | None) -> str | None:
        """Cities are stored in canonical lower case."""
        return v.lower() if v is not None else None

    @field_validator("total_budget", mode="before")
    @classmethod
    def round_fractional_budget(cls, v: Any) -> Any:
        """Round fractional amounts (e.g. 2.5 lakh) to whole currency units."""
        if isinstance(v, float):
            return round(v)
        return v

    @field_validator(*LIST_FIELDS)
    @classmethod
    def dedupe_places(cls, v: list[str] | None) -> list[str] | None:
        """Strip, drop blanks and remove duplicates preserving order."""
        if v is None:
            return None
        seen: list[str] = []
        for place in v:
            name = place.strip()
            if name and name not in seen:
                seen.append(name)
        return seen


CHECKLIST_FIELDS: tuple[str, ...] = tuple(TripChecklist.model_fields)

# Minimal set required before an itinerary is generated
CRITICAL_FIELDS: tuple[str, ...] = (
    "start_date",
    "end_date",
    "total_budget",
    "starting_city",
    "group_type",
    "stay_preference",
    "schedule_preference",
)

# Completeness and the generation threshold are both measured on this set
COMPLETENESS_FIELDS = CRITICAL_FIELDS

# Order in which missing fields are asked about
PRIORITY_ORDER: tuple[str, ...] = (
    "starting_city",
    "total_budget",
    "group_type",
    "trip_theme",
    "start_date",
    "travel_days",
    "transport_mode",
    "stay_preference",
    "adventure_level",
    "food_preference",
    "schedule_preference",
    "comfort_level",
    "weather_preference",
    "safety_needs",
    "special_requirements",
    "avoid_places",
    "visited_places",
)


def field_alias(name: str) -> str:
    """Wire (camelCase) name of a checklist field."""
    return to_camel(name)


def is_filled(value: Any) -> bool:
    """Check whether a field value counts as filled.

    None, blank strings and empty lists are unfilled.
    """
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple)):
        return len(value) > 0
    return True


def calculate_completeness(
    checklist: TripChecklist, fields: tuple[str, ...] = COMPLETENESS_FIELDS
) -> int:
    """Calculate checklist completeness as an integer percentage (0-100).

    Args:
        checklist: Checklist to score
        fields: Counted field set (defaults to the critical fields)

    Returns:
        Rounded percentage of counted fields holding a non-empty value
    """
    if not fields:
        return 100
    filled = sum(1 for name in fields if is_filled(getattr(checklist, name)))
    return round(filled * 100 / len(fields))


def missing_fields(
    checklist: TripChecklist, order: tuple[str, ...] = PRIORITY_ORDER
) -> list[str]:
    """List unfilled fields in priority order (snake_case names)."""
    return [name for name in order if not is_filled(getattr(checklist, name))]


def known_fields(checklist: TripChecklist) -> dict[str, Any]:
    """Filled fields as a JSON-ready, camelCase-keyed mapping."""
    dumped = checklist.model_dump(mode="json", by_alias=True)
    return {
        field_alias(name): dumped[field_alias(name)]
        for name in CHECKLIST_FIELDS
        if is_filled(getattr(checklist, name))
    }
