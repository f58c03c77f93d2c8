"""Rule-based message parser - runs every field extractor over one message."""

import logging
from collections.abc import Callable
from datetime import date
from typing import Any

from pydantic import ValidationError

from backend.app.extraction.budget import parse_budget
from backend.app.extraction.dates import parse_date_range, parse_duration
from backend.app.extraction.freetext import (
    parse_avoid_places,
    parse_safety_needs,
    parse_special_requirements,
    parse_visited_places,
)
from backend.app.extraction.keywords import (
    parse_adventure_level,
    parse_city,
    parse_comfort_level,
    parse_food_preference,
    parse_group_type,
    parse_schedule_preference,
    parse_stay_preference,
    parse_transport_mode,
    parse_trip_theme,
    parse_weather_preference,
)
from backend.app.models.checklist import TripChecklist

logger = logging.getLogger(__name__)

# Each extractor writes exactly one field, so results never conflict
FIELD_PARSERS: tuple[tuple[str, Callable[[str], Any]], ...] = (
    ("total_budget", parse_budget),
    ("starting_city", parse_city),
    ("trip_theme", parse_trip_theme),
    ("group_type", parse_group_type),
    ("transport_mode", parse_transport_mode),
    ("stay_preference", parse_stay_preference),
    ("adventure_level", parse_adventure_level),
    ("food_preference", parse_food_preference),
    ("comfort_level", parse_comfort_level),
    ("schedule_preference", parse_schedule_preference),
    ("weather_preference", parse_weather_preference),
    ("safety_needs", parse_safety_needs),
    ("special_requirements", parse_special_requirements),
    ("avoid_places", parse_avoid_places),
    ("visited_places", parse_visited_places),
)


def parse_message(message: str, today: date | None = None) -> TripChecklist:
    """Extract checklist fields from a single user message.

    Args:
        message: Raw user message
        today: Reference date for relative dates (defaults to today)

    Returns:
        Partial checklist; fields nothing matched stay None
    """
    dates = parse_date_range(message, today)
    values: dict[str, Any] = {
        "start_date": dates.start,
        "end_date": dates.end,
        "travel_days": dates.travel_days or parse_duration(message),
    }
    for name, parser in FIELD_PARSERS:
        values[name] = parser(message)

    result = TripChecklist()
    for name, value in values.items():
        if value is None:
            continue
        try:
            setattr(result, name, value)
        except ValidationError:
            logger.debug(f"Discarding implausible {name}={value!r} from rule-based parse")

    return result
