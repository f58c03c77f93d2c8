"""Itinerary synthesizer - deterministic, template-driven day plans."""

import logging
import uuid
from datetime import date, timedelta

from backend.app.models.checklist import TripChecklist
from backend.app.models.common import TripTheme
from backend.app.models.itinerary import (
    BudgetBreakdown,
    Itinerary,
    ItineraryBlock,
    ItineraryBudget,
    ItineraryDay,
)

logger = logging.getLogger(__name__)

BUDGET_SPLIT: dict[str, float] = {
    "accommodation": 0.4,
    "food": 0.3,
    "activities": 0.2,
    "transport": 0.1,
}

_DAILY_BLOCKS: tuple[ItineraryBlock, ...] = (
    ItineraryBlock(
        time="01:00 PM",
        activity="Lunch",
        location="Local restaurant",
        duration="1 hour",
        cost=400,
        category="food",
    ),
    ItineraryBlock(
        time="03:00 PM",
        activity="Afternoon activity",
        location="Varies",
        duration="2 hours",
        cost=600,
        category="activity",
    ),
    ItineraryBlock(
        time="06:00 PM",
        activity="Sunset & evening",
        location="Scenic spot",
        duration="2 hours",
        cost=300,
        category="sightseeing",
    ),
    ItineraryBlock(
        time="08:00 PM",
        activity="Dinner",
        location="Local restaurant",
        duration="1.5 hours",
        cost=500,
        category="food",
    ),
)


def _destination(checklist: TripChecklist) -> str:
    return checklist.starting_city.title() if checklist.starting_city else "Destination"


def _day_title(index: int, total_days: int, theme: str) -> str:
    if index == 0:
        return "Arrival & Settling In"
    if index == total_days - 1:
        return "Departure"
    return f"{theme.capitalize()} Activities"


def _day_blocks(index: int, checklist: TripChecklist) -> list[ItineraryBlock]:
    blocks: list[ItineraryBlock] = []

    if index == 0:
        blocks.append(
            ItineraryBlock(
                time="09:00 AM",
                activity="Arrive & Check-in",
                location=_destination(checklist),
                duration="1 hour",
                cost=0,
                category="logistics",
            )
        )

    if checklist.trip_theme == TripTheme.foodie:
        blocks.append(
            ItineraryBlock(
                time="12:00 PM",
                activity="Local food tour",
                location="Food markets",
                duration="2 hours",
                cost=800,
                category="food",
            )
        )
    else:
        blocks.append(
            ItineraryBlock(
                time="11:00 AM",
                activity="Explore local attractions",
                location="Main area",
                duration="3 hours",
                cost=500,
                category="sightseeing",
            )
        )

    blocks.extend(block.model_copy() for block in _DAILY_BLOCKS)
    return blocks


def budget_breakdown(total: int) -> BudgetBreakdown:
    """Split a total budget by fixed category percentages.

    Categories are rounded independently, so their sum may differ from the
    total by a unit or two.
    """
    return BudgetBreakdown(**{name: round(total * share) for name, share in BUDGET_SPLIT.items()})


def synthesize_itinerary(
    checklist: TripChecklist, today: date | None = None, default_days: int = 3
) -> Itinerary:
    """Expand a checklist into a day-by-day itinerary.

    Args:
        checklist: Collected trip attributes
        today: Fallback start date when none was collected
        default_days: Trip length used when travel_days is unknown

    Returns:
        Itinerary with one entry per travel day
    """
    days = checklist.travel_days or default_days
    start = checklist.start_date or today or date.today()
    theme = checklist.trip_theme.value if checklist.trip_theme else "mixed"
    total = checklist.total_budget or 0
    per_day = round(total / days)

    itinerary_days: list[ItineraryDay] = []
    for index in range(days):
        blocks = _day_blocks(index, checklist)
        itinerary_days.append(
            ItineraryDay(
                date=start + timedelta(days=index),
                day=index + 1,
                title=_day_title(index, days, theme),
                blocks=blocks,
                day_cost=sum(block.cost for block in blocks),
                estimated_budget=per_day,
            )
        )

    breakdown = budget_breakdown(total)
    allocated = breakdown.accommodation + breakdown.food + breakdown.activities + breakdown.transport
    destination = _destination(checklist)

    logger.info(f"[synthesize_itinerary] {days}-day plan for {destination}, budget={total}")

    return Itinerary(
        trip_id=str(uuid.uuid4()),
        summary=f"{days}-Day {destination} Itinerary ({theme} trip)",
        destination=destination,
        start_date=start,
        end_date=checklist.end_date or start + timedelta(days=days - 1),
        days=itinerary_days,
        budget=ItineraryBudget(
            total=total,
            per_day=per_day,
            breakdown=breakdown,
            remaining=total - allocated,
        ),
    )
