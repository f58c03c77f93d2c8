"""Itinerary models - final output for user consumption."""

from datetime import date

from pydantic import Field

from backend.app.models.common import CamelModel


class ItineraryBlock(CamelModel):
    """Single time-boxed activity in a day."""

    time: str
    activity: str
    location: str
    duration: str
    cost: int = Field(..., ge=0)
    category: str


class ItineraryDay(CamelModel):
    """Itinerary for a single day."""

    date: date
    day: int = Field(..., ge=1, description="1-indexed day number")
    title: str
    blocks: list[ItineraryBlock]
    day_cost: int
    estimated_budget: int


class BudgetBreakdown(CamelModel):
    """Budget split by category."""

    accommodation: int = Field(..., ge=0)
    food: int = Field(..., ge=0)
    activities: int = Field(..., ge=0)
    transport: int = Field(..., ge=0)


class ItineraryBudget(CamelModel):
    """Overall budget summary."""

    total: int
    per_day: int
    breakdown: BudgetBreakdown
    remaining: int


class Itinerary(CamelModel):
    """Complete day-by-day itinerary."""

    trip_id: str
    summary: str
    destination: str
    start_date: date
    end_date: date
    days: list[ItineraryDay]
    budget: ItineraryBudget
    recommendations: list[str] = Field(default_factory=list)
