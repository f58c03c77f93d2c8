"""Common types and enums shared across all models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GroupType(str, Enum):
    """Who is travelling."""

    solo = "solo"
    couple = "couple"
    family = "family"
    team = "team"


class TripTheme(str, Enum):
    """Overall style of the trip."""

    adventure = "adventure"
    relaxed = "relaxed"
    foodie = "foodie"
    cultural = "cultural"
    beach = "beach"
    mountain = "mountain"


class TransportMode(str, Enum):
    """Preferred way of getting around."""

    car = "car"
    train = "train"
    bus = "bus"
    flight = "flight"
    bike = "bike"
    walk = "walk"
    cycling = "cycling"


class StayPreference(str, Enum):
    """Accommodation style."""

    budget = "budget"
    midrange = "midrange"
    luxury = "luxury"
    homestay = "homestay"
    hostel = "hostel"


class AdventureLevel(str, Enum):
    """Appetite for adventurous activities."""

    low = "low"
    moderate = "moderate"
    high = "high"


class FoodPreference(str, Enum):
    """Dietary preference."""

    vegetarian = "vegetarian"
    vegan = "vegan"
    non_vegetarian = "non-vegetarian"
    any = "any"


class ComfortLevel(str, Enum):
    """Comfort level."""

    budget = "budget"
    standard = "standard"
    premium = "premium"


class SchedulePreference(str, Enum):
    """Pace of the daily schedule."""

    relaxed = "relaxed"
    busy = "busy"
    flexible = "flexible"
    packed = "packed"


class WeatherPreference(str, Enum):
    """Preferred weather."""

    cold = "cold"
    hot = "hot"
    rainy = "rainy"
    monsoon = "monsoon"
    sunny = "sunny"
    mild = "mild"
