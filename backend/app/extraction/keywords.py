"""Keyword tables for categorical fields and the city gazetteer.

Each table is an ordered tuple of (value, keywords) rules evaluated top to
bottom. Keywords match case-insensitively as whole words or phrases, and the
first rule with a matching keyword wins. A value may appear in more than one
rule when a phrase has to take precedence over a broader keyword (for
example "no meat" must be read before "meat").
"""

import re
from collections.abc import Sequence
from typing import TypeVar

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

T = TypeVar("T")

# Precedence: specific activities (adventure, food, culture) before scenery
# (beach, mountain), and "relaxed" last since it is the vaguest signal.
THEME_RULES: tuple[tuple[TripTheme, tuple[str, ...]], ...] = (
    (
        TripTheme.adventure,
        ("adventure", "adventurous", "trek", "trekking", "hike", "hiking", "rafting",
         "paragliding", "scuba", "bungee", "camping"),
    ),
    (
        TripTheme.foodie,
        ("foodie", "food", "cuisine", "culinary", "street food", "eating", "food tour"),
    ),
    (
        TripTheme.cultural,
        ("culture", "cultural", "heritage", "history", "historic", "historical", "museum",
         "museums", "temple", "temples", "monument", "monuments", "fort", "forts"),
    ),
    (
        TripTheme.beach,
        ("beach", "beaches", "seaside", "coast", "coastal", "island", "islands"),
    ),
    (
        TripTheme.mountain,
        ("mountain", "mountains", "hill", "hills", "hill station", "himalaya", "himalayas",
         "valley"),
    ),
    (
        TripTheme.relaxed,
        ("relax", "relaxing", "relaxed", "relaxation", "chill", "unwind", "leisure", "spa"),
    ),
)

# Precedence: family > couple > team > solo ("my wife and kids" is a family trip)
GROUP_RULES: tuple[tuple[GroupType, tuple[str, ...]], ...] = (
    (
        GroupType.family,
        ("family", "kids", "children", "parents", "relatives", "grandparents", "in-laws"),
    ),
    (
        GroupType.couple,
        ("couple", "partner", "spouse", "honeymoon", "girlfriend", "boyfriend", "wife",
         "husband", "fiance", "fiancee"),
    ),
    (
        GroupType.team,
        ("friends", "friend", "team", "group", "colleagues", "office", "company", "gang"),
    ),
    (
        GroupType.solo,
        ("solo", "alone", "by myself", "just me", "single traveler", "single traveller"),
    ),
)

# Precedence: long-haul modes first, then road, then self-powered
TRANSPORT_RULES: tuple[tuple[TransportMode, tuple[str, ...]], ...] = (
    (TransportMode.flight, ("flight", "flights", "fly", "flying", "plane", "airplane", "aeroplane")),
    (TransportMode.train, ("train", "trains", "railway", "rail")),
    (TransportMode.bus, ("bus", "buses", "coach", "volvo")),
    (
        TransportMode.car,
        ("car", "drive", "driving", "road trip", "self-drive", "rental car", "cab", "taxi"),
    ),
    (TransportMode.cycling, ("cycling", "cycle", "bicycle")),
    (TransportMode.bike, ("bike", "motorbike", "motorcycle", "scooter", "two-wheeler")),
    (TransportMode.walk, ("walk", "walking", "on foot")),
)

# "budget" alone usually means money, so only stay-specific phrases count
STAY_RULES: tuple[tuple[StayPreference, tuple[str, ...]], ...] = (
    (
        StayPreference.luxury,
        ("luxury", "luxurious", "5-star", "5 star", "five star", "premium hotel", "resort",
         "resorts"),
    ),
    (
        StayPreference.midrange,
        ("midrange", "mid-range", "mid range", "3-star", "3 star", "three star", "4-star",
         "4 star", "four star", "boutique"),
    ),
    (StayPreference.hostel, ("hostel", "hostels", "dorm", "dorms", "backpacker", "backpacking")),
    (
        StayPreference.homestay,
        ("homestay", "homestays", "home stay", "airbnb", "guesthouse", "guest house", "bnb"),
    ),
    (
        StayPreference.budget,
        ("budget hotel", "budget hotels", "budget stay", "budget accommodation", "cheap hotel",
         "cheap hotels", "cheap stay", "affordable", "economical", "low-cost"),
    ),
)

# Precedence: high > moderate > low
ADVENTURE_RULES: tuple[tuple[AdventureLevel, tuple[str, ...]], ...] = (
    (
        AdventureLevel.high,
        ("extreme", "adrenaline", "thrill", "thrills", "thrilling", "hardcore",
         "very adventurous", "high adventure", "adventure junkie"),
    ),
    (
        AdventureLevel.moderate,
        ("moderate", "some adventure", "bit of adventure", "medium", "balanced",
         "mix of adventure"),
    ),
    (
        AdventureLevel.low,
        ("low adventure", "no adventure", "not adventurous", "easy", "gentle", "calm",
         "low-key", "low key"),
    ),
)

# Negated phrases ("no meat") are read before the bare keywords they contain
FOOD_RULES: tuple[tuple[FoodPreference, tuple[str, ...]], ...] = (
    (FoodPreference.vegan, ("vegan", "plant-based", "plant based")),
    (FoodPreference.vegetarian, ("no meat", "without meat", "don't eat meat")),
    (
        FoodPreference.non_vegetarian,
        ("non-vegetarian", "non vegetarian", "nonvegetarian", "non-veg", "non veg", "nonveg",
         "meat", "chicken", "seafood", "fish", "mutton"),
    ),
    (FoodPreference.vegetarian, ("vegetarian", "veggie", "veg", "pure veg", "jain")),
    (
        FoodPreference.any,
        ("eat anything", "eat everything", "no food preference", "no preference",
         "any cuisine", "any food", "all food"),
    ),
)

# Precedence: premium > standard > budget
COMFORT_RULES: tuple[tuple[ComfortLevel, tuple[str, ...]], ...] = (
    (
        ComfortLevel.premium,
        ("premium", "luxury", "high comfort", "top comfort", "maximum comfort",
         "very comfortable"),
    ),
    (
        ComfortLevel.standard,
        ("standard", "decent", "average", "moderate comfort", "comfortable"),
    ),
    (
        ComfortLevel.budget,
        ("basic", "minimal", "no frills", "no-frills", "bare minimum", "roughing it"),
    ),
)

# Precedence: packed > busy > relaxed > flexible
SCHEDULE_RULES: tuple[tuple[SchedulePreference, tuple[str, ...]], ...] = (
    (
        SchedulePreference.packed,
        ("packed", "action-packed", "jam-packed", "full schedule", "lots of activities",
         "early start", "early starts", "see everything"),
    ),
    (
        SchedulePreference.busy,
        ("busy", "active", "multiple activities", "several activities"),
    ),
    (
        SchedulePreference.relaxed,
        ("relaxed pace", "relaxed", "slow", "slow-paced", "leisurely", "no rush",
         "laid-back", "laid back", "take it easy", "lazy"),
    ),
    (
        SchedulePreference.flexible,
        ("flexible", "go with the flow", "spontaneous", "adaptable"),
    ),
)

# "monsoon" is read before generic rain words so it stays reachable
WEATHER_RULES: tuple[tuple[WeatherPreference, tuple[str, ...]], ...] = (
    (WeatherPreference.monsoon, ("monsoon", "monsoons")),
    (WeatherPreference.rainy, ("rain", "rainy", "rains", "drizzle", "wet")),
    (
        WeatherPreference.cold,
        ("cold", "snow", "snowy", "snowfall", "winter", "chilly", "freezing"),
    ),
    (WeatherPreference.hot, ("hot", "summer", "warm", "heat")),
    (WeatherPreference.sunny, ("sunny", "sunshine", "sun", "clear skies", "clear sky")),
    (WeatherPreference.mild, ("mild", "pleasant", "spring", "autumn", "moderate weather")),
)

# Canonical destination names with their aliases; first entry wins
CITY_GAZETTEER: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("goa", ("goa", "goan", "panaji", "panjim")),
    ("mumbai", ("mumbai", "bombay")),
    ("delhi", ("new delhi", "delhi")),
    ("bangalore", ("bangalore", "bengaluru")),
    ("pune", ("pune",)),
    ("hyderabad", ("hyderabad",)),
    ("chennai", ("chennai", "madras")),
    ("kolkata", ("kolkata", "calcutta")),
    ("kerala", ("kerala", "kochi", "cochin", "munnar", "alleppey", "trivandrum")),
    ("jaipur", ("jaipur", "pink city")),
    ("udaipur", ("udaipur",)),
    ("jodhpur", ("jodhpur",)),
    ("jaisalmer", ("jaisalmer",)),
    ("agra", ("agra", "taj mahal")),
    ("varanasi", ("varanasi", "banaras", "benares")),
    ("rishikesh", ("rishikesh",)),
    ("shimla", ("shimla", "simla")),
    ("manali", ("manali",)),
    ("ladakh", ("ladakh", "leh")),
    ("kashmir", ("kashmir", "srinagar", "gulmarg")),
    ("darjeeling", ("darjeeling",)),
    ("ooty", ("ooty", "udhagamandalam")),
    ("coorg", ("coorg", "kodagu")),
    ("mysore", ("mysore", "mysuru")),
    ("pondicherry", ("pondicherry", "puducherry")),
    ("andaman", ("andaman", "port blair", "havelock")),
    ("amritsar", ("amritsar",)),
    ("lucknow", ("lucknow",)),
    ("ahmedabad", ("ahmedabad",)),
    ("chandigarh", ("chandigarh",)),
)


def compile_keywords(keywords: Sequence[str]) -> re.Pattern[str]:
    """Build a case-insensitive whole-word pattern for a keyword list."""
    alternatives = "|".join(re.escape(k) for k in sorted(keywords, key=len, reverse=True))
    return re.compile(rf"(?<![\w-])(?:{alternatives})(?![\w-])", re.IGNORECASE)


def compile_rules(rules: Sequence[tuple[T, Sequence[str]]]) -> list[tuple[T, re.Pattern[str]]]:
    """Precompile an ordered rule table."""
    return [(value, compile_keywords(keywords)) for value, keywords in rules]


def match_first(rules: Sequence[tuple[T, re.Pattern[str]]], message: str) -> T | None:
    """Return the value of the first rule whose pattern occurs in the message."""
    for value, pattern in rules:
        if pattern.search(message):
            return value
    return None


_THEME = compile_rules(THEME_RULES)
_GROUP = compile_rules(GROUP_RULES)
_TRANSPORT = compile_rules(TRANSPORT_RULES)
_STAY = compile_rules(STAY_RULES)
_ADVENTURE = compile_rules(ADVENTURE_RULES)
_FOOD = compile_rules(FOOD_RULES)
_COMFORT = compile_rules(COMFORT_RULES)
_SCHEDULE = compile_rules(SCHEDULE_RULES)
_WEATHER = compile_rules(WEATHER_RULES)
_CITIES = compile_rules(CITY_GAZETTEER)


def parse_trip_theme(message: str) -> TripTheme | None:
    return match_first(_THEME, message)


def parse_group_type(message: str) -> GroupType | None:
    return match_first(_GROUP, message)


def parse_transport_mode(message: str) -> TransportMode | None:
    return match_first(_TRANSPORT, message)


def parse_stay_preference(message: str) -> StayPreference | None:
    return match_first(_STAY, message)


def parse_adventure_level(message: str) -> AdventureLevel | None:
    return match_first(_ADVENTURE, message)


def parse_food_preference(message: str) -> FoodPreference | None:
    return match_first(_FOOD, message)


def parse_comfort_level(message: str) -> ComfortLevel | None:
    return match_first(_COMFORT, message)


def parse_schedule_preference(message: str) -> SchedulePreference | None:
    return match_first(_SCHEDULE, message)


def parse_weather_preference(message: str) -> WeatherPreference | None:
    return match_first(_WEATHER, message)


def parse_city(message: str) -> str | None:
    """Match the message against the gazetteer, returning the canonical name."""
    return match_first(_CITIES, message)
