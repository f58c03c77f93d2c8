"""Budget extraction from free text.

Patterns are tried in priority order and the first one that matches wins;
no later pattern is tried, even when its amount is out of range:

1. "3 lakh" / "2.5 lac"        -> N x 100,000
2. "15k" / "20 thousand"       -> N x 1,000
3. "5000 rs" / "rs 5000" / "₹5000"
4. a bare number such as "30,000", "1,50,000" or "45000 per person"
   (taken as-is)
"""

import re

from backend.app.extraction.dates import MONTH_PATTERN

MAX_PLAUSIBLE_AMOUNT = 10_000_000

LAKH_RE = re.compile(r"(\d+(?:\.\d+)?)\s*(?:lakhs?|lacs?)\b", re.IGNORECASE)
THOUSAND_RE = re.compile(r"(\d+(?:\.\d+)?)\s*(?:k|thousand)\b", re.IGNORECASE)
RUPEES_SUFFIX_RE = re.compile(r"(\d[\d,]*)\s*(?:rs\.?|rupees?|inr)(?![a-z])", re.IGNORECASE)
RUPEES_PREFIX_RE = re.compile(r"(?:₹|\brs\.?|\binr)\s*(\d[\d,]*)", re.IGNORECASE)
BARE_NUMBER_RE = re.compile(
    r"(?<![\d.,])(\d{1,3}(?:,\d{2,3})+|\d{3,})(?![\d.,]*\d)(?:\s+(?:per\s+person|each|pp)\b)?",
    re.IGNORECASE,
)

# Numbers that are dates, ordinals, counts or units rather than money
_NOT_MONEY = [
    re.compile(r"\d{4}-\d{2}-\d{2}"),
    re.compile(rf"\b\d{{1,2}}(?:st|nd|rd|th)?\s*(?:of\s+)?{MONTH_PATTERN}\b(?:,?\s+\d{{4}})?", re.IGNORECASE),
    re.compile(rf"\b{MONTH_PATTERN}\s+\d{{1,4}}(?:st|nd|rd|th)?\b(?:,?\s+\d{{4}})?", re.IGNORECASE),
    re.compile(r"\b\d+(?:st|nd|rd|th)\b", re.IGNORECASE),
    re.compile(
        r"\b\d+\s*(?:days?|nights?|weeks?|months?|years?|people|persons|pax|adults|kids"
        r"|children|members|km|kms|miles|hours?|hrs?|am|pm|%)(?![a-z])",
        re.IGNORECASE,
    ),
    re.compile(r"\b(?:19|20)\d{2}\b"),
]


def _amount(text: str) -> float:
    return float(text.replace(",", ""))


def _plausible(value: float) -> int | None:
    if 0 < value < MAX_PLAUSIBLE_AMOUNT:
        return round(value)
    return None


def _masked(message: str) -> str:
    for pattern in _NOT_MONEY:
        message = pattern.sub(" ", message)
    return message


def _first_match(message: str) -> tuple[re.Match[str], int] | None:
    for pattern, multiplier in (
        (LAKH_RE, 100_000),
        (THOUSAND_RE, 1000),
        (RUPEES_SUFFIX_RE, 1),
        (RUPEES_PREFIX_RE, 1),
    ):
        match = pattern.search(message)
        if match:
            return match, multiplier

    match = BARE_NUMBER_RE.search(_masked(message))
    return (match, 1) if match else None


def parse_budget(message: str) -> int | None:
    """Extract a total budget in whole currency units.

    Only the first matching pattern is used: an implausible amount there
    ("200 lakh") yields None rather than a later, weaker match.
    Per-person amounts are returned as stated; they are not multiplied by
    the group size.
    """
    found = _first_match(message)
    if found is None:
        return None
    match, multiplier = found
    return _plausible(_amount(match.group(1)) * multiplier)
