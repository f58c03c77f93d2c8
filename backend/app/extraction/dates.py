"""Date-range and trip-duration extraction from free text.

Recognised forms, in precedence order:

1. ISO dates: "2025-12-22", "2025-12-22 to 2025-12-25"
2. Day-first ranges: "20th to 23rd December", "28 Dec - 2 Jan"
3. Month-first ranges: "Dec 20-23", "December 20 to 23"
4. Day-month to day: "23rd december to 30th" (same month)
5. Single dates: "22nd Dec", "Dec 22", "22 of December 2026"
6. Relative: "today", "tomorrow", "in 5 days"
7. Weekdays: "next friday", "this sunday"

Malformed text never raises; it simply yields no date.
"""

import re
from dataclasses import dataclass
from datetime import date, timedelta

MONTHS: dict[str, int] = {
    "jan": 1,
    "feb": 2,
    "mar": 3,
    "apr": 4,
    "may": 5,
    "jun": 6,
    "jul": 7,
    "aug": 8,
    "sep": 9,
    "oct": 10,
    "nov": 11,
    "dec": 12,
}

WEEKDAYS: dict[str, int] = {
    "monday": 0,
    "tuesday": 1,
    "wednesday": 2,
    "thursday": 3,
    "friday": 4,
    "saturday": 5,
    "sunday": 6,
}

MONTH_PATTERN = (
    r"(jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|aug(?:ust)?"
    r"|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)"
)
_DAY = r"(\d{1,2})(?:st|nd|rd|th)?"
_SEP = r"\s*(?:to|till|until|through|-|–|—)\s*"
_YEAR = r"(?:,?\s+(\d{4}))?"

_ISO = r"(\d{4})-(\d{2})-(\d{2})"
ISO_RANGE_RE = re.compile(_ISO + r"\s*(?:to|until|through|-|–)\s*" + _ISO)
ISO_RE = re.compile(_ISO)

DAY_FIRST_RANGE_RE = re.compile(
    rf"\b{_DAY}(?:\s+(?:of\s+)?{MONTH_PATTERN})?{_SEP}{_DAY}\s+(?:of\s+)?{MONTH_PATTERN}\b{_YEAR}",
    re.IGNORECASE,
)
MONTH_FIRST_RANGE_RE = re.compile(
    rf"\b{MONTH_PATTERN}\s+{_DAY}{_SEP}{_DAY}\b{_YEAR}", re.IGNORECASE
)
# "23rd december to 30th": the end day shares the start month
DAY_MONTH_TO_DAY_RE = re.compile(
    rf"\b{_DAY}\s+(?:of\s+)?{MONTH_PATTERN}{_YEAR}{_SEP}{_DAY}\b(?!\s*-?\s*(?:days?|nights?)\b)",
    re.IGNORECASE,
)
DAY_MONTH_RE = re.compile(
    rf"\b{_DAY}\s*(?:of\s+)?{MONTH_PATTERN}\b{_YEAR}", re.IGNORECASE
)
MONTH_DAY_RE = re.compile(rf"\b{MONTH_PATTERN}\s+{_DAY}\b{_YEAR}", re.IGNORECASE)

IN_N_DAYS_RE = re.compile(r"\bin\s+(\d{1,3})\s+days?\b", re.IGNORECASE)
WEEKDAY_RE = re.compile(
    r"\b(?:next|this|coming)\s+(monday|tuesday|wednesday|thursday|friday|saturday|sunday)\b",
    re.IGNORECASE,
)
DURATION_RE = re.compile(
    r"(?<!in )\b(\d{1,2})\s*[- ]?\s*(?:days?|nights?)\b", re.IGNORECASE
)

MAX_TRIP_DAYS = 60


@dataclass(frozen=True)
class DateRange:
    """Start/end dates found in a message (either may be absent)."""

    start: date | None = None
    end: date | None = None

    @property
    def travel_days(self) -> int | None:
        """Days between start and end when both are known and ordered."""
        if self.start is None or self.end is None:
            return None
        days = (self.end - self.start).days
        return days if days > 0 else None


def month_number(name: str) -> int:
    """Map a month name or abbreviation to 1-12."""
    return MONTHS[name.lower()[:3]]


def _safe_date(year: int, month: int, day: int) -> date | None:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _ordered(start: date | None, end: date | None) -> DateRange:
    """Drop an end date that precedes the start."""
    if start is not None and end is not None and end < start:
        return DateRange(start=start)
    return DateRange(start=start, end=end)


def _parse_iso(message: str, today: date) -> DateRange | None:
    match = ISO_RANGE_RE.search(message)
    if match:
        y1, m1, d1, y2, m2, d2 = (int(g) for g in match.groups())
        return _ordered(_safe_date(y1, m1, d1), _safe_date(y2, m2, d2))

    match = ISO_RE.search(message)
    if match:
        y, m, d = (int(g) for g in match.groups())
        start = _safe_date(y, m, d)
        if start is not None:
            return DateRange(start=start)
    return None


def _parse_day_first_range(message: str, today: date) -> DateRange | None:
    match = DAY_FIRST_RANGE_RE.search(message)
    if not match:
        return None

    d1, m1, d2, m2, year = match.groups()
    end_month = month_number(m2)
    start_month = month_number(m1) if m1 else end_month
    start_year = int(year) if year else today.year
    # "28 Dec to 2 Jan" crosses into the next year
    end_year = start_year + 1 if end_month < start_month else start_year

    return _ordered(
        _safe_date(start_year, start_month, int(d1)),
        _safe_date(end_year, end_month, int(d2)),
    )


def _parse_month_first_range(message: str, today: date) -> DateRange | None:
    match = MONTH_FIRST_RANGE_RE.search(message)
    if not match:
        return None

    month_name, d1, d2, year = match.groups()
    month = month_number(month_name)
    year_value = int(year) if year else today.year
    return _ordered(
        _safe_date(year_value, month, int(d1)),
        _safe_date(year_value, month, int(d2)),
    )


def _parse_day_month_to_day(message: str, today: date) -> DateRange | None:
    match = DAY_MONTH_TO_DAY_RE.search(message)
    if not match:
        return None

    d1, month_name, year, d2 = match.groups()
    month = month_number(month_name)
    year_value = int(year) if year else today.year
    return _ordered(
        _safe_date(year_value, month, int(d1)),
        _safe_date(year_value, month, int(d2)),
    )


def _parse_single(message: str, today: date) -> DateRange | None:
    match = DAY_MONTH_RE.search(message)
    if match:
        day, month_name, year = match.groups()
    else:
        match = MONTH_DAY_RE.search(message)
        if not match:
            return None
        month_name, day, year = match.groups()

    start = _safe_date(int(year) if year else today.year, month_number(month_name), int(day))
    return DateRange(start=start) if start else None


def _parse_relative(message: str, today: date) -> DateRange | None:
    lower = message.lower()
    if re.search(r"\btoday\b", lower):
        return DateRange(start=today)
    if re.search(r"\btomorrow\b", lower):
        return DateRange(start=today + timedelta(days=1))

    match = IN_N_DAYS_RE.search(lower)
    if match:
        return DateRange(start=today + timedelta(days=int(match.group(1))))
    return None


def next_weekday(target: int, today: date) -> date:
    """Nearest future occurrence of a weekday (never today)."""
    offset = target - today.weekday()
    if offset <= 0:
        offset += 7
    return today + timedelta(days=offset)


def _parse_weekday(message: str, today: date) -> DateRange | None:
    match = WEEKDAY_RE.search(message)
    if not match:
        return None
    return DateRange(start=next_weekday(WEEKDAYS[match.group(1).lower()], today))


_PARSERS = (
    _parse_iso,
    _parse_day_first_range,
    _parse_month_first_range,
    _parse_day_month_to_day,
    _parse_single,
    _parse_relative,
    _parse_weekday,
)


def parse_date_range(message: str, today: date | None = None) -> DateRange:
    """Extract a start/end date pair from a message.

    Args:
        message: Raw user message
        today: Reference date for relative terms and missing years

    Returns:
        DateRange (both ends None when nothing was recognised)
    """
    today = today or date.today()

    for parser in _PARSERS:
        found = parser(message, today)
        if found is not None:
            return found

    return DateRange()


def parse_duration(message: str) -> int | None:
    """Extract an explicit trip length such as "5 days" or "a 3-night stay"."""
    match = DURATION_RE.search(message)
    if not match:
        return None
    days = int(match.group(1))
    return days if 0 < days <= MAX_TRIP_DAYS else None
