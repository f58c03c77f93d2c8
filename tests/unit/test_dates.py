"""Unit tests for date-range and duration extraction."""

from datetime import date

import pytest

from backend.app.extraction.dates import (
    DateRange,
    next_weekday,
    parse_date_range,
    parse_duration,
)


class TestDayFirstRanges:
    """Ranges written day first ("20th to 23rd December")."""

    def test_ordinal_range_with_trailing_month(self, today: date) -> None:
        result = parse_date_range("Trip from 20th to 23rd December", today)

        assert result.start == date(2026, 12, 20)
        assert result.end == date(2026, 12, 23)
        assert result.travel_days == 3

    def test_range_with_both_months_crosses_year(self, today: date) -> None:
        result = parse_date_range("28 Dec to 2 Jan works for us", today)

        assert result.start == date(2026, 12, 28)
        assert result.end == date(2027, 1, 2)
        assert result.travel_days == 5

    def test_explicit_year(self, today: date) -> None:
        result = parse_date_range("5 to 9 March 2027", today)

        assert result.start == date(2027, 3, 5)
        assert result.end == date(2027, 3, 9)

    def test_reversed_range_keeps_only_start(self, today: date) -> None:
        result = parse_date_range("25 to 20 December", today)

        assert result.start == date(2026, 12, 25)
        assert result.end is None
        assert result.travel_days is None


class TestMonthFirstRanges:
    """Ranges written month first ("Dec 20-23")."""

    def test_hyphenated(self, today: date) -> None:
        result = parse_date_range("Dec 20-23", today)

        assert result == DateRange(start=date(2026, 12, 20), end=date(2026, 12, 23))

    def test_spelled_out(self, today: date) -> None:
        result = parse_date_range("sometime around November 3 to 7", today)

        assert result.start == date(2026, 11, 3)
        assert result.end == date(2026, 11, 7)


class TestDayMonthToDayRanges:
    """Ranges naming the month once, after the start day."""

    def test_end_day_shares_start_month(self, today: date) -> None:
        result = parse_date_range("23rd december to 30th", today)

        assert result == DateRange(start=date(2026, 12, 23), end=date(2026, 12, 30))
        assert result.travel_days == 7

    def test_explicit_year(self, today: date) -> None:
        result = parse_date_range("5 March 2027 - 9", today)

        assert result == DateRange(start=date(2027, 3, 5), end=date(2027, 3, 9))

    def test_trailing_duration_is_not_an_end_day(self, today: date) -> None:
        result = parse_date_range("23rd december to 30 days later", today)

        assert result == DateRange(start=date(2026, 12, 23))


class TestIsoDates:
    """ISO dates take precedence over everything else."""

    def test_iso_range(self, today: date) -> None:
        result = parse_date_range("2026-12-22 to 2026-12-25", today)

        assert result.start == date(2026, 12, 22)
        assert result.end == date(2026, 12, 25)

    def test_single_iso_date(self, today: date) -> None:
        result = parse_date_range("leaving 2027-01-15", today)

        assert result == DateRange(start=date(2027, 1, 15))

    def test_invalid_iso_date_is_absent(self, today: date) -> None:
        assert parse_date_range("2026-02-30", today) == DateRange()


class TestSingleDates:
    """A single month and day in either order."""

    @pytest.mark.parametrize(
        "message",
        ["starting 22nd Dec", "starting Dec 22", "starting 22 of December"],
    )
    def test_day_and_month_in_either_order(self, message: str, today: date) -> None:
        assert parse_date_range(message, today) == DateRange(start=date(2026, 12, 22))

    def test_explicit_year(self, today: date) -> None:
        result = parse_date_range("22 of December 2027", today)

        assert result.start == date(2027, 12, 22)

    def test_invalid_calendar_day_is_absent(self, today: date) -> None:
        assert parse_date_range("31st Feb", today) == DateRange()


class TestRelativeDates:
    """Relative terms resolve against the injected reference date."""

    def test_today(self, today: date) -> None:
        assert parse_date_range("can we leave today?", today).start == today

    def test_tomorrow(self, today: date) -> None:
        assert parse_date_range("leaving tomorrow", today).start == date(2026, 10, 19)

    def test_in_n_days(self, today: date) -> None:
        assert parse_date_range("in 5 days", today).start == date(2026, 10, 23)

    def test_next_weekday(self, today: date) -> None:
        # Reference date is a Sunday
        assert parse_date_range("next friday", today).start == date(2026, 10, 23)

    def test_same_weekday_rolls_a_week(self, today: date) -> None:
        assert parse_date_range("this sunday", today).start == date(2026, 10, 25)

    def test_next_weekday_helper_never_returns_today(self, today: date) -> None:
        assert next_weekday(today.weekday(), today) == date(2026, 10, 25)


class TestNoDates:
    def test_plain_text_has_no_dates(self, today: date) -> None:
        result = parse_date_range("we love beaches and seafood", today)

        assert result == DateRange()
        assert result.travel_days is None

    def test_parsing_is_deterministic(self, today: date) -> None:
        message = "From 20th to 23rd December"
        assert parse_date_range(message, today) == parse_date_range(message, today)


class TestDuration:
    """Explicit trip lengths."""

    @pytest.mark.parametrize(
        ("message", "expected"),
        [
            ("a 5 day trip", 5),
            ("a 3-night stay", 3),
            ("around 10 days", 10),
            ("45 days off", 45),
        ],
    )
    def test_duration(self, message: str, expected: int) -> None:
        assert parse_duration(message) == expected

    def test_relative_date_is_not_a_duration(self) -> None:
        assert parse_duration("leaving in 5 days") is None

    def test_implausible_duration_is_ignored(self) -> None:
        assert parse_duration("90 days") is None

    def test_no_duration(self) -> None:
        assert parse_duration("a weekend in Goa") is None
