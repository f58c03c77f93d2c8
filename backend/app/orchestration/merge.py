"""Extraction merge policy - combines rule-based and AI extractions.

Rules:
- The rule-based parse is the starting point.
- AI fields are overlaid (AI wins per field) only when the responder's
  confidence exceeds the extraction threshold.
- Applying an update onto a session checklist is first-write-wins: a field
  that already holds a value is never replaced. Only a session reset clears
  fields.
- A date or trip length that contradicts the ones already held is dropped;
  the known trip length then decides the missing end date.
"""

import logging
from collections.abc import Mapping
from datetime import timedelta
from typing import Any

from pydantic import ValidationError

from backend.app.models.checklist import CHECKLIST_FIELDS, TripChecklist, field_alias, is_filled

logger = logging.getLogger(__name__)

# Accept both snake_case and camelCase keys from the model provider
_FIELD_BY_KEY: dict[str, str] = {
    **{name: name for name in CHECKLIST_FIELDS},
    **{field_alias(name): name for name in CHECKLIST_FIELDS},
}

MAX_DERIVED_DAYS = 365


def filled_values(checklist: TripChecklist) -> dict[str, Any]:
    """Non-empty fields of a checklist, in checklist field order."""
    return {
        name: getattr(checklist, name)
        for name in CHECKLIST_FIELDS
        if is_filled(getattr(checklist, name))
    }


def coerce_fields(raw: Mapping[str, Any] | None) -> TripChecklist:
    """Validate an untrusted field mapping one field at a time.

    Unknown keys and values of the wrong shape are dropped individually, so
    one bad field never discards the rest.
    """
    result = TripChecklist()
    if not raw:
        return result

    for key, value in raw.items():
        name = _FIELD_BY_KEY.get(key)
        if name is None:
            logger.debug(f"Ignoring unknown extracted field {key!r}")
            continue
        if value is None:
            continue
        try:
            setattr(result, name, value)
        except ValidationError:
            logger.warning(f"Dropping invalid extracted field {key}={value!r}")

    return result


def merge_extractions(
    rule_based: TripChecklist,
    ai_fields: Mapping[str, Any] | None,
    confidence: float,
    threshold: float = 0.7,
) -> TripChecklist:
    """Combine rule-based and AI extractions into one update.

    Args:
        rule_based: Output of the field parsers
        ai_fields: Raw fields reported by the responder
        confidence: Responder confidence in [0, 1]
        threshold: AI fields are used only when confidence exceeds this

    Returns:
        Merged partial checklist (AI values win per field)
    """
    merged = rule_based.model_copy(deep=True)
    if confidence <= threshold:
        return merged

    for name, value in filled_values(coerce_fields(ai_fields)).items():
        setattr(merged, name, value)
    return merged


def _dates_consistent(checklist: TripChecklist, name: str, value: Any) -> bool:
    """Check a new date field against the dates and trip length already held.

    Invariant: with all three known, end_date == start_date + travel_days.
    """
    start, end, days = checklist.start_date, checklist.end_date, checklist.travel_days

    if name == "end_date" and start is not None:
        if value < start:
            return False
        return days is None or value == start + timedelta(days=days)
    if name == "start_date" and end is not None:
        if value > end:
            return False
        return days is None or value == end - timedelta(days=days)
    if name == "travel_days" and start is not None and end is not None:
        return value == (end - start).days
    return True


def _derive_dates(checklist: TripChecklist) -> dict[str, Any]:
    """Fill travel_days or end_date when the other two are known."""
    start, end, days = checklist.start_date, checklist.end_date, checklist.travel_days

    if start is not None and end is not None and days is None:
        span = (end - start).days
        if 0 < span <= MAX_DERIVED_DAYS:
            checklist.travel_days = span
            return {"travel_days": span}
    elif start is not None and days is not None and end is None:
        checklist.end_date = start + timedelta(days=days)
        return {"end_date": checklist.end_date}

    return {}


def apply_update(
    checklist: TripChecklist, update: TripChecklist
) -> tuple[TripChecklist, dict[str, Any]]:
    """Apply an update with first-write-wins semantics.

    Args:
        checklist: Current session checklist (not modified)
        update: Merged extraction for this turn

    Returns:
        Tuple of (new checklist, fields actually written)
    """
    updated = checklist.model_copy(deep=True)
    applied: dict[str, Any] = {}

    for name, value in filled_values(update).items():
        if is_filled(getattr(updated, name)):
            continue
        if not _dates_consistent(updated, name, value):
            logger.info(f"Ignoring {name}={value} inconsistent with existing dates")
            continue
        setattr(updated, name, value)
        applied[name] = value

    applied.update(_derive_dates(updated))
    return updated, applied


def refine_checklist(
    checklist: TripChecklist,
    ai_fields: Mapping[str, Any] | None,
    confidence: float,
    threshold: float = 0.8,
) -> TripChecklist:
    """Conservative pass: fill only absent fields from high-confidence AI output."""
    if confidence <= threshold:
        return checklist
    refined, _ = apply_update(checklist, coerce_fields(ai_fields))
    return refined
