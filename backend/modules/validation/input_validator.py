"""
modules/validation/input_validator.py
--------------------------------------
Input guards applied before any optimization work starts.

  Preferences:
    ✓ budget.total > 0 and finite
    ✓ duration.days > 0
    ✓ duration.days >= number of destinations (every stop needs a whole day)
    ✓ group_size >= 1

  Destination id list:
    ✓ non-empty
    ✓ no blank ids
    ✓ no duplicates (case-insensitive)

  Destination record:
    ✓ non-null, finite coordinates
    ✓ latitude in [-90, 90], longitude in [-180, 180]
    ✓ coordinates are not both exactly 0.0 (likely missing)
    ✓ popularity in [0, 1]

  Attraction record:
    ✓ rating in [0, 5]
    ✓ visit_duration_minutes > 0
    ✓ cost >= 0
    ✓ coordinates in range when present

Usage:
    from modules.validation import validate_destination

    result = validate_destination(dataclasses.asdict(dest))
    if not result.valid:
        print(result.errors)
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar

import pydantic

from modules.errors import ValidationError
from schemas.preferences import TripPreferences

T = TypeVar("T")

logger = logging.getLogger(__name__)


# ── Result dataclass ───────────────────────────────────────────────────────────

@dataclass
class ValidationResult:
    """
    Outcome of a single validation run.

    Attributes:
        valid:  True iff there are zero errors.
        errors: Human-readable list of failure reasons.
        record: The input record dict (for logging purposes).
    """
    valid: bool
    errors: list[str] = field(default_factory=list)
    record: dict = field(default_factory=dict, repr=False)

    def __bool__(self) -> bool:
        return self.valid


def _result(errors: list[str], record: dict) -> ValidationResult:
    return ValidationResult(valid=len(errors) == 0, errors=errors, record=record)


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


# ── Preferences ────────────────────────────────────────────────────────────────

def parse_preferences(payload: dict[str, Any]) -> TripPreferences:
    """
    Build TripPreferences from a raw dict (e.g. a decoded JSON request).

    Shape errors reported by pydantic are re-raised as ValidationError so the
    caller only ever deals with the optimizer's own error types.
    """
    try:
        return TripPreferences.model_validate(payload)
    except pydantic.ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
            for err in exc.errors()
        )
        raise ValidationError(
            f"malformed preferences: {problems}",
            stage="validate",
            code="INVALID_PREFERENCES",
        ) from exc


def validate_preferences(
    preferences: TripPreferences,
    destination_count: int,
) -> ValidationResult:
    """Range checks that the pydantic schema does not express."""
    errors: list[str] = []
    record = preferences.model_dump()

    total = preferences.budget.total
    if not _is_number(total) or total <= 0:
        errors.append(f"budget.total={total!r} must be a finite number > 0")

    days = preferences.duration.days
    if days <= 0:
        errors.append(f"duration.days={days} must be > 0")
    elif destination_count > days:
        errors.append(
            f"duration.days={days} is fewer than the {destination_count} "
            f"destinations requested; each destination needs at least one day"
        )

    if preferences.group_size < 1:
        errors.append(f"group_size={preferences.group_size} must be >= 1")

    return _result(errors, record)


def validate_destination_ids(destination_ids: list[str]) -> ValidationResult:
    errors: list[str] = []
    record = {"destination_ids": list(destination_ids)}

    if not destination_ids:
        errors.append("destination list must not be empty")
        return _result(errors, record)

    seen: set[str] = set()
    for dest_id in destination_ids:
        key = str(dest_id).strip().lower()
        if not key:
            errors.append("destination ids must not be blank")
        elif key in seen:
            errors.append(f"destination {dest_id!r} is listed more than once")
        seen.add(key)

    return _result(errors, record)


# ── Destination validation ─────────────────────────────────────────────────────

def _check_coordinates(lat: Any, lon: Any, errors: list[str], *, required: bool) -> None:
    if lat is None or lon is None:
        if required:
            errors.append(
                f"location_lat/location_lon must not be NULL "
                f"(got lat={lat!r}, lon={lon!r})"
            )
        return

    if not (_is_number(lat) and _is_number(lon)):
        errors.append(
            f"location_lat/location_lon must be finite numbers "
            f"(got lat={lat!r}, lon={lon!r})"
        )
        return

    if not (-90.0 <= lat <= 90.0):
        errors.append(f"location_lat={lat} is outside valid range [-90, 90]")

    if not (-180.0 <= lon <= 180.0):
        errors.append(f"location_lon={lon} is outside valid range [-180, 180]")

    if lat == 0.0 and lon == 0.0:
        errors.append(
            "location_lat=0.0 and location_lon=0.0: likely a missing/default "
            "value; the null island (0°N, 0°E) is not a valid destination"
        )


def validate_coordinates(record: dict[str, Any]) -> ValidationResult:
    """Coordinate checks only; used by the route optimizer."""
    errors: list[str] = []
    _check_coordinates(
        record.get("location_lat"), record.get("location_lon"), errors, required=True,
    )
    return _result(errors, record)


def validate_destination(record: dict[str, Any]) -> ValidationResult:
    """
    Validate a destination record before it enters route optimization.

    A failure here aborts the request with DataError naming the destination.
    """
    errors = validate_coordinates(record).errors

    popularity = record.get("popularity")
    if not _is_number(popularity) or not (0.0 <= popularity <= 1.0):
        errors.append(f"popularity={popularity!r} must be in [0, 1]")

    return _result(errors, record)


def validate_attraction(record: dict[str, Any]) -> ValidationResult:
    """Validate an attraction record before it enters the scheduling pool."""
    errors: list[str] = []

    _check_coordinates(
        record.get("location_lat"), record.get("location_lon"), errors, required=False,
    )

    rating = record.get("rating")
    if not _is_number(rating) or not (0.0 <= rating <= 5.0):
        errors.append(f"rating={rating!r} is outside valid range [0, 5]")

    duration = record.get("visit_duration_minutes")
    if not _is_number(duration) or duration <= 0:
        errors.append(f"visit_duration_minutes={duration!r} must be > 0")

    cost = record.get("cost")
    if not _is_number(cost) or cost < 0:
        errors.append(f"cost={cost!r} must be >= 0")

    return _result(errors, record)


# ── Batch filter helper ────────────────────────────────────────────────────────

def filter_valid(
    items: list[T],
    validator: Callable[[dict], ValidationResult],
    to_dict: Callable[[T], dict] | None = None,
    log: bool = True,
) -> list[T]:
    """
    Apply a validator to every item in a list, return only the valid ones.

    Args:
        items:     List of items (dataclass instances or dicts).
        validator: One of validate_destination / validate_attraction.
        to_dict:   Optional callable to convert each item to a dict.
                   If None, items are assumed to already be dicts or have __dict__.
        log:       If True, log a warning for every rejected record.
    """
    valid_items: list[T] = []
    rejected = 0

    for item in items:
        record_dict = (
            to_dict(item)
            if to_dict is not None
            else (item if isinstance(item, dict) else item.__dict__)
        )
        result = validator(record_dict)
        if result.valid:
            valid_items.append(item)
        else:
            rejected += 1
            if log:
                name = record_dict.get("name") or record_dict.get("id", "?")
                logger.warning(
                    "[Validator] REJECTED %r: %s", name, "; ".join(result.errors)
                )

    if log and rejected:
        logger.warning(
            "[Validator] %d/%d records rejected; %d passed.",
            rejected, len(items), len(valid_items),
        )

    return valid_items
