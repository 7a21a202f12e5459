"""
schemas/trip.py
---------------
Dataclass definitions for the optimizer's output.

All records are frozen and built exactly once per request.  ``to_dict()`` on
OptimizedTrip yields a JSON-safe structure (times as "HH:MM") for the
presentation layer.
"""

from __future__ import annotations
from dataclasses import asdict, dataclass, field
from datetime import time
from typing import Any, Optional

from schemas.destination import Attraction, Destination


@dataclass(frozen=True)
class PlannedActivity:
    """One scheduled attraction visit."""
    attraction: Attraction
    start_time: time
    end_time: time
    score: float = 0.0
    priority: str = "optional"          # must_see | recommended | optional

    @property
    def duration_minutes(self) -> int:
        return (self.end_time.hour * 60 + self.end_time.minute) - (
            self.start_time.hour * 60 + self.start_time.minute
        )


@dataclass(frozen=True)
class MealSuggestion:
    meal_type: str                      # breakfast | lunch | dinner
    category: str                       # local | international | fast | fine_dining
    estimated_cost: float
    recommendations: tuple[str, ...] = ()


@dataclass(frozen=True)
class DayItinerary:
    """One day's scheduled activities at a destination."""
    day_number: int
    activities: tuple[PlannedActivity, ...] = ()
    meals: tuple[MealSuggestion, ...] = ()
    estimated_cost: float = 0.0         # Σ scheduled activity costs
    walking_distance_km: float = 0.0

    @property
    def scheduled_minutes(self) -> int:
        return sum(a.duration_minutes for a in self.activities)


@dataclass(frozen=True)
class OptimizedDestination:
    destination: Destination
    days_allocated: int
    budget_allocated: float
    estimated_cost: float
    itinerary: tuple[DayItinerary, ...] = ()


@dataclass(frozen=True)
class RouteAlternative:
    method: str
    duration_minutes: int
    cost: float
    carbon_kg: float
    pros: tuple[str, ...] = ()
    cons: tuple[str, ...] = ()


@dataclass(frozen=True)
class TravelRoute:
    """A leg between two consecutive destinations in the optimized order."""
    from_id: str
    to_id: str
    from_name: str
    to_name: str
    method: str                         # car | bus | train | flight
    distance_km: float
    duration_minutes: int
    cost: float
    carbon_kg: float
    alternatives: tuple[RouteAlternative, ...] = ()


@dataclass(frozen=True)
class TripAlternative:
    title: str
    description: str
    travel_style: str
    cost_difference: float              # alternative total − current total
    duration_difference: int = 0
    tradeoffs: tuple[str, ...] = ()


@dataclass(frozen=True)
class PersonalizedInsight:
    insight_type: str                   # budget | time | experience | practical
    title: str
    description: str
    actionable: bool = False
    savings: Optional[float] = None


@dataclass(frozen=True)
class OptimizedTrip:
    """Top-level output of the optimizer."""
    trip_id: str
    destinations: tuple[OptimizedDestination, ...]
    route: tuple[TravelRoute, ...]
    total_cost: float
    total_duration: int
    total_distance: float
    optimization_score: float
    currency: str = "USD"
    approximate: bool = False           # True when 2-opt was cut short
    warnings: tuple[str, ...] = ()
    alternatives: tuple[TripAlternative, ...] = ()
    insights: tuple[PersonalizedInsight, ...] = ()
    generated_at: str = ""              # ISO-8601 timestamp

    @property
    def order(self) -> list[str]:
        return [d.destination.id for d in self.destinations]

    def to_dict(self) -> dict[str, Any]:
        return _jsonable(asdict(self))


def _jsonable(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if isinstance(value, time):
        return value.strftime("%H:%M")
    return value
