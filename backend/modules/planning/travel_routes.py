"""
modules/planning/travel_routes.py
-----------------------------------
Inter-destination legs for the optimized visiting order.

Mode selection by leg distance:
  ≤ 150 km  → car (luxury / premium) or bus (everyone else)
  ≤ 800 km  → train
  otherwise → flight

Leg cost comes from CostEstimator (same rate as the route matrix), so the
trip total agrees with what the optimizer minimised.  Durations use mode
speeds; flights add a fixed airport overhead.  Carbon uses per-km emission
factors.  Every other mode is listed as a RouteAlternative priced at its own
per-km fare.
"""

from __future__ import annotations
from typing import Sequence

from schemas.destination import Destination
from schemas.preferences import TripPreferences
from schemas.trip import RouteAlternative, TravelRoute
from modules.tool_usage.cost_tool import CostEstimator
from modules.tool_usage.distance_tool import DistanceTool


_SHORT_LEG_KM:  float = 150.0
_MEDIUM_LEG_KM: float = 800.0

_SPEED_KMH: dict[str, float] = {"car": 80.0, "bus": 60.0, "train": 120.0, "flight": 500.0}
_FLIGHT_OVERHEAD_MIN: int = 120       # check-in, security, transfers
_CO2_G_PER_KM: dict[str, float] = {"car": 120.0, "bus": 89.0, "train": 14.0, "flight": 285.0}
_FARE_PER_KM: dict[str, float] = {"car": 0.06, "bus": 0.08, "train": 0.15, "flight": 0.25}

_PROS_CONS: dict[str, tuple[tuple[str, ...], tuple[str, ...]]] = {
    "car":    (("Door-to-door", "Flexible stops"), ("Parking and tolls", "Driver fatigue")),
    "bus":    (("Cheapest fares", "City-centre stations"), ("Slowest option", "Limited legroom")),
    "train":  (("City-centre to city-centre", "Low emissions"), ("Fixed timetable",)),
    "flight": (("Fastest over long distances",), ("Airport transfers", "Highest emissions")),
}


def select_mode(distance_km: float, travel_style: str) -> str:
    if distance_km <= _SHORT_LEG_KM:
        return "car" if travel_style in ("luxury", "premium") else "bus"
    if distance_km <= _MEDIUM_LEG_KM:
        return "train"
    return "flight"


def mode_duration_minutes(mode: str, distance_km: float) -> int:
    minutes = distance_km / _SPEED_KMH[mode] * 60.0
    if mode == "flight":
        minutes += _FLIGHT_OVERHEAD_MIN
    return int(round(minutes))


def carbon_kg(mode: str, distance_km: float) -> float:
    return round(_CO2_G_PER_KM[mode] * distance_km / 1000.0, 3)


class TravelRoutePlanner:
    """Builds the TravelRoute legs between consecutive destinations."""

    def __init__(
        self,
        distance_tool: DistanceTool | None = None,
        cost_estimator: CostEstimator | None = None,
    ):
        self.distance_tool  = distance_tool  or DistanceTool()
        self.cost_estimator = cost_estimator or CostEstimator()

    def plan(
        self,
        ordered: Sequence[Destination],
        preferences: TripPreferences,
        travel_style: str | None = None,
    ) -> tuple[TravelRoute, ...]:
        """Legs for consecutive pairs of *ordered*; style defaults to the traveller's."""
        style = travel_style or preferences.travel_style
        return tuple(
            self.leg(a, b, style) for a, b in zip(ordered, ordered[1:])
        )

    def leg(self, origin: Destination, target: Destination, travel_style: str) -> TravelRoute:
        distance = self.distance_tool.distance(origin.coordinates, target.coordinates)
        mode = select_mode(distance, travel_style)
        return TravelRoute(
            from_id=origin.id,
            to_id=target.id,
            from_name=origin.name,
            to_name=target.name,
            method=mode,
            distance_km=distance,
            duration_minutes=mode_duration_minutes(mode, distance),
            cost=self.cost_estimator.estimate(distance, travel_style),
            carbon_kg=carbon_kg(mode, distance),
            alternatives=self._alternatives(mode, distance),
        )

    @staticmethod
    def _alternatives(chosen: str, distance_km: float) -> tuple[RouteAlternative, ...]:
        return tuple(
            RouteAlternative(
                method=mode,
                duration_minutes=mode_duration_minutes(mode, distance_km),
                cost=round(_FARE_PER_KM[mode] * distance_km, 2),
                carbon_kg=carbon_kg(mode, distance_km),
                pros=_PROS_CONS[mode][0],
                cons=_PROS_CONS[mode][1],
            )
            for mode in _SPEED_KMH
            if mode != chosen
        )
