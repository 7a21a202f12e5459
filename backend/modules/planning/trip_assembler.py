"""
modules/planning/trip_assembler.py
------------------------------------
Composes route order, allocation and day itineraries into an OptimizedTrip.

Totals
  destination.estimated_cost = Σ day activity costs + Σ meal costs
  total_cost                 = Σ destination.estimated_cost + Σ leg.cost
  total_distance             = Σ consecutive-destination haversine [km]

Optimization score (weights config.SCORE_WEIGHTS, default 0.40 / 0.35 / 0.25)
  budget_fit  = clamp(1 − |total_cost − budget| / budget)
  attractions = mean clamp(activity.score / ATTRACTION_SCORE_NORMALIZER)
                over every scheduled activity (0 when nothing is scheduled)
  day_fill    = mean over all days of scheduled minutes / available minutes
  score       = Σ wₖ·cₖ / Σ wₖ, clamped to [0, 1]
"""

from __future__ import annotations
from datetime import datetime, timezone
from typing import Mapping, Sequence
import uuid

from schemas.destination import Attraction, Destination
from schemas.preferences import TripPreferences
from schemas.trip import (
    DayItinerary,
    OptimizedDestination,
    OptimizedTrip,
    PersonalizedInsight,
    TravelRoute,
    TripAlternative,
)
from modules.planning.allocation_engine import Allocation
from modules.planning.travel_routes import TravelRoutePlanner
from modules.tool_usage.distance_tool import DistanceTool
import config


def _clamp(value: float, lo: float = 0.0, hi: float = 1.0) -> float:
    return max(lo, min(hi, value))


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


class TripAssembler:
    """Pure aggregation; performs no search of its own."""

    def __init__(
        self,
        distance_tool: DistanceTool | None = None,
        route_planner: TravelRoutePlanner | None = None,
        available_minutes: int | None = None,
    ):
        self.distance_tool = distance_tool or DistanceTool()
        self.route_planner = route_planner or TravelRoutePlanner(distance_tool=self.distance_tool)
        self.available_minutes = (
            available_minutes
            if available_minutes is not None
            else config.DAY_END_MINUTES - config.DAY_START_MINUTES
        )

    # ── Public entry point ────────────────────────────────────────────────────

    def assemble(
        self,
        ordered: Sequence[Destination],
        allocation: Mapping[str, Allocation],
        itineraries: Mapping[str, tuple[DayItinerary, ...]],
        preferences: TripPreferences,
        approximate: bool = False,
        warnings: Sequence[str] = (),
        trip_id: str | None = None,
        candidates: Mapping[str, Sequence[Attraction]] | None = None,
    ) -> OptimizedTrip:
        """
        *candidates* maps destination id to the attractions that survived
        validation; insights count only those.  When omitted, every attraction
        on the destination is treated as a candidate.
        """
        destinations = tuple(
            OptimizedDestination(
                destination=dest,
                days_allocated=allocation[dest.id].days,
                budget_allocated=allocation[dest.id].budget,
                estimated_cost=self.destination_cost(itineraries[dest.id]),
                itinerary=itineraries[dest.id],
            )
            for dest in ordered
        )
        route = self.route_planner.plan(ordered, preferences)

        total_cost = sum(d.estimated_cost for d in destinations) + sum(r.cost for r in route)
        total_distance = self.distance_tool.path_length([d.coordinates for d in ordered])
        score = self.optimization_score(destinations, total_cost, preferences.budget.total)

        return OptimizedTrip(
            trip_id=trip_id or f"trip_{uuid.uuid4().hex[:12]}",
            destinations=destinations,
            route=route,
            total_cost=round(total_cost, 2),
            total_duration=preferences.duration.days,
            total_distance=round(total_distance, 3),
            optimization_score=score,
            currency=preferences.budget.currency,
            approximate=approximate,
            warnings=tuple(warnings),
            alternatives=self.alternatives(ordered, route, preferences),
            insights=self.insights(destinations, total_cost, preferences, candidates),
            generated_at=datetime.now(timezone.utc).isoformat(),
        )

    # ── Costs and scores ──────────────────────────────────────────────────────

    @staticmethod
    def destination_cost(days: Sequence[DayItinerary]) -> float:
        return sum(
            day.estimated_cost + sum(m.estimated_cost for m in day.meals)
            for day in days
        )

    def optimization_score(
        self,
        destinations: Sequence[OptimizedDestination],
        total_cost: float,
        total_budget: float,
    ) -> float:
        components = (
            self.budget_fit(total_cost, total_budget),
            self.attraction_quality(destinations),
            self.day_fill(destinations),
        )
        weights = config.SCORE_WEIGHTS
        weighted = sum(w * c for w, c in zip(weights, components)) / sum(weights)
        return round(_clamp(weighted), 4)

    @staticmethod
    def budget_fit(total_cost: float, total_budget: float) -> float:
        if total_budget <= 0:
            return 0.0
        return _clamp(1.0 - abs(total_cost - total_budget) / total_budget)

    @staticmethod
    def attraction_quality(destinations: Sequence[OptimizedDestination]) -> float:
        normalizer = config.ATTRACTION_SCORE_NORMALIZER
        return _mean([
            _clamp(activity.score / normalizer)
            for dest in destinations
            for day in dest.itinerary
            for activity in day.activities
        ])

    def day_fill(self, destinations: Sequence[OptimizedDestination]) -> float:
        if self.available_minutes <= 0:
            return 0.0
        return _mean([
            _clamp(day.scheduled_minutes / self.available_minutes)
            for dest in destinations
            for day in dest.itinerary
        ])

    # ── Alternatives and insights ─────────────────────────────────────────────

    def alternatives(
        self,
        ordered: Sequence[Destination],
        route: Sequence[TravelRoute],
        preferences: TripPreferences,
    ) -> tuple[TripAlternative, ...]:
        """Re-cost the legs at the neighbouring cheaper and pricier travel styles."""
        styles = config.TRAVEL_STYLE_ORDER
        current = preferences.travel_style
        if current not in styles or not route:
            return ()
        idx = styles.index(current)
        neighbours = [styles[k] for k in (idx - 1, idx + 1) if 0 <= k < len(styles)]

        current_cost = sum(r.cost for r in route)
        current_minutes = sum(r.duration_minutes for r in route)
        result: list[TripAlternative] = []
        for style in neighbours:
            legs = self.route_planner.plan(ordered, preferences, travel_style=style)
            diff = round(sum(r.cost for r in legs) - current_cost, 2)
            minutes_diff = sum(r.duration_minutes for r in legs) - current_minutes
            cheaper = diff < 0
            changed_modes = sorted({r.method for r in legs} - {r.method for r in route})
            tradeoffs = [
                "Lower comfort between destinations" if cheaper
                else "More comfortable transfers",
            ]
            if changed_modes:
                tradeoffs.append(f"Switches legs to {', '.join(changed_modes)}")
            if minutes_diff:
                tradeoffs.append(
                    f"{'Saves' if minutes_diff < 0 else 'Adds'} {abs(minutes_diff)} min "
                    f"of travel"
                )
            result.append(TripAlternative(
                title=f"Travel {style} between destinations",
                description=(
                    f"Same stops and daily plans; inter-destination transport "
                    f"{'saves' if cheaper else 'adds'} {abs(diff):.2f} "
                    f"{preferences.budget.currency}."
                ),
                travel_style=style,
                cost_difference=diff,
                duration_difference=minutes_diff,
                tradeoffs=tuple(tradeoffs),
            ))
        return tuple(result)

    def insights(
        self,
        destinations: Sequence[OptimizedDestination],
        total_cost: float,
        preferences: TripPreferences,
        candidates: Mapping[str, Sequence[Attraction]] | None = None,
    ) -> tuple[PersonalizedInsight, ...]:
        budget = preferences.budget.total
        currency = preferences.budget.currency
        result: list[PersonalizedInsight] = []

        gap = budget - total_cost
        if gap >= 0:
            result.append(PersonalizedInsight(
                insight_type="budget",
                title="Within budget",
                description=f"Planned spend leaves {gap:.2f} {currency} unallocated "
                            f"for lodging, shopping or upgrades.",
                actionable=False,
                savings=round(gap, 2),
            ))
        else:
            result.append(PersonalizedInsight(
                insight_type="budget",
                title="Over budget",
                description=f"Planned spend exceeds the budget by {-gap:.2f} {currency}; "
                            f"consider a cheaper travel style or fewer paid attractions.",
                actionable=True,
            ))

        light_days = [
            (dest.destination.name, day.day_number)
            for dest in destinations
            for day in dest.itinerary
            if self.available_minutes > 0
            and day.scheduled_minutes / self.available_minutes < 0.5
        ]
        if light_days:
            names = sorted({name for name, _ in light_days})
            result.append(PersonalizedInsight(
                insight_type="time",
                title="Free time available",
                description=f"{len(light_days)} day(s) are less than half planned "
                            f"({', '.join(names)}); room for unplanned exploring.",
                actionable=True,
            ))

        must_see = sum(
            1
            for dest in destinations
            for day in dest.itinerary
            for activity in day.activities
            if activity.priority == "must_see"
        )
        if must_see:
            result.append(PersonalizedInsight(
                insight_type="experience",
                title="Highlights included",
                description=f"{must_see} must-see attraction(s) matched to your interests "
                            f"are on the schedule.",
            ))

        if preferences.accessibility.mobility:
            inaccessible = sum(
                1
                for dest in destinations
                for a in (
                    candidates.get(dest.destination.id, ())
                    if candidates is not None
                    else dest.destination.attractions
                )
                if not a.mobility_accessible
            )
            if inaccessible:
                result.append(PersonalizedInsight(
                    insight_type="practical",
                    title="Accessibility-aware ranking",
                    description=f"{inaccessible} attraction(s) without step-free access "
                                f"were ranked down.",
                ))

        return tuple(result)
