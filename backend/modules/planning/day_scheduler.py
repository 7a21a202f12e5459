"""
modules/planning/day_scheduler.py
-----------------------------------
Greedy day-by-day attraction scheduler for one destination.

For a destination with D allocated days and budget B:
  1. Rank its attractions once with AttractionScorer → shared candidate pool.
  2. For each day d ∈ 1..D:
       remaining = (B / D) × ACTIVITY_BUDGET_SHARE      (rest is the dining reserve)
       t_cur     = DAY_START (09:00), day end = DAY_END (18:00)
       Walk the pool in rank order:
         - stop once t_cur ≥ day end
         - skip if cost > remaining
         - usable = min(duration, day end − t_cur); skip if usable < MIN_USABLE
         - schedule [t_cur, t_cur + usable], drop it from the pool,
           remaining −= cost, t_cur += usable + ACTIVITY_BUFFER
  3. Meals: dining reserve split by MEAL_SPLIT (20/30/50) with lookup text.

Constraints enforced:
  visit-once   : a scheduled attraction leaves the pool for all later days.
  no-overlap   : next start = previous end + buffer.
  budget       : cost ≤ remaining activity budget at the moment of selection.
"""

from __future__ import annotations
from datetime import time
from typing import Sequence
import logging

from schemas.destination import Attraction, Destination
from schemas.preferences import TripPreferences
from schemas.trip import DayItinerary, MealSuggestion, PlannedActivity
from modules.planning.attraction_scoring import AttractionScore, AttractionScorer
from modules.tool_usage.distance_tool import DistanceTool
import config

logger = logging.getLogger(__name__)


# ── Module-level time helpers ─────────────────────────────────────────────────

def _t2m(t: time) -> int:
    """Convert a time object to integer minutes-from-midnight."""
    return t.hour * 60 + t.minute


def _m2t(mins: int) -> time:
    """Convert minutes-from-midnight to a time object (clamped to [0, 1439])."""
    mins = max(0, min(int(mins), 23 * 60 + 59))
    return time(mins // 60, mins % 60)


# ── Meal lookup ───────────────────────────────────────────────────────────────

_MEAL_RECOMMENDATIONS: dict[str, dict[str, tuple[str, ...]]] = {
    "cultural":  {"breakfast": ("Neighbourhood café", "Bakery"),
                  "lunch":     ("Bistro near the main sights", "Market hall"),
                  "dinner":    ("Traditional restaurant", "Wine bar")},
    "beach":     {"breakfast": ("Seafront café",),
                  "lunch":     ("Beach kiosk", "Fish shack"),
                  "dinner":    ("Seafood restaurant", "Harbour terrace")},
    "mountain":  {"breakfast": ("Lodge breakfast",),
                  "lunch":     ("Mountain hut", "Packed lunch"),
                  "dinner":    ("Alpine restaurant",)},
    "nature":    {"breakfast": ("Guesthouse breakfast",),
                  "lunch":     ("Picnic", "Visitor-centre café"),
                  "dinner":    ("Village inn",)},
    "adventure": {"breakfast": ("Hostel breakfast",),
                  "lunch":     ("Trail snack stop",),
                  "dinner":    ("Local grill",)},
    "city":      {"breakfast": ("Local café", "Hotel breakfast"),
                  "lunch":     ("Bistro", "Street food"),
                  "dinner":    ("Traditional restaurant", "Fine dining")},
}

_MEAL_CATEGORY_BY_STYLE: dict[str, str] = {
    "luxury":     "fine_dining",
    "premium":    "international",
    "standard":   "local",
    "budget":     "local",
    "backpacker": "fast",
}


class DayScheduler:
    """Fills each allocated day of a destination from a shared ranked pool."""

    def __init__(self, distance_tool: DistanceTool | None = None):
        self.distance_tool = distance_tool or DistanceTool()
        self.day_start_min = config.DAY_START_MINUTES
        self.day_end_min   = config.DAY_END_MINUTES
        self.buffer_min    = config.ACTIVITY_BUFFER_MINUTES
        self.min_usable    = config.MIN_USABLE_MINUTES
        self.activity_share = config.ACTIVITY_BUDGET_SHARE

    @property
    def available_minutes(self) -> int:
        return self.day_end_min - self.day_start_min

    # ── Public entry point ────────────────────────────────────────────────────

    def schedule(
        self,
        destination: Destination,
        days: int,
        budget: float,
        preferences: TripPreferences,
        attractions: Sequence[Attraction] | None = None,
    ) -> tuple[DayItinerary, ...]:
        """
        Build one DayItinerary per allocated day.

        Args:
            destination: The stop being scheduled (read only).
            days:        Days allocated to it (≥ 1).
            budget:      Budget allocated to it.
            attractions: Candidate set; defaults to destination.attractions.
                         The pipeline passes a validated subset.
        """
        candidates = destination.attractions if attractions is None else attractions
        ranked = AttractionScorer(preferences).rank(candidates)
        pool: list[AttractionScore] = self._unique(destination, ranked)

        daily_budget = budget / days
        itinerary: list[DayItinerary] = []
        for day_number in range(1, days + 1):
            activities = self._plan_single_day(pool, daily_budget * self.activity_share)
            scheduled_ids = {a.attraction.id for a in activities}
            pool = [c for c in pool if c.attraction.id not in scheduled_ids]

            if not activities and pool:
                self._debug_empty_day(destination, day_number, pool, daily_budget)

            itinerary.append(DayItinerary(
                day_number=day_number,
                activities=tuple(activities),
                meals=self.plan_meals(destination, daily_budget, preferences),
                estimated_cost=sum(a.attraction.cost for a in activities),
                walking_distance_km=self._walking_distance(activities),
            ))

        logger.debug(
            "[DayScheduler] %s: %d day(s), %d activities, %d candidate(s) unscheduled",
            destination.id, days,
            sum(len(d.activities) for d in itinerary), len(pool),
        )
        return tuple(itinerary)

    # ── Single-day planner ────────────────────────────────────────────────────

    def _plan_single_day(
        self,
        pool: list[AttractionScore],
        activity_budget: float,
    ) -> list[PlannedActivity]:
        activities: list[PlannedActivity] = []
        remaining = activity_budget
        t_cur_min = self.day_start_min

        for cand in pool:
            if t_cur_min >= self.day_end_min:
                break
            attr = cand.attraction
            if attr.cost > remaining:
                continue
            usable = min(attr.visit_duration_minutes, self.day_end_min - t_cur_min)
            if usable < self.min_usable:
                continue

            activities.append(PlannedActivity(
                attraction=attr,
                start_time=_m2t(t_cur_min),
                end_time=_m2t(t_cur_min + usable),
                score=cand.score,
                priority=cand.priority,
            ))
            remaining -= attr.cost
            t_cur_min += usable + self.buffer_min

        return activities

    # ── Meals ─────────────────────────────────────────────────────────────────

    def plan_meals(
        self,
        destination: Destination,
        daily_budget: float,
        preferences: TripPreferences,
    ) -> tuple[MealSuggestion, ...]:
        dining_reserve = daily_budget * (1.0 - self.activity_share)
        lookup = _MEAL_RECOMMENDATIONS.get(destination.category, _MEAL_RECOMMENDATIONS["city"])
        meal_category = _MEAL_CATEGORY_BY_STYLE.get(preferences.travel_style, "local")
        return tuple(
            MealSuggestion(
                meal_type=meal,
                category="local" if meal == "breakfast" else meal_category,
                estimated_cost=dining_reserve * share,
                recommendations=lookup[meal],
            )
            for meal, share in config.MEAL_SPLIT.items()
        )

    # ── Helpers ───────────────────────────────────────────────────────────────

    @staticmethod
    def _unique(destination: Destination, ranked: list[AttractionScore]) -> list[AttractionScore]:
        """Keep the best-ranked entry per attraction id."""
        seen: set[str] = set()
        pool: list[AttractionScore] = []
        for cand in ranked:
            if cand.attraction.id in seen:
                logger.warning(
                    "[DayScheduler] %s: duplicate attraction id %r dropped",
                    destination.id, cand.attraction.id,
                )
                continue
            seen.add(cand.attraction.id)
            pool.append(cand)
        return pool

    def _walking_distance(self, activities: list[PlannedActivity]) -> float:
        """Σ haversine between consecutive activities that both have coordinates."""
        total = 0.0
        for prev, nxt in zip(activities, activities[1:]):
            a, b = prev.attraction, nxt.attraction
            if None in (a.location_lat, a.location_lon, b.location_lat, b.location_lon):
                continue
            total += self.distance_tool.distance(
                (a.location_lat, a.location_lon), (b.location_lat, b.location_lon),
            )
        return total

    def _debug_empty_day(
        self,
        destination: Destination,
        day_number: int,
        pool: list[AttractionScore],
        daily_budget: float,
    ) -> None:
        activity_budget = daily_budget * self.activity_share
        logger.debug(
            "[DayScheduler] %s day %d: 0 activities from pool of %d "
            "(activity budget %.2f, window %d min)",
            destination.id, day_number, len(pool), activity_budget, self.available_minutes,
        )
        for cand in pool[:5]:
            attr = cand.attraction
            if attr.cost > activity_budget:
                reason = f"cost {attr.cost:.2f} > activity budget {activity_budget:.2f}"
            elif min(attr.visit_duration_minutes, self.available_minutes) < self.min_usable:
                reason = f"duration {attr.visit_duration_minutes} min < {self.min_usable} min"
            else:
                reason = "unknown"
            logger.debug("    %r score=%.2f: %s", attr.name, cand.score, reason)
