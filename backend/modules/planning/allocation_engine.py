"""
modules/planning/allocation_engine.py
---------------------------------------
Deterministic split of trip days and budget across the ordered destinations.

  weight_k  = max(MIN_DESTINATION_WEIGHT,
                  popularity_k + INTEREST_MATCH_BONUS × matching_attractions_k)
  share_k   = weight_k / Σ weight
  budget_k  = share_k × TotalBudget                 (continuous, unrounded)
  days_k    = largest-remainder apportionment of share_k × TotalDays

Guarantees
~~~~~~~~~~
  Σ days_k == TotalDays exactly.
  days_k >= 1 for every destination (TotalDays < N is rejected up front).
  Σ budget_k == TotalBudget up to float rounding.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Sequence

from schemas.destination import Destination
from schemas.preferences import TripPreferences
from modules.errors import ValidationError
import config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Allocation:
    days: int
    budget: float
    weight: float               # normalised share in [0, 1]


def matches_interest(category: str, interests: Sequence[str]) -> bool:
    """Case-insensitive substring match of any interest against a category."""
    cat = category.lower()
    return any(i.strip() and i.strip().lower() in cat for i in interests)


class AllocationEngine:
    """Splits days and budget over destinations proportionally to weight."""

    def allocate(
        self,
        destinations: Sequence[Destination],
        preferences: TripPreferences,
    ) -> dict[str, Allocation]:
        """
        Return {destination_id: Allocation} in route order.

        Raises:
            ValidationError: no destinations, non-positive totals, or fewer
                             trip days than destinations.
        """
        total_days = preferences.duration.days
        total_budget = preferences.budget.total
        n = len(destinations)

        if n == 0:
            raise ValidationError("cannot allocate over an empty destination list",
                                  code="EMPTY_DESTINATIONS")
        if total_days <= 0 or total_budget <= 0:
            raise ValidationError(
                f"duration.days={total_days} and budget.total={total_budget} must be > 0",
                code="INVALID_PREFERENCES",
            )
        if total_days < n:
            raise ValidationError(
                f"{total_days} day(s) cannot cover {n} destinations at one day minimum",
                code="INSUFFICIENT_DAYS",
            )

        raw = [self.destination_weight(d, preferences) for d in destinations]
        total_weight = sum(raw)
        shares = [w / total_weight for w in raw]

        days = self.apportion_days(shares, total_days)

        allocation: dict[str, Allocation] = {}
        for dest, share, d in zip(destinations, shares, days):
            allocation[dest.id] = Allocation(
                days=d,
                budget=share * total_budget,
                weight=share,
            )
            logger.debug(
                "[AllocationEngine] %s: share=%.4f days=%d budget=%.2f",
                dest.id, share, d, share * total_budget,
            )
        return allocation

    # ── Weighting ────────────────────────────────────────────────────────────

    @staticmethod
    def destination_weight(destination: Destination, preferences: TripPreferences) -> float:
        matching = sum(
            1 for a in destination.attractions
            if matches_interest(a.category, preferences.interests)
        )
        weight = destination.popularity + config.INTEREST_MATCH_BONUS * matching
        return max(config.MIN_DESTINATION_WEIGHT, weight)

    # ── Day apportionment ────────────────────────────────────────────────────

    @staticmethod
    def apportion_days(shares: Sequence[float], total_days: int) -> list[int]:
        """
        Largest-remainder method over ``share × total_days``.

        Floors first, then hands out the leftover days one at a time to the
        largest fractional remainders (earlier destination wins a tie).  Any
        destination left at zero then takes a day from the destination holding
        the most days, so every stop gets at least one.
        """
        quotas = [s * total_days for s in shares]
        days = [int(math.floor(q)) for q in quotas]
        leftover = total_days - sum(days)

        by_remainder = sorted(
            range(len(quotas)),
            key=lambda k: (-(quotas[k] - days[k]), k),
        )
        for k in by_remainder[:leftover]:
            days[k] += 1

        for k in range(len(days)):
            if days[k] == 0:
                donor = max(range(len(days)), key=lambda m: (days[m], -m))
                days[donor] -= 1
                days[k] += 1

        return days
