"""
modules/planning/attraction_scoring.py
----------------------------------------
Preference-aware attraction scoring for the day scheduler.

  score = rating
        + INTEREST_SCORE_BONUS × |interests matching category or description|
        − ACCESSIBILITY_PENALTY   if mobility access is required and missing
        − COST_PENALTY_FACTOR × max(0, cost_ratio − COST_PENALTY_THRESHOLD)

  cost_ratio = attraction.cost / (budget.total / duration.days)

Priority tags:
  score ≥ PRIORITY_MUST_SEE     → "must_see"
  score ≥ PRIORITY_RECOMMENDED  → "recommended"
  otherwise                     → "optional"

Defaults: bonus 2, penalties 5 / 5×, threshold 0.5, tags at 8 and 6.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Sequence

from schemas.destination import Attraction
from schemas.preferences import TripPreferences
import config


@dataclass(frozen=True)
class AttractionScore:
    """Score breakdown for a single attraction candidate."""
    attraction: Attraction
    score: float
    interest_matches: int
    accessibility_penalty: float
    cost_penalty: float
    priority: str


class AttractionScorer:
    """Scores and ranks attractions against one traveller's preferences."""

    def __init__(self, preferences: TripPreferences):
        self.preferences = preferences
        self._interests = [i.strip().lower() for i in preferences.interests if i.strip()]
        self._daily_budget = preferences.daily_budget

    # ── Public ────────────────────────────────────────────────────────────────

    def rank(self, attractions: Sequence[Attraction]) -> list[AttractionScore]:
        """Score all attractions; return sorted descending by score (stable)."""
        scores = [self.score(a) for a in attractions]
        return sorted(scores, key=lambda s: s.score, reverse=True)

    def score(self, attraction: Attraction) -> AttractionScore:
        matches = self._interest_matches(attraction)

        access_penalty = 0.0
        if self.preferences.accessibility.mobility and not attraction.mobility_accessible:
            access_penalty = config.ACCESSIBILITY_PENALTY

        cost_penalty = 0.0
        if self._daily_budget > 0:
            cost_ratio = attraction.cost / self._daily_budget
            cost_penalty = config.COST_PENALTY_FACTOR * max(
                0.0, cost_ratio - config.COST_PENALTY_THRESHOLD
            )

        value = (
            attraction.rating
            + config.INTEREST_SCORE_BONUS * matches
            - access_penalty
            - cost_penalty
        )
        return AttractionScore(
            attraction=attraction,
            score=value,
            interest_matches=matches,
            accessibility_penalty=access_penalty,
            cost_penalty=cost_penalty,
            priority=priority_for(value),
        )

    # ── Internal ──────────────────────────────────────────────────────────────

    def _interest_matches(self, attraction: Attraction) -> int:
        category = attraction.category.lower()
        description = attraction.description.lower()
        return sum(
            1 for interest in self._interests
            if interest in category or interest in description
        )


def priority_for(score: float) -> str:
    if score >= config.PRIORITY_MUST_SEE:
        return "must_see"
    if score >= config.PRIORITY_RECOMMENDED:
        return "recommended"
    return "optional"
