"""
schemas/preferences.py
----------------------
Input contract: what the traveller asked for.

Models are frozen pydantic models.  Pydantic checks shapes and enum values;
range checks (positive budget, enough days, …) live in
modules.validation so they surface as the pipeline's own ValidationError.
"""

from __future__ import annotations
from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field

TravelStyle = Literal["luxury", "premium", "standard", "budget", "backpacker"]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class BudgetPreference(_Frozen):
    total: float
    currency: Literal["USD", "EUR", "GBP", "INR"] = "USD"
    flexibility: Literal["strict", "moderate", "flexible"] = "moderate"


class DurationPreference(_Frozen):
    days: int
    flexibility: int = 0          # ± days the traveller would accept


class AccessibilityPreference(_Frozen):
    mobility: bool = False
    wheelchair: bool = False
    dietary: List[str] = Field(default_factory=list)


class TripPreferences(_Frozen):
    budget: BudgetPreference
    duration: DurationPreference
    travel_style: TravelStyle = "standard"
    interests: List[str] = Field(default_factory=list)
    group_type: Literal["solo", "couple", "family", "friends", "business"] = "solo"
    group_size: int = 1
    accessibility: AccessibilityPreference = Field(default_factory=AccessibilityPreference)
    activity_level: Literal["low", "moderate", "high", "extreme"] = "moderate"

    @property
    def daily_budget(self) -> float:
        """Whole-trip budget spread evenly over the trip days."""
        return self.budget.total / self.duration.days
