"""
modules/tool_usage/cost_tool.py
---------------------------------
Transport cost estimate between two points: distance × per-km rate, where the
rate depends on the traveller's travel style (config.TRANSPORT_RATE_PER_KM).
"""

from __future__ import annotations
import math

from modules.errors import ValidationError
import config


class CostEstimator:
    """Per-kilometre transport cost, parameterised by travel style."""

    def __init__(self, rates: dict[str, float] | None = None) -> None:
        self.rates = dict(rates or config.TRANSPORT_RATE_PER_KM)

    def rate(self, travel_style: str) -> float:
        try:
            return self.rates[travel_style]
        except KeyError:
            raise ValidationError(
                f"unknown travel style {travel_style!r}; "
                f"expected one of {sorted(self.rates)}",
                code="UNKNOWN_TRAVEL_STYLE",
            ) from None

    def estimate(self, distance_km: float, travel_style: str) -> float:
        """Estimated transport cost for *distance_km* at *travel_style*."""
        if distance_km is None or not math.isfinite(distance_km) or distance_km < 0:
            raise ValidationError(
                f"distance_km={distance_km!r} must be a finite number >= 0",
                code="INVALID_DISTANCE",
            )
        return distance_km * self.rate(travel_style)

    def cost_matrix(
        self,
        distance_matrix: list[list[float]],
        travel_style: str,
    ) -> list[list[float]]:
        """Map a distance matrix [km] to a transport-cost matrix."""
        return [
            [self.estimate(d, travel_style) for d in row]
            for row in distance_matrix
        ]
