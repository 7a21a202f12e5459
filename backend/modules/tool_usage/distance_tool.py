"""
modules/tool_usage/distance_tool.py
-------------------------------------
Great-circle distances using the Haversine formula.
No external HTTP calls are made.

Coordinates are (lat, lon) pairs in decimal degrees; results are kilometres.
"""

from __future__ import annotations
import math
import logging

from modules.errors import ValidationError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Pure maths
# ---------------------------------------------------------------------------

_EARTH_RADIUS_KM = 6371.0

Coordinate = tuple[float, float]


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points (Haversine formula) in km."""
    for value in (lat1, lon1, lat2, lon2):
        if (
            isinstance(value, bool)
            or not isinstance(value, (int, float))
            or not math.isfinite(value)
        ):
            raise ValidationError(
                f"coordinates must be finite numbers "
                f"(got ({lat1!r}, {lon1!r}) → ({lat2!r}, {lon2!r}))",
                code="INVALID_COORDINATES",
            )
    if lat1 == lat2 and lon1 == lon2:
        return 0.0
    r = _EARTH_RADIUS_KM
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lam = math.radians(lon2 - lon1)
    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lam / 2) ** 2
    )
    # Rounding can push a above 1.0 for antipodal points.
    return 2 * r * math.asin(math.sqrt(min(a, 1.0)))


# ---------------------------------------------------------------------------
# DistanceTool
# ---------------------------------------------------------------------------


class DistanceTool:
    """Haversine distances between points and over point sets."""

    def distance(self, a: Coordinate, b: Coordinate) -> float:
        """Return Haversine distance in km between two (lat, lon) pairs."""
        return haversine_km(a[0], a[1], b[0], b[1])

    def distance_matrix(self, coords: list[Coordinate]) -> list[list[float]]:
        """
        Return the full n x n distance matrix [km].

        Only the upper triangle is computed; the result is mirrored so the
        matrix is exactly symmetric with a zero diagonal.
        """
        n = len(coords)
        matrix = [[0.0] * n for _ in range(n)]
        for i in range(n):
            for j in range(i + 1, n):
                d = self.distance(coords[i], coords[j])
                matrix[i][j] = d
                matrix[j][i] = d
        return matrix

    def path_length(self, coords: list[Coordinate]) -> float:
        """Sum of consecutive-leg distances along an open path [km]."""
        return sum(
            self.distance(coords[k], coords[k + 1])
            for k in range(len(coords) - 1)
        )
