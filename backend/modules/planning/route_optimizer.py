"""
modules/planning/route_optimizer.py
-------------------------------------
Visiting-order optimizer over a set of destinations (open-path TSP).

Pipeline:
  1. D  = haversine distance matrix [km], zero diagonal.
  2. C  = transport cost matrix (CostEstimator over D, by travel style).
  3. D, C normalised independently by their maximum element.
  4. W  = normD·(1 − w_c) + normC·w_c
         w_c = config.COST_WEIGHT_STRICT  if budget.flexibility == "strict"
               config.COST_WEIGHT_DEFAULT otherwise
  5. N ≤ 2 → identity order.
  6. Nearest-neighbour construction from index 0 (O(N²)).
  7. 2-opt local search, first-improvement, until a full pass finds nothing.
     Index 0 is never moved: the first requested destination stays the start.

Search budget:
  2-opt is capped at `max_passes` full passes (default N²) and a wall-clock
  budget (config.TWO_OPT_TIME_BUDGET_MS), checked inside the pair loop.  When
  either cap trips, the best tour so far is returned with approximate=True and
  a ComputationError attached as `degradation`; the call does not fail.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence
import logging
import time as _time_mod

from schemas.destination import Destination
from schemas.preferences import TripPreferences
from modules.errors import ComputationError, DataError
from modules.tool_usage.cost_tool import CostEstimator
from modules.tool_usage.distance_tool import DistanceTool
from modules.validation import validate_coordinates
import config

logger = logging.getLogger(__name__)

Matrix = list[list[float]]

# Minimum weight reduction for a reversal to count as an improvement.
_IMPROVEMENT_EPS: float = 1e-12


@dataclass(frozen=True)
class RouteResult:
    """Outcome of one RouteOptimizer.optimize() call."""
    order: tuple[int, ...]                  # permutation of input indices
    weight: float                           # W-weight of `order`
    nearest_neighbor_order: tuple[int, ...]
    nearest_neighbor_weight: float
    passes: int = 0                         # full 2-opt passes executed
    approximate: bool = False
    degradation: Optional[ComputationError] = None
    distance_matrix: Matrix = field(default_factory=list, repr=False)
    cost_matrix: Matrix = field(default_factory=list, repr=False)
    weight_matrix: Matrix = field(default_factory=list, repr=False)

    def ordered(self, items: Sequence) -> list:
        return [items[i] for i in self.order]


class RouteOptimizer:
    """Nearest-neighbour + bounded 2-opt over a combined distance/cost matrix."""

    def __init__(
        self,
        distance_tool: DistanceTool | None = None,
        cost_estimator: CostEstimator | None = None,
        max_passes: int | None = None,
        time_budget_ms: float | None = None,
        clock: Callable[[], float] = _time_mod.perf_counter,
    ):
        self.distance_tool  = distance_tool  or DistanceTool()
        self.cost_estimator = cost_estimator or CostEstimator()
        self.max_passes     = max_passes if max_passes is not None else config.TWO_OPT_MAX_PASSES
        self.time_budget_ms = (
            time_budget_ms if time_budget_ms is not None else config.TWO_OPT_TIME_BUDGET_MS
        )
        self._clock = clock

    # ── Public entry point ────────────────────────────────────────────────────

    def optimize(
        self,
        destinations: Sequence[Destination],
        preferences: TripPreferences,
    ) -> RouteResult:
        """
        Return the visiting order for *destinations*.

        Raises:
            DataError: a destination has missing or invalid coordinates.
        """
        dist, cost, weights = self.build_matrices(destinations, preferences)
        return self.solve(dist, cost, weights)

    def solve(self, dist: Matrix, cost: Matrix, weights: Matrix) -> RouteResult:
        """Order search over prebuilt matrices (see build_matrices)."""
        n = len(weights)

        if n <= 2:
            identity = tuple(range(n))
            w = self.tour_weight(identity, weights)
            return RouteResult(
                order=identity, weight=w,
                nearest_neighbor_order=identity, nearest_neighbor_weight=w,
                distance_matrix=dist, cost_matrix=cost, weight_matrix=weights,
            )

        nn_tour = self.nearest_neighbor(weights)
        nn_weight = self.tour_weight(nn_tour, weights)

        tour, weight, passes, degradation = self.two_opt(nn_tour, weights)

        # Never return worse than the nearest-neighbour tour.
        if weight > nn_weight:
            tour, weight = nn_tour, nn_weight

        logger.info(
            "[RouteOptimizer] %d destinations: NN weight %.4f → 2-opt weight %.4f "
            "in %d pass(es)%s",
            n, nn_weight, weight, passes, " (approximate)" if degradation else "",
        )
        return RouteResult(
            order=tuple(tour),
            weight=weight,
            nearest_neighbor_order=tuple(nn_tour),
            nearest_neighbor_weight=nn_weight,
            passes=passes,
            approximate=degradation is not None,
            degradation=degradation,
            distance_matrix=dist,
            cost_matrix=cost,
            weight_matrix=weights,
        )

    # ── Matrix construction ───────────────────────────────────────────────────

    def build_matrices(
        self,
        destinations: Sequence[Destination],
        preferences: TripPreferences,
    ) -> tuple[Matrix, Matrix, Matrix]:
        """Return (distance [km], transport cost, combined weight) matrices."""
        for dest in destinations:
            check = validate_coordinates(dest.__dict__)
            if not check.valid:
                raise DataError(
                    f"destination {dest.id!r} ({dest.name or 'unnamed'}) has unusable "
                    f"coordinates: {'; '.join(check.errors)}",
                    destination_id=dest.id,
                    code="INVALID_COORDINATES",
                )

        coords = [(d.location_lat, d.location_lon) for d in destinations]
        dist = self.distance_tool.distance_matrix(coords)
        cost = self.cost_estimator.cost_matrix(dist, preferences.travel_style)
        cost_weight = self.cost_weight(preferences)
        weights = self.combine(
            self.normalize(dist), self.normalize(cost), cost_weight,
        )
        return dist, cost, weights

    @staticmethod
    def cost_weight(preferences: TripPreferences) -> float:
        if preferences.budget.flexibility == "strict":
            return config.COST_WEIGHT_STRICT
        return config.COST_WEIGHT_DEFAULT

    @staticmethod
    def normalize(matrix: Matrix) -> Matrix:
        """Divide every element by the matrix maximum (all-zero stays all-zero)."""
        peak = max((v for row in matrix for v in row), default=0.0)
        if peak <= 0.0:
            return [[0.0 for _ in row] for row in matrix]
        return [[v / peak for v in row] for row in matrix]

    @staticmethod
    def combine(norm_dist: Matrix, norm_cost: Matrix, cost_weight: float) -> Matrix:
        dist_weight = 1.0 - cost_weight
        return [
            [d * dist_weight + c * cost_weight for d, c in zip(d_row, c_row)]
            for d_row, c_row in zip(norm_dist, norm_cost)
        ]

    # ── Tour construction / evaluation ────────────────────────────────────────

    @staticmethod
    def tour_weight(tour: Sequence[int], weights: Matrix) -> float:
        """Total W-weight of an open path (no return leg)."""
        return sum(weights[tour[k]][tour[k + 1]] for k in range(len(tour) - 1))

    @staticmethod
    def nearest_neighbor(weights: Matrix) -> list[int]:
        """Greedy open path from index 0; ties go to the lowest index."""
        n = len(weights)
        if n == 0:
            return []
        tour = [0]
        unvisited = set(range(1, n))
        current = 0
        while unvisited:
            nearest = min(unvisited, key=lambda j: (weights[current][j], j))
            tour.append(nearest)
            unvisited.remove(nearest)
            current = nearest
        return tour

    def two_opt(
        self,
        tour: Sequence[int],
        weights: Matrix,
    ) -> tuple[list[int], float, int, Optional[ComputationError]]:
        """
        Improve *tour* by segment reversal.

        Returns (tour, weight, passes, degradation) where degradation is a
        ComputationError when the pass cap or the time budget cut the search
        short, else None.
        """
        best = list(tour)
        n = len(best)
        max_passes = self.max_passes if self.max_passes > 0 else n * n
        deadline = self._clock() + self.time_budget_ms / 1000.0

        passes = 0
        improved = True
        timed_out = False
        while improved and passes < max_passes:
            improved = False
            passes += 1
            for i in range(1, n - 1):
                if self._clock() > deadline:
                    timed_out = True
                    break
                for j in range(i + 1, n):
                    delta = self._reversal_delta(best, i, j, weights)
                    if delta < -_IMPROVEMENT_EPS:
                        best[i:j + 1] = reversed(best[i:j + 1])
                        improved = True
            if timed_out:
                break

        weight = self.tour_weight(best, weights)
        degradation: Optional[ComputationError] = None
        if timed_out:
            degradation = ComputationError(
                f"2-opt exceeded its {self.time_budget_ms:.0f} ms budget after "
                f"{passes} pass(es); returning best tour found so far",
                stage="solve_order",
            )
        elif improved:
            degradation = ComputationError(
                f"2-opt hit the {max_passes}-pass cap while still improving; "
                f"returning best tour found so far",
                stage="solve_order",
            )
        if degradation is not None:
            logger.warning("[RouteOptimizer] %s", degradation)
        return best, weight, passes, degradation

    @staticmethod
    def _reversal_delta(tour: list[int], i: int, j: int, weights: Matrix) -> float:
        """
        Weight change of reversing tour[i..j] on an open path.

        W is symmetric, so only the two boundary edges change: (i-1, i) and
        (j, j+1) become (i-1, j) and (i, j+1).  When j is the tail there is no
        (j, j+1) edge.
        """
        a, b = tour[i - 1], tour[i]
        c = tour[j]
        delta = weights[a][c] - weights[a][b]
        if j + 1 < len(tour):
            d = tour[j + 1]
            delta += weights[b][d] - weights[c][d]
        return delta
