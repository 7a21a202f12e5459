"""
modules/planning/trip_optimizer.py
------------------------------------
Pipeline driver: destination ids + preferences → OptimizedTrip.

Stages (strictly linear, each timed and logged as a PERFORMANCE record):
  1. validate        : preferences and id list (ValidationError)
  2. fetch           : resolve ids through the injected repository (DataError)
  3. build_matrices  : distance / cost / weight matrices (DataError on coords)
  4. solve_order     : nearest-neighbour + bounded 2-opt
  5. allocate        : days and budget per destination
  6. schedule        : DayScheduler per destination
  7. assemble        : totals, legs, score, alternatives, insights

A failure in any stage aborts the request with a TripOptimizationError whose
``stage`` names the failing stage.  Nothing caller-visible is touched before
assembly, so an abort leaves no partial state.  A 2-opt search cut short by
its budget is not a failure: the trip is returned with approximate=True and
the reason in ``warnings``.  The per-request structured log handle is closed
when optimize() returns or raises.
"""

from __future__ import annotations
from contextlib import contextmanager
from typing import Any, Iterator, Mapping, Sequence
import logging
import time as _time_mod
import uuid

from schemas.destination import Attraction, Destination
from schemas.preferences import TripPreferences
from schemas.trip import DayItinerary, OptimizedTrip
from modules.errors import DataError, TripOptimizationError, ValidationError
from modules.observability.logger import StructuredLogger
from modules.planning.allocation_engine import AllocationEngine
from modules.planning.day_scheduler import DayScheduler
from modules.planning.route_optimizer import RouteOptimizer
from modules.planning.trip_assembler import TripAssembler
from modules.tool_usage.destination_tool import DestinationRepository
from modules.validation import (
    filter_valid,
    parse_preferences,
    validate_attraction,
    validate_destination,
    validate_destination_ids,
    validate_preferences,
)

logger = logging.getLogger(__name__)


class TripOptimizer:
    """
    Stateless between calls; every request gets its own intermediate values.

    Usage:
        optimizer = TripOptimizer(InMemoryDestinationRepository.sample())
        trip = optimizer.optimize(["paris", "lyon", "nice"], preferences)
    """

    def __init__(
        self,
        repository: DestinationRepository,
        route_optimizer: RouteOptimizer | None = None,
        allocation_engine: AllocationEngine | None = None,
        day_scheduler: DayScheduler | None = None,
        assembler: TripAssembler | None = None,
        perf_logger: StructuredLogger | None = None,
    ):
        self.repository        = repository
        self.route_optimizer   = route_optimizer   or RouteOptimizer()
        self.allocation_engine = allocation_engine or AllocationEngine()
        self.day_scheduler     = day_scheduler     or DayScheduler()
        self.assembler         = assembler         or TripAssembler(
            available_minutes=self.day_scheduler.available_minutes,
        )
        self.perf_logger       = perf_logger       or StructuredLogger()

    # ── Public entry point ────────────────────────────────────────────────────

    def optimize(
        self,
        destination_ids: Sequence[str],
        preferences: TripPreferences | Mapping[str, Any],
    ) -> OptimizedTrip:
        trip_id = f"trip_{uuid.uuid4().hex[:12]}"
        try:
            return self._run(trip_id, destination_ids, preferences)
        finally:
            self.perf_logger.close(trip_id)

    def _run(
        self,
        trip_id: str,
        destination_ids: Sequence[str],
        preferences: TripPreferences | Mapping[str, Any],
    ) -> OptimizedTrip:
        t0 = _time_mod.perf_counter()

        with self._stage(trip_id, "validate"):
            prefs = self._validate(destination_ids, preferences)

        with self._stage(trip_id, "fetch"):
            destinations = self._fetch(destination_ids)
            candidates = {d.id: self._usable_attractions(d) for d in destinations}

        with self._stage(trip_id, "build_matrices"):
            dist, cost, weights = self.route_optimizer.build_matrices(destinations, prefs)

        with self._stage(trip_id, "solve_order"):
            route = self.route_optimizer.solve(dist, cost, weights)
            ordered = route.ordered(destinations)

        warnings: list[str] = []
        if route.degradation is not None:
            warnings.append(str(route.degradation))
            self.perf_logger.log(trip_id, "DEGRADED", route.degradation.to_dict())

        with self._stage(trip_id, "allocate"):
            allocation = self.allocation_engine.allocate(ordered, prefs)

        with self._stage(trip_id, "schedule"):
            itineraries: dict[str, tuple[DayItinerary, ...]] = {
                dest.id: self.day_scheduler.schedule(
                    dest,
                    allocation[dest.id].days,
                    allocation[dest.id].budget,
                    prefs,
                    attractions=candidates[dest.id],
                )
                for dest in ordered
            }

        with self._stage(trip_id, "assemble"):
            trip = self.assembler.assemble(
                ordered, allocation, itineraries, prefs,
                approximate=route.approximate,
                warnings=warnings,
                trip_id=trip_id,
                candidates=candidates,
            )

        self.perf_logger.log(trip_id, "PERFORMANCE", {
            "component": "TripOptimizer.optimize",
            "destinations": len(ordered),
            "duration_ms": round((_time_mod.perf_counter() - t0) * 1000, 2),
        })
        logger.info(
            "[TripOptimizer] %s: order=%s cost=%.2f score=%.4f%s",
            trip_id, trip.order, trip.total_cost, trip.optimization_score,
            " (approximate)" if trip.approximate else "",
        )
        return trip

    # ── Stages ────────────────────────────────────────────────────────────────

    @staticmethod
    def _validate(
        destination_ids: Sequence[str],
        preferences: TripPreferences | Mapping[str, Any],
    ) -> TripPreferences:
        prefs = (
            preferences if isinstance(preferences, TripPreferences)
            else parse_preferences(dict(preferences))
        )
        ids_check = validate_destination_ids(list(destination_ids))
        if not ids_check.valid:
            raise ValidationError("; ".join(ids_check.errors), code="INVALID_DESTINATIONS")

        prefs_check = validate_preferences(prefs, len(destination_ids))
        if not prefs_check.valid:
            raise ValidationError("; ".join(prefs_check.errors), code="INVALID_PREFERENCES")
        return prefs

    def _fetch(self, destination_ids: Sequence[str]) -> list[Destination]:
        destinations: list[Destination] = []
        for dest_id in destination_ids:
            dest = self.repository.get(dest_id)
            if dest is None:
                raise DataError(
                    f"destination {dest_id!r} not found in repository",
                    destination_id=dest_id,
                    code="UNKNOWN_DESTINATION",
                )
            check = validate_destination(dest.__dict__)
            if not check.valid:
                raise DataError(
                    f"destination {dest.id!r} ({dest.name or 'unnamed'}) is unusable: "
                    f"{'; '.join(check.errors)}",
                    destination_id=dest.id,
                )
            destinations.append(dest)
        return destinations

    @staticmethod
    def _usable_attractions(destination: Destination) -> tuple[Attraction, ...]:
        return tuple(filter_valid(list(destination.attractions), validate_attraction))

    # ── Helpers ───────────────────────────────────────────────────────────────

    @contextmanager
    def _stage(self, trip_id: str, name: str) -> Iterator[None]:
        t0 = _time_mod.perf_counter()
        ok = False
        try:
            yield
            ok = True
        except TripOptimizationError as exc:
            if exc.stage is None:
                exc.stage = name
            logger.error("[TripOptimizer] %s: stage %r failed: %s", trip_id, name, exc)
            raise
        except Exception as exc:
            logger.exception("[TripOptimizer] %s: stage %r raised unexpectedly", trip_id, name)
            raise TripOptimizationError(
                f"{name} stage failed: {exc}", stage=name,
            ) from exc
        finally:
            self.perf_logger.log(trip_id, "PERFORMANCE", {
                "stage": name,
                "ok": ok,
                "duration_ms": round((_time_mod.perf_counter() - t0) * 1000, 2),
            })
