"""
main.py
--------
Command-line entry point for the multi-destination trip optimizer.

Runs the full pipeline (validate → fetch → order → allocate → schedule →
assemble) over the built-in sample catalog or a JSON catalog file, and prints
the OptimizedTrip as JSON.

Usage:
    cd backend
    python main.py paris lyon nice --budget 3000 --days 7
    python main.py paris lyon nice marseille bordeaux --budget 4500 --days 10 \\
        --style budget --flexibility strict --interests museum,landmark
    python main.py rome florence --catalog data/italy.json --budget 2500 --days 5
    python main.py --list

Options:
    --catalog       JSON file holding a list of destination records
                    (default: built-in sample catalog of French cities)
    --budget        Total trip budget (required unless --list)
    --currency      USD | EUR | GBP | INR (default: EUR)
    --flexibility   strict | moderate | flexible (default: moderate)
    --days          Trip length in days (required unless --list)
    --style         luxury | premium | standard | budget | backpacker
    --interests     Comma-separated interest keywords
    --mobility      Prefer step-free attractions
    --group-size    Number of travellers (default: 1)
    --summary       Print a human-readable summary instead of JSON
    --list          List the catalog's destination ids and exit

Exit status: 0 on success, 1 when the catalog cannot be loaded or the optimizer
rejects the request.
"""

from __future__ import annotations
import argparse
import json
import logging
import sys

import config
from schemas.trip import OptimizedTrip
from modules.errors import DataError, TripOptimizationError
from modules.planning.trip_optimizer import TripOptimizer
from modules.tool_usage.destination_tool import InMemoryDestinationRepository
from modules.validation import parse_preferences

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        description="Optimize visiting order, days and budget across destinations",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    p.add_argument("destinations", nargs="*", help="Destination ids, first one is the start")
    p.add_argument("--catalog", default=None, help="Path to a JSON destination catalog")
    p.add_argument("--budget", type=float, default=None, help="Total trip budget")
    p.add_argument("--currency", default="EUR", choices=["USD", "EUR", "GBP", "INR"])
    p.add_argument(
        "--flexibility",
        default="moderate",
        choices=["strict", "moderate", "flexible"],
        help="Budget flexibility; 'strict' weights transport cost over distance",
    )
    p.add_argument("--days", type=int, default=None, help="Trip length in days")
    p.add_argument("--style", default="standard", choices=list(config.TRAVEL_STYLE_ORDER))
    p.add_argument("--interests", default="", help="Comma-separated, e.g. 'museum,beach'")
    p.add_argument("--mobility", action="store_true", help="Prefer step-free attractions")
    p.add_argument("--group-size", type=int, default=1)
    p.add_argument("--summary", action="store_true", help="Human-readable output")
    p.add_argument("--list", action="store_true", help="List catalog ids and exit")
    return p.parse_args(argv)


def build_preferences(args: argparse.Namespace) -> dict:
    """Translate CLI arguments into a raw preferences payload."""
    return {
        "budget": {
            "total": args.budget,
            "currency": args.currency,
            "flexibility": args.flexibility,
        },
        "duration": {"days": args.days},
        "travel_style": args.style,
        "interests": [i.strip() for i in args.interests.split(",") if i.strip()],
        "group_size": args.group_size,
        "accessibility": {"mobility": args.mobility},
    }


def print_summary(trip: OptimizedTrip) -> None:
    print("\n" + "=" * 60)
    print(f"  OPTIMIZED TRIP  {trip.trip_id}")
    print("=" * 60)
    print(f"  Order    : {' → '.join(d.destination.name for d in trip.destinations)}")
    print(f"  Days     : {trip.total_duration}")
    print(f"  Distance : {trip.total_distance:,.1f} km")
    print(f"  Cost     : {trip.total_cost:,.2f} {trip.currency}")
    print(f"  Score    : {trip.optimization_score:.4f}"
          + ("  (approximate)" if trip.approximate else ""))

    for dest in trip.destinations:
        print(f"\n  [{dest.destination.name}] {dest.days_allocated} day(s), "
              f"budget {dest.budget_allocated:,.2f}, planned {dest.estimated_cost:,.2f}")
        for day in dest.itinerary:
            print(f"    Day {day.day_number}:")
            for act in day.activities:
                print(f"      {act.start_time:%H:%M}-{act.end_time:%H:%M}  "
                      f"{act.attraction.name} ({act.priority})")
            if not day.activities:
                print("      (free day)")

    for leg in trip.route:
        print(f"\n  {leg.from_name} → {leg.to_name}: {leg.method}, "
              f"{leg.distance_km:,.0f} km, {leg.duration_minutes} min, {leg.cost:,.2f}")

    for insight in trip.insights:
        print(f"\n  * {insight.title}: {insight.description}")
    for warning in trip.warnings:
        print(f"\n  ! {warning}")
    print()


def _load_catalog(path: str | None) -> InMemoryDestinationRepository:
    if not path:
        return InMemoryDestinationRepository.sample()
    try:
        return InMemoryDestinationRepository.from_json(path)
    except (OSError, ValueError, KeyError, TypeError, AttributeError) as exc:
        raise DataError(
            f"cannot load catalog {path!r}: {exc}",
            stage="fetch",
            code="INVALID_CATALOG",
        ) from exc


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        repo = _load_catalog(args.catalog)
    except TripOptimizationError as exc:
        logger.error("[main] %s", exc)
        print(json.dumps({"error": exc.to_dict()}, indent=2), file=sys.stderr)
        return 1

    if args.list:
        for dest_id in repo.ids():
            print(dest_id)
        return 0

    if args.budget is None or args.days is None:
        print("error: --budget and --days are required", file=sys.stderr)
        return 1

    try:
        preferences = parse_preferences(build_preferences(args))
        trip = TripOptimizer(repo).optimize(args.destinations, preferences)
    except TripOptimizationError as exc:
        logger.error("[main] %s", exc)
        print(json.dumps({"error": exc.to_dict()}, indent=2), file=sys.stderr)
        return 1

    if args.summary:
        print_summary(trip)
    else:
        print(json.dumps(trip.to_dict(), indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
