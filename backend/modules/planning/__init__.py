"""modules/planning: destination ordering, day/budget allocation and scheduling."""

from modules.planning.route_optimizer import RouteOptimizer, RouteResult
from modules.planning.allocation_engine import Allocation, AllocationEngine
from modules.planning.attraction_scoring import AttractionScore, AttractionScorer
from modules.planning.day_scheduler import DayScheduler
from modules.planning.travel_routes import TravelRoutePlanner
from modules.planning.trip_assembler import TripAssembler
from modules.planning.trip_optimizer import TripOptimizer

__all__ = [
    "RouteOptimizer", "RouteResult",
    "Allocation", "AllocationEngine",
    "AttractionScore", "AttractionScorer",
    "DayScheduler",
    "TravelRoutePlanner",
    "TripAssembler",
    "TripOptimizer",
]
