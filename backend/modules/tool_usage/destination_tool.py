"""
modules/tool_usage/destination_tool.py
----------------------------------------
Destination repository seam.

The optimizer never acquires destination data itself; the caller injects any
object with a ``get(destination_id) -> Destination | None`` method.  This
module provides the protocol, a dict-backed implementation and a small
built-in sample catalog (used by main.py and the tests).

Records are frozen dataclasses, so handing the same instance to concurrent
requests is safe; the repository itself is never written to by the core.
"""

from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Any, Iterable, Optional, Protocol

from schemas.destination import Destination

logger = logging.getLogger(__name__)


class DestinationRepository(Protocol):
    def get(self, destination_id: str) -> Optional[Destination]:
        """Return the destination, or None when the id is unknown."""
        ...


class InMemoryDestinationRepository:
    """Read-only, case-insensitive lookup over a fixed set of destinations."""

    def __init__(self, destinations: Iterable[Destination] = ()) -> None:
        self._by_id: dict[str, Destination] = {
            d.id.strip().lower(): d for d in destinations
        }

    def get(self, destination_id: str) -> Optional[Destination]:
        return self._by_id.get(str(destination_id).strip().lower())

    def ids(self) -> list[str]:
        return sorted(self._by_id)

    def __len__(self) -> int:
        return len(self._by_id)

    @classmethod
    def from_records(cls, records: Iterable[dict[str, Any]]) -> "InMemoryDestinationRepository":
        return cls(Destination.from_dict(r) for r in records)

    @classmethod
    def from_json(cls, path: Path | str) -> "InMemoryDestinationRepository":
        """Load a catalog file holding a JSON list of destination records."""
        with open(path, "r", encoding="utf-8") as fh:
            records = json.load(fh)
        repo = cls.from_records(records)
        logger.info("[DestinationRepository] Loaded %d destination(s) from %s", len(repo), path)
        return repo

    @classmethod
    def sample(cls) -> "InMemoryDestinationRepository":
        return cls.from_records(_SAMPLE_DESTINATIONS)


# ── Sample catalog ─────────────────────────────────────────────────────────────
# Durations in minutes, costs in EUR.

_SAMPLE_DESTINATIONS: list[dict[str, Any]] = [
    {
        "id": "paris", "name": "Paris", "country": "France",
        "location_lat": 48.8566, "location_lon": 2.3522,
        "category": "cultural", "popularity": 0.95, "average_daily_cost": 150,
        "transportation": {
            "airports": ["CDG", "ORY"],
            "rail_stations": ["Gare du Nord", "Gare de Lyon"],
            "ports": ["Port de la Bourdonnais"],
        },
        "attractions": [
            {"id": "louvre", "name": "Louvre Museum", "category": "museum", "rating": 4.8,
             "visit_duration_minutes": 180, "cost": 22, "location_lat": 48.8606, "location_lon": 2.3376,
             "description": "World's largest art museum"},
            {"id": "eiffel", "name": "Eiffel Tower", "category": "landmark", "rating": 4.7,
             "visit_duration_minutes": 120, "cost": 29, "location_lat": 48.8584, "location_lon": 2.2945,
             "description": "Wrought-iron lattice tower with city views"},
            {"id": "orsay", "name": "Musée d'Orsay", "category": "museum", "rating": 4.7,
             "visit_duration_minutes": 150, "cost": 16, "location_lat": 48.8600, "location_lon": 2.3266,
             "description": "Impressionist art in a former railway station"},
            {"id": "montmartre", "name": "Montmartre", "category": "neighborhood", "rating": 4.5,
             "visit_duration_minutes": 120, "cost": 0, "location_lat": 48.8867, "location_lon": 2.3431,
             "description": "Hilltop artists' quarter", "accessibility": {"mobility": False, "wheelchair": False}},
            {"id": "luxembourg", "name": "Jardin du Luxembourg", "category": "park", "rating": 4.6,
             "visit_duration_minutes": 90, "cost": 0, "location_lat": 48.8462, "location_lon": 2.3372,
             "description": "Formal gardens and palace"},
        ],
    },
    {
        "id": "lyon", "name": "Lyon", "country": "France",
        "location_lat": 45.7640, "location_lon": 4.8357,
        "category": "city", "popularity": 0.40, "average_daily_cost": 110,
        "transportation": {"airports": ["LYS"], "rail_stations": ["Part-Dieu"]},
        "attractions": [
            {"id": "fourviere", "name": "Basilica of Notre-Dame de Fourvière", "category": "landmark",
             "rating": 4.7, "visit_duration_minutes": 90, "cost": 0,
             "location_lat": 45.7623, "location_lon": 4.8225, "description": "Hilltop basilica"},
            {"id": "vieux-lyon", "name": "Vieux Lyon", "category": "neighborhood", "rating": 4.6,
             "visit_duration_minutes": 120, "cost": 0, "location_lat": 45.7622, "location_lon": 4.8272,
             "description": "Renaissance old town and traboules"},
            {"id": "confluence", "name": "Musée des Confluences", "category": "museum", "rating": 4.5,
             "visit_duration_minutes": 150, "cost": 12, "location_lat": 45.7327, "location_lon": 4.8180,
             "description": "Science and anthropology museum"},
        ],
    },
    {
        "id": "nice", "name": "Nice", "country": "France",
        "location_lat": 43.7102, "location_lon": 7.2620,
        "category": "beach", "popularity": 0.75, "average_daily_cost": 130,
        "transportation": {"airports": ["NCE"], "rail_stations": ["Nice-Ville"], "ports": ["Port Lympia"]},
        "attractions": [
            {"id": "promenade", "name": "Promenade des Anglais", "category": "beach", "rating": 4.6,
             "visit_duration_minutes": 90, "cost": 0, "location_lat": 43.6947, "location_lon": 7.2653,
             "description": "Seafront promenade"},
            {"id": "chateau", "name": "Colline du Château", "category": "park", "rating": 4.7,
             "visit_duration_minutes": 90, "cost": 0, "location_lat": 43.6953, "location_lon": 7.2817,
             "description": "Castle hill park with panoramic views",
             "accessibility": {"mobility": False, "wheelchair": False}},
            {"id": "chagall", "name": "Musée Marc Chagall", "category": "museum", "rating": 4.4,
             "visit_duration_minutes": 90, "cost": 10, "location_lat": 43.7092, "location_lon": 7.2692,
             "description": "Biblical message paintings"},
        ],
    },
    {
        "id": "marseille", "name": "Marseille", "country": "France",
        "location_lat": 43.2965, "location_lon": 5.3698,
        "category": "city", "popularity": 0.60, "average_daily_cost": 120,
        "transportation": {"airports": ["MRS"], "rail_stations": ["Saint-Charles"], "ports": ["Vieux-Port"]},
        "attractions": [
            {"id": "notre-dame-garde", "name": "Notre-Dame de la Garde", "category": "landmark",
             "rating": 4.8, "visit_duration_minutes": 90, "cost": 0,
             "location_lat": 43.2840, "location_lon": 5.3713, "description": "Basilica above the old port"},
            {"id": "mucem", "name": "MuCEM", "category": "museum", "rating": 4.5,
             "visit_duration_minutes": 150, "cost": 11, "location_lat": 43.2967, "location_lon": 5.3610,
             "description": "Museum of Mediterranean civilisations"},
            {"id": "calanques", "name": "Calanques National Park", "category": "nature", "rating": 4.9,
             "visit_duration_minutes": 240, "cost": 0, "location_lat": 43.2100, "location_lon": 5.4500,
             "description": "Limestone inlets and coastal hiking",
             "accessibility": {"mobility": False, "wheelchair": False}},
        ],
    },
    {
        "id": "bordeaux", "name": "Bordeaux", "country": "France",
        "location_lat": 44.8378, "location_lon": -0.5792,
        "category": "city", "popularity": 0.55, "average_daily_cost": 120,
        "transportation": {"airports": ["BOD"], "rail_stations": ["Saint-Jean"]},
        "attractions": [
            {"id": "cite-du-vin", "name": "La Cité du Vin", "category": "museum", "rating": 4.4,
             "visit_duration_minutes": 150, "cost": 22, "location_lat": 44.8624, "location_lon": -0.5503,
             "description": "Wine culture museum"},
            {"id": "miroir", "name": "Miroir d'eau", "category": "landmark", "rating": 4.6,
             "visit_duration_minutes": 60, "cost": 0, "location_lat": 44.8413, "location_lon": -0.5696,
             "description": "Reflecting pool facing Place de la Bourse"},
        ],
    },
]
