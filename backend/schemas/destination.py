"""
schemas/destination.py
----------------------
Read-only destination records supplied by the destination repository.

Records are frozen: the optimizer borrows them for one request and never
mutates them.  Sequences are tuples for the same reason.
Coordinates are decimal degrees; ``None`` means the source had no position.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class Attraction:
    """A single point of interest inside a destination."""
    id: str
    name: str = ""
    category: str = ""                  # e.g. "museum" | "park" | "landmark"
    rating: float = 0.0                 # 0–5
    visit_duration_minutes: int = 60
    cost: float = 0.0                   # entry cost, trip currency
    location_lat: Optional[float] = None
    location_lon: Optional[float] = None
    description: str = ""
    mobility_accessible: bool = True
    wheelchair_accessible: bool = True

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "Attraction":
        accessibility = raw.get("accessibility") or {}
        return cls(
            id=str(raw["id"]),
            name=raw.get("name", ""),
            category=raw.get("category", ""),
            rating=float(raw.get("rating", 0.0)),
            visit_duration_minutes=int(raw.get("visit_duration_minutes", 60)),
            cost=float(raw.get("cost", 0.0)),
            location_lat=raw.get("location_lat"),
            location_lon=raw.get("location_lon"),
            description=raw.get("description", ""),
            mobility_accessible=bool(accessibility.get("mobility", True)),
            wheelchair_accessible=bool(accessibility.get("wheelchair", True)),
        )


@dataclass(frozen=True)
class TransportationHub:
    """Arrival / departure infrastructure of a destination."""
    airports: tuple[str, ...] = ()
    rail_stations: tuple[str, ...] = ()
    ports: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, raw: dict[str, Any] | None) -> "TransportationHub":
        raw = raw or {}
        return cls(
            airports=tuple(raw.get("airports", ())),
            rail_stations=tuple(raw.get("rail_stations", ())),
            ports=tuple(raw.get("ports", ())),
        )


@dataclass(frozen=True)
class Destination:
    """
    A trip stop as held by the destination repository.

    popularity is in [0, 1]; average_daily_cost is informational only (the
    allocation engine splits the traveller's own budget, not this figure).
    """
    id: str
    name: str = ""
    country: str = ""
    location_lat: Optional[float] = None
    location_lon: Optional[float] = None
    category: str = "city"              # city | nature | beach | mountain | cultural | adventure
    popularity: float = 0.0
    average_daily_cost: float = 0.0
    attractions: tuple[Attraction, ...] = field(default_factory=tuple)
    transportation: TransportationHub = field(default_factory=TransportationHub)

    @property
    def coordinates(self) -> tuple[Optional[float], Optional[float]]:
        return (self.location_lat, self.location_lon)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "Destination":
        return cls(
            id=str(raw["id"]),
            name=raw.get("name", ""),
            country=raw.get("country", ""),
            location_lat=raw.get("location_lat"),
            location_lon=raw.get("location_lon"),
            category=raw.get("category", "city"),
            popularity=float(raw.get("popularity", 0.0)),
            average_daily_cost=float(raw.get("average_daily_cost", 0.0)),
            attractions=tuple(Attraction.from_dict(a) for a in raw.get("attractions", ())),
            transportation=TransportationHub.from_dict(raw.get("transportation")),
        )
