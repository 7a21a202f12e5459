import os
import sys

import pytest

# Ensure backend/ is on the path so `import config` / `modules.*` resolve
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_DIR = os.path.abspath(os.path.join(CURRENT_DIR, ".."))
if BACKEND_DIR not in sys.path:
    sys.path.append(BACKEND_DIR)

from schemas.destination import Attraction, Destination
from schemas.preferences import TripPreferences


@pytest.fixture
def make_attraction():
    def _make(attraction_id: str = "a1", **overrides) -> Attraction:
        fields = {
            "name": attraction_id.title(),
            "category": "museum",
            "rating": 4.5,
            "visit_duration_minutes": 120,
            "cost": 10.0,
        }
        fields.update(overrides)
        return Attraction(id=attraction_id, **fields)
    return _make


@pytest.fixture
def make_destination():
    def _make(
        destination_id: str,
        lat: float | None,
        lon: float | None,
        popularity: float = 0.5,
        attractions=(),
        **overrides,
    ) -> Destination:
        return Destination(
            id=destination_id,
            name=overrides.pop("name", destination_id.title()),
            location_lat=lat,
            location_lon=lon,
            popularity=popularity,
            attractions=tuple(attractions),
            **overrides,
        )
    return _make


@pytest.fixture
def make_prefs():
    def _make(
        budget: float = 3000.0,
        days: int = 6,
        style: str = "standard",
        flexibility: str = "moderate",
        interests=(),
        mobility: bool = False,
        currency: str = "EUR",
    ) -> TripPreferences:
        return TripPreferences.model_validate({
            "budget": {"total": budget, "currency": currency, "flexibility": flexibility},
            "duration": {"days": days},
            "travel_style": style,
            "interests": list(interests),
            "accessibility": {"mobility": mobility},
        })
    return _make
