import pytest

from modules.errors import ValidationError
from modules.planning.allocation_engine import AllocationEngine, matches_interest


@pytest.fixture
def paris_lyon(make_destination):
    return [
        make_destination("paris", 48.8566, 2.3522, popularity=0.95),
        make_destination("lyon", 45.7640, 4.8357, popularity=0.40),
    ]


def test_paris_lyon_split(paris_lyon, make_prefs):
    alloc = AllocationEngine().allocate(paris_lyon, make_prefs(budget=3000, days=6))

    assert alloc["paris"].days == 4
    assert alloc["lyon"].days == 2
    assert alloc["paris"].weight == pytest.approx(0.95 / 1.35)
    assert alloc["paris"].budget == pytest.approx(2111.11, abs=0.01)
    assert alloc["lyon"].budget == pytest.approx(888.89, abs=0.01)


def test_single_destination_gets_everything(make_destination, make_prefs):
    dest = make_destination("rome", 41.9, 12.5, popularity=0.3)
    alloc = AllocationEngine().allocate([dest], make_prefs(budget=1234.5, days=5))
    assert alloc["rome"].days == 5
    assert alloc["rome"].budget == pytest.approx(1234.5)


@pytest.mark.parametrize("days", [3, 4, 7, 10, 13])
def test_days_and_budget_sum_exactly(make_destination, make_prefs, days):
    dests = [
        make_destination("a", 48.0, 2.0, popularity=0.9),
        make_destination("b", 45.0, 4.0, popularity=0.5),
        make_destination("c", 43.0, 7.0, popularity=0.2),
    ]
    alloc = AllocationEngine().allocate(dests, make_prefs(budget=5000, days=days))
    assert sum(a.days for a in alloc.values()) == days
    assert all(a.days >= 1 for a in alloc.values())
    assert sum(a.budget for a in alloc.values()) == pytest.approx(5000)


def test_allocation_follows_route_order(paris_lyon, make_prefs):
    alloc = AllocationEngine().allocate(list(reversed(paris_lyon)), make_prefs())
    assert list(alloc) == ["lyon", "paris"]


def test_low_popularity_destination_still_gets_a_day(make_destination, make_prefs):
    dests = [
        make_destination("hub", 48.0, 2.0, popularity=1.0),
        make_destination("tiny", 45.0, 4.0, popularity=0.0),
        make_destination("tiny2", 44.0, 5.0, popularity=0.0),
    ]
    alloc = AllocationEngine().allocate(dests, make_prefs(days=3))
    assert [alloc[k].days for k in ("hub", "tiny", "tiny2")] == [1, 1, 1]


def test_interest_matches_raise_weight(make_destination, make_attraction, make_prefs):
    museums = [make_attraction(f"m{i}", category="Art Museum") for i in range(3)]
    dests = [
        make_destination("art", 48.0, 2.0, popularity=0.5, attractions=museums),
        make_destination("plain", 45.0, 4.0, popularity=0.5),
    ]
    alloc = AllocationEngine().allocate(dests, make_prefs(days=4, interests=["museum"]))
    assert alloc["art"].weight > alloc["plain"].weight
    assert alloc["art"].weight == pytest.approx(0.8 / 1.3)


def test_fewer_days_than_destinations_is_rejected(paris_lyon, make_prefs):
    with pytest.raises(ValidationError) as exc_info:
        AllocationEngine().allocate(paris_lyon, make_prefs(days=1))
    assert exc_info.value.code == "INSUFFICIENT_DAYS"


def test_empty_destination_list_is_rejected(make_prefs):
    with pytest.raises(ValidationError) as exc_info:
        AllocationEngine().allocate([], make_prefs())
    assert exc_info.value.code == "EMPTY_DESTINATIONS"


def test_apportion_ties_go_to_earlier_destination():
    assert AllocationEngine.apportion_days([0.5, 0.5], 3) == [2, 1]


def test_apportion_repairs_zero_day_destination():
    # floors [4, 0, 0] + leftover → [5, 0, 0]; each empty stop takes a day from the largest
    assert AllocationEngine.apportion_days([0.9, 0.06, 0.04], 5) == [3, 1, 1]


def test_matches_interest_is_case_insensitive_substring():
    assert matches_interest("Modern Art Museum", ["museum"])
    assert not matches_interest("park", ["museum", "  "])
    assert not matches_interest("park", [])
