from datetime import time

import pytest

import config

from modules.planning.day_scheduler import DayScheduler


def _minutes(t: time) -> int:
    return t.hour * 60 + t.minute


@pytest.fixture
def city(make_destination, make_attraction):
    attractions = [
        make_attraction("museum", rating=4.8, visit_duration_minutes=180, cost=20,
                        location_lat=48.86, location_lon=2.33),
        make_attraction("tower", category="landmark", rating=4.7,
                        visit_duration_minutes=120, cost=30,
                        location_lat=48.858, location_lon=2.294),
        make_attraction("garden", category="park", rating=4.6,
                        visit_duration_minutes=90, cost=0,
                        location_lat=48.846, location_lon=2.337),
        make_attraction("quarter", category="neighborhood", rating=4.4,
                        visit_duration_minutes=150, cost=0),
        make_attraction("gallery", rating=4.3, visit_duration_minutes=120, cost=15),
        make_attraction("market", category="food", rating=4.1,
                        visit_duration_minutes=60, cost=0),
    ]
    return make_destination("paris", 48.8566, 2.3522, category="cultural",
                            attractions=attractions)


def test_one_itinerary_per_day(city, make_prefs):
    days = DayScheduler().schedule(city, 3, 600.0, make_prefs(budget=1200, days=6))
    assert [d.day_number for d in days] == [1, 2, 3]


def test_activities_inside_window_without_overlap(city, make_prefs):
    days = DayScheduler().schedule(city, 2, 600.0, make_prefs(budget=1200, days=6))
    for day in days:
        prev_end = None
        for act in day.activities:
            start, end = _minutes(act.start_time), _minutes(act.end_time)
            assert 9 * 60 <= start < end <= 18 * 60
            assert end - start >= 60
            if prev_end is not None:
                assert start >= prev_end + 30
            prev_end = end


def test_first_activity_starts_at_nine(city, make_prefs):
    days = DayScheduler().schedule(city, 1, 300.0, make_prefs(budget=1200, days=6))
    assert days[0].activities[0].start_time == time(9, 0)
    assert days[0].activities[0].attraction.id == "museum"


def test_no_attraction_scheduled_twice(city, make_prefs):
    days = DayScheduler().schedule(city, 4, 1200.0, make_prefs(budget=1200, days=6))
    ids = [a.attraction.id for d in days for a in d.activities]
    assert len(ids) == len(set(ids))
    assert set(ids) == {a.id for a in city.attractions}


def test_daily_activity_spend_within_budget(city, make_prefs):
    # 100/day → 70 for activities
    days = DayScheduler().schedule(city, 2, 200.0, make_prefs(budget=1200, days=6))
    for day in days:
        assert day.estimated_cost <= 70.0 + 1e-9
        assert day.estimated_cost == pytest.approx(
            sum(a.attraction.cost for a in day.activities)
        )


def test_tight_budget_skips_paid_attractions(city, make_prefs):
    # 10/day → 7 for activities; only free attractions fit
    days = DayScheduler().schedule(city, 1, 10.0, make_prefs(budget=1200, days=6))
    assert all(a.attraction.cost == 0 for a in days[0].activities)
    assert days[0].activities


def test_meals_split_dining_reserve(city, make_prefs):
    days = DayScheduler().schedule(city, 1, 100.0, make_prefs(budget=1200, days=6))
    meals = {m.meal_type: m for m in days[0].meals}
    assert set(meals) == {"breakfast", "lunch", "dinner"}
    assert meals["breakfast"].estimated_cost == pytest.approx(6.0)
    assert meals["lunch"].estimated_cost == pytest.approx(9.0)
    assert meals["dinner"].estimated_cost == pytest.approx(15.0)
    assert meals["dinner"].recommendations


def test_meal_category_follows_travel_style(city, make_prefs):
    scheduler = DayScheduler()
    luxury = scheduler.plan_meals(city, 100.0, make_prefs(style="luxury"))
    assert {m.meal_type: m.category for m in luxury}["dinner"] == "fine_dining"
    backpacker = scheduler.plan_meals(city, 100.0, make_prefs(style="backpacker"))
    assert {m.meal_type: m.category for m in backpacker}["lunch"] == "fast"


def test_long_attraction_is_truncated_to_day_end(make_destination, make_attraction, make_prefs):
    dest = make_destination("alps", 45.9, 6.9, attractions=[
        make_attraction("hike", visit_duration_minutes=600, cost=0),
    ])
    day = DayScheduler().schedule(dest, 1, 100.0, make_prefs())[0]
    act = day.activities[0]
    assert act.start_time == time(9, 0)
    assert act.end_time == time(18, 0)
    assert day.scheduled_minutes == 540


def test_short_attractions_below_minimum_slot_are_skipped(make_destination,
                                                          make_attraction, make_prefs):
    dest = make_destination("town", 45.0, 5.0, attractions=[
        make_attraction("kiosk", visit_duration_minutes=30, cost=0),
    ])
    day = DayScheduler().schedule(dest, 1, 100.0, make_prefs())[0]
    assert day.activities == ()
    assert len(day.meals) == 3


def test_empty_attraction_list_gives_free_days(make_destination, make_prefs):
    dest = make_destination("empty", 45.0, 5.0)
    days = DayScheduler().schedule(dest, 2, 100.0, make_prefs())
    assert len(days) == 2
    assert all(d.activities == () and d.estimated_cost == 0 for d in days)


def test_walking_distance_uses_only_located_pairs(city, make_prefs):
    day = DayScheduler().schedule(city, 1, 600.0, make_prefs(budget=1200, days=6))[0]
    assert day.walking_distance_km >= 0.0
    located = [a for a in day.activities if a.attraction.location_lat is not None]
    if len(located) >= 2:
        assert day.walking_distance_km > 0.0


def test_explicit_candidate_subset_is_respected(city, make_prefs):
    subset = [a for a in city.attractions if a.id in ("garden", "market")]
    days = DayScheduler().schedule(city, 1, 600.0, make_prefs(budget=1200, days=6),
                                   attractions=subset)
    assert {a.attraction.id for a in days[0].activities} == {"garden", "market"}


def test_day_window_follows_config(city, make_prefs, monkeypatch):
    monkeypatch.setattr(config, "DAY_END_MINUTES", 12 * 60)
    scheduler = DayScheduler()
    assert scheduler.available_minutes == 180
    day = scheduler.schedule(city, 1, 600.0, make_prefs(budget=1200, days=6))[0]
    assert [a.attraction.id for a in day.activities] == ["museum"]
    assert day.activities[-1].end_time == time(12, 0)


def test_duplicate_attraction_ids_are_scheduled_once(make_destination, make_attraction,
                                                     make_prefs):
    dest = make_destination("twin", 45.0, 5.0, attractions=[
        make_attraction("dup", rating=4.8, visit_duration_minutes=60, cost=0),
        make_attraction("dup", rating=4.0, visit_duration_minutes=60, cost=0),
        make_attraction("other", rating=4.5, visit_duration_minutes=60, cost=0),
    ])
    days = DayScheduler().schedule(dest, 2, 200.0, make_prefs())
    ids = [a.attraction.id for d in days for a in d.activities]
    assert sorted(ids) == ["dup", "other"]
    kept = next(a for d in days for a in d.activities if a.attraction.id == "dup")
    assert kept.attraction.rating == 4.8
