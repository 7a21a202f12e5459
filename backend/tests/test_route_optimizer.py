import itertools

import pytest

from modules.errors import ComputationError, DataError
from modules.planning.route_optimizer import RouteOptimizer

# (id, lat, lon)
CITIES = [
    ("paris", 48.8566, 2.3522),
    ("nice", 43.7102, 7.2620),
    ("lyon", 45.7640, 4.8357),
    ("bordeaux", 44.8378, -0.5792),
    ("marseille", 43.2965, 5.3698),
    ("lille", 50.6292, 3.0573),
    ("strasbourg", 48.5734, 7.7521),
    ("nantes", 47.2184, -1.5536),
]

# Points on a line: W[i][j] = |pos_i - pos_j|
LINE_W = [[abs(a - b) / 3.0 for b in range(4)] for a in range(4)]


@pytest.fixture
def cities(make_destination):
    return [make_destination(cid, lat, lon) for cid, lat, lon in CITIES]


class _StepClock:
    """Advances one second per reading."""

    def __init__(self):
        self.now = 0.0

    def __call__(self):
        self.now += 1.0
        return self.now


def test_single_destination_is_identity(cities, make_prefs):
    result = RouteOptimizer().optimize(cities[:1], make_prefs())
    assert result.order == (0,)
    assert result.weight == 0.0
    assert not result.approximate


def test_two_destinations_keep_input_order(cities, make_prefs):
    result = RouteOptimizer().optimize(cities[:2], make_prefs())
    assert result.order == (0, 1)
    assert result.passes == 0


def test_order_is_permutation_starting_at_first(cities, make_prefs):
    result = RouteOptimizer().optimize(cities, make_prefs())
    assert sorted(result.order) == list(range(len(cities)))
    assert result.order[0] == 0


def test_two_opt_never_worse_than_nearest_neighbor(cities, make_prefs):
    result = RouteOptimizer().optimize(cities, make_prefs())
    assert result.weight <= result.nearest_neighbor_weight + 1e-12


def test_small_instance_close_to_brute_force(cities, make_prefs):
    subset = cities[:6]
    opt = RouteOptimizer()
    result = opt.optimize(subset, make_prefs())
    best = min(
        opt.tour_weight((0,) + rest, result.weight_matrix)
        for rest in itertools.permutations(range(1, len(subset)))
    )
    # Local search: near-optimal, not guaranteed optimal.
    assert result.weight <= best * 1.10 + 1e-12


def test_result_is_deterministic(cities, make_prefs):
    prefs = make_prefs()
    first = RouteOptimizer().optimize(cities, prefs)
    second = RouteOptimizer().optimize(cities, prefs)
    assert first.order == second.order
    assert first.weight == second.weight


def test_ordered_maps_indices_to_items(cities, make_prefs):
    result = RouteOptimizer().optimize(cities[:4], make_prefs())
    assert [d.id for d in result.ordered(cities[:4])] == [
        cities[i].id for i in result.order
    ]


def test_missing_coordinates_raise_data_error(cities, make_destination, make_prefs):
    broken = make_destination("atlantis", None, None)
    with pytest.raises(DataError) as exc_info:
        RouteOptimizer().optimize(cities[:2] + [broken], make_prefs())
    assert exc_info.value.destination_id == "atlantis"
    assert exc_info.value.code == "INVALID_COORDINATES"


def test_null_island_is_rejected(cities, make_destination, make_prefs):
    with pytest.raises(DataError):
        RouteOptimizer().optimize([make_destination("x", 0.0, 0.0)] + cities[:2], make_prefs())


def test_strict_budget_weights_cost_more(make_prefs):
    assert RouteOptimizer.cost_weight(make_prefs(flexibility="strict")) == pytest.approx(0.7)
    assert RouteOptimizer.cost_weight(make_prefs(flexibility="flexible")) == pytest.approx(0.3)


def test_normalize_divides_by_max_and_keeps_zero_matrix():
    assert RouteOptimizer.normalize([[0.0, 4.0], [2.0, 0.0]]) == [[0.0, 1.0], [0.5, 0.0]]
    assert RouteOptimizer.normalize([[0.0, 0.0], [0.0, 0.0]]) == [[0.0, 0.0], [0.0, 0.0]]


def test_combine_blends_matrices():
    combined = RouteOptimizer.combine([[0.0, 1.0]], [[0.0, 0.0]], 0.3)
    assert combined == [[0.0, pytest.approx(0.7)]]


def test_nearest_neighbor_breaks_ties_on_lowest_index():
    flat = [[0.0 if i == j else 1.0 for j in range(4)] for i in range(4)]
    assert RouteOptimizer.nearest_neighbor(flat) == [0, 1, 2, 3]


def test_two_opt_fixes_crossed_tour():
    opt = RouteOptimizer()
    tour, weight, passes, degradation = opt.two_opt([0, 2, 1, 3], LINE_W)
    assert tour == [0, 1, 2, 3]
    assert weight == pytest.approx(1.0)
    assert passes == 2
    assert degradation is None


def test_pass_cap_while_improving_degrades():
    opt = RouteOptimizer(max_passes=1)
    tour, weight, passes, degradation = opt.two_opt([0, 2, 1, 3], LINE_W)
    assert passes == 1
    assert isinstance(degradation, ComputationError)
    assert degradation.stage == "solve_order"
    assert sorted(tour) == [0, 1, 2, 3]


def test_time_budget_exhaustion_returns_approximate_result(cities, make_prefs):
    opt = RouteOptimizer(time_budget_ms=0, clock=_StepClock())
    result = opt.optimize(cities, make_prefs())
    assert result.approximate
    assert isinstance(result.degradation, ComputationError)
    assert result.degradation.code == "SEARCH_BUDGET_EXHAUSTED"
    assert sorted(result.order) == list(range(len(cities)))
    assert result.weight <= result.nearest_neighbor_weight + 1e-12


def test_matrices_are_exposed(cities, make_prefs):
    result = RouteOptimizer().optimize(cities[:3], make_prefs())
    n = 3
    for m in (result.distance_matrix, result.cost_matrix, result.weight_matrix):
        assert len(m) == n and all(len(row) == n for row in m)
    assert max(v for row in result.weight_matrix for v in row) <= 1.0 + 1e-12
