import pytest

from modules.errors import ValidationError
from modules.tool_usage.cost_tool import CostEstimator


def test_estimate_scales_with_style_rate():
    est = CostEstimator()
    assert est.estimate(100.0, "luxury") == pytest.approx(50.0)
    assert est.estimate(100.0, "backpacker") == pytest.approx(10.0)


def test_cheaper_styles_never_cost_more():
    est = CostEstimator()
    order = ["backpacker", "budget", "standard", "premium", "luxury"]
    costs = [est.estimate(250.0, style) for style in order]
    assert costs == sorted(costs)


def test_zero_distance_costs_nothing():
    assert CostEstimator().estimate(0.0, "standard") == 0.0


def test_custom_rates_override_config():
    est = CostEstimator(rates={"standard": 1.0})
    assert est.estimate(12.5, "standard") == pytest.approx(12.5)


def test_unknown_style_raises():
    with pytest.raises(ValidationError) as exc_info:
        CostEstimator().estimate(10.0, "first-class")
    assert exc_info.value.code == "UNKNOWN_TRAVEL_STYLE"


@pytest.mark.parametrize("bad", [-1.0, float("nan"), float("inf")])
def test_invalid_distance_raises(bad):
    with pytest.raises(ValidationError) as exc_info:
        CostEstimator().estimate(bad, "standard")
    assert exc_info.value.code == "INVALID_DISTANCE"


def test_cost_matrix_keeps_shape_and_zero_diagonal():
    dist = [[0.0, 10.0], [10.0, 0.0]]
    cost = CostEstimator().cost_matrix(dist, "premium")
    assert cost == [[0.0, pytest.approx(3.5)], [pytest.approx(3.5), 0.0]]
