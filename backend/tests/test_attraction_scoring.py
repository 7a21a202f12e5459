import pytest

from modules.planning.attraction_scoring import AttractionScorer, priority_for


def test_expensive_attraction_is_penalised(make_attraction, make_prefs):
    prefs = make_prefs(budget=600, days=6)          # 100 per day
    pricey = make_attraction("pricey", rating=4.5, cost=80)
    cheap = make_attraction("cheap", rating=4.5, cost=20)

    scorer = AttractionScorer(prefs)
    pricey_score = scorer.score(pricey)
    assert pricey_score.cost_penalty == pytest.approx(1.5)
    assert pricey_score.score == pytest.approx(3.0)
    assert scorer.score(cheap).cost_penalty == 0.0

    ranked = scorer.rank([pricey, cheap])
    assert [s.attraction.id for s in ranked] == ["cheap", "pricey"]


def test_interest_match_in_category_or_description(make_attraction, make_prefs):
    scorer = AttractionScorer(make_prefs(interests=["Museum", "wine"]))
    a = make_attraction("a", category="museum", description="Wine history exhibits", cost=0)
    s = scorer.score(a)
    assert s.interest_matches == 2
    assert s.score == pytest.approx(4.5 + 2 * 2)


def test_mobility_penalty_only_when_requested(make_attraction, make_prefs):
    steps = make_attraction("steps", rating=4.8, cost=0, mobility_accessible=False)
    assert AttractionScorer(make_prefs()).score(steps).accessibility_penalty == 0.0

    penalised = AttractionScorer(make_prefs(mobility=True)).score(steps)
    assert penalised.accessibility_penalty == pytest.approx(5.0)
    assert penalised.score == pytest.approx(-0.2)
    assert penalised.priority == "optional"


def test_rank_is_stable_for_equal_scores(make_attraction, make_prefs):
    items = [make_attraction(f"x{i}", rating=4.0, cost=0) for i in range(5)]
    ranked = AttractionScorer(make_prefs()).rank(items)
    assert [s.attraction.id for s in ranked] == [f"x{i}" for i in range(5)]


@pytest.mark.parametrize(
    "score,expected",
    [(9.1, "must_see"), (8.0, "must_see"), (6.0, "recommended"), (5.99, "optional")],
)
def test_priority_thresholds(score, expected):
    assert priority_for(score) == expected
