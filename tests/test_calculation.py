import pytest

from odds_aggregator.calculation.best_price import is_better_price, mark_best_odds
from odds_aggregator.calculation.odds_math import (
    american_to_decimal,
    decimal_to_american,
    is_valid_decimal,
)
from tests.factories import make_prices


@pytest.mark.parametrize(
    "decimal_odds, expected",
    [
        (2.0, 100),
        (1.91, -110),
        (1.50, -200),
        (2.50, 150),
        (1.95, -105),
        (1.01, -10000),
        (2.125, 113),  # halves round up
    ],
)
def test_decimal_to_american(decimal_odds, expected):
    assert decimal_to_american(decimal_odds) == expected


@pytest.mark.parametrize("decimal_odds", [1.0, 0.0, -2.5])
def test_decimal_to_american_rejects_degenerate_prices(decimal_odds):
    with pytest.raises(ValueError):
        decimal_to_american(decimal_odds)


def test_american_to_decimal():
    assert american_to_decimal(150) == 2.5
    assert american_to_decimal(-200) == 1.5
    assert american_to_decimal(0) is None
    assert american_to_decimal(None) is None


def test_is_valid_decimal():
    assert is_valid_decimal(1.01)
    assert not is_valid_decimal(1.0)
    assert not is_valid_decimal(None)
    assert not is_valid_decimal(float("inf"))
    assert not is_valid_decimal(float("nan"))


def _best(prices):
    return [p.price for p in prices if p.is_best]


def test_mark_best_odds_all_negative_prefers_closest_to_zero():
    marked = mark_best_odds(make_prices(("a", -110), ("b", -105), ("c", -115)))
    assert _best(marked) == [-105]
    assert marked[1].is_best and not marked[0].is_best and not marked[2].is_best


def test_mark_best_odds_all_positive_prefers_largest():
    marked = mark_best_odds(make_prices(("a", 120), ("b", 118)))
    assert _best(marked) == [120]


@pytest.mark.parametrize(
    "prices",
    [
        [("a", -110), ("b", 120)],
        [("b", 120), ("a", -110)],
        [("a", -101), ("b", 101), ("c", -105)],
    ],
)
def test_mark_best_odds_positive_beats_negative_regardless_of_position(prices):
    marked = mark_best_odds(make_prices(*prices))
    assert len(_best(marked)) == 1
    assert _best(marked)[0] > 0


def test_mark_best_odds_empty_input_is_unchanged():
    assert mark_best_odds([]) == []


def test_mark_best_odds_tie_keeps_first_occurrence():
    marked = mark_best_odds(make_prices(("a", -110), ("b", -110)))
    assert [p.is_best for p in marked] == [True, False]


def test_mark_best_odds_ignores_stale_upstream_flags():
    prices = [p.model_copy(update={"is_best": True}) for p in make_prices(("a", -120), ("b", 105))]
    marked = mark_best_odds(prices)
    assert [p.is_best for p in marked] == [False, True]


def test_is_better_price():
    assert is_better_price(105, -100)
    assert not is_better_price(-100, 105)
    assert is_better_price(-105, -110)
    assert not is_better_price(-110, -110)
