from odds_aggregator.models.enums import MarketType
from odds_aggregator.models.event import Market
from odds_aggregator.normalization.matcher import (
    events_match,
    markets_match,
    outcome_names_match,
)
from odds_aggregator.utils.misc_utils import normalize_name
from tests.factories import make_event


def test_normalize_name_strips_case_and_punctuation():
    assert normalize_name("St. Louis Blues") == "stlouisblues"
    assert normalize_name("  New-York  Jets! ") == "newyorkjets"
    assert normalize_name("49ers") == "49ers"


def test_events_match_ignores_case_and_side_order():
    event1 = make_event("NFL", "Chiefs", "Bills")
    event2 = make_event("nfl", "bills", "chiefs")
    assert events_match(event1, event2)
    assert events_match(event2, event1)


def test_events_do_not_match_different_opponent():
    assert not events_match(
        make_event("NFL", "Chiefs", "Bills"), make_event("NFL", "Chiefs", "Ravens")
    )


def test_events_do_not_match_different_sport():
    assert not events_match(
        make_event("NFL", "Giants", "Jets"), make_event("MLB", "Giants", "Jets")
    )


def test_events_match_is_exact_after_normalization():
    # No fuzzy matching: a shortened name is a different team
    assert not events_match(
        make_event("NBA", "Los Angeles Lakers", "Boston Celtics"),
        make_event("NBA", "LA Lakers", "Boston Celtics"),
    )
    assert events_match(
        make_event("NBA", "Los Angeles Lakers", "Boston Celtics"),
        make_event("N.B.A.", "los-angeles lakers", "BOSTON CELTICS"),
    )


def test_markets_match_on_type_or_name():
    moneyline = Market(id="1", type=MarketType.MONEYLINE, name="Moneyline")
    head_to_head = Market(id="2", type=MarketType.MONEYLINE, name="Head to Head")
    spread = Market(id="3", type=MarketType.SPREAD, name="Point Spread")
    oddly_named = Market(id="4", type=MarketType.TOTAL, name="Moneyline")

    assert markets_match(moneyline, head_to_head)
    assert markets_match(moneyline, oddly_named)
    assert not markets_match(head_to_head, spread)


def test_outcome_names_match():
    assert outcome_names_match("Kansas City Chiefs", "kansas city chiefs")
    assert outcome_names_match("Over 47.5", "over 475")
    assert not outcome_names_match("Chiefs -2.5", "Bills +2.5")
