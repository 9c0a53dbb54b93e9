from odds_aggregator.aggregation.merge import (
    finalize_best_prices,
    merge_event_lists,
    merge_prices,
)
from odds_aggregator.models.enums import MarketType
from tests.factories import make_event, make_prices


def _outcome(event, name):
    return next(
        o for m in event.markets for o in m.outcomes if o.name == name
    )


def test_merge_event_lists_combines_swapped_fixture():
    base = make_event(
        "NFL",
        "Kansas City Chiefs",
        "Buffalo Bills",
        home_prices=[("draftkings", -110), ("fanduel", -105)],
        away_prices=[("draftkings", -110), ("fanduel", -115)],
        event_id="api-1",
    )
    incoming = make_event(
        "nfl",
        "Buffalo Bills",
        "Kansas City Chiefs",
        home_prices=[("sportsbet", 120)],
        away_prices=[("sportsbet", -143)],
        event_id="sb-1",
        market_name="Head to Head",
    )

    merged = merge_event_lists([base], [incoming])

    assert len(merged) == 1
    event = merged[0]
    assert event.id == "api-1"
    assert event.home_team == "Kansas City Chiefs"
    assert len(event.markets) == 1

    chiefs = _outcome(event, "Kansas City Chiefs")
    bills = _outcome(event, "Buffalo Bills")
    assert [p.bookmaker for p in chiefs.prices] == ["draftkings", "fanduel", "sportsbet"]
    assert chiefs.best_price.bookmaker == "fanduel"
    assert bills.best_price.bookmaker == "sportsbet"
    assert sum(p.is_best for p in bills.prices) == 1


def test_merge_event_lists_appends_unmatched_events_and_markets():
    base = make_event("NBA", "Lakers", "Celtics", home_prices=[("a", 100)], event_id="1")
    other = make_event("NBA", "Knicks", "Nets", home_prices=[("b", 100)], event_id="2")
    spread = make_event(
        "NBA",
        "Lakers",
        "Celtics",
        home_prices=[("b", -110)],
        event_id="3",
        market_name="Point Spread",
        market_type=MarketType.SPREAD,
    )

    merged = merge_event_lists([base], [other, spread])

    assert [e.id for e in merged] == ["1", "2"]
    assert [m.type for m in merged[0].markets] == [MarketType.MONEYLINE, MarketType.SPREAD]


def test_merge_appends_new_outcomes():
    base = make_event("NHL", "Bruins", "Rangers", home_prices=[("a", -120)])
    incoming = base.model_copy(
        update={
            "markets": [
                base.markets[0].model_copy(
                    update={
                        "outcomes": [
                            base.markets[0].outcomes[0].model_copy(
                                update={"name": "Draw", "prices": make_prices(("b", 350))}
                            )
                        ]
                    }
                )
            ]
        }
    )

    merged = merge_event_lists([base], [incoming])

    assert [o.name for o in merged[0].markets[0].outcomes] == ["Bruins", "Rangers", "Draw"]


def test_merging_identical_data_is_idempotent():
    events = [
        make_event("NFL", "Chiefs", "Bills", [("a", -110), ("b", -105)], [("a", -110)], "1"),
        make_event("NFL", "Eagles", "Giants", [("a", 150)], [("a", -170)], "2"),
    ]

    merged = merge_event_lists(events, events)

    assert len(merged) == 2
    for original, result in zip(events, merged):
        for m_orig, m_res in zip(original.markets, result.markets):
            assert [len(o.prices) for o in m_res.outcomes] == [
                len(o.prices) for o in m_orig.outcomes
            ]


def test_merge_prices_replaces_same_bookmaker_in_place():
    merged = merge_prices(
        make_prices(("a", -110), ("b", -105)), make_prices(("b", 100), ("c", -120))
    )
    assert [(p.bookmaker, p.price) for p in merged] == [("a", -110), ("b", 100), ("c", -120)]


def test_merge_does_not_mutate_inputs():
    base = make_event("NFL", "Chiefs", "Bills", [("a", -110)], [("a", -110)])
    incoming = make_event("NFL", "Bills", "Chiefs", [("b", 105)], [("b", -125)])

    merge_event_lists([base], [incoming])

    assert [len(o.prices) for o in base.markets[0].outcomes] == [1, 1]


def test_finalize_best_prices_recomputes_every_outcome():
    event = make_event("NFL", "Chiefs", "Bills", [("a", -110), ("b", 105)], [("a", -110)])
    stale = event.model_copy(
        update={
            "markets": [
                event.markets[0].model_copy(
                    update={
                        "outcomes": [
                            o.model_copy(
                                update={"prices": [p.model_copy(update={"is_best": True}) for p in o.prices]}
                            )
                            for o in event.markets[0].outcomes
                        ]
                    }
                )
            ]
        }
    )

    (finalized,) = finalize_best_prices([stale])

    chiefs, bills = finalized.markets[0].outcomes
    assert [p.is_best for p in chiefs.prices] == [False, True]
    assert [p.is_best for p in bills.prices] == [True]
