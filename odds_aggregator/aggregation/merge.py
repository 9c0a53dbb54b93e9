"""Merges unified events from different providers into one list.

The accumulated list is always the base: its events keep their ids, team
labels and ordering, and the incoming provider's markets, outcomes and
prices are folded into it.
"""

from typing import List, Sequence

from odds_aggregator.calculation.best_price import mark_best_odds
from odds_aggregator.models.event import Event, Market, Outcome
from odds_aggregator.models.odds import OddsData
from odds_aggregator.normalization.matcher import (
    events_match,
    markets_match,
    outcome_names_match,
)


def merge_prices(
    existing: Sequence[OddsData], incoming: Sequence[OddsData]
) -> List[OddsData]:
    """Appends incoming prices, replacing any older price from the same bookmaker."""
    prices = list(existing)
    for price in incoming:
        index = next(
            (i for i, p in enumerate(prices) if p.bookmaker == price.bookmaker), None
        )
        if index is None:
            prices.append(price)
        else:
            prices[index] = price
    return prices


def merge_market_odds(market1: Market, market2: Market) -> Market:
    outcomes: List[Outcome] = list(market1.outcomes)

    for outcome2 in market2.outcomes:
        index = next(
            (
                i
                for i, outcome in enumerate(outcomes)
                if outcome_names_match(outcome.name, outcome2.name)
            ),
            None,
        )
        if index is None:
            outcomes.append(outcome2)
        else:
            outcomes[index] = outcomes[index].model_copy(
                update={"prices": merge_prices(outcomes[index].prices, outcome2.prices)}
            )

    return market1.model_copy(
        update={
            "outcomes": [
                outcome.model_copy(update={"prices": mark_best_odds(outcome.prices)})
                for outcome in outcomes
            ]
        }
    )


def merge_event_odds(event1: Event, event2: Event) -> Event:
    markets: List[Market] = list(event1.markets)

    for market2 in event2.markets:
        index = next(
            (i for i, market in enumerate(markets) if markets_match(market, market2)),
            None,
        )
        if index is None:
            markets.append(market2)
        else:
            markets[index] = merge_market_odds(markets[index], market2)

    return event1.model_copy(update={"markets": markets})


def merge_event_lists(
    existing_events: Sequence[Event], new_events: Sequence[Event]
) -> List[Event]:
    """Folds ``new_events`` into ``existing_events`` without modifying either."""
    merged: List[Event] = list(existing_events)

    for new_event in new_events:
        index = next(
            (i for i, existing in enumerate(merged) if events_match(existing, new_event)),
            None,
        )
        if index is None:
            merged.append(new_event)
        else:
            merged[index] = merge_event_odds(merged[index], new_event)

    return merged


def finalize_best_prices(events: Sequence[Event]) -> List[Event]:
    """Recomputes the best-price flag of every outcome in every event."""
    return [
        event.model_copy(
            update={
                "markets": [
                    market.model_copy(
                        update={
                            "outcomes": [
                                outcome.model_copy(
                                    update={"prices": mark_best_odds(outcome.prices)}
                                )
                                for outcome in market.outcomes
                            ]
                        }
                    )
                    for market in event.markets
                ]
            }
        )
        for event in events
    ]
