from typing import Dict, List, Optional

from loguru import logger

from odds_aggregator.calculation.best_price import mark_best_odds
from odds_aggregator.calculation.odds_math import decimal_to_american, is_valid_decimal
from odds_aggregator.models.enums import MarketType
from odds_aggregator.models.event import Event, Market, Outcome
from odds_aggregator.models.odds import OddsData
from odds_aggregator.models.raw import OddsApiEvent, OddsApiOutcome
from odds_aggregator.normalization.base_transformer import BaseTransformer
from odds_aggregator.normalization.mappings import (
    ODDS_API_MARKETS,
    map_odds_api_bookmaker,
    map_odds_api_sport,
)
from odds_aggregator.utils.misc_utils import generate_canonical_id


def outcome_label(outcome: OddsApiOutcome, market_type: MarketType) -> str:
    """Outcome name including its line, so different lines never share an outcome."""
    if outcome.point is None or market_type == MarketType.MONEYLINE:
        return outcome.name
    if market_type == MarketType.SPREAD:
        return f"{outcome.name} {outcome.point:+g}"
    return f"{outcome.name} {outcome.point:g}"


class OddsApiTransformer(BaseTransformer[OddsApiEvent]):
    """Transforms The Odds API event payloads into unified events."""

    source_name = "The Odds API"
    raw_model = OddsApiEvent

    def transform_record(self, record: OddsApiEvent) -> Optional[Event]:
        # market key -> outcome label -> prices, in first-seen order
        grouped: Dict[str, Dict[str, List[OddsData]]] = {}

        for raw_bookmaker in record.bookmakers:
            bookmaker = map_odds_api_bookmaker(raw_bookmaker.key)
            if not bookmaker:
                logger.debug(
                    f"Dropping unknown bookmaker '{raw_bookmaker.key}' for event {record.id}"
                )
                continue

            for raw_market in raw_bookmaker.markets:
                market_info = ODDS_API_MARKETS.get(raw_market.key)
                if not market_info:
                    continue
                market_type, _ = market_info
                outcomes = grouped.setdefault(raw_market.key, {})

                for raw_outcome in raw_market.outcomes:
                    if not is_valid_decimal(raw_outcome.price):
                        logger.debug(
                            f"Dropping degenerate price {raw_outcome.price} for '{raw_outcome.name}' ({bookmaker.id}, event {record.id})"
                        )
                        continue
                    label = outcome_label(raw_outcome, market_type)
                    outcomes.setdefault(label, []).append(
                        OddsData(
                            bookmaker=bookmaker.id,
                            price=decimal_to_american(raw_outcome.price),
                        )
                    )

        markets = [
            market
            for market_key, outcomes in grouped.items()
            if (market := self._build_market(market_key, outcomes)) is not None
        ]

        return Event(
            id=record.id,
            sport=map_odds_api_sport(record.sport_key, record.sport_title),
            league=record.sport_title,
            home_team=record.home_team,
            away_team=record.away_team,
            event_time=record.commence_time,
            markets=markets,
        )

    def _build_market(
        self, market_key: str, outcomes: Dict[str, List[OddsData]]
    ) -> Optional[Market]:
        if not outcomes:
            return None
        market_type, market_name = ODDS_API_MARKETS[market_key]
        return Market(
            id=market_key,
            type=market_type,
            name=market_name,
            outcomes=[
                Outcome(
                    id=generate_canonical_id(market_key, label),
                    name=label,
                    prices=mark_best_odds(prices),
                )
                for label, prices in outcomes.items()
            ],
        )
