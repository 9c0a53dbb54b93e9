from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence, Tuple

from odds_aggregator.aggregation.sources import OddsSource
from odds_aggregator.models.bookmaker import Bookmaker
from odds_aggregator.models.enums import MarketType
from odds_aggregator.models.event import Event, Market, Outcome
from odds_aggregator.models.odds import OddsData
from odds_aggregator.models.responses import SourceResult

FIXED_NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, now: datetime = FIXED_NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class StubSource(OddsSource):
    """In-memory provider returning canned events or raising a canned error."""

    def __init__(
        self,
        name: str,
        events: Optional[List[Event]] = None,
        error: Optional[Exception] = None,
        priority: int = 1,
        sports: Sequence[str] = ("default",),
        bookmakers: Sequence[Bookmaker] = (),
        rate_limit_remaining: Optional[int] = None,
    ):
        super().__init__(sports, priority)
        self.name = name
        self.events = events or []
        self.error = error
        self._bookmakers = list(bookmakers)
        self.rate_limit_remaining = rate_limit_remaining
        self.calls: List[str] = []

    @property
    def bookmakers(self) -> List[Bookmaker]:
        return self._bookmakers

    async def fetch_sport(self, sport_code: str) -> SourceResult:
        self.calls.append(sport_code)
        if self.error:
            raise self.error
        return SourceResult(
            source=self.name,
            events=self.events,
            rate_limit_remaining=self.rate_limit_remaining,
        )

    async def _probe(self) -> Tuple[str, int, int]:
        if self.error:
            raise self.error
        return "stub", len(self.events), len(self.events)


def make_prices(*prices: Tuple[str, int]) -> List[OddsData]:
    return [OddsData(bookmaker=bookmaker, price=price) for bookmaker, price in prices]


def make_event(
    sport: str,
    home: str,
    away: str,
    home_prices: Sequence[Tuple[str, int]] = (),
    away_prices: Sequence[Tuple[str, int]] = (),
    event_id: str = "evt-1",
    market_name: str = "Moneyline",
    market_type: MarketType = MarketType.MONEYLINE,
) -> Event:
    """A single-market event with one outcome per side."""
    return Event(
        id=event_id,
        sport=sport,
        league=sport,
        home_team=home,
        away_team=away,
        event_time=FIXED_NOW + timedelta(hours=3),
        markets=[
            Market(
                id=f"{event_id}_h2h",
                type=market_type,
                name=market_name,
                outcomes=[
                    Outcome(id=f"{event_id}_home", name=home, prices=make_prices(*home_prices)),
                    Outcome(id=f"{event_id}_away", name=away, prices=make_prices(*away_prices)),
                ],
            )
        ],
    )


