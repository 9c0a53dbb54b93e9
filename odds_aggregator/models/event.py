from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, computed_field

from .enums import MarketType
from .odds import OddsData


class Outcome(BaseModel):
    """One possible result of a market and the prices offered for it."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    prices: List[OddsData] = []

    @computed_field  # type: ignore[misc]
    @property
    def best_price(self) -> Optional[OddsData]:
        """The price currently flagged as best, if any."""
        return next((p for p in self.prices if p.is_best), None)


class Market(BaseModel):
    """Represents a specific betting market within an event."""

    model_config = ConfigDict(frozen=True)

    id: str
    type: MarketType
    name: str
    outcomes: List[Outcome] = []


class Event(BaseModel):
    """Represents a single fixture with markets merged from one or more providers."""

    model_config = ConfigDict(frozen=True)

    id: str
    sport: str
    league: str
    home_team: str
    away_team: str
    event_time: datetime
    markets: List[Market] = []

    @computed_field  # type: ignore[misc]
    @property
    def description(self) -> str:
        """A human-readable description of the event."""
        return f"{self.league}: {self.away_team} @ {self.home_team} ({self.event_time.strftime('%Y-%m-%d %H:%M')})"
