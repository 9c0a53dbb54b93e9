"""Typed views of the raw payloads each upstream provider returns.

Transformers validate provider data into these models first; anything that
does not validate is treated as a malformed record and dropped.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


# --- The Odds API ---


class OddsApiOutcome(BaseModel):
    name: str
    price: float  # Decimal odds
    point: Optional[float] = None


class OddsApiMarket(BaseModel):
    key: str
    last_update: Optional[datetime] = None
    outcomes: List[OddsApiOutcome] = []


class OddsApiBookmaker(BaseModel):
    key: str
    title: str
    last_update: Optional[datetime] = None
    markets: List[OddsApiMarket] = []


class OddsApiEvent(BaseModel):
    id: str
    sport_key: str
    sport_title: str
    commence_time: datetime
    home_team: str
    away_team: str
    bookmakers: List[OddsApiBookmaker] = []


class OddsApiSport(BaseModel):
    key: str
    group: Optional[str] = None
    title: Optional[str] = None
    active: bool = True


# --- Sportsbet (scraped) ---


class SportsbetOutcome(BaseModel):
    name: str
    odds: float  # Decimal odds
    handicap: Optional[float] = None


class SportsbetMarket(BaseModel):
    name: str
    type: str  # win, handicap, total; others are dropped on transform
    outcomes: List[SportsbetOutcome] = []


class SportsbetEvent(BaseModel):
    id: str
    home_team: str
    away_team: str
    sport: str
    league: str
    start_time: datetime
    markets: List[SportsbetMarket] = Field(default_factory=list)
