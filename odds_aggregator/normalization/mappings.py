# odds_aggregator/normalization/mappings.py
"""Static lookup tables shared by the transformers and the aggregator."""

from typing import Dict, Optional, Tuple

from odds_aggregator.models.bookmaker import Bookmaker
from odds_aggregator.models.enums import MarketType

# The Odds API bookmaker keys -> unified bookmakers
ODDS_API_BOOKMAKERS: Dict[str, Bookmaker] = {
    "draftkings": Bookmaker(id="draftkings", name="DraftKings", logo="🏆"),
    "fanduel": Bookmaker(id="fanduel", name="FanDuel", logo="🎯"),
    "betmgm": Bookmaker(id="betmgm", name="BetMGM", logo="🦁"),
    "caesars": Bookmaker(id="caesars", name="Caesars", logo="👑"),
    "pointsbet_us": Bookmaker(id="pointsbet", name="PointsBet", logo="📊"),
    "barstool": Bookmaker(id="barstool", name="Barstool", logo="🍺"),
    "betrivers": Bookmaker(id="betrivers", name="BetRivers", logo="🌊"),
    "unibet_us": Bookmaker(id="unibet", name="Unibet", logo="🎲"),
    "williamhill_us": Bookmaker(id="williamhill", name="William Hill", logo="🏛️"),
    "bet365": Bookmaker(id="bet365", name="Bet365", logo="🎰"),
}

SPORTSBET_BOOKMAKER = Bookmaker(id="sportsbet", name="Sportsbet", logo="🇦🇺")

# The Odds API sport keys -> unified sport labels
ODDS_API_SPORTS: Dict[str, str] = {
    "americanfootball_nfl": "NFL",
    "basketball_nba": "NBA",
    "icehockey_nhl": "NHL",
    "baseball_mlb": "MLB",
    "soccer_epl": "EPL",
    "soccer_uefa_champs_league": "Champions League",
    "tennis_atp": "ATP Tennis",
    "mma_mixed_martial_arts": "MMA",
    "aussierules_afl": "AFL",
    "rugbyleague_nrl": "NRL",
}

# The Odds API market keys -> (type, display name)
ODDS_API_MARKETS: Dict[str, Tuple[MarketType, str]] = {
    "h2h": (MarketType.MONEYLINE, "Moneyline"),
    "spreads": (MarketType.SPREAD, "Point Spread"),
    "totals": (MarketType.TOTAL, "Over/Under"),
}

# Sportsbet market types -> unified market types
SPORTSBET_MARKETS: Dict[str, MarketType] = {
    "win": MarketType.MONEYLINE,
    "handicap": MarketType.SPREAD,
    "total": MarketType.TOTAL,
}

# Sportsbet sport keys -> page paths
SPORTSBET_SPORT_URLS: Dict[str, str] = {
    "afl": "/betting/australian-rules",
    "nrl": "/betting/rugby-league",
    "nba": "/betting/basketball/usa/nba",
    "nfl": "/betting/american-football/usa/nfl",
    "soccer": "/betting/soccer",
    "tennis": "/betting/tennis",
    "cricket": "/betting/cricket",
}

SPORTSBET_LEAGUES: Dict[str, str] = {
    "afl": "Australian Football League",
    "nrl": "National Rugby League",
    "nba": "National Basketball Association",
    "nfl": "National Football League",
    "soccer": "A-League",
    "tennis": "ATP/WTA",
    "cricket": "Big Bash League",
}

# Unified sport keys accepted by get_odds_by_sport -> per-provider sport codes
SPORT_KEY_MAPPING: Dict[str, Dict[str, str]] = {
    "afl": {"The Odds API": "aussierules_afl", "Sportsbet": "afl"},
    "nrl": {"The Odds API": "rugbyleague_nrl", "Sportsbet": "nrl"},
    "nba": {"The Odds API": "basketball_nba", "Sportsbet": "nba"},
    "nfl": {"The Odds API": "americanfootball_nfl", "Sportsbet": "nfl"},
    "soccer": {"The Odds API": "soccer_epl", "Sportsbet": "soccer"},
}


def map_odds_api_sport(sport_key: str, sport_title: str) -> str:
    """Unified sport label, falling back to the provider's own title."""
    return ODDS_API_SPORTS.get(sport_key, sport_title)


def map_odds_api_bookmaker(key: str) -> Optional[Bookmaker]:
    return ODDS_API_BOOKMAKERS.get(key)


def map_sportsbet_league(sport: str) -> str:
    return SPORTSBET_LEAGUES.get(sport, sport.upper())


def sport_codes_for(sport: str) -> Optional[Dict[str, str]]:
    """Per-provider codes for a unified sport key, or None if unsupported."""
    return SPORT_KEY_MAPPING.get(sport.lower().strip())
