"""Decides when records from different providers describe the same thing.

Matching is exact after normalization, never fuzzy.
"""

from odds_aggregator.models.event import Event, Market
from odds_aggregator.utils.misc_utils import normalize_name


def events_match(event1: Event, event2: Event) -> bool:
    """Same sport and same pair of teams, whichever side each provider calls home."""
    if normalize_name(event1.sport) != normalize_name(event2.sport):
        return False

    home1, away1 = normalize_name(event1.home_team), normalize_name(event1.away_team)
    home2, away2 = normalize_name(event2.home_team), normalize_name(event2.away_team)
    return (home1, away1) == (home2, away2) or (home1, away1) == (away2, home2)


def markets_match(market1: Market, market2: Market) -> bool:
    # Either the type or the name is enough
    return market1.type == market2.type or market1.name == market2.name


def outcome_names_match(name1: str, name2: str) -> bool:
    return normalize_name(name1) == normalize_name(name2)
