from datetime import timedelta
from typing import List

from odds_aggregator.calculation.best_price import mark_best_odds
from odds_aggregator.models.enums import MarketType
from odds_aggregator.models.event import Event, Market, Outcome
from odds_aggregator.models.odds import OddsData
from odds_aggregator.utils.clock import Clock, utc_now


def _outcome(outcome_id: str, name: str, prices: List[tuple]) -> Outcome:
    return Outcome(
        id=outcome_id,
        name=name,
        prices=mark_best_odds(
            [OddsData(bookmaker=bookmaker, price=price) for bookmaker, price in prices]
        ),
    )


def demo_events(clock: Clock = utc_now) -> List[Event]:
    """Fixed events served when no provider yields anything."""
    return [
        Event(
            id="demo_combined_1",
            sport="AFL",
            league="Australian Football League",
            home_team="Richmond Tigers",
            away_team="Collingwood Magpies",
            event_time=clock() + timedelta(hours=2),
            markets=[
                Market(
                    id="demo_h2h",
                    type=MarketType.MONEYLINE,
                    name="Head to Head",
                    outcomes=[
                        _outcome(
                            "richmond",
                            "Richmond Tigers",
                            [("sportsbet", -115), ("bet365", -120)],
                        ),
                        _outcome(
                            "collingwood",
                            "Collingwood Magpies",
                            [("sportsbet", -105), ("bet365", -100)],
                        ),
                    ],
                )
            ],
        ),
        Event(
            id="demo_combined_2",
            sport="NFL",
            league="NFL",
            home_team="Kansas City Chiefs",
            away_team="Buffalo Bills",
            event_time=clock() + timedelta(hours=26),
            markets=[
                Market(
                    id="demo_nfl_h2h",
                    type=MarketType.MONEYLINE,
                    name="Moneyline",
                    outcomes=[
                        _outcome(
                            "chiefs",
                            "Kansas City Chiefs",
                            [("draftkings", -110), ("fanduel", -105)],
                        ),
                        _outcome(
                            "bills",
                            "Buffalo Bills",
                            [("draftkings", -110), ("fanduel", -115)],
                        ),
                    ],
                )
            ],
        ),
    ]
