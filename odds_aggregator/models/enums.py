from enum import Enum


class MarketType(str, Enum):
    MONEYLINE = "moneyline"
    SPREAD = "spread"  # Covers Point Spread, Line, Handicap
    TOTAL = "total"  # Covers Over/Under
