import math
from typing import Optional

# Smallest payout multiplier a bookmaker will quote
MIN_DECIMAL_ODDS = 1.01


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def decimal_to_american(decimal_odds: float) -> int:
    """Converts decimal odds to American odds.

    Decimal odds of 2.0 or more become a positive number (profit on a 100
    stake), anything shorter becomes a negative number (stake needed to win
    100). Halves round up, so 2.125 gives +113.

    Raises:
        ValueError: if ``decimal_odds`` is 1.0 or less, which has no American
            equivalent. Callers are expected to drop such records first.
    """
    if decimal_odds <= 1.0:
        raise ValueError(f"Decimal odds must be greater than 1.0, got {decimal_odds}")
    if decimal_odds >= 2.0:
        return _round_half_up((decimal_odds - 1) * 100)
    return _round_half_up(-100 / (decimal_odds - 1))


def american_to_decimal(american_odds: Optional[int]) -> Optional[float]:
    """Converts American odds back to decimal odds. Returns None for 0 or None."""
    if not american_odds:
        return None
    if american_odds > 0:
        return round(1 + american_odds / 100, 4)
    return round(1 + 100 / abs(american_odds), 4)


def is_valid_decimal(decimal_odds: Optional[float]) -> bool:
    """True when a decimal price can be converted safely."""
    return (
        decimal_odds is not None
        and math.isfinite(decimal_odds)
        and decimal_odds > 1.0
    )
