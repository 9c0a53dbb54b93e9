from typing import List, Sequence

from odds_aggregator.models.odds import OddsData


def is_better_price(candidate: int, current: int) -> bool:
    """Whether ``candidate`` beats ``current`` in American odds.

    Positive always beats negative. Within the same sign the numerically
    larger value wins, which for negatives means the one closer to zero.
    Equal prices never beat each other, so the earlier one keeps the flag.
    """
    if candidate > 0 and current < 0:
        return True
    if candidate < 0 and current > 0:
        return False
    return candidate > current


def mark_best_odds(odds: Sequence[OddsData]) -> List[OddsData]:
    """Returns a copy of ``odds`` with exactly one price flagged as best.

    An empty input is returned unchanged.
    """
    if not odds:
        return list(odds)

    best_index = 0
    for index, odd in enumerate(odds):
        if is_better_price(odd.price, odds[best_index].price):
            best_index = index

    return [
        odd
        if odd.is_best == (index == best_index)
        else odd.model_copy(update={"is_best": index == best_index})
        for index, odd in enumerate(odds)
    ]
