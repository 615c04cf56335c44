"""Consecutive win/loss streaks.

Trades are scanned in exit-time order. A breakeven trade ends the
current streak without starting a new one.
"""

from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True, slots=True)
class StreakSummary:
    """Longest runs of wins and losses.

    Attributes:
        max_wins: Longest run of consecutive winning trades
        max_losses: Longest run of consecutive losing trades
        current: Run at the end of the sequence; positive for wins,
                 negative for losses, 0 after a breakeven or when empty
    """
    max_wins: int
    max_losses: int
    current: int


def max_streaks(profits: Sequence[float]) -> StreakSummary:
    """Find the longest consecutive win and loss streaks.

    Args:
        profits: Net profits ordered by exit time

    Example:
        >>> max_streaks([10, 20, -5, 30, -1, -2, -3])
        StreakSummary(max_wins=2, max_losses=3, current=-3)
    """
    best_wins = best_losses = 0
    sign = 0
    length = 0

    for p in profits:
        current_sign = (p > 0) - (p < 0)
        if current_sign != 0 and current_sign == sign:
            length += 1
        else:
            sign = current_sign
            length = 1 if current_sign != 0 else 0

        if sign > 0:
            best_wins = max(best_wins, length)
        elif sign < 0:
            best_losses = max(best_losses, length)

    return StreakSummary(
        max_wins=best_wins,
        max_losses=best_losses,
        current=sign * length,
    )
