"""Performance metrics: Win rate, expectancy and profit factor.

All functions take per-trade net profits and are total: ratios that
could divide by zero fall back to 0 or to an explicit profit-factor
outcome instead of raising.

Classification:
    net_profit > 0  -> win
    net_profit < 0  -> loss
    net_profit == 0 -> breakeven (counted in totals only)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Sequence


# =============================================================================
# Profit Factor
# =============================================================================

class ProfitFactorKind(str, Enum):
    """Outcome of a profit factor calculation."""

    FINITE = "finite"
    UNBOUNDED = "unbounded"  # wins but no losses
    UNDEFINED = "undefined"  # neither wins nor losses


@dataclass(frozen=True, slots=True)
class ProfitFactor:
    """Gross profit over gross loss, as a tri-state value.

    Never holds a floating-point infinity, so it serializes and compares
    cleanly.

    Attributes:
        kind: Finite, unbounded or undefined
        value: The ratio for finite outcomes, 0.0 otherwise
    """

    kind: ProfitFactorKind
    value: float = 0.0

    @classmethod
    def finite(cls, value: float) -> "ProfitFactor":
        return cls(ProfitFactorKind.FINITE, value)

    @classmethod
    def unbounded(cls) -> "ProfitFactor":
        return cls(ProfitFactorKind.UNBOUNDED)

    @classmethod
    def undefined(cls) -> "ProfitFactor":
        return cls(ProfitFactorKind.UNDEFINED)

    @property
    def is_unbounded(self) -> bool:
        return self.kind is ProfitFactorKind.UNBOUNDED

    def as_float(self) -> float | None:
        """Numeric value for tabular output (None when unbounded)."""
        if self.kind is ProfitFactorKind.UNBOUNDED:
            return None
        return self.value

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "value": self.as_float()}

    def __str__(self) -> str:
        if self.kind is ProfitFactorKind.UNBOUNDED:
            return "∞"
        if self.kind is ProfitFactorKind.UNDEFINED:
            return "n/a"
        return f"{self.value:.2f}"


def profit_factor(gross_profit: float, gross_loss: float) -> ProfitFactor:
    """Calculate the profit factor.

    Args:
        gross_profit: Sum of winning net profits (>= 0)
        gross_loss: Sum of losing net profits (<= 0)

    Returns:
        Finite ratio when there are losses, unbounded when there are
        only wins, undefined when there are neither.
    """
    if gross_loss < 0:
        return ProfitFactor.finite(gross_profit / abs(gross_loss))
    if gross_profit > 0:
        return ProfitFactor.unbounded()
    return ProfitFactor.undefined()


# =============================================================================
# Ratios
# =============================================================================

def win_rate(win_count: int, loss_count: int) -> float:
    """Wins over decisive (non-breakeven) trades; 0.0 when there are none."""
    decisive = win_count + loss_count
    if decisive == 0:
        return 0.0
    return win_count / decisive


def expectancy(total_net_profit: float, trade_count: int) -> float:
    """Average net profit per closed trade; 0.0 when there are none."""
    if trade_count == 0:
        return 0.0
    return total_net_profit / trade_count


# =============================================================================
# Profit Summary
# =============================================================================

@dataclass(frozen=True, slots=True)
class ProfitSummary:
    """Aggregates over a sequence of per-trade net profits.

    Attributes:
        trade_count: Number of trades
        win_count: Trades with positive net profit
        loss_count: Trades with negative net profit
        breakeven_count: Trades with exactly zero net profit
        total_net_profit: Sum of all net profits
        gross_profit: Sum of winning net profits
        gross_loss: Sum of losing net profits (<= 0)
        largest_win: Best single trade (0.0 without wins)
        largest_loss: Worst single trade (0.0 without losses)
    """

    trade_count: int
    win_count: int
    loss_count: int
    breakeven_count: int
    total_net_profit: float
    gross_profit: float
    gross_loss: float
    largest_win: float
    largest_loss: float

    @property
    def win_rate(self) -> float:
        return win_rate(self.win_count, self.loss_count)

    @property
    def expectancy(self) -> float:
        return expectancy(self.total_net_profit, self.trade_count)

    @property
    def average_win(self) -> float:
        return self.gross_profit / self.win_count if self.win_count else 0.0

    @property
    def average_loss(self) -> float:
        """Mean losing trade, reported as a negative number."""
        return self.gross_loss / self.loss_count if self.loss_count else 0.0

    @property
    def profit_factor(self) -> ProfitFactor:
        return profit_factor(self.gross_profit, self.gross_loss)


def summarize_profits(profits: Sequence[float]) -> ProfitSummary:
    """Aggregate net profits in a single pass.

    Sums run in the given order; callers needing reproducible floats
    must pass a canonically ordered sequence.

    Example:
        >>> s = summarize_profits([50.0, -80.0, 0.0])
        >>> (s.win_count, s.loss_count, s.breakeven_count)
        (1, 1, 1)
        >>> s.win_rate
        0.5
    """
    wins = losses = breakeven = 0
    total = gross_profit = gross_loss = 0.0
    largest_win = largest_loss = 0.0

    for p in profits:
        total += p
        if p > 0:
            wins += 1
            gross_profit += p
            largest_win = max(largest_win, p)
        elif p < 0:
            losses += 1
            gross_loss += p
            largest_loss = min(largest_loss, p)
        else:
            breakeven += 1

    return ProfitSummary(
        trade_count=wins + losses + breakeven,
        win_count=wins,
        loss_count=losses,
        breakeven_count=breakeven,
        total_net_profit=total,
        gross_profit=gross_profit,
        gross_loss=gross_loss,
        largest_win=largest_win,
        largest_loss=largest_loss,
    )
