"""Risk metrics: R-multiples, dispersion and position sizing.

R-multiple:
    R = net_profit / (|entry_price - planned_stop_loss| * quantity)

    Expresses each trade's outcome in units of the risk taken when it
    was opened. Trades without a planned stop have no R value.

Sharpe ratio (per trade):
    sharpe = mean(net_profit) / std(net_profit, ddof=1)

    A risk-adjusted return over the trade sequence. No annualization is
    applied because trades are not evenly spaced in time.
"""

import math
from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np

from trade_analytics.domain.models import ClosedTrade


# =============================================================================
# R-Multiples
# =============================================================================

@dataclass(frozen=True, slots=True)
class RMultipleStats:
    """R-multiple aggregates over trades that have a planned stop.

    Attributes:
        trade_count: Trades contributing an R value
        total_r: Sum of R values
        average_r: Mean R value (0.0 when no trade has a stop)
    """
    trade_count: int
    total_r: float
    average_r: float


def r_multiple(trade: ClosedTrade) -> float | None:
    """Net profit of a closed trade in units of its initial risk."""
    return trade.r_multiple


def r_multiple_stats(trades: Iterable[ClosedTrade]) -> RMultipleStats:
    """Aggregate R-multiples, skipping trades without a stop.

    Args:
        trades: Closed trades in canonical (exit-time) order

    Returns:
        RMultipleStats
    """
    values = [r for r in (t.r_multiple for t in trades) if r is not None]
    total = 0.0
    for r in values:
        total += r
    average = total / len(values) if values else 0.0
    return RMultipleStats(trade_count=len(values), total_r=total, average_r=average)


# =============================================================================
# Dispersion
# =============================================================================

def profit_std(profits: Sequence[float]) -> float:
    """Sample standard deviation of net profits (0.0 for fewer than 2)."""
    if len(profits) < 2:
        return 0.0
    return float(np.std(np.asarray(profits, dtype=float), ddof=1))


def sharpe_ratio(profits: Sequence[float]) -> float | None:
    """Per-trade Sharpe ratio.

    Returns:
        mean / sample std, or None with fewer than two trades or
        zero dispersion
    """
    if len(profits) < 2:
        return None
    values = np.asarray(profits, dtype=float)
    if values.max() == values.min():
        return None
    mean = float(np.mean(values))
    std = float(np.std(values, ddof=1))
    # Dispersion at round-off scale counts as zero
    if not math.isfinite(std) or np.isclose(std, 0.0, rtol=0.0, atol=1e-12 * max(1.0, abs(mean))):
        return None
    return mean / std


# =============================================================================
# Position Sizing
# =============================================================================

def position_size(
    entry_price: float,
    stop_loss: float,
    risk_percent: float,
    equity: float,
) -> int:
    """Units to buy so that hitting the stop loses ``risk_percent`` of equity.

    Formula:
        floor(equity * risk_percent / 100 / |entry_price - stop_loss|)

    Args:
        entry_price: Planned entry price
        stop_loss: Planned stop price
        risk_percent: Percent of equity to risk (e.g., 1.0 for 1%)
        equity: Current account equity

    Returns:
        Whole number of units (0 when even one unit exceeds the budget)

    Raises:
        ValueError: If the stop equals the entry or inputs are not positive

    Example:
        >>> position_size(entry_price=50.0, stop_loss=48.0, risk_percent=1.0, equity=10_000)
        50
    """
    for name, value in (
        ("entry_price", entry_price),
        ("stop_loss", stop_loss),
        ("risk_percent", risk_percent),
        ("equity", equity),
    ):
        if value <= 0:
            raise ValueError(f"{name} must be positive, got: {value}")

    risk_per_unit = abs(entry_price - stop_loss)
    if risk_per_unit == 0:
        raise ValueError("stop_loss must differ from entry_price")

    risk_amount = equity * (risk_percent / 100)
    return math.floor(risk_amount / risk_per_unit)
