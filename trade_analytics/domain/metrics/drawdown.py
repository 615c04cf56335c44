"""Equity curve and drawdown.

Formula:
    equity[i]   = Σ net_profit[0..i]
    peak[i]     = max(equity[0..i])
    drawdown[i] = peak[i] - equity[i]
    max_drawdown = max(drawdown)

The running peak starts at the first point of the curve, so a curve
that never falls has zero drawdown.
"""

from typing import Sequence


def equity_curve(profits: Sequence[float]) -> list[float]:
    """Running cumulative sum of net profits.

    Example:
        >>> equity_curve([50.0, -80.0])
        [50.0, -30.0]
    """
    curve = []
    equity = 0.0
    for p in profits:
        equity += p
        curve.append(equity)
    return curve


def drawdown_series(curve: Sequence[float]) -> list[float]:
    """Distance below the running peak at each point of the curve."""
    series = []
    peak = None
    for equity in curve:
        if peak is None or equity > peak:
            peak = equity
        series.append(peak - equity)
    return series


def max_drawdown(curve: Sequence[float]) -> float:
    """Largest peak-to-trough decline; 0.0 for an empty or rising curve.

    Example:
        >>> max_drawdown([50.0, -30.0])
        80.0
    """
    return max(drawdown_series(curve), default=0.0)
