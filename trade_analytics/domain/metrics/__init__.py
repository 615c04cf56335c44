"""Trading metrics for journal performance analysis.

This package provides the calculations behind a MetricsReport:

- Performance: Win rate, expectancy and profit factor
- Drawdown: Equity curve and peak-to-trough decline
- Streaks: Longest consecutive wins and losses
- Risk: R-multiples, dispersion, Sharpe ratio and position sizing

Usage:
    from trade_analytics.domain.metrics import (
        summarize_profits,
        max_drawdown,
        max_streaks,
    )
"""

# Performance
from trade_analytics.domain.metrics.performance import (
    ProfitFactor,
    ProfitFactorKind,
    ProfitSummary,
    profit_factor,
    win_rate,
    expectancy,
    summarize_profits,
)

# Drawdown
from trade_analytics.domain.metrics.drawdown import (
    equity_curve,
    drawdown_series,
    max_drawdown,
)

# Streaks
from trade_analytics.domain.metrics.streaks import (
    StreakSummary,
    max_streaks,
)

# Risk
from trade_analytics.domain.metrics.risk import (
    RMultipleStats,
    r_multiple,
    r_multiple_stats,
    profit_std,
    sharpe_ratio,
    position_size,
)

__all__ = [
    # Performance
    "ProfitFactor",
    "ProfitFactorKind",
    "ProfitSummary",
    "profit_factor",
    "win_rate",
    "expectancy",
    "summarize_profits",
    # Drawdown
    "equity_curve",
    "drawdown_series",
    "max_drawdown",
    # Streaks
    "StreakSummary",
    "max_streaks",
    # Risk
    "RMultipleStats",
    "r_multiple",
    "r_multiple_stats",
    "profit_std",
    "sharpe_ratio",
    "position_size",
]
