"""Report Model: Output of the analytics engine.

A MetricsReport is built fresh per call and never mutated. It has no
identity beyond its inputs: the same trades and filters always produce
an equal report.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from trade_analytics.domain.metrics.performance import ProfitFactor


@dataclass(frozen=True, slots=True)
class EquityPoint:
    """One step of the equity curve.

    Attributes:
        time: Exit time of the trade that produced this step
        trade_id: Id of that trade
        net_profit: Its net profit
        equity: Cumulative net profit up to and including it
    """
    time: datetime
    trade_id: str
    net_profit: float
    equity: float

    def to_dict(self) -> dict:
        return {
            "time": self.time.isoformat(),
            "trade_id": self.trade_id,
            "net_profit": self.net_profit,
            "equity": self.equity,
        }


@dataclass(frozen=True, slots=True)
class MetricsReport:
    """Performance and risk statistics for a set of closed trades."""

    # Counts
    trade_count: int
    win_count: int
    loss_count: int
    breakeven_count: int

    # Ratios
    win_rate: float
    expectancy: float
    profit_factor: ProfitFactor

    # Money
    total_net_profit: float
    gross_profit: float
    gross_loss: float
    average_win: float
    average_loss: float
    largest_win: float
    largest_loss: float
    total_fees: float

    # Risk
    max_drawdown: float
    max_consecutive_wins: int
    max_consecutive_losses: int
    profit_std: float
    sharpe_ratio: float | None
    average_r: float
    total_r: float
    r_trade_count: int

    # Time
    average_holding_duration: timedelta
    first_exit: datetime | None
    last_exit: datetime | None

    # Series
    equity_curve: tuple[EquityPoint, ...]

    @property
    def is_empty(self) -> bool:
        return self.trade_count == 0

    @property
    def equity_values(self) -> list[float]:
        return [p.equity for p in self.equity_curve]

    @property
    def peak_equity(self) -> float:
        """Highest point of the equity curve (0.0 when empty)."""
        return max(self.equity_values, default=0.0)

    def summary_row(self) -> dict:
        """Flat scalar fields for tabular export (one row per report)."""
        return {
            "trade_count": self.trade_count,
            "win_count": self.win_count,
            "loss_count": self.loss_count,
            "breakeven_count": self.breakeven_count,
            "win_rate": self.win_rate,
            "expectancy": self.expectancy,
            "profit_factor": self.profit_factor.as_float(),
            "profit_factor_kind": self.profit_factor.kind.value,
            "total_net_profit": self.total_net_profit,
            "gross_profit": self.gross_profit,
            "gross_loss": self.gross_loss,
            "average_win": self.average_win,
            "average_loss": self.average_loss,
            "largest_win": self.largest_win,
            "largest_loss": self.largest_loss,
            "total_fees": self.total_fees,
            "max_drawdown": self.max_drawdown,
            "max_consecutive_wins": self.max_consecutive_wins,
            "max_consecutive_losses": self.max_consecutive_losses,
            "profit_std": self.profit_std,
            "sharpe_ratio": self.sharpe_ratio,
            "average_r": self.average_r,
            "total_r": self.total_r,
            "r_trade_count": self.r_trade_count,
            "average_holding_hours": self.average_holding_duration.total_seconds() / 3600,
            "first_exit": self.first_exit.isoformat() if self.first_exit else None,
            "last_exit": self.last_exit.isoformat() if self.last_exit else None,
        }

    def to_dict(self) -> dict:
        """JSON-friendly representation including the equity curve."""
        d = self.summary_row()
        d["profit_factor"] = self.profit_factor.to_dict()
        del d["profit_factor_kind"]
        d["average_holding_seconds"] = self.average_holding_duration.total_seconds()
        d["equity_curve"] = [p.to_dict() for p in self.equity_curve]
        return d
