"""Analytics Engine: Pure computation from trades to a MetricsReport.

Pipeline:
1. Validate every record at the boundary (InvalidTradeData on failure)
2. Drop open trades and apply filters
3. Sort by (exit_time, id) so results never depend on caller order
4. Aggregate in that canonical order

The engine holds no state, performs no I/O and never mutates its input,
so concurrent calls need no coordination.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import timedelta
from typing import Any, Iterable, Mapping, Sequence, Union

from trade_analytics.domain.errors import DuplicateTradeId, InvalidTradeData
from trade_analytics.domain.filters import NO_FILTERS, TradeFilters
from trade_analytics.domain.ledger import Ledger
from trade_analytics.domain.models import (
    TRADE_TYPES,
    ClosedTrade,
    Trade,
    trade_from_record,
)
from trade_analytics.domain.metrics.drawdown import equity_curve, max_drawdown
from trade_analytics.domain.metrics.performance import summarize_profits
from trade_analytics.domain.metrics.risk import profit_std, r_multiple_stats, sharpe_ratio
from trade_analytics.domain.metrics.streaks import max_streaks
from trade_analytics.domain.report import EquityPoint, MetricsReport

TradeInput = Union[Ledger, Iterable[Union[Trade, Mapping[str, Any]]]]

BREAKDOWN_KEYS = ("symbol", "direction", "setup", "discipline")
NO_SETUP = "(none)"
NO_RATING = "(unrated)"


# =============================================================================
# Boundary
# =============================================================================

def validate_trades(trades: TradeInput) -> list[Trade]:
    """Validate and coerce every record.

    Args:
        trades: A Ledger, or trades and/or raw record mappings

    Returns:
        Validated trades in input order

    Raises:
        InvalidTradeData: If any record breaks a trade invariant
        DuplicateTradeId: If two records share an id
    """
    items = trades.all_trades() if isinstance(trades, Ledger) else trades

    validated: list[Trade] = []
    seen: set[str] = set()
    for item in items:
        if isinstance(item, TRADE_TYPES):
            item.validate()
            trade = item
        elif isinstance(item, Mapping):
            trade = trade_from_record(item)
        else:
            raise InvalidTradeData(f"unsupported trade record type: {type(item).__name__}")

        if trade.id in seen:
            raise DuplicateTradeId(trade.id)
        seen.add(trade.id)
        validated.append(trade)

    return validated


def _canonical_order(trade: ClosedTrade) -> tuple:
    return (trade.exit_time, trade.id)


def qualifying_trades(
    trades: TradeInput,
    filters: TradeFilters | None = None,
) -> list[ClosedTrade]:
    """Closed trades passing the filters, sorted by (exit_time, id)."""
    filters = filters or NO_FILTERS
    closed = [
        t for t in validate_trades(trades)
        if isinstance(t, ClosedTrade) and filters.matches(t)
    ]
    return sorted(closed, key=_canonical_order)


# =============================================================================
# Report
# =============================================================================

def _build_report(ordered: Sequence[ClosedTrade]) -> MetricsReport:
    """Aggregate trades that are already validated and canonically ordered."""
    profits = [t.net_profit for t in ordered]

    summary = summarize_profits(profits)
    curve = equity_curve(profits)
    streaks = max_streaks(profits)
    r_stats = r_multiple_stats(ordered)

    total_fees = 0.0
    total_holding = timedelta(0)
    for t in ordered:
        total_fees += t.fees
        total_holding += t.holding_duration
    avg_holding = total_holding / len(ordered) if ordered else timedelta(0)

    return MetricsReport(
        trade_count=summary.trade_count,
        win_count=summary.win_count,
        loss_count=summary.loss_count,
        breakeven_count=summary.breakeven_count,
        win_rate=summary.win_rate,
        expectancy=summary.expectancy,
        profit_factor=summary.profit_factor,
        total_net_profit=summary.total_net_profit,
        gross_profit=summary.gross_profit,
        gross_loss=summary.gross_loss,
        average_win=summary.average_win,
        average_loss=summary.average_loss,
        largest_win=summary.largest_win,
        largest_loss=summary.largest_loss,
        total_fees=total_fees,
        max_drawdown=max_drawdown(curve),
        max_consecutive_wins=streaks.max_wins,
        max_consecutive_losses=streaks.max_losses,
        profit_std=profit_std(profits),
        sharpe_ratio=sharpe_ratio(profits),
        average_r=r_stats.average_r,
        total_r=r_stats.total_r,
        r_trade_count=r_stats.trade_count,
        average_holding_duration=avg_holding,
        first_exit=ordered[0].exit_time if ordered else None,
        last_exit=ordered[-1].exit_time if ordered else None,
        equity_curve=tuple(
            EquityPoint(time=t.exit_time, trade_id=t.id, net_profit=p, equity=e)
            for t, p, e in zip(ordered, profits, curve)
        ),
    )


def compute_report(
    trades: TradeInput,
    filters: TradeFilters | None = None,
) -> MetricsReport:
    """Compute performance and risk metrics for closed trades.

    Open trades are skipped silently; they carry no realized profit.

    Args:
        trades: A Ledger, or trades and/or raw record mappings
        filters: Optional symbol / date range / direction restrictions

    Returns:
        MetricsReport (empty-valued when no trade qualifies)

    Raises:
        InvalidTradeData: If any record breaks a trade invariant; the
            whole call fails rather than skipping the record
        DuplicateTradeId: If two records share an id

    Example:
        >>> report = compute_report(ledger, TradeFilters(symbol="AAPL"))
        >>> report.win_rate, report.max_drawdown
    """
    return _build_report(qualifying_trades(trades, filters))


# =============================================================================
# Breakdown
# =============================================================================

def group_key(trade: ClosedTrade, key: str) -> str:
    """Value of a breakdown dimension for one trade."""
    if key == "symbol":
        return trade.symbol.upper()
    if key == "direction":
        return trade.direction.value
    if key == "setup":
        return trade.setup or NO_SETUP
    if key == "discipline":
        return str(trade.discipline_rating) if trade.discipline_rating is not None else NO_RATING
    raise ValueError(f"Unknown breakdown key: {key} (expected one of {BREAKDOWN_KEYS})")


def group_trades(
    trades: TradeInput,
    key: str,
    filters: TradeFilters | None = None,
) -> dict[str, tuple[ClosedTrade, ...]]:
    """Split qualifying trades by a breakdown dimension.

    Returns:
        Dict mapping group name to canonically ordered trades, keys sorted
    """
    if key not in BREAKDOWN_KEYS:
        raise ValueError(f"Unknown breakdown key: {key} (expected one of {BREAKDOWN_KEYS})")

    groups: dict[str, list[ClosedTrade]] = defaultdict(list)
    for t in qualifying_trades(trades, filters):
        groups[group_key(t, key)].append(t)

    return {name: tuple(groups[name]) for name in sorted(groups)}


def compute_breakdown(
    trades: TradeInput,
    key: str,
    filters: TradeFilters | None = None,
) -> dict[str, MetricsReport]:
    """Compute one report per symbol, direction, setup or discipline rating.

    Args:
        trades: A Ledger, or trades and/or raw record mappings
        key: "symbol", "direction", "setup" or "discipline"
        filters: Applied before grouping

    Returns:
        Dict mapping group name to its report, keys sorted
    """
    return {
        name: _build_report(group)
        for name, group in group_trades(trades, key, filters).items()
    }
