"""Domain Layer: Core business logic and entities.

This layer contains:
- errors.py: InvalidTradeData, DuplicateTradeId
- models.py: Trade shapes (OpenTrade, ClosedTrade) and record coercion
- ledger.py: Append-only trade ledger
- filters.py: Symbol / date range / direction filters
- metrics/: Performance, drawdown, streak and risk calculations
- report.py: MetricsReport output model
- engine.py: compute_report and per-group breakdowns
"""

from trade_analytics.domain.errors import (
    TradeAnalyticsError,
    InvalidTradeData,
    DuplicateTradeId,
)
from trade_analytics.domain.models import (
    Direction,
    TradeStatus,
    PlanAdherence,
    OpenTrade,
    ClosedTrade,
    Trade,
    trade_from_record,
    trade_to_record,
)
from trade_analytics.domain.ledger import Ledger
from trade_analytics.domain.filters import DateRange, TradeFilters
from trade_analytics.domain.metrics import (
    ProfitFactor,
    ProfitFactorKind,
    position_size,
)
from trade_analytics.domain.report import EquityPoint, MetricsReport
from trade_analytics.domain.engine import (
    BREAKDOWN_KEYS,
    compute_report,
    compute_breakdown,
    group_trades,
    qualifying_trades,
)

__all__ = [
    # Errors
    "TradeAnalyticsError",
    "InvalidTradeData",
    "DuplicateTradeId",
    # Models
    "Direction",
    "TradeStatus",
    "PlanAdherence",
    "OpenTrade",
    "ClosedTrade",
    "Trade",
    "trade_from_record",
    "trade_to_record",
    # Ledger
    "Ledger",
    # Filters
    "DateRange",
    "TradeFilters",
    # Metrics
    "ProfitFactor",
    "ProfitFactorKind",
    "position_size",
    # Report
    "EquityPoint",
    "MetricsReport",
    # Engine
    "BREAKDOWN_KEYS",
    "compute_report",
    "compute_breakdown",
    "group_trades",
    "qualifying_trades",
]
