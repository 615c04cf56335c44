"""Trade Analytics: Performance and risk analytics for a trading journal.

Turns a ledger of recorded trades into win rate, profit factor,
drawdown, streaks, R-multiples and an equity curve, for the whole
journal or a filtered slice of it.

Architecture:
- domain/: Core business logic (trades, ledger, metrics, engine)
- infrastructure/: I/O, configuration and logging
- application/: Use cases and services
- interfaces/: CLI
"""

__version__ = "0.1.0"

from trade_analytics.domain import (
    Direction,
    OpenTrade,
    ClosedTrade,
    Ledger,
    TradeFilters,
    DateRange,
    MetricsReport,
    compute_report,
    InvalidTradeData,
    DuplicateTradeId,
)
from trade_analytics.infrastructure import (
    DataPaths,
    AnalysisConfig,
    DEFAULT_PATHS,
    RepositoryError,
)

__all__ = [
    # Version
    "__version__",
    # Domain
    "Direction",
    "OpenTrade",
    "ClosedTrade",
    "Ledger",
    "TradeFilters",
    "DateRange",
    "MetricsReport",
    "compute_report",
    "InvalidTradeData",
    "DuplicateTradeId",
    # Infrastructure
    "DataPaths",
    "AnalysisConfig",
    "DEFAULT_PATHS",
    "RepositoryError",
]
