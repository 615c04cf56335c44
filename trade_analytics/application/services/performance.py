"""Performance Service: Journal-level analytics use cases.

Orchestrates:
1. Load the ledger via TradeRepository
2. Compute a filtered MetricsReport
3. Compute per-symbol / direction / setup / discipline breakdowns, optionally on a
   process pool (each group is an independent, immutable input)

The heavy lifting lives in the domain engine; this service only wires
repositories, configuration and concurrency around it.
"""

import logging
from concurrent.futures import ProcessPoolExecutor, as_completed

from trade_analytics.domain import (
    ClosedTrade,
    Ledger,
    MetricsReport,
    TradeFilters,
    compute_report,
    group_trades,
)
from trade_analytics.infrastructure import (
    AnalysisConfig,
    DataPaths,
    DEFAULT_CONFIG,
    DEFAULT_PATHS,
    TradeRepository,
)

logger = logging.getLogger(__name__)


def _report_for_group(trades: tuple[ClosedTrade, ...]) -> MetricsReport:
    """Worker entry point (module level so it pickles)."""
    return compute_report(trades)


class PerformanceService:
    """Service for journal performance reports.

    Example:
        >>> service = PerformanceService()
        >>> report = service.report(TradeFilters(symbol="AAPL"))
        >>> by_setup = service.breakdown("setup")
    """

    def __init__(
        self,
        paths: DataPaths = DEFAULT_PATHS,
        config: AnalysisConfig | None = None,
        repository: TradeRepository | None = None,
    ):
        """Initialize the service.

        Args:
            paths: Data paths configuration
            config: Analysis configuration (uses defaults if not provided)
            repository: Trade repository (built from paths if not provided)
        """
        self._paths = paths
        self._config = config or DEFAULT_CONFIG
        self._trade_repo = repository or TradeRepository(paths)

    @property
    def config(self) -> AnalysisConfig:
        return self._config

    def get_ledger(self) -> Ledger:
        """Load the ledger (cached by the repository)."""
        return self._trade_repo.get_all()

    def get_summary(self) -> dict:
        """Ledger-level counts.

        Returns:
            Dict with total, open and closed trade counts and symbols
        """
        ledger = self.get_ledger()
        return {
            "trade_count": len(ledger),
            "open_count": len(ledger.open_trades()),
            "closed_count": len(ledger.closed_trades()),
            "symbols": ledger.symbols(),
        }

    def report(self, filters: TradeFilters | None = None) -> MetricsReport:
        """Compute the report for the whole ledger or a filtered slice.

        Raises:
            RepositoryError: If the ledger cannot be loaded
            InvalidTradeData: If a trade is malformed
        """
        filters = filters or TradeFilters()
        logger.info("Computing report for %s", filters.describe())
        result = compute_report(self.get_ledger(), filters)
        logger.info(
            "Report covers %d closed trades, net %.2f",
            result.trade_count, result.total_net_profit,
        )
        return result

    def breakdown(
        self,
        key: str,
        filters: TradeFilters | None = None,
        parallel: bool = False,
    ) -> dict[str, MetricsReport]:
        """Compute one report per group.

        Args:
            key: "symbol", "direction", "setup" or "discipline"
            filters: Applied before grouping
            parallel: Evaluate groups on a process pool

        Returns:
            Dict mapping group name to report, keys sorted. Parallel and
            serial runs return equal results.
        """
        if key not in self._config.breakdown_keys:
            raise ValueError(
                f"Unknown breakdown key: {key} "
                f"(expected one of {self._config.breakdown_keys})"
            )

        groups = group_trades(self.get_ledger(), key, filters)
        logger.info("Breakdown by %s: %d groups", key, len(groups))

        workers = self._config.parallel_workers
        if not parallel or workers <= 1 or len(groups) <= 1:
            return {name: compute_report(trades) for name, trades in groups.items()}

        results: dict[str, MetricsReport] = {}
        with ProcessPoolExecutor(max_workers=min(workers, len(groups))) as executor:
            futures = {
                executor.submit(_report_for_group, trades): name
                for name, trades in groups.items()
            }
            for future in as_completed(futures):
                name = futures[future]
                results[name] = future.result()
                logger.debug("Finished group %s", name)

        return {name: results[name] for name in groups}
