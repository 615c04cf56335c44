"""Infrastructure layer for Trade Analytics.

Contains:
- config: Data paths and analysis configuration
- logging_config: Handler setup for command-line runs
- repositories: Data access abstractions
"""

from trade_analytics.infrastructure.config import (
    DataPaths,
    AnalysisConfig,
    DEFAULT_PATHS,
    DEFAULT_CONFIG,
)
from trade_analytics.infrastructure.logging_config import configure_logging
from trade_analytics.infrastructure.repositories import (
    Repository,
    RepositoryError,
    TradeRepository,
)

__all__ = [
    # Config
    "DataPaths",
    "AnalysisConfig",
    "DEFAULT_PATHS",
    "DEFAULT_CONFIG",
    # Logging
    "configure_logging",
    # Repositories
    "Repository",
    "RepositoryError",
    "TradeRepository",
]
