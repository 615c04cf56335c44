"""Data repositories for Trade Analytics.

Provides abstracted data access through the Repository pattern:
- TradeRepository: The journal's trade ledger (JSON, CSV or Parquet)
"""

from trade_analytics.infrastructure.repositories.base import Repository, RepositoryError
from trade_analytics.infrastructure.repositories.trade_repo import TradeRepository

__all__ = [
    "Repository",
    "RepositoryError",
    "TradeRepository",
]
