"""Trade Repository: Access to the journal's trade ledger.

Provides read/write access to data/trades.{json,csv,parquet}.

JSON files are either a plain list of trade records or the journal's
export document ``{"trades": [...], "exportDate": ..., "version": ...}``.
CSV and Parquet files hold one trade per row.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import polars as pl

from trade_analytics.domain import Ledger, trade_from_record, trade_to_record
from trade_analytics.infrastructure.repositories.base import Repository, RepositoryError
from trade_analytics.infrastructure.config import DataPaths, DEFAULT_PATHS

logger = logging.getLogger(__name__)

EXPORT_VERSION = "1.0.0"


class TradeRepository(Repository[Ledger]):
    """Repository for recorded trades.

    Loads raw records, coerces them into trades and builds a Ledger.
    Malformed records raise InvalidTradeData and repeated ids raise
    DuplicateTradeId; neither is swallowed.

    Example:
        >>> repo = TradeRepository()
        >>> ledger = repo.get_all()
        >>> symbols = repo.list_symbols()
    """

    def __init__(self, paths: DataPaths = DEFAULT_PATHS):
        self._paths = paths
        self._records_cache: list[dict[str, Any]] | None = None
        self._cache: Ledger | None = None

    @property
    def path(self) -> Path:
        return self._paths.trades_file

    def get_records(self) -> list[dict[str, Any]]:
        """Load raw trade records without validation.

        Returns:
            List of record mappings in file order

        Raises:
            RepositoryError: If the file is missing or unreadable
        """
        if self._records_cache is not None:
            return self._records_cache

        path = self.require_file("Trade ledger")

        suffix = path.suffix.lower()
        try:
            if suffix == ".json":
                records = self._read_json(path)
            elif suffix == ".csv":
                records = pl.read_csv(path, infer_schema_length=0).to_dicts()
            elif suffix == ".parquet":
                records = pl.read_parquet(path).to_dicts()
            else:
                raise RepositoryError(f"Unsupported ledger format: {suffix}", str(path))
        except RepositoryError:
            raise
        except Exception as e:
            raise RepositoryError(f"Failed to read trades: {e}", str(path))

        logger.info("Loaded %d trade records from %s", len(records), path)
        self._records_cache = records
        return self._records_cache

    def get_all(self) -> Ledger:
        """Load the full ledger.

        Returns:
            Ledger in file order

        Raises:
            RepositoryError: If the file is missing or unreadable
            InvalidTradeData: If a record is malformed
            DuplicateTradeId: If two records share an id
        """
        if self._cache is not None:
            return self._cache

        ledger = Ledger(trade_from_record(r) for r in self.get_records())
        logger.debug("Built %r", ledger)
        self._cache = ledger
        return self._cache

    def list_symbols(self) -> list[str]:
        """Get list of all symbols in the ledger."""
        return self.get_all().symbols()

    def save(self, ledger: Ledger) -> Path:
        """Write the ledger as a journal export document.

        Args:
            ledger: Trades to persist

        Returns:
            Path written
        """
        path = self.path
        if path.suffix.lower() != ".json":
            raise RepositoryError("Only JSON ledgers can be written", str(path))

        document = {
            "trades": [trade_to_record(t) for t in ledger],
            "exportDate": datetime.now(timezone.utc).isoformat(),
            "version": EXPORT_VERSION,
        }
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                json.dump(document, f, ensure_ascii=False, indent=2)
        except OSError as e:
            raise RepositoryError(f"Failed to write trades: {e}", str(path))

        logger.info("Saved %d trades to %s", len(ledger), path)
        self.clear_cache()
        return path

    def _read_json(self, path: Path) -> list[dict[str, Any]]:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)

        if isinstance(data, dict):
            if "trades" not in data:
                raise RepositoryError("JSON document has no 'trades' list", str(path))
            data = data["trades"]
        if not isinstance(data, list):
            raise RepositoryError("Trades must be a JSON list", str(path))
        return data

    def clear_cache(self) -> None:
        """Clear cached data."""
        self._records_cache = None
        self._cache = None
