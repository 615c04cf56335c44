"""Configuration: Centralized paths and settings.

This module provides:
- DataPaths: File paths for the trade ledger and report output
- AnalysisConfig: Parameters for analysis and export

Directory Structure:
    data/
    └── trades.json          # Journal export (or trades.csv / trades.parquet)
    reports/                 # Exported reports
        ├── report.csv
        └── ...
"""

from dataclasses import dataclass
from pathlib import Path

TRADE_FILE_FORMATS = ("json", "csv", "parquet")


@dataclass(frozen=True)
class DataPaths:
    """File paths for data sources.

    Attributes:
        root: Project root directory
        trades_override: Explicit ledger file (skips discovery when set)
    """

    root: Path = Path(".")
    trades_override: Path | None = None

    # --- Directories ---

    @property
    def data_dir(self) -> Path:
        """Main data directory."""
        return self.root / "data"

    @property
    def reports_dir(self) -> Path:
        """Exported reports."""
        return self.root / "reports"

    # --- Files ---

    @property
    def trades_file(self) -> Path:
        """Trade ledger file.

        Uses the override when given, otherwise the first existing
        data/trades.{json,csv,parquet}, falling back to trades.json.
        """
        if self.trades_override is not None:
            return self.trades_override
        for fmt in TRADE_FILE_FORMATS:
            candidate = self.data_dir / f"trades.{fmt}"
            if candidate.exists():
                return candidate
        return self.data_dir / "trades.json"

    # --- Helper Methods ---

    def report_path(self, base_name: str, fmt: str) -> Path:
        """Path for an exported report file."""
        return self.reports_dir / f"{base_name}.{fmt}"

    def validate(self) -> list[str]:
        """Check which required paths are missing.

        Returns:
            List of missing paths (empty if all exist)
        """
        missing = []

        if self.trades_override is None and not self.data_dir.exists():
            missing.append(str(self.data_dir))
        if not self.trades_file.exists():
            missing.append(str(self.trades_file))

        return missing

    def ensure_dirs(self) -> None:
        """Create all required directories."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.reports_dir.mkdir(parents=True, exist_ok=True)


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for analysis and export.

    Attributes:
        parallel_workers: Worker processes for per-group breakdowns
        output_formats: Default export formats ("csv", "parquet", "xlsx")
        log_level: Logging level name for the CLI
        breakdown_keys: Dimensions offered for breakdowns
    """

    parallel_workers: int = 4
    output_formats: tuple[str, ...] = ("csv", "parquet")
    log_level: str = "WARNING"
    breakdown_keys: tuple[str, ...] = ("symbol", "direction", "setup", "discipline")


# Default instances
DEFAULT_PATHS = DataPaths()
DEFAULT_CONFIG = AnalysisConfig()
