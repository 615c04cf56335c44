"""Report Export: Tabular output of MetricsReports.

Converts reports into polars DataFrames and writes them as CSV,
Parquet or formatted Excel workbooks:
- Summary: one row of scalar metrics
- Equity curve: one row per closed trade
- Breakdown: one ranked row per symbol / direction / setup / discipline rating
"""

import logging
from datetime import datetime
from pathlib import Path

import polars as pl

from trade_analytics.domain import MetricsReport
from trade_analytics.infrastructure import AnalysisConfig, DEFAULT_CONFIG

logger = logging.getLogger(__name__)


# =============================================================================
# Table Schemas
# =============================================================================

SUMMARY_SCHEMA = {
    "trade_count": pl.Int64,
    "win_count": pl.Int64,
    "loss_count": pl.Int64,
    "breakeven_count": pl.Int64,
    "win_rate": pl.Float64,
    "expectancy": pl.Float64,
    "profit_factor": pl.Float64,
    "profit_factor_kind": pl.Utf8,
    "total_net_profit": pl.Float64,
    "gross_profit": pl.Float64,
    "gross_loss": pl.Float64,
    "average_win": pl.Float64,
    "average_loss": pl.Float64,
    "largest_win": pl.Float64,
    "largest_loss": pl.Float64,
    "total_fees": pl.Float64,
    "max_drawdown": pl.Float64,
    "max_consecutive_wins": pl.Int64,
    "max_consecutive_losses": pl.Int64,
    "profit_std": pl.Float64,
    "sharpe_ratio": pl.Float64,
    "average_r": pl.Float64,
    "total_r": pl.Float64,
    "r_trade_count": pl.Int64,
    "average_holding_hours": pl.Float64,
    "first_exit": pl.Utf8,
    "last_exit": pl.Utf8,
}

EQUITY_SCHEMA = {
    "time": pl.Datetime("us", "UTC"),
    "trade_id": pl.Utf8,
    "net_profit": pl.Float64,
    "equity": pl.Float64,
}

MONEY_COLUMNS = (
    "expectancy", "total_net_profit", "gross_profit", "gross_loss",
    "average_win", "average_loss", "largest_win", "largest_loss",
    "total_fees", "max_drawdown", "profit_std", "net_profit", "equity",
)
RATIO_COLUMNS = ("win_rate",)


def summary_frame(report: MetricsReport) -> pl.DataFrame:
    """Single-row DataFrame of scalar metrics."""
    return pl.DataFrame([report.summary_row()], schema=SUMMARY_SCHEMA)


def equity_frame(report: MetricsReport) -> pl.DataFrame:
    """Equity curve as a DataFrame (time, trade_id, net_profit, equity)."""
    rows = [
        {
            "time": p.time,
            "trade_id": p.trade_id,
            "net_profit": p.net_profit,
            "equity": p.equity,
        }
        for p in report.equity_curve
    ]
    return pl.DataFrame(rows, schema=EQUITY_SCHEMA)


def breakdown_frame(breakdown: dict[str, MetricsReport], key: str) -> pl.DataFrame:
    """One row per group, ranked by total net profit.

    Args:
        breakdown: Group name to report
        key: Name of the grouping column ("symbol", "direction", "setup", "discipline")

    Returns:
        DataFrame with columns: rank, <key>, then the summary columns
    """
    schema = {key: pl.Utf8, **SUMMARY_SCHEMA}
    rows = [{key: name, **report.summary_row()} for name, report in breakdown.items()]
    df = pl.DataFrame(rows, schema=schema)

    df = df.sort(["total_net_profit", key], descending=[True, False])
    return df.with_row_index("rank", offset=1)


# =============================================================================
# Exporter
# =============================================================================

class ReportExporter:
    """Writes reports to disk.

    Example:
        >>> exporter = ReportExporter(output_dir=Path("reports"))
        >>> exporter.save_report(report, "aapl_2024", formats=("csv", "xlsx"))
    """

    FORMATS = ("csv", "parquet", "xlsx")

    def __init__(
        self,
        output_dir: Path = Path("."),
        config: AnalysisConfig | None = None,
    ):
        self._output_dir = output_dir
        self._config = config or DEFAULT_CONFIG

    def save_report(
        self,
        report: MetricsReport,
        base_name: str = "report",
        formats: tuple[str, ...] | None = None,
    ) -> list[Path]:
        """Save a report's summary and equity curve.

        CSV and Parquet produce ``<base>.<fmt>`` (summary) and
        ``<base>_equity.<fmt>`` (curve); Excel puts both in one workbook.

        Returns:
            List of saved file paths
        """
        formats = self._check_formats(formats)
        summary = summary_frame(report)
        equity = equity_frame(report)
        saved = []

        for fmt in formats:
            if fmt == "xlsx":
                path = self._path(base_name, fmt)
                self._save_excel(path, {"Equity Curve": equity}, summary=report.summary_row())
                saved.append(path)
            else:
                saved.append(self._write(summary, self._path(base_name, fmt), fmt))
                saved.append(self._write(equity, self._path(f"{base_name}_equity", fmt), fmt))

        logger.info("Saved report %s: %s", base_name, ", ".join(str(p) for p in saved))
        return saved

    def save_breakdown(
        self,
        df: pl.DataFrame,
        base_name: str = "breakdown",
        formats: tuple[str, ...] | None = None,
    ) -> list[Path]:
        """Save a breakdown table (see breakdown_frame).

        Returns:
            List of saved file paths
        """
        formats = self._check_formats(formats)
        saved = []

        for fmt in formats:
            path = self._path(base_name, fmt)
            if fmt == "xlsx":
                self._save_excel(path, {"Breakdown": df})
                saved.append(path)
            else:
                saved.append(self._write(df, path, fmt))

        logger.info("Saved breakdown %s: %s", base_name, ", ".join(str(p) for p in saved))
        return saved

    def _check_formats(self, formats: tuple[str, ...] | None) -> tuple[str, ...]:
        formats = formats or self._config.output_formats
        for fmt in formats:
            if fmt not in self.FORMATS:
                raise ValueError(f"Unknown format: {fmt}")
        return formats

    def _path(self, base_name: str, fmt: str) -> Path:
        self._output_dir.mkdir(parents=True, exist_ok=True)
        return self._output_dir / f"{base_name}.{fmt}"

    @staticmethod
    def _write(df: pl.DataFrame, path: Path, fmt: str) -> Path:
        if fmt == "csv":
            df.write_csv(path)
        else:
            df.write_parquet(path)
        return path

    def _save_excel(
        self,
        path: Path,
        sheets: dict[str, pl.DataFrame],
        summary: dict | None = None,
    ) -> None:
        """Save DataFrames to one workbook, one sheet each.

        When given, the summary goes first as a (metric, value) sheet.
        """
        import xlsxwriter

        workbook = xlsxwriter.Workbook(str(path))
        formats = self._formats(workbook)
        if summary is not None:
            worksheet = workbook.add_worksheet("Summary")
            self._write_summary_sheet(worksheet, summary, formats)
        for name, df in sheets.items():
            worksheet = workbook.add_worksheet(name)
            self._write_sheet(worksheet, df, formats)
        workbook.close()

    @staticmethod
    def _formats(workbook) -> dict:
        """Cell formats, created once per workbook."""
        return {
            "header": workbook.add_format({
                "bold": True,
                "bg_color": "#4472C4",
                "font_color": "white",
                "border": 1,
            }),
            "money": workbook.add_format({"num_format": "#,##0.00"}),
            "pct": workbook.add_format({"num_format": "0.0%"}),
        }

    @staticmethod
    def _write_cell(worksheet, row: int, col: int, name: str, value, formats: dict) -> None:
        """Write one value, formatted by column name."""
        if value is None:
            worksheet.write(row, col, "")
        elif isinstance(value, datetime):
            # Excel has no timezone support
            worksheet.write(row, col, value.isoformat())
        elif name in MONEY_COLUMNS:
            worksheet.write(row, col, value, formats["money"])
        elif name in RATIO_COLUMNS:
            worksheet.write(row, col, value, formats["pct"])
        else:
            worksheet.write(row, col, value)

    def _write_summary_sheet(self, worksheet, summary: dict, formats: dict) -> None:
        """Write scalar metrics as (metric, value) rows."""
        worksheet.write(0, 0, "metric", formats["header"])
        worksheet.write(0, 1, "value", formats["header"])

        for row_idx, (name, value) in enumerate(summary.items(), 1):
            worksheet.write(row_idx, 0, name)
            self._write_cell(worksheet, row_idx, 1, name, value, formats)

        worksheet.set_column(0, 0, 24)
        worksheet.set_column(1, 1, 16)

    def _write_sheet(self, worksheet, df: pl.DataFrame, formats: dict) -> None:
        """Write a DataFrame to an Excel worksheet."""
        columns = df.columns

        for col_idx, col_name in enumerate(columns):
            worksheet.write(0, col_idx, col_name, formats["header"])

        for row_idx, row in enumerate(df.iter_rows(named=True), 1):
            for col_idx, col_name in enumerate(columns):
                self._write_cell(worksheet, row_idx, col_idx, col_name, row[col_name], formats)

        # Adjust column widths
        for col_idx, col_name in enumerate(columns):
            worksheet.set_column(col_idx, col_idx, max(len(col_name), 12))
