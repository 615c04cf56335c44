"""Application Services for Trade Analytics.

Services orchestrate repository access to implement use cases.

Available services:
- PerformanceService: Filtered reports and per-group breakdowns
- ReportExporter: CSV / Parquet / Excel output of reports
"""

from trade_analytics.application.services.performance import PerformanceService
from trade_analytics.application.services.export import (
    ReportExporter,
    summary_frame,
    equity_frame,
    breakdown_frame,
)

__all__ = [
    "PerformanceService",
    "ReportExporter",
    "summary_frame",
    "equity_frame",
    "breakdown_frame",
]
