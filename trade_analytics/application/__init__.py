"""Application Layer: Use cases and service orchestration.

This layer contains:
- services/: Business logic orchestration
  - performance.py: Journal reports and breakdowns
  - export.py: Report tables and file output
"""

from trade_analytics.application.services import (
    PerformanceService,
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
