"""Entry point for running trade_analytics as a module.

Usage:
    python -m trade_analytics [command] [options]

Commands:
    report      Show performance and risk report
    breakdown   Show per-symbol / direction / setup breakdown
    verify      Verify ledger integrity

Examples:
    python -m trade_analytics report --symbol AAPL --start 2024-01-01
    python -m trade_analytics breakdown --by setup --parallel
    python -m trade_analytics report --save -f csv,xlsx
    python -m trade_analytics verify
"""

import sys

from trade_analytics.interfaces.cli import main

if __name__ == "__main__":
    sys.exit(main())
