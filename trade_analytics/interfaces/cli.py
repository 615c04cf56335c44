"""Command Line Interface for Trade Analytics.

Provides CLI access to analytics functions:
- report: Performance and risk metrics for the ledger or a slice of it
- breakdown: One row of metrics per symbol, direction, setup or discipline rating
- verify: Check the ledger for malformed or duplicate trades

Usage:
    python -m trade_analytics report [--symbol S] [--start D] [--end D]
    python -m trade_analytics breakdown --by setup
    python -m trade_analytics verify
"""

import argparse
import sys
from dataclasses import replace
from datetime import date, datetime
from pathlib import Path

from trade_analytics import __version__
from trade_analytics.domain import (
    DateRange,
    Ledger,
    MetricsReport,
    TradeAnalyticsError,
    TradeFilters,
    trade_from_record,
)
from trade_analytics.infrastructure import (
    DataPaths,
    DEFAULT_CONFIG,
    RepositoryError,
    TradeRepository,
    configure_logging,
)
from trade_analytics.application import (
    PerformanceService,
    ReportExporter,
    breakdown_frame,
)


def _parse_bound(text: str) -> date:
    """Parse a YYYY-MM-DD date or an ISO-8601 datetime."""
    try:
        if len(text) == 10:
            return date.fromisoformat(text)
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date: {text!r}") from None


def _build_filters(args: argparse.Namespace) -> TradeFilters:
    date_range = None
    if args.start is not None or args.end is not None:
        date_range = DateRange(start=args.start, end=args.end)
    return TradeFilters(symbol=args.symbol, date_range=date_range, direction=args.direction)


def _build_paths(args: argparse.Namespace) -> DataPaths:
    return DataPaths(
        root=Path(args.data_root),
        trades_override=Path(args.trades) if args.trades else None,
    )


def _format_hours(report: MetricsReport) -> str:
    hours = report.average_holding_duration.total_seconds() / 3600
    if hours >= 48:
        return f"{hours / 24:.1f} days"
    return f"{hours:.1f} hours"


def _print_report(report: MetricsReport) -> None:
    print("【Performance】")
    print(f"  Closed trades:   {report.trade_count:,}")
    print(f"  Wins / Losses:   {report.win_count:,} / {report.loss_count:,}"
          f" (breakeven {report.breakeven_count:,})")
    print(f"  Win rate:        {report.win_rate * 100:.1f}%")
    print(f"  Net profit:      {report.total_net_profit:+,.2f}")
    print(f"  Expectancy:      {report.expectancy:+,.2f}")
    print(f"  Profit factor:   {report.profit_factor}")
    print(f"  Average win:     {report.average_win:+,.2f}")
    print(f"  Average loss:    {report.average_loss:+,.2f}")
    print(f"  Fees paid:       {report.total_fees:,.2f}")
    print()

    print("【Risk】")
    print(f"  Max drawdown:    {report.max_drawdown:,.2f}")
    print(f"  Win streak:      {report.max_consecutive_wins}")
    print(f"  Loss streak:     {report.max_consecutive_losses}")
    sharpe = f"{report.sharpe_ratio:.2f}" if report.sharpe_ratio is not None else "n/a"
    print(f"  Sharpe (trade):  {sharpe}")
    if report.r_trade_count:
        print(f"  Average R:       {report.average_r:+.2f}R"
              f" over {report.r_trade_count} trades (total {report.total_r:+.2f}R)")
    print()

    print("【Time】")
    print(f"  Avg holding:     {_format_hours(report)}")
    if report.first_exit is not None:
        print(f"  Exits:           {report.first_exit:%Y-%m-%d} to {report.last_exit:%Y-%m-%d}")


def cmd_report(args: argparse.Namespace) -> int:
    """Show performance report."""
    paths = _build_paths(args)
    service = PerformanceService(paths=paths, config=args.config)

    print(f"Trade Analytics v{__version__}")
    print("=" * 60)

    try:
        filters = _build_filters(args)
        summary = service.get_summary()
        report = service.report(filters)
    except (RepositoryError, TradeAnalyticsError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    print(f"Ledger: {summary['trade_count']:,} trades"
          f" ({summary['open_count']:,} open, {summary['closed_count']:,} closed)")
    print(f"Filter: {filters.describe()}")
    print()

    if report.is_empty:
        print("No closed trades match the filter.")
        return 0

    _print_report(report)

    if args.save:
        exporter = ReportExporter(output_dir=paths.reports_dir, config=args.config)
        saved = exporter.save_report(report, args.output, formats=_formats(args))
        print()
        for path in saved:
            print(f"Saved: {path}")

    return 0


def cmd_breakdown(args: argparse.Namespace) -> int:
    """Show per-group breakdown."""
    paths = _build_paths(args)
    config = args.config
    if args.workers is not None:
        config = replace(config, parallel_workers=args.workers)
    service = PerformanceService(paths=paths, config=config)

    try:
        filters = _build_filters(args)
        breakdown = service.breakdown(args.by, filters, parallel=args.parallel)
    except (RepositoryError, TradeAnalyticsError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    print(f"【Breakdown by {args.by}】 {filters.describe()}")
    print("=" * 72)

    if not breakdown:
        print("No closed trades match the filter.")
        return 0

    df = breakdown_frame(breakdown, args.by)

    print(f"{'Rank':<5} {args.by.title():<16} {'Trades':>6} {'Win%':>7} "
          f"{'Net':>12} {'Expect.':>10} {'PF':>7} {'MaxDD':>10}")
    print("-" * 72)
    for row in df.iter_rows(named=True):
        name = row[args.by][:16]
        pf = breakdown[row[args.by]].profit_factor
        print(f"{row['rank']:<5} {name:<16} {row['trade_count']:>6} "
              f"{row['win_rate'] * 100:>6.1f}% {row['total_net_profit']:>+12,.2f} "
              f"{row['expectancy']:>+10,.2f} {str(pf):>7} {row['max_drawdown']:>10,.2f}")

    if args.save:
        exporter = ReportExporter(output_dir=paths.reports_dir, config=config)
        saved = exporter.save_breakdown(df, args.output or f"breakdown_{args.by}",
                                        formats=_formats(args))
        print()
        for path in saved:
            print(f"Saved: {path}")

    return 0


def cmd_verify(args: argparse.Namespace) -> int:
    """Verify ledger integrity."""
    paths = _build_paths(args)
    repo = TradeRepository(paths)

    print("【Ledger Verification】")
    print("=" * 50)

    errors = []

    # 1. Check data files exist
    print("\n1. Checking ledger file...")
    missing = paths.validate()
    if missing:
        for m in missing:
            print(f"  ✗ Missing: {m}")
        print("\n" + "=" * 50)
        print(f"❌ Found {len(missing)} problem(s)")
        return 1
    print(f"  ✓ {paths.trades_file}")

    # 2. Read raw records
    print("\n2. Reading records...")
    try:
        records = repo.get_records()
    except RepositoryError as e:
        print(f"  ✗ Error: {e}")
        return 1
    print(f"  Records: {len(records):,}")

    # 3. Validate every record, collecting all problems
    print("\n3. Validating trades...")
    trades = []
    for i, record in enumerate(records):
        try:
            trades.append(trade_from_record(record))
        except TradeAnalyticsError as e:
            print(f"  ✗ Record {i}: {e}")
            errors.append(str(e))
    if not errors:
        print("  ✓ All records are valid trades")

    # 4. Check id uniqueness
    print("\n4. Checking trade ids...")
    seen: set[str] = set()
    for t in trades:
        if t.id in seen:
            print(f"  ✗ Duplicate id: {t.id}")
            errors.append(f"Duplicate id: {t.id}")
        seen.add(t.id)

    if len(seen) == len(trades):
        ledger = Ledger(trades)
        print(f"  ✓ {len(ledger):,} unique ids"
              f" ({len(ledger.open_trades()):,} open, {len(ledger.closed_trades()):,} closed)")

    # Summary
    print("\n" + "=" * 50)
    if errors:
        print(f"❌ Found {len(errors)} problem(s)")
        return 1
    else:
        print("✅ All checks passed")
        return 0


def _formats(args: argparse.Namespace) -> tuple[str, ...] | None:
    if not args.formats:
        return None
    return tuple(f.strip() for f in args.formats.split(",") if f.strip())


def _add_filter_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--symbol", help="Restrict to one symbol")
    parser.add_argument(
        "--direction",
        choices=("long", "short"),
        help="Restrict to long or short trades",
    )
    parser.add_argument("--start", type=_parse_bound, help="Earliest exit date (inclusive)")
    parser.add_argument("--end", type=_parse_bound, help="Latest exit date (inclusive)")


def _add_output_arguments(parser: argparse.ArgumentParser, default_name: str | None) -> None:
    parser.add_argument(
        "-o", "--output",
        default=default_name,
        help="Output filename (without extension)",
    )
    parser.add_argument(
        "-f", "--formats",
        default=None,
        help="Output formats (comma-separated: csv,parquet,xlsx)",
    )
    parser.add_argument(
        "--save",
        action="store_true",
        help="Save output files to the reports directory",
    )


def main(argv: list[str] | None = None) -> int:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        prog="trade_analytics",
        description="Trade Analytics - Journal Performance and Risk Analysis",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--data-root",
        default=".",
        help="Project root containing data/ and reports/",
    )
    parser.add_argument(
        "--trades",
        default=None,
        help="Ledger file (overrides data/trades.*)",
    )
    parser.add_argument(
        "--log-level",
        default=DEFAULT_CONFIG.log_level,
        help="Logging level (DEBUG, INFO, WARNING, ...)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # report command
    report_parser = subparsers.add_parser("report", help="Show performance report")
    _add_filter_arguments(report_parser)
    _add_output_arguments(report_parser, default_name="report")

    # breakdown command
    breakdown_parser = subparsers.add_parser("breakdown", help="Show per-group breakdown")
    breakdown_parser.add_argument(
        "--by",
        choices=DEFAULT_CONFIG.breakdown_keys,
        default="symbol",
        help="Grouping dimension",
    )
    breakdown_parser.add_argument(
        "--parallel",
        action="store_true",
        help="Compute groups on a process pool",
    )
    breakdown_parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Worker processes for --parallel",
    )
    _add_filter_arguments(breakdown_parser)
    _add_output_arguments(breakdown_parser, default_name=None)

    # verify command
    subparsers.add_parser("verify", help="Verify ledger integrity")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        configure_logging(args.log_level)
    except ValueError as e:
        parser.error(str(e))
    args.config = replace(DEFAULT_CONFIG, log_level=args.log_level)

    commands = {
        "report": cmd_report,
        "breakdown": cmd_breakdown,
        "verify": cmd_verify,
    }

    return commands[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
