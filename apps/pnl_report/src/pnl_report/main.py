"""Main entry point for pnl_report.

Usage:
    python -m pnl_report.main --config conf/pnl_report.yaml
    python -m pnl_report.main -c conf/pnl_report.yaml --trades trades.csv --start 2025-01-01 --debug
"""

import argparse
import logging
import sys
from datetime import datetime
from typing import Optional

from gridpnl import GridStrategy, TimeWindow

from pnl_report.config import ReportConfig, load_config
from pnl_report.loader import load_trades, parse_timestamp
from pnl_report.reporter import drawdown_breached, print_console, save_json


def setup_logging(debug: bool = False) -> None:
    """Set up logging with console output."""
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.DEBUG if debug else logging.INFO)
    console_formatter = logging.Formatter(
        "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    console_handler.setFormatter(console_formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if debug else logging.INFO)
    root_logger.addHandler(console_handler)


logger = logging.getLogger(__name__)


def build_strategy(config: ReportConfig, trades_path: Optional[str] = None) -> GridStrategy:
    """Create a strategy from config and feed it trades and positions.

    Raises:
        FileNotFoundError: If the trades file does not exist
        ValueError: On malformed trades or duplicate trade ids
    """
    strategy = GridStrategy(
        config.grid.to_grid_config(),
        costs=config.costs.to_total_costs(),
        risk_free_rate=config.risk_free_rate,
        var_confidence=config.var_confidence,
        return_interval=config.return_interval,
    )

    path = trades_path or config.trades_path
    if path:
        for trade in load_trades(path):
            strategy.record_trade(trade)
    else:
        logger.warning("No trades file configured; reporting positions only")

    for position in config.positions:
        strategy.update_position(position.to_position())

    return strategy


def resolve_period(
    strategy: GridStrategy,
    config: ReportConfig,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> TimeWindow:
    """Report period: CLI bounds, then config bounds, then the recorded history.

    A history-derived period of zero length (a single fill) is widened to
    one return interval.
    """
    start = start or config.start
    explicit_end = end or config.end
    end = explicit_end
    if start is None or end is None:
        history = strategy.history_window()
        start = start or history.start
        end = end or history.end
    if explicit_end is None and end == start:
        end = start + config.return_interval
    return TimeWindow(start=start, end=end)


def main(
    config_path: str = None,
    trades_path: str = None,
    start: str = None,
    end: str = None,
    output_dir: str = "output",
    debug: bool = False,
) -> int:
    """Main entry point.

    Args:
        config_path: Path to YAML config file
        trades_path: Override trades CSV from config
        start: Report period start (ISO 8601)
        end: Report period end (ISO 8601)
        output_dir: Directory for JSON output
        debug: Enable debug logging

    Returns:
        Exit code: 0 if the report is within the drawdown limit, 1 otherwise
        or on error
    """
    setup_logging(debug=debug)

    # Load config
    try:
        config = load_config(config_path)
        logger.info(f"Loaded config for {config.grid.symbol}")
    except FileNotFoundError as e:
        logger.error(f"Config file not found: {e}")
        return 1
    except ValueError as e:
        logger.error(f"Config error: {e}")
        return 1

    try:
        strategy = build_strategy(config, trades_path)
        period = resolve_period(
            strategy,
            config,
            start=parse_timestamp(start) if start else None,
            end=parse_timestamp(end) if end else None,
        )
        logger.info("Computing report for %s .. %s", period.start.isoformat(), period.end.isoformat())
        report = strategy.get_performance_report(period)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Report failed: {e}")
        return 1

    # Report
    print_console(report, config)
    try:
        save_json(report, config, output_dir)
    except OSError as e:
        logger.error(f"Failed to save report to {output_dir}: {e}")
        return 1

    return 1 if drawdown_breached(report, config.max_drawdown_limit) else 0


def cli() -> None:
    """Command-line interface entry point."""
    parser = argparse.ArgumentParser(
        description="PnL Report: grid strategy profit, cost, risk and efficiency report",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--config", "-c",
        type=str,
        default=None,
        help="Path to YAML config file (default: conf/pnl_report.yaml)",
    )
    parser.add_argument(
        "--trades",
        type=str,
        default=None,
        help="Trades CSV file (default: trades_path from config)",
    )
    parser.add_argument(
        "--start",
        type=str,
        default=None,
        help="Period start, ISO 8601 (default: config or first trade)",
    )
    parser.add_argument(
        "--end",
        type=str,
        default=None,
        help="Period end, ISO 8601 (default: config or last trade; one return interval after a single fill)",
    )
    parser.add_argument(
        "--output", "-o",
        type=str,
        default="output",
        help="Output directory for JSON results (default: output/)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args()

    try:
        exit_code = main(
            config_path=args.config,
            trades_path=args.trades,
            start=args.start,
            end=args.end,
            output_dir=args.output,
            debug=args.debug,
        )
        sys.exit(exit_code)
    except KeyboardInterrupt:
        logger.info("Interrupted")
        sys.exit(130)


if __name__ == "__main__":
    cli()
