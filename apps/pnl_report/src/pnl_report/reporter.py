"""Console and JSON output for performance reports.

Uses rich library for color-coded terminal tables.
Saves structured JSON to output/ directory.
"""

import dataclasses
import json
import logging
from datetime import datetime, UTC
from decimal import Decimal
from pathlib import Path

from rich.console import Console
from rich.table import Table
from rich.text import Text

from gridpnl import PerformanceReport

from pnl_report.config import ReportConfig

logger = logging.getLogger(__name__)

console = Console()


class _ReportEncoder(json.JSONEncoder):
    """JSON encoder that handles Decimal and datetime types."""

    def default(self, obj):
        if isinstance(obj, Decimal):
            return str(obj)
        if isinstance(obj, datetime):
            return obj.isoformat()
        return super().default(obj)


def _format_value(val: Decimal | float | int | str) -> str:
    """Format a value for display."""
    if isinstance(val, Decimal):
        # Show up to 8 decimal places, strip trailing zeros
        text = f"{val:.8f}".rstrip("0").rstrip(".")
        return "0" if text in ("", "-0") else text
    if isinstance(val, float):
        return f"{val:.4f}"
    return str(val)


def _format_pct(val: float) -> str:
    return f"{val * 100:.2f}%"


def _signed_text(val: Decimal | float, text: str | None = None) -> Text:
    """Green for gains, red for losses."""
    text = text if text is not None else _format_value(val)
    if val > 0:
        return Text(text, style="green")
    if val < 0:
        return Text(text, style="bold red")
    return Text(text, style="dim")


def drawdown_breached(report: PerformanceReport, limit: float) -> bool:
    return report.risk_metrics.maximum_drawdown > limit


def _metrics_table(title: str, rows: list[tuple[str, str | Text]]) -> Table:
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Metric", style="white", min_width=28)
    table.add_column("Value", justify="right", min_width=20)
    for name, value in rows:
        table.add_row(name, value)
    return table


def print_console(report: PerformanceReport, config: ReportConfig) -> None:
    """Print a performance report to console with color coding."""
    period = report.period
    console.print()
    console.rule(f"[bold]{config.grid.symbol} Performance[/bold]")
    console.print(f"  Period: {period.start.isoformat()} .. {period.end.isoformat()} ({period.days:.2f} days)")
    console.print()

    _print_pnl_table(report)
    _print_costs_table(report)
    _print_metric_tables(report)
    _print_verdict(report, config.max_drawdown_limit)


def _print_pnl_table(report: PerformanceReport) -> None:
    pnl = report.pnl
    gp = pnl.grid_profit
    console.print(_metrics_table("Profit and Loss", [
        ("Realized profit", _signed_text(gp.realized_profit)),
        ("Unrealized PnL", _signed_text(gp.unrealized_pnl)),
        ("Total costs", _format_value(pnl.total_costs.total_amount)),
        ("Net profit", _signed_text(pnl.net_profit)),
        ("Final PnL (after hurdle)", _signed_text(pnl.final_pnl)),
        ("Risk-adjusted return", _signed_text(pnl.risk_adjusted_return, _format_pct(pnl.risk_adjusted_return))),
        ("Trades", str(gp.total_trades)),
        ("Successful cycles", str(gp.successful_cycles)),
    ]))
    console.print()


def _print_costs_table(report: PerformanceReport) -> None:
    costs = report.pnl.total_costs
    table = Table(title="Costs", show_header=True, header_style="bold cyan")
    table.add_column("Category", style="white", min_width=28)
    table.add_column("Amount", justify="right", min_width=20)
    for name, category in costs.categories.items():
        table.add_row(name, _format_value(category.total))
    table.add_row(Text("total", style="bold"), Text(_format_value(costs.total_amount), style="bold"))
    console.print(table)
    console.print()


def _print_metric_tables(report: PerformanceReport) -> None:
    ret = report.return_metrics
    risk = report.risk_metrics
    eff = report.efficiency_metrics
    grid = report.grid_metrics

    console.print(_metrics_table("Returns", [
        ("Annual return", _signed_text(ret.annual_return, _format_pct(ret.annual_return))),
        ("Volatility", _format_pct(ret.volatility)),
        ("Sharpe ratio", _format_value(ret.sharpe_ratio)),
        ("Sortino ratio", _format_value(ret.sortino_ratio)),
        ("Calmar ratio", _format_value(ret.calmar_ratio)),
    ]))
    console.print()

    recovery = str(risk.recovery_time) if risk.recovered else f"{risk.recovery_time} (not recovered)"
    console.print(_metrics_table("Risk", [
        ("Maximum drawdown", _format_pct(risk.maximum_drawdown)),
        ("Value at risk", _format_pct(risk.value_at_risk)),
        ("Win rate", _format_pct(risk.win_rate)),
        ("Avg win/loss ratio", _format_value(risk.average_win_loss_ratio)),
        ("Recovery time (periods)", recovery),
        ("Downside deviation", _format_pct(risk.downside_deviation)),
    ]))
    console.print()

    console.print(_metrics_table("Efficiency", [
        ("Profit factor", _format_value(eff.profit_factor)),
        ("Recovery factor", _format_value(eff.recovery_factor)),
        ("Trades per day", _format_value(eff.trades_per_day)),
        ("Avg profit per trade", _signed_text(eff.average_profit_per_trade)),
        ("Grid efficiency", _format_pct(eff.grid_efficiency)),
    ]))
    console.print()

    console.print(_metrics_table("Grid", [
        ("Capital utilization", _format_pct(grid.capital_utilization)),
        ("Cycle completion rate", _format_pct(grid.cycle_completion_rate)),
        ("Average grid spacing", _format_value(grid.average_grid_spacing)),
        ("Max capital at risk", _format_value(grid.max_capital_at_risk)),
    ]))
    console.print()


def _print_verdict(report: PerformanceReport, limit: float) -> None:
    drawdown = report.risk_metrics.maximum_drawdown
    if drawdown_breached(report, limit):
        console.print(
            f"[bold red]DRAWDOWN LIMIT BREACHED[/bold red] "
            f"max drawdown {_format_pct(drawdown)} > limit {_format_pct(limit)}"
        )
    else:
        console.print(
            f"[bold green]WITHIN DRAWDOWN LIMIT[/bold green] "
            f"max drawdown {_format_pct(drawdown)} <= limit {_format_pct(limit)}"
        )
    console.print()


def report_to_dict(report: PerformanceReport, config: ReportConfig) -> dict:
    """Convert a report to a JSON-serializable dict (Decimals kept as Decimal)."""
    data = dataclasses.asdict(report)
    costs = report.pnl.total_costs
    data["pnl"]["total_costs"]["totals"] = {
        name: category.total for name, category in costs.categories.items()
    }
    data["pnl"]["total_costs"]["total_amount"] = costs.total_amount
    data["drawdown_limit"] = config.max_drawdown_limit
    data["drawdown_breached"] = drawdown_breached(report, config.max_drawdown_limit)
    return data


def save_json(report: PerformanceReport, config: ReportConfig, output_dir: str = "output") -> str:
    """Save a performance report to a JSON file.

    Args:
        report: Report to save
        config: Report configuration (included for reproducibility)
        output_dir: Directory for output files

    Returns:
        Path to the saved JSON file
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now(UTC).strftime("%Y%m%d_%H%M%S")
    filename = f"pnl_report_{config.grid.symbol}_{timestamp}.json"
    filepath = output_path / filename

    data = {
        "timestamp": datetime.now(UTC).isoformat(),
        "config": config.model_dump(mode="json"),
        "report": report_to_dict(report, config),
    }

    with open(filepath, "w") as f:
        json.dump(data, f, indent=2, cls=_ReportEncoder)

    console.print(f"Report saved to [bold]{filepath}[/bold]")
    logger.debug("Saved report JSON to %s", filepath)
    return str(filepath)
