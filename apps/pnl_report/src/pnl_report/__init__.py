"""
PnL report package: grid strategy performance reports from trade exports.

Loads grid config, costs and open positions from YAML and executed trades
from CSV, then prints and saves a gridpnl PerformanceReport.
"""

from pnl_report.config import ReportConfig, load_config
from pnl_report.loader import load_trades
from pnl_report.reporter import print_console, save_json

__all__ = [
    "ReportConfig",
    "load_config",
    "load_trades",
    "print_console",
    "save_json",
]
