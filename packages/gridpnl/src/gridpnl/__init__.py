"""
gridpnl - Profit-and-loss accounting for grid trading strategies.

Pure calculations over trade and position snapshots supplied by an
execution engine: realized/unrealized PnL, cost breakdown, return, risk,
efficiency and grid metrics. No exchange or storage dependencies.
"""

from gridpnl.constants import CALCULATION_CONSTANTS
from gridpnl.errors import GridPnlError, InvalidWindow, EmptyInput, InsufficientData, DuplicateTradeError
from gridpnl.position import Position, DirectionType, SideType
from gridpnl.market import Price, Volume, Trade, TimeWindow
from gridpnl.config import GridConfig, PriceRange, merge_grid_config
from gridpnl.costs import (
    TradingCosts,
    InfrastructureCosts,
    OpportunityCosts,
    RiskCosts,
    HiddenCosts,
    TotalCosts,
)
from gridpnl.metrics import (
    GridProfit,
    PnLCalculation,
    ReturnMetrics,
    RiskMetrics,
    EfficiencyMetrics,
    GridMetrics,
    PerformanceReport,
)
from gridpnl.calculator import calculate_pnl
from gridpnl.risk import calculate_risk_metrics, calculate_return_metrics
from gridpnl.efficiency import calculate_efficiency_metrics, calculate_grid_metrics
from gridpnl.returns import periodic_returns
from gridpnl.strategy import GridTradingStrategy, GridStrategy

__version__ = "0.1.0"

__all__ = [
    "CALCULATION_CONSTANTS",
    # Errors
    "GridPnlError",
    "InvalidWindow",
    "EmptyInput",
    "InsufficientData",
    "DuplicateTradeError",
    # Market
    "Price",
    "Volume",
    "Trade",
    "TimeWindow",
    "Position",
    "DirectionType",
    "SideType",
    # Config
    "GridConfig",
    "PriceRange",
    "merge_grid_config",
    # Costs
    "TradingCosts",
    "InfrastructureCosts",
    "OpportunityCosts",
    "RiskCosts",
    "HiddenCosts",
    "TotalCosts",
    # Results
    "GridProfit",
    "PnLCalculation",
    "ReturnMetrics",
    "RiskMetrics",
    "EfficiencyMetrics",
    "GridMetrics",
    "PerformanceReport",
    # Calculators
    "calculate_pnl",
    "calculate_risk_metrics",
    "calculate_return_metrics",
    "calculate_efficiency_metrics",
    "calculate_grid_metrics",
    "periodic_returns",
    # Strategy
    "GridTradingStrategy",
    "GridStrategy",
]
