"""Outcome and metric records produced by the calculators."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from gridpnl.costs import TotalCosts
from gridpnl.market import TimeWindow


@dataclass
class GridProfit:
    """Realized and mark-to-market profit of the grid."""

    realized_profit: Decimal = field(default_factory=lambda: Decimal("0"))
    unrealized_pnl: Decimal = field(default_factory=lambda: Decimal("0"))
    total_trades: int = 0
    successful_cycles: int = 0
    timestamp: datetime | None = None


@dataclass
class PnLCalculation:
    """Point-in-time P&L snapshot.

    net_profit = realized_profit + unrealized_pnl - total_costs.total_amount
    """

    grid_profit: GridProfit
    total_costs: TotalCosts
    net_profit: Decimal
    risk_adjusted_return: float
    final_pnl: Decimal
    calculation_date: datetime


@dataclass
class ReturnMetrics:
    sharpe_ratio: float = 0.0
    sortino_ratio: float = 0.0
    calmar_ratio: float = 0.0
    annual_return: float = 0.0
    volatility: float = 0.0  # annualized


@dataclass
class RiskMetrics:
    maximum_drawdown: float = 0.0  # fraction of peak equity
    value_at_risk: float = 0.0  # loss fraction at the confidence level
    win_rate: float = 0.0
    average_win_loss_ratio: float = 0.0
    recovery_time: int = 0  # periods from trough back to the prior peak
    recovered: bool = True
    downside_deviation: float = 0.0  # per period, below the risk-free rate


@dataclass
class EfficiencyMetrics:
    profit_factor: float = 0.0
    recovery_factor: float = 0.0
    trades_per_day: float = 0.0
    average_profit_per_trade: Decimal = field(default_factory=lambda: Decimal("0"))
    grid_efficiency: float = 0.0


@dataclass
class GridMetrics:
    grid_efficiency: float = 0.0
    capital_utilization: float = 0.0
    cycle_completion_rate: float = 0.0
    average_grid_spacing: Decimal = field(default_factory=lambda: Decimal("0"))
    max_capital_at_risk: Decimal = field(default_factory=lambda: Decimal("0"))


@dataclass
class PerformanceReport:
    """Everything known about the strategy over one period."""

    pnl: PnLCalculation
    return_metrics: ReturnMetrics
    risk_metrics: RiskMetrics
    efficiency_metrics: EfficiencyMetrics
    grid_metrics: GridMetrics
    period: TimeWindow
