"""
Grid trading strategy capability.

GridTradingStrategy is the interface report consumers depend on.
GridStrategy implements it by keeping an immutable GridConfig (replaced
wholesale on update) next to the mutable runtime state fed by the
execution engine: positions, trade history, costs and the last report.
"""

import logging
from collections.abc import Mapping
from datetime import timedelta
from typing import Any, Optional, Protocol, runtime_checkable

from gridpnl.calculator import calculate_pnl
from gridpnl.config import GridConfig, merge_grid_config
from gridpnl.constants import (
    DAYS_PER_YEAR,
    DEFAULT_RISK_FREE_RATE,
    DEFAULT_VAR_CONFIDENCE,
    SECONDS_PER_DAY,
)
from gridpnl.costs import TotalCosts
from gridpnl.efficiency import calculate_efficiency_metrics, calculate_grid_metrics
from gridpnl.errors import DuplicateTradeError, EmptyInput
from gridpnl.market import TimeWindow, Trade
from gridpnl.metrics import PerformanceReport, PnLCalculation, RiskMetrics
from gridpnl.position import Position
from gridpnl.returns import periodic_returns
from gridpnl.risk import calculate_return_metrics, calculate_risk_metrics

logger = logging.getLogger(__name__)


@runtime_checkable
class GridTradingStrategy(Protocol):
    """What a grid strategy exposes to reporting."""

    @property
    def config(self) -> GridConfig: ...

    @property
    def current_positions(self) -> list[Position]: ...

    @property
    def trade_history(self) -> list[Trade]: ...

    @property
    def performance(self) -> Optional[PerformanceReport]: ...

    def compute_pnl(self) -> PnLCalculation: ...

    def update_grid(self, partial: Mapping[str, Any]) -> None: ...

    def get_performance_report(self, period: TimeWindow) -> PerformanceReport: ...

    def get_total_costs(self) -> TotalCosts: ...

    def get_risk_metrics(self) -> RiskMetrics: ...


class GridStrategy:
    """
    Concrete grid strategy state and reporting.

    Trades must arrive in timestamp order with unique ids; positions are
    keyed by (symbol, side) and a zero-size snapshot removes the position.
    """

    def __init__(
        self,
        config: GridConfig,
        costs: Optional[TotalCosts] = None,
        risk_free_rate: float = DEFAULT_RISK_FREE_RATE,
        var_confidence: float = DEFAULT_VAR_CONFIDENCE,
        return_interval: timedelta = timedelta(days=1),
    ):
        """Initialize strategy.

        Args:
            config: Grid configuration
            costs: Cost breakdown (all zero if None)
            risk_free_rate: Annual rate for hurdle, Sharpe and Sortino
            var_confidence: Confidence level for value-at-risk
            return_interval: Bucket width of the periodic return series
        """
        if return_interval <= timedelta(0):
            raise ValueError(f"return_interval must be positive, got {return_interval}")

        self._config = config
        self._costs = costs or TotalCosts()
        self.risk_free_rate = risk_free_rate
        self.var_confidence = var_confidence
        self.return_interval = return_interval

        self._trades: list[Trade] = []
        self._trade_ids: set[str] = set()
        self._positions: dict[tuple[str, str], Position] = {}
        self._performance: Optional[PerformanceReport] = None

    # -- state -----------------------------------------------------------

    @property
    def config(self) -> GridConfig:
        return self._config

    @property
    def current_positions(self) -> list[Position]:
        return list(self._positions.values())

    @property
    def trade_history(self) -> list[Trade]:
        return list(self._trades)

    @property
    def performance(self) -> Optional[PerformanceReport]:
        return self._performance

    @property
    def periods_per_year(self) -> float:
        return DAYS_PER_YEAR * SECONDS_PER_DAY / self.return_interval.total_seconds()

    def record_trade(self, trade: Trade) -> None:
        """Append a fill to the history.

        Raises:
            DuplicateTradeError: If the id was already recorded
            ValueError: If the fill is older than the last recorded one
        """
        if trade.trade_id in self._trade_ids:
            raise DuplicateTradeError(f"Duplicate trade id: {trade.trade_id}")
        if self._trades and trade.timestamp < self._trades[-1].timestamp:
            raise ValueError(
                f"Trade {trade.trade_id} at {trade.timestamp.isoformat()} is older than "
                f"last recorded trade at {self._trades[-1].timestamp.isoformat()}"
            )
        self._trades.append(trade)
        self._trade_ids.add(trade.trade_id)

    def update_position(self, position: Position) -> None:
        """Replace the snapshot for the position's symbol and side."""
        if position.size == 0:
            self._positions.pop(position.key, None)
            return
        self._positions[position.key] = position

    def set_costs(self, costs: TotalCosts) -> None:
        self._costs = costs

    def update_grid(self, partial: Mapping[str, Any]) -> None:
        """Merge *partial* into the config; nothing changes if it is invalid."""
        self._config = merge_grid_config(self._config, partial)
        logger.info("Grid %s updated: %s", self._config.symbol, sorted(partial))

    def get_total_costs(self) -> TotalCosts:
        return self._costs

    # -- calculations ----------------------------------------------------

    def history_window(self) -> TimeWindow:
        """Window from the earliest to the latest trade or position timestamp.

        Raises:
            EmptyInput: If there are no trades and no positions
        """
        stamps = [t.timestamp for t in self._trades] + [p.timestamp for p in self._positions.values()]
        if not stamps:
            raise EmptyInput(f"No trades or positions recorded for {self._config.symbol}")
        return TimeWindow.covering(stamps)

    def _pnl(self, window: TimeWindow) -> PnLCalculation:
        return calculate_pnl(
            self._trades,
            self.current_positions,
            self._config,
            self._costs,
            window,
            risk_free_rate=self.risk_free_rate,
        )

    def _returns(self, window: TimeWindow, pnl: PnLCalculation) -> list[float]:
        return periodic_returns(
            self._trades,
            window,
            self._config.capital_requirement,
            pnl.net_profit,
            self.return_interval,
        )

    def compute_pnl(self) -> PnLCalculation:
        """P&L over the full recorded history."""
        return self._pnl(self.history_window())

    def get_risk_metrics(self) -> RiskMetrics:
        """Risk metrics over the full recorded history.

        Raises:
            EmptyInput: If nothing was recorded
            InsufficientData: If the history is too short for one return period
        """
        window = self.history_window()
        returns = self._returns(window, self._pnl(window))
        return calculate_risk_metrics(
            returns, self.risk_free_rate, self.var_confidence, self.periods_per_year
        )

    def get_performance_report(self, period: TimeWindow) -> PerformanceReport:
        """Compose P&L, return, risk, efficiency and grid metrics for *period*.

        The report is also kept as ``performance``.
        """
        pnl = self._pnl(period)
        returns = self._returns(period, pnl)
        positions = self.current_positions

        efficiency = calculate_efficiency_metrics(self._trades, pnl, period, self._config)
        report = PerformanceReport(
            pnl=pnl,
            return_metrics=calculate_return_metrics(returns, self.risk_free_rate, self.periods_per_year),
            risk_metrics=calculate_risk_metrics(
                returns, self.risk_free_rate, self.var_confidence, self.periods_per_year
            ),
            efficiency_metrics=efficiency,
            grid_metrics=calculate_grid_metrics(self._trades, positions, self._config, efficiency, period),
            period=period,
        )
        self._performance = report
        logger.info(
            "Performance report %s %s..%s: net=%s final=%s",
            self._config.symbol, period.start.isoformat(), period.end.isoformat(),
            pnl.net_profit, pnl.final_pnl,
        )
        return report
