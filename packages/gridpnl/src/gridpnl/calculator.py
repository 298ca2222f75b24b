"""P&L calculator.

Combines FIFO-matched realized profit, mark-to-market of open positions
and the cost breakdown into a PnLCalculation.

Risk adjustment: the net profit is charged a risk-free hurdle on the
capital the grid ties up over the window,

    hurdle = capital_requirement * risk_free_rate * window_days / DAYS_PER_YEAR
    risk_adjusted_return = (net_profit - hurdle) / capital_requirement
    final_pnl = net_profit - hurdle
"""

import logging
from decimal import Decimal
from typing import Sequence

from gridpnl.config import GridConfig
from gridpnl.constants import DAYS_PER_YEAR, DEFAULT_RISK_FREE_RATE
from gridpnl.costs import TotalCosts
from gridpnl.errors import EmptyInput
from gridpnl.ledger import match_trades
from gridpnl.market import TimeWindow, Trade
from gridpnl.metrics import GridProfit, PnLCalculation
from gridpnl.pnl import safe_ratio, sum_decimals
from gridpnl.position import Position

logger = logging.getLogger(__name__)


def calc_risk_free_hurdle(capital: Decimal, risk_free_rate: float, window: TimeWindow) -> Decimal:
    """Risk-free income the capital would have earned over the window."""
    years = Decimal(str(window.days)) / DAYS_PER_YEAR
    return capital * Decimal(str(risk_free_rate)) * years


def calculate_pnl(
    trades: Sequence[Trade],
    positions: Sequence[Position],
    config: GridConfig,
    costs: TotalCosts,
    window: TimeWindow,
    risk_free_rate: float = DEFAULT_RISK_FREE_RATE,
) -> PnLCalculation:
    """Compute the P&L snapshot for trades inside *window*.

    Args:
        trades: Fills, any order (sorted by timestamp before matching)
        positions: Current open positions
        config: Grid configuration (supplies the capital base)
        costs: Cost breakdown charged against the profit
        window: Trades outside [start, end] are ignored
        risk_free_rate: Annual rate used for the risk-free hurdle

    Returns:
        PnLCalculation dated at window.end

    Raises:
        EmptyInput: If there are no trades and no positions
        DuplicateTradeError: If two trades share an id
    """
    if not trades and not positions:
        raise EmptyInput("calculate_pnl needs at least one trade or position")

    ledger = match_trades(trades, window)
    unrealized = sum_decimals(p.unrealized_pnl for p in positions)

    grid_profit = GridProfit(
        realized_profit=ledger.realized_profit,
        unrealized_pnl=unrealized,
        total_trades=len(ledger.trades),
        successful_cycles=ledger.successful_cycles,
        timestamp=window.end,
    )

    net_profit = grid_profit.realized_profit + grid_profit.unrealized_pnl - costs.total_amount

    capital = config.capital_requirement
    hurdle = calc_risk_free_hurdle(capital, risk_free_rate, window)
    final_pnl = net_profit - hurdle
    risk_adjusted_return = safe_ratio(final_pnl, capital)

    logger.debug(
        "PnL %s: realized=%s unrealized=%s costs=%s net=%s final=%s",
        config.symbol, grid_profit.realized_profit, unrealized,
        costs.total_amount, net_profit, final_pnl,
    )

    return PnLCalculation(
        grid_profit=grid_profit,
        total_costs=costs,
        net_profit=net_profit,
        risk_adjusted_return=risk_adjusted_return,
        final_pnl=final_pnl,
        calculation_date=window.end,
    )
