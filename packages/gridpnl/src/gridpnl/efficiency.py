"""Efficiency and grid-utilization metrics.

Grid efficiency compares the profitable closing fills with the cycles the
price path allowed: every ``grid_spacing`` of price travelled between
consecutive fills is one opportunity to close a level. Without a config,
every pair of fills counts as one opportunity. A fill that closes several
lots counts once, and the opportunity count is never below the number of
closing fills, so the ratio stays within [0, 1].
"""

import logging
from decimal import Decimal
from typing import Optional, Sequence

from gridpnl.config import GridConfig
from gridpnl.ledger import LotLedger, match_trades
from gridpnl.market import TimeWindow, Trade
from gridpnl.metrics import EfficiencyMetrics, GridMetrics, PnLCalculation
from gridpnl.pnl import safe_ratio, sum_decimals
from gridpnl.position import Position

logger = logging.getLogger(__name__)

_ZERO = Decimal("0")


def _price_moves(ledger: LotLedger) -> list[Decimal]:
    """Absolute price change between consecutive fills."""
    prices = [t.price.value for t in ledger.trades]
    return [abs(b - a) for a, b in zip(prices, prices[1:])]


def _max_realized_drawdown(ledger: LotLedger) -> Decimal:
    """Largest drop of the cumulative realized PnL from its running peak."""
    peak = _ZERO
    max_dd = _ZERO
    for _, value in ledger.realized_curve:
        if value > peak:
            peak = value
        if peak - value > max_dd:
            max_dd = peak - value
    return max_dd


def _closing_fill_pnl(ledger: LotLedger) -> dict[str, Decimal]:
    """Gross PnL realized by each closing fill, keyed by trade id."""
    pnl: dict[str, Decimal] = {}
    for cycle in ledger.cycles:
        pnl[cycle.close_trade_id] = pnl.get(cycle.close_trade_id, _ZERO) + cycle.pnl
    return pnl


def theoretical_max_cycles(ledger: LotLedger, config: Optional[GridConfig] = None) -> int:
    if config is None:
        allowed = len(ledger.trades) // 2
    else:
        allowed = int(sum_decimals(_price_moves(ledger)) // config.grid_spacing)
    return max(allowed, len(_closing_fill_pnl(ledger)))


def calculate_efficiency_metrics(
    trades: Sequence[Trade],
    pnl: PnLCalculation,
    window: TimeWindow,
    config: Optional[GridConfig] = None,
) -> EfficiencyMetrics:
    """Compute EfficiencyMetrics for trades inside *window*.

    Args:
        trades: Fills (filtered to the window and sorted by timestamp)
        pnl: P&L snapshot for the same window
        window: Period the metrics cover
        config: Grid configuration; enables spacing-based grid efficiency

    Raises:
        DuplicateTradeError: If two trades share an id
    """
    ledger = match_trades(trades, window)
    trade_count = len(ledger.trades)

    gross_profit = sum_decimals(c.pnl for c in ledger.cycles if c.pnl > 0)
    gross_loss = abs(sum_decimals(c.pnl for c in ledger.cycles if c.pnl < 0))

    if trade_count:
        average_profit = pnl.net_profit / trade_count
    else:
        average_profit = _ZERO

    return EfficiencyMetrics(
        profit_factor=safe_ratio(gross_profit, gross_loss),
        recovery_factor=safe_ratio(pnl.net_profit, _max_realized_drawdown(ledger)),
        trades_per_day=safe_ratio(trade_count, window.days),
        average_profit_per_trade=average_profit,
        grid_efficiency=safe_ratio(
            sum(1 for v in _closing_fill_pnl(ledger).values() if v > 0),
            theoretical_max_cycles(ledger, config),
        ),
    )


def calculate_grid_metrics(
    trades: Sequence[Trade],
    positions: Sequence[Position],
    config: GridConfig,
    efficiency: EfficiencyMetrics,
    window: TimeWindow,
) -> GridMetrics:
    """Compute capital usage and cycle statistics of the grid."""
    ledger = match_trades(trades, window)

    moves = [m for m in _price_moves(ledger) if m > 0]
    if moves:
        average_spacing = sum_decimals(moves) / len(moves)
    else:
        average_spacing = config.grid_spacing

    entry_value = sum_decimals(p.entry_value for p in positions)
    market_value = sum_decimals(p.market_value for p in positions)

    return GridMetrics(
        grid_efficiency=efficiency.grid_efficiency,
        capital_utilization=safe_ratio(entry_value, config.capital_requirement),
        cycle_completion_rate=safe_ratio(ledger.closed_qty, ledger.opened_qty),
        average_grid_spacing=average_spacing,
        max_capital_at_risk=max(ledger.peak_open_notional, market_value),
    )
