"""FIFO lot matching of fills into closed grid cycles.

A SELL closes open long lots, a BUY closes open short lots, oldest first.
Whatever quantity is left after closing opens a new lot in the fill's
direction, so the open inventory always holds lots of a single direction.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional

from gridpnl.errors import DuplicateTradeError
from gridpnl.market import TimeWindow, Trade
from gridpnl.pnl import calc_closed_pnl, sum_decimals
from gridpnl.position import DirectionType, SideType

logger = logging.getLogger(__name__)

_ZERO = Decimal("0")


@dataclass
class Lot:
    """Open inventory created by one fill."""

    trade_id: str
    direction: DirectionType
    qty: Decimal
    price: Decimal
    opened_at: datetime


@dataclass(frozen=True)
class Cycle:
    """A matched open/close pair."""

    open_trade_id: str
    close_trade_id: str
    direction: DirectionType
    qty: Decimal
    entry_price: Decimal
    exit_price: Decimal
    pnl: Decimal  # gross, fees excluded
    closed_at: datetime


@dataclass
class LotLedger:
    """Running FIFO inventory and the cycles it produced."""

    open_lots: deque[Lot] = field(default_factory=deque)
    cycles: list[Cycle] = field(default_factory=list)
    trades: list[Trade] = field(default_factory=list)
    total_fees: Decimal = _ZERO
    opened_qty: Decimal = _ZERO
    closed_qty: Decimal = _ZERO
    peak_open_notional: Decimal = _ZERO

    # (timestamp, cumulative cycle pnl - fees) after each fill
    realized_curve: list[tuple[datetime, Decimal]] = field(default_factory=list)
    _realized: Decimal = field(default=_ZERO, init=False, repr=False)

    def process(self, trade: Trade) -> Decimal:
        """Apply a fill and return the gross PnL it realized."""
        closing_direction = DirectionType.LONG if trade.side == SideType.SELL else DirectionType.SHORT
        remaining = trade.qty
        realized = _ZERO

        while remaining > 0 and self.open_lots and self.open_lots[0].direction == closing_direction:
            lot = self.open_lots[0]
            matched = min(lot.qty, remaining)
            pnl = calc_closed_pnl(lot.direction, lot.price, trade.price.value, matched)
            self.cycles.append(Cycle(
                open_trade_id=lot.trade_id,
                close_trade_id=trade.trade_id,
                direction=lot.direction,
                qty=matched,
                entry_price=lot.price,
                exit_price=trade.price.value,
                pnl=pnl,
                closed_at=trade.timestamp,
            ))
            realized += pnl
            lot.qty -= matched
            remaining -= matched
            self.closed_qty += matched
            if lot.qty == 0:
                self.open_lots.popleft()

        if remaining > 0:
            opening_direction = DirectionType.LONG if trade.side == SideType.BUY else DirectionType.SHORT
            self.open_lots.append(Lot(
                trade_id=trade.trade_id,
                direction=opening_direction,
                qty=remaining,
                price=trade.price.value,
                opened_at=trade.timestamp,
            ))
            self.opened_qty += remaining

        self.trades.append(trade)
        self.total_fees += trade.fee
        self._realized += realized - trade.fee
        self.realized_curve.append((trade.timestamp, self._realized))

        open_notional = self.open_notional
        if open_notional > self.peak_open_notional:
            self.peak_open_notional = open_notional

        return realized

    @property
    def gross_pnl(self) -> Decimal:
        return sum_decimals(c.pnl for c in self.cycles)

    @property
    def realized_profit(self) -> Decimal:
        """Gross cycle PnL minus every fee paid."""
        return self.gross_pnl - self.total_fees

    @property
    def open_notional(self) -> Decimal:
        return sum_decimals(lot.qty * lot.price for lot in self.open_lots)

    @property
    def successful_cycles(self) -> int:
        return sum(1 for c in self.cycles if c.pnl > 0)


def check_unique_ids(trades: Iterable[Trade]) -> None:
    """Raise DuplicateTradeError if any trade id repeats."""
    seen: set[str] = set()
    for trade in trades:
        if trade.trade_id in seen:
            raise DuplicateTradeError(f"Duplicate trade id: {trade.trade_id}")
        seen.add(trade.trade_id)


def match_trades(trades: Iterable[Trade], window: Optional[TimeWindow] = None) -> LotLedger:
    """Run FIFO matching over the trades inside *window* in timestamp order.

    Ids are checked across the whole input, not just the window.
    """
    trades = list(trades)
    check_unique_ids(trades)

    selected = [t for t in trades if window is None or window.contains(t.timestamp)]
    selected.sort(key=lambda t: t.timestamp)

    ledger = LotLedger()
    for trade in selected:
        ledger.process(trade)

    logger.debug(
        "Matched %d trades into %d cycles (%d lots open)",
        len(selected), len(ledger.cycles), len(ledger.open_lots),
    )
    return ledger
