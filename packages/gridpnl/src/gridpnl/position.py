"""
Position snapshots and side/direction constants.

A position is owned by the execution engine; the calculators only read it.
Unrealized PnL is derived from the other fields so it can never drift from
the entry/current prices.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import StrEnum

from gridpnl.pnl import calc_position_value, calc_unrealised_pnl

logger = logging.getLogger(__name__)


class DirectionType(StrEnum):
    """Position direction type constants."""
    LONG = 'long'
    SHORT = 'short'


class SideType(StrEnum):
    """Order side type constants."""
    BUY = 'Buy'
    SELL = 'Sell'


@dataclass(frozen=True)
class Position:
    """
    Current holding in one symbol and direction.

    Attributes:
        symbol: Trading pair (e.g., BTCUSDT)
        side: DirectionType.LONG or DirectionType.SHORT
        size: Position size in base currency (always >= 0)
        entry_price: Average entry price
        current_price: Latest mark or last price
        timestamp: Time of the snapshot
    """
    symbol: str
    side: DirectionType
    size: Decimal
    entry_price: Decimal
    current_price: Decimal
    timestamp: datetime

    def __post_init__(self):
        if self.side not in (DirectionType.LONG, DirectionType.SHORT):
            raise ValueError(f"side must be 'long' or 'short', got {self.side!r}")
        if self.size < 0:
            raise ValueError(f"size must be non-negative, got {self.size}")
        if self.entry_price < 0 or self.current_price < 0:
            raise ValueError(
                f"prices must be non-negative, got entry={self.entry_price} current={self.current_price}"
            )

    @property
    def unrealized_pnl(self) -> Decimal:
        return calc_unrealised_pnl(self.side, self.entry_price, self.current_price, self.size)

    @property
    def entry_value(self) -> Decimal:
        """Notional at entry (size * entry_price)."""
        return calc_position_value(self.size, self.entry_price)

    @property
    def market_value(self) -> Decimal:
        """Notional at the current price."""
        return calc_position_value(self.size, self.current_price)

    @property
    def key(self) -> tuple[str, str]:
        return self.symbol, str(self.side)
