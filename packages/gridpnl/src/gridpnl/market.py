"""
Market primitives consumed by the P&L calculators.

Trades are produced by an external execution engine; this module only
describes their shape and checks the invariants a fill must satisfy.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Iterable

from gridpnl.constants import SECONDS_PER_DAY
from gridpnl.errors import InvalidWindow
from gridpnl.position import SideType


@dataclass(frozen=True)
class Price:
    """A price observation."""
    value: Decimal
    timestamp: datetime

    def __post_init__(self):
        if not self.value.is_finite():
            raise ValueError(f"price must be finite, got {self.value}")


@dataclass(frozen=True)
class Volume:
    """A quantity denominated in a currency (base asset for fills)."""
    amount: Decimal
    currency: str

    def __post_init__(self):
        if not self.amount.is_finite() or self.amount < 0:
            raise ValueError(f"volume amount must be non-negative, got {self.amount}")


@dataclass(frozen=True)
class Trade:
    """
    An executed fill.

    Attributes:
        trade_id: Unique id within a trade history
        side: SideType.BUY or SideType.SELL
        price: Fill price
        volume: Filled quantity
        fee: Fee paid in quote currency (always >= 0)
        timestamp: Execution time
    """
    trade_id: str
    side: SideType
    price: Price
    volume: Volume
    fee: Decimal
    timestamp: datetime

    def __post_init__(self):
        if self.side not in (SideType.BUY, SideType.SELL):
            raise ValueError(f"side must be 'Buy' or 'Sell', got {self.side!r}")
        if not self.fee.is_finite() or self.fee < 0:
            raise ValueError(f"fee must be non-negative, got {self.fee}")

    @property
    def qty(self) -> Decimal:
        return self.volume.amount

    @property
    def notional(self) -> Decimal:
        """Traded value in quote currency."""
        return self.price.value * self.volume.amount


@dataclass(frozen=True)
class TimeWindow:
    """Closed time interval [start, end]."""
    start: datetime
    end: datetime

    def __post_init__(self):
        if self.end < self.start:
            raise InvalidWindow(f"window end {self.end.isoformat()} is before start {self.start.isoformat()}")

    @classmethod
    def covering(cls, timestamps: Iterable[datetime]) -> "TimeWindow":
        """Smallest window containing every timestamp.

        Raises:
            ValueError: If no timestamps are given
        """
        stamps = list(timestamps)
        if not stamps:
            raise ValueError("cannot build a window from no timestamps")
        return cls(start=min(stamps), end=max(stamps))

    def contains(self, ts: datetime) -> bool:
        return self.start <= ts <= self.end

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def days(self) -> float:
        """Window length in (fractional) days."""
        return self.duration.total_seconds() / SECONDS_PER_DAY
