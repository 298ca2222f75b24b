"""Test fixtures for gridpnl package."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from gridpnl.config import GridConfig, PriceRange
from gridpnl.market import Price, TimeWindow, Trade, Volume
from gridpnl.position import DirectionType, Position, SideType


@pytest.fixture
def ts():
    """Base timestamp for tests."""
    return datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_trade(ts):
    """Factory for creating Trade instances."""
    def _make(
        trade_id="t1",
        side="Buy",
        price="10",
        qty="100",
        fee="0",
        timestamp=None,
        currency="BTC",
    ):
        when = timestamp or ts
        return Trade(
            trade_id=trade_id,
            side=SideType(side),
            price=Price(value=Decimal(price), timestamp=when),
            volume=Volume(amount=Decimal(qty), currency=currency),
            fee=Decimal(fee),
            timestamp=when,
        )
    return _make


@pytest.fixture
def make_position(ts):
    """Factory for creating Position instances."""
    def _make(
        symbol="BTCUSDT",
        side="long",
        size="1",
        entry_price="100",
        current_price="100",
        timestamp=None,
    ):
        return Position(
            symbol=symbol,
            side=DirectionType(side),
            size=Decimal(size),
            entry_price=Decimal(entry_price),
            current_price=Decimal(current_price),
            timestamp=timestamp or ts,
        )
    return _make


@pytest.fixture
def grid_config():
    """10-level grid between 8 and 13, 1000 USDT per order."""
    return GridConfig(
        symbol="BTCUSDT",
        price_range=PriceRange(upper=Decimal("13"), lower=Decimal("8")),
        grid_levels=10,
        grid_spacing=Decimal("0.5"),
        base_order_size=Decimal("1000"),
        max_positions=5,
    )


@pytest.fixture
def day_window(ts):
    """One-day window starting at ts."""
    return TimeWindow(start=ts, end=ts + timedelta(days=1))


@pytest.fixture
def round_trip(make_trade, ts):
    """BUY 100@10 and SELL 100@12, fee 0.1 each."""
    return [
        make_trade(trade_id="b1", side="Buy", price="10", qty="100", fee="0.1", timestamp=ts),
        make_trade(trade_id="s1", side="Sell", price="12", qty="100", fee="0.1",
                   timestamp=ts + timedelta(hours=1)),
    ]
