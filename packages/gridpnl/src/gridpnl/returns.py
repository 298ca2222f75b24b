"""Periodic return series derived from the realized equity curve.

The curve starts at the grid's capital requirement and moves with every
fill by the realized cycle PnL net of fees. It is sampled at the end of
fixed-width buckets from window.start (the last known value is carried
forward through empty buckets). The final bucket is pinned to
capital + net_profit so that compounding the series reproduces the
window's net result, including open positions and costs.
"""

import logging
import math
from datetime import timedelta
from decimal import Decimal
from typing import Sequence

from gridpnl.ledger import match_trades
from gridpnl.market import TimeWindow, Trade

logger = logging.getLogger(__name__)


def sample_equity(
    trades: Sequence[Trade],
    window: TimeWindow,
    capital: Decimal,
    net_profit: Decimal,
    interval: timedelta = timedelta(days=1),
) -> list[tuple]:
    """Equity at the end of each bucket as (bucket_end, equity) pairs.

    Returns an empty list for a zero-length window.
    """
    if interval <= timedelta(0):
        raise ValueError(f"interval must be positive, got {interval}")
    if window.duration <= timedelta(0):
        return []

    curve = match_trades(trades, window).realized_curve
    bucket_count = math.ceil(window.duration / interval)

    samples: list[tuple] = []
    level = capital
    idx = 0
    for bucket in range(1, bucket_count + 1):
        bucket_end = min(window.start + interval * bucket, window.end)
        while idx < len(curve) and curve[idx][0] <= bucket_end:
            level = capital + curve[idx][1]
            idx += 1
        samples.append((bucket_end, level))

    samples[-1] = (samples[-1][0], capital + net_profit)
    return samples


def periodic_returns(
    trades: Sequence[Trade],
    window: TimeWindow,
    capital: Decimal,
    net_profit: Decimal,
    interval: timedelta = timedelta(days=1),
) -> list[float]:
    """Relative change between consecutive bucket equities.

    The first return is measured against the starting capital. A bucket
    following a non-positive equity yields 0.0.
    """
    returns: list[float] = []
    previous = capital
    for _, equity in sample_equity(trades, window, capital, net_profit, interval):
        returns.append(float((equity - previous) / previous) if previous > 0 else 0.0)
        previous = equity

    logger.debug("Built %d periodic returns over %.2f days", len(returns), window.days)
    return returns
