"""Pure PnL formulas.

Single source of truth for the per-position and per-lot formulas used by
the calculators. All functions are pure and use Decimal for precision.
"""

import logging
from decimal import Decimal

logger = logging.getLogger(__name__)

_ZERO = Decimal("0")


def direction_sign(direction: str) -> int:
    """+1 for long, -1 for short."""
    if direction == "long":
        return 1
    if direction == "short":
        return -1
    raise ValueError(f"Unknown direction: {direction!r}")


def calc_unrealised_pnl(
    direction: str, entry_price: Decimal, current_price: Decimal, size: Decimal
) -> Decimal:
    """Calculate unrealized PnL (absolute).

    Long:  (current_price - entry_price) * size
    Short: (entry_price - current_price) * size

    Args:
        direction: 'long' or 'short'
        entry_price: Average entry price
        current_price: Current market price (mark or last)
        size: Position size (always positive)

    Returns:
        Unrealized PnL in quote currency (positive = profit)
    """
    return (current_price - entry_price) * size * direction_sign(direction)


def calc_position_value(size: Decimal, price: Decimal) -> Decimal:
    """Notional value: size * price."""
    return size * price


def calc_closed_pnl(
    direction: str, entry_price: Decimal, exit_price: Decimal, qty: Decimal
) -> Decimal:
    """Gross PnL of closing *qty* of a lot opened at *entry_price*.

    Same formula as unrealized PnL with the exit price as the mark; fees are
    accounted for separately.
    """
    return calc_unrealised_pnl(direction, entry_price, exit_price, qty)


def safe_ratio(numerator, denominator) -> float:
    """numerator / denominator as float, 0.0 when the denominator is zero."""
    if denominator == 0:
        return 0.0
    return float(numerator) / float(denominator)


def sum_decimals(values) -> Decimal:
    """Sum that stays Decimal for an empty iterable."""
    return sum(values, _ZERO)
