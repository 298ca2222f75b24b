"""Typed errors raised by the P&L calculators.

Each error also derives from ValueError so callers that only guard against
bad input keep working.
"""


class GridPnlError(ValueError):
    """Base class for calculator errors."""


class InvalidWindow(GridPnlError):
    """Time window ends before it starts."""


class EmptyInput(GridPnlError):
    """Neither trades nor positions were supplied."""


class InsufficientData(GridPnlError):
    """Not enough observations to compute a metric."""


class DuplicateTradeError(GridPnlError):
    """Two trades in the same history share an id."""
