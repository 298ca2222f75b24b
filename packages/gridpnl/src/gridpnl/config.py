"""
Configuration models for grid trading strategy.

This module defines the configuration dataclasses used to parameterize
the grid, and the partial-update merge used by GridStrategy.update_grid().
"""

import dataclasses
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PriceRange:
    """Price band covered by the grid."""
    upper: Decimal
    lower: Decimal

    def __post_init__(self):
        if not self.upper > self.lower:
            raise ValueError(f"upper must be greater than lower, got upper={self.upper} lower={self.lower}")

    @property
    def width(self) -> Decimal:
        return self.upper - self.lower


@dataclass(frozen=True)
class GridConfig:
    """
    Configuration for grid trading strategy.

    Attributes:
        symbol: Trading pair (e.g., BTCUSDT)
        price_range: Upper/lower bound of the grid
        grid_levels: Number of grid levels (>= 1)
        grid_spacing: Price distance between adjacent levels (> 0)
        base_order_size: Quote-currency notional of one grid order (> 0)
        max_positions: Maximum concurrently open grid orders (>= 1)
    """
    symbol: str
    price_range: PriceRange
    grid_levels: int
    grid_spacing: Decimal
    base_order_size: Decimal
    max_positions: int

    def __post_init__(self):
        """Validate configuration parameters."""
        if self.grid_levels < 1:
            raise ValueError(f"grid_levels must be at least 1, got {self.grid_levels}")
        if self.grid_spacing <= 0:
            raise ValueError(f"grid_spacing must be positive, got {self.grid_spacing}")
        if self.base_order_size <= 0:
            raise ValueError(f"base_order_size must be positive, got {self.base_order_size}")
        if self.max_positions < 1:
            raise ValueError(f"max_positions must be at least 1, got {self.max_positions}")

    @property
    def capital_requirement(self) -> Decimal:
        """Capital deployed when every allowed grid order is filled."""
        return self.base_order_size * min(self.grid_levels, self.max_positions)


_GRID_FIELDS = frozenset(f.name for f in dataclasses.fields(GridConfig))
_RANGE_FIELDS = frozenset(f.name for f in dataclasses.fields(PriceRange))


def merge_grid_config(config: GridConfig, partial: Mapping[str, Any]) -> GridConfig:
    """Return a new config with only the fields present in *partial* replaced.

    ``price_range`` may be given as a PriceRange or as a mapping holding a
    subset of ``upper``/``lower``; missing bounds keep their current value.
    The merged result is validated by GridConfig before it is returned, so
    an invalid partial never yields a config.

    Raises:
        ValueError: Unknown field names or a merged config that violates
            the GridConfig invariants
    """
    unknown = set(partial) - _GRID_FIELDS
    if unknown:
        raise ValueError(f"Unknown GridConfig fields: {sorted(unknown)}")

    changes = dict(partial)
    range_update = changes.get("price_range")
    if isinstance(range_update, Mapping):
        unknown_range = set(range_update) - _RANGE_FIELDS
        if unknown_range:
            raise ValueError(f"Unknown PriceRange fields: {sorted(unknown_range)}")
        changes["price_range"] = dataclasses.replace(config.price_range, **range_update)

    merged = dataclasses.replace(config, **changes)
    logger.debug("Merged grid config fields %s for %s", sorted(partial), merged.symbol)
    return merged
