"""Configuration models for pnl_report.

Loads report configuration from YAML file with Pydantic validation.
"""

import dataclasses
import os
import re
from datetime import datetime, timedelta
from decimal import Decimal
from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from gridpnl import (
    CALCULATION_CONSTANTS,
    DirectionType,
    GridConfig,
    HiddenCosts,
    InfrastructureCosts,
    OpportunityCosts,
    Position,
    PriceRange,
    RiskCosts,
    TotalCosts,
    TradingCosts,
)

from pnl_report.loader import to_utc


def _to_decimal(v):
    """Convert str/int/float to Decimal (floats via str to keep their digits)."""
    if isinstance(v, str):
        return Decimal(v)
    if isinstance(v, (int, float)):
        return Decimal(str(v))
    return v


_SYMBOL_PATTERN = re.compile(r"^[A-Z0-9]{4,20}$")


class PriceRangeConfig(BaseModel):
    upper: Decimal
    lower: Decimal

    @field_validator("upper", "lower", mode="before")
    @classmethod
    def parse_decimals(cls, v):
        return _to_decimal(v)

    @model_validator(mode="after")
    def check_order(self):
        if self.upper <= self.lower:
            raise ValueError(f"price_range.upper ({self.upper}) must be greater than lower ({self.lower})")
        return self


class GridSettings(BaseModel):
    """Grid parameters (mirrors gridpnl.GridConfig)."""

    symbol: str = Field(..., description="Trading pair (e.g., BTCUSDT)")
    price_range: PriceRangeConfig
    grid_levels: int = Field(..., ge=1, description="Number of grid levels")
    grid_spacing: Decimal = Field(..., gt=0, description="Price distance between levels")
    base_order_size: Decimal = Field(..., gt=0, description="Quote notional per grid order")
    max_positions: int = Field(..., ge=1, description="Max concurrently open grid orders")

    @field_validator("grid_spacing", "base_order_size", mode="before")
    @classmethod
    def parse_decimals(cls, v):
        return _to_decimal(v)

    @field_validator("symbol")
    @classmethod
    def validate_symbol_format(cls, v: str) -> str:
        if not _SYMBOL_PATTERN.match(v):
            raise ValueError(
                f"Invalid symbol format '{v}'. "
                "Expected uppercase alphanumeric, 4-20 chars (e.g., BTCUSDT)."
            )
        return v

    def to_grid_config(self) -> GridConfig:
        return GridConfig(
            symbol=self.symbol,
            price_range=PriceRange(upper=self.price_range.upper, lower=self.price_range.lower),
            grid_levels=self.grid_levels,
            grid_spacing=self.grid_spacing,
            base_order_size=self.base_order_size,
            max_positions=self.max_positions,
        )


_COST_CATEGORIES = {
    "trading": TradingCosts,
    "infrastructure": InfrastructureCosts,
    "opportunity": OpportunityCosts,
    "risk": RiskCosts,
    "hidden": HiddenCosts,
}


class CostsConfig(BaseModel):
    """Cost amounts per category, keyed by the category's field names."""

    trading: dict[str, Decimal] = Field(default_factory=dict)
    infrastructure: dict[str, Decimal] = Field(default_factory=dict)
    opportunity: dict[str, Decimal] = Field(default_factory=dict)
    risk: dict[str, Decimal] = Field(default_factory=dict)
    hidden: dict[str, Decimal] = Field(default_factory=dict)

    @field_validator("*", mode="before")
    @classmethod
    def parse_amounts(cls, v):
        if isinstance(v, dict):
            return {k: _to_decimal(amount) for k, amount in v.items()}
        return v

    @model_validator(mode="after")
    def check_field_names(self):
        for name, category in _COST_CATEGORIES.items():
            allowed = {f.name for f in dataclasses.fields(category)}
            unknown = set(getattr(self, name)) - allowed
            if unknown:
                raise ValueError(f"Unknown {name} cost fields: {sorted(unknown)}")
        return self

    def to_total_costs(self) -> TotalCosts:
        return TotalCosts(**{
            name: category(**getattr(self, name))
            for name, category in _COST_CATEGORIES.items()
        })


class PositionConfig(BaseModel):
    """Open position snapshot."""

    symbol: str
    side: Literal["long", "short"]
    size: Decimal = Field(..., ge=0)
    entry_price: Decimal = Field(..., ge=0)
    current_price: Decimal = Field(..., ge=0)
    timestamp: datetime

    @field_validator("size", "entry_price", "current_price", mode="before")
    @classmethod
    def parse_decimals(cls, v):
        return _to_decimal(v)

    @field_validator("timestamp")
    @classmethod
    def normalize_timestamp(cls, v: datetime) -> datetime:
        return to_utc(v)

    def to_position(self) -> Position:
        return Position(
            symbol=self.symbol,
            side=DirectionType(self.side),
            size=self.size,
            entry_price=self.entry_price,
            current_price=self.current_price,
            timestamp=self.timestamp,
        )


class ReportConfig(BaseModel):
    """Root configuration for pnl_report."""

    grid: GridSettings
    costs: CostsConfig = Field(default_factory=CostsConfig)
    positions: list[PositionConfig] = Field(default_factory=list)
    trades_path: Optional[str] = Field(default=None, description="CSV file with executed trades")

    start: Optional[datetime] = Field(default=None, description="Report period start (default: first trade)")
    end: Optional[datetime] = Field(default=None, description="Report period end (default: last trade)")

    risk_free_rate: float = Field(default=CALCULATION_CONSTANTS["DEFAULT_RISK_FREE_RATE"], ge=0)
    var_confidence: float = Field(default=CALCULATION_CONSTANTS["DEFAULT_VAR_CONFIDENCE"], gt=0, lt=1)
    return_interval_hours: float = Field(default=24.0, gt=0, description="Bucket width of the return series")
    max_drawdown_limit: float = Field(
        default=CALCULATION_CONSTANTS["DEFAULT_MAX_DRAWDOWN_LIMIT"],
        gt=0,
        le=1,
        description="Report fails when the max drawdown exceeds this fraction",
    )

    @field_validator("start", "end")
    @classmethod
    def normalize_bounds(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_utc(v) if v is not None else v

    @model_validator(mode="after")
    def check_period(self):
        if self.start and self.end and self.end < self.start:
            raise ValueError(f"end ({self.end.isoformat()}) is before start ({self.start.isoformat()})")
        return self

    @property
    def return_interval(self) -> timedelta:
        return timedelta(hours=self.return_interval_hours)


def load_config(config_path: Optional[str] = None) -> ReportConfig:
    """Load configuration from YAML file.

    Args:
        config_path: Path to config file. If None, checks:
            1. PNL_REPORT_CONFIG_PATH environment variable
            2. conf/pnl_report.yaml
            3. pnl_report.yaml

    Returns:
        Validated ReportConfig

    Raises:
        FileNotFoundError: If no config file found
        ValueError: If config validation fails
    """
    if config_path is None:
        config_path = os.environ.get("PNL_REPORT_CONFIG_PATH")

    if config_path is None:
        search_paths = [
            Path("conf/pnl_report.yaml"),
            Path("pnl_report.yaml"),
        ]
        for path in search_paths:
            if path.exists():
                config_path = str(path)
                break

    if config_path is None:
        raise FileNotFoundError(
            "No config file found. Set PNL_REPORT_CONFIG_PATH or create conf/pnl_report.yaml"
        )

    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(path) as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping, got {type(data).__name__}")

    config = ReportConfig(**data)

    # Relative trade paths are resolved against the config file location
    if config.trades_path and not Path(config.trades_path).is_absolute():
        config.trades_path = str(path.parent / config.trades_path)

    return config
