"""
Cost taxonomy for grid trading.

Every field is a quote-currency amount. Each category sums its own fields
and TotalCosts sums the categories, so the aggregate can never disagree
with its components.
"""

import dataclasses
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable

from gridpnl.market import Trade
from gridpnl.pnl import sum_decimals

_ZERO = Decimal("0")


class _CostCategory:
    """Mixin summing every field of a cost dataclass."""

    @property
    def total(self) -> Decimal:
        return sum_decimals(getattr(self, f.name) for f in dataclasses.fields(self))


@dataclass(frozen=True)
class TradingCosts(_CostCategory):
    """
    Execution costs.

    Fill fees are already deducted from realized profit; buy_fees and
    sell_fees are for fees billed outside the fills (e.g. monthly invoices).
    """
    buy_fees: Decimal = _ZERO
    sell_fees: Decimal = _ZERO
    spread_cost: Decimal = _ZERO
    slippage_cost: Decimal = _ZERO
    funding_cost: Decimal = _ZERO  # leveraged positions

    @classmethod
    def estimate(
        cls,
        trades: Iterable[Trade],
        spread_rate: Decimal = _ZERO,
        slippage_rate: Decimal = _ZERO,
        funding_cost: Decimal = _ZERO,
    ) -> "TradingCosts":
        """Estimate spread and slippage from traded notional.

        spread_cost = notional * spread_rate / 2 (half spread crossed per fill)
        slippage_cost = notional * slippage_rate
        """
        notional = sum_decimals(t.notional for t in trades)
        return cls(
            spread_cost=notional * spread_rate / 2,
            slippage_cost=notional * slippage_rate,
            funding_cost=funding_cost,
        )


@dataclass(frozen=True)
class InfrastructureCosts(_CostCategory):
    vps_cost: Decimal = _ZERO
    api_cost: Decimal = _ZERO
    software_licenses: Decimal = _ZERO
    network_costs: Decimal = _ZERO


@dataclass(frozen=True)
class OpportunityCosts(_CostCategory):
    """Return forgone by keeping capital in the grid."""
    alternative_investment_return: Decimal = _ZERO
    time_value: Decimal = _ZERO  # cost of time spent managing
    idle_capital_cost: Decimal = _ZERO


@dataclass(frozen=True)
class RiskCosts(_CostCategory):
    drawdown_impact: Decimal = _ZERO
    volatility_penalty: Decimal = _ZERO
    correlation_risk: Decimal = _ZERO
    liquidity_risk: Decimal = _ZERO


@dataclass(frozen=True)
class HiddenCosts(_CostCategory):
    rebalancing_cost: Decimal = _ZERO
    gap_risk: Decimal = _ZERO
    liquidity_cost: Decimal = _ZERO
    tax_implications: Decimal = _ZERO


@dataclass(frozen=True)
class TotalCosts:
    """All cost categories with their aggregate."""
    trading: TradingCosts = field(default_factory=TradingCosts)
    infrastructure: InfrastructureCosts = field(default_factory=InfrastructureCosts)
    opportunity: OpportunityCosts = field(default_factory=OpportunityCosts)
    risk: RiskCosts = field(default_factory=RiskCosts)
    hidden: HiddenCosts = field(default_factory=HiddenCosts)

    @property
    def categories(self) -> dict[str, _CostCategory]:
        return {
            "trading": self.trading,
            "infrastructure": self.infrastructure,
            "opportunity": self.opportunity,
            "risk": self.risk,
            "hidden": self.hidden,
        }

    @property
    def total_amount(self) -> Decimal:
        return sum_decimals(c.total for c in self.categories.values())
