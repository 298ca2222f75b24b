"""Tests for the cost taxonomy."""

from decimal import Decimal

from gridpnl.costs import (
    HiddenCosts,
    InfrastructureCosts,
    OpportunityCosts,
    RiskCosts,
    TotalCosts,
    TradingCosts,
)


def _full_costs():
    return TotalCosts(
        trading=TradingCosts(
            buy_fees=Decimal("1"), sell_fees=Decimal("2"), spread_cost=Decimal("0.5"),
            slippage_cost=Decimal("0.25"), funding_cost=Decimal("0.25"),
        ),
        infrastructure=InfrastructureCosts(
            vps_cost=Decimal("10"), api_cost=Decimal("5"),
            software_licenses=Decimal("3"), network_costs=Decimal("2"),
        ),
        opportunity=OpportunityCosts(
            alternative_investment_return=Decimal("4"), time_value=Decimal("6"),
            idle_capital_cost=Decimal("1"),
        ),
        risk=RiskCosts(
            drawdown_impact=Decimal("1.5"), volatility_penalty=Decimal("0.5"),
            correlation_risk=Decimal("0"), liquidity_risk=Decimal("1"),
        ),
        hidden=HiddenCosts(
            rebalancing_cost=Decimal("2"), gap_risk=Decimal("1"),
            liquidity_cost=Decimal("0.5"), tax_implications=Decimal("7.5"),
        ),
    )


class TestCategoryTotals:
    """Each category sums its own fields."""

    def test_trading_total(self):
        assert _full_costs().trading.total == Decimal("4")

    def test_infrastructure_total(self):
        assert _full_costs().infrastructure.total == Decimal("20")

    def test_opportunity_total(self):
        assert _full_costs().opportunity.total == Decimal("11")

    def test_risk_total(self):
        assert _full_costs().risk.total == Decimal("3")

    def test_hidden_total(self):
        assert _full_costs().hidden.total == Decimal("11")

    def test_empty_category(self):
        assert TradingCosts().total == Decimal("0")


class TestTotalCosts:
    """Aggregate always matches the categories."""

    def test_total_amount(self):
        assert _full_costs().total_amount == Decimal("49")

    def test_total_equals_sum_of_categories(self):
        costs = _full_costs()
        assert costs.total_amount == sum(c.total for c in costs.categories.values())

    def test_default_is_zero(self):
        assert TotalCosts().total_amount == Decimal("0")

    def test_partial_categories(self):
        costs = TotalCosts(infrastructure=InfrastructureCosts(vps_cost=Decimal("15")))
        assert costs.total_amount == Decimal("15")


class TestTradingCostsEstimate:
    """Tests for TradingCosts.estimate."""

    def test_spread_and_slippage(self, round_trip):
        # notional = 100*10 + 100*12 = 2200
        costs = TradingCosts.estimate(
            round_trip, spread_rate=Decimal("0.001"), slippage_rate=Decimal("0.0005"),
        )
        assert costs.spread_cost == Decimal("1.1")
        assert costs.slippage_cost == Decimal("1.1")
        assert costs.buy_fees == Decimal("0")
        assert costs.sell_fees == Decimal("0")

    def test_no_trades(self):
        costs = TradingCosts.estimate([], spread_rate=Decimal("0.01"))
        assert costs.total == Decimal("0")
