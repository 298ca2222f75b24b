"""Tests for efficiency and grid metrics."""

from datetime import timedelta
from decimal import Decimal

import pytest

from gridpnl.calculator import calculate_pnl
from gridpnl.costs import TotalCosts
from gridpnl.efficiency import (
    calculate_efficiency_metrics,
    calculate_grid_metrics,
    theoretical_max_cycles,
)
from gridpnl.ledger import match_trades
from gridpnl.market import TimeWindow


@pytest.fixture
def two_cycles(make_trade, ts):
    """A winning cycle (+10) followed by a losing one (-5), no fees."""
    return [
        make_trade(trade_id="b1", side="Buy", price="10", qty="10", timestamp=ts),
        make_trade(trade_id="s1", side="Sell", price="11", qty="10", timestamp=ts + timedelta(hours=1)),
        make_trade(trade_id="b2", side="Buy", price="10.5", qty="10", timestamp=ts + timedelta(hours=2)),
        make_trade(trade_id="s2", side="Sell", price="10", qty="10", timestamp=ts + timedelta(hours=3)),
    ]


@pytest.fixture
def two_cycles_pnl(two_cycles, grid_config, day_window):
    return calculate_pnl(two_cycles, [], grid_config, TotalCosts(), day_window, risk_free_rate=0.0)


class TestEfficiencyMetrics:
    """Tests for calculate_efficiency_metrics."""

    def test_metrics(self, two_cycles, two_cycles_pnl, grid_config, day_window):
        metrics = calculate_efficiency_metrics(two_cycles, two_cycles_pnl, day_window, grid_config)

        assert two_cycles_pnl.net_profit == Decimal("5")
        assert metrics.profit_factor == pytest.approx(2.0)
        assert metrics.recovery_factor == pytest.approx(1.0)
        assert metrics.trades_per_day == pytest.approx(4.0)
        assert metrics.average_profit_per_trade == Decimal("1.25")
        # price path 1 + 0.5 + 0.5 = 2 -> 4 spacings of 0.5; 1 successful cycle
        assert metrics.grid_efficiency == pytest.approx(0.25)

    def test_grid_efficiency_without_config(self, two_cycles, two_cycles_pnl, day_window):
        metrics = calculate_efficiency_metrics(two_cycles, two_cycles_pnl, day_window)
        assert metrics.grid_efficiency == pytest.approx(0.5)

    def test_no_losses(self, round_trip, grid_config, day_window):
        pnl = calculate_pnl(round_trip, [], grid_config, TotalCosts(), day_window)
        metrics = calculate_efficiency_metrics(round_trip, pnl, day_window, grid_config)

        assert metrics.profit_factor == 0.0
        # realized curve only dips by the first fee
        assert metrics.recovery_factor == pytest.approx(float(pnl.net_profit) / 0.1)

    def test_zero_length_window(self, make_position, grid_config, ts):
        window = TimeWindow(start=ts, end=ts)
        pnl = calculate_pnl([], [make_position()], grid_config, TotalCosts(), window)
        metrics = calculate_efficiency_metrics([], pnl, window, grid_config)

        assert metrics.trades_per_day == 0.0
        assert metrics.average_profit_per_trade == Decimal("0")
        assert metrics.grid_efficiency == 0.0

    def test_theoretical_max_cycles(self, two_cycles, grid_config):
        ledger = match_trades(two_cycles)
        assert theoretical_max_cycles(ledger, grid_config) == 4
        assert theoretical_max_cycles(ledger) == 2

    def test_fill_closing_several_lots_counts_once(self, make_trade, grid_config, day_window, ts):
        trades = [
            make_trade(trade_id=f"b{i}", side="Buy", price="10", qty="1", timestamp=ts + timedelta(minutes=i))
            for i in range(3)
        ]
        trades.append(make_trade(trade_id="s1", side="Sell", price="10.5", qty="3",
                                 timestamp=ts + timedelta(hours=1)))
        pnl = calculate_pnl(trades, [], grid_config, TotalCosts(), day_window)

        metrics = calculate_efficiency_metrics(trades, pnl, day_window, grid_config)

        assert pnl.grid_profit.successful_cycles == 3
        assert metrics.grid_efficiency == pytest.approx(1.0)

    def test_closes_below_spacing_stay_within_bounds(self, make_trade, grid_config, day_window, ts):
        # path 0.9 allows one spacing of 0.5, but two fills closed at a profit
        trades = [
            make_trade(trade_id="b1", side="Buy", price="10", qty="1", timestamp=ts),
            make_trade(trade_id="s1", side="Sell", price="10.3", qty="1", timestamp=ts + timedelta(hours=1)),
            make_trade(trade_id="b2", side="Buy", price="10", qty="1", timestamp=ts + timedelta(hours=2)),
            make_trade(trade_id="s2", side="Sell", price="10.3", qty="1", timestamp=ts + timedelta(hours=3)),
        ]
        pnl = calculate_pnl(trades, [], grid_config, TotalCosts(), day_window)

        metrics = calculate_efficiency_metrics(trades, pnl, day_window, grid_config)

        assert theoretical_max_cycles(match_trades(trades), grid_config) == 2
        assert metrics.grid_efficiency == pytest.approx(1.0)


class TestGridMetrics:
    """Tests for calculate_grid_metrics."""

    def test_metrics(self, two_cycles, two_cycles_pnl, make_position, grid_config, day_window):
        positions = [make_position(size="2", entry_price="10", current_price="11")]
        efficiency = calculate_efficiency_metrics(two_cycles, two_cycles_pnl, day_window, grid_config)

        metrics = calculate_grid_metrics(two_cycles, positions, grid_config, efficiency, day_window)

        assert metrics.grid_efficiency == efficiency.grid_efficiency
        # entry value 20 over capital 1000 * min(10, 5)
        assert metrics.capital_utilization == pytest.approx(20 / 5000)
        assert metrics.cycle_completion_rate == pytest.approx(1.0)
        assert metrics.average_grid_spacing == Decimal("2") / Decimal("3")
        assert metrics.max_capital_at_risk == Decimal("105")

    def test_open_inventory(self, make_trade, grid_config, day_window, ts):
        trades = [
            make_trade(trade_id="b1", side="Buy", price="10", qty="4", timestamp=ts),
            make_trade(trade_id="s1", side="Sell", price="10.5", qty="1", timestamp=ts + timedelta(hours=1)),
        ]
        pnl = calculate_pnl(trades, [], grid_config, TotalCosts(), day_window)
        efficiency = calculate_efficiency_metrics(trades, pnl, day_window, grid_config)

        metrics = calculate_grid_metrics(trades, [], grid_config, efficiency, day_window)

        assert metrics.cycle_completion_rate == pytest.approx(0.25)
        assert metrics.max_capital_at_risk == Decimal("40")

    def test_no_trades_falls_back_to_config_spacing(self, make_position, grid_config, day_window):
        positions = [make_position(size="3", entry_price="10", current_price="12")]
        pnl = calculate_pnl([], positions, grid_config, TotalCosts(), day_window)
        efficiency = calculate_efficiency_metrics([], pnl, day_window, grid_config)

        metrics = calculate_grid_metrics([], positions, grid_config, efficiency, day_window)

        assert metrics.average_grid_spacing == grid_config.grid_spacing
        assert metrics.cycle_completion_rate == 0.0
        assert metrics.max_capital_at_risk == Decimal("36")
