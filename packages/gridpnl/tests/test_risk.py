"""Tests for risk and return metrics."""

import math

import pytest

from gridpnl.errors import InsufficientData
from gridpnl.risk import (
    calculate_return_metrics,
    calculate_risk_metrics,
    downside_deviation,
    drawdown_profile,
    equity_index,
    historical_var,
)


class TestDrawdownProfile:
    """Tests for drawdown_profile."""

    def test_equity_index(self):
        assert equity_index([0.1, -0.5]) == pytest.approx([1.0, 1.1, 0.55])

    def test_recovered_drawdown(self):
        # equity: 1, 1.1, 0.88, 0.924, 1.1088
        profile = drawdown_profile([0.1, -0.2, 0.05, 0.2])

        assert profile.max_drawdown == pytest.approx(0.2)
        assert profile.peak_index == 1
        assert profile.trough_index == 2
        assert profile.recovery_periods == 2
        assert profile.recovered is True

    def test_unrecovered_drawdown(self):
        # equity: 1, 1.1, 0.55, 0.605
        profile = drawdown_profile([0.1, -0.5, 0.1])

        assert profile.max_drawdown == pytest.approx(0.5)
        assert profile.recovery_periods == 1
        assert profile.recovered is False

    def test_no_drawdown(self):
        profile = drawdown_profile([0.01, 0.02])

        assert profile.max_drawdown == 0.0
        assert profile.recovery_periods == 0
        assert profile.recovered is True

    def test_drawdown_from_start(self):
        profile = drawdown_profile([-0.1])
        assert profile.max_drawdown == pytest.approx(0.1)
        assert profile.peak_index == 0


class TestHistoricalVar:
    """Tests for historical_var."""

    def test_interpolated_quantile(self):
        # sorted: -0.2, 0.05, 0.1, 0.2; pos = 0.05 * 3 = 0.15
        var = historical_var([0.1, -0.2, 0.05, 0.2], confidence=0.95)
        assert var == pytest.approx(0.1625)

    def test_all_positive_is_zero(self):
        assert historical_var([0.01, 0.02], confidence=0.95) == 0.0

    def test_single_observation(self):
        assert historical_var([-0.03]) == pytest.approx(0.03)

    def test_invalid_confidence(self):
        with pytest.raises(ValueError):
            historical_var([0.01], confidence=1.0)


class TestCalculateRiskMetrics:
    """Tests for calculate_risk_metrics."""

    def test_metrics(self):
        metrics = calculate_risk_metrics([0.1, -0.2, 0.05, 0.2], risk_free_rate=0.0)

        assert metrics.maximum_drawdown == pytest.approx(0.2)
        assert metrics.value_at_risk == pytest.approx(0.1625)
        assert metrics.win_rate == 0.75
        assert metrics.average_win_loss_ratio == pytest.approx((0.35 / 3) / 0.2)
        assert metrics.recovery_time == 2
        assert metrics.recovered is True
        assert metrics.downside_deviation == pytest.approx(0.1)

    def test_no_losses(self):
        metrics = calculate_risk_metrics([0.01, 0.02])

        assert metrics.win_rate == 1.0
        assert metrics.average_win_loss_ratio == 0.0
        assert metrics.maximum_drawdown == 0.0

    def test_zero_returns_are_not_wins(self):
        assert calculate_risk_metrics([0.0, 0.0, 0.01]).win_rate == pytest.approx(1 / 3)

    def test_empty_raises(self):
        with pytest.raises(InsufficientData):
            calculate_risk_metrics([], 0.02)

    def test_invalid_periods(self):
        with pytest.raises(ValueError):
            calculate_risk_metrics([0.01], periods_per_year=0)

    def test_downside_uses_period_risk_free(self):
        # per-period target = 0.365 / 365 = 0.001
        metrics = calculate_risk_metrics([0.001, 0.001], risk_free_rate=0.365)
        assert metrics.downside_deviation == pytest.approx(0.0)
        assert downside_deviation([0.0], target=0.001) == pytest.approx(0.001)


class TestCalculateReturnMetrics:
    """Tests for calculate_return_metrics."""

    def test_two_period_series(self):
        metrics = calculate_return_metrics([0.02, -0.01], risk_free_rate=0.0, periods_per_year=2)

        assert metrics.annual_return == pytest.approx(0.0098)
        assert metrics.volatility == pytest.approx(0.03)
        assert metrics.sharpe_ratio == pytest.approx(1 / 3)
        assert metrics.sortino_ratio == pytest.approx(1.0)
        assert metrics.calmar_ratio == pytest.approx(0.98)

    def test_single_return(self):
        metrics = calculate_return_metrics([0.05], risk_free_rate=0.0, periods_per_year=1)

        assert metrics.annual_return == pytest.approx(0.05)
        assert metrics.volatility == 0.0
        assert metrics.sharpe_ratio == 0.0

    def test_risk_free_reduces_sharpe(self):
        returns = [0.02, -0.01, 0.015, 0.0]
        without = calculate_return_metrics(returns, risk_free_rate=0.0, periods_per_year=12)
        with_rf = calculate_return_metrics(returns, risk_free_rate=0.12, periods_per_year=12)
        assert with_rf.sharpe_ratio < without.sharpe_ratio

    def test_total_loss(self):
        metrics = calculate_return_metrics([-1.0], risk_free_rate=0.0, periods_per_year=1)
        assert metrics.annual_return == -1.0

    def test_empty_raises(self):
        with pytest.raises(InsufficientData):
            calculate_return_metrics([])

    def test_annualization(self):
        metrics = calculate_return_metrics([0.01] * 12, risk_free_rate=0.0, periods_per_year=12)
        assert metrics.annual_return == pytest.approx(math.pow(1.01, 12) - 1)
