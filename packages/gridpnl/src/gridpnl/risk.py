"""Risk and return metrics from a periodic return series.

Returns are fractional (0.01 = +1%) and must all cover the same period
length; ``periods_per_year`` annualizes them (365 for a daily series on a
24/7 market, 252 for exchange trading days).
"""

import logging
import math
import statistics
from dataclasses import dataclass
from typing import Sequence

from gridpnl.constants import DAYS_PER_YEAR, DEFAULT_RISK_FREE_RATE, DEFAULT_VAR_CONFIDENCE
from gridpnl.errors import InsufficientData
from gridpnl.metrics import ReturnMetrics, RiskMetrics
from gridpnl.pnl import safe_ratio

logger = logging.getLogger(__name__)


@dataclass
class DrawdownProfile:
    """Largest peak-to-trough decline of the compounded equity index."""

    max_drawdown: float = 0.0
    peak_index: int = 0
    trough_index: int = 0
    recovery_periods: int = 0
    recovered: bool = True


def _check_returns(returns: Sequence[float], periods_per_year: float) -> None:
    if not returns:
        raise InsufficientData("return series is empty")
    if periods_per_year <= 0:
        raise ValueError(f"periods_per_year must be positive, got {periods_per_year}")


def equity_index(returns: Sequence[float]) -> list[float]:
    """Compounded equity starting at 1.0; one more point than returns."""
    equity = [1.0]
    for r in returns:
        equity.append(equity[-1] * (1.0 + r))
    return equity


def drawdown_profile(returns: Sequence[float]) -> DrawdownProfile:
    """Locate the maximum drawdown and how long it took to recover.

    Recovery is measured from the trough to the first later point at or
    above the peak that preceded it. If that never happens, the periods
    elapsed until the end of the series are reported with recovered=False.
    """
    equity = equity_index(returns)
    profile = DrawdownProfile()

    peak = equity[0]
    peak_idx = 0
    for i, value in enumerate(equity):
        if value >= peak:
            peak = value
            peak_idx = i
            continue
        drawdown = (peak - value) / peak
        if drawdown > profile.max_drawdown:
            profile.max_drawdown = drawdown
            profile.peak_index = peak_idx
            profile.trough_index = i

    if profile.max_drawdown == 0.0:
        return profile

    prior_peak = equity[profile.peak_index]
    for j in range(profile.trough_index + 1, len(equity)):
        if equity[j] >= prior_peak:
            profile.recovery_periods = j - profile.trough_index
            return profile

    profile.recovery_periods = len(equity) - 1 - profile.trough_index
    profile.recovered = False
    return profile


def historical_var(returns: Sequence[float], confidence: float = DEFAULT_VAR_CONFIDENCE) -> float:
    """Historical value-at-risk as a non-negative loss fraction.

    Takes the (1 - confidence) quantile of the returns with linear
    interpolation between order statistics.
    """
    if not 0 < confidence < 1:
        raise ValueError(f"confidence must be between 0 and 1, got {confidence}")
    ordered = sorted(returns)
    pos = (1.0 - confidence) * (len(ordered) - 1)
    lo = math.floor(pos)
    hi = min(lo + 1, len(ordered) - 1)
    quantile = ordered[lo] + (ordered[hi] - ordered[lo]) * (pos - lo)
    return max(0.0, -quantile)


def downside_deviation(returns: Sequence[float], target: float = 0.0) -> float:
    """Root-mean-square shortfall below *target* (per period)."""
    shortfalls = [min(0.0, r - target) ** 2 for r in returns]
    return math.sqrt(sum(shortfalls) / len(shortfalls))


def calculate_risk_metrics(
    returns: Sequence[float],
    risk_free_rate: float = DEFAULT_RISK_FREE_RATE,
    confidence: float = DEFAULT_VAR_CONFIDENCE,
    periods_per_year: float = DAYS_PER_YEAR,
) -> RiskMetrics:
    """Compute RiskMetrics from periodic returns.

    Args:
        returns: Fractional returns, oldest first
        risk_free_rate: Annual rate; its per-period share is the target
            for downside deviation
        confidence: VaR confidence level
        periods_per_year: Number of return periods in a year

    Raises:
        InsufficientData: If returns is empty
    """
    _check_returns(returns, periods_per_year)

    profile = drawdown_profile(returns)

    wins = [r for r in returns if r > 0]
    losses = [r for r in returns if r < 0]
    if wins and losses:
        win_loss_ratio = statistics.mean(wins) / abs(statistics.mean(losses))
    else:
        win_loss_ratio = 0.0

    metrics = RiskMetrics(
        maximum_drawdown=profile.max_drawdown,
        value_at_risk=historical_var(returns, confidence),
        win_rate=len(wins) / len(returns),
        average_win_loss_ratio=win_loss_ratio,
        recovery_time=profile.recovery_periods,
        recovered=profile.recovered,
        downside_deviation=downside_deviation(returns, risk_free_rate / periods_per_year),
    )
    if not profile.recovered:
        logger.debug(
            "Drawdown of %.4f not recovered after %d periods",
            profile.max_drawdown, profile.recovery_periods,
        )
    return metrics


def calculate_return_metrics(
    returns: Sequence[float],
    risk_free_rate: float = DEFAULT_RISK_FREE_RATE,
    periods_per_year: float = DAYS_PER_YEAR,
) -> ReturnMetrics:
    """Compute annualized return ratios from periodic returns.

    Sharpe and Sortino use the mean per-period excess return over
    ``risk_free_rate / periods_per_year``. Ratios with a zero denominator
    are reported as 0.0.

    Raises:
        InsufficientData: If returns is empty
    """
    _check_returns(returns, periods_per_year)

    n = len(returns)
    growth = equity_index(returns)[-1]
    annual_return = growth ** (periods_per_year / n) - 1.0 if growth > 0 else -1.0

    std = statistics.stdev(returns) if n >= 2 else 0.0
    period_rf = risk_free_rate / periods_per_year
    excess = statistics.mean(returns) - period_rf
    annualizer = math.sqrt(periods_per_year)

    return ReturnMetrics(
        sharpe_ratio=safe_ratio(excess, std) * annualizer,
        sortino_ratio=safe_ratio(excess, downside_deviation(returns, period_rf)) * annualizer,
        calmar_ratio=safe_ratio(annual_return, drawdown_profile(returns).max_drawdown),
        annual_return=annual_return,
        volatility=std * annualizer,
    )
