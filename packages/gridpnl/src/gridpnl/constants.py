"""Calendar, fee and risk defaults shared by the calculators."""

from types import MappingProxyType

DAYS_PER_YEAR = 365
TRADING_DAYS_PER_YEAR = 252
HOURS_PER_DAY = 24
MINUTES_PER_HOUR = 60
SECONDS_PER_MINUTE = 60
SECONDS_PER_DAY = HOURS_PER_DAY * MINUTES_PER_HOUR * SECONDS_PER_MINUTE

# Annual rate
DEFAULT_RISK_FREE_RATE = 0.02

# Fee rates per fill (0.001 = 0.1%)
DEFAULT_MAKER_FEE = 0.001
DEFAULT_TAKER_FEE = 0.0015

# Risk parameters
DEFAULT_VAR_CONFIDENCE = 0.95
DEFAULT_MAX_DRAWDOWN_LIMIT = 0.2

CALCULATION_CONSTANTS = MappingProxyType({
    "DAYS_PER_YEAR": DAYS_PER_YEAR,
    "TRADING_DAYS_PER_YEAR": TRADING_DAYS_PER_YEAR,
    "HOURS_PER_DAY": HOURS_PER_DAY,
    "MINUTES_PER_HOUR": MINUTES_PER_HOUR,
    "SECONDS_PER_MINUTE": SECONDS_PER_MINUTE,
    "DEFAULT_RISK_FREE_RATE": DEFAULT_RISK_FREE_RATE,
    "DEFAULT_MAKER_FEE": DEFAULT_MAKER_FEE,
    "DEFAULT_TAKER_FEE": DEFAULT_TAKER_FEE,
    "DEFAULT_VAR_CONFIDENCE": DEFAULT_VAR_CONFIDENCE,
    "DEFAULT_MAX_DRAWDOWN_LIMIT": DEFAULT_MAX_DRAWDOWN_LIMIT,
})
