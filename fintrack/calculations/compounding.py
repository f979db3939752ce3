"""
Compounding Calculations

Fixed deposit maturity, SIP future value and plain compound growth.
Formulas must stay exactly as written: saved calculations are compared
against them.
"""

import math
from enum import Enum
from typing import Optional
from dataclasses import dataclass

from fintrack.calculations.errors import InvalidInput


class Frequency(str, Enum):
    """Contribution / compounding frequency."""

    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


PERIODS_PER_YEAR = {
    Frequency.HOURLY: 8760,  # 365 * 24
    Frequency.DAILY: 365,
    Frequency.WEEKLY: 52,
    Frequency.MONTHLY: 12,
    Frequency.QUARTERLY: 4,
    Frequency.YEARLY: 1,
}

# Installments per month used by the SIP planner (approximate for sub-monthly)
INSTALLMENTS_PER_MONTH = {
    Frequency.HOURLY: 30 * 24,
    Frequency.DAILY: 30,
    Frequency.WEEKLY: 4.33,
    Frequency.MONTHLY: 1,
    Frequency.QUARTERLY: 1 / 3,
    Frequency.YEARLY: 1 / 12,
}


@dataclass(frozen=True)
class FDResult:
    """Fixed deposit maturity summary."""

    maturity_amount: float
    total_interest: float
    comparison_rate: Optional[float] = None
    comparison_maturity_amount: Optional[float] = None


def _as_frequency(frequency) -> Optional[Frequency]:
    try:
        return Frequency(frequency)
    except ValueError:
        return None


def periods_per_year(frequency) -> int:
    """Number of periods per year for a frequency name; unknown names count as monthly."""
    freq = _as_frequency(frequency)
    if freq is None:
        return PERIODS_PER_YEAR[Frequency.MONTHLY]
    return PERIODS_PER_YEAR[freq]


def fd_maturity(
    principal: float,
    annual_rate_percent: float,
    years: float,
    compounding_frequency: int = 12,
) -> float:
    """
    Calculate fixed deposit maturity amount.

    A = P * (1 + r/n)^(n*t)

    Args:
        principal: Amount deposited
        annual_rate_percent: Annual rate in percent (e.g., 6.5 for 6.5%)
        years: Term in years (may be fractional)
        compounding_frequency: Compounding periods per year

    Returns:
        Maturity amount

    Raises:
        InvalidInput: Non-positive years/frequency or negative principal/rate
    """
    if years <= 0:
        raise InvalidInput(f"years must be positive, got {years}")
    if compounding_frequency < 1:
        raise InvalidInput(
            f"compounding_frequency must be at least 1, got {compounding_frequency}"
        )
    if principal < 0:
        raise InvalidInput(f"principal cannot be negative, got {principal}")
    if annual_rate_percent < 0:
        raise InvalidInput(f"annual rate cannot be negative, got {annual_rate_percent}")

    rate = annual_rate_percent / 100
    return principal * (1 + rate / compounding_frequency) ** (compounding_frequency * years)


def fd_interest(principal: float, maturity_amount: float) -> float:
    """Calculate total interest earned on a fixed deposit."""
    return maturity_amount - principal


def calculate_fd(
    principal: float,
    annual_rate_percent: float,
    years: float,
    compounding_frequency: int = 12,
    comparison_rate: Optional[float] = None,
) -> FDResult:
    """
    Fixed deposit maturity, optionally compared against another annual rate.

    The comparison maturity (e.g. at a fund's XIRR) is only computed for a
    positive comparison rate, using the same term and compounding.
    """
    maturity = fd_maturity(principal, annual_rate_percent, years, compounding_frequency)

    comparison_maturity = None
    if comparison_rate is not None and comparison_rate > 0:
        comparison_maturity = fd_maturity(
            principal, comparison_rate, years, compounding_frequency
        )

    return FDResult(
        maturity_amount=maturity,
        total_interest=fd_interest(principal, maturity),
        comparison_rate=comparison_rate,
        comparison_maturity_amount=comparison_maturity,
    )


def sip_future_value(
    periodic_amount: float,
    annual_rate_percent: float,
    periods_per_year: float,
    total_periods: int,
) -> float:
    """
    Calculate future value of a SIP (ordinary annuity).

    FV = P * [(1 + i)^n - 1] / i, with i = annual_rate_percent / 100 / periods_per_year

    Args:
        periodic_amount: Contribution per period
        annual_rate_percent: Expected annual return in percent
        periods_per_year: Contributions per year
        total_periods: Number of contributions

    Returns:
        Future value; exactly periodic_amount * total_periods at a zero rate
    """
    if periods_per_year <= 0:
        raise InvalidInput(f"periods_per_year must be positive, got {periods_per_year}")
    if total_periods < 0:
        raise InvalidInput(f"total_periods cannot be negative, got {total_periods}")

    periodic_rate = annual_rate_percent / 100 / periods_per_year

    if periodic_rate == 0:
        return periodic_amount * total_periods

    return periodic_amount * (((1 + periodic_rate) ** total_periods - 1) / periodic_rate)


def sip_installments(duration_months: float, frequency) -> int:
    """Number of SIP installments over a duration; unknown frequencies count as monthly."""
    freq = _as_frequency(frequency) or Frequency.MONTHLY
    return math.floor(duration_months * INSTALLMENTS_PER_MONTH[freq])


def sip_total_invested(amount: float, duration_months: float, frequency) -> float:
    """Total amount contributed over the SIP duration."""
    return sip_installments(duration_months, frequency) * amount


def compound_final_value(initial_amount: float, rate_percent: float, years: float) -> float:
    """Final value of a lump sum growing at an annual rate: A = P * (1 + r)^t."""
    return initial_amount * (1 + rate_percent / 100) ** years
