"""
XIRR and NPV Calculations

Implements XIRR using a continuously-compounded Newton-Raphson iteration.
The formula, tolerance and iteration cap are fixed so that rates already
saved by users can be reproduced exactly.
"""

import math
import logging
from typing import List, Optional
from datetime import date, timedelta
from dataclasses import dataclass

import numpy as np

from fintrack.calculations.errors import DegenerateInput, InvalidInput, NonConvergence

logger = logging.getLogger(__name__)

MAX_ITERATIONS = 100
TOLERANCE = 1e-4
DEFAULT_GUESS = 0.1
DAYS_PER_YEAR = 365


@dataclass(frozen=True)
class CashFlow:
    """A single dated cash flow (negative = outflow, positive = inflow)."""

    amount: float
    date: date


@dataclass(frozen=True)
class XIRRResult:
    """Outcome of a solver run."""

    rate_percent: float
    iterations: int
    converged: bool


def _year_fractions(cash_flows: List[CashFlow]) -> np.ndarray:
    """Day offsets from the first cash flow, as fractions of a 365-day year."""
    base_date = cash_flows[0].date
    days = [(cf.date - base_date).days for cf in cash_flows]
    return np.array(days, dtype=float) / DAYS_PER_YEAR


def _validate(cash_flows: List[CashFlow]) -> None:
    if len(cash_flows) < 2:
        raise InvalidInput("At least 2 cash flows required")

    for cf in cash_flows:
        if not math.isfinite(cf.amount):
            raise InvalidInput(f"Cash flow amount must be finite, got {cf.amount}")


def calculate_npv(cash_flows: List[CashFlow], rate: float) -> float:
    """
    Calculate NPV of dated cash flows under continuous compounding.

    Args:
        cash_flows: Dated cash flows; the first one is the valuation date
        rate: Annual rate as decimal (e.g., 0.10 for 10%)

    Returns:
        NPV value
    """
    if not cash_flows:
        return 0.0

    amounts = np.array([cf.amount for cf in cash_flows], dtype=float)
    years = _year_fractions(cash_flows)
    return float(np.sum(amounts * np.exp(-rate * years)))


def _npv_and_derivative(amounts: np.ndarray, years: np.ndarray, rate: float):
    """NPV and dNPV/dr for the Newton step."""
    with np.errstate(over="ignore", invalid="ignore"):
        discounted = amounts * np.exp(-rate * years)
        npv = float(np.sum(discounted))
        dnpv = float(np.sum(-years * discounted))
    return npv, dnpv


def solve_xirr(
    cash_flows: List[CashFlow],
    guess: float = DEFAULT_GUESS,
    max_iterations: int = MAX_ITERATIONS,
    tolerance: float = TOLERANCE,
) -> XIRRResult:
    """
    Run the Newton-Raphson XIRR iteration and report convergence.

    Args:
        cash_flows: At least two dated cash flows
        guess: Initial rate guess as decimal (default 0.1 = 10%)
        max_iterations: Iteration budget
        tolerance: Stop once |NPV| falls below this

    Returns:
        XIRRResult with the rate as a percentage. When the budget runs out
        the last iterate is returned with converged=False.

    Raises:
        InvalidInput: Fewer than 2 cash flows or non-finite amounts
        DegenerateInput: All flows share one date, or the derivative is zero
        NonConvergence: The iterate became NaN/Inf
    """
    _validate(cash_flows)

    amounts = np.array([cf.amount for cf in cash_flows], dtype=float)
    years = _year_fractions(cash_flows)

    if not np.any(years):
        logger.debug(f"XIRR rejected: all {len(cash_flows)} cash flows on one date")
        raise DegenerateInput("All cash flows occur on the same date")

    rate = guess

    for iteration in range(max_iterations):
        npv, dnpv = _npv_and_derivative(amounts, years, rate)

        if not (math.isfinite(npv) and math.isfinite(dnpv)):
            raise NonConvergence(
                f"XIRR diverged: NPV is not finite at rate={rate}",
                rate=rate * 100,
                iterations=iteration,
            )

        if abs(npv) < tolerance:
            return XIRRResult(rate_percent=rate * 100, iterations=iteration, converged=True)

        if dnpv == 0:
            logger.debug(f"XIRR derivative vanished at rate={rate}")
            raise DegenerateInput("XIRR calculation failed: derivative is zero")

        rate = rate - npv / dnpv

        if not math.isfinite(rate):
            raise NonConvergence(
                "XIRR diverged to a non-finite rate",
                rate=rate * 100,
                iterations=iteration + 1,
            )

    return XIRRResult(rate_percent=rate * 100, iterations=max_iterations, converged=False)


def calculate_xirr(
    cash_flows: List[CashFlow],
    guess: float = DEFAULT_GUESS,
    max_iterations: int = MAX_ITERATIONS,
    tolerance: float = TOLERANCE,
    strict: bool = False,
) -> float:
    """
    Calculate XIRR for irregular cash flows.

    Args:
        cash_flows: At least two dated cash flows
        guess: Initial guess for rate (default 0.1 = 10%)
        max_iterations: Iteration budget
        tolerance: NPV tolerance
        strict: Raise NonConvergence instead of returning a best-effort rate

    Returns:
        Annual continuously-compounded rate as a percentage (12.5 for 12.5%)
    """
    result = solve_xirr(cash_flows, guess, max_iterations, tolerance)

    if not result.converged:
        if strict:
            raise NonConvergence(
                f"XIRR did not converge in {result.iterations} iterations",
                rate=result.rate_percent,
                iterations=result.iterations,
            )
        logger.warning(
            f"XIRR did not converge in {result.iterations} iterations; "
            f"returning best-effort rate {result.rate_percent:.6f}%"
        )

    return result.rate_percent


def effective_annual_rate(rate_percent: float) -> float:
    """Convert a continuously-compounded rate (percent) to an annual effective rate (percent)."""
    return math.expm1(rate_percent / 100) * 100


def xirr_from_amounts(
    initial_amount: float,
    final_amount: float,
    period_years: float,
    start_date: Optional[date] = None,
    **solver_options,
) -> float:
    """
    XIRR of a single investment redeemed after a holding period.

    Args:
        initial_amount: Amount invested at the start (positive number)
        final_amount: Amount received at the end
        period_years: Holding period in years (365-day years)
        start_date: Investment date (defaults to today)
        **solver_options: Passed through to calculate_xirr

    Returns:
        Rate as a percentage
    """
    if period_years <= 0:
        raise InvalidInput(f"period_years must be positive, got {period_years}")

    if start_date is None:
        start_date = date.today()

    end_date = start_date + timedelta(days=round(period_years * DAYS_PER_YEAR))
    cash_flows = [
        CashFlow(amount=-initial_amount, date=start_date),
        CashFlow(amount=final_amount, date=end_date),
    ]
    return calculate_xirr(cash_flows, **solver_options)
