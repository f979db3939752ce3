"""
Loan Calculations

Derives paid/remaining totals for an EMI loan and the XIRR of the remaining
repayment schedule.
"""

import math
import logging
import warnings
from typing import List, Optional
from datetime import date
from dataclasses import dataclass
from dateutil.relativedelta import relativedelta

from fintrack.calculations.xirr import CashFlow, calculate_xirr

logger = logging.getLogger(__name__)

# Legacy rule of thumb: EMI principal share assumed to be 60%
APPROXIMATE_PRINCIPAL_SHARE = 0.6


@dataclass(frozen=True)
class LoanDetails:
    """Derived figures for a partially repaid loan."""

    paid_installments: int
    total_amount_paid: float
    total_interest_paid: float
    total_amount_payable: float
    total_interest_over_loan: float
    remaining_amount: float
    xirr: Optional[float]
    remaining_months: int
    remaining_years: float


def generate_emi_cash_flows(
    remaining_principal: float,
    remaining_installments: int,
    emi: float,
    start_date: Optional[date] = None,
) -> List[CashFlow]:
    """
    Build the repayment schedule seen from the lender's side.

    Args:
        remaining_principal: Outstanding principal, paid out at start_date
        remaining_installments: Number of EMIs still due
        emi: Monthly installment
        start_date: Schedule start (defaults to today)

    Returns:
        [-remaining_principal @ start, +emi @ start + 1 month, ...]
    """
    if start_date is None:
        start_date = date.today()

    cash_flows = [CashFlow(amount=-remaining_principal, date=start_date)]
    for month in range(1, remaining_installments + 1):
        cash_flows.append(
            CashFlow(amount=emi, date=start_date + relativedelta(months=month))
        )
    return cash_flows


def approximate_total_installments(loan_amount: float, emi: float) -> int:
    """
    Deprecated estimate of the loan tenure when the total is unknown.

    round(loan_amount / (emi * 0.6)), rounding halves up.
    """
    warnings.warn(
        "approximate_total_installments is a rough heuristic; pass total_installments",
        DeprecationWarning,
        stacklevel=2,
    )
    return math.floor(loan_amount / (emi * APPROXIMATE_PRINCIPAL_SHARE) + 0.5)


def calculate_loan_details(
    loan_amount: float,
    total_installments: Optional[int],
    remaining_installments: int,
    remaining_principal: float,
    emi: float,
    today: Optional[date] = None,
    **solver_options,
) -> LoanDetails:
    """
    Calculate loan details from EMI, installments and outstanding principal.

    Consistency of the inputs (remaining <= total, remaining principal <=
    loan amount) is the caller's job; interest paid is clamped at zero.

    Args:
        loan_amount: Original loan amount
        total_installments: Loan tenure in months (None falls back to the
            deprecated approximation)
        remaining_installments: EMIs still due
        remaining_principal: Outstanding principal
        emi: Monthly installment
        today: Valuation date for the XIRR schedule (defaults to today)
        **solver_options: Passed through to calculate_xirr (guess,
            max_iterations, tolerance, strict)

    Returns:
        LoanDetails; xirr is None when no principal is outstanding
    """
    if total_installments is None:
        total_installments = approximate_total_installments(loan_amount, emi)
        logger.warning(
            f"Total installments unknown; approximated as {total_installments}"
        )

    paid_installments = total_installments - remaining_installments
    total_amount_paid = paid_installments * emi
    principal_repaid = loan_amount - remaining_principal
    total_interest_paid = max(0.0, total_amount_paid - principal_repaid)

    total_amount_payable = emi * total_installments
    total_interest_over_loan = total_amount_payable - loan_amount

    xirr = None
    if remaining_principal > 0:
        cash_flows = generate_emi_cash_flows(
            remaining_principal, remaining_installments, emi, start_date=today
        )
        xirr = calculate_xirr(cash_flows, **solver_options)
    else:
        logger.warning("No outstanding principal; skipping loan XIRR")

    remaining_months = remaining_installments
    remaining_years = remaining_months / 12

    return LoanDetails(
        paid_installments=paid_installments,
        total_amount_paid=total_amount_paid,
        total_interest_paid=total_interest_paid,
        total_amount_payable=total_amount_payable,
        total_interest_over_loan=total_interest_over_loan,
        remaining_amount=remaining_principal + emi * remaining_installments,
        xirr=xirr,
        remaining_months=remaining_months,
        remaining_years=remaining_years,
    )
