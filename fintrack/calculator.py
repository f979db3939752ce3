"""
Calculator entry points.

Each function takes a validated input schema, runs the calculation engine and
returns a response schema. Calculation errors propagate to the caller.
"""

import logging

from dateutil.relativedelta import relativedelta

from fintrack.config import get_settings
from fintrack.calculations import compounding, loans, xirr
from fintrack.schemas import (
    FDInput,
    FDResponse,
    LoanInput,
    LoanResponse,
    SIPInput,
    SIPResponse,
    XIRRInput,
    XIRRMode,
    XIRRResponse,
)

logger = logging.getLogger(__name__)


def calculate_fd(inputs: FDInput) -> FDResponse:
    """Calculate fixed deposit maturity (and the comparison maturity, if any)."""
    result = compounding.calculate_fd(
        principal=inputs.principal,
        annual_rate_percent=inputs.annual_rate,
        years=inputs.years,
        compounding_frequency=inputs.compounding_frequency,
        comparison_rate=inputs.comparison_rate,
    )

    return FDResponse(
        maturity_amount=result.maturity_amount,
        total_interest=result.total_interest,
        comparison_maturity_amount=result.comparison_maturity_amount,
    )


def calculate_loan(inputs: LoanInput) -> LoanResponse:
    """Calculate paid/remaining totals and the XIRR of the remaining EMIs."""
    settings = get_settings()
    details = loans.calculate_loan_details(
        loan_amount=inputs.loan_amount,
        total_installments=inputs.total_installments,
        remaining_installments=inputs.remaining_installments,
        remaining_principal=inputs.remaining_principal,
        emi=inputs.emi,
        guess=settings.xirr_default_guess,
        max_iterations=settings.xirr_max_iterations,
        tolerance=settings.xirr_tolerance,
        strict=settings.xirr_strict,
    )

    return LoanResponse(
        paid_installments=details.paid_installments,
        total_amount_paid=details.total_amount_paid,
        total_interest_paid=details.total_interest_paid,
        total_amount_payable=details.total_amount_payable,
        total_interest_over_loan=details.total_interest_over_loan,
        remaining_amount=details.remaining_amount,
        xirr=details.xirr,
        remaining_months=details.remaining_months,
        remaining_years=details.remaining_years,
    )


def calculate_sip(inputs: SIPInput) -> SIPResponse:
    """Count installments, total invested and end date; project future value when a return is given."""
    installments = compounding.sip_installments(inputs.duration_months, inputs.frequency)

    future_value = None
    if inputs.expected_return is not None:
        future_value = compounding.sip_future_value(
            periodic_amount=inputs.amount,
            annual_rate_percent=inputs.expected_return,
            periods_per_year=compounding.periods_per_year(inputs.frequency),
            total_periods=installments,
        )

    return SIPResponse(
        start_date=inputs.start_date,
        end_date=inputs.start_date + relativedelta(months=inputs.duration_months),
        total_installments=installments,
        total_invested=installments * inputs.amount,
        future_value=future_value,
    )


def calculate_xirr(inputs: XIRRInput) -> XIRRResponse:
    """Solve for XIRR from initial/final amounts, or for the final amount from XIRR."""
    if inputs.mode == XIRRMode.CALCULATE_FINAL:
        final_amount = compounding.compound_final_value(
            inputs.initial_amount, inputs.xirr, inputs.period_years
        )
        return XIRRResponse(
            mode=inputs.mode,
            initial_amount=inputs.initial_amount,
            final_amount=final_amount,
            xirr=inputs.xirr,
            period_years=inputs.period_years,
        )

    settings = get_settings()
    rate = xirr.xirr_from_amounts(
        inputs.initial_amount,
        inputs.final_amount,
        inputs.period_years,
        start_date=inputs.start_date,
        guess=settings.xirr_default_guess,
        max_iterations=settings.xirr_max_iterations,
        tolerance=settings.xirr_tolerance,
        strict=settings.xirr_strict,
    )
    logger.debug(f"XIRR for {inputs.initial_amount} -> {inputs.final_amount}: {rate:.4f}%")

    return XIRRResponse(
        mode=inputs.mode,
        initial_amount=inputs.initial_amount,
        final_amount=inputs.final_amount,
        xirr=rate,
        period_years=inputs.period_years,
    )
