"""
Input and response schemas for the calculator screens.

Input models carry the same constraints the entry forms enforce, so a
calculation never sees a loan with more remaining than total installments.
"""

from enum import Enum
from typing import Optional
from datetime import date
from pydantic import BaseModel, Field, model_validator

from fintrack.calculations.compounding import Frequency


class FDInput(BaseModel):
    """Fixed deposit calculator input."""

    principal: float = Field(..., ge=1)
    annual_rate: float = Field(..., ge=0.01, le=50)
    years: float = Field(..., ge=0.1, le=50)
    compounding_frequency: int = Field(12, ge=1, le=365)
    # Rate to compare against (e.g. a fund's XIRR), percent
    comparison_rate: Optional[float] = Field(None, ge=0, le=100)


class FDResponse(BaseModel):
    """Fixed deposit calculator result."""

    maturity_amount: float
    total_interest: float
    comparison_maturity_amount: Optional[float] = None


class LoanInput(BaseModel):
    """Loan calculator input."""

    loan_amount: float = Field(..., ge=1)
    total_installments: int = Field(..., ge=1)
    remaining_installments: int = Field(..., ge=1)
    remaining_principal: float = Field(..., ge=0)
    emi: float = Field(..., ge=1)

    @model_validator(mode="after")
    def check_consistency(self):
        if self.remaining_principal > self.loan_amount:
            raise ValueError("Remaining principal cannot exceed loan amount")
        if self.remaining_installments > self.total_installments:
            raise ValueError("Remaining installments cannot exceed total installments")
        return self


class LoanResponse(BaseModel):
    """Loan calculator result."""

    paid_installments: int
    total_amount_paid: float
    total_interest_paid: float
    total_amount_payable: float
    total_interest_over_loan: float
    remaining_amount: float
    xirr: Optional[float] = None
    remaining_months: int
    remaining_years: float


class SIPInput(BaseModel):
    """SIP planner input."""

    amount: float = Field(..., ge=0.01)
    frequency: Frequency = Frequency.MONTHLY
    start_date: date
    duration_months: int = Field(..., ge=1)
    # Expected annual return, percent; projection is skipped when absent
    expected_return: Optional[float] = Field(None, ge=0)


class SIPResponse(BaseModel):
    """SIP planner result."""

    start_date: date
    end_date: date
    total_installments: int
    total_invested: float
    future_value: Optional[float] = None


class XIRRMode(str, Enum):
    """What the XIRR calculator solves for."""

    CALCULATE_XIRR = "calculate_xirr"
    CALCULATE_FINAL = "calculate_final"


class XIRRInput(BaseModel):
    """XIRR calculator input."""

    mode: XIRRMode = XIRRMode.CALCULATE_XIRR
    initial_amount: float = Field(..., gt=0)
    final_amount: Optional[float] = Field(None, gt=0)
    xirr: Optional[float] = None
    # At least one day: the end date is whole days after the start
    period_years: float = Field(..., ge=1 / 365)
    start_date: Optional[date] = None

    @model_validator(mode="after")
    def check_mode_fields(self):
        if self.mode == XIRRMode.CALCULATE_XIRR and self.final_amount is None:
            raise ValueError("final_amount is required to calculate XIRR")
        if self.mode == XIRRMode.CALCULATE_FINAL and self.xirr is None:
            raise ValueError("xirr is required to calculate the final amount")
        return self


class XIRRResponse(BaseModel):
    """XIRR calculator result."""

    mode: XIRRMode
    initial_amount: float
    final_amount: float
    xirr: float
    period_years: float
