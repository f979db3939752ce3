"""
Tests for loan detail calculations.
"""

import math
import pytest
from datetime import date

from fintrack.calculations.loans import (
    approximate_total_installments,
    calculate_loan_details,
    generate_emi_cash_flows,
)
from fintrack.calculations.errors import NonConvergence
from fintrack.calculations.xirr import calculate_npv


class TestEMICashFlows:
    """Test the synthetic repayment schedule."""

    def test_schedule_shape(self):
        """One outflow followed by one inflow per remaining EMI."""
        flows = generate_emi_cash_flows(350000, 36, 15000, start_date=date(2025, 1, 31))
        assert len(flows) == 37
        assert flows[0].amount == -350000
        assert all(cf.amount == 15000 for cf in flows[1:])

    def test_monthly_dates(self):
        """EMIs fall on calendar months, clamped to month end."""
        flows = generate_emi_cash_flows(1000, 3, 400, start_date=date(2025, 1, 31))
        assert [cf.date for cf in flows] == [
            date(2025, 1, 31),
            date(2025, 2, 28),
            date(2025, 3, 31),
            date(2025, 4, 30),
        ]


class TestLoanDetails:
    """Test the loan details bundle."""

    @pytest.fixture
    def details(self):
        return calculate_loan_details(
            loan_amount=500000,
            total_installments=60,
            remaining_installments=36,
            remaining_principal=350000,
            emi=15000,
            today=date(2025, 1, 1),
        )

    def test_paid_totals(self, details):
        """24 EMIs of 15000 paid, 150000 of which was principal."""
        assert details.paid_installments == 24
        assert details.total_amount_paid == 360000
        assert details.total_interest_paid == 210000

    def test_loan_totals(self, details):
        """Whole-loan payable and interest."""
        assert details.total_amount_payable == 900000
        assert details.total_interest_over_loan == 400000

    def test_remaining(self, details):
        """Remaining amount and tenure."""
        assert details.remaining_amount == 350000 + 15000 * 36
        assert details.remaining_months == 36
        assert details.remaining_years == 3

    def test_xirr_positive(self, details):
        """36 EMIs of 15000 against 350000 outstanding is roughly 30% a year."""
        assert 25 < details.xirr < 35

    def test_xirr_zeroes_schedule_npv(self, details):
        """The reported rate zeroes the NPV of the remaining schedule."""
        flows = generate_emi_cash_flows(350000, 36, 15000, start_date=date(2025, 1, 1))
        assert abs(calculate_npv(flows, details.xirr / 100)) < 1e-4

    def test_interest_paid_clamped(self):
        """Inconsistent inputs never report negative interest paid."""
        details = calculate_loan_details(
            loan_amount=500000,
            total_installments=60,
            remaining_installments=59,
            remaining_principal=100000,
            emi=10000,
            today=date(2025, 1, 1),
        )
        assert details.total_interest_paid == 0

    def test_solver_options_forwarded(self):
        """Iteration budget and strictness reach the XIRR solver."""
        with pytest.raises(NonConvergence):
            calculate_loan_details(
                loan_amount=500000,
                total_installments=60,
                remaining_installments=36,
                remaining_principal=350000,
                emi=15000,
                today=date(2025, 1, 1),
                max_iterations=1,
                strict=True,
            )

    def test_no_outstanding_principal(self, caplog):
        """Without an outflow there is no XIRR to report."""
        details = calculate_loan_details(
            loan_amount=500000,
            total_installments=60,
            remaining_installments=2,
            remaining_principal=0,
            emi=15000,
            today=date(2025, 1, 1),
        )
        assert details.xirr is None
        assert details.remaining_amount == 30000
        assert "skipping loan XIRR" in caplog.text

    def test_approximate_installments_fallback(self):
        """Unknown tenure falls back to the deprecated approximation."""
        with pytest.warns(DeprecationWarning):
            details = calculate_loan_details(
                loan_amount=600000,
                total_installments=None,
                remaining_installments=40,
                remaining_principal=400000,
                emi=20000,
                today=date(2025, 1, 1),
            )
        # round(600000 / 12000) = 50
        assert details.paid_installments == 10
        assert details.total_amount_payable == 20000 * 50


class TestApproximateInstallments:
    """Test the legacy tenure heuristic."""

    def test_rounds_half_up(self):
        """2.5 rounds to 3, like the old calculator did."""
        with pytest.warns(DeprecationWarning):
            assert approximate_total_installments(1500, 1000) == 3

    def test_value(self):
        """loan / (emi * 0.6), rounded."""
        with pytest.warns(DeprecationWarning):
            assert approximate_total_installments(500000, 15000) == round(500000 / 9000)
