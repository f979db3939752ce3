"""
Calculation Errors

Exceptions raised by the calculation engine. All of them subclass ValueError
so callers can keep catching ValueError for bad numeric input.
"""

from typing import Optional


class CalculationError(ValueError):
    """Base class for calculation engine errors."""


class InvalidInput(CalculationError):
    """Malformed or insufficient input (too few cash flows, bad periods)."""


class DegenerateInput(CalculationError):
    """Input that makes the Newton-Raphson derivative vanish."""


class NonConvergence(CalculationError):
    """Solver did not reach tolerance, or produced a non-finite rate."""

    def __init__(
        self, message: str, rate: Optional[float] = None, iterations: int = 0
    ):
        super().__init__(message)
        self.rate = rate
        self.iterations = iterations
