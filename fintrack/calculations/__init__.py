"""
Financial Calculation Engine

Pure, synchronous calculation modules for the finance tracker:
XIRR, compounding, loans and price-series statistics.
"""

from fintrack.calculations import errors, xirr, compounding, loans, timeseries

__all__ = ["errors", "xirr", "compounding", "loans", "timeseries"]
