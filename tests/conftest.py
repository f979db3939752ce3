"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
import os
from datetime import date

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fintrack.config import get_settings
from fintrack.calculations.timeseries import PricePoint


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "scenario: end-to-end calculator scenarios")


@pytest.fixture(autouse=True)
def reset_settings():
    """Drop the cached settings so env overrides in one test don't leak."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def daily_prices():
    """Two years of daily prices rising by 0.1 per day from 100."""
    start = date(2023, 1, 1)
    return [
        PricePoint(date=date.fromordinal(start.toordinal() + i), value=100 + 0.1 * i)
        for i in range(731)
    ]
