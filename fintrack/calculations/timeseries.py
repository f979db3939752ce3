"""
Price Series Statistics

Percentage changes over lookback windows, volatility and volume averages for
NAV/price series, plus SIP back-testing over historical NAVs.

Series may arrive in any date order. Points sharing a date are collapsed,
keeping the last one supplied.
"""

from typing import Dict, Iterable, List, Optional
from datetime import date
from dataclasses import dataclass
from dateutil.relativedelta import relativedelta

import numpy as np

from fintrack.calculations.errors import InvalidInput
from fintrack.calculations.xirr import CashFlow, calculate_xirr


@dataclass(frozen=True)
class PricePoint:
    """NAV or price observed on a date."""

    date: date
    value: float


@dataclass(frozen=True)
class VolumePoint:
    """Traded volume on a date."""

    date: date
    volume: int


@dataclass(frozen=True)
class PriceChanges:
    """Percentage change from each lookback anchor to the latest value."""

    day1: float
    week1: float
    month1: float
    month3: float
    month6: float
    year1: float


@dataclass(frozen=True)
class VolatilityStats:
    """Volatility (percent) over short trailing windows."""

    day2: float
    day3: float
    day4: float
    day5: float
    week2: float


@dataclass(frozen=True)
class VolumeStats:
    """Average volume over trailing windows."""

    day1: float
    day2: float
    day3: float
    day4: float
    day5: float
    week2: float
    month: float


@dataclass(frozen=True)
class RangeReturn:
    """Return between two dates of a series."""

    start_value: float
    end_value: float
    percentage_change: float
    xirr: float


@dataclass(frozen=True)
class SIPBacktestResult:
    """Outcome of investing a fixed amount on each given date."""

    installments: int
    total_invested: float
    current_value: float
    average_cost: float
    latest_value: float
    gain: float
    gain_percent: float


@dataclass(frozen=True)
class UnitPurchase:
    """Units bought for an amount and the value they were bought at."""

    units: float
    value_at_purchase: float


# Lookback windows for changes_over_windows
CHANGE_WINDOWS = {
    "day1": relativedelta(days=1),
    "week1": relativedelta(weeks=1),
    "month1": relativedelta(months=1),
    "month3": relativedelta(months=3),
    "month6": relativedelta(months=6),
    "year1": relativedelta(years=1),
}

# Trailing windows, in data points (trading days)
VOLATILITY_WINDOWS = {"day2": 2, "day3": 3, "day4": 4, "day5": 5, "week2": 10}
VOLUME_WINDOWS = {
    "day1": 1,
    "day2": 2,
    "day3": 3,
    "day4": 4,
    "day5": 5,
    "week2": 10,
    "month": 21,
}


def _sorted_unique(series: Iterable):
    """Points in ascending date order, one per date (last one supplied wins)."""
    by_date = {}
    for point in series:
        by_date[point.date] = point
    return [by_date[d] for d in sorted(by_date)]


def percentage_change(current: float, previous: float) -> float:
    """Percentage change from previous to current; 0 when previous is 0."""
    if previous == 0:
        return 0.0
    return (current - previous) / previous * 100


def value_for_date(series: Iterable[PricePoint], target_date: date) -> Optional[float]:
    """
    Value at the latest date on or before target_date.

    Returns:
        The value, or None if the series has no point on or before target_date
    """
    for point in reversed(_sorted_unique(series)):
        if point.date <= target_date:
            return point.value
    return None


def changes_over_windows(series: Iterable[PricePoint]) -> PriceChanges:
    """
    Percentage change of the latest value against each lookback anchor.

    A window with no point on or before its anchor date reports 0.
    """
    points = _sorted_unique(series)
    if not points:
        return PriceChanges(**{name: 0.0 for name in CHANGE_WINDOWS})

    latest = points[-1]
    changes = {}
    for name, window in CHANGE_WINDOWS.items():
        anchor_value = value_for_date(points, latest.date - window)
        if anchor_value is None:
            changes[name] = 0.0
        else:
            changes[name] = percentage_change(latest.value, anchor_value)

    return PriceChanges(**changes)


def volatility(series: Iterable[PricePoint], window_days: int) -> float:
    """
    Standard deviation of day-over-day returns, in percent.

    Uses the most recent window_days + 1 points (window_days returns) and the
    population standard deviation. Returns 0 when fewer points are available.
    """
    points = _sorted_unique(series)
    if window_days < 1 or len(points) < window_days + 1:
        return 0.0

    values = np.array([p.value for p in points[-(window_days + 1):]], dtype=float)
    previous = values[:-1]
    returns = np.divide(
        values[1:] - previous,
        previous,
        out=np.zeros_like(previous),
        where=previous != 0,
    )
    return float(np.std(returns) * 100)


def average_volume(series: Iterable[VolumePoint], window_days: int) -> float:
    """Mean of the most recent window_days volumes; 0 for an empty series."""
    points = _sorted_unique(series)
    recent = list(reversed(points))[:window_days]
    if not recent:
        return 0.0
    return float(np.mean([p.volume for p in recent]))


def volatility_stats(series: Iterable[PricePoint]) -> VolatilityStats:
    """Volatility over the standard short windows."""
    points = _sorted_unique(series)
    return VolatilityStats(
        **{name: volatility(points, days) for name, days in VOLATILITY_WINDOWS.items()}
    )


def volume_stats(series: Iterable[VolumePoint]) -> VolumeStats:
    """Average volume over the standard trailing windows."""
    points = _sorted_unique(series)
    return VolumeStats(
        **{name: average_volume(points, days) for name, days in VOLUME_WINDOWS.items()}
    )


def range_return(
    series: Iterable[PricePoint], start_date: date, end_date: date
) -> Optional[RangeReturn]:
    """
    Return of a unit bought on start_date and sold on end_date.

    Both dates must match a point exactly; otherwise None.
    """
    lookup = {p.date: p.value for p in _sorted_unique(series)}
    if start_date not in lookup or end_date not in lookup:
        return None

    start_value = lookup[start_date]
    end_value = lookup[end_date]
    cash_flows = [
        CashFlow(amount=-start_value, date=start_date),
        CashFlow(amount=end_value, date=end_date),
    ]

    return RangeReturn(
        start_value=start_value,
        end_value=end_value,
        percentage_change=percentage_change(end_value, start_value),
        xirr=calculate_xirr(cash_flows),
    )


def sip_backtest(
    series: Iterable[PricePoint],
    investment_dates: Iterable[date],
    amount: float,
    latest_value: Optional[float] = None,
) -> SIPBacktestResult:
    """
    Simulate investing a fixed amount on each date that has a price point.

    Dates without an exact point are skipped. Average cost is the total
    invested divided by the units held.

    Args:
        series: Historical NAV/price series
        investment_dates: Intended installment dates
        amount: Amount per installment
        latest_value: Valuation price (defaults to the latest point)

    Returns:
        SIPBacktestResult
    """
    points = _sorted_unique(series)
    lookup: Dict[date, float] = {p.date: p.value for p in points}
    if latest_value is None:
        latest_value = points[-1].value if points else 0.0

    installments = 0
    total_units = 0.0
    total_invested = 0.0
    for investment_date in investment_dates:
        value = lookup.get(investment_date)
        if not value:
            continue
        total_units += amount / value
        total_invested += amount
        installments += 1

    average_cost = total_invested / total_units if total_units > 0 else 0.0
    current_value = total_units * latest_value
    gain = current_value - total_invested
    gain_percent = gain / total_invested * 100 if total_invested > 0 else 0.0

    return SIPBacktestResult(
        installments=installments,
        total_invested=total_invested,
        current_value=current_value,
        average_cost=average_cost,
        latest_value=latest_value,
        gain=gain,
        gain_percent=gain_percent,
    )


def units_for_purchase(
    series: Iterable[PricePoint],
    amount: float,
    purchase_date: date,
    fallback_value: float,
) -> UnitPurchase:
    """Units bought at the value on or before purchase_date, else at fallback_value."""
    value = value_for_date(series, purchase_date)
    if value is None:
        value = fallback_value
    if value <= 0:
        raise InvalidInput(f"No positive value to buy units at on {purchase_date}, got {value}")
    return UnitPurchase(units=amount / value, value_at_purchase=value)


def weekly_dates(series: Iterable[PricePoint]) -> List[date]:
    """Every 7th calendar day from the first point through the last one."""
    points = _sorted_unique(series)
    if not points:
        return []

    first, last = points[0].date, points[-1].date
    total_days = (last - first).days
    return [first + relativedelta(days=7 * i) for i in range(total_days // 7 + 1)]
