"""Pay schedule generation.

Pay dates are anchored to the tax year so identical inputs always produce
identical schedules:

- weekly / biweekly: first Monday of January (or an explicit first pay date
  inside the first cycle), then every 7 / 14 days
- semimonthly: the 15th and the last day of each month
- monthly: last day of each month, moved back to Friday on weekends
"""

import calendar
from datetime import date, timedelta
from typing import List, Optional


# Pay periods by frequency
PAY_PERIODS = {
    "weekly": 52,
    "biweekly": 26,
    "semimonthly": 24,
    "monthly": 12,
}

PERIOD_DAYS = {
    "weekly": 7,
    "biweekly": 14,
}

MONDAY = 0
FRIDAY = 4


def get_pay_periods(frequency: str) -> int:
    """Get number of pay periods per year for a frequency."""
    try:
        return PAY_PERIODS[frequency]
    except KeyError:
        raise ValueError(f"Unknown pay frequency: {frequency}")


def first_monday(year: int) -> date:
    """First Monday on or after January 1st."""
    day = date(year, 1, 1)
    while day.weekday() != MONDAY:
        day += timedelta(days=1)
    return day


def first_cycle_bounds(year: int, frequency: str) -> tuple:
    """Earliest and latest allowed first pay date for a fixed-interval schedule."""
    start = date(year, 1, 1)
    return start, start + timedelta(days=PERIOD_DAYS[frequency] - 1)


def _last_business_day(year: int, month: int) -> date:
    last = date(year, month, calendar.monthrange(year, month)[1])
    if last.weekday() > FRIDAY:
        last -= timedelta(days=last.weekday() - FRIDAY)
    return last


def generate_pay_dates(
    year: int,
    frequency: str,
    first_pay_date: Optional[date] = None,
) -> List[date]:
    """Generate every pay date of the tax year.

    Args:
        year: Tax year
        frequency: Pay frequency
        first_pay_date: Anchor for weekly/biweekly schedules. Must fall in the
            first cycle of January so every date stays inside the year.

    Returns:
        List of pay dates in chronological order, one per pay period
    """
    count = get_pay_periods(frequency)

    if frequency in PERIOD_DAYS:
        if first_pay_date is None:
            first_pay_date = first_monday(year)
        else:
            earliest, latest = first_cycle_bounds(year, frequency)
            if not earliest <= first_pay_date <= latest:
                raise ValueError(
                    f"first_pay_date {first_pay_date} must be between {earliest} and {latest}"
                )
        step = timedelta(days=PERIOD_DAYS[frequency])
        return [first_pay_date + step * i for i in range(count)]

    if first_pay_date is not None:
        raise ValueError(f"first_pay_date does not apply to {frequency} schedules")

    if frequency == "semimonthly":
        pay_dates = []
        for month in range(1, 13):
            pay_dates.append(date(year, month, 15))
            pay_dates.append(date(year, month, calendar.monthrange(year, month)[1]))
        return pay_dates

    # monthly
    return [_last_business_day(year, month) for month in range(1, 13)]
