"""
Calendar arithmetic for rent periods and reporting windows.

All month arithmetic goes through ``dateutil.relativedelta`` so that
month-end dates clamp instead of overflowing into the next month
(31 January + 1 month is 29 February in a leap year, not 2 March).
"""

import math
from datetime import date, datetime, time, timedelta

from dateutil.relativedelta import relativedelta

SECONDS_PER_DAY = 86400


def start_of_month(value: date) -> date:
    return value.replace(day=1)


def end_of_month(value: date) -> date:
    return value + relativedelta(day=31)


def add_months(value: date, months: int) -> date:
    """Shift by whole months, clamping the day to the target month's length."""
    return value + relativedelta(months=months)


def add_days(value: date, days: int) -> date:
    return value + timedelta(days=days)


def day_in_month(year: int, month: int, day: int) -> date:
    """
    The given day of a month, clamped to the month's last day.

    A tenant whose rent falls due on the 31st owes February rent on the
    28th (or 29th).

    Raises:
        ValueError: If month is not 1-12 or day is not positive.
    """
    if not 1 <= month <= 12:
        raise ValueError(f"month must be between 1 and 12, got {month}")
    if day < 1:
        raise ValueError(f"day must be positive, got {day}")
    return date(year, month, 1) + relativedelta(day=day)


def rent_period_ending(due_date: date) -> tuple[date, date]:
    """
    One-month rent window ending on the due date.

    Returns ``(due_date - 1 month + 1 day, due_date)``.
    """
    start = add_months(due_date, -1) + timedelta(days=1)
    return start, due_date


def month_window(anchor: date) -> tuple[date, date]:
    return start_of_month(anchor), end_of_month(anchor)


def quarter_window(anchor: date) -> tuple[date, date]:
    first_month = 3 * ((anchor.month - 1) // 3) + 1
    start = date(anchor.year, first_month, 1)
    return start, end_of_month(add_months(start, 2))


def year_window(anchor: date) -> tuple[date, date]:
    return date(anchor.year, 1, 1), date(anchor.year, 12, 31)


def is_same_month(value: date, year: int, month: int) -> bool:
    return value.year == year and value.month == month


def days_past_due(due_date: date, now: datetime) -> int:
    """
    Whole days elapsed since the start of the due date, rounded up.

    Measured from midnight of the due date in ``now``'s timezone.
    """
    due_start = datetime.combine(due_date, time.min, tzinfo=now.tzinfo)
    elapsed = (now - due_start).total_seconds()
    return math.ceil(elapsed / SECONDS_PER_DAY)


_PERIOD_WINDOWS = {
    "monthly": month_window,
    "quarterly": quarter_window,
    "yearly": year_window,
}


def report_window(period: str, anchor: date) -> tuple[date, date]:
    """
    The monthly, quarterly or yearly window containing ``anchor``.

    Raises:
        ValueError: If period is not one of monthly, quarterly, yearly.
    """
    try:
        window = _PERIOD_WINDOWS[period]
    except KeyError:
        raise ValueError(f"No calendar window for period {period!r}") from None
    return window(anchor)
