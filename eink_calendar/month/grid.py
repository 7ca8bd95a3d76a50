"""Monday-aligned date ranges covering a calendar month."""

from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta
from typing import Iterable, Iterator, List

DAYS_PER_WEEK = 7


def month_grid_range(reference: date | datetime) -> tuple[date, date]:
    """Return the first and last date of the month grid containing ``reference``.

    The grid starts on the Monday on or before the 1st of the month and ends on
    the Sunday on or after its last day. Both bounds are inclusive, so the span
    always holds a whole number of weeks.
    """

    first_of_month = date(reference.year, reference.month, 1)
    days_in_month = calendar.monthrange(reference.year, reference.month)[1]
    last_of_month = first_of_month.replace(day=days_in_month)

    # isoweekday() is already Monday=1..Sunday=7.
    start = first_of_month - timedelta(days=first_of_month.isoweekday() - 1)
    end = last_of_month + timedelta(days=DAYS_PER_WEEK - last_of_month.isoweekday())
    return start, end


def iter_grid_dates(start: date, end: date) -> Iterator[date]:
    """Yield every date from ``start`` to ``end`` inclusive."""

    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def split_weeks(dates: Iterable[date]) -> List[List[date]]:
    """Partition consecutive dates into rows of seven."""

    days = list(dates)
    if len(days) % DAYS_PER_WEEK:
        raise ValueError(
            f"Grid spans {len(days)} days, which is not a whole number of weeks."
        )
    return [days[i : i + DAYS_PER_WEEK] for i in range(0, len(days), DAYS_PER_WEEK)]


def fetch_window(reference: datetime) -> tuple[datetime, datetime]:
    """Return the half-open instant window ``[start, end)`` covered by the grid.

    The window is expressed in the timezone of ``reference`` and ends at the
    midnight following the grid's last day.
    """

    start, end = month_grid_range(reference)
    tzinfo = reference.tzinfo
    return (
        datetime.combine(start, time.min, tzinfo=tzinfo),
        datetime.combine(end + timedelta(days=1), time.min, tzinfo=tzinfo),
    )


def week_count(start: date, end: date) -> int:
    """Return the number of week rows between two inclusive grid bounds."""

    return ((end - start).days + 1) // DAYS_PER_WEEK


__all__ = [
    "DAYS_PER_WEEK",
    "fetch_window",
    "iter_grid_dates",
    "month_grid_range",
    "split_weeks",
    "week_count",
]
