"""
Working-day arithmetic for leave requests.

Saturdays and Sundays are never charged. A half-day request is charged 0.5
only when its range covers exactly one working day; a zero result means there
is nothing to charge and the caller must reject the request.
"""
from datetime import date
from typing import Union

# date.weekday(): Monday == 0 ... Sunday == 6
WEEKEND_DAYS = frozenset({5, 6})


def is_working_day(day: date) -> bool:
    return day.weekday() not in WEEKEND_DAYS


def count_working_days(start_date: date, end_date: date) -> int:
    """Number of weekdays between start_date and end_date, both inclusive."""
    if end_date < start_date:
        return 0
    full_weeks, remainder = divmod((end_date - start_date).days + 1, 7)
    first_weekday = start_date.weekday()
    # Trailing partial week, counted by weekday number so no date past end_date is built
    partial = sum(1 for offset in range(remainder) if (first_weekday + offset) % 7 not in WEEKEND_DAYS)
    return full_weeks * (7 - len(WEEKEND_DAYS)) + partial


def calculate_working_days(start_date: date, end_date: date, is_half_day: bool = False) -> Union[int, float]:
    """
    Days to charge against the leave balance for the given range.

    Returns 0 when end_date precedes start_date or when the range holds only
    weekend days.
    """
    if end_date < start_date:
        return 0

    working_days = count_working_days(start_date, end_date)
    if is_half_day and working_days == 1:
        return 0.5
    return working_days
