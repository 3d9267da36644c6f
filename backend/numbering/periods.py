# numbering/periods.py
"""
Calendar helpers for counter partitioning and rendering.

period_bucket() maps a reset-to-zero policy and a date to the integer
period that is part of a counter's key. Unknown policies map to 0, so a
counter with an unsupported policy never resets.
"""

from datetime import date

from numbering.choices import RtzLevel


def period_bucket(rtz_level: int, day: date) -> int:
    if rtz_level == RtzLevel.NONE:
        return 0
    if rtz_level == RtzLevel.ANNUAL:
        return day.year % 100
    if rtz_level == RtzLevel.MONTHLY:
        return 100 * (day.year % 100) + day.month
    if rtz_level == RtzLevel.DECENNIAL:
        return day.year % 10
    return 0


def iso_week(day: date) -> int:
    return day.isocalendar()[1]


def day_of_year(day: date) -> int:
    return day.timetuple().tm_yday


def weekday_number(day: date) -> int:
    """Day of week with Sunday as 0 and Saturday as 6."""
    return day.isoweekday() % 7
