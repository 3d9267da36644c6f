# currency/dates.py
"""Date sentinels used by the currency registry and rate lookups."""

from datetime import date
from typing import Optional

# "No date": a changeover date equal to this always applies.
DEFAULT_LEGACY_DATE = date(1753, 1, 1)


def greatest_valid_date(today: Optional[date] = None) -> date:
    """
    31 December of the last year of the current century.

    Centuries run 2001-2100, so 2023 -> 2100-12-31 and 2101 -> 2200-12-31.
    """
    year = (today or date.today()).year
    century_start = ((year - 1) // 100) * 100 + 1
    return date(century_start + 99, 12, 31)
