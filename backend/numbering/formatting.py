# numbering/formatting.py
"""
Rendering of counter templates into document numbers.

A CounterTemplate is the immutable, position-ordered view of a counter
definition. render_counter() is pure: given the same template, reserved
value, date and codes it always returns the same string.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Optional, Tuple

from numbering.choices import ChronologicalControl, ComponentType, RtzLevel, SequenceType
from numbering.periods import day_of_year, iso_week, period_bucket, weekday_number

logger = logging.getLogger(__name__)

MONTH_ABBREVIATIONS = (
    "JAN", "FEB", "MAR", "APR", "MAY", "JUN",
    "JUL", "AUG", "SEP", "OCT", "NOV", "DEC",
)

CODE_FILL_CHAR = "_"

# Result of collapsing a numeric counter whose rendering has no leading integer.
NOT_A_NUMBER = "NaN"

_LEADING_INTEGER = re.compile(r"\s*([+-]?[0-9]+)")


@dataclass(frozen=True)
class Component:
    component_type: int
    length: int = 0
    constant: str = ""


@dataclass(frozen=True)
class CounterTemplate:
    components: Tuple[Component, ...]
    sequence_type: int = SequenceType.ALPHANUMERIC
    chronological_control: int = ChronologicalControl.NONE

    @property
    def sequence_index(self) -> Optional[int]:
        for index, component in enumerate(self.components):
            if component.component_type == ComponentType.SEQUENCE_NUMBER:
                return index
        return None

    @property
    def has_complement(self) -> bool:
        return any(c.component_type == ComponentType.COMPLEMENT for c in self.components)

    @property
    def sequence_width(self) -> int:
        """Digit width of the sequence component, 1 when unset."""
        index = self.sequence_index
        if index is None:
            return 0
        return self.components[index].length or 1


def format_year(length: int, day: date) -> str:
    if length == 1:
        return str(period_bucket(RtzLevel.DECENNIAL, day))
    if length == 2:
        return f"{period_bucket(RtzLevel.ANNUAL, day):02d}"
    if length == 4:
        return str(day.year)
    return ""


def format_month(length: int, day: date) -> str:
    if length == 2:
        return f"{day.month:02d}"
    if length == 3:
        return MONTH_ABBREVIATIONS[day.month - 1]
    return ""


def format_day(length: int, day: date) -> str:
    if length == 1:
        return f"{weekday_number(day):02d}"
    if length == 2:
        return f"{day.day:02d}"
    if length == 3:
        return f"{day_of_year(day):03d}"
    return ""


def format_code(chronological_control: int, length: int, code: str) -> str:
    """Company or site code cut to `length`, or padded with `_` under chronological control."""
    if len(code) < length and chronological_control == ChronologicalControl.CONTROLLED:
        return code.ljust(length, CODE_FILL_CHAR)
    return code[:length]


def format_complement(length: int, complement: str) -> str:
    return complement[:length] if length > 0 else complement


def collapse_numeric(value: str) -> str:
    """
    Reduce a rendered numeric counter to its leading integer.

    Leading zeros and everything after the first non-digit are dropped.
    A rendering that does not start with digits has no numeric value and
    collapses to "NaN".
    """
    match = _LEADING_INTEGER.match(value)
    if match is None:
        logger.warning(
            "Numeric counter rendered without a leading integer",
            extra={"rendered": value},
        )
        return NOT_A_NUMBER
    return str(int(match.group(1)))


def render_counter(
    template: CounterTemplate,
    sequence: str,
    day: date,
    company: str = "",
    site: str = "",
    complement: str = "",
) -> str:
    parts = []

    for component in template.components:
        kind = component.component_type
        length = component.length or 0

        if kind == ComponentType.UNSET:
            break

        if kind == ComponentType.CONSTANT:
            parts.append(component.constant or "")
        elif kind == ComponentType.YEAR:
            parts.append(format_year(length, day))
        elif kind == ComponentType.MONTH:
            parts.append(format_month(length, day))
        elif kind == ComponentType.WEEK:
            parts.append(f"{iso_week(day):02d}")
        elif kind == ComponentType.DAY:
            parts.append(format_day(length, day))
        elif kind == ComponentType.COMPANY:
            parts.append(format_code(template.chronological_control, length, company))
        elif kind == ComponentType.SITE:
            parts.append(format_code(template.chronological_control, length, site))
        elif kind == ComponentType.SEQUENCE_NUMBER:
            parts.append(sequence)
        elif kind == ComponentType.COMPLEMENT:
            parts.append(format_complement(length, complement))
        # FISCAL_YEAR, PERIOD and FORMULA render nothing.

    value = "".join(parts)

    if template.sequence_type == SequenceType.NUMERIC:
        value = collapse_numeric(value)

    return value
