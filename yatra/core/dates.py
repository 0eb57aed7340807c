"""Helpers for the two-digit-year ``dd/mm/yy`` dates used by trip requests."""

from __future__ import annotations

import math
import re
from datetime import date

_DATE_SHAPE = re.compile(r"^\d{2}/\d{2}/\d{2}$")

CENTURY_PIVOT = 50


def is_valid_trip_date(value: object) -> bool:
    """Return ``True`` when ``value`` looks like a ``dd/mm/yy`` date."""

    return isinstance(value, str) and bool(_DATE_SHAPE.match(value))


def parse_trip_date(value: str) -> date:
    """Parse ``dd/mm/yy`` into a :class:`date`.

    Years below 50 belong to the 2000s, the rest to the 1900s.
    """

    try:
        day, month, year = (int(part) for part in value.strip().split("/"))
    except (AttributeError, ValueError) as exc:
        raise ValueError(f"Dates must be in dd/mm/yy format, got {value!r}") from exc

    full_year = 2000 + year if year < CENTURY_PIVOT else 1900 + year
    return date(full_year, month, day)


def days_between(start: str, end: str) -> int:
    """Return the inclusive number of days from ``start`` to ``end``.

    A same-day trip counts as one day. Ranges where ``end`` precedes ``start``
    are not rejected and produce a non-positive or small count.
    """

    delta = parse_trip_date(end) - parse_trip_date(start)
    return math.ceil(delta.total_seconds() / 86400) + 1


__all__ = ["CENTURY_PIVOT", "days_between", "is_valid_trip_date", "parse_trip_date"]
