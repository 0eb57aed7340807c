from __future__ import annotations

from datetime import date

import pytest

from yatra.core.dates import days_between, is_valid_trip_date, parse_trip_date


def test_same_day_trip_counts_one_day() -> None:
    assert days_between("01/01/24", "01/01/24") == 1


def test_range_is_inclusive() -> None:
    assert days_between("01/01/24", "05/01/24") == 5
    assert days_between("01/06/25", "03/06/25") == 3


def test_range_across_month_and_leap_day() -> None:
    assert days_between("28/02/24", "01/03/24") == 3


def test_century_split_at_fifty() -> None:
    assert parse_trip_date("01/01/49") == date(2049, 1, 1)
    assert parse_trip_date("01/01/50") == date(1950, 1, 1)
    assert parse_trip_date("01/01/00") == date(2000, 1, 1)
    assert parse_trip_date("31/12/99") == date(1999, 12, 31)


def test_range_crossing_the_century_pivot_runs_backwards() -> None:
    # 49 is 2049 and 50 is 1950, so the "later" date is a century earlier.
    assert days_between("01/01/49", "01/01/50") == (date(1950, 1, 1) - date(2049, 1, 1)).days + 1
    assert days_between("01/01/49", "01/01/50") < 0


def test_negative_ranges_are_not_rejected() -> None:
    assert days_between("05/01/24", "01/01/24") == -3
    assert days_between("02/01/24", "01/01/24") == 0


@pytest.mark.parametrize("value", ["2024-01-01", "aa/bb/cc", "31/02/24", "01/13/24", ""])
def test_malformed_dates_raise_value_error(value) -> None:
    with pytest.raises(ValueError):
        parse_trip_date(value)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("01/06/25", True),
        ("1/6/25", False),
        ("01/06/2025", False),
        ("01-06-25", False),
        (None, False),
    ],
)
def test_is_valid_trip_date(value, expected) -> None:
    assert is_valid_trip_date(value) is expected
