# Copyright 2025 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# ==============================================================================

"""Conversion between the Ethiopian and the proleptic Gregorian calendar.

The Ethiopian calendar follows the Coptic rules (twelve 30-day months, a
5- or 6-day Pagume, a leap year every fourth year) with years counted 276
ahead, so conversions go through `convertdate.coptic`. The supported era is
Gregorian 0001-01-01 through 9999-12-31.
"""

from datetime import date
from typing import NamedTuple

from convertdate import coptic

# Ethiopian year = Coptic year + 276.
COPTIC_YEAR_OFFSET = 276

MONTHS_PER_YEAR = 13
DAYS_PER_MONTH = 30
PAGUME = 13

AMHARIC_MONTHS = (
    "መስከረም",
    "ጥቅምት",
    "ህዳር",
    "ታኅሳስ",
    "ጥር",
    "የካቲት",
    "መጋቢት",
    "ሚያዝያ",
    "ግንቦት",
    "ሰኔ",
    "ሐምሌ",
    "ነሐሴ",
    "ጳጐሜ",
)


class InvalidDateError(ValueError):
    """Raised when a date component is out of range for its calendar."""


class EthiopianDate(NamedTuple):
    year: int
    month: int
    day: int


class GregorianDate(NamedTuple):
    year: int
    month: int
    day: int


def _require_int(name: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidDateError(f"{name} must be an integer, got {value!r}")
    return value


def is_leap_year(ethiopian_year: int) -> bool:
    """Returns True if the Ethiopian year has a six-day Pagumē."""
    _require_int("year", ethiopian_year)
    return ethiopian_year % 4 == 3


def days_in_month(ethiopian_month: int, ethiopian_year: int) -> int:
    _require_int("month", ethiopian_month)
    if not 1 <= ethiopian_month <= MONTHS_PER_YEAR:
        raise InvalidDateError(
            f"Ethiopian month must be in 1..{MONTHS_PER_YEAR}, got {ethiopian_month}"
        )
    if ethiopian_month == PAGUME:
        return 6 if is_leap_year(ethiopian_year) else 5
    return DAYS_PER_MONTH


def validate_ethiopian(ethiopian_year: int, ethiopian_month: int, ethiopian_day: int) -> None:
    """Raises InvalidDateError unless the triple names a real Ethiopian day."""
    _require_int("year", ethiopian_year)
    max_day = days_in_month(ethiopian_month, ethiopian_year)
    _require_int("day", ethiopian_day)
    if not 1 <= ethiopian_day <= max_day:
        raise InvalidDateError(
            f"Ethiopian day must be in 1..{max_day} for month {ethiopian_month} "
            f"of {ethiopian_year}, got {ethiopian_day}"
        )


def _validate_gregorian(year: int, month: int, day: int) -> None:
    for name, value in (("year", year), ("month", month), ("day", day)):
        _require_int(name, value)
    try:
        date(year, month, day)
    except ValueError as e:
        raise InvalidDateError(f"Invalid Gregorian date {year}-{month}-{day}: {e}") from e


def to_gregorian(ethiopian_year: int, ethiopian_month: int, ethiopian_day: int) -> GregorianDate:
    """Converts an Ethiopian date to the Gregorian (year, month, day)."""
    validate_ethiopian(ethiopian_year, ethiopian_month, ethiopian_day)
    year, month, day = coptic.to_gregorian(
        ethiopian_year - COPTIC_YEAR_OFFSET, ethiopian_month, ethiopian_day
    )
    if not date.min.year <= year <= date.max.year:
        raise InvalidDateError(
            f"Ethiopian date {ethiopian_year}-{ethiopian_month}-{ethiopian_day} "
            "is outside the supported era"
        )
    return GregorianDate(year, month, day)


def to_ethiopian(gregorian_year: int, gregorian_month: int, gregorian_day: int) -> EthiopianDate:
    """Converts a Gregorian date to the Ethiopian (year, month, day)."""
    _validate_gregorian(gregorian_year, gregorian_month, gregorian_day)
    year, month, day = coptic.from_gregorian(gregorian_year, gregorian_month, gregorian_day)
    return EthiopianDate(year + COPTIC_YEAR_OFFSET, month, day)


def ethiopian_from_date(value: date) -> EthiopianDate:
    return to_ethiopian(value.year, value.month, value.day)


def month_name(ethiopian_month: int) -> str:
    _require_int("month", ethiopian_month)
    if not 1 <= ethiopian_month <= MONTHS_PER_YEAR:
        raise InvalidDateError(f"Unknown Ethiopian month {ethiopian_month}")
    return AMHARIC_MONTHS[ethiopian_month - 1]
