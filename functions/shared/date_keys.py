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

"""Canonical date keys used to look up day-scoped content."""

from datetime import date, datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from shared.constants import NOTIFY_TIME_ZONE
from shared.ethiopian_calendar import EthiopianDate, ethiopian_from_date


def date_key(year: int, month: int, day: int) -> str:
    """Formats a Gregorian date as "{year}-{month}-{day}" without zero padding."""
    return f"{year}-{month}-{day}"


def local_date(
    time_zone: str = NOTIFY_TIME_ZONE, now: Optional[datetime] = None
) -> date:
    """Returns the calendar date in `time_zone` at instant `now` (default: current time).

    A naive `now` is taken to be UTC.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(ZoneInfo(time_zone)).date()


def local_date_key(
    time_zone: str = NOTIFY_TIME_ZONE, now: Optional[datetime] = None
) -> str:
    today = local_date(time_zone, now)
    return date_key(today.year, today.month, today.day)


def today_ethiopian(
    time_zone: str = NOTIFY_TIME_ZONE, now: Optional[datetime] = None
) -> EthiopianDate:
    return ethiopian_from_date(local_date(time_zone, now))
