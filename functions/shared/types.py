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

from dataclasses import asdict, dataclass
from enum import StrEnum
from typing import Any, Optional

from shared.constants import PUSH_TOKEN_ID_SEPARATOR
from shared.date_keys import date_key


class VerseStatus(StrEnum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class Platform(StrEnum):
    IOS = "ios"
    ANDROID = "android"
    WEB = "web"


@dataclass
class DisplayDate:
    """A Gregorian calendar day (month is 1-12)."""

    day: int
    month: int
    year: int

    @property
    def key(self) -> str:
        return date_key(self.year, self.month, self.day)


@dataclass
class DailyVerse:
    """A verse scheduled for display on one day.

    Legacy records may lack the numeric reference fields, so every field is
    optional here; consumers decide their own fallbacks.
    """

    book: Optional[int] = None
    chapter: Optional[int] = None
    verse: Optional[int] = None
    reference: str = ""
    text: str = ""
    tag: Optional[str] = None
    status: str = VerseStatus.ACTIVE
    display_date: Optional[DisplayDate] = None
    display_date_key: Optional[str] = None
    id: Optional[str] = None

    def to_document(self) -> dict[str, Any]:
        """Returns the Firestore document body (without the id)."""
        doc = asdict(self)
        doc.pop("id")
        if not self.tag:
            doc.pop("tag")
        doc["status"] = str(self.status)
        if self.display_date is not None:
            doc["display_date_key"] = self.display_date.key
        return doc


@dataclass
class PushToken:
    """A registered device. Stored camelCased under `{user_id}__{device_id}`."""

    user_id: str
    device_id: str
    platform: str
    fcm_token: str
    app_version: str
    apns_token: Optional[str] = None

    @property
    def doc_id(self) -> str:
        return push_token_doc_id(self.user_id, self.device_id)


def push_token_doc_id(user_id: str, device_id: str) -> str:
    return f"{user_id}{PUSH_TOKEN_ID_SEPARATOR}{device_id}"
