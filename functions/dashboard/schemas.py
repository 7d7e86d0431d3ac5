"""
Pydantic schemas for the dashboard FastAPI backend.
"""

from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from shared.constants import SESSION_MAX_AGE_DAYS

FormValue = Union[int, str]


class OkResponse(BaseModel):
    ok: bool = True


class IdResponse(BaseModel):
    id: str


class NotifyResponse(BaseModel):
    ok: Optional[bool] = None
    sent: Optional[int] = None
    message: Optional[str] = None
    error: Optional[str] = None


class EthiopianDateResponse(BaseModel):
    year: int
    month: int
    day: int
    month_name: str


class GregorianDateResponse(BaseModel):
    year: int
    month: int
    day: int
    date_key: str


class MonthInfo(BaseModel):
    month: int
    name: str
    days: int


class MonthsResponse(BaseModel):
    year: int
    leap_year: bool
    months: list[MonthInfo]


class DisplayDateModel(BaseModel):
    day: int
    month: int
    year: int


class DailyVerseModel(BaseModel):
    id: Optional[str] = None
    book: Optional[int] = None
    chapter: Optional[int] = None
    verse: Optional[int] = None
    reference: str = ""
    text: str = ""
    tag: Optional[str] = None
    status: str = "active"
    display_date: Optional[DisplayDateModel] = None
    display_date_key: Optional[str] = None


class DailyVerseListResponse(BaseModel):
    verses: list[DailyVerseModel]


class VerseFormModel(BaseModel):
    """Editor form; the date fields are on the Ethiopian calendar."""

    book: FormValue = ""
    chapter: FormValue = ""
    verse: FormValue = ""
    reference: str = ""
    text: str = ""
    tag: str = ""
    status: str = "active"
    day: FormValue = ""
    month: FormValue = ""
    year: FormValue = ""


class PushTokenPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: Optional[str] = Field(default=None, alias="userId")
    fcm_token: Optional[str] = Field(default=None, alias="fcmToken")
    apns_token: Optional[str] = Field(default=None, alias="apnsToken")
    platform: Optional[str] = None
    device_id: Optional[str] = Field(default=None, alias="deviceId")
    app_version: Optional[str] = Field(default=None, alias="appVersion")


class SessionRequest(BaseModel):
    token: Optional[str] = None
    max_age_days: float = Field(default=SESSION_MAX_AGE_DAYS, alias="maxAgeDays")


class ContentItemsResponse(BaseModel):
    items: list[dict]


class UploadResponse(BaseModel):
    path: str
    url: str


class BookModel(BaseModel):
    index: int
    name: str
    name_amharic: str
    chapters: int


class BooksResponse(BaseModel):
    books: list[BookModel]
