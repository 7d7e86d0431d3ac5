"""
Conversion between the daily-verse editor form and stored verse records.

Editors pick dates on the Ethiopian calendar; records are stored with the
Gregorian `display_date` and its `display_date_key`.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from shared.bible_books import get_book
from shared.date_keys import date_key, today_ethiopian
from shared.ethiopian_calendar import (
    InvalidDateError,
    to_ethiopian,
    to_gregorian,
    validate_ethiopian,
)
from shared.types import DailyVerse, DisplayDate, VerseStatus

FormValue = Union[str, int, None]


class VerseFormError(ValueError):
    """The submitted form cannot be turned into a verse record."""


@dataclass
class VerseForm:
    book: FormValue = ""
    chapter: FormValue = ""
    verse: FormValue = ""
    reference: str = ""
    text: str = ""
    tag: str = ""
    status: str = VerseStatus.ACTIVE
    day: FormValue = ""  # Ethiopian day
    month: FormValue = ""  # Ethiopian month, 1-13
    year: FormValue = ""  # Ethiopian year


def _to_int(value: FormValue) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def build_reference(book: int, chapter: int, verse: int) -> str:
    found = get_book(book)
    if found:
        return f"{found.name_amharic} {chapter}:{verse}"
    return f"{chapter}:{verse}"


def form_to_verse(form: VerseForm) -> DailyVerse:
    """Validates the form and converts its Ethiopian date to the stored record."""
    book, chapter, verse = (_to_int(v) for v in (form.book, form.chapter, form.verse))
    if None in (book, chapter, verse):
        raise VerseFormError("Book, Chapter, and Verse must be filled correctly")

    ey, em, ed = (_to_int(v) for v in (form.year, form.month, form.day))
    if None in (ey, em, ed):
        raise VerseFormError("Ethiopian date is incomplete")
    try:
        validate_ethiopian(ey, em, ed)
        gregorian = to_gregorian(ey, em, ed)
    except InvalidDateError as e:
        raise VerseFormError(str(e)) from e

    display_date = DisplayDate(
        day=gregorian.day, month=gregorian.month, year=gregorian.year
    )
    tag = (form.tag or "").strip()
    return DailyVerse(
        book=book,
        chapter=chapter,
        verse=verse,
        reference=build_reference(book, chapter, verse),
        text=(form.text or "").strip(),
        tag=tag or None,
        status=form.status or VerseStatus.ACTIVE,
        display_date=display_date,
        display_date_key=date_key(display_date.year, display_date.month, display_date.day),
    )


def verse_to_form(
    verse: DailyVerse, time_zone: str, now: Optional[datetime] = None
) -> VerseForm:
    """Loads a stored verse back into the editor, on the Ethiopian calendar.

    Records without a display date open on today's date.
    """
    if verse.display_date is not None:
        dd = verse.display_date
        try:
            ethiopian = to_ethiopian(dd.year, dd.month, dd.day)
        except InvalidDateError:
            ethiopian = today_ethiopian(time_zone, now)
    else:
        ethiopian = today_ethiopian(time_zone, now)

    def _text(value) -> str:
        return "" if value is None else str(value)

    return VerseForm(
        book=_text(verse.book),
        chapter=_text(verse.chapter),
        verse=_text(verse.verse),
        reference="",
        text=verse.text or "",
        tag=verse.tag or "",
        status=verse.status or VerseStatus.ACTIVE,
        day=str(ethiopian.day),
        month=str(ethiopian.month),
        year=str(ethiopian.year),
    )


def new_form(time_zone: str, now: Optional[datetime] = None) -> VerseForm:
    """An empty form prefilled with today's Ethiopian date."""
    today = today_ethiopian(time_zone, now)
    return VerseForm(day=str(today.day), month=str(today.month), year=str(today.year))
