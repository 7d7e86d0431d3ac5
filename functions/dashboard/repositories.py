"""
Typed access to the dashboard collections on top of a DocumentStore.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, fields
from typing import Optional

from dacite import Config, from_dict

from dashboard.db import DocumentStore
from shared.firebase_constants import (
    DAILY_VERSE_COLLECTION,
    DAILY_VERSE_NOTIFICATIONS_COLLECTION,
    PUSH_TOKENS_COLLECTION,
)
from shared.json_utils import convert_keys
from shared.types import DailyVerse, PushToken, VerseStatus, push_token_doc_id

logger = logging.getLogger(__name__)

_DACITE_CONFIG = Config(check_types=False)
_VERSE_FIELDS = {f.name for f in fields(DailyVerse)}
_DATE_PARTS = {"day", "month", "year"}
_PUSH_TOKEN_DEFAULTS = {
    "user_id": "",
    "device_id": "",
    "platform": "",
    "fcm_token": "",
    "app_version": "",
}


def verse_from_document(doc_id: Optional[str], data: dict) -> DailyVerse:
    known = {k: v for k, v in data.items() if k in _VERSE_FIELDS}
    display_date = known.get("display_date")
    if not isinstance(display_date, dict) or not _DATE_PARTS <= display_date.keys():
        known.pop("display_date", None)
    verse = from_dict(data_class=DailyVerse, data=known, config=_DACITE_CONFIG)
    verse.id = doc_id
    return verse


def push_token_from_document(data: dict) -> PushToken:
    snake = convert_keys(data, "camel_to_snake")
    present = {k: v for k, v in snake.items() if v is not None}
    return from_dict(
        data_class=PushToken,
        data={**_PUSH_TOKEN_DEFAULTS, **present},
        config=_DACITE_CONFIG,
    )


class DailyVerseRepository:
    """CRUD for the `daily_verse` collection and the notifier's verse lookup."""

    def __init__(self, store: DocumentStore):
        self.store = store

    def find_active_verse(self, date_key: str) -> Optional[DailyVerse]:
        items = self.store.query(
            DAILY_VERSE_COLLECTION,
            [("display_date_key", date_key), ("status", str(VerseStatus.ACTIVE))],
            limit=1,
        )
        if not items:
            return None
        doc_id, data = items[0]
        return verse_from_document(doc_id, data)

    def list_verses(self) -> list[tuple[DailyVerse, dict]]:
        """Newest first, each verse paired with its raw document."""
        items = self.store.list_documents(
            DAILY_VERSE_COLLECTION, order_by="createdAt", descending=True
        )
        logger.info("Fetched %d daily verses", len(items))
        return [(verse_from_document(doc_id, data), data) for doc_id, data in items]

    def get(self, verse_id: str) -> Optional[DailyVerse]:
        data = self.store.get_document(DAILY_VERSE_COLLECTION, verse_id)
        if data is None:
            return None
        return verse_from_document(verse_id, data)

    def add(self, verse: DailyVerse) -> str:
        payload = verse.to_document()
        payload["createdAt"] = self.store.timestamp()
        verse_id = self.store.add_document(DAILY_VERSE_COLLECTION, payload)
        logger.info("Created daily verse %s for %s", verse_id, verse.display_date_key)
        return verse_id

    def update(self, verse_id: str, verse: DailyVerse) -> None:
        payload = verse.to_document()
        payload["updatedAt"] = self.store.timestamp()
        self.store.update_document(DAILY_VERSE_COLLECTION, verse_id, payload)
        logger.info("Updated daily verse %s", verse_id)

    def set_date_key(self, verse_id: str, date_key: str) -> None:
        self.store.update_document(
            DAILY_VERSE_COLLECTION, verse_id, {"display_date_key": date_key}
        )

    def delete(self, verse_id: str) -> None:
        self.store.delete_document(DAILY_VERSE_COLLECTION, verse_id)
        logger.info("Deleted daily verse %s", verse_id)


class PushTokenRepository:
    """Device push tokens, keyed by `{userId}__{deviceId}`."""

    def __init__(self, store: DocumentStore):
        self.store = store

    def list_push_tokens(self) -> list[PushToken]:
        return [
            push_token_from_document(data)
            for _, data in self.store.list_documents(PUSH_TOKENS_COLLECTION)
        ]

    def upsert(self, token: PushToken) -> None:
        payload = convert_keys(asdict(token), "snake_to_camel")
        now = self.store.timestamp()
        payload["updatedAt"] = now
        if self.store.get_document(PUSH_TOKENS_COLLECTION, token.doc_id) is None:
            payload["createdAt"] = now
        self.store.set_document(PUSH_TOKENS_COLLECTION, token.doc_id, payload, merge=True)

    def delete(self, user_id: str, device_id: str) -> None:
        self.store.delete_document(
            PUSH_TOKENS_COLLECTION, push_token_doc_id(user_id, device_id)
        )


class NotificationMarkerRepository:
    """One document per date key recording that the daily verse went out."""

    def __init__(self, store: DocumentStore):
        self.store = store

    def has_marker(self, date_key: str) -> bool:
        return (
            self.store.get_document(DAILY_VERSE_NOTIFICATIONS_COLLECTION, date_key)
            is not None
        )

    def write_marker(self, date_key: str, record: dict) -> None:
        payload = {**record, "sentAt": self.store.timestamp()}
        self.store.set_document(DAILY_VERSE_NOTIFICATIONS_COLLECTION, date_key, payload)


class ContentRepository:
    """Untyped CRUD for the simple dashboard collections."""

    def __init__(self, store: DocumentStore, collection: str):
        self.store = store
        self.collection = collection

    def list_items(self) -> list[dict]:
        return [
            {"id": doc_id, **data}
            for doc_id, data in self.store.list_documents(self.collection)
        ]

    def add(self, data: dict) -> str:
        payload = {**data, "createdAt": self.store.timestamp()}
        return self.store.add_document(self.collection, payload)

    def update(self, doc_id: str, data: dict) -> None:
        payload = {**data, "updatedAt": self.store.timestamp()}
        self.store.update_document(self.collection, doc_id, payload)

    def delete(self, doc_id: str) -> None:
        self.store.delete_document(self.collection, doc_id)
