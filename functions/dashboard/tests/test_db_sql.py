import unittest

from dashboard.db import DocumentNotFound, SqlDocumentStore
from dashboard.repositories import DailyVerseRepository, PushTokenRepository
from shared.types import DailyVerse, DisplayDate, PushToken


class SqlDocumentStoreTests(unittest.TestCase):
    """
    Uses SQLite via SQLAlchemy URL for fast/local testing of the SQL store.
    """

    def setUp(self):
        self.store = SqlDocumentStore("sqlite+pysqlite:///:memory:")

    def test_add_get_update_delete(self):
        doc_id = self.store.add_document("news", {"title": "Timket"})
        self.assertEqual(self.store.get_document("news", doc_id), {"title": "Timket"})

        self.store.update_document("news", doc_id, {"body": "..."})
        self.assertEqual(
            self.store.get_document("news", doc_id), {"title": "Timket", "body": "..."}
        )

        self.store.delete_document("news", doc_id)
        self.assertIsNone(self.store.get_document("news", doc_id))

    def test_update_missing_document(self):
        with self.assertRaises(DocumentNotFound):
            self.store.update_document("news", "missing", {"title": "x"})

    def test_set_document_merge(self):
        self.store.set_document("users", "u1", {"name": "Abebe", "role": "editor"})
        self.store.set_document("users", "u1", {"role": "admin"}, merge=True)
        self.assertEqual(
            self.store.get_document("users", "u1"), {"name": "Abebe", "role": "admin"}
        )
        self.store.set_document("users", "u1", {"role": "viewer"})
        self.assertEqual(self.store.get_document("users", "u1"), {"role": "viewer"})

    def test_collections_are_isolated(self):
        self.store.set_document("news", "same-id", {"a": 1})
        self.store.set_document("events", "same-id", {"b": 2})
        self.assertEqual(self.store.get_document("news", "same-id"), {"a": 1})
        self.assertEqual(len(self.store.list_documents("events")), 1)

    def test_list_ordering_and_limit(self):
        for i, created in enumerate([3.0, 1.0, 2.0]):
            self.store.set_document("audios", f"a{i}", {"createdAt": created})
        self.store.set_document("audios", "no-date", {"title": "legacy"})

        newest_first = self.store.list_documents(
            "audios", order_by="createdAt", descending=True, limit=2
        )
        self.assertEqual([doc_id for doc_id, _ in newest_first], ["a0", "a2"])

    def test_active_verse_lookup(self):
        verses = DailyVerseRepository(self.store)
        verse = DailyVerse(
            book=1,
            chapter=1,
            verse=1,
            reference="ኦሪት ዘፍጥረት 1:1",
            display_date=DisplayDate(day=7, month=1, year=2024),
        )
        verse_id = verses.add(verse)
        verses.add(
            DailyVerse(
                book=2,
                chapter=1,
                verse=1,
                status="inactive",
                display_date=DisplayDate(day=8, month=1, year=2024),
            )
        )

        found = verses.find_active_verse("2024-1-7")
        self.assertEqual(found.id, verse_id)
        self.assertEqual(found.display_date, DisplayDate(day=7, month=1, year=2024))
        self.assertIsNone(verses.find_active_verse("2024-1-8"))

    def test_push_token_upsert_keeps_created_at(self):
        tokens = PushTokenRepository(self.store)
        token = PushToken(
            user_id="u1",
            device_id="d1",
            platform="android",
            fcm_token="first",
            app_version="1.0",
        )
        tokens.upsert(token)
        created_at = self.store.get_document("push_tokens", "u1__d1")["createdAt"]

        token.fcm_token = "second"
        tokens.upsert(token)

        stored = self.store.get_document("push_tokens", "u1__d1")
        self.assertEqual(stored["fcmToken"], "second")
        self.assertEqual(stored["createdAt"], created_at)
        self.assertEqual([t.fcm_token for t in tokens.list_push_tokens()], ["second"])


if __name__ == "__main__":
    unittest.main()
