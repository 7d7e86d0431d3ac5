import unittest

from dashboard.db import InMemoryDocumentStore
from dashboard.repositories import (
    ContentRepository,
    DailyVerseRepository,
    push_token_from_document,
    verse_from_document,
)
from dashboard.verse_counts import parse_verse_counts
from shared.types import DisplayDate


class RepositoryTests(unittest.TestCase):
    def setUp(self):
        self.store = InMemoryDocumentStore()

    def test_verse_from_partial_document(self):
        verse = verse_from_document(
            "v1", {"reference": "Daily", "display_date": {"day": 7}, "extra": True}
        )
        self.assertEqual(verse.id, "v1")
        self.assertIsNone(verse.display_date)
        self.assertIsNone(verse.book)

    def test_verse_from_full_document(self):
        verse = verse_from_document(
            "v2",
            {"book": 1, "display_date": {"day": 7, "month": 1, "year": 2024}},
        )
        self.assertEqual(verse.display_date, DisplayDate(day=7, month=1, year=2024))

    def test_push_token_from_document(self):
        token = push_token_from_document(
            {"userId": "u", "deviceId": "d", "fcmToken": "t", "apnsToken": None}
        )
        self.assertEqual(token.fcm_token, "t")
        self.assertEqual(token.platform, "")
        self.assertIsNone(token.apns_token)

    def test_list_verses_newest_first(self):
        repo = DailyVerseRepository(self.store)
        self.store.set_document("daily_verse", "old", {"createdAt": 1.0})
        self.store.set_document("daily_verse", "new", {"createdAt": 2.0})
        self.assertEqual([v.id for v, _ in repo.list_verses()], ["new", "old"])

    def test_set_date_key(self):
        repo = DailyVerseRepository(self.store)
        self.store.set_document("daily_verse", "v", {"display_date_key": "2024-01-07"})
        repo.set_date_key("v", "2024-1-7")
        self.assertEqual(
            self.store.get_document("daily_verse", "v")["display_date_key"], "2024-1-7"
        )

    def test_content_repository_stamps(self):
        repo = ContentRepository(self.store, "events")
        doc_id = repo.add({"title": "Meskel"})
        repo.update(doc_id, {"title": "Meskel Square"})
        stored = self.store.get_document("events", doc_id)
        self.assertIn("createdAt", stored)
        self.assertIn("updatedAt", stored)
        self.assertEqual(repo.list_items()[0]["id"], doc_id)


class VerseCountsTests(unittest.TestCase):
    def test_parse(self):
        payload = [
            {"book": "Genesis", "chapters": [{"verses": "31"}, {"verses": 25}]},
            {"book": "Exodus"},
        ]
        self.assertEqual(parse_verse_counts(payload), {1: [31, 25], 2: []})


if __name__ == "__main__":
    unittest.main()
