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

import unittest
from datetime import datetime, timezone
from unittest.mock import MagicMock

from dashboard.db import InMemoryDocumentStore
from dashboard.messaging import InMemoryPushDispatcher
from dashboard.repositories import (
    DailyVerseRepository,
    NotificationMarkerRepository,
    PushTokenRepository,
)
from notifications.daily_verse import (
    ALREADY_SENT_MESSAGE,
    NO_TOKENS_MESSAGE,
    NO_VERSE_MESSAGE,
    DailyVerseNotifier,
    build_message,
    chunked,
    is_authorized,
    unique_tokens,
)
from shared.firebase_constants import (
    DAILY_VERSE_COLLECTION,
    DAILY_VERSE_NOTIFICATIONS_COLLECTION,
)
from shared.types import DailyVerse, PushToken

# 07:30 on 2024-01-07 in Addis Ababa.
FIXED_NOW = datetime(2024, 1, 7, 4, 30, tzinfo=timezone.utc)
TODAY_KEY = "2024-1-7"


def _token(i, fcm_token=None):
    return PushToken(
        user_id=f"user{i}",
        device_id=f"device{i}",
        platform="ios",
        fcm_token=fcm_token if fcm_token is not None else f"token-{i}",
        app_version="2.1.0",
    )


class _StaticTokens:
    def __init__(self, tokens):
        self.tokens = tokens

    def list_push_tokens(self):
        return self.tokens


class DailyVerseNotifierTest(unittest.TestCase):

    def setUp(self):
        self.store = InMemoryDocumentStore()
        self.dispatcher = InMemoryPushDispatcher()
        self.push_tokens = PushTokenRepository(self.store)

    def _notifier(self, **kwargs):
        kwargs.setdefault("tokens", self.push_tokens)
        return DailyVerseNotifier(
            verses=DailyVerseRepository(self.store),
            dispatcher=self.dispatcher,
            clock=lambda: FIXED_NOW,
            **kwargs,
        )

    def _add_verse(self, key=TODAY_KEY, status="active", **fields):
        data = {
            "book": 19,
            "chapter": 23,
            "verse": 1,
            "reference": "መዝሙር 23:1",
            "text": "...",
            "status": status,
            "display_date_key": key,
        }
        data.update(fields)
        return self.store.add_document(DAILY_VERSE_COLLECTION, data)

    def _add_tokens(self, count):
        for i in range(count):
            self.push_tokens.upsert(_token(i))

    def test_sends_one_batch_to_all_tokens(self):
        self._add_verse()
        self._add_tokens(3)

        result = self._notifier().run()

        self.assertTrue(result.ok)
        self.assertEqual(result.status_code, 200)
        self.assertEqual(result.as_response(), {"ok": True, "sent": 3})
        self.assertEqual(len(self.dispatcher.calls), 1)
        message, tokens = self.dispatcher.calls[0]
        self.assertEqual(tokens, ["token-0", "token-1", "token-2"])
        self.assertEqual(message.title, "Daily reminder to read your Bible")
        self.assertEqual(message.body, "Today's verse: መዝሙር 23:1, Click to continue!")
        self.assertEqual(
            message.data,
            {"type": "daily_verse", "book": "19", "chapter": "23", "verse": "1"},
        )

    def test_splits_tokens_into_batches_of_500(self):
        self._add_verse()
        tokens = _StaticTokens([_token(i) for i in range(1200)])

        result = self._notifier(tokens=tokens).run()

        self.assertEqual(result.as_response(), {"ok": True, "sent": 1200})
        self.assertEqual(
            [len(batch) for _, batch in self.dispatcher.calls], [500, 500, 200]
        )
        sent = [token for _, batch in self.dispatcher.calls for token in batch]
        self.assertEqual(sent, [f"token-{i}" for i in range(1200)])

    def test_custom_batch_size(self):
        self._add_verse()
        self._add_tokens(5)

        self._notifier(batch_size=2).run()

        self.assertEqual([len(batch) for _, batch in self.dispatcher.calls], [2, 2, 1])

    def test_batch_size_is_bounded(self):
        with self.assertRaises(ValueError):
            self._notifier(batch_size=501)
        with self.assertRaises(ValueError):
            self._notifier(batch_size=0)

    def test_no_verse_for_today(self):
        self._add_verse(key="2024-1-6")
        self._add_verse(status="inactive")
        self._add_tokens(2)

        result = self._notifier().run()

        self.assertFalse(result.ok)
        self.assertEqual(result.status_code, 200)
        self.assertEqual(result.as_response(), {"ok": False, "message": NO_VERSE_MESSAGE})
        self.assertEqual(self.dispatcher.calls, [])

    def test_no_tokens_registered(self):
        self._add_verse()

        result = self._notifier().run()

        self.assertEqual(result.status_code, 200)
        self.assertEqual(
            result.as_response(), {"ok": False, "message": NO_TOKENS_MESSAGE}
        )
        self.assertEqual(self.dispatcher.calls, [])

    def test_wrong_secret_is_rejected_before_any_query(self):
        self._add_verse()
        self._add_tokens(2)
        self.store.query_count = 0

        result = self._notifier().handle_request({"x-cron-secret": "nope"}, "s3cret")

        self.assertEqual(result.status_code, 401)
        self.assertEqual(result.as_response(), {"error": "Unauthorized"})
        self.assertEqual(self.store.query_count, 0)
        self.assertEqual(self.dispatcher.calls, [])

    def test_missing_secret_header_is_rejected(self):
        result = self._notifier().handle_request({}, "s3cret")
        self.assertEqual(result.status_code, 401)

    def test_matching_secret_runs_the_job(self):
        self._add_verse()
        self._add_tokens(1)

        result = self._notifier().handle_request({"x-cron-secret": "s3cret"}, "s3cret")

        self.assertEqual(result.as_response(), {"ok": True, "sent": 1})

    def test_unset_secret_is_open_but_logged(self):
        self._add_verse()
        self._add_tokens(1)

        with self.assertLogs("notifications.daily_verse", level="WARNING") as logs:
            result = self._notifier().handle_request({}, None)

        self.assertTrue(result.ok)
        self.assertTrue(any("CRON_SECRET" in line for line in logs.output))

    def test_missing_fields_fall_back_to_defaults(self):
        self.store.add_document(
            DAILY_VERSE_COLLECTION,
            {"status": "active", "display_date_key": TODAY_KEY},
        )
        self._add_tokens(1)

        self._notifier().run()

        message, _ = self.dispatcher.calls[0]
        self.assertEqual(message.body, "Today's verse: Daily Verse, Click to continue!")
        self.assertEqual(
            message.data,
            {"type": "daily_verse", "book": "1", "chapter": "1", "verse": "1"},
        )

    def test_duplicate_and_empty_tokens_are_dropped(self):
        self._add_verse()
        tokens = _StaticTokens(
            [_token(0, "a"), _token(1, "b"), _token(2, "a"), _token(3, ""), _token(4, "c")]
        )

        result = self._notifier(tokens=tokens).run()

        self.assertEqual(result.sent, 3)
        self.assertEqual(self.dispatcher.calls[0][1], ["a", "b", "c"])

    def test_partial_batch_failure_still_succeeds(self):
        self._add_verse()
        self.dispatcher.raise_on_batches = {1}
        tokens = _StaticTokens([_token(i) for i in range(1200)])

        result = self._notifier(tokens=tokens).run()

        self.assertTrue(result.ok)
        self.assertEqual(result.sent, 1200)
        self.assertEqual(len(self.dispatcher.calls), 3)
        self.assertEqual(result.failed_batches, 1)
        self.assertEqual(result.success_count, 700)
        self.assertEqual(result.failure_count, 500)

    def test_per_token_failures_are_counted(self):
        self._add_verse()
        self._add_tokens(3)
        self.dispatcher.failing_tokens = {"token-1"}

        result = self._notifier().run()

        self.assertTrue(result.ok)
        self.assertEqual(result.success_count, 2)
        self.assertEqual(result.failure_count, 1)

    def test_all_batches_failing_is_an_error(self):
        self._add_verse()
        self._add_tokens(2)
        self.dispatcher.raise_on_batches = {0}

        result = self._notifier().run()

        self.assertFalse(result.ok)
        self.assertEqual(result.status_code, 500)
        self.assertEqual(result.as_response(), {"error": "Failed to send notification"})

    def test_verse_query_failure_is_an_error(self):
        verses = MagicMock()
        verses.find_active_verse.side_effect = RuntimeError("deadline exceeded")
        notifier = DailyVerseNotifier(
            verses=verses,
            tokens=self.push_tokens,
            dispatcher=self.dispatcher,
            clock=lambda: FIXED_NOW,
        )

        result = notifier.run()

        self.assertEqual(result.status_code, 500)
        self.assertEqual(result.date_key, TODAY_KEY)
        self.assertEqual(self.dispatcher.calls, [])

    def test_token_query_failure_is_an_error(self):
        self._add_verse()
        tokens = MagicMock()
        tokens.list_push_tokens.side_effect = RuntimeError("unavailable")

        result = self._notifier(tokens=tokens).run()

        self.assertEqual(result.status_code, 500)
        self.assertEqual(self.dispatcher.calls, [])

    def test_marker_prevents_second_send(self):
        self._add_verse()
        self._add_tokens(2)
        notifier = self._notifier(
            markers=NotificationMarkerRepository(self.store), skip_if_sent=True
        )

        first = notifier.run()
        second = notifier.run()

        self.assertEqual(first.as_response(), {"ok": True, "sent": 2})
        self.assertEqual(
            second.as_response(), {"ok": False, "message": ALREADY_SENT_MESSAGE}
        )
        self.assertEqual(len(self.dispatcher.calls), 1)
        marker = self.store.get_document(DAILY_VERSE_NOTIFICATIONS_COLLECTION, TODAY_KEY)
        self.assertEqual(marker["token_count"], 2)

    def test_without_marker_every_run_sends(self):
        self._add_verse()
        self._add_tokens(1)
        notifier = self._notifier()

        notifier.run()
        notifier.run()

        self.assertEqual(len(self.dispatcher.calls), 2)

    def test_skip_if_sent_requires_markers(self):
        with self.assertRaises(ValueError):
            self._notifier(skip_if_sent=True)


class HelpersTest(unittest.TestCase):

    def test_is_authorized(self):
        self.assertTrue(is_authorized(None, None))
        self.assertTrue(is_authorized("anything", ""))
        self.assertTrue(is_authorized("s3cret", "s3cret"))
        self.assertFalse(is_authorized(None, "s3cret"))
        self.assertFalse(is_authorized("s3cre", "s3cret"))

    def test_chunked(self):
        self.assertEqual(list(chunked(["a", "b", "c"], 2)), [["a", "b"], ["c"]])
        self.assertEqual(list(chunked([], 2)), [])

    def test_unique_tokens_keeps_first_seen_order(self):
        records = [_token(0, "z"), _token(1, "y"), _token(2, "z")]
        self.assertEqual(unique_tokens(records), ["z", "y"])

    def test_build_message_stringifies_zero(self):
        message = build_message(DailyVerse(book=0, chapter=0, verse=0, reference="x"))
        self.assertEqual(message.data["book"], "0")


if __name__ == "__main__":
    unittest.main()
