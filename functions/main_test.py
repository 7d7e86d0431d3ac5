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
# Standard library imports
import os
import unittest
from unittest.mock import patch, MagicMock
from datetime import datetime, timezone

# Third-party library imports
from functions_framework import create_app

# Local application imports
# This patch must be applied before importing 'main'
with patch("firebase_admin.initialize_app"):
    import main
from dashboard.config import Settings
from dashboard.db import InMemoryDocumentStore
from dashboard.messaging import InMemoryPushDispatcher
from dashboard.repositories import DailyVerseRepository, PushTokenRepository
from notifications.daily_verse import DailyVerseNotifier
from shared.firebase_constants import DAILY_VERSE_COLLECTION
from shared.types import PushToken

MAIN_SOURCE = os.path.join(os.path.dirname(os.path.abspath(__file__)), "main.py")

# 2024-01-07 04:30 UTC is 07:30 in Addis Ababa.
FIXED_NOW = datetime(2024, 1, 7, 4, 30, tzinfo=timezone.utc)


def _seed(store: InMemoryDocumentStore, token_count: int = 2):
    store.add_document(
        DAILY_VERSE_COLLECTION,
        {
            "book": 43,
            "chapter": 3,
            "verse": 16,
            "reference": "ዮሐንስ 3:16",
            "text": "...",
            "status": "active",
            "display_date": {"day": 7, "month": 1, "year": 2024},
            "display_date_key": "2024-1-7",
        },
    )
    tokens = PushTokenRepository(store)
    for i in range(token_count):
        tokens.upsert(
            PushToken(
                user_id=f"user{i}",
                device_id="phone",
                platform="android",
                fcm_token=f"token-{i}",
                app_version="1.0.0",
            )
        )


class TestMainNotifyDailyVerse(unittest.TestCase):

    @patch("firebase_admin.initialize_app")
    def setUp(self, initialize_app_mock):
        self.client = create_app("notify_daily_verse", MAIN_SOURCE).test_client()
        self.store = InMemoryDocumentStore()
        self.dispatcher = InMemoryPushDispatcher()
        self.notifier = DailyVerseNotifier(
            verses=DailyVerseRepository(self.store),
            tokens=PushTokenRepository(self.store),
            dispatcher=self.dispatcher,
            clock=lambda: FIXED_NOW,
        )

    def _settings(self, secret=None):
        return Settings(cron_secret=secret)

    @patch("main.get_settings")
    @patch("main._build_notifier")
    def test_sends_to_all_tokens(self, mock_build, mock_settings):
        _seed(self.store)
        mock_build.return_value = self.notifier
        mock_settings.return_value = self._settings("s3cret")

        response = self.client.post("/", headers={"x-cron-secret": "s3cret"})

        self.assertEqual(
            response.status_code,
            200,
            f"Request failed with status {response.status_code}. Body: {response.get_data(as_text=True)}",
        )
        self.assertEqual(response.get_json(), {"ok": True, "sent": 2})
        self.assertEqual(len(self.dispatcher.calls), 1)
        message, tokens = self.dispatcher.calls[0]
        self.assertEqual(tokens, ["token-0", "token-1"])
        self.assertEqual(message.body, "Today's verse: ዮሐንስ 3:16, Click to continue!")

    @patch("main.get_settings")
    @patch("main._build_notifier")
    def test_get_is_accepted(self, mock_build, mock_settings):
        _seed(self.store, token_count=1)
        mock_build.return_value = self.notifier
        mock_settings.return_value = self._settings("s3cret")

        response = self.client.get("/", headers={"x-cron-secret": "s3cret"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json(), {"ok": True, "sent": 1})

    @patch("main.get_settings")
    @patch("main._build_notifier")
    def test_wrong_secret_is_rejected(self, mock_build, mock_settings):
        _seed(self.store)
        mock_build.return_value = self.notifier
        mock_settings.return_value = self._settings("s3cret")

        response = self.client.post("/", headers={"x-cron-secret": "nope"})

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.get_json(), {"error": "Unauthorized"})
        self.assertEqual(self.dispatcher.calls, [])

    @patch("main.get_settings")
    @patch("main._build_notifier")
    def test_no_verse_is_a_business_no_op(self, mock_build, mock_settings):
        mock_build.return_value = self.notifier
        mock_settings.return_value = self._settings()

        response = self.client.post("/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.get_json(), {"ok": False, "message": "No daily verse found"}
        )

    @patch("main.get_settings")
    @patch("main._build_notifier")
    def test_no_tokens_is_a_business_no_op(self, mock_build, mock_settings):
        _seed(self.store, token_count=0)
        mock_build.return_value = self.notifier
        mock_settings.return_value = self._settings()

        response = self.client.post("/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.get_json(), {"ok": False, "message": "No push tokens registered"}
        )

    @patch("main.get_settings")
    @patch("main._build_notifier")
    def test_upstream_failure_returns_500(self, mock_build, mock_settings):
        verses = MagicMock()
        verses.find_active_verse.side_effect = RuntimeError("firestore down")
        mock_build.return_value = DailyVerseNotifier(
            verses=verses,
            tokens=PushTokenRepository(self.store),
            dispatcher=self.dispatcher,
            clock=lambda: FIXED_NOW,
        )
        mock_settings.return_value = self._settings()

        response = self.client.post("/")

        self.assertEqual(response.status_code, 500)
        self.assertEqual(
            response.get_json(), {"error": "Failed to send notification"}
        )

    def test_other_methods_are_rejected(self):
        response = self.client.put("/")
        self.assertEqual(response.status_code, 405)


class TestMainScheduledDailyVerse(unittest.TestCase):

    def test_scheduled_run_skips_authorization(self):
        notifier = MagicMock()
        notifier.run.return_value = MagicMock(error=None)

        with patch.object(main, "_build_notifier", return_value=notifier):
            main.run_scheduled_daily_verse()

        notifier.run.assert_called_once()
        notifier.handle_request.assert_not_called()


if __name__ == "__main__":
    unittest.main()
