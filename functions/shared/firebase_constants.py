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

DAILY_VERSE_COLLECTION = "daily_verse"
DAILY_VERSE_NOTIFICATIONS_COLLECTION = "daily_verse_notifications"
PUSH_TOKENS_COLLECTION = "push_tokens"
BIBLE_SOURCES_COLLECTION = "bible_sources"
EVENTS_COLLECTION = "events"
EVENT_CATEGORIES_COLLECTION = "event_categories"
NEWS_COLLECTION = "news"
AUDIOS_COLLECTION = "audios"
USERS_COLLECTION = "users"

# Collections edited through the generic content endpoints.
CONTENT_COLLECTIONS = (
    BIBLE_SOURCES_COLLECTION,
    EVENTS_COLLECTION,
    EVENT_CATEGORIES_COLLECTION,
    NEWS_COLLECTION,
    AUDIOS_COLLECTION,
    USERS_COLLECTION,
)
