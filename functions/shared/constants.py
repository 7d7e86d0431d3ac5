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

# Daily verse notifications
NOTIFY_TIME_ZONE = "Africa/Addis_Ababa"
MAX_TOKENS_PER_BATCH = 500
CRON_SECRET_HEADER = "x-cron-secret"
DAILY_VERSE_NOTIFICATION_TITLE = "Daily reminder to read your Bible"
DAILY_VERSE_NOTIFICATION_BODY = "Today's verse: {reference}, Click to continue!"
DAILY_VERSE_FALLBACK_REFERENCE = "Daily Verse"
DAILY_VERSE_MESSAGE_TYPE = "daily_verse"

# Push token registration
PUSH_TOKEN_ID_SEPARATOR = "__"

# Dashboard
SESSION_MAX_AGE_DAYS = 7
VERSE_COUNTS_URL = (
    "https://raw.githubusercontent.com/bkuhl/bible-verse-counts-per-chapter/master/bible.json"
)
