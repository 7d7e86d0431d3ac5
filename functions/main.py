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

# Cloud functions for the daily verse push notifications.
#
# This file containing Python cloud functions must be named main.py.
# See https://cloud.google.com/run/docs/write-functions#python for more info.

# Standard library imports
import json
import uuid

# Third-party library imports
from firebase_admin import initialize_app, firestore
from firebase_functions import https_fn, logger, options, scheduler_fn

# Local application imports
from dashboard.config import get_settings
from dashboard.db import FirestoreDocumentStore
from dashboard.dependencies import build_daily_verse_notifier
from dashboard.messaging import FcmPushDispatcher
from notifications.daily_verse import DailyVerseNotifier, NotifyResult
from shared.constants import NOTIFY_TIME_ZONE

initialize_app()


def _build_notifier() -> DailyVerseNotifier:
    """Wires the notifier to Firestore and Firebase Cloud Messaging."""
    return build_daily_verse_notifier(
        FirestoreDocumentStore(firestore.client()),
        FcmPushDispatcher(),
        get_settings(),
    )


def _json_response(body: dict, status: int) -> https_fn.Response:
    return https_fn.Response(
        json.dumps(body), status=status, mimetype="application/json"
    )


@https_fn.on_request(memory=options.MemoryOption.MB_256, timeout_sec=120)
def notify_daily_verse(req: https_fn.Request) -> https_fn.Response:
    """
    Sends today's daily verse to every registered device.

    Intended to be called by an external scheduler with the `x-cron-secret`
    header. Accepts GET and POST.

    Returns:
        A JSON response: {"ok": true, "sent": n}, {"ok": false, "message": ...}
        when there was nothing to send, or {"error": ...} with status 401/500.
    """
    if req.method not in ("GET", "POST"):
        return _json_response({"error": "Method not allowed"}, 405)

    request_id = uuid.uuid4().hex
    settings = get_settings()
    result = _build_notifier().handle_request(
        req.headers, settings.cron_secret, request_id=request_id
    )
    logger.info(
        f"notify_daily_verse {request_id}: status={result.status_code} "
        f"sent={result.sent} dateKey={result.date_key}"
    )
    return _json_response(result.as_response(), result.status_code)


@scheduler_fn.on_schedule(
    schedule="0 7 * * *",
    timezone=scheduler_fn.Timezone(NOTIFY_TIME_ZONE),
    memory=options.MemoryOption.MB_256,
)
def scheduled_daily_verse(event: scheduler_fn.ScheduledEvent) -> None:
    """Daily run at 07:00 Addis Ababa time."""
    run_scheduled_daily_verse()


def run_scheduled_daily_verse() -> NotifyResult:
    """Scheduler invocations are not public, so the cron secret is not checked."""
    result = _build_notifier().run(request_id=f"scheduled-{uuid.uuid4().hex}")
    if result.error:
        logger.error(f"Scheduled daily verse run failed: {result.error}")
    return result
