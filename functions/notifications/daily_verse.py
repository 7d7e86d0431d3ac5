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

"""Daily verse push notification job.

One run resolves today's date key in the configured timezone, looks up the
active verse for that key, collects every registered FCM token and sends a
single notification to all of them in gateway-sized batches. Nothing is
persisted between runs unless the optional "already sent" marker is enabled.
"""

from __future__ import annotations

import hmac
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Iterable, Iterator, Mapping, Optional, Protocol, Sequence

from shared.constants import (
    CRON_SECRET_HEADER,
    DAILY_VERSE_FALLBACK_REFERENCE,
    DAILY_VERSE_MESSAGE_TYPE,
    DAILY_VERSE_NOTIFICATION_BODY,
    DAILY_VERSE_NOTIFICATION_TITLE,
    MAX_TOKENS_PER_BATCH,
    NOTIFY_TIME_ZONE,
)
from shared.date_keys import local_date_key
from shared.types import DailyVerse, PushToken

logger = logging.getLogger(__name__)

NO_VERSE_MESSAGE = "No daily verse found"
NO_TOKENS_MESSAGE = "No push tokens registered"
ALREADY_SENT_MESSAGE = "Daily verse already sent"
UNAUTHORIZED_ERROR = "Unauthorized"
FAILURE_ERROR = "Failed to send notification"


class UpstreamQueryError(Exception):
    """The document store could not be queried."""


class UpstreamDispatchError(Exception):
    """The push gateway rejected or failed a whole batch."""


@dataclass
class PushMessage:
    title: str
    body: str
    data: dict[str, str] = field(default_factory=dict)


@dataclass
class BatchResult:
    success_count: int
    failure_count: int


class VerseSource(Protocol):
    def find_active_verse(self, date_key: str) -> Optional[DailyVerse]:
        ...


class PushTokenSource(Protocol):
    def list_push_tokens(self) -> Iterable[PushToken]:
        ...


class PushDispatcher(Protocol):
    """Sends one message to at most `MAX_TOKENS_PER_BATCH` tokens."""

    def send_multicast(self, message: PushMessage, tokens: Sequence[str]) -> BatchResult:
        ...


class NotificationMarkers(Protocol):
    def has_marker(self, date_key: str) -> bool:
        ...

    def write_marker(self, date_key: str, record: dict) -> None:
        ...


@dataclass
class NotifyResult:
    ok: bool
    status_code: int = 200
    sent: Optional[int] = None
    message: Optional[str] = None
    error: Optional[str] = None
    date_key: Optional[str] = None
    success_count: int = 0
    failure_count: int = 0
    failed_batches: int = 0

    def as_response(self) -> dict:
        """Public response body; errors are kept apart from business no-ops."""
        if self.error:
            return {"error": self.error}
        body: dict = {"ok": self.ok}
        if self.sent is not None:
            body["sent"] = self.sent
        if self.message is not None:
            body["message"] = self.message
        return body


def unauthorized() -> NotifyResult:
    return NotifyResult(ok=False, status_code=401, error=UNAUTHORIZED_ERROR)


def failure(date_key: Optional[str] = None) -> NotifyResult:
    return NotifyResult(ok=False, status_code=500, error=FAILURE_ERROR, date_key=date_key)


def is_authorized(provided: Optional[str], secret: Optional[str]) -> bool:
    """An unset secret leaves the endpoint open."""
    if not secret:
        return True
    if not provided:
        return False
    return hmac.compare_digest(provided.encode("utf-8"), secret.encode("utf-8"))


def unique_tokens(records: Iterable[PushToken]) -> list[str]:
    """Non-empty FCM tokens, de-duplicated in first-seen order."""
    seen: dict[str, None] = {}
    for record in records:
        token = record.fcm_token
        if isinstance(token, str) and token:
            seen.setdefault(token, None)
    return list(seen)


def chunked(items: Sequence[str], size: int) -> Iterator[Sequence[str]]:
    for start in range(0, len(items), size):
        yield items[start : start + size]


def _field_or_default(value) -> str:
    return str(value if value is not None else 1)


def build_message(verse: DailyVerse) -> PushMessage:
    reference = str(verse.reference or "") or DAILY_VERSE_FALLBACK_REFERENCE
    return PushMessage(
        title=DAILY_VERSE_NOTIFICATION_TITLE,
        body=DAILY_VERSE_NOTIFICATION_BODY.format(reference=reference),
        data={
            "type": DAILY_VERSE_MESSAGE_TYPE,
            "book": _field_or_default(verse.book),
            "chapter": _field_or_default(verse.chapter),
            "verse": _field_or_default(verse.verse),
        },
    )


@dataclass
class _DispatchOutcome:
    batches: int = 0
    failed_batches: int = 0
    success_count: int = 0
    failure_count: int = 0


class DailyVerseNotifier:
    """Runs the daily verse notification against injected collaborators."""

    def __init__(
        self,
        verses: VerseSource,
        tokens: PushTokenSource,
        dispatcher: PushDispatcher,
        *,
        time_zone: str = NOTIFY_TIME_ZONE,
        batch_size: int = MAX_TOKENS_PER_BATCH,
        markers: Optional[NotificationMarkers] = None,
        skip_if_sent: bool = False,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        if not 1 <= batch_size <= MAX_TOKENS_PER_BATCH:
            raise ValueError(
                f"batch_size must be in 1..{MAX_TOKENS_PER_BATCH}, got {batch_size}"
            )
        if skip_if_sent and markers is None:
            raise ValueError("skip_if_sent requires a marker store")
        self.verses = verses
        self.tokens = tokens
        self.dispatcher = dispatcher
        self.time_zone = time_zone
        self.batch_size = batch_size
        self.markers = markers
        self.skip_if_sent = skip_if_sent
        self._clock = clock

    def handle_request(
        self,
        headers: Mapping[str, str],
        cron_secret: Optional[str],
        request_id: Optional[str] = None,
    ) -> NotifyResult:
        """Authorizes an HTTP trigger, then runs the job."""
        request_id = request_id or uuid.uuid4().hex
        provided = headers.get(CRON_SECRET_HEADER)
        logger.info(
            "[%s] Incoming notify request (secret header %s, user-agent %s)",
            request_id,
            "[redacted]" if provided else None,
            headers.get("user-agent"),
        )
        if not cron_secret:
            logger.warning(
                "[%s] CRON_SECRET is not configured; notify endpoint is open",
                request_id,
            )
        if not is_authorized(provided, cron_secret):
            logger.warning("[%s] Unauthorized notify request", request_id)
            return unauthorized()
        return self.run(request_id=request_id)

    def run(self, request_id: Optional[str] = None) -> NotifyResult:
        """Executes one notification run. Never raises."""
        request_id = request_id or uuid.uuid4().hex
        key = None
        try:
            now = self._clock() if self._clock else None
            key = local_date_key(self.time_zone, now)
            logger.info("[%s] Derived date key %s", request_id, key)
            return self._run_for_key(key, request_id)
        except UpstreamQueryError:
            logger.exception("[%s] Document store query failed", request_id)
            return failure(key)
        except Exception:
            logger.exception("[%s] Failed to send notification", request_id)
            return failure(key)

    def _run_for_key(self, key: str, request_id: str) -> NotifyResult:
        try:
            verse = self.verses.find_active_verse(key)
        except Exception as e:
            raise UpstreamQueryError(f"Verse lookup failed for {key}: {e}") from e

        if verse is None:
            logger.warning("[%s] No active verse found for %s", request_id, key)
            return NotifyResult(ok=False, message=NO_VERSE_MESSAGE, date_key=key)

        if self.skip_if_sent and self.markers.has_marker(key):
            logger.info("[%s] Daily verse for %s was already sent", request_id, key)
            return NotifyResult(ok=False, message=ALREADY_SENT_MESSAGE, date_key=key)

        try:
            tokens = unique_tokens(self.tokens.list_push_tokens())
        except Exception as e:
            raise UpstreamQueryError(f"Push token listing failed: {e}") from e
        logger.info("[%s] Retrieved %d push tokens", request_id, len(tokens))

        if not tokens:
            logger.warning("[%s] No push tokens registered", request_id)
            return NotifyResult(ok=False, message=NO_TOKENS_MESSAGE, date_key=key)

        message = build_message(verse)
        outcome = self._dispatch(message, tokens, request_id)

        if outcome.failed_batches == outcome.batches:
            logger.error(
                "[%s] All %d batches failed to reach the push gateway",
                request_id,
                outcome.batches,
            )
            return NotifyResult(
                ok=False,
                status_code=500,
                error=FAILURE_ERROR,
                date_key=key,
                failure_count=outcome.failure_count,
                failed_batches=outcome.failed_batches,
            )

        if self.skip_if_sent:
            self._write_marker(key, verse, tokens, outcome, request_id)

        logger.info(
            "[%s] Notification process completed: %d tokens, %d delivered, %d failed",
            request_id,
            len(tokens),
            outcome.success_count,
            outcome.failure_count,
        )
        return NotifyResult(
            ok=True,
            sent=len(tokens),
            date_key=key,
            success_count=outcome.success_count,
            failure_count=outcome.failure_count,
            failed_batches=outcome.failed_batches,
        )

    def _dispatch(
        self, message: PushMessage, tokens: Sequence[str], request_id: str
    ) -> _DispatchOutcome:
        outcome = _DispatchOutcome()
        for index, batch in enumerate(chunked(tokens, self.batch_size)):
            outcome.batches += 1
            logger.info(
                "[%s] Sending batch %d (%d tokens)", request_id, index, len(batch)
            )
            try:
                result = self.dispatcher.send_multicast(message, batch)
            except Exception as e:
                # One failed batch must not stop the rest.
                err = UpstreamDispatchError(f"Batch {index} failed: {e}")
                logger.error("[%s] %s", request_id, err, exc_info=e)
                outcome.failed_batches += 1
                outcome.failure_count += len(batch)
                continue
            logger.info(
                "[%s] Batch %d result: %d succeeded, %d failed",
                request_id,
                index,
                result.success_count,
                result.failure_count,
            )
            outcome.success_count += result.success_count
            outcome.failure_count += result.failure_count
        return outcome

    def _write_marker(
        self,
        key: str,
        verse: DailyVerse,
        tokens: Sequence[str],
        outcome: _DispatchOutcome,
        request_id: str,
    ) -> None:
        record = {
            "date_key": key,
            "verse_id": verse.id,
            "reference": verse.reference,
            "token_count": len(tokens),
            "success_count": outcome.success_count,
            "failure_count": outcome.failure_count,
            "request_id": request_id,
        }
        try:
            self.markers.write_marker(key, record)
        except Exception:
            # Notifications already went out; a retry would re-send them.
            logger.exception("[%s] Failed to write sent marker for %s", request_id, key)
