"""
Push gateway abstraction for Firebase Cloud Messaging and in-memory testing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

from notifications.daily_verse import BatchResult, PushMessage
from shared.constants import MAX_TOKENS_PER_BATCH


def _check_batch(tokens: Sequence[str]) -> None:
    if len(tokens) > MAX_TOKENS_PER_BATCH:
        raise ValueError(
            f"A multicast batch holds at most {MAX_TOKENS_PER_BATCH} tokens, got {len(tokens)}"
        )


@dataclass
class InMemoryPushDispatcher:
    """Test double recording every multicast call.

    Tokens listed in `failing_tokens` are reported as failed deliveries;
    batch indexes in `raise_on_batches` raise instead of returning.
    """

    calls: list = field(default_factory=list)
    failing_tokens: set = field(default_factory=set)
    raise_on_batches: set = field(default_factory=set)
    error: Optional[Exception] = None

    def send_multicast(self, message: PushMessage, tokens: Sequence[str]) -> BatchResult:
        _check_batch(tokens)
        batch_index = len(self.calls)
        self.calls.append((message, list(tokens)))
        if batch_index in self.raise_on_batches:
            raise self.error or ConnectionError("push gateway unavailable")
        failed = sum(1 for token in tokens if token in self.failing_tokens)
        return BatchResult(success_count=len(tokens) - failed, failure_count=failed)

    def reset(self) -> None:
        self.calls.clear()


class FcmPushDispatcher:
    """Sends multicast messages through the Firebase Admin messaging API."""

    def __init__(self, app=None, dry_run: bool = False):
        self.app = app
        self.dry_run = dry_run

    def send_multicast(self, message: PushMessage, tokens: Sequence[str]) -> BatchResult:
        from firebase_admin import messaging

        _check_batch(tokens)
        multicast = messaging.MulticastMessage(
            notification=messaging.Notification(title=message.title, body=message.body),
            data={str(k): str(v) for k, v in message.data.items()},
            tokens=list(tokens),
        )
        response = messaging.send_each_for_multicast(
            multicast, dry_run=self.dry_run, app=self.app
        )
        return BatchResult(
            success_count=response.success_count,
            failure_count=response.failure_count,
        )
