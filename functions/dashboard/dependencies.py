"""
Dependency wiring for the FastAPI app and the Cloud Functions entry points.
"""

from __future__ import annotations

from dashboard.auth import FirebaseIdentityVerifier, IdentityVerifier, InMemoryIdentityVerifier
from dashboard.config import Settings, get_settings
from dashboard.db import (
    DocumentStore,
    FirestoreDocumentStore,
    InMemoryDocumentStore,
    SqlDocumentStore,
)
from dashboard.firebase import get_firebase_app
from dashboard.messaging import FcmPushDispatcher, InMemoryPushDispatcher
from dashboard.repositories import (
    DailyVerseRepository,
    NotificationMarkerRepository,
    PushTokenRepository,
)
from dashboard.storage import InMemoryStorageClient, S3StorageClient, StorageClient
from notifications.daily_verse import DailyVerseNotifier, PushDispatcher

_document_store: DocumentStore | None = None
_storage_client: StorageClient | None = None
_push_dispatcher: PushDispatcher | None = None
_identity_verifier: IdentityVerifier | None = None


def _use_firebase(settings: Settings) -> bool:
    return not settings.use_in_memory_backends and bool(settings.firebase_project_id)


def get_document_store() -> DocumentStore:
    """
    Return a singleton document store so state persists across requests.
    """
    global _document_store
    if _document_store:
        return _document_store

    settings = get_settings()
    if settings.use_in_memory_backends:
        _document_store = InMemoryDocumentStore()
    elif settings.database_url:
        _document_store = SqlDocumentStore(settings.database_url)
    elif settings.firebase_project_id:
        from firebase_admin import firestore

        app = get_firebase_app(settings.firebase_project_id)
        _document_store = FirestoreDocumentStore(firestore.client(app))
    else:
        _document_store = InMemoryDocumentStore()
    return _document_store


def get_storage_client() -> StorageClient:
    global _storage_client
    if _storage_client:
        return _storage_client

    settings = get_settings()
    if settings.use_in_memory_backends or not settings.storage_bucket:
        _storage_client = InMemoryStorageClient()
    else:
        _storage_client = S3StorageClient(
            bucket=settings.storage_bucket,
            region=settings.storage_region or "",
            endpoint=settings.storage_endpoint or "",
            access_key_id=settings.aws_access_key_id or "",
            secret_access_key=settings.aws_secret_access_key or "",
            public_base_url=settings.storage_public_base_url,
        )
    return _storage_client


def get_push_dispatcher() -> PushDispatcher:
    global _push_dispatcher
    if _push_dispatcher:
        return _push_dispatcher

    settings = get_settings()
    if _use_firebase(settings):
        _push_dispatcher = FcmPushDispatcher(
            app=get_firebase_app(settings.firebase_project_id)
        )
    else:
        _push_dispatcher = InMemoryPushDispatcher()
    return _push_dispatcher


def get_identity_verifier() -> IdentityVerifier:
    global _identity_verifier
    if _identity_verifier:
        return _identity_verifier

    settings = get_settings()
    if _use_firebase(settings):
        _identity_verifier = FirebaseIdentityVerifier(
            app=get_firebase_app(settings.firebase_project_id)
        )
    else:
        _identity_verifier = InMemoryIdentityVerifier()
    return _identity_verifier


def build_daily_verse_notifier(
    store: DocumentStore, dispatcher: PushDispatcher, settings: Settings
) -> DailyVerseNotifier:
    return DailyVerseNotifier(
        verses=DailyVerseRepository(store),
        tokens=PushTokenRepository(store),
        dispatcher=dispatcher,
        time_zone=settings.notify_time_zone,
        batch_size=settings.push_batch_size,
        markers=NotificationMarkerRepository(store),
        skip_if_sent=settings.daily_verse_skip_if_sent,
    )


def get_daily_verse_notifier() -> DailyVerseNotifier:
    return build_daily_verse_notifier(
        get_document_store(), get_push_dispatcher(), get_settings()
    )
