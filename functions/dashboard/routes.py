"""
HTTP routes for the dashboard backend API.
"""

from __future__ import annotations

import logging
from dataclasses import asdict

from fastapi import (
    APIRouter,
    Body,
    Depends,
    File,
    Form,
    HTTPException,
    Query,
    Request,
    Response,
    UploadFile,
)
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from dashboard.auth import AuthError, IdentityVerifier, authenticate
from dashboard.config import Settings, get_settings
from dashboard.db import DocumentNotFound, DocumentStore
from dashboard.dependencies import (
    get_daily_verse_notifier,
    get_document_store,
    get_identity_verifier,
    get_storage_client,
)
from dashboard.forms import VerseForm, VerseFormError, form_to_verse, new_form, verse_to_form
from dashboard.repositories import ContentRepository, DailyVerseRepository, PushTokenRepository
from dashboard.schemas import (
    BookModel,
    BooksResponse,
    ContentItemsResponse,
    DailyVerseListResponse,
    DailyVerseModel,
    EthiopianDateResponse,
    GregorianDateResponse,
    IdResponse,
    MonthInfo,
    MonthsResponse,
    NotifyResponse,
    OkResponse,
    PushTokenPayload,
    SessionRequest,
    UploadResponse,
    VerseFormModel,
)
from dashboard.storage import StorageClient
from dashboard.uploads import UPLOAD_KINDS, build_upload_path, content_type_for
from dashboard.verse_counts import VerseCountsUnavailable, fetch_verse_counts
from notifications.daily_verse import DailyVerseNotifier
from shared.bible_books import BIBLE_BOOKS
from shared.date_keys import date_key, today_ethiopian
from shared.ethiopian_calendar import (
    AMHARIC_MONTHS,
    InvalidDateError,
    days_in_month,
    is_leap_year,
    month_name,
    to_ethiopian,
    to_gregorian,
)
from shared.firebase_constants import CONTENT_COLLECTIONS
from shared.types import DailyVerse, Platform, PushToken

logger = logging.getLogger(__name__)

router = APIRouter()


def _verse_model(verse: DailyVerse) -> DailyVerseModel:
    return DailyVerseModel.model_validate(asdict(verse))


def _form_model(form: VerseForm) -> VerseFormModel:
    return VerseFormModel.model_validate(asdict(form))


# ---------- Daily verse notifications ----------


@router.api_route(
    "/notify-daily-verse", methods=["GET", "POST"], response_model=NotifyResponse
)
def notify_daily_verse(
    request: Request,
    notifier: DailyVerseNotifier = Depends(get_daily_verse_notifier),
    settings: Settings = Depends(get_settings),
):
    """
    Sends today's verse to every registered device. Meant for a scheduler;
    requires the `x-cron-secret` header when CRON_SECRET is configured.
    """
    result = notifier.handle_request(request.headers, settings.cron_secret)
    return JSONResponse(result.as_response(), status_code=result.status_code)


# ---------- Calendar ----------


@router.get("/calendar/to-gregorian", response_model=GregorianDateResponse)
def calendar_to_gregorian(
    year: int = Query(...),
    month: int = Query(...),
    day: int = Query(...),
):
    try:
        g = to_gregorian(year, month, day)
    except InvalidDateError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return GregorianDateResponse(
        year=g.year, month=g.month, day=g.day, date_key=date_key(*g)
    )


@router.get("/calendar/to-ethiopian", response_model=EthiopianDateResponse)
def calendar_to_ethiopian(
    year: int = Query(...),
    month: int = Query(...),
    day: int = Query(...),
):
    try:
        e = to_ethiopian(year, month, day)
    except InvalidDateError as err:
        raise HTTPException(status_code=400, detail=str(err))
    return EthiopianDateResponse(
        year=e.year, month=e.month, day=e.day, month_name=month_name(e.month)
    )


@router.get("/calendar/today", response_model=EthiopianDateResponse)
def calendar_today(settings: Settings = Depends(get_settings)):
    e = today_ethiopian(settings.notify_time_zone)
    return EthiopianDateResponse(
        year=e.year, month=e.month, day=e.day, month_name=month_name(e.month)
    )


@router.get("/calendar/months", response_model=MonthsResponse)
def calendar_months(year: int = Query(...)):
    months = [
        MonthInfo(month=m, name=name, days=days_in_month(m, year))
        for m, name in enumerate(AMHARIC_MONTHS, start=1)
    ]
    return MonthsResponse(year=year, leap_year=is_leap_year(year), months=months)


# ---------- Daily verses ----------


@router.get("/daily-verses", response_model=DailyVerseListResponse)
def list_daily_verses(store: DocumentStore = Depends(get_document_store)):
    repo = DailyVerseRepository(store)
    return DailyVerseListResponse(
        verses=[_verse_model(verse) for verse, _ in repo.list_verses()]
    )


@router.get("/daily-verses/new-form", response_model=VerseFormModel)
def daily_verse_new_form(settings: Settings = Depends(get_settings)):
    return _form_model(new_form(settings.notify_time_zone))


@router.post("/daily-verses", response_model=IdResponse, status_code=201)
def create_daily_verse(
    payload: VerseFormModel, store: DocumentStore = Depends(get_document_store)
):
    try:
        verse = form_to_verse(VerseForm(**payload.model_dump()))
    except VerseFormError as e:
        raise HTTPException(status_code=400, detail=str(e))
    verse_id = DailyVerseRepository(store).add(verse)
    return IdResponse(id=verse_id)


@router.get("/daily-verses/{verse_id}", response_model=DailyVerseModel)
def get_daily_verse(verse_id: str, store: DocumentStore = Depends(get_document_store)):
    verse = DailyVerseRepository(store).get(verse_id)
    if verse is None:
        raise HTTPException(status_code=404, detail="Verse not found")
    return _verse_model(verse)


@router.get("/daily-verses/{verse_id}/form", response_model=VerseFormModel)
def get_daily_verse_form(
    verse_id: str,
    store: DocumentStore = Depends(get_document_store),
    settings: Settings = Depends(get_settings),
):
    verse = DailyVerseRepository(store).get(verse_id)
    if verse is None:
        raise HTTPException(status_code=404, detail="Verse not found")
    return _form_model(verse_to_form(verse, settings.notify_time_zone))


@router.put("/daily-verses/{verse_id}", response_model=OkResponse)
def update_daily_verse(
    verse_id: str,
    payload: VerseFormModel,
    store: DocumentStore = Depends(get_document_store),
):
    try:
        verse = form_to_verse(VerseForm(**payload.model_dump()))
    except VerseFormError as e:
        raise HTTPException(status_code=400, detail=str(e))
    try:
        DailyVerseRepository(store).update(verse_id, verse)
    except DocumentNotFound:
        raise HTTPException(status_code=404, detail="Verse not found")
    return OkResponse()


@router.delete("/daily-verses/{verse_id}", response_model=OkResponse)
def delete_daily_verse(verse_id: str, store: DocumentStore = Depends(get_document_store)):
    DailyVerseRepository(store).delete(verse_id)
    return OkResponse()


# ---------- Push tokens ----------


def _current_uid(request: Request, verifier: IdentityVerifier, settings: Settings) -> str:
    try:
        return authenticate(verifier, request.cookies.get(settings.session_cookie_name))
    except AuthError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


def _valid_push_payload(payload: PushTokenPayload) -> bool:
    required = (
        payload.user_id,
        payload.fcm_token,
        payload.platform,
        payload.device_id,
        payload.app_version,
    )
    if not all(isinstance(v, str) and v.strip() for v in required):
        return False
    return payload.platform.lower() in {p.value for p in Platform}


@router.post("/push-tokens", response_model=OkResponse)
def register_push_token(
    request: Request,
    body: dict = Body(...),
    store: DocumentStore = Depends(get_document_store),
    verifier: IdentityVerifier = Depends(get_identity_verifier),
    settings: Settings = Depends(get_settings),
):
    uid = _current_uid(request, verifier, settings)
    try:
        payload = PushTokenPayload.model_validate(body)
    except ValidationError:
        raise HTTPException(status_code=400, detail="Invalid payload")
    if not _valid_push_payload(payload):
        raise HTTPException(status_code=400, detail="Invalid payload")
    if uid != payload.user_id:
        raise HTTPException(status_code=403, detail="Forbidden")

    token = PushToken(
        user_id=payload.user_id,
        device_id=payload.device_id,
        platform=payload.platform.lower(),
        fcm_token=payload.fcm_token,
        app_version=payload.app_version,
        apns_token=payload.apns_token,
    )
    PushTokenRepository(store).upsert(token)
    logger.info("Registered push token for %s", token.doc_id)
    return OkResponse()


@router.delete("/push-tokens/{device_id}", response_model=OkResponse)
def delete_push_token(
    device_id: str,
    request: Request,
    store: DocumentStore = Depends(get_document_store),
    verifier: IdentityVerifier = Depends(get_identity_verifier),
    settings: Settings = Depends(get_settings),
):
    uid = _current_uid(request, verifier, settings)
    PushTokenRepository(store).delete(uid, device_id)
    return OkResponse()


# ---------- Session ----------


@router.post("/session", response_model=OkResponse)
def create_session(
    response: Response,
    body: dict = Body(...),
    settings: Settings = Depends(get_settings),
):
    try:
        payload = SessionRequest.model_validate(body)
    except ValidationError:
        raise HTTPException(status_code=400, detail="Invalid request")
    if not payload.token:
        raise HTTPException(status_code=400, detail="Missing token")
    response.set_cookie(
        settings.session_cookie_name,
        payload.token,
        max_age=int(payload.max_age_days * 24 * 60 * 60),
        path="/",
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )
    return OkResponse()


@router.delete("/session", response_model=OkResponse)
def delete_session(response: Response, settings: Settings = Depends(get_settings)):
    response.set_cookie(
        settings.session_cookie_name,
        "",
        max_age=0,
        path="/",
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )
    return OkResponse()


# ---------- Content collections ----------


def _content_repo(collection: str, store: DocumentStore) -> ContentRepository:
    if collection not in CONTENT_COLLECTIONS:
        raise HTTPException(status_code=404, detail="Unknown collection")
    return ContentRepository(store, collection)


@router.get("/content/{collection}", response_model=ContentItemsResponse)
def list_content(collection: str, store: DocumentStore = Depends(get_document_store)):
    return ContentItemsResponse(items=_content_repo(collection, store).list_items())


@router.post("/content/{collection}", response_model=IdResponse, status_code=201)
def add_content(
    collection: str,
    body: dict = Body(...),
    store: DocumentStore = Depends(get_document_store),
):
    body.pop("id", None)
    return IdResponse(id=_content_repo(collection, store).add(body))


@router.put("/content/{collection}/{doc_id}", response_model=OkResponse)
def update_content(
    collection: str,
    doc_id: str,
    body: dict = Body(...),
    store: DocumentStore = Depends(get_document_store),
):
    body.pop("id", None)
    try:
        _content_repo(collection, store).update(doc_id, body)
    except DocumentNotFound:
        raise HTTPException(status_code=404, detail="Document not found")
    return OkResponse()


@router.delete("/content/{collection}/{doc_id}", response_model=OkResponse)
def delete_content(
    collection: str, doc_id: str, store: DocumentStore = Depends(get_document_store)
):
    _content_repo(collection, store).delete(doc_id)
    return OkResponse()


# ---------- Uploads ----------


@router.post("/uploads/{kind}", response_model=UploadResponse, status_code=201)
def upload_file(
    kind: str,
    file: UploadFile = File(...),
    label: str | None = Form(None),
    lang: str | None = Form(None),
    short_name: str | None = Form(None),
    storage: StorageClient = Depends(get_storage_client),
):
    if kind not in UPLOAD_KINDS:
        raise HTTPException(status_code=404, detail="Unknown upload kind")
    if not file.filename:
        raise HTTPException(status_code=400, detail="File name required")
    try:
        path = build_upload_path(
            kind, file.filename, label, lang=lang, short_name=short_name
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    data = file.file.read()
    url = storage.upload_bytes(path, data, content_type_for(kind, file.content_type))
    logger.info("Uploaded %s (%d bytes) to %s", file.filename, len(data), path)
    return UploadResponse(path=path, url=url)


# ---------- Reference data ----------


@router.get("/books", response_model=BooksResponse)
def list_books():
    return BooksResponse(books=[BookModel.model_validate(asdict(b)) for b in BIBLE_BOOKS])


@router.get("/verse-counts")
def verse_counts(settings: Settings = Depends(get_settings)):
    try:
        return fetch_verse_counts(settings.verse_counts_url)
    except VerseCountsUnavailable:
        raise HTTPException(status_code=502, detail="Failed to fetch verse counts")
