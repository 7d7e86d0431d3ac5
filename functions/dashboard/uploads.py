"""
Storage paths for files uploaded from the dashboard forms.
"""

from __future__ import annotations

import re
import time
from dataclasses import dataclass
from typing import Optional

_WHITESPACE = re.compile(r"\s+")
_DISALLOWED = re.compile(r"[^a-z0-9-_]")


@dataclass(frozen=True)
class UploadKind:
    prefix: str
    default_label: str = "untitled"
    content_type: Optional[str] = None


UPLOAD_KINDS = {
    "audio-thumbnail": UploadKind(prefix="audios/thumbnails"),
    "audio-file": UploadKind(prefix="audios/files"),
    "user-image": UploadKind(prefix="users", default_label="user"),
    "event-image": UploadKind(prefix="events"),
    "news-image": UploadKind(prefix="news"),
    "bible-json": UploadKind(prefix="bibles", content_type="application/json"),
}


def sanitize_segment(value: str) -> str:
    value = _WHITESPACE.sub("-", value.strip().lower())
    return _DISALLOWED.sub("", value)


def sanitize_filename(filename: str) -> str:
    """Keeps only the basename, with stem and extension sanitised like a label."""
    name = filename.replace("\\", "/").rsplit("/", 1)[-1]
    stem, dot, ext = name.rpartition(".")
    if not dot:
        stem, ext = ext, ""
    stem = sanitize_segment(stem) or "file"
    ext = sanitize_segment(ext)
    return f"{stem}.{ext}" if ext else stem


def build_upload_path(
    kind: str,
    filename: str,
    label: Optional[str] = None,
    *,
    lang: Optional[str] = None,
    short_name: Optional[str] = None,
    timestamp_ms: Optional[int] = None,
) -> str:
    """
    Returns `{prefix}/{label}/{timestamp}-{filename}`.

    Bible JSON files are filed under `bibles/{lang}/{short_name}/` instead of a label.
    """
    spec = UPLOAD_KINDS.get(kind)
    if spec is None:
        raise KeyError(kind)
    ts = timestamp_ms if timestamp_ms is not None else int(time.time() * 1000)
    if kind == "bible-json":
        if not lang or not short_name:
            raise ValueError("lang and short_name are required for bible-json uploads")
        lang_segment = sanitize_segment(lang)
        name_segment = sanitize_segment(short_name)
        if not lang_segment or not name_segment:
            raise ValueError("lang and short_name must contain letters or digits")
        folder = f"{lang_segment}/{name_segment}"
    else:
        folder = sanitize_segment(label or "") or sanitize_segment(spec.default_label)
    return f"{spec.prefix}/{folder}/{ts}-{sanitize_filename(filename)}"


def content_type_for(kind: str, declared: Optional[str]) -> str:
    spec = UPLOAD_KINDS[kind]
    return spec.content_type or declared or "application/octet-stream"
