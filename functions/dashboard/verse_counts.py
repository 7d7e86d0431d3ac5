"""
Per-chapter verse counts for every book, from a public JSON catalogue.
"""

from __future__ import annotations

import logging

import requests

logger = logging.getLogger(__name__)


class VerseCountsUnavailable(Exception):
    pass


def parse_verse_counts(payload: list) -> dict[int, list[int]]:
    """Maps 1-based book index -> verse count of each chapter."""
    mapping: dict[int, list[int]] = {}
    for index, book in enumerate(payload, start=1):
        chapters = book.get("chapters") or []
        mapping[index] = [int(chapter["verses"]) for chapter in chapters]
    return mapping


def fetch_verse_counts(url: str, timeout: float = 10) -> dict[int, list[int]]:
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
        return parse_verse_counts(response.json())
    except (requests.RequestException, ValueError, KeyError, TypeError) as e:
        logger.error("Failed to fetch verse counts from %s: %s", url, e)
        raise VerseCountsUnavailable(str(e)) from e
