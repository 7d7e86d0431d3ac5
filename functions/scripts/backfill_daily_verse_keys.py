"""
Backfill `display_date_key` on stored daily verses.

Older records were written with zero-padded or missing keys; the notifier
looks verses up by the unpadded "{year}-{month}-{day}" key derived from
`display_date`, so those records are never found.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from dashboard.db import DocumentStore
from dashboard.dependencies import get_document_store
from dashboard.repositories import DailyVerseRepository, verse_from_document
from shared.firebase_constants import DAILY_VERSE_COLLECTION


logger = logging.getLogger(__name__)


def backfill_keys(store: DocumentStore, *, dry_run: bool) -> int:
    repo = DailyVerseRepository(store)
    updated = 0
    for doc_id, raw in store.list_documents(DAILY_VERSE_COLLECTION):
        verse = verse_from_document(doc_id, raw)
        if verse.display_date is None:
            logger.warning("Verse %s has no display_date; skipping", verse.id)
            continue
        expected = verse.display_date.key
        if raw.get("display_date_key") == expected:
            continue
        logger.info(
            "Verse %s: %r -> %r", verse.id, raw.get("display_date_key"), expected
        )
        updated += 1
        if not dry_run:
            repo.set_date_key(verse.id, expected)
    return updated


def main() -> int:
    parser = argparse.ArgumentParser(description="Backfill daily verse date keys")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report how many verses would be updated without saving",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(message)s")
    updated = backfill_keys(get_document_store(), dry_run=args.dry_run)
    logger.info("Updated %d verses", updated)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
