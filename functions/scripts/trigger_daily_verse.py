"""
Trigger the deployed daily verse notifier by hand.

Sends the cron secret header the same way the external scheduler does and
prints the JSON response.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path

import requests

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from shared.constants import CRON_SECRET_HEADER


logger = logging.getLogger(__name__)


def trigger(url: str, secret: str | None, method: str = "POST", timeout: float = 120) -> requests.Response:
    headers = {CRON_SECRET_HEADER: secret} if secret else {}
    return requests.request(method, url, headers=headers, timeout=timeout)


def main() -> int:
    parser = argparse.ArgumentParser(description="Trigger the daily verse notification")
    parser.add_argument("--url", required=True, help="notify_daily_verse endpoint URL")
    parser.add_argument(
        "--secret",
        default=os.environ.get("CRON_SECRET"),
        help="Cron secret (defaults to $CRON_SECRET)",
    )
    parser.add_argument("--method", choices=["GET", "POST"], default="POST")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(message)s")
    try:
        response = trigger(args.url, args.secret, args.method)
    except requests.RequestException as e:
        logger.error("Request failed: %s", e)
        return 1

    try:
        body = response.json()
    except ValueError:
        logger.error("Non-JSON response (%d): %s", response.status_code, response.text)
        return 1

    print(json.dumps(body, ensure_ascii=False))
    return 0 if response.ok and body.get("ok") else 1


if __name__ == "__main__":
    raise SystemExit(main())
