"""
delayed-response function — Minimal Appwrite function for getExecution polling tests.

Deploy with entrypoint `main.py`; the runtime calls main(context).
Third-party imports are listed in requirements.txt beside this file;
the build step installs them before deploy.

Paths:
  /test  — sleeps RESPONSE_DELAY_SECONDS (default 2) to simulate async work,
           then returns {ok, shortlistId, message, timestamp}
  other  — returns {ok, message, availablePaths}

Response payload for /test:
  {
    "ok":          true
    "shortlistId": str — fixed test shortlist ID
    "message":     str
    "timestamp":   str — ISO 8601 UTC
  }
"""

import json
import os
import time
from datetime import UTC, datetime
from typing import Any

from aws_lambda_powertools import Logger

logger = Logger(service="delayed-response")

TEST_PATH = "/test"
TEST_SHORTLIST_ID = "test-shortlist-123"
DEFAULT_DELAY_SECONDS = 2.0


def _delay_seconds() -> float:
    raw = os.environ.get("RESPONSE_DELAY_SECONDS", "").strip()
    if not raw:
        return DEFAULT_DELAY_SECONDS
    return max(float(raw), 0.0)


def main(context: Any) -> Any:
    """Appwrite entrypoint: dispatch on context.req.path."""
    path = getattr(context.req, "path", None) or "/"

    context.log(f"Received request to path: {path}")
    logger.info("delayed-response invoked", extra={"request_path": path})

    if path == TEST_PATH:
        payload = _delayed_payload()
        context.log(f"Returning response: {json.dumps(payload)}")
        return context.res.json(payload)
    return context.res.json(_index_payload())


def _delayed_payload() -> dict[str, Any]:
    delay = _delay_seconds()
    time.sleep(delay)
    payload = {
        "ok": True,
        "shortlistId": TEST_SHORTLIST_ID,
        "message": "This is test data from the minimal server",
        "timestamp": datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
    }
    logger.info("delayed response ready", extra={"delay_seconds": delay})
    return payload


def _index_payload() -> dict[str, Any]:
    return {
        "ok": True,
        "message": "Minimal test server is running",
        "availablePaths": [TEST_PATH],
    }
