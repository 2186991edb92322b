"""Fatal error type and Google API error translation.

Every failure in a run is fatal: a remote call, a bad date, a missing
page to clone from. Nothing is retried.
"""

from __future__ import annotations

import json
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

# Error classification for actionable messages
GOOGLE_API_ERRORS = {
    400: ("Bad Request", "Check your request parameters"),
    401: ("Unauthorized", "Delete the cached token file and re-authenticate"),
    403: ("Forbidden", "Enable the required API in Google Cloud Console or check sharing permissions"),
    404: ("Not Found", "Check the calendar, spreadsheet and template IDs in config.json"),
    429: ("Rate Limited", "Too many requests. Wait a few minutes and run again"),
    500: ("Server Error", "Google server issue. Run again in a few minutes"),
    503: ("Service Unavailable", "Google service temporarily unavailable. Run again shortly"),
}


class FatalAbort(Exception):
    """Raised for any failure that must stop the whole run."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def _error_details(error: Any) -> str:
    """Pull the API's own message out of an HttpError body if present."""
    details = str(error)
    try:
        content = json.loads(error.content.decode("utf-8"))
        if "error" in content:
            details = content["error"].get("message", details)
    except (json.JSONDecodeError, KeyError, AttributeError, UnicodeDecodeError):
        pass
    return details


def http_error_message(error: Any, operation: str) -> str:
    """Build a one-line message for an HttpError raised during ``operation``."""
    status_code = error.resp.status
    error_name, fix = GOOGLE_API_ERRORS.get(status_code, ("Unknown Error", "Check the error details"))
    return f"{operation} failed: {status_code} {error_name}: {_error_details(error)} ({fix})"


def log_error(log_file: Optional[Path], operation: str, message: str) -> None:
    """Append an entry to the persistent error log.

    The log is best effort; a run that is already failing is not made to
    fail differently because the log could not be written.
    """
    if log_file is None:
        return

    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    entry = f"""[{timestamp}] {operation}
  Details: {message}

"""
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        with open(log_file, "a") as f:
            f.write(entry)
    except OSError as exc:
        print(f"  WARN: could not write error log {log_file}: {exc}", file=sys.stderr)
