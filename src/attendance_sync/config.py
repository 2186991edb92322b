"""Shared configuration, paths, logging helpers and file output."""

from __future__ import annotations

import json
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from .errors import FatalAbort
from .ui.colors import warning

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------

HOME_ENV_VAR = "ATTENDANCE_SYNC_HOME"
DEFAULT_HOME = Path.home() / ".attendance-sync"
CONFIG_FILE_NAME = "config.json"
ERROR_LOG_FILE_NAME = "error.log"

SCOPES = [
    "https://www.googleapis.com/auth/calendar.readonly",
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/drive",
]

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_TIMEZONE = "Asia/Tokyo"

# Calendar query bounds
MAX_EVENT_RESULTS = 999

# Spreadsheet layout (fixed by the attendance sheet template)
MONTH_CELL = "M3:M3"
ATTENDANCE_RANGE = "D7:D37"
ATTENDANCE_ROWS = 31

# Document template
TEMPLATE_MONTH_TOKEN = "yyyymm"
MAX_DOCUMENT_SLOTS = 12
HOURS_PER_SLOT = 8

REQUIRED_KEYS = (
    "credentials_file_name",
    "oauth2_token_file_name",
    "calendar_id",
    "work_day_title",
    "work_start_time",
    "work_spreadsheet_ids",
    "work_document_template_id",
)

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

def _info(msg: str) -> None:
    """Print progress info to stderr."""
    print(f"  {msg}", file=sys.stderr)


def _warn(msg: str) -> None:
    """Print a warning to stderr."""
    print(f"  {warning('WARN:')} {msg}", file=sys.stderr)


# ---------------------------------------------------------------------------
# Home directory resolution
# ---------------------------------------------------------------------------

def resolve_home() -> Path:
    """Directory holding config.json, credentials and the cached token.

    ``ATTENDANCE_SYNC_HOME`` wins over the default ``~/.attendance-sync``.
    """
    if os.environ.get(HOME_ENV_VAR):
        return Path(os.environ[HOME_ENV_VAR]).expanduser().resolve()
    return DEFAULT_HOME


# ---------------------------------------------------------------------------
# Config loading
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Config:
    """Validated contents of config.json."""
    home: Path
    credentials_file_name: str
    oauth2_token_file_name: str
    calendar_id: str
    work_day_title: str
    work_start_time: str
    work_spreadsheet_ids: tuple[str, ...]
    work_document_template_id: str
    timezone: str = DEFAULT_TIMEZONE
    output_dir: Optional[Path] = None

    @property
    def credentials_path(self) -> Path:
        return self.home / self.credentials_file_name

    @property
    def token_path(self) -> Path:
        return self.home / self.oauth2_token_file_name

    @property
    def error_log_path(self) -> Path:
        return self.home / ERROR_LOG_FILE_NAME

    @property
    def pdf_dir(self) -> Path:
        return self.output_dir if self.output_dir is not None else Path.cwd()


def load_json(path: Path) -> dict[str, Any]:
    """Read and parse a JSON object, raising FatalAbort on any failure."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise FatalAbort(f"Config file not found: {path}")
    except OSError as exc:
        raise FatalAbort(f"Failed to open config file {path}: {exc}")
    except json.JSONDecodeError as exc:
        raise FatalAbort(f"Failed to decode config file {path}: {exc}")

    if not isinstance(data, dict):
        raise FatalAbort(f"Config file {path} must contain a JSON object")
    return data


def config_from_dict(data: dict[str, Any], home: Path) -> Config:
    """Validate raw config values and build a Config."""
    missing = [key for key in REQUIRED_KEYS if key not in data]
    if missing:
        raise FatalAbort(f"Config is missing required keys: {', '.join(missing)}")

    for key in REQUIRED_KEYS:
        if key == "work_spreadsheet_ids":
            continue
        if not isinstance(data[key], str) or not data[key]:
            raise FatalAbort(f"Config key '{key}' must be a non-empty string")

    spreadsheet_ids = data["work_spreadsheet_ids"]
    if not isinstance(spreadsheet_ids, list) or not all(isinstance(s, str) and s for s in spreadsheet_ids):
        raise FatalAbort("Config key 'work_spreadsheet_ids' must be a list of spreadsheet IDs")

    timezone = data.get("timezone", DEFAULT_TIMEZONE)
    if not isinstance(timezone, str) or not timezone:
        raise FatalAbort("Config key 'timezone' must be a non-empty string")

    output_dir = data.get("output_dir")
    if output_dir is not None and not isinstance(output_dir, str):
        raise FatalAbort("Config key 'output_dir' must be a path string")

    return Config(
        home=home,
        credentials_file_name=data["credentials_file_name"],
        oauth2_token_file_name=data["oauth2_token_file_name"],
        calendar_id=data["calendar_id"],
        work_day_title=data["work_day_title"],
        work_start_time=data["work_start_time"],
        work_spreadsheet_ids=tuple(spreadsheet_ids),
        work_document_template_id=data["work_document_template_id"],
        timezone=timezone,
        output_dir=Path(output_dir).expanduser() if output_dir else None,
    )


def load_config(home: Optional[Path] = None) -> Config:
    """Load <home>/config.json."""
    home = home or resolve_home()
    return config_from_dict(load_json(home / CONFIG_FILE_NAME), home)


# ---------------------------------------------------------------------------
# File output
# ---------------------------------------------------------------------------

def write_pdf(output_dir: Path, filename: str, data: bytes) -> Path:
    """Write exported PDF bytes into ``output_dir`` (created if needed).

    ``filename`` is never split into subdirectories; a name containing a
    path separator fails the write.
    """
    path = output_dir / filename
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    except OSError as exc:
        raise FatalAbort(f"Failed to save {path}: {exc}")
    return path
