"""Monthly attendance sheet synchronization.

Each spreadsheet keeps one page per month titled ``YYYYMM``. A missing
page is cloned from the previous month's page and moved to the front.
The month-start cell and the 31-row start-time column are rewritten on
every run, then the page is exported as PDF.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Any, Iterable, Optional

from .config import ATTENDANCE_RANGE, ATTENDANCE_ROWS, MONTH_CELL, _info, write_pdf
from .errors import FatalAbort
from .models import Spreadsheet
from .months import TargetMonth


def build_attendance_column(
    target: TargetMonth,
    work_days: Iterable[date],
    start_time: str,
) -> list[list[str]]:
    """One single-cell row per day index 1..31.

    A row holds ``start_time`` when that day of ``target`` is a work day
    and ``""`` otherwise, so stale entries get blanked.
    """
    worked = {d.day for d in work_days if target.contains(d)}
    return [[start_time if i in worked else ""] for i in range(1, ATTENDANCE_ROWS + 1)]


def _find_page_id(spreadsheet: Spreadsheet, title: str) -> Optional[int]:
    page_id = None
    for page in spreadsheet.pages:
        if page.title == title:
            page_id = page.id
    return page_id


def ensure_month_page(store: Any, spreadsheet: Spreadsheet, target: TargetMonth) -> int:
    """Return the ID of the target month's page, cloning it if missing.

    Only the literal previous month's page is cloned; an older page is
    never used as a fallback.
    """
    page_id = _find_page_id(spreadsheet, target.compact)
    if page_id is not None:
        return page_id

    previous_title = target.previous().compact
    source_id = _find_page_id(spreadsheet, previous_title)
    if source_id is None:
        raise FatalAbort(
            f"Failed to determine sheet to copy: spreadsheet '{spreadsheet.title}' "
            f"has neither a '{target.compact}' nor a '{previous_title}' sheet"
        )

    page_id = store.duplicate_page(spreadsheet.id, source_id)
    store.rename_and_reorder_page(spreadsheet.id, page_id, target.compact, 0)
    _info(f"Created sheet {target.compact} from {previous_title} in '{spreadsheet.title}'")
    return page_id


def sync_spreadsheet(
    store: Any,
    spreadsheet_id: str,
    target: TargetMonth,
    work_days: Iterable[date],
    start_time: str,
    output_dir: Path,
) -> Path:
    """Update one spreadsheet's month page and save it as PDF.

    Returns:
        Path of the written PDF.
    """
    spreadsheet = store.get_spreadsheet(spreadsheet_id)
    page_id = ensure_month_page(store, spreadsheet, target)

    store.write_range(
        spreadsheet_id,
        f"{target.compact}!{MONTH_CELL}",
        [[target.slash_date]],
    )
    store.write_range(
        spreadsheet_id,
        f"{target.compact}!{ATTENDANCE_RANGE}",
        build_attendance_column(target, work_days, start_time),
    )

    data = store.export_page_pdf(spreadsheet_id, page_id)
    return write_pdf(output_dir, f"{target.compact}{spreadsheet.title}.pdf", data)


def sync_spreadsheets(
    store: Any,
    target: TargetMonth,
    work_days: Iterable[date],
    spreadsheet_ids: Iterable[str],
    start_time: str,
    output_dir: Path,
) -> list[Path]:
    """Run ``sync_spreadsheet`` for each ID in order; the first failure aborts."""
    work_days = set(work_days)
    written: list[Path] = []
    for spreadsheet_id in spreadsheet_ids:
        path = sync_spreadsheet(store, spreadsheet_id, target, work_days, start_time, output_dir)
        _info(f"Saved {path}")
        written.append(path)
    return written
