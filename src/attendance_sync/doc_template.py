"""Monthly attendance document from a Google Docs template.

The template's name contains ``yyyymm``; its body contains the tokens

    {{year}} {{month}} {{day}}
    {{day1}} .. {{day12}}
    {{day1Hours}} .. {{day12Hours}}
    {{totalHours}}

Slots are filled with the month's Mondays, Wednesdays and Fridays in
date order, up to the template's 12 rows. Unused slots are blanked so no
token survives into the PDF. The slot dates come from the weekday rule
alone, not from the calendar's work days.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Any

from .config import HOURS_PER_SLOT, MAX_DOCUMENT_SLOTS, TEMPLATE_MONTH_TOKEN, _info, write_pdf
from .errors import FatalAbort
from .months import TargetMonth

# Monday, Wednesday, Friday
SLOT_WEEKDAYS = frozenset({0, 2, 4})


def target_document_name(template_name: str, target: TargetMonth) -> str:
    """Template name with its first ``yyyymm`` replaced by the month."""
    return template_name.replace(TEMPLATE_MONTH_TOKEN, target.compact, 1)


def weekday_slots(target: TargetMonth, weekdays: frozenset[int] = SLOT_WEEKDAYS) -> list[date]:
    """Slot dates for ``target``: dates on ``weekdays`` in order, at most 12."""
    slots: list[date] = []
    for d in target.days():
        if len(slots) >= MAX_DOCUMENT_SLOTS:
            break
        if d.weekday() in weekdays:
            slots.append(d)
    return slots


def build_placeholders(target: TargetMonth, weekdays: frozenset[int] = SLOT_WEEKDAYS) -> dict[str, str]:
    """Replacement value for every template token, in request order."""
    values = {
        "{{year}}": str(target.year),
        "{{month}}": str(target.month),
        "{{day}}": str(target.last_day),
    }

    slots = weekday_slots(target, weekdays)
    for i, d in enumerate(slots, 1):
        values[f"{{{{day{i}}}}}"] = f"{d.month}/{d.day}"
        values[f"{{{{day{i}Hours}}}}"] = str(HOURS_PER_SLOT)

    values["{{totalHours}}"] = str(len(slots) * HOURS_PER_SLOT)

    for i in range(len(slots) + 1, MAX_DOCUMENT_SLOTS + 1):
        values[f"{{{{day{i}}}}}"] = ""
        values[f"{{{{day{i}Hours}}}}"] = ""

    return values


def replace_existing_document(store: Any, folder_id: str, name: str) -> int:
    """Delete every file in ``folder_id`` named ``name``; returns how many."""
    # Collect first so deletions don't shift the listing's pages
    matches = [f for f in store.list_files_in_folder(folder_id) if f.name == name]
    for f in matches:
        store.delete_file(f.id)
        _info(f"Deleted existing document '{name}' ({f.id})")
    return len(matches)


def render_document(
    store: Any,
    target: TargetMonth,
    template_id: str,
    output_dir: Path,
) -> Path:
    """Create this month's document from the template and save it as PDF.

    Any earlier copy with the same name in the template's folder is
    replaced, never merged.

    Returns:
        Path of the written PDF.
    """
    template = store.get_file_metadata(template_id)
    if not template.parents:
        raise FatalAbort(f"Template '{template.name}' ({template_id}) has no parent folder")
    folder_id = template.parents[0]

    name = target_document_name(template.name, target)
    replace_existing_document(store, folder_id, name)

    document = store.copy_file(template_id, name, folder_id)
    store.replace_all_text(document.id, list(build_placeholders(target).items()))

    data = store.export_pdf(document.id)
    return write_pdf(output_dir, f"{name}.pdf", data)
