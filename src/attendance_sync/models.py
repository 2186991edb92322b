"""Plain records passed between the Google adapters and the sync steps."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class CalendarEvent:
    """One calendar occurrence, as far as the work-day extractor cares.

    Exactly one of ``start_date_time`` (RFC 3339 instant) and
    ``start_date`` (``YYYY-MM-DD`` all-day date) is normally set.
    """
    summary: str
    start_date_time: str = ""
    start_date: str = ""
    id: str = ""


@dataclass(frozen=True)
class SheetPage:
    """A single sheet (tab) inside a spreadsheet."""
    id: int
    title: str


@dataclass
class Spreadsheet:
    id: str
    title: str
    pages: list[SheetPage] = field(default_factory=list)


@dataclass(frozen=True)
class DriveFile:
    id: str
    name: str
    parents: tuple[str, ...] = ()
