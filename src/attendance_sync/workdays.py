"""Work-day extraction from calendar events.

A work day is the date of any event in the target month whose title
matches the configured marker (e.g. "出勤" or "Office").
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any, Callable

from .config import MAX_EVENT_RESULTS
from .errors import FatalAbort
from .models import CalendarEvent
from .months import TargetMonth

EventPredicate = Callable[[CalendarEvent], bool]

# RFC 3339 instant: full date, time and a mandatory offset
_RFC3339_RE = re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?(Z|[+-]\d{2}:\d{2})")


def title_predicate(title: str) -> EventPredicate:
    """Match events whose summary equals ``title`` exactly."""
    def matches(event: CalendarEvent) -> bool:
        return event.summary == title
    return matches


def event_date(event: CalendarEvent) -> date:
    """Calendar date an event starts on.

    Timed events use the date in the instant's own offset; all-day
    events use their bare date.
    """
    if event.start_date_time:
        if not _RFC3339_RE.fullmatch(event.start_date_time):
            raise FatalAbort(
                f"Failed to parse calendar datetime {event.start_date_time!r}: not an RFC 3339 timestamp"
            )
        try:
            return datetime.fromisoformat(event.start_date_time.replace("Z", "+00:00")).date()
        except ValueError as exc:
            raise FatalAbort(f"Failed to parse calendar datetime {event.start_date_time!r}: {exc}")

    try:
        return datetime.strptime(event.start_date, "%Y-%m-%d").date()
    except ValueError as exc:
        raise FatalAbort(f"Failed to parse calendar date {event.start_date!r}: {exc}")


def extract_work_days(
    event_source: Any,
    calendar_id: str,
    target: TargetMonth,
    predicate: EventPredicate,
) -> set[date]:
    """Dates in ``target`` with at least one event satisfying ``predicate``.

    Args:
        event_source: Object with ``list_events(calendar_id, time_min, max_results)``.
        calendar_id: Calendar to read.
        target: Month to collect.
        predicate: Selects work-day events.

    Returns:
        Set of work-day dates. Several matching events on one day give
        one entry.
    """
    events = event_source.list_events(
        calendar_id,
        target.event_window_start.isoformat(),
        MAX_EVENT_RESULTS,
    )

    work_days: set[date] = set()
    for event in events:
        # Every event is parsed, so one bad date aborts even outside the month
        day = event_date(event)
        if not target.contains(day):
            continue
        if predicate(event):
            work_days.add(day)

    return work_days
