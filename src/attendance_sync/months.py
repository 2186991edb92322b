"""The month a run works on, and the date arithmetic hung off it."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterator, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .errors import FatalAbort

_COMPACT_RE = re.compile(r"^(\d{4})(\d{2})$")


def load_timezone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise FatalAbort(f"Failed to load timezone {name!r}: {exc}")


@dataclass(frozen=True)
class TargetMonth:
    """First instant of a calendar month in a fixed timezone.

    ``start`` is always day 1 at midnight. Names, cell values and
    placeholder values for the run are all derived from it.
    """
    start: datetime

    def __post_init__(self):
        if self.start.tzinfo is None:
            raise ValueError("TargetMonth.start must be timezone-aware")
        if (self.start.day, self.start.hour, self.start.minute, self.start.second, self.start.microsecond) != (1, 0, 0, 0, 0):
            raise ValueError("TargetMonth.start must be the first day of a month at midnight")

    # ---- construction ----

    @classmethod
    def of(cls, year: int, month: int, tz: ZoneInfo) -> "TargetMonth":
        return cls(datetime(year, month, 1, tzinfo=tz))

    @classmethod
    def current(cls, tz: ZoneInfo, now: Optional[datetime] = None) -> "TargetMonth":
        """Month containing ``now`` (wall clock by default) as seen in ``tz``."""
        now = (now or datetime.now(tz)).astimezone(tz)
        return cls.of(now.year, now.month, tz)

    @classmethod
    def parse(cls, text: str, tz: ZoneInfo) -> "TargetMonth":
        """Parse a ``YYYYMM`` argument such as ``202402``."""
        match = _COMPACT_RE.match(text.strip())
        if not match:
            raise FatalAbort(f"Failed to parse date parameter {text!r}: expected YYYYMM")
        year, month = int(match.group(1)), int(match.group(2))
        if not 1 <= month <= 12:
            raise FatalAbort(f"Failed to parse date parameter {text!r}: month out of range")
        return cls.of(year, month, tz)

    # ---- derived values ----

    @property
    def year(self) -> int:
        return self.start.year

    @property
    def month(self) -> int:
        return self.start.month

    @property
    def compact(self) -> str:
        """Page title and file-name form, e.g. ``"202402"``."""
        return self.start.strftime("%Y%m")

    @property
    def slash_date(self) -> str:
        """Month-start cell value, e.g. ``"2024/02/01"``."""
        return self.start.strftime("%Y/%m/%d")

    def previous(self) -> "TargetMonth":
        if self.month == 1:
            return TargetMonth.of(self.year - 1, 12, self.start.tzinfo)
        return TargetMonth.of(self.year, self.month - 1, self.start.tzinfo)

    def next(self) -> "TargetMonth":
        if self.month == 12:
            return TargetMonth.of(self.year + 1, 1, self.start.tzinfo)
        return TargetMonth.of(self.year, self.month + 1, self.start.tzinfo)

    @property
    def last_date(self) -> date:
        return self.next().start.date() - timedelta(days=1)

    @property
    def last_day(self) -> int:
        return self.last_date.day

    @property
    def event_window_start(self) -> datetime:
        """One month and one day before the first day.

        Wide enough that events whose source timezone differs from ours
        still land in the query.
        """
        return self.previous().start - timedelta(days=1)

    def contains(self, day: date) -> bool:
        return day.year == self.year and day.month == self.month

    def days(self) -> Iterator[date]:
        """Every date of the month, in order."""
        d = self.start.date()
        while d.month == self.month:
            yield d
            d += timedelta(days=1)

    def __str__(self) -> str:
        return self.compact
