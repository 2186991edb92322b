"""
Pytest configuration and fixtures for attendance sync tests.
"""

import sys
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from attendance_sync.errors import FatalAbort  # noqa: E402
from attendance_sync.models import CalendarEvent, DriveFile, SheetPage, Spreadsheet  # noqa: E402
from attendance_sync.months import TargetMonth  # noqa: E402


TOKYO = ZoneInfo("Asia/Tokyo")


@pytest.fixture
def tokyo():
    return TOKYO


@pytest.fixture
def feb_2024():
    return TargetMonth.of(2024, 2, TOKYO)


@pytest.fixture
def output_dir(tmp_path):
    out = tmp_path / "out"
    out.mkdir()
    return out


class FakeEventSource:
    """In-memory calendar."""

    def __init__(self, events=None):
        self.events = list(events or [])
        self.calls = []

    def list_events(self, calendar_id, time_min, max_results):
        self.calls.append((calendar_id, time_min, max_results))
        return list(self.events)


class FakeSheetsStore:
    """In-memory spreadsheets keyed by ID.

    ``values`` maps (spreadsheet_id, range) to the last rows written.
    """

    def __init__(self):
        self.spreadsheets = {}
        self.values = {}
        self.operations = []
        self.fail_on = None
        self._next_page_id = 1000

    def add(self, spreadsheet_id, title, pages):
        self.spreadsheets[spreadsheet_id] = Spreadsheet(
            id=spreadsheet_id,
            title=title,
            pages=[SheetPage(id=page_id, title=page_title) for page_id, page_title in pages],
        )

    def _check(self, name):
        self.operations.append(name)
        if self.fail_on == name:
            raise FatalAbort(f"{name} failed")

    def get_spreadsheet(self, spreadsheet_id):
        self._check("get")
        s = self.spreadsheets[spreadsheet_id]
        return Spreadsheet(id=s.id, title=s.title, pages=list(s.pages))

    def duplicate_page(self, spreadsheet_id, page_id):
        self._check("duplicate")
        s = self.spreadsheets[spreadsheet_id]
        source = next(p for p in s.pages if p.id == page_id)
        new_id = self._next_page_id
        self._next_page_id += 1
        s.pages.append(SheetPage(id=new_id, title=f"Copy of {source.title}"))
        return new_id

    def rename_and_reorder_page(self, spreadsheet_id, page_id, title, index):
        self._check("rename")
        s = self.spreadsheets[spreadsheet_id]
        page = next(p for p in s.pages if p.id == page_id)
        s.pages.remove(page)
        s.pages.insert(index, SheetPage(id=page_id, title=title))

    def write_range(self, spreadsheet_id, range_name, rows):
        self._check("write")
        self.values[(spreadsheet_id, range_name)] = [list(r) for r in rows]

    def export_page_pdf(self, spreadsheet_id, page_id):
        self._check("export")
        return f"%PDF {spreadsheet_id} {page_id}".encode()


class FakeDriveStore:
    """In-memory Drive folder tree plus document text."""

    def __init__(self, page_size=2):
        self.files = {}
        self.replacements = {}
        self.deleted = []
        self.page_size = page_size
        self.fail_on = None
        self._next_id = 1

    def add(self, name, parents=(), file_id=None):
        file_id = file_id or f"file-{self._next_id}"
        self._next_id += 1
        self.files[file_id] = DriveFile(id=file_id, name=name, parents=tuple(parents))
        return file_id

    def _check(self, name):
        if self.fail_on == name:
            raise FatalAbort(f"{name} failed")

    def names_in(self, folder_id):
        return [f.name for f in self.files.values() if folder_id in f.parents]

    def get_file_metadata(self, file_id):
        self._check("get")
        return self.files[file_id]

    def list_files_in_folder(self, folder_id):
        self._check("list")
        # Emulate paging through small pages
        in_folder = [f for f in self.files.values() if folder_id in f.parents]
        for start in range(0, len(in_folder), self.page_size):
            for f in in_folder[start:start + self.page_size]:
                yield DriveFile(id=f.id, name=f.name)

    def delete_file(self, file_id):
        self._check("delete")
        del self.files[file_id]
        self.deleted.append(file_id)

    def copy_file(self, file_id, name, parent_id):
        self._check("copy")
        new_id = self.add(name, parents=(parent_id,))
        return self.files[new_id]

    def replace_all_text(self, document_id, replacements):
        self._check("replace")
        self.replacements[document_id] = list(replacements)

    def export_pdf(self, file_id):
        self._check("export")
        return f"%PDF {file_id}".encode()


def event(summary, date_time="", date=""):
    """Build a CalendarEvent."""
    return CalendarEvent(summary=summary, start_date_time=date_time, start_date=date)


@pytest.fixture
def sheets_store():
    return FakeSheetsStore()


@pytest.fixture
def drive_store():
    return FakeDriveStore()
