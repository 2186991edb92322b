"""Google API adapters: Calendar, Sheets, Drive and Docs.

Each adapter wraps an already-built ``googleapiclient`` resource and turns
every API or transport failure into ``FatalAbort``. The sync steps only
see the adapter methods, so tests can hand them in-memory fakes.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator, Optional

import httplib2
import requests
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import AuthorizedSession
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from .errors import FatalAbort, http_error_message, log_error
from .models import CalendarEvent, DriveFile, SheetPage, Spreadsheet

SPREADSHEET_EXPORT_URL = "https://docs.google.com/spreadsheets/d/{spreadsheet_id}/export"
PDF_MIME_TYPE = "application/pdf"


def _execute(request: Any, operation: str, log_file: Optional[Path] = None) -> Any:
    """Execute a googleapiclient request, aborting the run on any failure."""
    try:
        return request.execute()
    except HttpError as exc:
        message = http_error_message(exc, operation)
    except (httplib2.HttpLib2Error, GoogleAuthError, OSError) as exc:
        message = f"{operation} failed: {exc}"
    log_error(log_file, operation, message)
    raise FatalAbort(message)


# ---------------------------------------------------------------------------
# Service construction
# ---------------------------------------------------------------------------

@dataclass
class GoogleServices:
    """Authenticated clients for one run."""
    events: "CalendarEventSource"
    sheets: "SheetsStore"
    documents: "DriveDocumentStore"


def build_services(credentials: Any, log_file: Optional[Path] = None) -> GoogleServices:
    """Build all API clients from one set of credentials."""
    try:
        calendar = build("calendar", "v3", credentials=credentials, cache_discovery=False)
        sheets = build("sheets", "v4", credentials=credentials, cache_discovery=False)
        drive = build("drive", "v3", credentials=credentials, cache_discovery=False)
        docs = build("docs", "v1", credentials=credentials, cache_discovery=False)
    except Exception as exc:
        raise FatalAbort(f"Failed to create Google API clients: {exc}")

    return GoogleServices(
        events=CalendarEventSource(calendar, log_file),
        sheets=SheetsStore(sheets, AuthorizedSession(credentials), log_file),
        documents=DriveDocumentStore(drive, docs, log_file),
    )


# ---------------------------------------------------------------------------
# Calendar
# ---------------------------------------------------------------------------

class CalendarEventSource:
    """Reads events from Google Calendar."""

    def __init__(self, service: Any, log_file: Optional[Path] = None):
        self.service = service
        self.log_file = log_file

    def list_events(self, calendar_id: str, time_min: str, max_results: int) -> list[CalendarEvent]:
        """Single page of concrete occurrences starting at ``time_min``, by start time."""
        result = _execute(
            self.service.events().list(
                calendarId=calendar_id,
                showDeleted=False,
                singleEvents=True,
                timeMin=time_min,
                maxResults=max_results,
                orderBy="startTime",
            ),
            "Calendar API - listing events",
            self.log_file,
        )

        events: list[CalendarEvent] = []
        for item in result.get("items", []):
            start = item.get("start", {})
            events.append(CalendarEvent(
                id=item.get("id", ""),
                summary=item.get("summary", ""),
                start_date_time=start.get("dateTime", ""),
                start_date=start.get("date", ""),
            ))
        return events


# ---------------------------------------------------------------------------
# Sheets
# ---------------------------------------------------------------------------

class SheetsStore:
    """Reads and writes spreadsheet pages, and exports them as PDF."""

    def __init__(self, service: Any, session: Any, log_file: Optional[Path] = None):
        self.service = service
        self.session = session
        self.log_file = log_file

    def get_spreadsheet(self, spreadsheet_id: str) -> Spreadsheet:
        result = _execute(
            self.service.spreadsheets().get(
                spreadsheetId=spreadsheet_id,
                fields="properties.title,sheets.properties(sheetId,title,index)",
            ),
            "Sheets API - getting spreadsheet",
            self.log_file,
        )
        pages = [
            SheetPage(id=s["properties"]["sheetId"], title=s["properties"].get("title", ""))
            for s in result.get("sheets", [])
        ]
        return Spreadsheet(
            id=spreadsheet_id,
            title=result.get("properties", {}).get("title", ""),
            pages=pages,
        )

    def duplicate_page(self, spreadsheet_id: str, page_id: int) -> int:
        """Copy a page within the same spreadsheet and return the copy's ID."""
        result = _execute(
            self.service.spreadsheets().sheets().copyTo(
                spreadsheetId=spreadsheet_id,
                sheetId=page_id,
                body={"destinationSpreadsheetId": spreadsheet_id},
            ),
            "Sheets API - copying sheet",
            self.log_file,
        )
        return result["sheetId"]

    def rename_and_reorder_page(self, spreadsheet_id: str, page_id: int, title: str, index: int) -> None:
        _execute(
            self.service.spreadsheets().batchUpdate(
                spreadsheetId=spreadsheet_id,
                body={"requests": [{
                    "updateSheetProperties": {
                        "fields": "title,index",
                        "properties": {"sheetId": page_id, "title": title, "index": index},
                    },
                }]},
            ),
            "Sheets API - updating sheet position",
            self.log_file,
        )

    def write_range(self, spreadsheet_id: str, range_name: str, rows: list[list[str]]) -> None:
        _execute(
            self.service.spreadsheets().values().update(
                spreadsheetId=spreadsheet_id,
                range=range_name,
                valueInputOption="USER_ENTERED",
                body={"values": rows},
            ),
            f"Sheets API - updating {range_name}",
            self.log_file,
        )

    def export_page_pdf(self, spreadsheet_id: str, page_id: int) -> bytes:
        operation = "Sheets export - downloading PDF"
        try:
            resp = self.session.get(
                SPREADSHEET_EXPORT_URL.format(spreadsheet_id=spreadsheet_id),
                params={"format": "pdf", "gid": page_id},
            )
            resp.raise_for_status()
        except (requests.RequestException, GoogleAuthError) as exc:
            message = f"{operation} failed: {exc}"
            log_error(self.log_file, operation, message)
            raise FatalAbort(message)
        return resp.content


# ---------------------------------------------------------------------------
# Drive + Docs
# ---------------------------------------------------------------------------

class DriveDocumentStore:
    """Drive file operations plus Docs text replacement."""

    def __init__(self, drive: Any, docs: Any, log_file: Optional[Path] = None):
        self.drive = drive
        self.docs = docs
        self.log_file = log_file

    def get_file_metadata(self, file_id: str) -> DriveFile:
        result = _execute(
            self.drive.files().get(fileId=file_id, fields="parents, id, name"),
            "Drive API - getting template",
            self.log_file,
        )
        return DriveFile(id=result["id"], name=result["name"], parents=tuple(result.get("parents", [])))

    def list_files_in_folder(self, folder_id: str) -> Iterator[DriveFile]:
        """Every file directly inside ``folder_id``, following page tokens."""
        page_token: str | None = None
        while True:
            result = _execute(
                self.drive.files().list(
                    q=f"'{folder_id}' in parents",
                    fields="nextPageToken, files(id, name)",
                    pageToken=page_token,
                ),
                "Drive API - listing files",
                self.log_file,
            )
            for f in result.get("files", []):
                yield DriveFile(id=f["id"], name=f["name"])

            page_token = result.get("nextPageToken")
            if not page_token:
                break

    def delete_file(self, file_id: str) -> None:
        _execute(
            self.drive.files().delete(fileId=file_id),
            "Drive API - deleting existing document",
            self.log_file,
        )

    def copy_file(self, file_id: str, name: str, parent_id: str) -> DriveFile:
        result = _execute(
            self.drive.files().copy(
                fileId=file_id,
                body={"name": name, "parents": [parent_id]},
                fields="id, name, parents",
            ),
            "Drive API - copying template",
            self.log_file,
        )
        return DriveFile(
            id=result["id"],
            name=result.get("name", name),
            parents=tuple(result.get("parents", [parent_id])),
        )

    def replace_all_text(self, document_id: str, replacements: list[tuple[str, str]]) -> None:
        """Apply every (find, replace) pair in one batchUpdate."""
        requests_ = [
            {
                "replaceAllText": {
                    "containsText": {"text": find},
                    "replaceText": replace,
                },
            }
            for find, replace in replacements
        ]
        _execute(
            self.docs.documents().batchUpdate(documentId=document_id, body={"requests": requests_}),
            "Docs API - updating document",
            self.log_file,
        )

    def export_pdf(self, file_id: str) -> bytes:
        return _execute(
            self.drive.files().export(fileId=file_id, mimeType=PDF_MIME_TYPE),
            "Drive API - exporting document",
            self.log_file,
        )
