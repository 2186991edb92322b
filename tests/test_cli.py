"""Tests for the command line driver."""

import json
from datetime import datetime, timezone
from unittest.mock import Mock, patch

import pytest

from attendance_sync import cli
from attendance_sync.google_services import GoogleServices
from attendance_sync.months import TargetMonth
from conftest import FakeDriveStore, FakeEventSource, FakeSheetsStore, event


@pytest.fixture
def home(tmp_path, monkeypatch):
    home = tmp_path / "home"
    home.mkdir()
    (home / "config.json").write_text(json.dumps({
        "credentials_file_name": "credentials.json",
        "oauth2_token_file_name": "token.json",
        "calendar_id": "primary",
        "work_day_title": "Office",
        "work_start_time": "09:00",
        "work_spreadsheet_ids": ["ss-1"],
        "work_document_template_id": "tmpl",
        "output_dir": str(tmp_path / "pdf"),
    }))
    monkeypatch.setenv("ATTENDANCE_SYNC_HOME", str(home))
    return home


@pytest.fixture
def services():
    sheets = FakeSheetsStore()
    sheets.add("ss-1", "Timesheet", [(5, "202401")])
    drive = FakeDriveStore()
    drive.add("Report yyyymm", parents=("folder-1",), file_id="tmpl")
    events = FakeEventSource([
        event("Office", date="2024-02-03"),
        event("Office", date_time="2024-02-10T09:00:00+09:00"),
        event("Lunch", date="2024-02-11"),
    ])
    return GoogleServices(events=events, sheets=sheets, documents=drive)


def _run(argv, services, answer="y"):
    with patch("builtins.input", return_value=answer), \
         patch.object(cli, "get_credentials", return_value=Mock()) as mock_creds, \
         patch.object(cli, "build_services", return_value=services):
        code = cli.main(argv)
    return code, mock_creds


def test_full_run(home, services, tmp_path):
    code, _ = _run(["202402"], services)

    assert code == 0
    column = services.sheets.values[("ss-1", "202402!D7:D37")]
    assert [i for i, row in enumerate(column, 1) if row[0]] == [3, 10]
    assert (tmp_path / "pdf" / "202402Timesheet.pdf").exists()
    assert (tmp_path / "pdf" / "Report 202402.pdf").exists()


def test_empty_answer_proceeds(home, services):
    code, mock_creds = _run(["202402"], services, answer="")
    assert code == 0
    mock_creds.assert_called_once()


@pytest.mark.parametrize("answer", ["y", "Y", "yes"])
def test_yes_answers_proceed(home, services, answer):
    code, mock_creds = _run(["202402"], services, answer=answer)
    assert code == 0
    mock_creds.assert_called_once()


def test_decline_exits_before_any_remote_call(home, services, capsys):
    code, mock_creds = _run(["202402"], services, answer="n")

    assert code == 0
    mock_creds.assert_not_called()
    assert services.events.calls == []
    assert capsys.readouterr().err == ""


def test_bad_month_is_fatal_before_prompt(home, services, capsys):
    with patch("builtins.input") as mock_input:
        code = cli.main(["2024-02"])

    assert code == 1
    mock_input.assert_not_called()
    assert "YYYYMM" in capsys.readouterr().err


def test_fatal_error_exit_code(home, services, capsys):
    services.sheets.fail_on = "write"
    code, _ = _run(["202402"], services)

    assert code == 1
    assert "write failed" in capsys.readouterr().err
    # The document step never ran
    assert services.documents.replacements == {}


def test_missing_config_is_fatal(tmp_path, monkeypatch, services, capsys):
    monkeypatch.setenv("ATTENDANCE_SYNC_HOME", str(tmp_path / "nowhere"))
    code, _ = _run(["202402"], services)

    assert code == 1
    assert "Config file not found" in capsys.readouterr().err


def test_default_month_is_current(home, services):
    with patch.object(cli.TargetMonth, "current", wraps=cli.TargetMonth.current) as mock_current:
        code, _ = _run([], services, answer="n")

    assert code == 0
    mock_current.assert_called_once()


def test_keyboard_interrupt(home, services):
    with patch("builtins.input", side_effect=KeyboardInterrupt):
        assert cli.main(["202402"]) == 130


def test_work_days_reach_sheet_only(home, services):
    """The document slots follow Mon/Wed/Fri, not the calendar."""
    _run(["202402"], services)

    (doc_id,) = services.documents.replacements
    values = dict(services.documents.replacements[doc_id])
    assert values["{{day1}}"] == "2/2"
    assert values["{{totalHours}}"] == "96"

    column = services.sheets.values[("ss-1", "202402!D7:D37")]
    assert column[1] == [""]
    assert column[2] == ["09:00"]


def test_prompt_and_run_use_configured_timezone(home, services):
    """Near a month boundary the confirmed month is the one processed."""
    config = json.loads((home / "config.json").read_text())
    config["timezone"] = "Pacific/Honolulu"
    (home / "config.json").write_text(json.dumps(config))

    # Already March 1 in Tokyo, still February 29 in Honolulu
    now = datetime(2024, 2, 29, 16, 0, tzinfo=timezone.utc)
    current = TargetMonth.current

    with patch.object(cli.TargetMonth, "current", side_effect=lambda tz: current(tz, now=now)), \
         patch("builtins.input", return_value="y") as mock_input, \
         patch.object(cli, "get_credentials", return_value=Mock()), \
         patch.object(cli, "build_services", return_value=services):
        code = cli.main([])

    assert code == 0
    assert "202402" in mock_input.call_args[0][0]
    written = sorted(range_name for _, range_name in services.sheets.values)
    assert written == ["202402!D7:D37", "202402!M3:M3"]
