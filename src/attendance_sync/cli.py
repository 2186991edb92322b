#!/usr/bin/env python3
"""
Monthly attendance sync.

Reads work-day events from Google Calendar, writes them into each monthly
attendance spreadsheet, fills the attendance document template, and saves
everything as PDF.

Usage:
    attendance-sync            Current month (in the configured timezone)
    attendance-sync 202402     A specific month
"""

import argparse
import sys
from typing import List, Optional

from .auth import get_credentials
from .config import _info, load_config, resolve_home
from .doc_template import render_document
from .errors import FatalAbort
from .google_services import build_services
from .months import TargetMonth, load_timezone
from .sheets_sync import sync_spreadsheets
from .ui.colors import bold, error, success
from .ui.prompts import confirm
from .workdays import extract_work_days, title_predicate


def _target_month(month_arg: Optional[str], timezone_name: str) -> TargetMonth:
    tz = load_timezone(timezone_name)
    if month_arg is None:
        return TargetMonth.current(tz)
    return TargetMonth.parse(month_arg, tz)


def run(month_arg: Optional[str]) -> int:
    """Whole pipeline for one month. Raises FatalAbort on the first failure."""
    # Config is read before asking: its timezone fixes the month the prompt names
    config = load_config(resolve_home())
    target = _target_month(month_arg, config.timezone)

    if not confirm(f"Make invoices for {target.compact}?"):
        return 0

    creds = get_credentials(config)
    services = build_services(creds, config.error_log_path)

    work_days = extract_work_days(
        services.events,
        config.calendar_id,
        target,
        title_predicate(config.work_day_title),
    )
    _info(f"Found {len(work_days)} work days")

    sync_spreadsheets(
        services.sheets,
        target,
        work_days,
        config.work_spreadsheet_ids,
        config.work_start_time,
        config.pdf_dir,
    )
    _info("Exported spreadsheets")

    path = render_document(
        services.documents,
        target,
        config.work_document_template_id,
        config.pdf_dir,
    )
    _info(f"Exported document {path}")

    _info(success("Done"))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="attendance-sync",
        description="Monthly attendance sync: calendar work days to sheets, docs and PDF",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    attendance-sync              Current month
    attendance-sync 202402       February 2024

Configuration is read from $ATTENDANCE_SYNC_HOME/config.json
(default ~/.attendance-sync/config.json).
        """
    )
    parser.add_argument(
        "month",
        nargs="?",
        help="Target month as YYYYMM (default: current month)"
    )

    args = parser.parse_args(argv)

    try:
        return run(args.month)
    except FatalAbort as e:
        print(f"{bold(error('Error:'))} {e.message}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\n\nCancelled by user.", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
