#!/usr/bin/env python3
"""
Monthly Attendance Sync - package setup

Reads work days from Google Calendar, updates the monthly attendance
spreadsheets and document template, and exports them as PDF.

Usage:
    pip install -e .              # Install the attendance-sync command
    pip install -e ".[test]"      # Plus the test dependencies
    attendance-sync [YYYYMM]      # Run for the current or a given month
"""

from pathlib import Path

from setuptools import find_packages, setup

README = Path(__file__).parent / "DESIGN.md"


setup(
    name="attendance-sync",
    version="1.0.0",
    description="Monthly attendance sync: Google Calendar work days to Sheets, Docs and PDF",
    long_description=README.read_text(encoding="utf-8") if README.exists() else "",
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.9",
    install_requires=[
        "google-api-python-client",
        "google-auth",
        "google-auth-httplib2",
        "google-auth-oauthlib",
        "httplib2",
        "requests",
        "tzdata; sys_platform == 'win32'",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "attendance-sync=attendance_sync.cli:main",
        ],
    },
)
