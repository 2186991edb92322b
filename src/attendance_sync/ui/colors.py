"""
ANSI color codes for terminal output.
"""

import sys


class Colors:
    """ANSI color codes for terminal styling."""

    RESET = "\033[0m"

    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"

    BOLD = "\033[1m"


def _enabled(stream) -> bool:
    """Only color output that goes to a terminal."""
    return hasattr(stream, "isatty") and stream.isatty()


def colorize(text: str, color: str, stream=None) -> str:
    """Apply color to text."""
    if not _enabled(stream or sys.stderr):
        return text
    return f"{color}{text}{Colors.RESET}"


def success(text: str) -> str:
    """Green success text."""
    return colorize(text, Colors.GREEN)


def error(text: str) -> str:
    """Red error text."""
    return colorize(text, Colors.RED)


def warning(text: str) -> str:
    """Yellow warning text."""
    return colorize(text, Colors.YELLOW)


def bold(text: str) -> str:
    """Bold text."""
    return colorize(text, Colors.BOLD)
