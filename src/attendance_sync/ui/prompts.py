"""
Interactive prompts.
"""

from .colors import bold


def confirm(message: str, default: bool = True) -> bool:
    """Ask for yes/no confirmation."""
    suffix = " [Y/n]: " if default else " [y/N]: "
    try:
        response = input(f"{bold(message)}{suffix}").strip().lower()
    except EOFError:
        response = ""

    if not response:
        return default
    return response in ("y", "yes")
