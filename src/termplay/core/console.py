"""Centralized Rich Console management.

Keeps one Console for stdout and one for stderr so every command prints
through the same instances.
"""

from rich.console import Console

_console: Console | None = None
_error_console: Console | None = None


def get_console() -> Console:
    """Get or create the global stdout Console."""
    global _console
    if _console is None:
        _console = Console(highlight=False)
    return _console


def get_error_console() -> Console:
    """Get or create the global stderr Console."""
    global _error_console
    if _error_console is None:
        _error_console = Console(stderr=True, highlight=False)
    return _error_console


def safe_print(message: str, style: str | None = None) -> None:
    """Print using the stdout Console with optional styling.

    Args:
        message: The message to print
        style: Optional Rich style string (e.g., "bold red", "green")
    """
    console = get_console()
    if style:
        console.print(message, style=style, markup=False)
    else:
        console.print(message, markup=False)


def print_error(message: str) -> None:
    """Print an error message to stderr in red."""
    get_error_console().print(message, style="red", markup=False)
