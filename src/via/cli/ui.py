"""
Rich output helpers for the Via CLI.

Plain results go to stdout through ``typer.echo``; errors and warnings go to
stderr through a rich console.
"""

from rich.console import Console
from rich.style import Style
from rich.text import Text

err_console = Console(stderr=True, soft_wrap=True)

STYLES = {
    "error": Style(color="red", bold=True),
    "warning": Style(color="yellow"),
}


def print_error(message: str) -> None:
    """Print an error message to stderr."""
    err_console.print(Text(f"Error: {message}", style=STYLES["error"]))


def print_warning(message: str) -> None:
    """Print a warning message to stderr."""
    err_console.print(Text(f"Warning: {message}", style=STYLES["warning"]))
