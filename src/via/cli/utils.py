"""
Via CLI utilities.

Version reporting and logging setup shared by all commands.
"""

import logging
import platform

import typer
from rich.logging import RichHandler

from via._version import __version__

from .ui import err_console


def get_version() -> str:
    """Get Via version from package metadata."""
    from importlib.metadata import PackageNotFoundError, version

    try:
        return version("via-compiler")
    except PackageNotFoundError:
        return __version__


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"via {get_version()}")
        typer.echo(f"Python {platform.python_version()} ({platform.python_implementation()})")
        raise typer.Exit()


def configure_logging(verbose: bool = False) -> None:
    """
    Route ``via`` log records to stderr through rich.

    Only errors are shown by default since the commands report progress and
    warnings themselves; ``verbose`` shows everything down to DEBUG.
    """
    logger = logging.getLogger("via")
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    logger.addHandler(RichHandler(console=err_console, show_time=False, show_path=False))
    logger.setLevel(logging.DEBUG if verbose else logging.ERROR)
