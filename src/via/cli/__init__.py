"""
Via CLI package.

- project.py: gen and check commands
- ui.py: rich stderr output
- utils.py: version and logging setup
"""

import typer

from via.cli.project import check_command, gen_command
from via.cli.utils import configure_logging, get_version, version_callback

app = typer.Typer(
    help="""Via – resource DSL compiler

Compiles .via resource definitions into pydantic models, FastAPI routers,
TypeScript client types and a JSON IR snapshot.
""",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and environment information",
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
) -> None:
    """Via CLI main callback for global options."""
    configure_logging(verbose)


app.command(name="gen")(gen_command)
app.command(name="check")(check_command)


def main() -> None:
    app(standalone_mode=True)


__all__ = [
    "app",
    "main",
    "get_version",
    "version_callback",
]
