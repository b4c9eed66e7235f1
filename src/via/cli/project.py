"""
Project commands for the Via CLI.

- gen: Parse all ``.via`` files and write generated sources plus the IR
- check: Parse all ``.via`` files and report errors without writing anything
"""

from __future__ import annotations

from pathlib import Path

import typer

from via.codegen import generate
from via.config import IR_FILENAME, ViaConfig, load_config
from via.core import ir
from via.core.errors import ParseError, UnsupportedRuleError, ViaError, WriterError
from via.core.fileset import discover_via_files
from via.core.loader import parse_files
from via.writer import clean_output_root, write_files, write_ir_file

from .ui import print_error, print_warning

# =============================================================================
# Helper Functions
# =============================================================================


def _load_config(config_file: Path | None) -> ViaConfig:
    try:
        return load_config(config_file)
    except ViaError as e:
        print_error(str(e))
        raise typer.Exit(code=1)


def _parse_app(app_dir: Path) -> list[ir.ResourceSpec] | None:
    """
    Discover and parse every ``.via`` file under ``app_dir``.

    Returns None (after telling the user) when there is nothing to parse.
    Exits with code 1 when the directory is missing or a file fails to parse.
    """
    if not app_dir.is_dir():
        print_error(f"Via directory not found: {app_dir}")
        raise typer.Exit(code=1)

    files = discover_via_files(app_dir)
    if not files:
        typer.echo(f"No .via files found under {app_dir}")
        return None

    try:
        return parse_files(files)
    except UnsupportedRuleError:
        raise
    except ParseError as e:
        print_error(f"Parse error: {e}")
        raise typer.Exit(code=1)
    except ViaError as e:
        print_error(str(e))
        raise typer.Exit(code=1)


# =============================================================================
# Commands
# =============================================================================


def gen_command(
    app_dir: Path | None = typer.Option(
        None, "--app", help="Directory containing .via files (defaults to ./app)"
    ),
    out: Path | None = typer.Option(
        None, "--out", help="Output directory for generated code (defaults to ./generated)"
    ),
    ir_path: Path | None = typer.Option(
        None, "--ir", help="Path for the serialized IR (defaults to <out>/via.ir.json)"
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Parse and report resources without writing files"
    ),
    config_file: Path | None = typer.Option(None, "--config", help="Path to via.toml"),
) -> None:
    """
    Parse Via files and emit generated sources.

    Clears previously generated output, writes models, controllers, client
    types and the IR snapshot.
    """
    config = _load_config(config_file)
    app_root = app_dir or config.get_app_dir()
    out_dir = out or config.get_out_dir()
    if ir_path is not None:
        ir_file = ir_path
    elif out is not None and not config.project.ir:
        ir_file = out_dir / IR_FILENAME
    else:
        ir_file = config.get_ir_path()

    resources = _parse_app(app_root)
    if resources is None:
        return

    typer.echo(f"Parsed {len(resources)} resource(s)")

    if dry_run:
        for resource in resources:
            typer.echo(f" - {resource.name} (from {resource.file_path})")
        return

    result = generate(resources, config.codegen)
    for warning in result.warnings:
        print_warning(warning)

    try:
        clean_output_root(out_dir)
        write_files(out_dir, result.files)
        write_ir_file(ir_file, resources)
    except WriterError as e:
        print_error(str(e))
        raise typer.Exit(code=1)

    typer.echo(f"Wrote {len(result.files)} generated file(s) into {out_dir}")
    typer.echo(f"IR written to {ir_file}")


def check_command(
    app_dir: Path | None = typer.Option(
        None, "--app", help="Directory containing .via files (defaults to ./app)"
    ),
    config_file: Path | None = typer.Option(None, "--config", help="Path to via.toml"),
) -> None:
    """
    Parse Via files and report errors without emitting files.
    """
    config = _load_config(config_file)
    resources = _parse_app(app_dir or config.get_app_dir())
    if resources is None:
        return

    typer.echo(f"OK: parsed {len(resources)} resource(s)")
