"""
Output writer.

Persists generated artifacts and the IR snapshot. Only the managed subtrees
``<out>/src`` and ``<out>/ts`` are cleared before a run; anything else under
the output root is left alone.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Iterable, Sequence
from pathlib import Path

from via.codegen import GeneratedFile
from via.core import ir
from via.core.errors import WriterError

logger = logging.getLogger(__name__)

MANAGED_SUBTREES = ("src", "ts")


def clean_output_root(out_dir: Path) -> None:
    """Remove previously generated subtrees under ``out_dir``, never ``out_dir`` itself."""
    for name in MANAGED_SUBTREES:
        managed = out_dir / name
        if not managed.exists():
            continue
        try:
            shutil.rmtree(managed)
        except OSError as e:
            raise WriterError("Failed to clear generated directory", managed) from e
        logger.debug("Removed %s", managed)


def write_files(out_dir: Path, files: Iterable[GeneratedFile]) -> list[Path]:
    """
    Write artifacts under ``out_dir`` in order.

    Returns:
        Paths written, in write order
    """
    written: list[Path] = []
    for generated in files:
        path = out_dir / generated.relative_path
        _write_text(path, generated.contents)
        written.append(path)
    logger.info("Wrote %d file(s) into %s", len(written), out_dir)
    return written


def write_ir_file(path: Path, resources: Sequence[ir.ResourceSpec]) -> None:
    """Write the IR snapshot for ``resources`` to ``path``."""
    _write_text(path, ir.dump_ir(resources))
    logger.info("IR written to %s", path)


def _write_text(path: Path, contents: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise WriterError("Failed to create directory", path.parent) from e
    try:
        path.write_text(contents, encoding="utf-8", newline="\n")
    except OSError as e:
        raise WriterError("Failed to write", path) from e
