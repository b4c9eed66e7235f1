import logging
from collections.abc import Iterable
from pathlib import Path

from . import ir
from .parser import parse_file

logger = logging.getLogger(__name__)


def parse_files(files: Iterable[Path]) -> list[ir.ResourceSpec]:
    """
    Parse Via files into one aggregate resource list.

    Files are parsed in the order given and their resources appended in that
    same order. The first file that fails to parse aborts the whole batch.

    Args:
        files: Paths to parse, normally from ``discover_via_files``

    Returns:
        Resources from every file, in file order then declaration order

    Raises:
        ParseError: From the first file that does not match the grammar
    """
    resources: list[ir.ResourceSpec] = []
    for f in files:
        parsed = parse_file(f)
        logger.debug("Loaded %d resource(s) from %s", len(parsed), f)
        resources.extend(parsed)
    return resources
