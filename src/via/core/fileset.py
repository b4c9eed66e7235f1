from pathlib import Path

VIA_SUFFIX = ".via"


def discover_via_files(root: Path) -> list[Path]:
    """Find every ``.via`` file under ``root``, sorted lexicographically by path."""
    files: list[Path] = []
    for p in root.rglob(f"*{VIA_SUFFIX}"):
        if p.is_file():
            files.append(p)
    return sorted(set(files))
