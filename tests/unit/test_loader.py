"""Tests for .via file discovery and multi-file loading."""

from pathlib import Path

import pytest

from via.core.errors import ParseError
from via.core.fileset import discover_via_files
from via.core.loader import parse_files


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


class TestDiscovery:
    """Tests for discover_via_files."""

    def test_sorted_recursive(self, tmp_path: Path) -> None:
        _write(tmp_path / "b.via", "")
        _write(tmp_path / "a" / "z.via", "")
        _write(tmp_path / "a.via", "")
        _write(tmp_path / "notes.txt", "")
        _write(tmp_path / "c.via.bak", "")

        files = discover_via_files(tmp_path)
        assert [f.relative_to(tmp_path).as_posix() for f in files] == ["a/z.via", "a.via", "b.via"]

    def test_empty(self, tmp_path: Path) -> None:
        assert discover_via_files(tmp_path) == []


class TestParseFiles:
    """Resources are aggregated in file order."""

    def test_file_order(self, tmp_path: Path) -> None:
        second = _write(tmp_path / "b.via", "resource Second { } resource Third { }")
        first = _write(tmp_path / "a.via", "resource First { }")

        resources = parse_files(discover_via_files(tmp_path))

        assert [r.name for r in resources] == ["First", "Second", "Third"]
        assert [r.file_path for r in resources] == [str(first), str(second), str(second)]

    def test_given_order_is_kept(self, tmp_path: Path) -> None:
        a = _write(tmp_path / "a.via", "resource A { }")
        b = _write(tmp_path / "b.via", "resource B { }")
        assert [r.name for r in parse_files([b, a])] == ["B", "A"]

    def test_first_error_aborts(self, tmp_path: Path, invalid_fixtures_dir: Path) -> None:
        good = _write(tmp_path / "good.via", "resource Good { }")
        bad = invalid_fixtures_dir / "missing_colon.via"

        with pytest.raises(ParseError, match="missing_colon.via"):
            parse_files([good, bad])
