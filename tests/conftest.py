"""Shared pytest fixtures for Via tests."""

import sys
from pathlib import Path

import pytest

from via.core import ir
from via.core.parser import parse_str


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def via_fixtures_dir(fixtures_dir: Path) -> Path:
    """Return path to the valid .via fixtures directory."""
    return fixtures_dir / "via"


@pytest.fixture
def invalid_fixtures_dir(fixtures_dir: Path) -> Path:
    """Return path to the malformed .via fixtures directory."""
    return fixtures_dir / "via_invalid"


ARTICLE_SOURCE = """
resource Article {
  model {
    title: String
    body: String?
    views: Int @serialize(false)
  }
  controller {
  }
}
"""


@pytest.fixture
def article() -> ir.ResourceSpec:
    """The Article resource: required, optional and hidden fields, AutoCrud."""
    (resource,) = parse_str(ARTICLE_SOURCE, "app/article.via")
    return resource


@pytest.fixture
def simple_resource() -> ir.ResourceSpec:
    """A Task resource built directly from IR types."""
    return ir.ResourceSpec(
        name="Task",
        file_path="app/task.via",
        model=ir.ModelSpec(
            fields=[
                ir.FieldSpec(name="title", ty=ir.TypeRef(name="String")),
                ir.FieldSpec(name="done", ty=ir.TypeRef(name="Bool", optional=True), optional=True),
            ]
        ),
        controller=ir.ControllerSpec(
            params=[
                ir.ParamsProfile(
                    name=ir.EditableParams(),
                    entries=[ir.ParamEntry(name="title"), ir.ParamEntry(name="done", optional=True)],
                )
            ]
        ),
    )


@pytest.fixture
def generated_package(tmp_path: Path):
    """
    Make ``<tmp_path>/out`` importable as the root of a generated ``src`` package.

    Yields the output directory; generated modules are unloaded afterwards so
    tests never see each other's code.
    """
    out = tmp_path / "out"
    out.mkdir()

    def _unload() -> None:
        for name in list(sys.modules):
            if name == "src" or name.startswith("src."):
                del sys.modules[name]

    _unload()
    sys.path.insert(0, str(out))
    try:
        yield out
    finally:
        sys.path.remove(str(out))
        _unload()
