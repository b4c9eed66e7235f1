"""Tests for CLI commands."""

import shutil
from pathlib import Path

import pytest
from typer.testing import CliRunner

from via.cli import app
from via.core import ir


@pytest.fixture
def cli_runner():
    """Return a CLI test runner."""
    return CliRunner()


@pytest.fixture
def project(tmp_path: Path, via_fixtures_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A project directory with the valid fixtures under ./app."""
    shutil.copytree(via_fixtures_dir, tmp_path / "app")
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestGen:
    """Tests for ``via gen``."""

    def test_gen_defaults(self, cli_runner: CliRunner, project: Path) -> None:
        result = cli_runner.invoke(app, ["gen"])

        assert result.exit_code == 0, result.output
        assert "Parsed 3 resource(s)" in result.output
        assert "Wrote 14 generated file(s) into generated" in result.output
        assert f"IR written to {Path('generated') / 'via.ir.json'}" in result.output

        out = project / "generated"
        assert (out / "src/models/article.py").is_file()
        assert (out / "src/controllers/post.py").is_file()
        assert (out / "ts/models/comment.ts").is_file()
        resources = ir.load_ir((out / "via.ir.json").read_text())
        assert [r.name for r in resources] == ["Article", "Post", "Comment"]

    def test_gen_explicit_paths(self, cli_runner: CliRunner, project: Path) -> None:
        out = project / "dist"
        ir_path = project / "snapshots" / "ir.json"
        result = cli_runner.invoke(
            app, ["gen", "--app", str(project / "app"), "--out", str(out), "--ir", str(ir_path)]
        )

        assert result.exit_code == 0, result.output
        assert (out / "src/app.py").is_file()
        assert ir_path.is_file()
        assert not (out / "via.ir.json").exists()

    def test_gen_out_sets_ir_default(self, cli_runner: CliRunner, project: Path) -> None:
        result = cli_runner.invoke(app, ["gen", "--out", "dist"])
        assert result.exit_code == 0, result.output
        assert (project / "dist" / "via.ir.json").is_file()

    def test_gen_replaces_previous_output(self, cli_runner: CliRunner, project: Path) -> None:
        out = project / "generated"
        (out / "src/models").mkdir(parents=True)
        (out / "src/models/stale.py").write_text("old")
        (out / "README.md").write_text("keep")

        result = cli_runner.invoke(app, ["gen"])

        assert result.exit_code == 0, result.output
        assert not (out / "src/models/stale.py").exists()
        assert (out / "README.md").read_text() == "keep"

    def test_dry_run(self, cli_runner: CliRunner, project: Path) -> None:
        result = cli_runner.invoke(app, ["gen", "--dry-run"])

        assert result.exit_code == 0, result.output
        assert "Parsed 3 resource(s)" in result.output
        assert f" - Article (from {Path('app') / 'article.via'})" in result.output
        assert f" - Comment (from {Path('app') / 'blog' / 'post.via'})" in result.output
        assert not (project / "generated").exists()

    def test_parse_error(self, cli_runner: CliRunner, project: Path, invalid_fixtures_dir: Path) -> None:
        shutil.copy(invalid_fixtures_dir / "missing_colon.via", project / "app" / "zz.via")

        result = cli_runner.invoke(app, ["gen"])

        assert result.exit_code == 1
        assert "zz.via" in result.output
        assert not (project / "generated").exists()

    def test_missing_app_dir(self, cli_runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        result = cli_runner.invoke(app, ["gen"])
        assert result.exit_code == 1
        assert "Via directory not found: app" in result.output

    def test_no_via_files(self, cli_runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "app").mkdir()
        monkeypatch.chdir(tmp_path)
        result = cli_runner.invoke(app, ["gen"])
        assert result.exit_code == 0
        assert "No .via files found under app" in result.output

    def test_writer_error(self, cli_runner: CliRunner, project: Path) -> None:
        (project / "blocked").write_text("not a directory")
        result = cli_runner.invoke(app, ["gen", "--out", "blocked"])
        assert result.exit_code == 1
        assert "blocked" in result.output

    def test_duplicate_warning(self, cli_runner: CliRunner, project: Path) -> None:
        (project / "app" / "again.via").write_text("resource Article { }")
        result = cli_runner.invoke(app, ["gen"])
        assert result.exit_code == 0, result.output
        assert "Warning: Resource 'Article' is declared 2 times" in result.output

    def test_config_file(self, cli_runner: CliRunner, project: Path) -> None:
        (project / "app").rename(project / "defs")
        (project / "via.toml").write_text(
            '[project]\napp = "defs"\nout = "build"\n\n[codegen]\nasync = false\n'
        )

        result = cli_runner.invoke(app, ["gen"])

        assert result.exit_code == 0, result.output
        controller = (project / "build/src/controllers/article.py").read_text()
        assert "async def" not in controller
        assert (project / "build/via.ir.json").is_file()

    def test_invalid_config(self, cli_runner: CliRunner, project: Path) -> None:
        (project / "via.toml").write_text("[project\n")
        result = cli_runner.invoke(app, ["gen"])
        assert result.exit_code == 1
        assert "Invalid TOML" in result.output


class TestCheck:
    """Tests for ``via check``."""

    def test_check_ok(self, cli_runner: CliRunner, project: Path) -> None:
        result = cli_runner.invoke(app, ["check"])
        assert result.exit_code == 0, result.output
        assert "OK: parsed 3 resource(s)" in result.output
        assert not (project / "generated").exists()

    def test_check_parse_error(self, cli_runner: CliRunner, invalid_fixtures_dir: Path) -> None:
        result = cli_runner.invoke(app, ["check", "--app", str(invalid_fixtures_dir)])
        assert result.exit_code == 1
        assert "missing_colon.via" in result.output


class TestGlobalOptions:
    """Tests for global options."""

    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert result.output.startswith("via ")

    def test_no_args_shows_help(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, [])
        assert "gen" in result.output
        assert "check" in result.output

    def test_verbose(self, cli_runner: CliRunner, project: Path) -> None:
        result = cli_runner.invoke(app, ["--verbose", "check"])
        assert result.exit_code == 0, result.output
        assert "OK: parsed 3 resource(s)" in result.output
