import json

import pytest
from typer.testing import CliRunner

from docbundle import cli
from docbundle.cache import compute_checksum
from docbundle.llm import TextGenerator
from tests.conftest import FakeProvider, write

runner = CliRunner()


@pytest.fixture
def fake_generator(monkeypatch):
    provider = FakeProvider(reply=lambda prompt: f"clean {prompt}")
    monkeypatch.setattr(cli, "build_generator", lambda config: TextGenerator(provider))
    return provider


def _invoke(tmp_path, *args):
    return runner.invoke(cli.app, ["--root", str(tmp_path), *args])


def test_clean_command(tmp_path):
    write(tmp_path, "docs/x/input/a.md", "A")
    write(tmp_path, "docs/x/input/b.png", "B")

    result = _invoke(tmp_path, "clean")

    assert result.exit_code == 0, result.output
    assert not (tmp_path / "docs/x/input/b.png").exists()
    assert "Files removed: 1" in result.output


def test_transform_then_compile(tmp_path, fake_generator):
    write(tmp_path, "docs/foo/input/a.md", "A")
    write(tmp_path, "docs/foo/input/b.md", "B")

    result = _invoke(tmp_path, "transform", "--quiet")
    assert result.exit_code == 0, result.output
    assert json.loads((tmp_path / "io-lock.json").read_text()) == {
        "docs/foo/input/a.md": compute_checksum("A"),
        "docs/foo/input/b.md": compute_checksum("B"),
    }

    result = _invoke(tmp_path, "compile")
    assert result.exit_code == 0, result.output
    assert (tmp_path / "public/docs/foo.md").read_text() == "clean B\n\nclean A"


def test_transform_echoes_stream(tmp_path, fake_generator):
    write(tmp_path, "docs/foo/input/a.md", "page")

    result = _invoke(tmp_path, "transform")

    assert result.exit_code == 0, result.output
    assert "clean page" in result.output


def test_transform_failure_exits_non_zero(tmp_path, monkeypatch):
    write(tmp_path, "docs/foo/input/a.md", "A")
    failing = FakeProvider(error=RuntimeError("service unavailable"))
    monkeypatch.setattr(cli, "build_generator", lambda config: TextGenerator(failing))

    result = _invoke(tmp_path, "transform", "--quiet")

    assert result.exit_code == 1
    assert "service unavailable" in result.output
    assert not (tmp_path / "io-lock.json").exists()


def test_build_command(tmp_path, fake_generator):
    write(tmp_path, "docs/foo/input/a.md", "A")

    result = _invoke(tmp_path, "build", "--quiet")

    assert result.exit_code == 0, result.output
    assert (tmp_path / "public/docs/foo.md").read_text() == "clean A"


def test_invalidate_library(tmp_path, fake_generator):
    write(tmp_path, "docs/foo/input/a.md", "A")
    write(tmp_path, "docs/bar/input/a.md", "A")
    assert _invoke(tmp_path, "transform", "--quiet").exit_code == 0

    result = _invoke(tmp_path, "invalidate", "--library", "foo")

    assert result.exit_code == 0, result.output
    assert list(json.loads((tmp_path / "io-lock.json").read_text())) == ["docs/bar/input/a.md"]


def test_invalidate_single_path(tmp_path, fake_generator):
    write(tmp_path, "docs/foo/input/a.md", "A")
    write(tmp_path, "docs/foo/input/b.md", "B")
    assert _invoke(tmp_path, "transform", "--quiet").exit_code == 0

    result = _invoke(tmp_path, "invalidate", "--path", "docs/foo/input/a.md")

    assert result.exit_code == 0, result.output
    assert list(json.loads((tmp_path / "io-lock.json").read_text())) == ["docs/foo/input/b.md"]


def test_invalidate_requires_target(tmp_path):
    (tmp_path / "docs").mkdir()
    result = _invoke(tmp_path, "invalidate")
    assert result.exit_code == 1


def test_libraries_command(tmp_path, fake_generator):
    write(tmp_path, "docs/foo/input/a.md", "A")
    write(tmp_path, "docs/foo/input/b.md", "B")
    assert _invoke(tmp_path, "transform", "--quiet", "--library", "foo").exit_code == 0
    write(tmp_path, "docs/foo/input/b.md", "B changed")

    result = _invoke(tmp_path, "libraries")

    assert result.exit_code == 0, result.output
    assert "foo" in result.output
    assert "1/2" in result.output


def test_compile_missing_docs_root_fails(tmp_path):
    result = _invoke(tmp_path, "compile")
    assert result.exit_code == 1


def test_version(tmp_path):
    result = _invoke(tmp_path, "version")
    assert result.exit_code == 0
    assert "docbundle" in result.output


def test_invalid_environment_exits_with_message(tmp_path):
    (tmp_path / "docs").mkdir()

    result = runner.invoke(
        cli.app,
        ["--root", str(tmp_path), "libraries"],
        env={"DOCBUNDLE_DELAY_SECONDS": "abc"},
    )

    assert result.exit_code == 1
    assert "Error" in result.output
    assert "delay_seconds" in result.output
    assert "Traceback" not in result.output
