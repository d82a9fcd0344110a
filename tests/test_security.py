from __future__ import annotations

import os
import stat
import uuid
from pathlib import Path

import pytest

import gentle_format.cli as cli_module

UNFORMATTED = "class C{\nint x=1;\n}\n"


def _write(tmp_path: Path, name: str, content: str) -> Path:
    target = tmp_path / name
    target.write_text(content, encoding="utf-8")
    return target


def _error_text(result) -> str:
    """Return combined stdout and exception text for assertions."""
    return f"{result.output}{result.exception}"


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="Symlink support is required")
def test_symlink_rejected(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    source = _write(tmp_path, "Source.cs", UNFORMATTED)
    link = tmp_path / "Alias.cs"
    try:
        os.symlink(source, link, target_is_directory=False)
    except OSError as error:  # pragma: no cover - platform dependent
        pytest.skip(f"Unable to create symlink: {error}")

    result = cli_runner.invoke(cli_module.cli, [str(link)])

    assert result.exit_code != 0
    assert "refusing to follow symlink" in result.output
    assert source.read_text(encoding="utf-8") == UNFORMATTED


def test_path_traversal_prevented(cli_runner, tmp_path, monkeypatch):
    project = tmp_path / "project"
    project.mkdir()
    monkeypatch.chdir(project)
    outside = tmp_path / f"Outside{uuid.uuid4().hex}.cs"
    outside.write_text(UNFORMATTED, encoding="utf-8")

    result = cli_runner.invoke(cli_module.cli, [str(outside)])

    assert result.exit_code != 0
    assert "outside the working directory" in result.output
    assert outside.read_text(encoding="utf-8") == UNFORMATTED


def test_relative_traversal_prevented(cli_runner, tmp_path, monkeypatch):
    project = tmp_path / "project"
    project.mkdir()
    monkeypatch.chdir(project)
    _write(tmp_path, "Sibling.cs", UNFORMATTED)

    result = cli_runner.invoke(cli_module.cli, ["../Sibling.cs"])

    assert result.exit_code != 0
    assert "outside the working directory" in result.output


def test_file_size_limit_enforced(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("GENTLE_FORMAT_MAX_FILE_SIZE", "10")
    target = _write(tmp_path, "Large.cs", "x();\n" * 10)

    result = cli_runner.invoke(cli_module.cli, [str(target)])

    assert result.exit_code != 0
    assert "maximum allowed size" in _error_text(result)


def test_invalid_size_limit_reported(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("GENTLE_FORMAT_MAX_FILE_SIZE", "lots")
    target = _write(tmp_path, "Program.cs", UNFORMATTED)

    result = cli_runner.invoke(cli_module.cli, [str(target)])

    assert result.exit_code != 0
    assert "GENTLE_FORMAT_MAX_FILE_SIZE" in result.output


def test_size_limit_from_config(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("GENTLE_FORMAT_MAX_FILE_SIZE", raising=False)
    (tmp_path / "pyproject.toml").write_text(
        "[tool.gentle-format]\nmax_file_size = 8\n", encoding="utf-8"
    )
    target = _write(tmp_path, "Program.cs", UNFORMATTED)

    result = cli_runner.invoke(cli_module.cli, [str(target)])

    assert result.exit_code != 0
    assert "maximum allowed size of 8 bytes" in _error_text(result)


def test_invalid_utf8_rejected(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = tmp_path / "Broken.cs"
    target.write_bytes(b"class C{\n\xff\xfe\n}\n")

    result = cli_runner.invoke(cli_module.cli, [str(target)])

    assert result.exit_code != 0
    assert "invalid UTF-8" in result.output
    assert target.read_bytes() == b"class C{\n\xff\xfe\n}\n"


def test_file_changed_during_formatting_is_not_overwritten(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "Program.cs", UNFORMATTED)
    original_format_file = cli_module.format_file

    def _format_then_mutate(filepath, config=None, max_file_size=None):
        result = original_format_file(filepath, config, max_file_size)
        filepath.write_text("class Edited{\n}\n// concurrent edit\n", encoding="utf-8")
        return result

    monkeypatch.setattr(cli_module, "format_file", _format_then_mutate)

    result = cli_runner.invoke(cli_module.cli, [str(target)])

    assert result.exit_code != 0
    assert "changed during processing" in result.output
    assert target.read_text(encoding="utf-8") == "class Edited{\n}\n// concurrent edit\n"


def test_permissions_preserved_on_update(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "Program.cs", UNFORMATTED)
    desired_mode = 0o640
    os.chmod(target, desired_mode)

    result = cli_runner.invoke(cli_module.cli, [str(target)])

    assert result.exit_code == 0
    assert stat.S_IMODE(target.stat().st_mode) == desired_mode


def test_no_temporary_files_left_behind(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "Program.cs", UNFORMATTED)

    result = cli_runner.invoke(cli_module.cli, [str(target)])

    assert result.exit_code == 0
    assert sorted(path.name for path in tmp_path.iterdir()) == ["Program.cs"]


@pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="mkfifo not available")
def test_fifo_rejected(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    fifo = tmp_path / "Pipe.cs"
    try:
        os.mkfifo(fifo)
    except OSError:  # pragma: no cover
        pytest.skip("Unable to create FIFO")

    result = cli_runner.invoke(cli_module.cli, [str(fifo)])

    assert result.exit_code != 0
    assert "not a regular file" in result.output
