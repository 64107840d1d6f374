#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Tests for the archivebuilder command line."""

from __future__ import annotations

from pathlib import Path
import zipfile

from click.testing import CliRunner

from archivebuilder.cli import EXIT_ABORTED, EXIT_FAILURE, cli


def _run_cli(runner: CliRunner, args: list[str]) -> str:
    """Invoke the CLI and assert the command succeeds."""
    result = runner.invoke(cli, args, catch_exceptions=False)
    assert result.exit_code == 0, f"CLI exited with code {result.exit_code}:\n{result.output}"
    return result.output


def _names(path: Path) -> list[str]:
    with zipfile.ZipFile(path) as zf:
        return zf.namelist()


def test_build_directory(runner: CliRunner, cli_project_dir: Path, tmp_path: Path) -> None:
    target = tmp_path / "project.zip"
    output_text = _run_cli(runner, ["build", str(cli_project_dir), "-o", str(target)])

    assert _names(target) == ["project/README.md", "project/src/main.py", "project/src/notes.log"]
    assert "Archive created:" in output_text
    assert "3 files" in output_text
    assert "Adding: project/src/main.py" in output_text


def test_build_without_progress(runner: CliRunner, cli_project_dir: Path, tmp_path: Path) -> None:
    target = tmp_path / "quiet.zip"
    output_text = _run_cli(runner, ["build", str(cli_project_dir), "-o", str(target), "--no-progress"])

    assert target.is_file()
    assert "Adding:" not in output_text
    assert "Archive created:" in output_text


def test_build_with_excludes_and_stored(runner: CliRunner, cli_project_dir: Path, tmp_path: Path) -> None:
    target = tmp_path / "filtered.zip"
    _run_cli(
        runner,
        [
            "build",
            str(cli_project_dir),
            "-o",
            str(target),
            "--no-progress",
            "--no-default-excludes",
            "--exclude",
            "*.log",
            "-e",
            ".git/",
            "--compression",
            "stored",
        ],
    )

    names = _names(target)
    assert "project/src/notes.log" not in names
    assert "project/__pycache__/main.cpython-312.pyc" in names
    assert not any(name.startswith("project/.git/") for name in names)
    with zipfile.ZipFile(target) as zf:
        assert all(info.compress_type == zipfile.ZIP_STORED for info in zf.infolist())


def test_missing_file_aborts(runner: CliRunner, cli_project_dir: Path, tmp_path: Path) -> None:
    target = tmp_path / "aborted.zip"
    result = runner.invoke(
        cli,
        ["build", str(cli_project_dir / "README.md"), str(tmp_path / "missing.txt"), "-o", str(target)],
        catch_exceptions=False,
    )

    assert result.exit_code == EXIT_ABORTED
    assert not target.exists()


def test_missing_file_ignored(runner: CliRunner, cli_project_dir: Path, tmp_path: Path) -> None:
    target = tmp_path / "ignored.zip"
    output_text = _run_cli(
        runner,
        [
            "build",
            str(cli_project_dir / "README.md"),
            str(tmp_path / "missing.txt"),
            "-o",
            str(target),
            "--on-error",
            "ignore",
        ],
    )

    assert _names(target) == ["README.md"]
    assert "1 ignored" in output_text


def test_missing_output_directory(runner: CliRunner, cli_project_dir: Path, tmp_path: Path) -> None:
    result = runner.invoke(
        cli,
        ["build", str(cli_project_dir), "-o", str(tmp_path / "nowhere" / "out.zip")],
        catch_exceptions=False,
    )
    assert result.exit_code == EXIT_FAILURE


def test_output_is_required(runner: CliRunner, cli_project_dir: Path) -> None:
    result = runner.invoke(cli, ["build", str(cli_project_dir)])
    assert result.exit_code != 0
    assert "--output" in result.output


def test_invalid_chunk_size(runner: CliRunner, cli_project_dir: Path, tmp_path: Path) -> None:
    result = runner.invoke(
        cli, ["build", str(cli_project_dir), "-o", str(tmp_path / "x.zip"), "--chunk-size", "0"]
    )
    assert result.exit_code != 0
    assert not (tmp_path / "x.zip").exists()


def test_help(runner: CliRunner) -> None:
    output_text = _run_cli(runner, ["build", "--help"])
    assert "--on-error" in output_text
    assert "--max-retries" in output_text


# 🗜️📁🔚
