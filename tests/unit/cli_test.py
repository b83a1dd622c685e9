"""Tests for the reorder-advisor command line."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from reorder_advisor.cli.app import app
from reorder_advisor.cli.watch import schedule_changes

runner = CliRunner()

SOURCE = """def ma():
    return mb()


def mb():
    return mc()


def mc():
    return 0
"""


@pytest.fixture
def source_file(tmp_path: Path) -> Path:
    path = tmp_path / "mod.py"
    path.write_bytes(SOURCE.encode("utf-8"))
    return path


@pytest.mark.parametrize(
    "args",
    [
        [],
        ["declarations"],
        ["propose"],
        ["apply"],
        ["watch"],
        ["serve"],
        ["serve", "mcp"],
    ],
    ids=["root", "declarations", "propose", "apply", "watch", "serve", "serve-mcp"],
)
def test_short_help_flag(args: list[str]) -> None:
    result = runner.invoke(app, [*args, "-h"])
    assert result.exit_code == 0
    assert "Usage" in result.output


def test_declarations_lists_each_declaration(source_file: Path) -> None:
    result = runner.invoke(app, ["declarations", str(source_file)])

    assert result.exit_code == 0
    for name in ("ma", "mb", "mc"):
        assert name in result.output
    assert "dependency=0.667" in result.output


def test_propose_prints_best_move_without_writing(source_file: Path) -> None:
    result = runner.invoke(app, ["propose", str(source_file)])

    assert result.exit_code == 0
    assert "Move after mb (more ordered dependencies)" in result.output
    assert source_file.read_bytes().decode("utf-8") == SOURCE


def test_propose_all_lists_every_move(source_file: Path) -> None:
    result = runner.invoke(app, ["propose", str(source_file), "--all"])

    assert result.exit_code == 0
    assert "(6 moves)" in result.output


def test_propose_with_zero_weights(source_file: Path) -> None:
    args = ["propose", str(source_file), "--dependency-weight", "0", "--similarity-weight", "0", "--kind-weight", "0"]
    result = runner.invoke(app, args)

    assert result.exit_code == 0
    assert "No improving move found." in result.output


def test_apply_rewrites_file(source_file: Path) -> None:
    result = runner.invoke(app, ["apply", str(source_file)])

    assert result.exit_code == 0
    assert "Applied" in result.output
    assert source_file.read_bytes().decode("utf-8").startswith("def mb():\n    return mc()\n\n\ndef ma():")


def test_apply_reports_stale_job(source_file: Path) -> None:
    edited = SOURCE.replace("return 0", "return 1")
    with patch("reorder_advisor.cli.advise.read_source", side_effect=[SOURCE, edited]):
        result = runner.invoke(app, ["apply", str(source_file)])

    assert result.exit_code == 1
    assert "stale" in result.output
    assert source_file.read_bytes().decode("utf-8") == SOURCE


def test_missing_file_is_rejected(tmp_path: Path) -> None:
    result = runner.invoke(app, ["propose", str(tmp_path / "missing.py")])
    assert result.exit_code != 0


def test_propose_rejects_unknown_language(source_file: Path) -> None:
    result = runner.invoke(app, ["propose", str(source_file), "--language", "cobol"])

    assert result.exit_code == 1
    assert "Unsupported language" in result.output


def test_declarations_rejects_unsupported_extension(tmp_path: Path) -> None:
    path = tmp_path / "notes.txt"
    path.write_text("hello\n", encoding="utf-8")

    result = runner.invoke(app, ["declarations", str(path)])

    assert result.exit_code == 1
    assert "Unsupported file extension" in result.output


def test_propose_reports_undecodable_file(tmp_path: Path) -> None:
    path = tmp_path / "latin.py"
    path.write_bytes(b"x = '\xff'\n")

    result = runner.invoke(app, ["propose", str(path)])

    assert result.exit_code == 1
    assert "Cannot decode" in result.output


def test_apply_with_explicit_language(tmp_path: Path) -> None:
    path = tmp_path / "script"
    path.write_bytes(SOURCE.encode("utf-8"))

    result = runner.invoke(app, ["apply", str(path), "--language", "python"])

    assert result.exit_code == 0
    assert "Applied" in result.output
    assert path.read_bytes().decode("utf-8").startswith("def mb():\n    return mc()\n\n\ndef ma():")


def test_schedule_changes_skips_unreadable_files(source_file: Path, tmp_path: Path) -> None:
    bad = tmp_path / "bad.py"
    bad.write_bytes(b"\xff\xfe\n")
    scheduler = MagicMock()

    schedule_changes(scheduler, {bad, tmp_path / "gone.py", source_file})

    scheduler.schedule.assert_called_once_with(str(source_file), SOURCE)
