from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from app.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def state_path(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, clear_rectcalc_env: None
) -> Path:
    path = tmp_path / "state" / "state.json"
    monkeypatch.setenv("RECTCALC_STATE__PATH", str(path))
    return path


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "input.txt"
    path.write_text(text, encoding="utf-8")
    return path


def test_run_fill_reflows_the_rectangle(tmp_path: Path, state_path: Path) -> None:
    path = _write(tmp_path, "one two three four five six\nnext line")

    result = runner.invoke(app, ["run", str(path), "fill:10", "--rect", "1:0-1:27"])

    assert result.exit_code == 0, result.output
    assert path.read_text(encoding="utf-8") == (
        "one two\nthree four\nfive six\nnext line"
    )
    assert state_path.exists()


def test_run_grab_and_yank_in_one_session(tmp_path: Path) -> None:
    path = _write(tmp_path, "1 2\n3 4")

    result = runner.invoke(
        app, ["run", str(path), "calc-grab-columns", "calc-yank", "--rect", "1:0-2:3"]
    )

    assert result.exit_code == 0, result.output
    assert path.read_text(encoding="utf-8") == "4  6\n    "
    assert "blank" in result.output


def test_restore_uses_state_from_previous_run(tmp_path: Path) -> None:
    path = _write(tmp_path, "abcd\nefgh")
    output = tmp_path / "out.txt"

    first = runner.invoke(app, ["run", str(path), "copy", "--rect", "1:1-2:3"])
    second = runner.invoke(
        app, ["run", str(path), "restore", "right:1", "cut", "--output", str(output)]
    )

    assert first.exit_code == 0, first.output
    assert second.exit_code == 0, second.output
    assert output.read_text(encoding="utf-8") == "ab\nef"
    assert path.read_text(encoding="utf-8") == "abcd\nefgh"


def test_failed_command_leaves_file_unchanged(tmp_path: Path) -> None:
    path = _write(tmp_path, "some text here")

    result = runner.invoke(app, ["run", str(path), "right", "fill:0", "--rect", "1:0-1:9"])

    assert result.exit_code == 1
    assert path.read_text(encoding="utf-8") == "some text here"


def test_bad_rectangle_is_rejected(tmp_path: Path) -> None:
    path = _write(tmp_path, "abc")

    result = runner.invoke(app, ["run", str(path), "copy", "--rect", "1:0"])

    assert result.exit_code != 0


def test_show_prints_block_and_margins(tmp_path: Path) -> None:
    path = _write(tmp_path, "|  ab  |\n|   c  |")

    result = runner.invoke(app, ["show", str(path), "--rect", "1:1-2:7"])

    assert result.exit_code == 0, result.output
    assert "|  ab  |" in result.output
    assert "margin_left=2 margin_right=2" in result.output


def test_commands_lists_the_table() -> None:
    result = runner.invoke(app, ["commands"])

    assert result.exit_code == 0
    assert "calc-yank" in result.output
