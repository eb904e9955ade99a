from __future__ import annotations

from collections.abc import Callable, Sequence

import pytest

from adapters.buffer.memory_buffer import InMemoryTextBuffer
from adapters.calc.stack_machine import StackMachine
from domain.errors import MatrixFormatError, NotPossibleHere
from domain.models import MatrixText, Rectangle, RectangleBounds, Reduction
from domain.services.exchange_matrix import (
    grab,
    parse_matrix_text,
    reconcile_rows,
    tokenize_rows,
    yank,
)
from domain.services.shift_rectangle import bounds

BufferFactory = Callable[..., InMemoryTextBuffer]
RectFactory = Callable[..., Rectangle]


class _PrintedMachine:
    def __init__(self, printed: str | None) -> None:
        self.printed = printed
        self.requests: list[dict[str, object]] = []

    def push_matrix(self, rows: Sequence[Sequence[str]], reduction: Reduction | None = None) -> None:
        raise AssertionError("not used")

    def top_text(
        self, *, brackets: bool = False, full_vectors: bool = True, precision: int | None = None
    ) -> str | None:
        self.requests.append(
            {"brackets": brackets, "full_vectors": full_vectors, "precision": precision}
        )
        return self.printed


@pytest.fixture
def grid(buffer_factory: BufferFactory) -> InMemoryTextBuffer:
    return buffer_factory("x 0 0 y", "x 0 0 y", "x 0 0 y")


def test_tokenize_rows_skips_blank_rows() -> None:
    assert tokenize_rows(["1 2", " 3, -4.5 ", "   ", "1e3 2:3"]) == [
        ["1", "2"],
        ["3", "-4.5"],
        ["1e3", "2:3"],
    ]


@pytest.mark.parametrize(
    "lines", [["1 x"], ["1 2", "3"], ["", "  "], ["1:0 2"], ["3:00"]]
)
def test_tokenize_rows_rejects_malformed_blocks(lines: list[str]) -> None:
    with pytest.raises(MatrixFormatError):
        tokenize_rows(lines)


@pytest.mark.parametrize(
    ("reduction", "expected"),
    [(None, "1  2\n3  4"), (Reduction.ROWS, "3\n7"), (Reduction.COLUMNS, "4  6")],
)
def test_grab_pushes_block_or_its_reduction(
    buffer_factory: BufferFactory,
    rect_factory: RectFactory,
    reduction: Reduction | None,
    expected: str,
) -> None:
    buffer = buffer_factory("a 1 2 b", "a 3 4 b")
    machine = StackMachine()

    rows = grab(buffer, rect_factory(buffer, 0, 2, 1, 5), machine, reduction)

    assert rows == [["1", "2"], ["3", "4"]]
    assert machine.top_text() == expected
    assert buffer.text == "a 1 2 b\na 3 4 b"


def test_grab_of_text_leaves_stack_untouched(
    buffer_factory: BufferFactory, rect_factory: RectFactory
) -> None:
    buffer = buffer_factory("a b", "c d")
    machine = StackMachine()

    with pytest.raises(MatrixFormatError):
        grab(buffer, rect_factory(buffer, 0, 0, 1, 3), machine)
    assert machine.depth == 0


class _RefusingMachine(_PrintedMachine):
    def push_matrix(self, rows: Sequence[Sequence[str]], reduction: Reduction | None = None) -> None:
        raise ZeroDivisionError("Fraction(1, 0)")


def test_grab_reports_calculator_errors_as_format_errors(
    buffer_factory: BufferFactory, rect_factory: RectFactory
) -> None:
    buffer = buffer_factory("1 2", "3 4")

    with pytest.raises(MatrixFormatError, match="Fraction"):
        grab(buffer, rect_factory(buffer, 0, 0, 1, 3), _RefusingMachine(None))


def test_parse_matrix_text_drops_trailing_blank_lines() -> None:
    assert parse_matrix_text("1  2\n3  4\n\n") == MatrixText(lines=["1  2", "3  4"], width=4)


def test_parse_matrix_text_turns_brackets_into_spaces() -> None:
    matrix = parse_matrix_text("[ [ 1, 2 ]\n  [ 3, 4 ] ]")

    assert matrix.lines == ["    1, 2  ", "    3, 4    "]
    assert matrix.width == 10


def test_parse_matrix_text_rejects_abbreviated_vectors() -> None:
    with pytest.raises(MatrixFormatError):
        parse_matrix_text("1  2  3  ...  9")


def test_reconcile_rows_truncates_and_warns() -> None:
    lines, diagnostics = reconcile_rows(MatrixText(lines=list("abcde"), width=1), 3)

    assert lines == ["a", "b", "c"]
    assert [d.level for d in diagnostics] == ["warning"]
    assert "dropped" in diagnostics[0].message


def test_reconcile_rows_keeps_short_block_and_warns() -> None:
    lines, diagnostics = reconcile_rows(MatrixText(lines=["a", "b"], width=1), 3)

    assert lines == ["a", "b"]
    assert "blank" in diagnostics[0].message


def test_reconcile_rows_matching_height_is_silent() -> None:
    assert reconcile_rows(MatrixText(lines=["a"], width=1), 1) == (["a"], [])


def test_yank_truncates_extra_matrix_rows(
    grid: InMemoryTextBuffer, rect_factory: RectFactory
) -> None:
    machine = StackMachine()
    machine.push_values([[1, 2], [3, 4], [5, 6], [7, 8], [9, 10]])

    result = yank(grid, rect_factory(grid, 0, 1, 2, 6), machine)

    assert grid.lines == ["x1   2y", "x3   4y", "x5   6y"]
    assert len(result.diagnostics) == 1
    assert "dropped" in result.diagnostics[0].message
    assert bounds(grid, result.rectangle) == RectangleBounds(top=0, bottom=2, left=1, right=6)


def test_yank_pads_missing_rows_with_blanks(
    grid: InMemoryTextBuffer, rect_factory: RectFactory
) -> None:
    machine = StackMachine()
    machine.push_values([[1, 2], [3, 4]])

    result = yank(grid, rect_factory(grid, 0, 1, 2, 6), machine)

    assert grid.lines == ["x1  2y", "x3  4y", "x    y"]
    assert "blank" in result.diagnostics[0].message
    assert bounds(grid, result.rectangle) == RectangleBounds(top=0, bottom=2, left=1, right=5)


def test_yank_width_follows_first_printed_row(
    grid: InMemoryTextBuffer, rect_factory: RectFactory
) -> None:
    machine = _PrintedMachine("1  2\n30  4")

    result = yank(grid, rect_factory(grid, 0, 1, 2, 6), machine)

    assert grid.lines == ["x1  2y", "x30  4y", "x    y"]
    assert bounds(grid, result.rectangle) == RectangleBounds(top=0, bottom=2, left=1, right=5)


def test_yank_keeps_a_single_guard_space(
    grid: InMemoryTextBuffer, rect_factory: RectFactory
) -> None:
    machine = _PrintedMachine("   1   2  \n   3   4  \n   5   6  ")

    result = yank(grid, rect_factory(grid, 0, 1, 2, 6), machine, precision=2)

    assert grid.lines == ["x 1   2 y", "x 3   4 y", "x 5   6 y"]
    assert result.diagnostics == []
    assert machine.requests == [{"brackets": False, "full_vectors": True, "precision": 2}]


def test_yank_requires_rectangle_and_output(
    grid: InMemoryTextBuffer, rect_factory: RectFactory
) -> None:
    rect = rect_factory(grid, 0, 1, 2, 6)

    with pytest.raises(NotPossibleHere):
        yank(grid, None, StackMachine())
    with pytest.raises(NotPossibleHere):
        yank(grid, rect, None)
    with pytest.raises(NotPossibleHere):
        yank(grid, rect, StackMachine())
    assert grid.lines == ["x 0 0 y"] * 3
