from __future__ import annotations

from collections.abc import Sequence
from fractions import Fraction

from domain.models import Reduction
from domain.ports.matrix import MatrixMachine

Matrix = list[list[Fraction]]

ABBREVIATE_AFTER = 5


def parse_number(token: str) -> Fraction:
    if ":" in token:
        numerator, denominator = token.split(":", 1)
        return Fraction(int(numerator), int(denominator))
    return Fraction(token)


def format_number(value: Fraction, precision: int | None = None) -> str:
    if precision is not None:
        return f"{float(value):.{precision}f}"
    if value.denominator == 1:
        return str(value.numerator)
    return format(float(value), ".12g")


class StackMachine(MatrixMachine):
    """Minimal matrix stack: push, sum reductions and fixed-format printing."""

    def __init__(self) -> None:
        self._stack: list[Matrix] = []

    @property
    def depth(self) -> int:
        return len(self._stack)

    def push_matrix(
        self, rows: Sequence[Sequence[str]], reduction: Reduction | None = None
    ) -> None:
        matrix = [[parse_number(token) for token in row] for row in rows]
        if reduction is Reduction.ROWS:
            matrix = [[sum(row, Fraction(0))] for row in matrix]
        elif reduction is Reduction.COLUMNS:
            matrix = [[sum(column, Fraction(0)) for column in zip(*matrix, strict=True)]]
        self._stack.append(matrix)

    def push_values(self, rows: Sequence[Sequence[int | float | Fraction]]) -> None:
        self._stack.append([[Fraction(value) for value in row] for row in rows])

    def pop(self) -> Matrix:
        if not self._stack:
            msg = "Stack is empty"
            raise IndexError(msg)
        return self._stack.pop()

    def top_text(
        self,
        *,
        brackets: bool = False,
        full_vectors: bool = True,
        precision: int | None = None,
    ) -> str | None:
        if not self._stack:
            return None
        cells = [[format_number(value, precision) for value in row] for row in self._stack[-1]]
        if not full_vectors:
            cells = [_abbreviate(row) for row in cells]
        widths = [max(len(row[index]) for row in cells) for index in range(len(cells[0]))]
        if brackets:
            return _bracketed(cells, widths)
        return "\n".join(
            "  ".join(cell.rjust(width) for cell, width in zip(row, widths, strict=True))
            for row in cells
        )


def _abbreviate(row: list[str]) -> list[str]:
    if len(row) <= ABBREVIATE_AFTER:
        return row
    return [*row[:3], "...", row[-1]]


def _bracketed(cells: list[list[str]], widths: list[int]) -> str:
    rendered = [
        "[ " + ", ".join(cell.rjust(width) for cell, width in zip(row, widths, strict=True)) + " ]"
        for row in cells
    ]
    if len(rendered) == 1:
        return f"[ {rendered[0]} ]"
    lines = [f"[ {rendered[0]}"]
    lines.extend(f"  {row}" for row in rendered[1:-1])
    lines.append(f"  {rendered[-1]} ]")
    return "\n".join(lines)
