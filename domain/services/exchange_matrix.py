from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from domain.errors import MatrixFormatError, NotPossibleHere
from domain.models import (
    Diagnostic,
    LineBlock,
    MatrixText,
    Rectangle,
    Reduction,
    YankResult,
)
from domain.ports.matrix import MatrixMachine
from domain.ports.text_surface import TextSurface
from domain.services.analyze_padding import analyze_padding, guard_window
from domain.services.rebuild_rectangle import rebuild
from domain.services.shift_rectangle import bounds as rectangle_bounds
from domain.services.shift_rectangle import span

logger = logging.getLogger(__name__)

_TOKEN_SPLIT = re.compile(r"[\s,]+")
_NUMBER = re.compile(
    r"""^[-+]?(
        \d+(\.\d*)?([eE][-+]?\d+)?     # 12, 1.5, 2e-3
        |\.\d+([eE][-+]?\d+)?          # .5
        |\d+:0*[1-9]\d*                # fraction 3:4, nonzero denominator
    )$""",
    re.VERBOSE,
)
_BRACKETS = str.maketrans({"[": " ", "]": " "})
_ELLIPSIS = "..."


def tokenize_rows(lines: Sequence[str]) -> list[list[str]]:
    rows: list[list[str]] = []
    for index, line in enumerate(lines, start=1):
        tokens = [token for token in _TOKEN_SPLIT.split(line.strip()) if token]
        if not tokens:
            continue
        for token in tokens:
            if not _NUMBER.match(token):
                msg = f"Row {index}: {token!r} is not a number"
                raise MatrixFormatError(msg)
        if rows and len(tokens) != len(rows[0]):
            msg = f"Row {index} has {len(tokens)} entries, expected {len(rows[0])}"
            raise MatrixFormatError(msg)
        rows.append(tokens)
    if not rows:
        msg = "Rectangle contains no numbers"
        raise MatrixFormatError(msg)
    return rows


def grab(
    surface: TextSurface,
    rect: Rectangle,
    machine: MatrixMachine,
    reduction: Reduction | None = None,
) -> list[list[str]]:
    rows = tokenize_rows(surface.extract_rectangle(rectangle_bounds(surface, rect)))
    try:
        machine.push_matrix(rows, reduction)
    except (ValueError, ArithmeticError) as exc:
        msg = f"Calculator rejected the matrix: {exc}"
        raise MatrixFormatError(msg) from exc
    logger.info(
        "Grabbed %dx%d matrix%s",
        len(rows),
        len(rows[0]),
        f" ({reduction.value} reduced)" if reduction else "",
    )
    return rows


def parse_matrix_text(text: str, normalize_brackets: bool = True) -> MatrixText:
    lines = text.splitlines()
    while lines and not lines[-1].strip():
        lines.pop()
    if any(_ELLIPSIS in line for line in lines):
        msg = "Matrix display is abbreviated; full vector display is required"
        raise MatrixFormatError(msg)
    if normalize_brackets:
        lines = [_strip_row_comma(line.translate(_BRACKETS)) for line in lines]
    return MatrixText(lines=lines, width=len(lines[0]) if lines else 0)


def reconcile_rows(matrix: MatrixText, height: int) -> tuple[LineBlock, list[Diagnostic]]:
    lines = list(matrix.lines)
    diagnostics: list[Diagnostic] = []
    if len(lines) > height:
        diagnostics.append(
            Diagnostic(
                "warning",
                f"Matrix has {len(lines)} rows but the rectangle has {height}; "
                f"dropped the last {len(lines) - height}",
            )
        )
        del lines[height:]
    elif len(lines) < height:
        diagnostics.append(
            Diagnostic(
                "warning",
                f"Matrix has {len(lines)} rows but the rectangle has {height}; "
                f"inserted {height - len(lines)} blank rows",
            )
        )
    for diagnostic in diagnostics:
        logger.warning(diagnostic.message)
    return lines, diagnostics


def yank(
    surface: TextSurface,
    rect: Rectangle | None,
    machine: MatrixMachine | None,
    precision: int | None = None,
    normalize_brackets: bool = True,
) -> YankResult:
    if rect is None:
        raise NotPossibleHere("no active rectangle")
    if machine is None:
        raise NotPossibleHere("no calculator available")
    printed = machine.top_text(brackets=False, full_vectors=True, precision=precision)
    if printed is None:
        raise NotPossibleHere("calculator stack is empty")

    matrix = parse_matrix_text(printed, normalize_brackets=normalize_brackets)
    area = rectangle_bounds(surface, rect)
    lines, diagnostics = reconcile_rows(matrix, area.height)

    low, high = guard_window(analyze_padding(lines))
    # The window cuts low columns from the front and -high from the back of each row.
    target_width = max(0, matrix.width - low + high) if lines else area.width
    rebuild(surface, area, lines, target_width, window=(low, high))

    result = span(surface, area.top, area.left, area.bottom, area.left + target_width)
    return YankResult(rectangle=result, diagnostics=diagnostics)


def _strip_row_comma(line: str) -> str:
    stripped = line.rstrip()
    if stripped.endswith(","):
        return stripped[:-1] + " " + line[len(stripped) :]
    return line
