from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from domain.errors import ReentrantOperation
from domain.models import LineBlock, RectangleBounds
from domain.ports.text_surface import TextSurface
from domain.services.analyze_padding import apply_window


@contextmanager
def _exclusive(surface: TextSurface) -> Iterator[None]:
    if surface.reconstructing:
        msg = "A rectangle reconstruction is already running on this buffer"
        raise ReentrantOperation(msg)
    surface.reconstructing = True
    try:
        yield
    finally:
        surface.reconstructing = False


def rebuild(
    surface: TextSurface,
    bounds: RectangleBounds,
    lines: LineBlock,
    target_width: int,
    window: tuple[int, int] = (0, 0),
) -> int:
    """Replace every row slice of ``bounds`` with the next entry of ``lines``.

    ``lines`` is consumed from the front. Once it runs out the remaining rows
    receive ``target_width`` spaces, so the rectangle keeps its height. Each
    consumed entry is cut to ``window`` (see ``apply_window``) before insertion,
    and loses its trailing spaces on rows that end inside the rectangle.
    Returns how many rows were filled from ``lines``.
    """
    low, high = window
    filled = 0
    with _exclusive(surface):
        for row in bounds.rows():
            while row >= surface.line_count():
                surface.insert(len(surface.text), "\n")
            surface.delete(surface.offset_at(row, bounds.left), surface.offset_at(row, bounds.right))
            if not lines:
                surface.insert(surface.move_to_column(row, bounds.left), " " * target_width)
                continue
            text = apply_window(lines.pop(0), low, high)
            filled += 1
            if len(surface.line_text(row)) <= bounds.left:
                text = text.rstrip(" ")
            if text:
                surface.insert(surface.move_to_column(row, bounds.left), text)
    return filled
