from __future__ import annotations

import weakref
from bisect import bisect_right
from collections.abc import Sequence

from domain.models import LineBlock, RectangleBounds
from domain.ports.text_surface import TextSurface


class BufferMarker:
    """Offset kept valid across edits; text inserted at the marker goes after it."""

    __slots__ = ("_offset", "__weakref__")

    def __init__(self, offset: int) -> None:
        self._offset = offset

    @property
    def offset(self) -> int:
        return self._offset

    def set(self, offset: int) -> None:
        self._offset = offset

    def _after_insert(self, at: int, length: int) -> None:
        if self._offset > at:
            self._offset += length

    def _after_delete(self, start: int, end: int) -> None:
        if self._offset >= end:
            self._offset -= end - start
        elif self._offset > start:
            self._offset = start

    def __repr__(self) -> str:
        return f"BufferMarker({self._offset})"


class InMemoryTextBuffer(TextSurface):
    def __init__(self, text: str = "") -> None:
        self._text = text
        self._line_starts: list[int] | None = None
        self._markers: weakref.WeakSet[BufferMarker] = weakref.WeakSet()
        self.reconstructing = False

    @property
    def text(self) -> str:
        return self._text

    @property
    def lines(self) -> list[str]:
        return self._text.split("\n")

    def line_count(self) -> int:
        return len(self._starts())

    def line_text(self, line: int) -> str:
        start, end = self._line_span(line)
        return self._text[start:end]

    def position(self, offset: int) -> tuple[int, int]:
        offset = self._clamp(offset)
        starts = self._starts()
        line = bisect_right(starts, offset) - 1
        return line, offset - starts[line]

    def offset_at(self, line: int, column: int) -> int:
        start, end = self._line_span(line)
        return start + max(0, min(column, end - start))

    def move_to_column(self, line: int, column: int) -> int:
        start, end = self._line_span(line)
        length = end - start
        if column > length:
            self.insert(end, " " * (column - length))
        return start + column

    def insert(self, offset: int, text: str) -> None:
        if not text:
            return
        offset = self._clamp(offset)
        self._text = self._text[:offset] + text + self._text[offset:]
        self._line_starts = None
        for marker in list(self._markers):
            marker._after_insert(offset, len(text))

    def delete(self, start: int, end: int) -> None:
        start, end = sorted((self._clamp(start), self._clamp(end)))
        if start == end:
            return
        self._text = self._text[:start] + self._text[end:]
        self._line_starts = None
        for marker in list(self._markers):
            marker._after_delete(start, end)

    def extract_rectangle(self, bounds: RectangleBounds) -> LineBlock:
        block: LineBlock = []
        for row in bounds.rows():
            text = self.line_text(row) if row < self.line_count() else ""
            block.append(text[bounds.left : bounds.right].ljust(bounds.width))
        return block

    def delete_rectangle(self, bounds: RectangleBounds) -> None:
        for row in bounds.rows():
            if row >= self.line_count():
                break
            self.delete(self.offset_at(row, bounds.left), self.offset_at(row, bounds.right))

    def insert_rectangle(self, line: int, column: int, block: Sequence[str]) -> None:
        for index, text in enumerate(block):
            row = line + index
            while row >= self.line_count():
                self.insert(len(self._text), "\n")
            self.insert(self.move_to_column(row, column), text)

    def create_marker(self, offset: int) -> BufferMarker:
        marker = BufferMarker(self._clamp(offset))
        self._markers.add(marker)
        return marker

    def _starts(self) -> list[int]:
        if self._line_starts is None:
            starts = [0]
            index = self._text.find("\n")
            while index != -1:
                starts.append(index + 1)
                index = self._text.find("\n", index + 1)
            self._line_starts = starts
        return self._line_starts

    def _line_span(self, line: int) -> tuple[int, int]:
        starts = self._starts()
        if not 0 <= line < len(starts):
            msg = f"Line {line} is outside the buffer (0..{len(starts) - 1})"
            raise IndexError(msg)
        start = starts[line]
        end = starts[line + 1] - 1 if line + 1 < len(starts) else len(self._text)
        return start, end

    def _clamp(self, offset: int) -> int:
        return max(0, min(offset, len(self._text)))
