from __future__ import annotations

from collections.abc import Callable

import pytest

from adapters.buffer.memory_buffer import InMemoryTextBuffer
from adapters.clipboard.memory import InMemoryRectangleClipboard
from adapters.multicursor.recording import CursorPlacement, RecordingMultiCursor
from domain.errors import NothingToPaste
from domain.models import Rectangle, RectangleBounds
from domain.services import edit_rectangle
from domain.services.shift_rectangle import bounds

BufferFactory = Callable[..., InMemoryTextBuffer]
RectFactory = Callable[..., Rectangle]


@pytest.fixture
def buffer(buffer_factory: BufferFactory) -> InMemoryTextBuffer:
    return buffer_factory("abcd", "efgh")


def test_copy_then_paste_reproduces_block(
    buffer: InMemoryTextBuffer, rect_factory: RectFactory
) -> None:
    clipboard = InMemoryRectangleClipboard()

    block = edit_rectangle.copy(buffer, rect_factory(buffer, 0, 1, 1, 3), clipboard)
    pasted = edit_rectangle.paste(buffer, 4, clipboard)

    assert block == ["bc", "fg"]
    assert buffer.lines == ["abcdbc", "efghfg"]
    assert buffer.extract_rectangle(bounds(buffer, pasted)) == block


def test_cut_removes_block_and_keeps_it(
    buffer: InMemoryTextBuffer, rect_factory: RectFactory
) -> None:
    clipboard = InMemoryRectangleClipboard()

    edit_rectangle.cut(buffer, rect_factory(buffer, 0, 1, 1, 3), clipboard)

    assert buffer.lines == ["ad", "eh"]
    assert clipboard.fetch() == ["bc", "fg"]


def test_paste_with_empty_clipboard_is_reported(buffer: InMemoryTextBuffer) -> None:
    with pytest.raises(NothingToPaste):
        edit_rectangle.paste(buffer, 0, InMemoryRectangleClipboard())
    assert buffer.lines == ["abcd", "efgh"]


def test_delete_clear_and_open(buffer_factory: BufferFactory, rect_factory: RectFactory) -> None:
    deleted = buffer_factory("abcd", "efgh")
    edit_rectangle.delete(deleted, rect_factory(deleted, 0, 1, 1, 3))
    assert deleted.lines == ["ad", "eh"]

    cleared = buffer_factory("abcd", "efgh")
    edit_rectangle.clear(cleared, rect_factory(cleared, 0, 1, 1, 3))
    assert cleared.lines == ["a  d", "e  h"]

    opened = buffer_factory("abcd", "efgh")
    edit_rectangle.open_rectangle(opened, rect_factory(opened, 0, 1, 1, 3))
    assert opened.lines == ["a  bcd", "e  fgh"]


def test_number_lines_right_aligns_labels(
    buffer_factory: BufferFactory, rect_factory: RectFactory
) -> None:
    buffer = buffer_factory("ab", "cd", "ef")

    result = edit_rectangle.number_lines(buffer, rect_factory(buffer, 0, 0, 2, 0), start=9)

    assert buffer.lines == [" 9 ab", "10 cd", "11 ef"]
    assert bounds(buffer, result) == RectangleBounds(top=0, bottom=2, left=0, right=3)


@pytest.mark.parametrize(
    ("side", "lines", "width"),
    [
        ("both", ["|ab|", "| c|"], 2),
        ("left", ["|ab  |", "| c  |"], 4),
        ("right", ["|  ab|", "|   c|"], 4),
    ],
)
def test_trim_strips_shared_margin(
    buffer_factory: BufferFactory,
    rect_factory: RectFactory,
    side: edit_rectangle.TrimSide,
    lines: list[str],
    width: int,
) -> None:
    buffer = buffer_factory("|  ab  |", "|   c  |")

    result = edit_rectangle.trim(buffer, rect_factory(buffer, 0, 1, 1, 7), side)

    assert buffer.lines == lines
    assert bounds(buffer, result).width == width


def test_trim_without_margin_is_a_no_op(
    buffer_factory: BufferFactory, rect_factory: RectFactory
) -> None:
    buffer = buffer_factory("|ab|", "|  |")
    rect = rect_factory(buffer, 0, 1, 1, 3)

    assert edit_rectangle.trim(buffer, rect) == rect
    assert buffer.lines == ["|ab|", "|  |"]


def test_place_cursors_uses_point_column(
    buffer: InMemoryTextBuffer, rect_factory: RectFactory
) -> None:
    cursors = RecordingMultiCursor()

    edit_rectangle.place_cursors(buffer, rect_factory(buffer, 0, 1, 1, 3), cursors)

    assert cursors.placements == [CursorPlacement(column=3, first_line=0, last_line=1)]
    assert cursors.placements[0].cursors() == [(0, 3), (1, 3)]
