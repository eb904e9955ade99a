from __future__ import annotations

import logging
from typing import Literal

from domain.errors import NothingToPaste
from domain.models import LineBlock, Rectangle, RectangleBounds
from domain.ports.collaborators import MultiCursor, RectangleClipboard
from domain.ports.text_surface import TextSurface
from domain.services.analyze_padding import analyze_padding
from domain.services.rebuild_rectangle import rebuild
from domain.services.shift_rectangle import bounds as rectangle_bounds
from domain.services.shift_rectangle import endpoint_column, span

logger = logging.getLogger(__name__)

TrimSide = Literal["left", "right", "both"]


def copy(surface: TextSurface, rect: Rectangle, clipboard: RectangleClipboard) -> LineBlock:
    block = surface.extract_rectangle(rectangle_bounds(surface, rect))
    clipboard.store(block)
    return block


def cut(surface: TextSurface, rect: Rectangle, clipboard: RectangleClipboard) -> LineBlock:
    area = rectangle_bounds(surface, rect)
    block = surface.extract_rectangle(area)
    clipboard.store(block)
    surface.delete_rectangle(area)
    return block


def delete(surface: TextSurface, rect: Rectangle) -> None:
    surface.delete_rectangle(rectangle_bounds(surface, rect))


def paste(surface: TextSurface, offset: int, clipboard: RectangleClipboard) -> Rectangle:
    block = clipboard.fetch()
    if block is None:
        raise NothingToPaste()
    line, column = surface.position(offset)
    surface.insert_rectangle(line, column, block)
    width = max((len(row) for row in block), default=0)
    return span(surface, line, column, line + max(len(block), 1) - 1, column + width)


def clear(surface: TextSurface, rect: Rectangle) -> Rectangle:
    area = rectangle_bounds(surface, rect)
    rebuild(surface, area, [], area.width)
    return rect


def open_rectangle(surface: TextSurface, rect: Rectangle) -> Rectangle:
    area = rectangle_bounds(surface, rect)
    surface.insert_rectangle(area.top, area.left, [" " * area.width] * area.height)
    return rect


def number_lines(surface: TextSurface, rect: Rectangle, start: int = 1) -> Rectangle:
    area = rectangle_bounds(surface, rect)
    last = start + area.height - 1
    digits = max(len(str(start)), len(str(last)))
    labels = [f"{number:>{digits}} " for number in range(start, last + 1)]
    surface.insert_rectangle(area.top, area.left, labels)
    return span(surface, area.top, area.left, area.bottom, area.left + digits + 1)


def trim(surface: TextSurface, rect: Rectangle, side: TrimSide = "both") -> Rectangle:
    """Strip the space margin shared by all non-blank rows and return the narrowed rectangle."""
    area = rectangle_bounds(surface, rect)
    profile = analyze_padding(surface.extract_rectangle(area))
    left_cut = profile.min_left if side in ("left", "both") else 0
    right_cut = profile.min_right if side in ("right", "both") else 0
    if not left_cut and not right_cut:
        return rect
    if right_cut:
        surface.delete_rectangle(
            RectangleBounds(area.top, area.bottom, area.right - right_cut, area.right)
        )
    if left_cut:
        surface.delete_rectangle(
            RectangleBounds(area.top, area.bottom, area.left, area.left + left_cut)
        )
    logger.debug("Trimmed %d left and %d right columns", left_cut, right_cut)
    return span(surface, area.top, area.left, area.bottom, area.right - left_cut - right_cut)


def place_cursors(surface: TextSurface, rect: Rectangle, collaborator: MultiCursor) -> tuple[int, int, int]:
    area = rectangle_bounds(surface, rect)
    column = endpoint_column(surface, rect.active)
    collaborator.place_cursors(column, area.top, area.bottom)
    return column, area.top, area.bottom
