from __future__ import annotations

import logging
import textwrap

from domain.errors import InvalidArgument
from domain.models import LineBlock, Rectangle, RectangleBounds
from domain.ports.text_surface import TextSurface
from domain.services.rebuild_rectangle import rebuild
from domain.services.shift_rectangle import bounds as rectangle_bounds
from domain.services.shift_rectangle import span

logger = logging.getLogger(__name__)


def reflow(block: LineBlock, width: int) -> LineBlock:
    # Unbounded first pass: hard breaks and runs of spaces collapse into one line.
    normalized = " ".join(" ".join(block).split())
    return [line.ljust(width) for line in textwrap.wrap(normalized, width=width)]


def fill(surface: TextSurface, rect: Rectangle, width: int) -> Rectangle:
    if width <= 0:
        msg = f"Fill width must be positive, got {width}"
        raise InvalidArgument(msg)

    area = rectangle_bounds(surface, rect)
    block = surface.extract_rectangle(area)
    surface.delete_rectangle(area)
    lines = reflow(block, width)

    extra = len(lines) - area.height
    if extra > 0:
        _open_lines_below(surface, area.bottom, extra)
    rows = max(area.height, len(lines))
    target = RectangleBounds(top=area.top, bottom=area.top + rows - 1, left=area.left, right=area.left)
    rebuild(surface, target, lines, width)
    logger.debug("Filled %d rows into %d at width %d", area.height, rows, width)
    return span(surface, target.top, target.left, target.bottom, target.left + width)


def _open_lines_below(surface: TextSurface, line: int, count: int) -> None:
    end_of_line = surface.offset_at(line, len(surface.line_text(line)))
    surface.insert(end_of_line, "\n" * count)
