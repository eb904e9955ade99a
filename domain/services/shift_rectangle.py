from __future__ import annotations

from domain.models import Endpoint, Rectangle, RectangleBounds
from domain.ports.text_surface import TextSurface

FAST_STEP = 5


def endpoint_line(surface: TextSurface, endpoint: Endpoint) -> int:
    return surface.position(endpoint.offset)[0]


def endpoint_column(surface: TextSurface, endpoint: Endpoint) -> int:
    if endpoint.crutch is not None:
        return endpoint.crutch
    return surface.position(endpoint.offset)[1]


def place_endpoint(surface: TextSurface, endpoint: Endpoint, line: int, column: int) -> Endpoint:
    """Move ``endpoint`` to ``line``/``column``; columns past the line end become a crutch."""
    length = len(surface.line_text(line))
    crutch = column if column > length else None
    return endpoint.moved(surface.offset_at(line, column), crutch)


def bounds(surface: TextSurface, rect: Rectangle) -> RectangleBounds:
    anchor_line = endpoint_line(surface, rect.anchor)
    active_line = endpoint_line(surface, rect.active)
    anchor_column = endpoint_column(surface, rect.anchor)
    active_column = endpoint_column(surface, rect.active)
    return RectangleBounds(
        top=min(anchor_line, active_line),
        bottom=max(anchor_line, active_line),
        left=min(anchor_column, active_column),
        right=max(anchor_column, active_column),
    )


def dimensions(surface: TextSurface, rect: Rectangle) -> tuple[int, int]:
    """Signed width (active column minus anchor column) and inclusive height."""
    width = endpoint_column(surface, rect.active) - endpoint_column(surface, rect.anchor)
    height = abs(endpoint_line(surface, rect.active) - endpoint_line(surface, rect.anchor)) + 1
    return width, height


def shift_columns(surface: TextSurface, rect: Rectangle, n: int) -> Rectangle:
    return Rectangle(
        anchor=_shift_endpoint_columns(surface, rect.anchor, n),
        active=_shift_endpoint_columns(surface, rect.active, n),
    )


def shift_rows(surface: TextSurface, rect: Rectangle, n: int) -> Rectangle:
    return Rectangle(
        anchor=_shift_endpoint_rows(surface, rect.anchor, n),
        active=_shift_endpoint_rows(surface, rect.active, n),
    )


def cycle_corner(rect: Rectangle) -> Rectangle:
    return rect.swapped()


def mirror_corner(surface: TextSurface, rect: Rectangle) -> Rectangle:
    """Exchange the endpoint columns so point lands on the horizontally opposite corner."""
    anchor_line = endpoint_line(surface, rect.anchor)
    active_line = endpoint_line(surface, rect.active)
    anchor_column = endpoint_column(surface, rect.anchor)
    active_column = endpoint_column(surface, rect.active)
    return Rectangle(
        anchor=place_endpoint(surface, rect.anchor, anchor_line, active_column),
        active=place_endpoint(surface, rect.active, active_line, anchor_column),
    )


def fast_count(count: int | None, step: int = FAST_STEP) -> int:
    return step if count is None else count


def _shift_endpoint_columns(surface: TextSurface, endpoint: Endpoint, n: int) -> Endpoint:
    column = endpoint_column(surface, endpoint)
    if n < 0 and column == 0:
        return endpoint
    return place_endpoint(surface, endpoint, endpoint_line(surface, endpoint), max(0, column + n))


def _shift_endpoint_rows(surface: TextSurface, endpoint: Endpoint, n: int) -> Endpoint:
    line = endpoint_line(surface, endpoint)
    target = max(0, min(line + n, surface.line_count() - 1))
    if target == line:
        return endpoint
    return place_endpoint(surface, endpoint, target, endpoint_column(surface, endpoint))


def span(surface: TextSurface, top: int, left: int, bottom: int, right: int) -> Rectangle:
    origin = Endpoint(0)
    return Rectangle(
        anchor=place_endpoint(surface, origin, top, left),
        active=place_endpoint(surface, origin, bottom, right),
    )
