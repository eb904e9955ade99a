from __future__ import annotations

import logging

from domain.errors import NoStoredRectangle, NotPossibleHere
from domain.models import Endpoint, LastRectangle, Rectangle, RectangleSnapshot
from domain.ports.text_surface import TextSurface

logger = logging.getLogger(__name__)


class RectangleContext:
    """Active rectangle and stashed last rectangle of a single text surface."""

    def __init__(self, surface: TextSurface) -> None:
        self.surface = surface
        self._active: Rectangle | None = None
        self._last: LastRectangle | None = None

    @property
    def active(self) -> Rectangle | None:
        return self._active

    @property
    def last(self) -> LastRectangle | None:
        return self._last

    def activate(self, rect: Rectangle) -> Rectangle:
        self._active = rect
        return rect

    def deactivate(self) -> None:
        self._active = None

    def require_active(self) -> Rectangle:
        if self._active is None:
            raise NotPossibleHere("no active rectangle")
        return self._active

    def stash(self, rect: Rectangle) -> LastRectangle:
        if self._last is None:
            self._last = LastRectangle(
                anchor=self.surface.create_marker(rect.anchor.offset),
                active=self.surface.create_marker(rect.active.offset),
            )
        else:
            self._last.anchor.set(rect.anchor.offset)
            self._last.active.set(rect.active.offset)
        self._last.anchor_crutch = rect.anchor.crutch
        self._last.active_crutch = rect.active.crutch
        logger.debug("Stashed rectangle %s", rect)
        return self._last

    def restore_last(self) -> Rectangle:
        if self._last is None:
            raise NoStoredRectangle()
        return self.activate(self._last.to_rectangle())

    def restart(self, offset: int) -> Rectangle:
        return self.activate(Rectangle.at(offset))

    def snapshot(self) -> RectangleSnapshot | None:
        if self._last is None:
            return None
        return RectangleSnapshot.from_last(self._last)

    def load_snapshot(self, snapshot: RectangleSnapshot | None) -> None:
        if snapshot is None:
            return
        limit = len(self.surface.text)
        self.stash(
            Rectangle(
                anchor=Endpoint(min(snapshot.anchor, limit), snapshot.anchor_crutch),
                active=Endpoint(min(snapshot.active, limit), snapshot.active_crutch),
            )
        )

    def restore_stash(self, previous: Rectangle | None) -> None:
        """Put the stash back to ``previous`` after a command failed."""
        if previous is None:
            self._last = None
        else:
            self.stash(previous)
