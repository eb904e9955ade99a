from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Protocol

from domain.models import LineBlock


class MultiCursor(Protocol):
    def place_cursors(self, column: int, first_line: int, last_line: int) -> None: ...


class RectangleClipboard(Protocol):
    def store(self, block: Sequence[str]) -> None: ...

    def fetch(self) -> LineBlock | None: ...


class Scheduler(Protocol):
    def call_soon(self, callback: Callable[[], None]) -> None: ...
