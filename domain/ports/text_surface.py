from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from domain.models import LineBlock, RectangleBounds


class Marker(Protocol):
    """Buffer position that stays valid across insertions and deletions."""

    @property
    def offset(self) -> int: ...

    def set(self, offset: int) -> None: ...


class TextSurface(Protocol):
    reconstructing: bool

    @property
    def text(self) -> str: ...

    def line_count(self) -> int: ...

    def line_text(self, line: int) -> str: ...

    def position(self, offset: int) -> tuple[int, int]: ...

    def offset_at(self, line: int, column: int) -> int: ...

    def move_to_column(self, line: int, column: int) -> int: ...

    def insert(self, offset: int, text: str) -> None: ...

    def delete(self, start: int, end: int) -> None: ...

    def extract_rectangle(self, bounds: RectangleBounds) -> LineBlock: ...

    def delete_rectangle(self, bounds: RectangleBounds) -> None: ...

    def insert_rectangle(self, line: int, column: int, block: Sequence[str]) -> None: ...

    def create_marker(self, offset: int) -> Marker: ...
