from __future__ import annotations

from dataclasses import dataclass

from domain.ports.collaborators import MultiCursor


@dataclass(frozen=True)
class CursorPlacement:
    column: int
    first_line: int
    last_line: int

    def cursors(self) -> list[tuple[int, int]]:
        return [(line, self.column) for line in range(self.first_line, self.last_line + 1)]


class RecordingMultiCursor(MultiCursor):
    """Keeps the requested cursor placements for a host to apply later."""

    def __init__(self) -> None:
        self.placements: list[CursorPlacement] = []

    def place_cursors(self, column: int, first_line: int, last_line: int) -> None:
        self.placements.append(CursorPlacement(column, first_line, last_line))

    @property
    def last(self) -> CursorPlacement | None:
        return self.placements[-1] if self.placements else None
