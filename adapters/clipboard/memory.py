from __future__ import annotations

from collections import deque
from collections.abc import Sequence

from domain.models import LineBlock
from domain.ports.collaborators import RectangleClipboard


class InMemoryRectangleClipboard(RectangleClipboard):
    def __init__(self, capacity: int = 16) -> None:
        self._ring: deque[LineBlock] = deque(maxlen=capacity)

    def store(self, block: Sequence[str]) -> None:
        self._ring.append(list(block))

    def fetch(self) -> LineBlock | None:
        if not self._ring:
            return None
        return list(self._ring[-1])

    def __len__(self) -> int:
        return len(self._ring)
