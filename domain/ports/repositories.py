from __future__ import annotations

from pathlib import Path
from typing import Protocol

from domain.models import SessionState
from domain.ports.text_surface import TextSurface


class TextRepository(Protocol):
    def load(self, path: Path) -> TextSurface: ...

    def save(self, surface: TextSurface, path: Path) -> None: ...


class SessionRepository(Protocol):
    def load(self, path: Path) -> SessionState: ...

    def save(self, state: SessionState, path: Path) -> None: ...
