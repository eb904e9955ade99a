from __future__ import annotations

from pathlib import Path

from adapters.buffer.memory_buffer import InMemoryTextBuffer
from domain.ports.repositories import TextRepository
from domain.ports.text_surface import TextSurface


class FileSystemTextRepository(TextRepository):
    def load(self, path: Path) -> InMemoryTextBuffer:
        return InMemoryTextBuffer(path.read_text(encoding="utf-8"))

    def save(self, surface: TextSurface, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(surface.text, encoding="utf-8")
