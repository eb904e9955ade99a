from __future__ import annotations

from pathlib import Path

import orjson
from filelock import FileLock

from domain.models import SessionState
from domain.ports.repositories import SessionRepository


class FileSystemSessionRepository(SessionRepository):
    """Session state as one JSON document, replaced whole under a sibling lock file."""

    def load(self, path: Path) -> SessionState:
        if not path.is_file():
            return SessionState()
        return SessionState.model_validate(orjson.loads(path.read_bytes()))

    def save(self, state: SessionState, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        staging = staging_path(path)
        payload = orjson.dumps(
            state.model_dump(mode="json"),
            option=orjson.OPT_INDENT_2 | orjson.OPT_APPEND_NEWLINE,
        )
        with FileLock(str(path.with_name(f"{path.name}.lock"))):
            staging.write_bytes(payload)
            staging.replace(path)


def staging_path(path: Path) -> Path:
    return path.with_name(f".{path.name}.partial")
