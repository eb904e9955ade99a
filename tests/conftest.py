from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path

import pytest

from adapters.buffer.memory_buffer import InMemoryTextBuffer
from adapters.calc.stack_machine import StackMachine
from adapters.clipboard.memory import InMemoryRectangleClipboard
from adapters.multicursor.recording import RecordingMultiCursor
from adapters.scheduling.deferred import DeferredQueue
from app.config import AppSettings, EditingSettings, StateSettings
from domain.models import Rectangle
from domain.services.command_table import RectangleSession, SessionOptions
from domain.services.shift_rectangle import span


@pytest.fixture(autouse=True)
def clear_rectcalc_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in [name for name in os.environ if name.startswith("RECTCALC_")]:
        monkeypatch.delenv(key)


@pytest.fixture
def buffer_factory() -> Callable[..., InMemoryTextBuffer]:
    def _factory(*lines: str) -> InMemoryTextBuffer:
        return InMemoryTextBuffer("\n".join(lines))

    return _factory


@pytest.fixture
def rect_factory() -> Callable[..., Rectangle]:
    def _factory(
        buffer: InMemoryTextBuffer, top: int, left: int, bottom: int, right: int
    ) -> Rectangle:
        return span(buffer, top, left, bottom, right)

    return _factory


@pytest.fixture
def scheduler() -> DeferredQueue:
    return DeferredQueue()


@pytest.fixture
def session_factory(scheduler: DeferredQueue) -> Callable[..., RectangleSession]:
    def _factory(buffer: InMemoryTextBuffer, **overrides: object) -> RectangleSession:
        options = overrides.pop("options", SessionOptions())
        return RectangleSession(
            buffer,
            clipboard=overrides.pop("clipboard", InMemoryRectangleClipboard()),
            scheduler=overrides.pop("scheduler", scheduler),
            machine=overrides.pop("machine", StackMachine()),
            cursors=overrides.pop("cursors", RecordingMultiCursor()),
            options=options,
            **overrides,
        )

    return _factory


@pytest.fixture
def app_settings(tmp_path: Path) -> AppSettings:
    return AppSettings(
        editing=EditingSettings(fast_step=5, fill_column=20),
        state=StateSettings(path=tmp_path / "state" / "state.json"),
    )


@pytest.fixture
def app_settings_factory(app_settings: AppSettings) -> Callable[..., AppSettings]:
    def _factory(**overrides: object) -> AppSettings:
        return app_settings.model_copy(update=overrides)

    return _factory
