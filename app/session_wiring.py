from __future__ import annotations

from dataclasses import dataclass

from adapters.calc.stack_machine import StackMachine
from adapters.clipboard.memory import InMemoryRectangleClipboard
from adapters.multicursor.recording import RecordingMultiCursor
from adapters.scheduling.deferred import DeferredQueue
from app.config import AppSettings
from domain.models import SessionState
from domain.ports.text_surface import TextSurface
from domain.services.command_table import CommandResult, RectangleSession


@dataclass(frozen=True)
class SessionWiring:
    session: RectangleSession
    scheduler: DeferredQueue
    machine: StackMachine
    cursors: RecordingMultiCursor
    clipboard: InMemoryRectangleClipboard

    def execute(self, name: str, count: int | None = None) -> CommandResult:
        result = self.session.execute(name, count)
        self.scheduler.run_pending()
        return result


def build_session(
    settings: AppSettings,
    surface: TextSurface,
    *,
    point: int = 0,
    state: SessionState | None = None,
) -> SessionWiring:
    scheduler = DeferredQueue()
    machine = StackMachine()
    cursors = RecordingMultiCursor()
    clipboard = InMemoryRectangleClipboard(capacity=settings.editing.clipboard_capacity)
    session = RectangleSession(
        surface,
        clipboard=clipboard,
        scheduler=scheduler,
        machine=machine,
        cursors=cursors,
        options=settings.to_session_options(),
        point=point,
    )
    if state is not None:
        session.context.load_snapshot(state.last_rectangle)
        if state.has_clipboard:
            clipboard.store(state.clipboard)
    return SessionWiring(
        session=session,
        scheduler=scheduler,
        machine=machine,
        cursors=cursors,
        clipboard=clipboard,
    )


def export_state(wiring: SessionWiring) -> SessionState:
    block = wiring.clipboard.fetch()
    return SessionState(
        last_rectangle=wiring.session.context.snapshot(),
        clipboard=block or [],
        has_clipboard=block is not None,
    )
