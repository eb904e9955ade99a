from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from functools import partial, wraps

from domain.errors import InformationalError, NotPossibleHere, RectangleError, UnknownCommand
from domain.models import Diagnostic, Rectangle, Reduction
from domain.ports.collaborators import MultiCursor, RectangleClipboard, Scheduler
from domain.ports.matrix import MatrixMachine
from domain.ports.text_surface import TextSurface
from domain.services import edit_rectangle, exchange_matrix
from domain.services.fill_rectangle import fill
from domain.services.rectangle_context import RectangleContext
from domain.services.shift_rectangle import (
    FAST_STEP,
    cycle_corner,
    fast_count,
    mirror_corner,
    shift_columns,
    shift_rows,
)

logger = logging.getLogger(__name__)

Handler = Callable[["RectangleSession", "int | None"], None]


class StashMode(str, Enum):
    BEFORE = "before"
    AFTER = "after"
    NONE = "none"


@dataclass(frozen=True)
class Command:
    name: str
    handler: Handler
    stash: StashMode = StashMode.NONE
    resume: bool = False
    doc: str = ""


@dataclass(frozen=True)
class SessionOptions:
    fast_step: int = FAST_STEP
    fill_column: int = 70
    calc_precision: int | None = None
    normalize_brackets: bool = True
    resume_after_command: bool = True


@dataclass
class CommandResult:
    name: str
    ok: bool
    diagnostics: list[Diagnostic] = field(default_factory=list)


def wrap_command(command: Command) -> Handler:
    """Give ``command`` the shared stash and resume behaviour declared on it."""

    @wraps(command.handler)
    def run(session: RectangleSession, count: int | None) -> None:
        context = session.context
        previous = context.last.to_rectangle() if context.last is not None else None
        try:
            if command.stash is StashMode.BEFORE:
                context.stash(context.require_active())
            command.handler(session, count)
        except RectangleError:
            context.restore_stash(previous)
            raise
        if command.stash is StashMode.AFTER and context.active is not None:
            context.stash(context.active)
        if command.resume and session.options.resume_after_command and context.active is None:
            # The host tears the selection down after this command returns.
            session.scheduler.call_soon(session.resume)

    return run


def build_command_table(commands: Iterable[Command]) -> dict[str, Handler]:
    return {command.name: wrap_command(command) for command in commands}


class RectangleSession:
    """Rectangle state and collaborators of one buffer, driven by command name."""

    def __init__(
        self,
        surface: TextSurface,
        *,
        clipboard: RectangleClipboard,
        scheduler: Scheduler,
        machine: MatrixMachine | None = None,
        cursors: MultiCursor | None = None,
        options: SessionOptions | None = None,
        point: int = 0,
        commands: Iterable[Command] | None = None,
    ) -> None:
        self.surface = surface
        self.context = RectangleContext(surface)
        self.clipboard = clipboard
        self.scheduler = scheduler
        self.machine = machine
        self.cursors = cursors
        self.options = options or SessionOptions()
        self._point = surface.create_marker(point)
        self._commands = {command.name: command for command in (commands or DEFAULT_COMMANDS)}
        self._table = build_command_table(self._commands.values())
        self._diagnostics: list[Diagnostic] = []

    @property
    def point(self) -> int:
        return self._point.offset

    @property
    def commands(self) -> Mapping[str, Command]:
        return self._commands

    def activate(self, rect: Rectangle) -> None:
        self.context.activate(rect)
        self._point.set(rect.active.offset)

    def report(self, diagnostic: Diagnostic) -> None:
        self._diagnostics.append(diagnostic)

    def resume(self) -> None:
        if self.context.active is None and self.context.last is not None:
            self.activate(self.context.restore_last())

    def execute(self, name: str, count: int | None = None) -> CommandResult:
        self._diagnostics = []
        handler = self._table.get(name)
        ok = True
        try:
            if handler is None:
                msg = f"Unknown rectangle command: {name}"
                raise UnknownCommand(msg)
            handler(self, count)
        except InformationalError as exc:
            logger.info("%s: %s", name, exc)
            self.report(Diagnostic("info", str(exc)))
        except RectangleError as exc:
            logger.error("%s failed: %s", name, exc)
            self.report(Diagnostic("error", str(exc)))
            ok = False
        if self.context.active is not None:
            self._point.set(self.context.active.active.offset)
        return CommandResult(name=name, ok=ok, diagnostics=list(self._diagnostics))


def _require(session: RectangleSession) -> Rectangle:
    return session.context.require_active()


def _shift(
    shift: Callable[[TextSurface, Rectangle, int], Rectangle],
    direction: int,
    fast: bool,
    session: RectangleSession,
    count: int | None,
) -> None:
    if fast:
        steps = fast_count(count, session.options.fast_step)
    else:
        steps = 1 if count is None else count
    session.activate(shift(session.surface, _require(session), direction * steps))


def _corner(session: RectangleSession, count: int | None) -> None:
    session.activate(cycle_corner(_require(session)))


def _mirror(session: RectangleSession, count: int | None) -> None:
    session.activate(mirror_corner(session.surface, _require(session)))


def _restart(session: RectangleSession, count: int | None) -> None:
    session.activate(session.context.restart(session.point))


def _restore(session: RectangleSession, count: int | None) -> None:
    session.activate(session.context.restore_last())


def _copy(session: RectangleSession, count: int | None) -> None:
    edit_rectangle.copy(session.surface, _require(session), session.clipboard)
    session.context.deactivate()


def _cut(session: RectangleSession, count: int | None) -> None:
    edit_rectangle.cut(session.surface, _require(session), session.clipboard)
    session.context.deactivate()


def _delete(session: RectangleSession, count: int | None) -> None:
    edit_rectangle.delete(session.surface, _require(session))
    session.context.deactivate()


def _paste(session: RectangleSession, count: int | None) -> None:
    session.activate(edit_rectangle.paste(session.surface, session.point, session.clipboard))


def _clear(session: RectangleSession, count: int | None) -> None:
    session.activate(edit_rectangle.clear(session.surface, _require(session)))


def _open(session: RectangleSession, count: int | None) -> None:
    session.activate(edit_rectangle.open_rectangle(session.surface, _require(session)))


def _number(session: RectangleSession, count: int | None) -> None:
    start = 1 if count is None else count
    session.activate(edit_rectangle.number_lines(session.surface, _require(session), start))


def _trim(side: edit_rectangle.TrimSide, session: RectangleSession, count: int | None) -> None:
    session.activate(edit_rectangle.trim(session.surface, _require(session), side))


def _fill(session: RectangleSession, count: int | None) -> None:
    width = session.options.fill_column if count is None else count
    session.activate(fill(session.surface, _require(session), width))


def _calc_grab(
    reduction: Reduction | None, session: RectangleSession, count: int | None
) -> None:
    rect = _require(session)
    if session.machine is None:
        raise NotPossibleHere("no calculator available")
    exchange_matrix.grab(session.surface, rect, session.machine, reduction)
    session.context.deactivate()


def _calc_yank(session: RectangleSession, count: int | None) -> None:
    precision = session.options.calc_precision if count is None else count
    result = exchange_matrix.yank(
        session.surface,
        session.context.active,
        session.machine,
        precision=precision,
        normalize_brackets=session.options.normalize_brackets,
    )
    for diagnostic in result.diagnostics:
        session.report(diagnostic)
    session.activate(result.rectangle)


def _cursors(session: RectangleSession, count: int | None) -> None:
    rect = _require(session)
    if session.cursors is None:
        raise NotPossibleHere("multiple cursors are not available")
    edit_rectangle.place_cursors(session.surface, rect, session.cursors)
    session.context.deactivate()


DEFAULT_COMMANDS: tuple[Command, ...] = (
    Command("left", partial(_shift, shift_columns, -1, False), doc="Shift left by COUNT columns."),
    Command("right", partial(_shift, shift_columns, 1, False), doc="Shift right by COUNT columns."),
    Command("up", partial(_shift, shift_rows, -1, False), doc="Shift up by COUNT lines."),
    Command("down", partial(_shift, shift_rows, 1, False), doc="Shift down by COUNT lines."),
    Command("left-fast", partial(_shift, shift_columns, -1, True), doc="Shift left by the fast step."),
    Command("right-fast", partial(_shift, shift_columns, 1, True), doc="Shift right by the fast step."),
    Command("up-fast", partial(_shift, shift_rows, -1, True), doc="Shift up by the fast step."),
    Command("down-fast", partial(_shift, shift_rows, 1, True), doc="Shift down by the fast step."),
    Command("corner", _corner, doc="Exchange point and mark."),
    Command("mirror", _mirror, doc="Move point to the horizontally opposite corner."),
    Command("restart", _restart, doc="Start a new empty rectangle at point."),
    Command("restore", _restore, doc="Reactivate the last stashed rectangle."),
    Command("copy", _copy, StashMode.BEFORE, resume=True, doc="Copy the rectangle."),
    Command("cut", _cut, StashMode.BEFORE, resume=True, doc="Cut the rectangle."),
    Command("delete", _delete, StashMode.BEFORE, resume=True, doc="Delete the rectangle."),
    Command("paste", _paste, StashMode.AFTER, doc="Paste the copied rectangle at point."),
    Command("clear", _clear, StashMode.AFTER, doc="Blank out the rectangle."),
    Command("open", _open, StashMode.AFTER, doc="Insert blank space into the rectangle."),
    Command("number", _number, StashMode.AFTER, doc="Number rows starting at COUNT."),
    Command("trim", partial(_trim, "both"), StashMode.AFTER, doc="Trim both margins."),
    Command("trim-left", partial(_trim, "left"), StashMode.AFTER, doc="Trim the left margin."),
    Command("trim-right", partial(_trim, "right"), StashMode.AFTER, doc="Trim the right margin."),
    Command("fill", _fill, StashMode.AFTER, doc="Reflow to COUNT columns."),
    Command(
        "calc-grab", partial(_calc_grab, None), StashMode.BEFORE, resume=True,
        doc="Push the rectangle as a matrix.",
    ),
    Command(
        "calc-grab-rows", partial(_calc_grab, Reduction.ROWS), StashMode.BEFORE, resume=True,
        doc="Push the row sums of the rectangle.",
    ),
    Command(
        "calc-grab-columns", partial(_calc_grab, Reduction.COLUMNS), StashMode.BEFORE,
        resume=True, doc="Push the column sums of the rectangle.",
    ),
    Command("calc-yank", _calc_yank, StashMode.AFTER, doc="Replace the rectangle with the top matrix."),
    Command("cursors", _cursors, StashMode.BEFORE, doc="Place one cursor per row."),
)
