from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from adapters.filesystem.session_repository import FileSystemSessionRepository
from adapters.filesystem.text_repository import FileSystemTextRepository
from app.config import AppSettings, load_settings
from app.session_wiring import build_session, export_state
from domain.models import Diagnostic, Endpoint, Rectangle
from domain.ports.text_surface import TextSurface
from domain.services.analyze_padding import analyze_padding
from domain.services.command_table import DEFAULT_COMMANDS
from domain.services.shift_rectangle import bounds, dimensions, place_endpoint

app = typer.Typer(no_args_is_help=True)
console = Console()

_STYLES = {"info": "cyan", "warning": "yellow", "error": "red"}


def _configure_logging(settings: AppSettings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _parse_position(raw: str) -> tuple[int, int]:
    try:
        line_text, column_text = raw.split(":", 1)
        line, column = int(line_text), int(column_text)
    except ValueError as exc:
        msg = f"Expected LINE:COLUMN, got {raw!r}"
        raise typer.BadParameter(msg) from exc
    if line < 1 or column < 0:
        msg = f"Lines start at 1 and columns at 0, got {raw!r}"
        raise typer.BadParameter(msg)
    return line - 1, column


def _locate(surface: TextSurface, raw: str) -> Endpoint:
    line, column = _parse_position(raw)
    if line >= surface.line_count():
        msg = f"Line {line + 1} is past the end of the file"
        raise typer.BadParameter(msg)
    return place_endpoint(surface, Endpoint(0), line, column)


def _parse_rectangle(surface: TextSurface, raw: str) -> Rectangle:
    anchor, sep, active = raw.partition("-")
    if not sep:
        msg = f"Expected LINE:COLUMN-LINE:COLUMN, got {raw!r}"
        raise typer.BadParameter(msg)
    return Rectangle(anchor=_locate(surface, anchor), active=_locate(surface, active))


def _parse_command(raw: str) -> tuple[str, int | None]:
    name, sep, count = raw.partition(":")
    if not sep:
        return name, None
    try:
        return name, int(count)
    except ValueError as exc:
        msg = f"Command count must be an integer: {raw!r}"
        raise typer.BadParameter(msg) from exc


def _print_diagnostics(name: str, diagnostics: list[Diagnostic]) -> None:
    for diagnostic in diagnostics:
        style = _STYLES[diagnostic.level]
        console.print(f"[{style}]{name}:[/] {diagnostic.message}", highlight=False)


def _describe(surface: TextSurface, rect: Rectangle | None) -> str:
    if rect is None:
        return "no active rectangle"
    area = bounds(surface, rect)
    return (
        f"lines {area.top + 1}-{area.bottom + 1}, "
        f"columns {area.left}-{area.right} ({area.width}x{area.height})"
    )


@app.command("run")
def run(
    input_path: Path = typer.Argument(..., help="Text file to edit."),
    commands: list[str] = typer.Argument(..., help="Commands, optionally NAME:COUNT."),
    rect: str | None = typer.Option(None, "--rect", help="Rectangle as LINE:COL-LINE:COL."),
    point: str = typer.Option("1:0", "--point", help="Point as LINE:COL when no rectangle."),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write result here."),
    config: Path | None = typer.Option(None, "--config", help="YAML settings file."),
    use_state: bool = typer.Option(True, "--state/--no-state", help="Load and save session state."),
) -> None:
    settings = load_settings(config)
    _configure_logging(settings)
    if not input_path.exists():
        console.print(f"[red]File not found:[/] {input_path}")
        raise typer.Exit(code=1)

    text_repo = FileSystemTextRepository()
    state_repo = FileSystemSessionRepository()
    persist = use_state and settings.state.persist
    surface = text_repo.load(input_path)
    parsed = [_parse_command(raw) for raw in commands]
    start = _parse_rectangle(surface, rect) if rect else None
    point_offset = start.active.offset if start else _locate(surface, point).offset

    state = state_repo.load(settings.state.path) if persist else None
    wiring = build_session(settings, surface, point=point_offset, state=state)
    if start is not None:
        wiring.session.activate(start)

    for name, count in parsed:
        result = wiring.execute(name, count)
        _print_diagnostics(name, result.diagnostics)
        if not result.ok:
            console.print(f"[red]Stopped at[/] {name}; {input_path} left unchanged")
            raise typer.Exit(code=1)

    target = output or input_path
    text_repo.save(surface, target)
    if persist:
        state_repo.save(export_state(wiring), settings.state.path)
    console.print(f"[green]Wrote[/] {target}")
    console.print(f"Rectangle: {_describe(surface, wiring.session.context.active)}")
    placement = wiring.cursors.last
    if placement is not None:
        positions = ", ".join(f"{line + 1}:{column}" for line, column in placement.cursors())
        console.print(f"Cursors: {positions}")


@app.command("show")
def show(
    input_path: Path = typer.Argument(..., help="Text file to read."),
    rect: str = typer.Option(..., "--rect", help="Rectangle as LINE:COL-LINE:COL."),
) -> None:
    if not input_path.exists():
        console.print(f"[red]File not found:[/] {input_path}")
        raise typer.Exit(code=1)
    surface = FileSystemTextRepository().load(input_path)
    rectangle = _parse_rectangle(surface, rect)
    block = surface.extract_rectangle(bounds(surface, rectangle))
    for row in block:
        console.print(f"|{row}|", markup=False, highlight=False)
    width, height = dimensions(surface, rectangle)
    profile = analyze_padding(block)
    console.print(
        f"width={width} height={height} "
        f"margin_left={profile.min_left} margin_right={profile.min_right}",
        highlight=False,
    )


@app.command("commands")
def list_commands() -> None:
    table = Table("command", "stash", "resumes", "description")
    for command in DEFAULT_COMMANDS:
        table.add_row(
            command.name,
            command.stash.value,
            "yes" if command.resume else "",
            command.doc,
        )
    console.print(table)


if __name__ == "__main__":
    app()
