from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, List, Literal, Optional

from pydantic import BaseModel, Field, model_validator

if TYPE_CHECKING:
    from domain.ports.text_surface import Marker

LineBlock = List[str]
DiagnosticLevel = Literal["info", "warning", "error"]


@dataclass(frozen=True)
class Endpoint:
    offset: int
    crutch: Optional[int] = None

    def moved(self, offset: int, crutch: Optional[int] = None) -> Endpoint:
        return replace(self, offset=offset, crutch=crutch)


@dataclass(frozen=True)
class Rectangle:
    anchor: Endpoint
    active: Endpoint

    @classmethod
    def at(cls, offset: int) -> Rectangle:
        return cls(anchor=Endpoint(offset), active=Endpoint(offset))

    @classmethod
    def between(cls, anchor: int, active: int) -> Rectangle:
        return cls(anchor=Endpoint(anchor), active=Endpoint(active))

    def swapped(self) -> Rectangle:
        return Rectangle(anchor=self.active, active=self.anchor)


@dataclass(frozen=True)
class RectangleBounds:
    top: int
    bottom: int
    left: int
    right: int

    @property
    def height(self) -> int:
        return self.bottom - self.top + 1

    @property
    def width(self) -> int:
        return self.right - self.left

    def rows(self) -> range:
        return range(self.top, self.bottom + 1)


@dataclass(frozen=True)
class PaddingProfile:
    min_left: int
    min_right: int


@dataclass(frozen=True)
class MatrixText:
    lines: LineBlock
    width: int


@dataclass(frozen=True)
class Diagnostic:
    level: DiagnosticLevel
    message: str


class Reduction(str, Enum):
    ROWS = "rows"
    COLUMNS = "columns"


@dataclass
class LastRectangle:
    """Stashed rectangle; markers are owned by the text surface and track edits."""

    anchor: Marker
    active: Marker
    anchor_crutch: Optional[int] = None
    active_crutch: Optional[int] = None

    def to_rectangle(self) -> Rectangle:
        return Rectangle(
            anchor=Endpoint(self.anchor.offset, self.anchor_crutch),
            active=Endpoint(self.active.offset, self.active_crutch),
        )


class RectangleSnapshot(BaseModel):
    anchor: int = Field(..., ge=0)
    active: int = Field(..., ge=0)
    anchor_crutch: Optional[int] = Field(default=None, ge=0)
    active_crutch: Optional[int] = Field(default=None, ge=0)

    @classmethod
    def from_last(cls, last: LastRectangle) -> RectangleSnapshot:
        return cls(
            anchor=last.anchor.offset,
            active=last.active.offset,
            anchor_crutch=last.anchor_crutch,
            active_crutch=last.active_crutch,
        )


class SessionState(BaseModel):
    last_rectangle: Optional[RectangleSnapshot] = None
    clipboard: List[str] = Field(default_factory=list)
    has_clipboard: bool = False

    @model_validator(mode="after")
    def ensure_clipboard_flag(self) -> SessionState:
        if self.clipboard and not self.has_clipboard:
            self.has_clipboard = True
        return self


@dataclass
class YankResult:
    rectangle: Rectangle
    diagnostics: List[Diagnostic] = field(default_factory=list)
