from __future__ import annotations


class RectangleError(Exception):
    """Base class for failures reported by a rectangle operation."""


class PreconditionError(RectangleError):
    pass


class NotPossibleHere(PreconditionError):
    def __init__(self, detail: str = "") -> None:
        msg = "Not possible here" if not detail else f"Not possible here: {detail}"
        super().__init__(msg)


class InvalidArgument(PreconditionError):
    pass


class MatrixFormatError(PreconditionError):
    pass


class ReentrantOperation(PreconditionError):
    pass


class UnknownCommand(PreconditionError):
    pass


class InformationalError(RectangleError):
    """Outcome that is reported to the user as a message, not as a failure."""


class NoStoredRectangle(InformationalError):
    def __init__(self) -> None:
        super().__init__("No stored rectangle")


class NothingToPaste(InformationalError):
    def __init__(self) -> None:
        super().__init__("No rectangle to paste")
