from __future__ import annotations

from collections.abc import Iterable

from domain.models import PaddingProfile


def analyze_padding(lines: Iterable[str]) -> PaddingProfile:
    """Widest left/right space margin shared by every non-blank line.

    Blank lines (empty or whitespace only) do not constrain the margin; a block
    with no content at all yields ``(0, 0)``.
    """
    lefts: list[int] = []
    rights: list[int] = []
    for line in lines:
        if not line.strip():
            continue
        lefts.append(len(line) - len(line.lstrip(" ")))
        rights.append(len(line) - len(line.rstrip(" ")))
    if not lefts:
        return PaddingProfile(min_left=0, min_right=0)
    return PaddingProfile(min_left=min(lefts), min_right=min(rights))


def guard_window(profile: PaddingProfile) -> tuple[int, int]:
    # Keep one separating space on each side, never more than the source carries.
    low = max(0, profile.min_left - 1)
    high = min(0, -(profile.min_right - 1))
    return low, high


def apply_window(line: str, low: int = 0, high: int = 0) -> str:
    end = len(line) + high if high < 0 else len(line)
    return line[low:end]
