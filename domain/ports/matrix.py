from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from domain.models import Reduction


class MatrixMachine(Protocol):
    def push_matrix(
        self, rows: Sequence[Sequence[str]], reduction: Reduction | None = None
    ) -> None: ...

    def top_text(
        self,
        *,
        brackets: bool = False,
        full_vectors: bool = True,
        precision: int | None = None,
    ) -> str | None: ...
