from __future__ import annotations

from typing import Any, Protocol


class ReportCallback(Protocol):
    def __call__(self, msg: str, *, node: Any | None = None) -> None: ...
