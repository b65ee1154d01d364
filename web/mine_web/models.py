from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Literal, Optional


@dataclass
class ResultElement:
    """A single cell of a result row."""

    value: Any
    obj: Optional[Any] = None


Row = List[ResultElement]


@dataclass(frozen=True)
class ProteinInteraction:
    """An interaction between two proteins, identified by its graph URI."""

    id: str
    protein: str
    interactor: str
    interaction_type: str = "pp"


@dataclass
class ExportOutcome:
    """
    Result of exporting a results table.

    - status: "ok" when something was written, "nothing_to_export" when the
      table held no exportable objects, "error" when the engine failed.
    - exported: number of distinct objects written.
    - message: user-visible text for the results page.
    """

    status: Literal["ok", "nothing_to_export", "error"]
    exported: int = 0
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status == "ok"


__all__ = [
    "ResultElement",
    "Row",
    "ProteinInteraction",
    "ExportOutcome",
]
