from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence, runtime_checkable

from mine_web.models import Row
from mine_web.results.paged_table import DEFAULT_PAGE_SIZE, Estimate, Exact, PagedTable, RowCount

logger = logging.getLogger(__name__)


class ObjectStoreError(RuntimeError):
    """Raised when the query engine cannot deliver rows or size information."""


class RowRangeError(IndexError):
    """Raised by a result sequence when a requested range lies past its end."""


class ResultsStatus(enum.Enum):
    ESTIMATE = "estimate"
    SIZE = "size"


@dataclass(frozen=True)
class ResultsInfo:
    """Size information reported by the engine for one result sequence."""

    rows: int
    status: ResultsStatus

    def row_count(self) -> RowCount:
        if self.status is ResultsStatus.SIZE:
            return Exact(self.rows)
        return Estimate(self.rows)


@runtime_checkable
class Results(Protocol):
    """
    A lazily evaluated result sequence owned by the query engine.

    `sub_list` returns whatever rows exist in `[start, stop)` and raises
    `RowRangeError` when `start` is past the end of the data. `get_info`
    raises `ObjectStoreError` when the engine cannot report its size.
    """

    @property
    def columns(self) -> Sequence[str]:  # pragma: no cover - protocol
        ...

    def sub_list(self, start: int, stop: int) -> List[Row]:  # pragma: no cover - protocol
        ...

    def get_info(self) -> ResultsInfo:  # pragma: no cover - protocol
        ...


class PagedResults:
    """
    Windowed adapter exposing an engine `Results` object to a `PagedTable`.

    The adapter does not own the result sequence; its lifetime belongs to the
    engine that produced it.
    """

    def __init__(self, results: Results) -> None:
        self.results = results

    @classmethod
    def table(
        cls,
        results: Results,
        column_names: Optional[Sequence[str]] = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        clamp_previous: bool = False,
    ) -> PagedTable:
        """Build a `PagedTable` over `results`, naming columns after the query's select list by default."""

        names = list(column_names) if column_names is not None else list(results.columns)
        return PagedTable(names, cls(results), page_size=page_size, clamp_previous=clamp_previous)

    def rows(self, start: int, stop: int) -> List[Row]:
        try:
            return list(self.results.sub_list(start, stop))
        except RowRangeError:
            logger.debug("No rows in window [%d, %d)", start, stop)
            return []

    def row_count(self, start_row: int, page_size: int) -> RowCount:
        # Reading one row past the page makes the engine settle the count when
        # the page is at the end of the results.
        try:
            self.results.sub_list(start_row, start_row + page_size + 1)
        except RowRangeError:
            logger.debug("Size check read past the end of results at row %d", start_row)
        return self.results_info().row_count()

    def size(self, start_row: int = 0, page_size: int = DEFAULT_PAGE_SIZE) -> int:
        return self.row_count(start_row, page_size).rows

    def is_size_estimate(self) -> bool:
        return self.results_info().status is not ResultsStatus.SIZE

    def results_info(self) -> ResultsInfo:
        return self.results.get_info()


__all__ = [
    "ObjectStoreError",
    "RowRangeError",
    "ResultsStatus",
    "ResultsInfo",
    "Results",
    "PagedResults",
]
