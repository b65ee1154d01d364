from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Protocol, Tuple, Union, runtime_checkable

from mine_web.models import Row
from mine_web.results.columns import Column, ColumnModel

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10


@dataclass(frozen=True)
class Exact:
    """A row count the engine has finished computing."""

    rows: int

    @property
    def is_estimate(self) -> bool:
        return False


@dataclass(frozen=True)
class Estimate:
    """A row count the engine is still refining; may be too low or too high."""

    rows: int

    @property
    def is_estimate(self) -> bool:
        return True


RowCount = Union[Exact, Estimate]


@runtime_checkable
class PagedTableSource(Protocol):
    """What a `PagedTable` needs from whatever holds its rows."""

    def rows(self, start: int, stop: int) -> List[Row]:  # pragma: no cover - protocol
        """Rows in `[start, stop)`; fewer when the data runs out."""
        ...

    def row_count(self, start_row: int, page_size: int) -> RowCount:  # pragma: no cover - protocol
        """The current row count, refined around the given page window."""
        ...

    def size(self, start_row: int, page_size: int) -> int:  # pragma: no cover - protocol
        ...

    def is_size_estimate(self) -> bool:  # pragma: no cover - protocol
        """Whether the engine is still counting; reads the status only."""
        ...


class PagedTable:
    """
    A pageable, configurable results table.

    The table owns the column layout and the page window `(start_row,
    page_size)`. Row data and the row count come from `source`; the count may
    be an estimate while the engine is still counting, so it is re-read every
    time it is needed rather than cached.
    """

    def __init__(
        self,
        column_names: Iterable[str],
        source: PagedTableSource,
        page_size: int = DEFAULT_PAGE_SIZE,
        clamp_previous: bool = False,
    ) -> None:
        self.column_model = ColumnModel(column_names)
        self.source = source
        self.start_row = 0
        self.page_size = page_size if page_size > 0 else DEFAULT_PAGE_SIZE
        self.clamp_previous = clamp_previous

    # Columns

    def columns(self) -> Tuple[Column, ...]:
        return self.column_model.columns()

    def visible_columns(self) -> List[Column]:
        return self.column_model.visible_columns()

    def column_count(self) -> int:
        return self.column_model.column_count()

    def visible_column_count(self) -> int:
        return self.column_model.visible_column_count()

    def move_column_left(self, display_index: int) -> None:
        self.column_model.move_left(display_index)

    def move_column_right(self, display_index: int) -> None:
        self.column_model.move_right(display_index)

    def set_column_visible(self, display_index: int, visible: bool) -> None:
        self.column_model.set_visible(display_index, visible)

    # Size

    def row_count(self) -> RowCount:
        return self.source.row_count(self.start_row, self.page_size)

    def size(self) -> int:
        """The (possibly estimated) number of rows."""

        return self.source.size(self.start_row, self.page_size)

    def is_size_estimate(self) -> bool:
        return self.source.is_size_estimate()

    # Navigation

    def first_page(self) -> None:
        self.start_row = 0

    def is_first_page(self) -> bool:
        return self.start_row == 0

    def previous_page(self) -> None:
        """
        Step back one page.

        The offset is not clamped unless the table was built with
        `clamp_previous=True`; callers are expected to check
        `is_first_page()` first.
        """

        self.start_row -= self.page_size
        if self.clamp_previous and self.start_row < 0:
            self.start_row = 0

    def next_page(self) -> None:
        self.start_row += self.page_size

    def last_page(self) -> None:
        count = self.row_count()
        last_index = max(count.rows - 1, 0)
        self.start_row = (last_index // self.page_size) * self.page_size

    def is_last_page(self) -> bool:
        count = self.row_count()
        if count.is_estimate:
            return False
        return self._end_row(count) == count.rows - 1

    def set_page_size(self, page_size: int) -> None:
        if page_size <= 0:
            logger.debug("Ignoring non-positive page size %r", page_size)
            return
        self.page_size = page_size
        self.start_row = (self.start_row // page_size) * page_size

    def end_row(self) -> int:
        """Index of the last row of the current page."""

        return self._end_row(self.row_count())

    def _end_row(self, count: RowCount) -> int:
        end_row = self.start_row + self.page_size - 1
        if isinstance(count, Exact) and end_row + 1 > count.rows:
            return count.rows - 1
        return end_row

    def page_number(self) -> int:
        """1-based number of the current page."""

        return self.start_row // self.page_size + 1

    def page_count(self) -> Optional[int]:
        """Number of pages, or None while the size is an estimate."""

        count = self.row_count()
        if count.is_estimate:
            return None
        return max(1, (count.rows + self.page_size - 1) // self.page_size)

    # Rows

    def rows(self) -> List[Row]:
        """Rows of the current page."""

        return self.source.rows(self.start_row, self.end_row() + 1)

    def iter_all_rows(self, max_rows: Optional[int] = None) -> Iterator[Row]:
        """
        Yield every row of the table, independent of the page window.

        Rows are fetched in page-size batches; iteration stops at the first
        short batch or after `max_rows` rows.
        """

        start = 0
        while max_rows is None or start < max_rows:
            stop = start + self.page_size
            if max_rows is not None:
                stop = min(stop, max_rows)
            batch = self.source.rows(start, stop)
            yield from batch
            if len(batch) < stop - start:
                return
            start = stop


__all__ = [
    "DEFAULT_PAGE_SIZE",
    "Exact",
    "Estimate",
    "RowCount",
    "PagedTableSource",
    "PagedTable",
]
