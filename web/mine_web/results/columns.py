from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Tuple


@dataclass
class Column:
    """
    A result column as shown in a table.

    `index` is the column's position in the query's select list and is the
    offset used to read the column's element from a row; it never changes.
    """

    name: str
    index: int
    visible: bool = True


class ColumnModel:
    """Display order and visibility for the columns of one table."""

    def __init__(self, column_names: Iterable[str]) -> None:
        self._columns: List[Column] = []
        for i, name in enumerate(column_names):
            self._add_column(str(name), i, True)

    def _add_column(self, name: str, index: int, visible: bool) -> None:
        self._columns.append(Column(name=name, index=index, visible=visible))

    def columns(self) -> Tuple[Column, ...]:
        """Columns in display order."""

        return tuple(self._columns)

    def visible_columns(self) -> List[Column]:
        return [c for c in self._columns if c.visible]

    def column_count(self) -> int:
        return len(self._columns)

    def visible_column_count(self) -> int:
        return sum(1 for c in self._columns if c.visible)

    def _in_range(self, display_index: int) -> bool:
        return 0 <= display_index < len(self._columns)

    def _swap(self, a: int, b: int) -> None:
        self._columns[a], self._columns[b] = self._columns[b], self._columns[a]

    def move_left(self, display_index: int) -> None:
        """Swap the column at `display_index` with its left neighbour."""

        if display_index > 0 and self._in_range(display_index):
            self._swap(display_index - 1, display_index)

    def move_right(self, display_index: int) -> None:
        """Swap the column at `display_index` with its right neighbour."""

        if self._in_range(display_index) and display_index < len(self._columns) - 1:
            self._swap(display_index, display_index + 1)

    def set_visible(self, display_index: int, visible: bool) -> None:
        if self._in_range(display_index):
            self._columns[display_index].visible = bool(visible)


__all__ = ["Column", "ColumnModel"]
