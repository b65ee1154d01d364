from __future__ import annotations

from typing import Optional, Type

from mine_web.results.paged_table import PagedTable


def first_column_for_type(table: PagedTable, cls: Type) -> Optional[int]:
    """
    Return the original index of the first column holding `cls` objects.

    Columns are checked in display order against the first row of the table.
    Returns None for an empty table or when no column matches.
    """

    first_rows = table.source.rows(0, 1)
    if not first_rows:
        return None
    row = first_rows[0]
    for column in table.columns():
        if column.index < len(row) and isinstance(row[column.index].obj, cls):
            return column.index
    return None


def can_export(table: PagedTable, cls: Type) -> bool:
    return first_column_for_type(table, cls) is not None


__all__ = ["first_column_for_type", "can_export"]
