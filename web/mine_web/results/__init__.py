"""
Paged views over query results.

A `PagedTable` keeps the column layout and the current page window; the rows
and the (possibly estimated) row count come from a `PagedTableSource`, which
for engine-backed results is a `PagedResults` adapter.
"""

from mine_web.results.columns import Column, ColumnModel
from mine_web.results.paged_results import (
    ObjectStoreError,
    PagedResults,
    Results,
    ResultsInfo,
    ResultsStatus,
    RowRangeError,
)
from mine_web.results.paged_table import Estimate, Exact, PagedTable, PagedTableSource, RowCount

__all__ = [
    "Column",
    "ColumnModel",
    "Estimate",
    "Exact",
    "RowCount",
    "PagedTable",
    "PagedTableSource",
    "PagedResults",
    "Results",
    "ResultsInfo",
    "ResultsStatus",
    "ObjectStoreError",
    "RowRangeError",
]
