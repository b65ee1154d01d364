"""
Exporters that turn a results table into downloadable files.

Exporters read rows through `PagedTable.iter_all_rows` and never touch the
table's page window.
"""
