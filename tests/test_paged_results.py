import pytest

from mine_web.results.paged_results import (
    ObjectStoreError,
    PagedResults,
    ResultsInfo,
    ResultsStatus,
)
from mine_web.results.paged_table import Estimate, Exact, PagedTableSource


def test_adapter_satisfies_source_protocol(make_results):
    assert isinstance(PagedResults(make_results(3)), PagedTableSource)


def test_table_named_after_result_columns(make_results):
    table = PagedResults.table(make_results(3))
    assert [c.name for c in table.columns()] == ["A", "B", "C"]
    assert table.page_size == 10


def test_table_with_explicit_column_names(make_results):
    table = PagedResults.table(make_results(3), column_names=["Gene", "Protein", "Score"], page_size=5)
    assert [c.name for c in table.columns()] == ["Gene", "Protein", "Score"]
    assert table.page_size == 5


def test_rows_returns_current_window(make_table):
    table, _ = make_table(25, page_size=10)
    table.next_page()
    rows = table.rows()
    assert [r[0].value for r in rows] == [f"A{i}" for i in range(10, 20)]


def test_rows_tolerates_short_last_page_under_estimate(make_table):
    table, _ = make_table(25, page_size=10, status=ResultsStatus.ESTIMATE, reported_rows=40)
    table.start_row = 20
    assert table.end_row() == 29
    rows = table.rows()
    assert [r[0].value for r in rows] == [f"A{i}" for i in range(20, 25)]


def test_rows_past_end_are_empty(make_table):
    table, _ = make_table(25, page_size=10, status=ResultsStatus.ESTIMATE, reported_rows=60)
    table.start_row = 40
    assert table.rows() == []


def test_size_reads_one_row_past_page(make_table):
    table, results = make_table(25, page_size=10)
    table.next_page()
    results.calls.clear()
    assert table.size() == 25
    assert results.calls == [(10, 21)]


def test_size_read_past_end_is_swallowed(make_table):
    table, results = make_table(25, page_size=10)
    table.start_row = 50
    assert table.size() == 25
    assert results.calls[-1] == (50, 61)


def test_is_size_estimate_reads_status_without_fetching(make_table):
    table, results = make_table(25, page_size=10, status=ResultsStatus.ESTIMATE)
    table.next_page()
    results.calls.clear()
    assert table.is_size_estimate()
    results.status = ResultsStatus.SIZE
    assert not table.is_size_estimate()
    assert results.calls == []


def test_size_failure_propagates(make_table):
    table, results = make_table(25)
    results.fail_info = True
    with pytest.raises(ObjectStoreError):
        table.size()
    with pytest.raises(ObjectStoreError):
        table.is_size_estimate()
    with pytest.raises(ObjectStoreError):
        table.last_page()


def test_fetch_failure_propagates(make_table):
    table, results = make_table(25)
    results.fail_fetch = True
    with pytest.raises(ObjectStoreError):
        table.rows()
    with pytest.raises(ObjectStoreError):
        table.size()


def test_adapter_direct_calls(make_results):
    results = make_results(7, status=ResultsStatus.ESTIMATE)
    adapter = PagedResults(results)
    assert adapter.is_size_estimate()
    assert adapter.size(0, 5) == 7
    assert adapter.row_count(0, 5) == Estimate(7)
    assert adapter.results_info() == ResultsInfo(rows=7, status=ResultsStatus.ESTIMATE)

    results.status = ResultsStatus.SIZE
    assert not adapter.is_size_estimate()
    assert adapter.row_count(0, 5) == Exact(7)


def test_results_info_row_count():
    assert ResultsInfo(3, ResultsStatus.SIZE).row_count() == Exact(3)
    assert ResultsInfo(3, ResultsStatus.ESTIMATE).row_count() == Estimate(3)
