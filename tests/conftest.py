from typing import List, Optional

import pytest

from mine_web import config
from mine_web.models import ProteinInteraction, ResultElement, Row
from mine_web.results.paged_results import (
    ObjectStoreError,
    PagedResults,
    ResultsInfo,
    ResultsStatus,
    RowRangeError,
)


def letter_rows(count: int) -> List[Row]:
    return [
        [ResultElement(f"A{i}"), ResultElement(f"B{i}"), ResultElement(f"C{i}")]
        for i in range(count)
    ]


class FakeResults:
    """In-memory stand-in for an engine result sequence."""

    def __init__(
        self,
        rows: List[Row],
        columns=("A", "B", "C"),
        status: ResultsStatus = ResultsStatus.SIZE,
        reported_rows: Optional[int] = None,
    ):
        self._rows = rows
        self._columns = tuple(columns)
        self.status = status
        self.reported_rows = reported_rows
        self.calls = []
        self.fail_info = False
        self.fail_fetch = False

    @property
    def columns(self):
        return self._columns

    def sub_list(self, start, stop):
        self.calls.append((start, stop))
        if self.fail_fetch:
            raise ObjectStoreError("connection lost")
        if start < 0 or stop < start:
            raise RowRangeError(f"bad range {start}:{stop}")
        if start > 0 and start >= len(self._rows):
            raise RowRangeError(f"{start} past end")
        return self._rows[start:stop]

    def get_info(self):
        if self.fail_info:
            raise ObjectStoreError("count unavailable")
        rows = self.reported_rows if self.reported_rows is not None else len(self._rows)
        return ResultsInfo(rows=rows, status=self.status)


@pytest.fixture
def make_results():
    def _make(count=25, **kwargs):
        return FakeResults(letter_rows(count), **kwargs)

    return _make


@pytest.fixture
def make_table(make_results):
    def _make(count=25, page_size=10, clamp_previous=False, **kwargs):
        results = make_results(count, **kwargs)
        table = PagedResults.table(results, page_size=page_size, clamp_previous=clamp_previous)
        return table, results

    return _make


def interaction_rows(pairs) -> List[Row]:
    """Rows of (gene, interaction) built from (interaction_id, protein, interactor) triples."""

    rows = []
    for interaction_id, protein, interactor in pairs:
        interaction = ProteinInteraction(id=interaction_id, protein=protein, interactor=interactor)
        rows.append([ResultElement(protein), ResultElement(interaction_id, obj=interaction)])
    return rows


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    """Write a config file, point MINE_WEB_CONFIG_PATH at it and clear the config cache."""

    def _write(text=None):
        path = tmp_path / "mine.yaml"
        path.write_text(
            text
            if text is not None
            else (
                "sources:\n"
                "  endpoints:\n"
                "    - id: local\n"
                "      label: Local\n"
                "      sparql_url: http://localhost:3030/ds/sparql\n"
                "ui:\n"
                "  page_size: 2\n"
                "  batch_size: 2\n"
                "export:\n"
                "  max_rows: 100\n"
            ),
            encoding="utf-8",
        )
        monkeypatch.setenv(config.CONFIG_ENV_VAR, str(path))
        monkeypatch.setattr(config, "_CACHED_CONFIG", None)
        return path

    return _write


@pytest.fixture
def make_interaction_table():
    def _make(pairs, extra_rows=(), page_size=10, status=ResultsStatus.SIZE):
        rows = interaction_rows(pairs) + list(extra_rows)
        results = FakeResults(rows, columns=("gene", "interaction"), status=status)
        return PagedResults.table(results, page_size=page_size), results

    return _make
