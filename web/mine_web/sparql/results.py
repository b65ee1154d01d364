from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from rdflib import Graph

from mine_web.models import ProteinInteraction, ResultElement, Row
from mine_web.results.paged_results import ObjectStoreError, ResultsInfo, ResultsStatus, RowRangeError
from mine_web.sparql.client import execute_sparql, window_query

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 100

Binding = Dict[str, Any]
BatchFetcher = Callable[[int, int], Tuple[List[str], List[Binding]]]
RowBuilder = Callable[[Sequence[str], Binding], Row]


def element_row_builder(variables: Sequence[str], binding: Binding) -> Row:
    """One `ResultElement` per selected variable, in select order."""

    return [ResultElement(value=binding.get(var)) for var in variables]


def _local_name(uri: str) -> str:
    for sep in ("#", "/"):
        if sep in uri:
            uri = uri.rsplit(sep, 1)[1] or uri
    return uri


def make_interaction_row_builder(default_type: str = "pp") -> RowBuilder:
    """
    Build rows that carry a `ProteinInteraction` in the `interaction` column.

    The query is expected to select `?interaction ?protein ?interactor` and
    may add `?proteinName`, `?interactorName` and `?interactionType`.
    Rows without both proteins bound are plain element rows.
    """

    def build(variables: Sequence[str], binding: Binding) -> Row:
        row = element_row_builder(variables, binding)
        if "interaction" not in variables:
            return row
        protein = binding.get("protein")
        interactor = binding.get("interactor")
        if not protein or not interactor:
            return row

        idx = list(variables).index("interaction")
        interaction_id = binding.get("interaction") or f"{protein}|{interactor}"
        row[idx].obj = ProteinInteraction(
            id=str(interaction_id),
            protein=str(binding.get("proteinName") or _local_name(str(protein))),
            interactor=str(binding.get("interactorName") or _local_name(str(interactor))),
            interaction_type=str(binding.get("interactionType") or default_type),
        )
        return row

    return build


class SparqlResults:
    """
    A lazily fetched SPARQL result sequence.

    Rows are pulled from `fetch_batch(offset, limit)` on demand and kept. The
    size is an estimate until a short batch shows where the results end.
    Paging through batches is only stable for queries with an ORDER BY.
    """

    def __init__(
        self,
        fetch_batch: BatchFetcher,
        variables: Optional[Sequence[str]] = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
        row_builder: RowBuilder = element_row_builder,
    ) -> None:
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}.")
        self._fetch_batch = fetch_batch
        self._variables: Optional[List[str]] = list(variables) if variables is not None else None
        self.batch_size = batch_size
        self._row_builder = row_builder
        self._rows: List[Row] = []
        self._exhausted = False

    @property
    def columns(self) -> Tuple[str, ...]:
        if self._variables is None:
            self._fetch_more()
        return tuple(self._variables or ())

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    def _fetch_more(self) -> None:
        if self._exhausted:
            return
        offset = len(self._rows)
        variables, bindings = self._fetch_batch(offset, self.batch_size)
        if self._variables is None:
            self._variables = list(variables)
        self._rows.extend(self._row_builder(self._variables, b) for b in bindings)
        if len(bindings) < self.batch_size:
            self._exhausted = True
        logger.debug(
            "Fetched %d rows at offset %d (exhausted=%s)", len(bindings), offset, self._exhausted
        )

    def _fill(self, stop: int) -> None:
        while len(self._rows) < stop and not self._exhausted:
            self._fetch_more()

    def sub_list(self, start: int, stop: int) -> List[Row]:
        if start < 0 or stop < start:
            raise RowRangeError(f"Invalid row range [{start}, {stop}).")
        self._fill(max(stop, start + 1))
        if start > 0 and start >= len(self._rows):
            raise RowRangeError(f"Row {start} is past the end of {len(self._rows)} results.")
        return self._rows[start:stop]

    def get_info(self) -> ResultsInfo:
        if self._exhausted:
            return ResultsInfo(rows=len(self._rows), status=ResultsStatus.SIZE)
        return ResultsInfo(rows=len(self._rows) + self.batch_size, status=ResultsStatus.ESTIMATE)


def endpoint_fetcher(endpoint_url: str, query: str, timeout_s: float = 30.0) -> BatchFetcher:
    """Fetch batches of `query` from a remote SPARQL endpoint."""

    def fetch(offset: int, limit: int) -> Tuple[List[str], List[Binding]]:
        windowed = window_query(query, offset, limit)
        if windowed is None:
            return [], []
        result = execute_sparql(endpoint_url, windowed, timeout_s=timeout_s)
        if not result.ok:
            raise ObjectStoreError(f"Query against {endpoint_url} failed: {result.error}")
        return result.variables, result.rows

    return fetch


def graph_fetcher(graph: Graph, query: str) -> BatchFetcher:
    """Fetch batches of `query` from an in-memory rdflib graph."""

    def fetch(offset: int, limit: int) -> Tuple[List[str], List[Binding]]:
        windowed = window_query(query, offset, limit)
        if windowed is None:
            return [], []
        try:
            qres = graph.query(windowed)
        except Exception as exc:
            raise ObjectStoreError(f"Local graph query failed: {exc}") from exc
        variables = [str(v) for v in (qres.vars or [])]
        rows: List[Binding] = []
        for result_row in qres:
            rows.append(
                {var: str(value) for var, value in zip(variables, result_row) if value is not None}
            )
        return variables, rows

    return fetch


__all__ = [
    "DEFAULT_BATCH_SIZE",
    "BatchFetcher",
    "RowBuilder",
    "element_row_builder",
    "make_interaction_row_builder",
    "SparqlResults",
    "endpoint_fetcher",
    "graph_fetcher",
]
