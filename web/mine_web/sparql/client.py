from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)

_TRAILING_WINDOW_RE = re.compile(
    r"(?:\b(?:limit|offset)\s+\d+\s*)+;?\s*$", flags=re.IGNORECASE
)
_WINDOW_CLAUSE_RE = re.compile(r"\b(limit|offset)\s+(\d+)", flags=re.IGNORECASE)


@dataclass
class SourceResult:
    rows: List[Dict[str, Any]]
    variables: List[str]
    row_count: int
    elapsed_ms: float
    endpoint_url: str
    status: str
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"


def split_solution_window(query: str) -> tuple[str, int, Optional[int]]:
    """
    Split a query's own trailing LIMIT/OFFSET from the rest of the query.

    Returns `(query_without_window, offset, limit)`; `limit` is None when the
    query has no LIMIT. Only the modifiers ending the outer query are read, so
    a LIMIT inside a subquery or a string literal is left alone.
    """

    match = _TRAILING_WINDOW_RE.search(query)
    if match is None:
        return query.rstrip().rstrip(";").rstrip(), 0, None

    offset, limit = 0, None
    for keyword, value in _WINDOW_CLAUSE_RE.findall(match.group(0)):
        if keyword.lower() == "limit":
            limit = int(value)
        else:
            offset = int(value)
    return query[: match.start()].rstrip(), offset, limit


def window_query(query: str, offset: int, limit: int) -> Optional[str]:
    """
    Restrict a SPARQL SELECT query to its rows `[offset, offset + limit)`.

    Offsets are relative to the query's own result: an OFFSET in the query is
    added to `offset`, and the window never runs past the query's own LIMIT.
    Returns None when the window lies entirely past that LIMIT.
    This is a simple, case-insensitive heuristic and does not attempt to fully
    parse SPARQL.
    """

    base, query_offset, query_limit = split_solution_window(query)
    if query_limit is not None:
        limit = min(limit, query_limit - offset)
    if limit <= 0:
        return None
    start = query_offset + offset
    clause = f"LIMIT {int(limit)}"
    if start:
        clause += f"\nOFFSET {int(start)}"
    return f"{base}\n{clause}"


def parse_sparql_json(payload: Dict[str, Any]) -> tuple[List[str], List[Dict[str, Any]]]:
    """Return `(variables, rows)` from a SPARQL 1.1 JSON results document."""

    head = payload.get("head", {})
    vars_list = head.get("vars") or []
    if not isinstance(vars_list, list):
        vars_list = []
    variables = [str(v) for v in vars_list]

    results = payload.get("results", {})
    bindings = results.get("bindings") or []
    if not isinstance(bindings, list):
        bindings = []

    rows: List[Dict[str, Any]] = []
    for binding in bindings:
        if not isinstance(binding, dict):
            continue
        row: Dict[str, Any] = {}
        for var, value_obj in binding.items():
            if isinstance(value_obj, dict) and "value" in value_obj:
                row[var] = value_obj["value"]
            else:
                row[var] = value_obj
        rows.append(row)
    return variables, rows


def _error_result(endpoint_url: str, start: float, error: str) -> SourceResult:
    return SourceResult(
        rows=[],
        variables=[],
        row_count=0,
        elapsed_ms=(time.perf_counter() - start) * 1000.0,
        endpoint_url=endpoint_url,
        status="error",
        error=error,
    )


def execute_sparql(
    endpoint_url: str,
    query: str,
    timeout_s: float = 30.0,
    method_preference: str = "POST",
) -> SourceResult:
    """
    Execute a SPARQL query against the given endpoint and return a SourceResult.

    The client prefers HTTP POST with `application/sparql-query`, but will
    fall back to GET with the `query` parameter if POST fails. Failures are
    reported through `status`/`error` rather than raised.
    """

    headers = {
        "Accept": "application/sparql-results+json",
    }
    start = time.perf_counter()
    resp: Optional[requests.Response] = None

    if method_preference.upper() == "POST":
        try:
            resp = requests.post(
                endpoint_url,
                data=query.encode("utf-8"),
                headers={"Content-Type": "application/sparql-query", **headers},
                timeout=timeout_s,
            )
        except requests.RequestException as exc:
            # Fall through to GET-based attempt below.
            logger.debug("POST to %s failed: %s", endpoint_url, exc)

    if resp is None or not resp.ok:
        try:
            resp = requests.get(
                endpoint_url,
                params={"query": query},
                headers=headers,
                timeout=timeout_s,
            )
        except requests.RequestException as exc:
            return _error_result(endpoint_url, start, str(exc))

    if not resp.ok:
        return _error_result(endpoint_url, start, f"HTTP {resp.status_code}: {resp.text[:500]}")

    try:
        payload = resp.json()
    except ValueError as exc:
        return _error_result(endpoint_url, start, f"Failed to decode JSON from SPARQL endpoint: {exc}")
    if not isinstance(payload, dict):
        return _error_result(endpoint_url, start, "Unexpected JSON structure from SPARQL endpoint.")

    variables, rows = parse_sparql_json(payload)
    elapsed_ms = (time.perf_counter() - start) * 1000.0
    logger.debug("%s returned %d rows in %.1f ms", endpoint_url, len(rows), elapsed_ms)
    return SourceResult(
        rows=rows,
        variables=variables,
        row_count=len(rows),
        elapsed_ms=elapsed_ms,
        endpoint_url=endpoint_url,
        status="ok",
    )


__all__ = [
    "SourceResult",
    "split_solution_window",
    "window_query",
    "parse_sparql_json",
    "execute_sparql",
]
