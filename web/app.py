import os
from typing import Optional

import streamlit as st

from mine_web import __doc__ as mine_web_doc
from mine_web.cli import page_status
from mine_web.config import CONFIG_ENV_VAR, load_config
from mine_web.export.sif import SifExporter, export_filename
from mine_web.results.paged_results import ObjectStoreError, PagedResults
from mine_web.results.paged_table import PagedTable
from mine_web.sparql.endpoints import get_endpoints
from mine_web.sparql.results import SparqlResults, endpoint_fetcher, make_interaction_row_builder


EXAMPLE_QUERY = """PREFIX rdfs: <http://www.w3.org/2000/01/rdf-schema#>
PREFIX ex: <http://example.org/interactions#>

SELECT ?interaction ?protein ?interactor ?proteinName ?interactorName
WHERE {
    ?interaction ex:protein ?protein ;
                 ex:interactor ?interactor .
    OPTIONAL { ?protein rdfs:label ?proteinName }
    OPTIONAL { ?interactor rdfs:label ?interactorName }
}
ORDER BY ?interaction
"""

PAGE_SIZES = [10, 25, 50, 100]


def _init_session_state() -> None:
    if "table" not in st.session_state:
        st.session_state["table"] = None  # PagedTable | None


def _run_query(query: str, endpoint_url: str) -> PagedTable:
    cfg = load_config()
    results = SparqlResults(
        endpoint_fetcher(endpoint_url, query, timeout_s=cfg.http.timeout_s),
        batch_size=cfg.ui.batch_size,
        row_builder=make_interaction_row_builder(cfg.export.default_interaction_type),
    )
    return PagedResults.table(
        results,
        page_size=cfg.ui.page_size,
        clamp_previous=cfg.ui.clamp_previous_page,
    )


def _render_navigation(table: PagedTable) -> None:
    col_first, col_prev, col_next, col_last, col_size = st.columns([1, 1, 1, 1, 2])
    with col_first:
        if st.button("« First", disabled=table.is_first_page()):
            table.first_page()
            st.rerun()
    with col_prev:
        if st.button("‹ Previous", disabled=table.is_first_page()):
            table.previous_page()
            st.rerun()
    with col_next:
        if st.button("Next ›", disabled=table.is_last_page()):
            table.next_page()
            st.rerun()
    with col_last:
        if st.button("Last »", disabled=table.is_last_page()):
            table.last_page()
            st.rerun()
    with col_size:
        current = table.page_size if table.page_size in PAGE_SIZES else PAGE_SIZES[0]
        page_size = st.selectbox("Rows per page", PAGE_SIZES, index=PAGE_SIZES.index(current))
        if page_size != table.page_size:
            table.set_page_size(page_size)
            st.rerun()


def _render_column_controls(table: PagedTable) -> None:
    with st.expander("Columns"):
        for display_index, column in enumerate(table.columns()):
            col_name, col_left, col_right, col_show = st.columns([3, 1, 1, 1])
            col_name.write(column.name)
            if col_left.button("←", key=f"left-{column.index}", disabled=display_index == 0):
                table.move_column_left(display_index)
                st.rerun()
            if col_right.button(
                "→", key=f"right-{column.index}", disabled=display_index == table.column_count() - 1
            ):
                table.move_column_right(display_index)
                st.rerun()
            visible = col_show.checkbox("show", value=column.visible, key=f"show-{column.index}")
            if visible != column.visible:
                table.set_column_visible(display_index, visible)
                st.rerun()


def _render_page(table: PagedTable) -> None:
    columns = table.visible_columns()
    records = [
        {c.name: row[c.index].value for c in columns if c.index < len(row)}
        for row in table.rows()
    ]
    st.write(page_status(table))
    if records:
        st.dataframe(records)


def _render_export(table: PagedTable) -> None:
    cfg = load_config()
    exporter = SifExporter(max_rows=cfg.export.max_rows)
    if not exporter.can_export(table):
        return
    if st.button("Prepare SIF export"):
        outcome, text = exporter.export_text(table)
        if outcome.ok:
            st.download_button(
                "Download interactions (SIF)",
                data=text,
                file_name=export_filename(),
                mime="text/plain",
            )
        elif outcome.status == "nothing_to_export":
            st.info(outcome.message)
        else:
            st.error(outcome.message)


def main() -> None:
    """Streamlit entrypoint for the mine-web results page."""

    st.set_page_config(page_title="mine-web results", layout="wide")
    _init_session_state()
    cfg = load_config()

    st.title("Query results")
    st.caption(f"Config: {os.environ.get(CONFIG_ENV_VAR, 'web/configs/demo.yaml')}")

    endpoints = get_endpoints()
    with st.sidebar:
        st.header("Source")
        labels = [e.label for e in endpoints]
        chosen = st.selectbox("SPARQL endpoint", labels)
        endpoint = endpoints[labels.index(chosen)]
        st.write(f"Default page size: {cfg.ui.page_size}")

    query = st.text_area("SPARQL query", value=EXAMPLE_QUERY, height=240)
    if st.button("Run query", type="primary") and query.strip():
        with st.spinner("Running query..."):
            try:
                st.session_state["table"] = _run_query(query, endpoint.sparql_url)
            except ObjectStoreError as exc:
                st.session_state["table"] = None
                st.error(str(exc))

    table: Optional[PagedTable] = st.session_state["table"]
    if table is not None:
        try:
            _render_navigation(table)
            _render_column_controls(table)
            _render_page(table)
            _render_export(table)
        except ObjectStoreError as exc:
            st.error(f"Could not read the query results: {exc}")

    with st.expander("About this app"):
        st.write(mine_web_doc or "mine-web results components.")


if __name__ == "__main__":
    main()
