from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import click
from rdflib import Graph
from rdflib.util import guess_format

from mine_web.config import AppConfig, ConfigError, load_config
from mine_web.export.sif import SifExporter, export_filename
from mine_web.results.paged_results import ObjectStoreError, PagedResults
from mine_web.results.paged_table import PagedTable
from mine_web.sparql.endpoints import get_endpoint
from mine_web.sparql.results import (
    RowBuilder,
    SparqlResults,
    element_row_builder,
    endpoint_fetcher,
    graph_fetcher,
    make_interaction_row_builder,
)

logger = logging.getLogger(__name__)


def _load_settings() -> AppConfig:
    try:
        return load_config()
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc


def load_graph(path: Path) -> Graph:
    graph = Graph()
    graph.parse(str(path), format=guess_format(str(path)) or "turtle")
    logger.debug("Loaded %d triples from %s", len(graph), path)
    return graph


def open_results(
    cfg: AppConfig,
    query: str,
    endpoint_id: Optional[str],
    graph_path: Optional[Path],
    row_builder: RowBuilder = element_row_builder,
) -> SparqlResults:
    """Create a lazy result sequence for `query` against a local graph or an endpoint."""

    if graph_path is not None:
        fetch = graph_fetcher(load_graph(graph_path), query)
    else:
        try:
            endpoint = get_endpoint(endpoint_id)
        except KeyError as exc:
            raise click.BadParameter(str(exc), param_hint="--endpoint") from exc
        fetch = endpoint_fetcher(endpoint.sparql_url, query, timeout_s=cfg.http.timeout_s)
    return SparqlResults(fetch, batch_size=cfg.ui.batch_size, row_builder=row_builder)


def page_status(table: PagedTable) -> str:
    """One-line summary of where the current page sits in the results."""

    count = table.row_count()
    if count.rows == 0 and not count.is_estimate:
        return "No results."
    qualifier = "about " if count.is_estimate else ""
    end_row = table.end_row()
    if table.start_row < 0 or end_row < table.start_row:
        return (
            f"No rows on this page (page {table.page_number()}); "
            f"the results have {qualifier}{count.rows} rows."
        )
    return (
        f"Rows {table.start_row + 1}-{end_row + 1} of {qualifier}{count.rows} "
        f"(page {table.page_number()})"
    )


def format_page(table: PagedTable) -> str:
    """Render the current page as tab-separated text with a status footer."""

    columns = table.visible_columns()
    lines = ["\t".join(c.name for c in columns)]
    for row in table.rows():
        cells = []
        for column in columns:
            value = row[column.index].value if column.index < len(row) else None
            cells.append("" if value is None else str(value))
        lines.append("\t".join(cells))

    lines.append(page_status(table))
    return "\n".join(lines)


@click.group()
@click.option("--verbose", is_flag=True, help="Enable verbose logging.")
def cli(verbose: bool) -> None:
    """Browse and export paged SPARQL query results."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO)


_query_file = click.option(
    "--query-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help="File containing a SPARQL SELECT query.",
)
_endpoint = click.option(
    "--endpoint",
    "endpoint_id",
    default=None,
    help="Configured endpoint id (defaults to the first configured endpoint).",
)
_graph = click.option(
    "--graph",
    "graph_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Query a local RDF file instead of a SPARQL endpoint.",
)


@cli.command("page")
@_query_file
@_endpoint
@_graph
@click.option(
    "--page",
    "page_number",
    type=click.IntRange(1),
    default=1,
    show_default=True,
    help="1-based page to show.",
)
@click.option(
    "--page-size",
    type=click.IntRange(1, 1000),
    default=None,
    help="Rows per page (defaults to ui.page_size from the config).",
)
@click.option("--last", is_flag=True, help="Show the last page instead of --page.")
def page_command(
    query_file: Path,
    endpoint_id: Optional[str],
    graph_path: Optional[Path],
    page_number: int,
    page_size: Optional[int],
    last: bool,
) -> None:
    """Print one page of query results."""
    cfg = _load_settings()
    query = query_file.read_text(encoding="utf-8")
    results = open_results(cfg, query, endpoint_id, graph_path)

    try:
        table = PagedResults.table(
            results,
            page_size=page_size or cfg.ui.page_size,
            clamp_previous=cfg.ui.clamp_previous_page,
        )
        if last:
            table.last_page()
        else:
            for _ in range(page_number - 1):
                table.next_page()
        click.echo(format_page(table))
    except ObjectStoreError as exc:
        raise click.ClickException(str(exc)) from exc


@cli.command("export-sif")
@_query_file
@_endpoint
@_graph
@click.option(
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="SIF file to write (defaults to a unique interaction*.sif name).",
)
def export_sif_command(
    query_file: Path,
    endpoint_id: Optional[str],
    graph_path: Optional[Path],
    output: Optional[Path],
) -> None:
    """Export the protein interactions in a query's results as SIF."""
    cfg = _load_settings()
    query = query_file.read_text(encoding="utf-8")
    row_builder = make_interaction_row_builder(cfg.export.default_interaction_type)
    results = open_results(cfg, query, endpoint_id, graph_path, row_builder=row_builder)

    try:
        table = PagedResults.table(results, page_size=cfg.ui.batch_size)
    except ObjectStoreError as exc:
        raise click.ClickException(str(exc)) from exc

    path = output or Path(export_filename())
    outcome = SifExporter(max_rows=cfg.export.max_rows).export_to_path(table, path)
    if outcome.status == "nothing_to_export":
        click.echo(outcome.message, err=True)
        raise SystemExit(1)
    if outcome.status == "error":
        raise click.ClickException(outcome.message)
    click.echo(f"{outcome.message} Saved to {path}.")


def main() -> None:  # pragma: no cover
    cli()


if __name__ == "__main__":  # pragma: no cover
    main()
