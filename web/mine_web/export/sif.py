"""Export protein interactions from a results table as a Cytoscape SIF network."""

from __future__ import annotations

import io
import logging
import uuid
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Set, TextIO, Tuple

from mine_web.export.helper import can_export, first_column_for_type
from mine_web.models import ExportOutcome, ProteinInteraction
from mine_web.results.paged_results import ObjectStoreError
from mine_web.results.paged_table import PagedTable

logger = logging.getLogger(__name__)

NOTHING_TO_EXPORT = "Nothing to export: these results contain no protein interactions."
OBJECT_STORE_ERROR = "There was a problem reading the query results; the export was abandoned."


def sif_lines(interactions: Iterable[ProteinInteraction]) -> str:
    """
    Render interactions as SIF lines (`protein<TAB>type<TAB>interactor`).

    Repeated edges are written once.
    """

    seen: Set[Tuple[str, str, str]] = set()
    lines: List[str] = []
    for interaction in interactions:
        edge = (interaction.protein, interaction.interaction_type, interaction.interactor)
        if edge in seen:
            continue
        seen.add(edge)
        lines.append("\t".join(edge) + "\n")
    return "".join(lines)


def export_filename() -> str:
    return f"interaction{uuid.uuid4().hex[:12]}.sif"


class SifExporter:
    """
    Writes the protein interactions found in a results table.

    Each interaction is written once, however many rows it appears in. The
    output stream is only requested once the first interaction is found, so
    an export with nothing to write never creates a file.
    """

    def __init__(self, max_rows: Optional[int] = None) -> None:
        self.max_rows = max_rows

    def can_export(self, table: PagedTable) -> bool:
        return can_export(table, ProteinInteraction)

    def export(self, table: PagedTable, open_stream: Callable[[], TextIO]) -> ExportOutcome:
        exported: Set[str] = set()
        stream: Optional[TextIO] = None
        try:
            index = first_column_for_type(table, ProteinInteraction)
            if index is not None:
                for row in table.iter_all_rows(max_rows=self.max_rows):
                    if index >= len(row):
                        continue
                    interaction = row[index].obj
                    if not isinstance(interaction, ProteinInteraction) or interaction.id in exported:
                        continue
                    if stream is None:
                        stream = open_stream()
                    stream.write(sif_lines([interaction]))
                    exported.add(interaction.id)
        except ObjectStoreError as exc:
            logger.error("SIF export failed after %d interactions: %s", len(exported), exc)
            return ExportOutcome(status="error", exported=len(exported), message=OBJECT_STORE_ERROR)
        finally:
            if stream is not None:
                stream.flush()

        if not exported:
            logger.info("SIF export found no interactions")
            return ExportOutcome(status="nothing_to_export", message=NOTHING_TO_EXPORT)
        logger.info("Exported %d interactions as SIF", len(exported))
        return ExportOutcome(
            status="ok",
            exported=len(exported),
            message=f"Exported {len(exported)} interaction(s).",
        )

    def export_to_path(self, table: PagedTable, path: Path) -> ExportOutcome:
        handle: Optional[TextIO] = None

        def open_file() -> TextIO:
            nonlocal handle
            path.parent.mkdir(parents=True, exist_ok=True)
            handle = path.open("w", encoding="utf-8")
            return handle

        try:
            return self.export(table, open_file)
        finally:
            if handle is not None:
                handle.close()

    def export_text(self, table: PagedTable) -> Tuple[ExportOutcome, str]:
        buffer = io.StringIO()
        outcome = self.export(table, lambda: buffer)
        return outcome, buffer.getvalue()


__all__ = [
    "NOTHING_TO_EXPORT",
    "OBJECT_STORE_ERROR",
    "sif_lines",
    "export_filename",
    "SifExporter",
]
