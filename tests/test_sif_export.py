import io

from mine_web.export.helper import can_export, first_column_for_type
from mine_web.export.sif import NOTHING_TO_EXPORT, SifExporter, export_filename, sif_lines
from mine_web.models import ProteinInteraction, ResultElement


PAIRS = [
    ("i1", "zen", "eve"),
    ("i2", "eve", "ftz"),
    ("i1", "zen", "eve"),
    ("i3", "zen", "eve"),
]


class Opener:
    def __init__(self):
        self.buffer = io.StringIO()
        self.opened = 0

    def __call__(self):
        self.opened += 1
        return self.buffer


def test_exports_each_interaction_once(make_interaction_table):
    table, _ = make_interaction_table(PAIRS, page_size=2)
    opener = Opener()
    outcome = SifExporter().export(table, opener)

    assert outcome.ok
    assert outcome.exported == 3
    assert opener.opened == 1
    assert opener.buffer.getvalue() == "zen\tpp\teve\neve\tpp\tftz\nzen\tpp\teve\n"


def test_nothing_to_export_does_not_open_output(make_interaction_table):
    plain_rows = [[ResultElement("zen"), ResultElement("no interaction")] for _ in range(4)]
    table, _ = make_interaction_table([], extra_rows=plain_rows)
    opener = Opener()
    outcome = SifExporter().export(table, opener)

    assert outcome.status == "nothing_to_export"
    assert outcome.message == NOTHING_TO_EXPORT
    assert outcome.exported == 0
    assert opener.opened == 0


def test_export_to_path_creates_no_file_when_nothing_found(make_interaction_table, tmp_path):
    table, _ = make_interaction_table([])
    path = tmp_path / "out" / "network.sif"
    outcome = SifExporter().export_to_path(table, path)
    assert outcome.status == "nothing_to_export"
    assert not path.exists()


def test_export_to_path_writes_file(make_interaction_table, tmp_path):
    table, _ = make_interaction_table(PAIRS)
    path = tmp_path / "out" / "network.sif"
    outcome = SifExporter().export_to_path(table, path)
    assert outcome.exported == 3
    assert path.read_text(encoding="utf-8").splitlines()[1] == "eve\tpp\tftz"


def test_engine_failure_reported_as_error(make_interaction_table):
    table, results = make_interaction_table(PAIRS)
    results.fail_fetch = True
    opener = Opener()
    outcome = SifExporter().export(table, opener)
    assert outcome.status == "error"
    assert opener.opened == 0


def test_max_rows_limits_export(make_interaction_table):
    table, _ = make_interaction_table(PAIRS, page_size=1)
    outcome, text = SifExporter(max_rows=2).export_text(table)
    assert outcome.exported == 2
    assert text == "zen\tpp\teve\neve\tpp\tftz\n"


def test_export_leaves_page_window_alone(make_interaction_table):
    table, _ = make_interaction_table(PAIRS, page_size=2)
    table.next_page()
    SifExporter().export_text(table)
    assert table.start_row == 2


def test_first_column_for_type_follows_display_order(make_interaction_table):
    table, _ = make_interaction_table(PAIRS)
    assert first_column_for_type(table, ProteinInteraction) == 1
    table.move_column_left(1)
    assert [c.name for c in table.columns()] == ["interaction", "gene"]
    assert first_column_for_type(table, ProteinInteraction) == 1
    assert can_export(table, ProteinInteraction)
    assert SifExporter().can_export(table)


def test_first_column_for_type_on_empty_table(make_interaction_table):
    table, _ = make_interaction_table([])
    assert first_column_for_type(table, ProteinInteraction) is None
    assert not can_export(table, ProteinInteraction)


def test_sif_lines_dedupes_edges():
    interactions = [
        ProteinInteraction("i1", "zen", "eve"),
        ProteinInteraction("i2", "zen", "eve"),
        ProteinInteraction("i3", "zen", "eve", interaction_type="genetic"),
    ]
    assert sif_lines(interactions) == "zen\tpp\teve\nzen\tgenetic\teve\n"


def test_export_filename():
    name = export_filename()
    assert name.startswith("interaction")
    assert name.endswith(".sif")
    assert name != export_filename()
