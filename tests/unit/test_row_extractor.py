from __future__ import annotations

from awb_batches.models.extraction_result import ColumnRoles
from awb_batches.services.row_extractor import extract_rows, parse_quantity
from awb_batches.services.style_classifier import MajorityStyleClassifier

HEADER = ["AWB No", "Collaborated Batch", "大箱数"]


def _classifier(grid, column=0):
    cells = (grid.cell(r, column) for r in range(1, grid.n_rows))
    return MajorityStyleClassifier.fit(c.style for c in cells if not c.value.is_empty)


def test_parse_quantity():
    assert parse_quantity("12") == 12
    assert parse_quantity(" 7 ") == 7
    assert parse_quantity("3.9") == 3
    assert parse_quantity("5箱") == 5
    assert parse_quantity("") == 0
    assert parse_quantity("abc") == 0
    assert parse_quantity("-4") == 0


def test_only_highlighted_rows_extracted_in_sheet_order(make_grid, styles):
    rows = [HEADER, ["X1", "G1", 4], ["X2", "G1", 2], ["X3", "G2", 1], ["X4", "G2", 9]]
    grid = make_grid(rows, id_styles={1: styles.yellow, 2: styles.plain, 3: styles.red, 4: styles.plain})
    details = extract_rows(grid, ColumnRoles(0, 1, 2), _classifier(grid))
    assert [(d.row, d.identifier, d.group_key, d.quantity) for d in details] == [
        (2, "X1", "G1", 4),
        (4, "X3", "G2", 1),
    ]


def test_group_key_resolved_through_merge(make_grid, styles):
    rows = [
        HEADER,
        ["AWB1", "B-100", 3],
        ["AWB2", None, 1],
        ["AWB1", None, 5],
        ["AWB9", "B-200", 1],
        ["AWB8", "B-200", 1],
    ]
    grid = make_grid(
        rows,
        id_styles={1: styles.yellow, 2: styles.plain, 3: styles.yellow, 4: styles.plain, 5: styles.plain},
        merges=[(1, 1, 3, 1)],
    )
    details = extract_rows(grid, ColumnRoles(0, 1, 2), _classifier(grid))
    assert [(d.identifier, d.group_key, d.quantity) for d in details] == [
        ("AWB1", "B-100", 3),
        ("AWB1", "B-100", 5),
    ]


def test_quantity_resolved_through_merge(make_grid, styles):
    rows = [HEADER, ["A", "G", 6], ["B", "G", None], ["C", "G", 1]]
    grid = make_grid(
        rows,
        id_styles={1: styles.plain, 2: styles.yellow, 3: styles.plain},
        merges=[(1, 2, 2, 2)],
    )
    details = extract_rows(grid, ColumnRoles(0, 1, 2), _classifier(grid))
    assert [(d.identifier, d.quantity) for d in details] == [("B", 6)]


def test_highlighted_row_without_group_is_skipped(make_grid, styles):
    rows = [HEADER, ["X1", None, 4], ["X2", "G1", 2], ["X3", "G1", 1], ["X4", "G1", 1], ["X5", "G1", 1]]
    grid = make_grid(
        rows,
        id_styles={1: styles.yellow, 2: styles.yellow, 3: styles.plain, 4: styles.plain, 5: styles.plain},
    )
    details = extract_rows(grid, ColumnRoles(0, 1, 2), _classifier(grid))
    assert [d.identifier for d in details] == ["X2"]


def test_empty_identifier_skipped_even_if_styled(make_grid, styles):
    rows = [HEADER, [None, "G1", 4], ["X2", "G1", 2], ["X3", "G1", 2]]
    grid = make_grid(rows, id_styles={1: styles.yellow, 2: styles.plain, 3: styles.plain})
    details = extract_rows(grid, ColumnRoles(0, 1, 2), _classifier(grid))
    assert details == []


def test_missing_quantity_column_defaults_to_zero(make_grid, styles):
    rows = [["AWB No", "Collaborated Batch"], ["X1", "G1"], ["X2", "G1"], ["X3", "G1"]]
    grid = make_grid(rows, id_styles={1: styles.yellow, 2: styles.plain, 3: styles.plain})
    details = extract_rows(grid, ColumnRoles(0, 1, None), _classifier(grid))
    assert [(d.identifier, d.quantity) for d in details] == [("X1", 0)]


def test_unparseable_quantity_defaults_to_zero(make_grid, styles):
    rows = [HEADER, ["X1", "G1", "n/a"], ["X2", "G1", 2], ["X3", "G1", 2]]
    grid = make_grid(rows, id_styles={1: styles.yellow, 2: styles.plain, 3: styles.plain})
    details = extract_rows(grid, ColumnRoles(0, 1, 2), _classifier(grid))
    assert details[0].quantity == 0


def test_numeric_identifier_rendered_without_decimal(make_grid, styles):
    rows = [HEADER, [78412345678.0, "G1", 1], ["X2", "G1", 1], ["X3", "G1", 1]]
    grid = make_grid(rows, id_styles={1: styles.yellow, 2: styles.plain, 3: styles.plain})
    details = extract_rows(grid, ColumnRoles(0, 1, 2), _classifier(grid))
    assert details[0].identifier == "78412345678"


def test_detail_count_never_exceeds_data_rows(make_grid, styles):
    rows = [HEADER] + [[f"X{i}", "G", 1] for i in range(10)]
    grid = make_grid(rows, id_styles={i: (styles.yellow if i % 2 else styles.red) for i in range(1, 11)})
    details = extract_rows(grid, ColumnRoles(0, 1, 2), _classifier(grid))
    assert len(details) <= grid.data_row_count
