from __future__ import annotations

from pathlib import Path

import pytest
from openpyxl import Workbook
from openpyxl.styles import GradientFill

from awb_batches.config.loader import default_config
from awb_batches.excel.reader import SheetNotFoundError, read_sheet_grid
from awb_batches.models.sheet_grid import MergeRange, ValueKind
from awb_batches.services.pipeline import RunContext, run_pipeline
from awb_batches.services.style_classifier import FillColorClassifier


def test_read_values_styles_and_merges(temp_workdir: Path, make_xlsx, styles):
    path = make_xlsx(
        temp_workdir / "data" / "in.xlsx",
        [
            ["AWB No", "Collaborated Batch", "大箱数"],
            ["784-1", "B-100", 3],
            ["784-2", None, 5.0],
            ["784-3", "B-200", None],
        ],
        fills={2: styles.yellow_fill},
        merges=["B2:B3"],
    )
    grid = read_sheet_grid(path)
    assert grid.name == "Sheet1"
    assert (grid.n_rows, grid.n_cols) == (4, 3)
    assert grid.header() == ["AWB No", "Collaborated Batch", "大箱数"]
    assert grid.merges == [MergeRange(1, 1, 2, 1)]
    assert grid.cell(1, 2).value.kind is ValueKind.NUMBER
    assert grid.cell(2, 2).value.text == "5"

    highlighted = grid.cell(1, 0).style
    assert highlighted is not None
    assert highlighted["fill"]["pattern"] == "solid"
    assert highlighted["fill"]["fg"]["value"] == "FFFFFF00"
    # 既定スタイルのセルは None
    assert grid.cell(2, 0).style is None
    assert grid.cell(0, 0).style is None


def test_bordered_cells_share_identical_descriptor(temp_workdir: Path, make_xlsx):
    path = make_xlsx(
        temp_workdir / "data" / "b.xlsx",
        [["AWB No", "Collaborated Batch"], ["A", "G"], ["B", "G"]],
        bordered=True,
    )
    grid = read_sheet_grid(path)
    first, second = grid.cell(1, 0).style, grid.cell(2, 0).style
    assert first is not None
    assert first == second
    assert first["border"]["left"]["style"] == "thin"


def test_read_named_sheet(temp_workdir: Path):
    wb = Workbook()
    wb.active.title = "Cover"
    ws = wb.create_sheet("Data")
    ws.append(["AWB No", "Collaborated Batch"])
    path = temp_workdir / "data" / "multi.xlsx"
    wb.save(path)

    assert read_sheet_grid(path).name == "Cover"
    grid = read_sheet_grid(path, "Data")
    assert grid.header() == ["AWB No", "Collaborated Batch"]
    with pytest.raises(SheetNotFoundError):
        read_sheet_grid(path, "Missing")


def test_unreadable_file_raises(temp_workdir: Path):
    bad = temp_workdir / "data" / "broken.xlsx"
    bad.write_bytes(b"not a zip archive")
    with pytest.raises(Exception):
        read_sheet_grid(bad)


def test_pattern_and_gradient_fill_descriptors(temp_workdir: Path, styles):
    wb = Workbook()
    ws = wb.active
    ws.append(["AWB No", "Collaborated Batch"])
    ws.append(["P1", "G1"])
    ws.append(["P2", "G1"])
    ws["A2"].fill = styles.yellow_fill
    ws["A3"].fill = GradientFill(type="linear", degree=90, stop=("FFFFFF", "FFFF00"))
    path = temp_workdir / "data" / "fills.xlsx"
    wb.save(path)

    grid = read_sheet_grid(path)
    pattern = grid.cell(1, 0).style["fill"]
    assert pattern["pattern"] == "solid"
    assert pattern["fg"] == {"type": "rgb", "value": "FFFFFF00", "tint": 0.0}

    gradient = grid.cell(2, 0).style["fill"]
    assert gradient["gradient"] == "linear"
    assert gradient["degree"] == 90
    assert [s["value"] for s in gradient["stops"]] == ["00FFFFFF", "00FFFF00"]
    assert FillColorClassifier().is_highlighted(grid.cell(2, 0).style)


def test_highlighted_workbook_extracts_instead_of_failing(temp_workdir: Path, make_xlsx, styles):
    # 塗りつぶしのある実ファイルでも PROCESSING_FAILURE にならないこと
    path = make_xlsx(
        temp_workdir / "data" / "scenario.xlsx",
        [
            ["AWB No", "Collaborated Batch", "大箱数"],
            ["X1", "G1", 4],
            ["X2", "G1", 2],
            ["X3", "G2", 1],
            ["X4", "G2", 1],
            ["X5", "G2", 1],
        ],
        fills={2: styles.yellow_fill, 4: styles.yellow_fill},
    )
    result = run_pipeline(RunContext(path=path, config=default_config()))
    assert result.ok, result.error
    assert [(g.group_key, g.identifiers, g.total_quantity) for g in result.groups] == [
        ("G1", ("X1",), 4),
        ("G2", ("X3",), 1),
    ]
