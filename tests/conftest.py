# Shared pytest fixtures
from __future__ import annotations

import tempfile
from collections.abc import Callable, Iterable
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import pytest
from openpyxl import Workbook
from openpyxl.styles import Border, PatternFill, Side

from awb_batches.logging.init import reset_logging
from awb_batches.models.sheet_grid import MergeRange, SheetGrid

YELLOW_FILL = PatternFill("solid", fgColor="FFFFFF00")
RED_FILL = PatternFill("solid", fgColor="FFFF0000")
THIN = Side(style="thin")
THIN_BORDER = Border(left=THIN, right=THIN, top=THIN, bottom=THIN)

# grid レベルのテスト用スタイル記述子
PLAIN_STYLE = {"border": {"left": {"style": "thin"}}, "fill": {"pattern": None}}
YELLOW_STYLE = {
    "border": {"left": {"style": "thin"}},
    "fill": {"pattern": "solid", "fg": {"type": "rgb", "value": "FFFFFF00", "tint": 0.0}},
}
RED_STYLE = {
    "border": {"left": {"style": "thin"}},
    "fill": {"pattern": "solid", "fg": {"type": "rgb", "value": "FFFF0000", "tint": 0.0}},
}

SCENARIO_HEADER = [
    "AWB No", "Collaborated Batch", "Customer", "Destination", "Flight", "Pieces",
    "Gross Weight", "Volume", "Description", "Location", "Remark", "Operator", "大箱数",
]


@pytest.fixture(autouse=True)
def _fresh_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("AWB_BATCHES_CONFIG", raising=False)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """headers:
  identifier: ["AWB No", "提单号"]
  group_key: ["Collaborated Batch", "WMS协作批次"]
  quantity: ["大箱数", "箱数"]
quantity_fallback_index: 12
allowed_extensions: [".xlsx"]
classifier: majority
export:
  csv_headers: ["WMS协作批次", "AWB No", "大箱数"]
  identifier_separator: ", "
  encoding: utf-8
error_log_dir: ./logs
preview_limit: 3
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "extract.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def styles() -> SimpleNamespace:
    return SimpleNamespace(
        plain=PLAIN_STYLE,
        yellow=YELLOW_STYLE,
        red=RED_STYLE,
        yellow_fill=YELLOW_FILL,
        red_fill=RED_FILL,
    )


@pytest.fixture()
def scenario_row() -> Callable[..., list[Any]]:
    """13-column data row builder with 大箱数 in column M."""
    def _row(awb: Any, batch: Any, boxes: Any) -> list[Any]:
        row: list[Any] = [None] * len(SCENARIO_HEADER)
        row[0], row[1], row[12] = awb, batch, boxes
        return row
    return _row


@pytest.fixture()
def scenario_header() -> list[str]:
    return list(SCENARIO_HEADER)


@pytest.fixture()
def make_grid() -> Callable[..., SheetGrid]:
    """Build an in-memory SheetGrid.

    id_styles maps a 0-based data row index (row 1 = first data row) to the style of the
    identifier cell in column 0.
    """
    def _make(
        rows: list[list[Any]],
        id_styles: dict[int, Any] | None = None,
        merges: Iterable[tuple[int, int, int, int]] = (),
        name: str = "Sheet1",
        id_column: int = 0,
    ) -> SheetGrid:
        styles = {(r, id_column): s for r, s in (id_styles or {}).items()}
        return SheetGrid.from_rows(
            name,
            rows,
            styles=styles,
            merges=[MergeRange(*m) for m in merges],
        )
    return _make


@pytest.fixture()
def make_xlsx() -> Callable[..., Path]:
    """Write a real .xlsx with openpyxl.

    fills: {sheet row (1-based): PatternFill} applied to the AWB cell (column A)
    bordered: thin border on every AWB data cell
    merges: openpyxl range strings such as "B2:B4"
    """
    def _make(
        path: Path,
        rows: list[list[Any]],
        fills: dict[int, PatternFill] | None = None,
        bordered: bool = False,
        merges: Iterable[str] = (),
        sheet_name: str = "Sheet1",
        id_column: int = 1,
    ) -> Path:
        wb = Workbook()
        ws = wb.active
        ws.title = sheet_name
        for row in rows:
            ws.append(row)
        for r in range(2, len(rows) + 1):
            cell = ws.cell(row=r, column=id_column)
            if bordered:
                cell.border = THIN_BORDER
            if fills and r in fills:
                cell.fill = fills[r]
        for rng in merges:
            ws.merge_cells(rng)
        path.parent.mkdir(parents=True, exist_ok=True)
        wb.save(path)
        return path
    return _make

