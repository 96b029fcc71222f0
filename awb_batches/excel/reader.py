from __future__ import annotations

from pathlib import Path
from typing import Any

from openpyxl import load_workbook
from openpyxl.cell.cell import Cell as OpenpyxlCell
from openpyxl.styles.colors import Color
from openpyxl.worksheet.worksheet import Worksheet

from ..models.sheet_grid import Cell, CellValue, MergeRange, SheetGrid, StyleDescriptor

"""Workbook reader: loads one worksheet into a SheetGrid.

pandas (the usual reader elsewhere) drops cell styles and merged ranges, so the grid is built
directly from openpyxl. The workbook is opened with data_only=True (cached formula results)
and without read_only, because merged ranges are not available in read-only mode.

Styles are converted into plain JSON-able dicts here, so nothing downstream depends on
openpyxl objects.
"""

__all__ = [
    "SheetNotFoundError",
    "read_sheet_grid",
    "grid_from_worksheet",
    "style_descriptor",
]

_BORDER_SIDES = ("left", "right", "top", "bottom")


class SheetNotFoundError(Exception):
    """Raised when the configured sheet name does not exist in the workbook."""


def _color(color: Color | None) -> dict[str, Any] | None:
    if color is None:
        return None
    return {"type": color.type, "value": color.value, "tint": color.tint}


def _fill(cell: OpenpyxlCell) -> dict[str, Any]:
    # cell.fill は StyleProxy なので isinstance ではなくタグ名で判定する
    fill = cell.fill
    if fill.tagname == "patternFill":
        return {
            "pattern": fill.patternType,
            "fg": _color(fill.fgColor),
            "bg": _color(fill.bgColor),
        }
    # gradientFill
    return {
        "gradient": fill.type,
        "degree": fill.degree,
        "stops": [_color(s.color) for s in fill.stop],
    }


def style_descriptor(cell: OpenpyxlCell) -> StyleDescriptor | None:
    """Serializable style snapshot, or None when the cell uses the workbook default style."""
    if not cell.has_style:
        return None
    font = cell.font
    border = cell.border
    alignment = cell.alignment
    return {
        "fill": _fill(cell),
        "font": {
            "name": font.name,
            "size": font.sz,
            "bold": font.b,
            "italic": font.i,
            "underline": font.u,
            "strike": font.strike,
            "color": _color(font.color),
        },
        "border": {
            side: {
                "style": getattr(border, side).style,
                "color": _color(getattr(border, side).color),
            }
            for side in _BORDER_SIDES
        },
        "alignment": {
            "horizontal": alignment.horizontal,
            "vertical": alignment.vertical,
            "wrap": alignment.wrap_text,
        },
        "number_format": cell.number_format,
    }


def grid_from_worksheet(ws: Worksheet) -> SheetGrid:
    """Materialize a worksheet into a SheetGrid (0-based coordinates)."""
    n_rows = ws.max_row
    n_cols = ws.max_column
    cells: dict[tuple[int, int], Cell] = {}
    for row in ws.iter_rows(min_row=1, max_row=n_rows, max_col=n_cols):
        for xl_cell in row:
            value = CellValue.from_raw(xl_cell.value)
            style = style_descriptor(xl_cell)
            if value.is_empty and style is None:
                continue
            r, c = xl_cell.row - 1, xl_cell.column - 1
            cells[(r, c)] = Cell(row=r, column=c, value=value, style=style)

    merges = [
        MergeRange(
            start_row=mr.min_row - 1,
            start_col=mr.min_col - 1,
            end_row=mr.max_row - 1,
            end_col=mr.max_col - 1,
        )
        for mr in ws.merged_cells.ranges
    ]
    return SheetGrid(name=ws.title, n_rows=n_rows, n_cols=n_cols, cells=cells, merges=merges)


def read_sheet_grid(path: Path, sheet_name: str | None = None) -> SheetGrid:
    """Read one worksheet of an .xlsx file.

    Parameters
    ----------
    path: workbook path
    sheet_name: worksheet to read (None = first worksheet)
    """
    wb = load_workbook(path, data_only=True)
    try:
        if sheet_name is None:
            ws = wb.worksheets[0]
        elif sheet_name in wb.sheetnames:
            ws = wb[sheet_name]
        else:
            raise SheetNotFoundError(
                f"sheet '{sheet_name}' not found (available: {wb.sheetnames})"
            )
        return grid_from_worksheet(ws)
    finally:
        wb.close()
