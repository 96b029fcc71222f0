from __future__ import annotations

from ..models.sheet_grid import SheetGrid

"""Merged-cell aware value lookup."""

__all__ = [
    "merged_value",
]


def merged_value(grid: SheetGrid, row: int, column: int) -> str:
    """Effective displayed text at (row, column).

    Returns the cell's own text when present; otherwise the anchor text of the first merge
    range covering the coordinate; otherwise "". Never raises.

    Args:
        grid: loaded worksheet
        row: 0-based row index
        column: 0-based column index

    Returns:
        Trimmed text, "" when neither the cell nor a covering merge anchor has a value

    Examples:
        >>> from awb_batches.models.sheet_grid import MergeRange
        >>> grid = SheetGrid.from_rows("S", [["Batch"], ["B-1"], [None]], merges=[MergeRange(1, 0, 2, 0)])
        >>> merged_value(grid, 2, 0), merged_value(grid, 5, 0)
        ('B-1', '')
    """
    own = grid.cell(row, column).value
    if not own.is_empty:
        return own.text
    for merge in grid.merges:
        if merge.contains(row, column):
            anchor_row, anchor_col = merge.anchor
            return grid.cell(anchor_row, anchor_col).value.text
    return ""
