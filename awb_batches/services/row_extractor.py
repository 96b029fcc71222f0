from __future__ import annotations

import logging
import re

from ..models.detail_row import DetailRow
from ..models.extraction_result import ColumnRoles
from ..models.sheet_grid import SheetGrid
from .merge_resolver import merged_value
from .style_classifier import HighlightClassifier

"""Highlighted row extraction.

Rows are skipped (never escalated) when the identifier is empty, the identifier cell is not
highlighted, or the group key cannot be resolved. Malformed quantities become 0.
"""

__all__ = [
    "parse_quantity",
    "extract_rows",
]

logger = logging.getLogger(__name__)

_LEADING_DIGITS = re.compile(r"^\s*\+?(\d+)")


def parse_quantity(text: str) -> int:
    """Non-negative integer from cell text: leading digits, else 0.

    >>> parse_quantity("12"), parse_quantity("3.9"), parse_quantity("7箱"), parse_quantity("-2")
    (12, 3, 7, 0)
    """
    m = _LEADING_DIGITS.match(text)
    if not m:
        return 0
    return int(m.group(1))


def extract_rows(
    grid: SheetGrid,
    columns: ColumnRoles,
    classifier: HighlightClassifier,
    preview_limit: int = 0,
) -> list[DetailRow]:
    """Collect DetailRows for highlighted identifier cells, in sheet order.

    Args:
        grid: loaded worksheet (row 0 is the header)
        columns: resolved column roles
        classifier: fitted highlight strategy for the identifier column
        preview_limit: number of leading rows echoed at INFO level

    Returns:
        DetailRows with 1-based sheet row numbers; rows without an identifier, without a
        highlight or without a resolvable group key are left out

    Examples:
        >>> from .style_classifier import MajorityStyleClassifier
        >>> hl = {"fill": {"pattern": "solid"}}
        >>> grid = SheetGrid.from_rows(
        ...     "S", [["AWB", "Batch"], ["X1", "G1"], ["X2", "G1"], ["X3", "G1"]],
        ...     styles={(1, 0): hl},
        ... )
        >>> clf = MajorityStyleClassifier.fit([hl, None, None])
        >>> [(d.row, d.identifier) for d in extract_rows(grid, ColumnRoles(0, 1), clf)]
        [(2, 'X1')]
    """
    details: list[DetailRow] = []
    skipped_no_group = 0
    for row in range(1, grid.n_rows):
        cell = grid.cell(row, columns.identifier)
        if cell.value.is_empty:
            continue
        if not classifier.is_highlighted(cell.style):
            continue
        group_key = merged_value(grid, row, columns.group_key)
        if not group_key:
            skipped_no_group += 1
            continue
        quantity = 0
        if columns.quantity is not None:
            quantity = parse_quantity(merged_value(grid, row, columns.quantity))
        detail = DetailRow(
            row=row + 1,
            identifier=cell.value.text,
            group_key=group_key,
            quantity=quantity,
        )
        details.append(detail)
        if len(details) <= preview_limit:
            logger.info(
                f"highlighted row={detail.row} awb={detail.identifier} "
                f"batch={detail.group_key} boxes={detail.quantity}"
            )
    if skipped_no_group:
        logger.debug(f"{skipped_no_group} highlighted row(s) skipped: group key not resolvable")
    return details
