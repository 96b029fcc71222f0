from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

"""SheetGrid domain model: the fully materialized worksheet handed to the core.

The reader (awb_batches.excel.reader) converts whatever the parsing library returns into
these types, so the core only ever sees tagged values and JSON-able style descriptors.
Coordinates are 0-based; row 0 is the header row.
"""

__all__ = [
    "ValueKind",
    "CellValue",
    "Cell",
    "MergeRange",
    "SheetGrid",
    "StyleDescriptor",
]

# 不透明なスタイル記述子。比較/シリアライズのみ要求される
StyleDescriptor = Mapping[str, Any]


class ValueKind(Enum):
    TEXT = "text"
    NUMBER = "number"
    EMPTY = "empty"


@dataclass(frozen=True)
class CellValue:
    """Tagged cell value (text | number | empty)."""
    kind: ValueKind
    raw: str | int | float | None = None

    @staticmethod
    def from_raw(value: Any) -> CellValue:
        if value is None:
            return EMPTY_VALUE
        if isinstance(value, bool):
            return CellValue(ValueKind.TEXT, str(value).upper())
        if isinstance(value, (int, float)):
            if isinstance(value, float) and value != value:  # NaN
                return EMPTY_VALUE
            return CellValue(ValueKind.NUMBER, value)
        text = str(value).strip()
        if text == "":
            return EMPTY_VALUE
        return CellValue(ValueKind.TEXT, text)

    @property
    def is_empty(self) -> bool:
        return self.kind is ValueKind.EMPTY

    @property
    def text(self) -> str:
        if self.kind is ValueKind.EMPTY:
            return ""
        if self.kind is ValueKind.NUMBER:
            if isinstance(self.raw, float) and self.raw.is_integer():
                return str(int(self.raw))
            return str(self.raw)
        return str(self.raw).strip()


EMPTY_VALUE = CellValue(ValueKind.EMPTY)


@dataclass(frozen=True)
class Cell:
    row: int
    column: int
    value: CellValue = EMPTY_VALUE
    style: StyleDescriptor | None = None  # None = スタイル情報なし


@dataclass(frozen=True)
class MergeRange:
    """Rectangular merged region, inclusive bounds. The anchor is (start_row, start_col)."""
    start_row: int
    start_col: int
    end_row: int
    end_col: int

    def contains(self, row: int, column: int) -> bool:
        return self.start_row <= row <= self.end_row and self.start_col <= column <= self.end_col

    @property
    def anchor(self) -> tuple[int, int]:
        return (self.start_row, self.start_col)


@dataclass
class SheetGrid:
    """Sparse worksheet: only cells carrying a value or a style are stored."""
    name: str
    n_rows: int
    n_cols: int
    cells: dict[tuple[int, int], Cell] = field(default_factory=dict)
    merges: list[MergeRange] = field(default_factory=list)

    def cell(self, row: int, column: int) -> Cell:
        found = self.cells.get((row, column))
        if found is None:
            return Cell(row=row, column=column)
        return found

    def header(self) -> list[str]:
        """Header row (row 0) converted to trimmed text."""
        return [self.cell(0, c).value.text for c in range(self.n_cols)]

    @property
    def data_row_count(self) -> int:
        return max(self.n_rows - 1, 0)

    @staticmethod
    def from_rows(
        name: str,
        rows: list[list[Any]],
        styles: dict[tuple[int, int], StyleDescriptor] | None = None,
        merges: list[MergeRange] | None = None,
    ) -> SheetGrid:
        """Build a grid from plain row lists (header first). Used by tests and tooling."""
        n_cols = max((len(r) for r in rows), default=0)
        cells: dict[tuple[int, int], Cell] = {}
        styles = styles or {}
        for r, row in enumerate(rows):
            for c, raw in enumerate(row):
                value = CellValue.from_raw(raw)
                style = styles.get((r, c))
                if value.is_empty and style is None:
                    continue
                cells[(r, c)] = Cell(row=r, column=c, value=value, style=style)
        for (r, c), style in styles.items():
            if (r, c) not in cells:
                cells[(r, c)] = Cell(row=r, column=c, style=style)
        return SheetGrid(
            name=name,
            n_rows=len(rows),
            n_cols=n_cols,
            cells=cells,
            merges=list(merges or []),
        )
