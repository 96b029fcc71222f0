from __future__ import annotations

from dataclasses import dataclass

"""Extracted and aggregated row models.

DetailRow is created once per highlighted row during extraction. GroupSummary and
IdentifierStat are derived views rebuilt from the DetailRow list on every run.
"""

__all__ = [
    "DetailRow",
    "GroupSummary",
    "IdentifierStat",
]


@dataclass(frozen=True)
class DetailRow:
    """One highlighted data row.

    row is 1-based and matches the row number shown by the spreadsheet application.
    """
    row: int
    identifier: str  # AWB No
    group_key: str  # WMS协作批次
    quantity: int = 0  # 大箱数 (欠損/数値以外は 0)


@dataclass(frozen=True)
class GroupSummary:
    group_key: str
    identifiers: tuple[str, ...]  # 重複排除 + 昇順
    total_quantity: int


@dataclass(frozen=True)
class IdentifierStat:
    """Per-identifier counts. occurrence_count > 1 flags an AWB that recurs across rows."""
    identifier: str
    occurrence_count: int
    total_quantity: int

    @property
    def repeated(self) -> bool:
        return self.occurrence_count > 1
