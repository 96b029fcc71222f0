from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .detail_row import DetailRow, GroupSummary, IdentifierStat

"""Run-level result models for the highlighted batch extractor.

ExtractionResult is the only thing a run hands back to its caller. A failed run carries the
error and empty outputs; partial aggregates are never exposed.
"""

__all__ = [
    "RunStatus",
    "ColumnRoles",
    "StyleProfile",
    "ExtractionResult",
]


class RunStatus(Enum):
    """State of a single run: success | failed."""
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class ColumnRoles:
    """0-based column indices resolved from the header row."""
    identifier: int
    group_key: int
    quantity: int | None = None  # 未解決なら数量は全て 0


@dataclass(frozen=True)
class StyleProfile:
    """Tallies gathered by the style classifier over the identifier column."""
    strategy: str
    styled_cells: int = 0
    unstyled_cells: int = 0
    distinct_styles: int = 0
    majority_count: int = 0


@dataclass(frozen=True)
class ExtractionResult:
    file_name: str
    sheet_name: str
    status: RunStatus
    data_rows: int = 0
    columns: ColumnRoles | None = None
    style_profile: StyleProfile | None = None
    details: tuple[DetailRow, ...] = field(default_factory=tuple)
    groups: tuple[GroupSummary, ...] = field(default_factory=tuple)
    identifier_stats: tuple[IdentifierStat, ...] = field(default_factory=tuple)
    error_type: str | None = None  # UPPER_SNAKE
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is RunStatus.SUCCESS

    @property
    def total_quantity(self) -> int:
        return sum(g.total_quantity for g in self.groups)

    @property
    def repeated_identifiers(self) -> list[IdentifierStat]:
        return [s for s in self.identifier_stats if s.repeated]

    @staticmethod
    def failed(file_name: str, sheet_name: str, error_type: str, error: str) -> ExtractionResult:
        return ExtractionResult(
            file_name=file_name,
            sheet_name=sheet_name,
            status=RunStatus.FAILED,
            error_type=error_type,
            error=error,
        )
