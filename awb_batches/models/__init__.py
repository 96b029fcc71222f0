"""Domain models for the highlighted AWB batch extractor.

Sheet-side models (SheetGrid and friends) describe the loaded worksheet; row and result models
describe what a run extracts and aggregates.
"""

from .detail_row import DetailRow, GroupSummary, IdentifierStat
from .error_record import ErrorRecord
from .extraction_result import ColumnRoles, ExtractionResult, RunStatus, StyleProfile
from .sheet_grid import Cell, CellValue, MergeRange, SheetGrid, ValueKind

__all__ = [
    # Sheet models
    "Cell",
    "CellValue",
    "MergeRange",
    "SheetGrid",
    "ValueKind",
    # Extraction models
    "ColumnRoles",
    "DetailRow",
    "ExtractionResult",
    "GroupSummary",
    "IdentifierStat",
    "RunStatus",
    "StyleProfile",
    # Error log
    "ErrorRecord",
]
