from __future__ import annotations

import csv
from datetime import date
from pathlib import Path

import pandas as pd

from ..config.loader import ExportConfig
from ..models.extraction_result import ExtractionResult

"""Result rendering helpers (pandas) and the CSV export.

CSV layout: one row per batch; columns = batch, joined AWB numbers, total boxes; every value
double-quoted.
"""

__all__ = [
    "groups_frame",
    "identifiers_frame",
    "details_frame",
    "render_csv",
    "write_csv",
    "default_csv_name",
]

DEFAULT_CSV_PREFIX = "AWB批次结果"


def groups_frame(result: ExtractionResult, separator: str = ", ") -> pd.DataFrame:
    return pd.DataFrame(
        {
            "batch": [g.group_key for g in result.groups],
            "awb_count": [len(g.identifiers) for g in result.groups],
            "awbs": [separator.join(g.identifiers) for g in result.groups],
            "total_boxes": [g.total_quantity for g in result.groups],
        }
    )


def identifiers_frame(result: ExtractionResult) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "awb": [s.identifier for s in result.identifier_stats],
            "batches": [s.occurrence_count for s in result.identifier_stats],
            "total_boxes": [s.total_quantity for s in result.identifier_stats],
            "repeated": [s.repeated for s in result.identifier_stats],
        }
    )


def details_frame(result: ExtractionResult) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "row": [d.row for d in result.details],
            "awb": [d.identifier for d in result.details],
            "batch": [d.group_key for d in result.details],
            "boxes": [d.quantity for d in result.details],
        }
    )


def render_csv(result: ExtractionResult, export: ExportConfig) -> str:
    """CSV text for the batch summary (header row + one row per batch)."""
    header_batch, header_awb, header_qty = export.csv_headers
    frame = pd.DataFrame(
        {
            header_batch: [g.group_key for g in result.groups],
            header_awb: [export.identifier_separator.join(g.identifiers) for g in result.groups],
            header_qty: [g.total_quantity for g in result.groups],
        },
        columns=[header_batch, header_awb, header_qty],
    )
    return frame.to_csv(index=False, quoting=csv.QUOTE_ALL, lineterminator="\n")


def write_csv(result: ExtractionResult, path: Path, export: ExportConfig) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_csv(result, export), encoding=export.encoding)
    return path


def default_csv_name(today: date | None = None, stem: str | None = None) -> str:
    today = today or date.today()
    suffix = f"_{stem}" if stem else ""
    return f"{DEFAULT_CSV_PREFIX}_{today.isoformat()}{suffix}.csv"
