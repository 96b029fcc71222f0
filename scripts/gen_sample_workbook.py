#!/usr/bin/env python3
"""Sample workbook generator for manual checks and performance runs.

Generates an .xlsx sheet in the layout the extractor expects:
- Row 1: header row (提单号 AWB No, WMS协作批次 Collaborated Batch, ..., 大箱数 in column M)
- Row 2+: data rows; the batch cell is merged vertically over each batch block
- A random subset of AWB No cells gets a yellow fill (the "highlighted" rows)
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np
from openpyxl import Workbook
from openpyxl.styles import Border, PatternFill, Side

HEADERS = [
    "提单号 AWB No",
    "WMS协作批次 Collaborated Batch",
    "客户 Customer",
    "目的港 Destination",
    "航班 Flight",
    "件数 Pieces",
    "毛重 Gross Weight",
    "体积 Volume",
    "品名 Description",
    "仓位 Location",
    "备注 Remark",
    "操作员 Operator",
    "大箱数",
]
QUANTITY_COLUMN = 13  # M列
HIGHLIGHT = PatternFill("solid", fgColor="FFFFFF00")
THIN = Side(style="thin", color="FF000000")
GRID_BORDER = Border(left=THIN, right=THIN, top=THIN, bottom=THIN)


def create_workbook(
    output_path: Path,
    rows: int,
    batch_size: int = 5,
    highlight_ratio: float = 0.2,
    bordered: bool = True,
    seed: int = 42,
) -> int:
    """Write the sample workbook; returns the number of highlighted rows.

    Args:
        output_path: destination .xlsx
        rows: number of data rows
        batch_size: maximum rows per merged batch block
        highlight_ratio: share of AWB cells that get the highlight fill
        bordered: give every AWB cell a thin border (so "plain" rows are styled too)
        seed: random seed for reproducible data
    """
    rng = np.random.default_rng(seed)
    wb = Workbook()
    ws = wb.active
    ws.title = "Sheet1"
    ws.append(HEADERS)

    highlighted = 0
    row = 2
    batch_no = 1
    while row < rows + 2:
        block = int(min(rng.integers(1, batch_size + 1), rows + 2 - row))
        batch = f"B{batch_no:05d}"
        for offset in range(block):
            r = row + offset
            awb_cell = ws.cell(row=r, column=1, value=f"{rng.integers(100, 999)}-{rng.integers(10**7, 10**8)}")
            if bordered:
                awb_cell.border = GRID_BORDER
            if rng.random() < highlight_ratio:
                awb_cell.fill = HIGHLIGHT
                highlighted += 1
            ws.cell(row=r, column=3, value=f"CUST{rng.integers(1, 50):03d}")
            ws.cell(row=r, column=6, value=int(rng.integers(1, 200)))
            ws.cell(row=r, column=QUANTITY_COLUMN, value=int(rng.integers(0, 40)))
        ws.cell(row=row, column=2, value=batch)
        if block > 1:
            ws.merge_cells(start_row=row, start_column=2, end_row=row + block - 1, end_column=2)
        row += block
        batch_no += 1

    output_path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(output_path)
    return highlighted


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate a sample AWB workbook with highlighted rows and merged batches",
    )
    parser.add_argument("output", type=Path, help="Output .xlsx path")
    parser.add_argument("--rows", type=int, default=1_000, help="Number of data rows (default: 1,000)")
    parser.add_argument("--batch-size", type=int, default=5, help="Max rows per batch block (default: 5)")
    parser.add_argument(
        "--highlight-ratio", type=float, default=0.2, help="Share of highlighted AWB cells (default: 0.2)"
    )
    parser.add_argument("--no-border", action="store_true", help="Leave plain AWB cells unstyled")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    args = parser.parse_args()

    if args.rows <= 0:
        print("Error: --rows must be positive", file=sys.stderr)
        return 1
    if args.batch_size <= 0:
        print("Error: --batch-size must be positive", file=sys.stderr)
        return 1
    if not 0.0 <= args.highlight_ratio <= 1.0:
        print("Error: --highlight-ratio must be within [0, 1]", file=sys.stderr)
        return 1

    highlighted = create_workbook(
        args.output,
        args.rows,
        batch_size=args.batch_size,
        highlight_ratio=args.highlight_ratio,
        bordered=not args.no_border,
        seed=args.seed,
    )
    print(f"Created workbook: {args.output}")
    print(f"  Data rows: {args.rows:,}")
    print(f"  Highlighted rows: {highlighted:,}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
