"""Highlighted AWB batch extractor.

Reads an .xlsx sheet, picks the rows whose AWB No cell is highlighted, resolves each row's
collaborated batch (merged cells included) and aggregates AWB numbers and box counts per batch.
"""

__version__ = "0.1.0"
