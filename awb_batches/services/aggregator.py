from __future__ import annotations

import locale
from collections.abc import Sequence

from ..models.detail_row import DetailRow, GroupSummary, IdentifierStat

"""Aggregation of detail rows into per-batch and per-AWB views.

Both views are rebuilt from scratch on every call.
"""

__all__ = [
    "summarize_groups",
    "summarize_identifiers",
]


def summarize_groups(details: Sequence[DetailRow]) -> list[GroupSummary]:
    """Group by batch: distinct identifiers (sorted) and the summed quantity.

    An identifier repeated under the same batch is listed once, but every occurrence adds
    its quantity. Batches are ordered with locale-aware collation.

    Args:
        details: highlighted rows in sheet order

    Returns:
        One GroupSummary per batch; empty when details is empty

    Examples:
        >>> rows = [DetailRow(2, "X1", "G2", 1), DetailRow(3, "X1", "G1", 4), DetailRow(4, "X1", "G1", 2)]
        >>> [(g.group_key, g.identifiers, g.total_quantity) for g in summarize_groups(rows)]
        [('G1', ('X1',), 6), ('G2', ('X1',), 1)]
    """
    identifiers: dict[str, set[str]] = {}
    totals: dict[str, int] = {}
    for d in details:
        identifiers.setdefault(d.group_key, set()).add(d.identifier)
        totals[d.group_key] = totals.get(d.group_key, 0) + d.quantity
    summaries = [
        GroupSummary(
            group_key=key,
            identifiers=tuple(sorted(identifiers[key])),
            total_quantity=totals[key],
        )
        for key in totals
    ]
    return sorted(summaries, key=lambda s: locale.strxfrm(s.group_key))


def summarize_identifiers(details: Sequence[DetailRow]) -> list[IdentifierStat]:
    """Per identifier: occurrence count (not deduplicated) and summed quantity.

    Sorted by descending count; ties keep first-seen order (sorted() is stable).

    Args:
        details: highlighted rows in sheet order

    Returns:
        One IdentifierStat per distinct identifier

    Examples:
        >>> rows = [DetailRow(2, "X2", "G1", 1), DetailRow(3, "X1", "G1", 4), DetailRow(4, "X1", "G2", 2)]
        >>> [(s.identifier, s.occurrence_count, s.total_quantity) for s in summarize_identifiers(rows)]
        [('X1', 2, 6), ('X2', 1, 1)]
    """
    counts: dict[str, int] = {}
    totals: dict[str, int] = {}
    for d in details:
        counts[d.identifier] = counts.get(d.identifier, 0) + 1
        totals[d.identifier] = totals.get(d.identifier, 0) + d.quantity
    stats = [
        IdentifierStat(identifier=key, occurrence_count=counts[key], total_quantity=totals[key])
        for key in counts
    ]
    return sorted(stats, key=lambda s: -s.occurrence_count)
