from __future__ import annotations

from collections.abc import Sequence

from ..config.loader import HeaderTokens
from ..models.extraction_result import ColumnRoles
from .errors import MissingColumnError

"""Header row → column role resolution (Identifier / GroupKey / Quantity)."""

__all__ = [
    "resolve_columns",
]


def _matches(header: str, tokens: Sequence[str]) -> bool:
    folded = header.casefold()
    return any(t.casefold() in folded for t in tokens if t)


def resolve_columns(
    headers: Sequence[str],
    tokens: HeaderTokens,
    quantity_fallback_index: int | None = None,
) -> ColumnRoles:
    """Map trimmed header texts to column roles.

    The first header containing one of a role's tokens wins that role. When no header matches
    the quantity tokens, quantity_fallback_index is used if the sheet has that column.

    Raises:
        MissingColumnError: identifier and/or group key not found (all missing roles named)
    """
    identifier: int | None = None
    group_key: int | None = None
    quantity: int | None = None
    for index, raw in enumerate(headers):
        text = str(raw).strip()
        if identifier is None and _matches(text, tokens.identifier):
            identifier = index
        if group_key is None and _matches(text, tokens.group_key):
            group_key = index
        if quantity is None and _matches(text, tokens.quantity):
            quantity = index

    if (
        quantity is None
        and quantity_fallback_index is not None
        and quantity_fallback_index < len(headers)
    ):
        quantity = quantity_fallback_index

    roles: list[str] = []
    missing: list[str] = []
    if identifier is None:
        roles.append("identifier")
        missing.append(f"identifier ({' / '.join(tokens.identifier)})")
    if group_key is None:
        roles.append("group_key")
        missing.append(f"group_key ({' / '.join(tokens.group_key)})")
    if identifier is None or group_key is None:
        raise MissingColumnError(roles, f"required column(s) not found: {', '.join(missing)}")

    return ColumnRoles(identifier=identifier, group_key=group_key, quantity=quantity)
