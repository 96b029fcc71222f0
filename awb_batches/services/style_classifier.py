from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Any, Protocol

from ..models.extraction_result import StyleProfile
from ..models.sheet_grid import StyleDescriptor

"""Highlight detection strategies for identifier (AWB No) cells.

There is no portable "cell colour" field across spreadsheet producers, so the default strategy
infers "highlighted" as "deviates from the dominant style of the column". It tolerates sheets
that mix borders, fonts and fills, but it is a heuristic: when highlighted rows outnumber the
plain ones, the highlight itself becomes the majority and the plain rows are reported instead.
The fill strategy checks the fill colour explicitly and is selected with `classifier: fill`.
"""

__all__ = [
    "HighlightClassifier",
    "MajorityStyleClassifier",
    "FillColorClassifier",
    "canonical_style",
    "build_classifier",
]

# 白/既定とみなす前景色
_WHITE_RGB = {"FFFFFFFF", "00FFFFFF"}
_WHITE_INDEXED = {9, 64}


def canonical_style(style: StyleDescriptor) -> str:
    """Stable serialization used as the style identity."""
    return json.dumps(style, sort_keys=True, ensure_ascii=False, default=str)


class HighlightClassifier(Protocol):
    name: str

    def is_highlighted(self, style: StyleDescriptor | None) -> bool: ...

    def profile(self) -> StyleProfile: ...


class MajorityStyleClassifier:
    """Flags every style that differs from the most frequent one.

    Rules for a cell:
    - no style → never highlighted
    - style != majority style → highlighted
    - any style, when unstyled cells outnumber the majority style → highlighted
    """

    name = "majority"

    def __init__(self) -> None:
        self.no_style_count = 0
        self.style_counts: dict[str, int] = {}
        self.majority_key: str | None = None
        self.majority_count = 0

    @classmethod
    def fit(cls, styles: Iterable[StyleDescriptor | None]) -> MajorityStyleClassifier:
        clf = cls()
        for style in styles:
            if style is None:
                clf.no_style_count += 1
                continue
            key = canonical_style(style)
            clf.style_counts[key] = clf.style_counts.get(key, 0) + 1
        # 同数の場合は先に出現したスタイルを優先 (dict は挿入順)
        for key, count in clf.style_counts.items():
            if count > clf.majority_count:
                clf.majority_key = key
                clf.majority_count = count
        return clf

    def is_highlighted(self, style: StyleDescriptor | None) -> bool:
        if style is None:
            return False
        if self.no_style_count > self.majority_count:
            return True
        return canonical_style(style) != self.majority_key

    def profile(self) -> StyleProfile:
        return StyleProfile(
            strategy=self.name,
            styled_cells=sum(self.style_counts.values()),
            unstyled_cells=self.no_style_count,
            distinct_styles=len(self.style_counts),
            majority_count=self.majority_count,
        )


def _is_white(color: Any) -> bool:
    if not isinstance(color, dict):
        return True
    kind = color.get("type")
    value = color.get("value")
    if kind == "rgb":
        return str(value).upper() in _WHITE_RGB
    if kind == "indexed":
        return value in _WHITE_INDEXED
    if kind == "theme":
        return value == 0 and not color.get("tint")
    return True  # auto


class FillColorClassifier:
    """Flags cells with a visible (non-white) pattern or gradient fill."""

    name = "fill"

    def __init__(self) -> None:
        self.styled = 0
        self.unstyled = 0
        self.distinct: set[str] = set()

    @classmethod
    def fit(cls, styles: Iterable[StyleDescriptor | None]) -> FillColorClassifier:
        clf = cls()
        for style in styles:
            if style is None:
                clf.unstyled += 1
                continue
            clf.styled += 1
            clf.distinct.add(canonical_style(style))
        return clf

    def is_highlighted(self, style: StyleDescriptor | None) -> bool:
        if style is None:
            return False
        fill = style.get("fill")
        if not isinstance(fill, dict):
            return False
        if "gradient" in fill:
            return any(not _is_white(c) for c in fill.get("stops") or [])
        if fill.get("pattern") in (None, "none"):
            return False
        return not _is_white(fill.get("fg"))

    def profile(self) -> StyleProfile:
        return StyleProfile(
            strategy=self.name,
            styled_cells=self.styled,
            unstyled_cells=self.unstyled,
            distinct_styles=len(self.distinct),
        )


def build_classifier(name: str, styles: Iterable[StyleDescriptor | None]) -> HighlightClassifier:
    if name == "majority":
        return MajorityStyleClassifier.fit(styles)
    if name == "fill":
        return FillColorClassifier.fit(styles)
    raise ValueError(f"unknown classifier: {name}")
