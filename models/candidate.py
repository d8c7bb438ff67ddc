"""Candidate product model: the garment being evaluated against a wardrobe."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from models.taxonomy import (
    normalize_category,
    normalize_pattern,
    normalize_seasons,
    normalize_style,
)

UNKNOWN_COLOR = "Unknown"
DEFAULT_FORMALITY = 5


def _ensure_list(value: Any) -> List[Any]:
    """Coerce a scalar or iterable into a list."""

    if value is None:
        return []
    if isinstance(value, (list, tuple, set)):
        return list(value)
    return [value]


def _clean_strings(values: Any) -> List[str]:
    return [str(value).strip() for value in _ensure_list(values) if value is not None and str(value).strip()]


def _is_number(value: Any) -> bool:
    """Finite int or float; NaN and infinities count as missing."""

    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True)
class CandidateProduct:
    """Structured description of a scanned or scraped garment.

    ``primary_color`` may be the ``"Unknown"`` sentinel and ``style`` or
    ``seasons`` may be empty. The engine treats those as factors that do not
    apply rather than as failures.
    """

    name: str
    category: str
    primary_color: str
    style: str
    pattern: str = "solid"
    brand: Optional[str] = None
    secondary_colors: List[str] = field(default_factory=list)
    material: Optional[str] = None
    seasons: List[str] = field(default_factory=list)
    formality: int = DEFAULT_FORMALITY
    confidence: float = 0.0

    @property
    def color_known(self) -> bool:
        """True when the primary color is a real color, not missing or the sentinel."""

        color = (self.primary_color or "").strip()
        return bool(color) and color.lower() != UNKNOWN_COLOR.lower()

    @property
    def colors(self) -> List[str]:
        """Lowercased primary plus secondary colors; empty when the color is unknown."""

        if not self.color_known:
            return []
        return [color.lower() for color in [self.primary_color, *self.secondary_colors] if color]

    def with_confidence(self, confidence: float) -> "CandidateProduct":
        return replace(self, confidence=confidence)

    @classmethod
    def from_raw_analysis(cls, raw: Dict[str, Any]) -> "CandidateProduct":
        """Build a candidate from a loose analyzer payload, applying defaults.

        Accepts the analyzer's JSON keys (``product_name``, ``product_brand``,
        ``color``, ``season``...) and tolerates any of them being absent.
        """

        style_raw = raw.get("style", "casual")
        formality = raw.get("formality")
        confidence = raw.get("confidence")

        return cls(
            name=_optional_text(raw.get("product_name") or raw.get("name")) or "Unknown Product",
            brand=_optional_text(raw.get("product_brand") or raw.get("brand")),
            category=normalize_category(raw.get("category")),
            primary_color=_optional_text(raw.get("color") or raw.get("primary_color")) or UNKNOWN_COLOR,
            secondary_colors=_clean_strings(raw.get("secondary_colors")),
            style=normalize_style(style_raw if isinstance(style_raw, str) else None),
            material=_optional_text(raw.get("material")),
            pattern=normalize_pattern(raw.get("pattern")),
            seasons=normalize_seasons(_clean_strings(raw.get("season", raw.get("seasons")))),
            formality=max(1, min(10, int(round(formality)))) if _is_number(formality) else DEFAULT_FORMALITY,
            confidence=max(0.0, min(1.0, float(confidence))) if _is_number(confidence) else 0.0,
        )


__all__ = ["CandidateProduct", "UNKNOWN_COLOR", "DEFAULT_FORMALITY"]
