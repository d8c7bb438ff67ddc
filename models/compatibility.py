"""Compatibility result schemas and score rating bands."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List

INSIGHT_MATCH = "match"
INSIGHT_GAP = "gap"
INSIGHT_TIP = "tip"
INSIGHT_WARNING = "warning"

INSIGHT_PRIORITY: Dict[str, int] = {
    INSIGHT_MATCH: 0,
    INSIGHT_GAP: 1,
    INSIGHT_TIP: 2,
    INSIGHT_WARNING: 3,
}

MAX_INSIGHTS = 5
MAX_MATCHING_ITEMS = 10


@dataclass(frozen=True)
class Insight:
    """A short natural-language reason supporting or qualifying a score."""

    category: str
    text: str

    def __post_init__(self) -> None:
        if self.category not in INSIGHT_PRIORITY:
            raise ValueError(f"Unsupported insight category '{self.category}'. Allowed: {list(INSIGHT_PRIORITY)}")

    @property
    def priority(self) -> int:
        return INSIGHT_PRIORITY[self.category]

    def to_dict(self) -> Dict[str, str]:
        return {"category": self.category, "text": self.text}


@dataclass(frozen=True)
class CompatibilityResult:
    """Score, insights, pairing items and palette explanation for one candidate."""

    score: int
    insights: List[Insight] = field(default_factory=list)
    matching_item_ids: List[str] = field(default_factory=list)
    explanation: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class CompatibilityRating:
    label: str
    color: str
    min_score: int
    max_score: int


_RATINGS: List[CompatibilityRating] = [
    CompatibilityRating(label="Perfect Match", color="#10b981", min_score=90, max_score=100),
    CompatibilityRating(label="Great Choice", color="#22c55e", min_score=75, max_score=89),
    CompatibilityRating(label="Good Fit", color="#eab308", min_score=60, max_score=74),
    CompatibilityRating(label="Might Work", color="#f97316", min_score=40, max_score=59),
    CompatibilityRating(label="Careful", color="#ef4444", min_score=0, max_score=39),
]


def round_half_up(value: float) -> int:
    """Round halves upwards, so 82.5 becomes 83 instead of the banker's 82."""

    return int(math.floor(value + 0.5))


def compatibility_rating(score: float) -> CompatibilityRating:
    """Return the display band for a score, rounding and clamping it first."""

    clamped = max(0, min(100, round_half_up(score)))
    for rating in _RATINGS:
        if rating.min_score <= clamped <= rating.max_score:
            return rating
    return _RATINGS[-1]


__all__ = [
    "INSIGHT_MATCH",
    "INSIGHT_GAP",
    "INSIGHT_TIP",
    "INSIGHT_WARNING",
    "INSIGHT_PRIORITY",
    "MAX_INSIGHTS",
    "MAX_MATCHING_ITEMS",
    "Insight",
    "CompatibilityResult",
    "CompatibilityRating",
    "compatibility_rating",
    "round_half_up",
]
