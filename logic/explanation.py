"""One-line summary of a wardrobe's dominant palette and style."""

from __future__ import annotations

from typing import Iterable

from models.candidate import CandidateProduct
from models.color_theory import TONE_COOL, TONE_NEUTRAL, TONE_WARM, dominant_tone
from models.taxonomy import CASUAL_OCCASIONS, FORMAL_OCCASIONS
from models.wardrobe_item import WardrobeItem, complete_items

EMPTY_WARDROBE_EXPLANATION = "Add items to your wardrobe for personalized scoring"

_TONE_LABELS = {
    TONE_NEUTRAL: "neutral",
    TONE_WARM: "warm-toned",
    TONE_COOL: "cool-toned",
}

STYLE_DOMINANCE_RATIO = 2


def palette_label(wardrobe: Iterable[WardrobeItem]) -> str:
    colors = [color for item in wardrobe for color in item.colors]
    return _TONE_LABELS.get(dominant_tone(colors), "varied")


def style_label(wardrobe: Iterable[WardrobeItem]) -> str:
    """Casual or formal when one side has more than twice the other's tags."""

    occasions = [occasion.lower() for item in wardrobe for occasion in item.occasions]
    casual = sum(1 for occasion in occasions if occasion in CASUAL_OCCASIONS)
    formal = sum(1 for occasion in occasions if occasion in FORMAL_OCCASIONS)
    if casual > formal * STYLE_DOMINANCE_RATIO:
        return "casual"
    if formal > casual * STYLE_DOMINANCE_RATIO:
        return "formal"
    return "mixed-style"


def explain_wardrobe(candidate: CandidateProduct, wardrobe: Iterable[WardrobeItem]) -> str:
    """Describe the wardrobe the candidate was scored against.

    The candidate is accepted for interface symmetry with the scorer; the
    sentence depends on the wardrobe only.
    """

    items = complete_items(wardrobe)
    if not items:
        return EMPTY_WARDROBE_EXPLANATION
    return f"Based on your {palette_label(items)}, {style_label(items)} wardrobe"


__all__ = ["EMPTY_WARDROBE_EXPLANATION", "explain_wardrobe", "palette_label", "style_label"]
