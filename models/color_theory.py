"""Color families used for pairing decisions and palette summaries."""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional

logger = logging.getLogger(__name__)

# Colors that pair with anything. Drives both scoring and match finding.
NEUTRAL_COLORS = frozenset({"black", "white", "gray", "grey", "navy", "beige", "cream", "tan"})

WARM_COLORS = frozenset(
    {"red", "orange", "yellow", "coral", "rust", "burgundy", "maroon", "mustard", "camel", "tan", "brown"}
)
COOL_COLORS = frozenset(
    {"blue", "navy", "teal", "purple", "lavender", "indigo", "cobalt", "turquoise", "emerald"}
)
# Palette summaries bucket tan and navy as warm/cool, so this set differs from NEUTRAL_COLORS.
PALETTE_NEUTRALS = frozenset(
    {"black", "white", "gray", "grey", "beige", "cream", "ivory", "taupe", "charcoal", "nude"}
)

TONE_WARM = "warm"
TONE_COOL = "cool"
TONE_NEUTRAL = "neutral"


def normalize_colors(colors: Optional[Iterable[str]]) -> List[str]:
    """Lowercase and trim color names, dropping blanks."""

    return [str(color).strip().lower() for color in (colors or []) if color and str(color).strip()]


def is_neutral(color: Optional[str]) -> bool:
    if not color:
        return False
    return color.strip().lower() in NEUTRAL_COLORS


def any_neutral(colors: Iterable[str]) -> bool:
    return any(is_neutral(color) for color in colors)


def color_tone(color: str) -> Optional[str]:
    """Classify a color into the warm, cool or neutral bucket.

    Warm is checked first, then cool, then neutral; unknown colors return None.
    """

    key = color.strip().lower()
    if key in WARM_COLORS:
        return TONE_WARM
    if key in COOL_COLORS:
        return TONE_COOL
    if key in PALETTE_NEUTRALS:
        return TONE_NEUTRAL
    return None


def dominant_tone(colors: Iterable[str]) -> Optional[str]:
    """Return the bucket holding a strict majority of classified colors."""

    counts = {TONE_WARM: 0, TONE_COOL: 0, TONE_NEUTRAL: 0}
    for color in colors:
        tone = color_tone(color)
        if tone:
            counts[tone] += 1

    total = sum(counts.values())
    if total == 0:
        return None
    for tone in (TONE_NEUTRAL, TONE_WARM, TONE_COOL):
        if counts[tone] / total > 0.5:
            logger.debug("dominant tone %s from counts %s", tone, counts)
            return tone
    return None


__all__ = [
    "NEUTRAL_COLORS",
    "WARM_COLORS",
    "COOL_COLORS",
    "PALETTE_NEUTRALS",
    "TONE_WARM",
    "TONE_COOL",
    "TONE_NEUTRAL",
    "normalize_colors",
    "is_neutral",
    "any_neutral",
    "color_tone",
    "dominant_tone",
]
