"""Find wardrobe items that pair with a candidate product."""

from __future__ import annotations

import logging
from typing import Iterable, List

from models.candidate import CandidateProduct
from models.color_theory import any_neutral, is_neutral, normalize_colors
from models.compatibility import MAX_MATCHING_ITEMS
from models.taxonomy import complement_categories, occasions_for_style
from models.wardrobe_item import WardrobeItem, complete_items

logger = logging.getLogger(__name__)

REASON_CLASSIC = "Classic pairing"
REASON_COLOR = "Color harmony"
REASON_STYLE = "Style match"
REASON_COMPLETE = "Complete the look"


def _pairs_on_color(candidate: CandidateProduct, item: WardrobeItem) -> bool:
    """Loose color test favouring recall: any one of the conditions is enough."""

    if not candidate.color_known:
        return True
    product_colors = candidate.colors
    if any_neutral(product_colors):
        return True
    item_colors = normalize_colors(item.colors)
    if item_colors and is_neutral(item_colors[0]):
        return True
    return any(color in item_colors for color in product_colors)


def find_matches(candidate: CandidateProduct, wardrobe: Iterable[WardrobeItem]) -> List[str]:
    """Return ids of complete wardrobe items that pair with ``candidate``.

    Items keep wardrobe order and the list is capped at ten ids.
    """

    complements = set(complement_categories(candidate.category))
    matches: List[str] = []
    for item in complete_items(wardrobe):
        if not item.category or item.category not in complements:
            continue
        if _pairs_on_color(candidate, item):
            matches.append(item.id)
            if len(matches) >= MAX_MATCHING_ITEMS:
                break

    logger.debug("match finder kept %s items for category %s", len(matches), candidate.category)
    return matches


def get_match_reason(candidate: CandidateProduct, item: WardrobeItem) -> str:
    """Explain in two or three words why ``item`` pairs with the candidate."""

    product_color = (candidate.primary_color or "").strip().lower() if candidate.color_known else ""
    item_colors = normalize_colors(item.colors)

    if is_neutral(product_color) or any_neutral(item_colors):
        return REASON_CLASSIC

    product_colors = [product_color, *normalize_colors(candidate.secondary_colors)]
    if any(color and color in item_colors for color in product_colors):
        return REASON_COLOR

    related = set(occasions_for_style(candidate.style))
    if any(occasion.lower() in related for occasion in item.occasions):
        return REASON_STYLE

    return REASON_COMPLETE


__all__ = [
    "find_matches",
    "get_match_reason",
    "REASON_CLASSIC",
    "REASON_COLOR",
    "REASON_STYLE",
    "REASON_COMPLETE",
]
