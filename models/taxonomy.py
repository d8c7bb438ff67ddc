"""Canonical taxonomy tables for scanned products and wardrobe items.

This module centralises the static reference data used by the compatibility
engine: product categories, the category-complement graph, style to occasion
mapping and the brand and color keyword lists. Every table is read-only so the
scorer, match finder and explanation generator always agree on the same data.
"""

import re
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional, Tuple


def _normalize_key(value: str) -> str:
    """Normalise a free-form string into a taxonomy key."""

    return value.strip().lower()


CATEGORIES: Tuple[str, ...] = ("tops", "bottoms", "dresses", "outerwear", "shoes", "accessories")

STYLES: Tuple[str, ...] = (
    "casual",
    "formal",
    "smart-casual",
    "sporty",
    "bohemian",
    "streetwear",
    "classic",
    "minimalist",
)

PATTERNS: Tuple[str, ...] = (
    "solid",
    "striped",
    "plaid",
    "floral",
    "polka-dot",
    "checkered",
    "geometric",
    "abstract",
    "animal-print",
    "camo",
    "tie-dye",
)

SEASONS: Tuple[str, ...] = ("spring", "summer", "autumn", "winter")

ITEM_STATUSES: Tuple[str, ...] = ("pending", "processing", "complete")

# Order matters: the first missing complement is the one suggested to the user.
COMPLEMENT_CATEGORIES: Mapping[str, Tuple[str, ...]] = MappingProxyType(
    {
        "tops": ("bottoms", "outerwear", "accessories"),
        "bottoms": ("tops", "outerwear", "shoes"),
        "dresses": ("outerwear", "shoes", "accessories"),
        "outerwear": ("tops", "bottoms", "dresses"),
        "shoes": ("bottoms", "dresses", "tops"),
        "accessories": ("tops", "dresses", "outerwear"),
    }
)

STYLE_OCCASIONS: Mapping[str, Tuple[str, ...]] = MappingProxyType(
    {
        "casual": ("casual", "everyday"),
        "formal": ("formal", "business"),
        "smart-casual": ("casual", "business", "date-night"),
        "sporty": ("casual", "everyday"),
        "bohemian": ("casual", "festival"),
        "streetwear": ("casual", "everyday"),
        "classic": ("business", "formal", "casual"),
        "minimalist": ("casual", "business", "everyday"),
    }
)

CASUAL_OCCASIONS = frozenset({"casual", "everyday"})
FORMAL_OCCASIONS = frozenset({"formal", "business"})

PREMIUM_BRANDS = frozenset(
    {
        "gucci",
        "prada",
        "louis vuitton",
        "chanel",
        "hermes",
        "dior",
        "burberry",
        "balenciaga",
        "saint laurent",
        "bottega veneta",
        "versace",
        "fendi",
        "valentino",
        "celine",
        "loewe",
        "nike",
        "adidas",
        "new balance",
        "north face",
        "patagonia",
        "ralph lauren",
        "tommy hilfiger",
        "calvin klein",
        "hugo boss",
        "levi's",
        "levis",
        "cos",
        "arket",
        "sandro",
        "maje",
        "acne studios",
        "apc",
        "a.p.c.",
        "isabel marant",
    }
)

# Scanned in order; the first whole-word hit wins.
COLOR_KEYWORDS: Tuple[str, ...] = (
    "black", "white", "red", "blue", "green", "yellow", "orange", "purple",
    "pink", "brown", "grey", "gray", "navy", "beige", "cream", "tan",
    "burgundy", "maroon", "olive", "teal", "coral", "ivory", "khaki",
    "lavender", "turquoise", "charcoal", "indigo", "camel", "rust",
    "sage", "blush", "nude", "taupe", "emerald", "cobalt", "mustard",
)

_COLOR_PATTERNS = tuple((color, re.compile(rf"\b{color}\b", re.IGNORECASE)) for color in COLOR_KEYWORDS)


def normalize_category(value: Optional[str], default: str = "tops") -> str:
    """Return a canonical category, falling back to ``default`` when unknown."""

    if not value:
        return default
    key = _normalize_key(value)
    return key if key in CATEGORIES else default


def normalize_style(value: Optional[str]) -> str:
    """Lowercase a style label; empty input stays empty.

    Unrecognised styles are kept as given. They simply map to no occasions.
    """

    if not value:
        return ""
    return _normalize_key(value)


def normalize_pattern(value: Optional[str]) -> str:
    if not value:
        return "solid"
    key = _normalize_key(value)
    return key if key in PATTERNS else "solid"


def normalize_seasons(values: Iterable[str]) -> List[str]:
    """Lowercase and deduplicate season labels, preserving input order."""

    normalised: List[str] = []
    seen = set()
    for value in values:
        key = _normalize_key(str(value))
        if key and key not in seen:
            normalised.append(key)
            seen.add(key)
    return normalised


def complement_categories(category: Optional[str]) -> Tuple[str, ...]:
    """Return the categories that pair with ``category`` (empty when unknown)."""

    if not category:
        return ()
    return COMPLEMENT_CATEGORIES.get(_normalize_key(category), ())


def occasions_for_style(style: Optional[str]) -> Tuple[str, ...]:
    if not style:
        return ()
    return STYLE_OCCASIONS.get(_normalize_key(style), ())


def is_premium_brand(brand: Optional[str]) -> bool:
    """Return True for brands that tend to hold their resale value."""

    if not brand:
        return False
    return _normalize_key(brand) in PREMIUM_BRANDS


def extract_color_from_text(text: Optional[str]) -> Optional[str]:
    """Find the first known color word in ``text`` and return it capitalised.

    Matching is on whole words so that "cream" inside "screaming" is ignored.
    """

    if not text:
        return None
    for color, pattern in _COLOR_PATTERNS:
        if pattern.search(text):
            return color.capitalize()
    return None


__all__ = [
    "CATEGORIES",
    "STYLES",
    "PATTERNS",
    "SEASONS",
    "ITEM_STATUSES",
    "COMPLEMENT_CATEGORIES",
    "STYLE_OCCASIONS",
    "CASUAL_OCCASIONS",
    "FORMAL_OCCASIONS",
    "PREMIUM_BRANDS",
    "COLOR_KEYWORDS",
    "normalize_category",
    "normalize_style",
    "normalize_pattern",
    "normalize_seasons",
    "complement_categories",
    "occasions_for_style",
    "is_premium_brand",
    "extract_color_from_text",
]
