"""Taxonomy table and color family tests."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from models import taxonomy
from models.color_theory import (
    NEUTRAL_COLORS,
    TONE_COOL,
    TONE_NEUTRAL,
    TONE_WARM,
    any_neutral,
    color_tone,
    dominant_tone,
    is_neutral,
    normalize_colors,
)


def test_categories_and_complements_cover_each_other() -> None:
    """Every category has three complements drawn from the category list."""

    assert set(taxonomy.COMPLEMENT_CATEGORIES) == set(taxonomy.CATEGORIES)
    for category, complements in taxonomy.COMPLEMENT_CATEGORIES.items():
        assert len(complements) == 3
        assert category not in complements
        assert set(complements).issubset(taxonomy.CATEGORIES)


def test_complement_order_is_stable() -> None:
    assert taxonomy.complement_categories("tops") == ("bottoms", "outerwear", "accessories")
    assert taxonomy.complement_categories(" Shoes ") == ("bottoms", "dresses", "tops")
    assert taxonomy.complement_categories("hats") == ()
    assert taxonomy.complement_categories(None) == ()


def test_tables_are_read_only() -> None:
    with pytest.raises(TypeError):
        taxonomy.COMPLEMENT_CATEGORIES["tops"] = ("shoes",)  # type: ignore[index]
    with pytest.raises(TypeError):
        taxonomy.STYLE_OCCASIONS["casual"] = ("formal",)  # type: ignore[index]


def test_style_occasions_lookup() -> None:
    assert taxonomy.occasions_for_style("Smart-Casual") == ("casual", "business", "date-night")
    assert taxonomy.occasions_for_style("gothic") == ()
    assert taxonomy.occasions_for_style("") == ()


def test_normalizers_apply_defaults() -> None:
    assert taxonomy.normalize_category("Dresses") == "dresses"
    assert taxonomy.normalize_category("jumpsuits") == "tops"
    assert taxonomy.normalize_category(None) == "tops"
    assert taxonomy.normalize_style("  Bohemian ") == "bohemian"
    assert taxonomy.normalize_style(None) == ""
    assert taxonomy.normalize_pattern("Plaid") == "plaid"
    assert taxonomy.normalize_pattern("paisley") == "solid"
    assert taxonomy.normalize_seasons(["Summer", "summer", " Winter", ""]) == ["summer", "winter"]


def test_premium_brand_lookup_is_case_insensitive() -> None:
    assert taxonomy.is_premium_brand("Acne Studios")
    assert taxonomy.is_premium_brand("LEVI'S")
    assert not taxonomy.is_premium_brand("Primark")
    assert not taxonomy.is_premium_brand(None)


def test_extract_color_matches_whole_words_only() -> None:
    assert taxonomy.extract_color_from_text("Relaxed NAVY linen shirt") == "Navy"
    assert taxonomy.extract_color_from_text("Screaming good deal") is None
    # Keyword order decides between several colors.
    assert taxonomy.extract_color_from_text("Navy and black stripe tee") == "Black"
    assert taxonomy.extract_color_from_text(None) is None


def test_neutral_colors_match_glossary() -> None:
    assert NEUTRAL_COLORS == {"black", "white", "gray", "grey", "navy", "beige", "cream", "tan"}
    assert is_neutral(" Navy ")
    assert not is_neutral("ivory")
    assert not is_neutral(None)
    assert any_neutral(["red", "Cream"])
    assert not any_neutral([])


def test_normalize_colors_drops_blanks() -> None:
    assert normalize_colors([" Red", "", None, "BLUE"]) == ["red", "blue"]
    assert normalize_colors(None) == []


def test_color_tone_checks_warm_before_cool_before_neutral() -> None:
    assert color_tone("tan") == TONE_WARM
    assert color_tone("navy") == TONE_COOL
    assert color_tone("ivory") == TONE_NEUTRAL
    assert color_tone("pink") is None


def test_dominant_tone_requires_strict_majority() -> None:
    assert dominant_tone(["black", "white", "red"]) == TONE_NEUTRAL
    assert dominant_tone(["red", "orange", "blue"]) == TONE_WARM
    assert dominant_tone(["blue", "teal", "pink"]) == TONE_COOL
    assert dominant_tone(["red", "blue"]) is None
    assert dominant_tone(["pink", "green"]) is None
