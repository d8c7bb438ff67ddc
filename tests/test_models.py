"""Candidate, wardrobe item, insight and rating model tests."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Dict

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from models.candidate import UNKNOWN_COLOR, CandidateProduct
from models.compatibility import Insight, compatibility_rating, round_half_up
from models.scan import ShoppingScan
from models.wardrobe_item import WardrobeItem, complete_items, from_raw_metadata


@pytest.fixture()
def raw_analysis() -> Dict[str, object]:
    return {
        "product_name": "Striped Breton Top",
        "product_brand": "Arket",
        "category": "Tops",
        "color": "Navy",
        "secondary_colors": ["White"],
        "style": "Classic",
        "material": "cotton",
        "pattern": "striped",
        "season": ["Spring", "Summer"],
        "formality": 4,
        "confidence": 0.92,
    }


def test_candidate_from_analysis_normalises_fields(raw_analysis: Dict[str, object]) -> None:
    candidate = CandidateProduct.from_raw_analysis(raw_analysis)

    assert candidate.name == "Striped Breton Top"
    assert candidate.brand == "Arket"
    assert candidate.category == "tops"
    assert candidate.style == "classic"
    assert candidate.seasons == ["spring", "summer"]
    assert candidate.colors == ["navy", "white"]
    assert candidate.confidence == pytest.approx(0.92)


def test_candidate_defaults_for_sparse_payload() -> None:
    candidate = CandidateProduct.from_raw_analysis({})

    assert candidate.name == "Unknown Product"
    assert candidate.category == "tops"
    assert candidate.primary_color == UNKNOWN_COLOR
    assert candidate.style == "casual"
    assert candidate.pattern == "solid"
    assert candidate.formality == 5
    assert candidate.confidence == 0.0
    assert not candidate.color_known
    assert candidate.colors == []


def test_candidate_clamps_out_of_range_numbers() -> None:
    candidate = CandidateProduct.from_raw_analysis({"formality": 14, "confidence": 1.7})
    assert candidate.formality == 10
    assert candidate.confidence == 1.0

    candidate = CandidateProduct.from_raw_analysis({"formality": True, "confidence": "high"})
    assert candidate.formality == 5
    assert candidate.confidence == 0.0


@pytest.mark.parametrize("bad", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_numbers_fall_back_to_defaults(bad: float) -> None:
    candidate = CandidateProduct.from_raw_analysis({"category": "tops", "color": "Red", "formality": bad, "confidence": bad})
    assert candidate.formality == 5
    assert candidate.confidence == 0.0


def test_explicit_empty_style_is_kept_empty() -> None:
    assert CandidateProduct.from_raw_analysis({"style": ""}).style == ""


def test_unknown_color_sentinel_is_case_insensitive() -> None:
    candidate = CandidateProduct(name="x", category="tops", primary_color="unknown", style="casual")
    assert not candidate.color_known
    assert candidate.with_confidence(1.0).confidence == 1.0


def test_wardrobe_item_cleans_tags_and_category() -> None:
    item = WardrobeItem(id="w1", category=" Bottoms ", colors=["Blue", " ", None], seasons="summer")

    assert item.category == "bottoms"
    assert item.colors == ["Blue"]
    assert item.seasons == ["summer"]
    assert item.display_name == "Blue bottoms"
    assert WardrobeItem(id="w2", name="Indigo jeans").display_name == "Indigo jeans"


def test_complete_items_filters_pending() -> None:
    items = [WardrobeItem(id="a"), WardrobeItem(id="b", status="processing"), WardrobeItem(id="c")]
    assert [item.id for item in complete_items(items)] == ["a", "c"]


def test_from_raw_metadata_accepts_item_id_and_validates_status() -> None:
    item = from_raw_metadata({"item_id": "w9", "category": "shoes", "colors": "black"})
    assert item.id == "w9"
    assert item.status == "complete"
    assert item.colors == ["black"]

    with pytest.raises(ValueError):
        from_raw_metadata({"id": "w10", "status": "archived"})
    with pytest.raises(ValueError):
        from_raw_metadata({"category": "tops"})


def test_insight_rejects_unknown_category() -> None:
    assert Insight("gap", "x").priority == 1
    with pytest.raises(ValueError):
        Insight("info", "x")


@pytest.mark.parametrize(
    "score,label",
    [(100, "Perfect Match"), (90, "Perfect Match"), (89, "Great Choice"), (75, "Great Choice"),
     (74, "Good Fit"), (60, "Good Fit"), (59, "Might Work"), (40, "Might Work"), (39, "Careful"),
     (0, "Careful"), (-12, "Careful"), (140, "Perfect Match"), (89.5, "Perfect Match")],
)
def test_compatibility_rating_bands(score: float, label: str) -> None:
    assert compatibility_rating(score).label == label


def test_round_half_up_differs_from_bankers_rounding() -> None:
    assert round_half_up(82.5) == 83
    assert round_half_up(72.5) == 73
    assert round_half_up(72.4) == 72


def test_shopping_scan_validates_ranges() -> None:
    with pytest.raises(ValueError):
        ShoppingScan(id="s", user_id="u", scan_method="camera")
    with pytest.raises(ValueError):
        ShoppingScan(id="s", user_id="u", compatibility_score=101)
    with pytest.raises(ValueError):
        ShoppingScan(id="s", user_id="u", user_rating=0)

    scan = ShoppingScan(id="s", user_id="u", ai_insights=[{"category": "tip", "text": "Hi."}])
    assert scan.ai_insights == [Insight("tip", "Hi.")]
    assert scan.price_currency == "GBP"
