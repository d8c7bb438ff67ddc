"""Scan record assembly, re-analysis and history statistics tests."""

from __future__ import annotations

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from logic.scan_record import (
    CONFIRMED_CONFIDENCE,
    build_result,
    candidate_from_scan,
    new_scan,
    reanalyze_scan,
)
from models.candidate import CandidateProduct
from models.compatibility import Insight
from models.scan import ShoppingScan, compute_scan_statistics, filter_scans
from models.wardrobe_item import WardrobeItem

CANDIDATE = CandidateProduct(
    name="Black Tee",
    category="tops",
    primary_color="Black",
    style="casual",
    seasons=["summer"],
    confidence=0.6,
)
WARDROBE = [WardrobeItem(id="b1", category="bottoms", colors=["blue"], occasions=["casual"], seasons=["summer"])]


def test_build_result_combines_score_matches_and_explanation() -> None:
    result = build_result(CANDIDATE, WARDROBE)

    assert result.score == 80
    assert result.matching_item_ids == ["b1"]
    assert result.explanation == "Based on your cool-toned, casual wardrobe"
    assert result.to_dict()["insights"][0] == {
        "category": "match",
        "text": "Neutral color - pairs with almost anything in your wardrobe.",
    }


def test_new_scan_copies_confirmed_fields() -> None:
    result = build_result(CANDIDATE, WARDROBE)
    scan = new_scan(
        scan_id="s1",
        user_id="u1",
        candidate=CANDIDATE,
        result=result,
        created_at="2024-05-01T10:00:00+00:00",
        scan_method="url",
        product_url="https://www.cos.com/tee",
        price_amount=25.0,
    )

    assert scan.category == "tops"
    assert scan.color == "Black"
    assert scan.season == ["summer"]
    assert scan.compatibility_score == 80
    assert scan.matching_item_ids == ["b1"]
    assert scan.price_currency == "GBP"
    assert scan.created_at == scan.updated_at


def test_candidate_from_scan_forces_full_confidence() -> None:
    scan = ShoppingScan(id="s1", user_id="u1", category="Bottoms", color="Olive", season=["Winter"], style=None)

    candidate = candidate_from_scan(scan)

    assert candidate.confidence == CONFIRMED_CONFIDENCE
    assert candidate.category == "bottoms"
    assert candidate.style == "casual"
    assert candidate.seasons == ["winter"]
    assert candidate.formality == 5


def test_reanalyze_scan_reflects_current_wardrobe() -> None:
    scan = new_scan("s1", "u1", CANDIDATE, build_result(CANDIDATE, []), created_at="2024-05-01T10:00:00+00:00")
    assert scan.compatibility_score == 50

    refreshed = reanalyze_scan(scan, WARDROBE, updated_at="2024-05-02T09:00:00+00:00")

    assert refreshed.compatibility_score == 80
    assert refreshed.matching_item_ids == ["b1"]
    assert refreshed.created_at == "2024-05-01T10:00:00+00:00"
    assert refreshed.updated_at == "2024-05-02T09:00:00+00:00"
    assert reanalyze_scan(scan, WARDROBE, refreshed.updated_at) == refreshed


def test_statistics_average_rounds_half_up_and_prefers_first_category_on_ties() -> None:
    scans = [
        ShoppingScan(id="1", user_id="u", category="bottoms", compatibility_score=80, is_wishlisted=True),
        ShoppingScan(id="2", user_id="u", category="tops", compatibility_score=65),
        ShoppingScan(id="3", user_id="u", category="tops"),
        ShoppingScan(id="4", user_id="u", category="bottoms"),
    ]

    stats = compute_scan_statistics(scans)

    assert stats.total_scans == 4
    assert stats.avg_score == 73
    assert stats.wishlisted_count == 1
    assert stats.top_category == "bottoms"


def test_statistics_for_no_scans() -> None:
    stats = compute_scan_statistics([])
    assert (stats.total_scans, stats.avg_score, stats.wishlisted_count, stats.top_category) == (0, 0, 0, None)


def test_filter_scans() -> None:
    scans = [
        ShoppingScan(id="1", user_id="u", compatibility_score=85, is_wishlisted=True, created_at="2024-05-03"),
        ShoppingScan(id="2", user_id="u", compatibility_score=40, created_at="2024-05-02"),
        ShoppingScan(id="3", user_id="u", created_at="2024-04-01"),
    ]

    assert [scan.id for scan in filter_scans(scans, min_score=60)] == ["1"]
    assert [scan.id for scan in filter_scans(scans, wishlisted_only=True)] == ["1"]
    assert [scan.id for scan in filter_scans(scans, created_since="2024-05-01")] == ["1", "2"]
    assert len(filter_scans(scans)) == 3


def test_insights_survive_scan_serialisation() -> None:
    scan = ShoppingScan(id="1", user_id="u", ai_insights=[Insight("tip", "Pairs with your tops collection.")])
    assert scan.to_dict()["ai_insights"] == [{"category": "tip", "text": "Pairs with your tops collection."}]
