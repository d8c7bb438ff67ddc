"""Assemble compatibility results and keep persisted scans in sync with them."""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, List, Optional

from logic.compatibility_scoring import score_compatibility
from logic.explanation import explain_wardrobe
from logic.match_finder import find_matches
from models.candidate import DEFAULT_FORMALITY, UNKNOWN_COLOR, CandidateProduct
from models.compatibility import CompatibilityResult
from models.scan import DEFAULT_CURRENCY, ShoppingScan
from models.taxonomy import normalize_category, normalize_pattern, normalize_seasons
from models.wardrobe_item import WardrobeItem

CONFIRMED_CONFIDENCE = 1.0


def build_result(candidate: CandidateProduct, wardrobe: Iterable[WardrobeItem]) -> CompatibilityResult:
    """Run the scorer, match finder and explanation generator over one snapshot."""

    items: List[WardrobeItem] = list(wardrobe)
    outcome = score_compatibility(candidate, items)
    return CompatibilityResult(
        score=outcome.score,
        insights=list(outcome.insights),
        matching_item_ids=find_matches(candidate, items),
        explanation=explain_wardrobe(candidate, items),
    )


def candidate_from_scan(scan: ShoppingScan) -> CandidateProduct:
    """Rebuild the candidate from a stored scan.

    The stored fields were confirmed by the user, so confidence is forced to 1.0.
    """

    return CandidateProduct(
        name=scan.product_name or "Unknown Product",
        brand=scan.product_brand,
        category=normalize_category(scan.category),
        primary_color=scan.color or UNKNOWN_COLOR,
        secondary_colors=list(scan.secondary_colors or []),
        style=(scan.style or "casual").strip().lower(),
        material=scan.material,
        pattern=normalize_pattern(scan.pattern),
        seasons=normalize_seasons(scan.season or []),
        formality=scan.formality if scan.formality is not None else DEFAULT_FORMALITY,
    ).with_confidence(CONFIRMED_CONFIDENCE)


def new_scan(
    scan_id: str,
    user_id: str,
    candidate: CandidateProduct,
    result: CompatibilityResult,
    created_at: str,
    scan_method: str = "screenshot",
    product_url: Optional[str] = None,
    product_image_url: Optional[str] = None,
    price_amount: Optional[float] = None,
    price_currency: Optional[str] = None,
) -> ShoppingScan:
    """Create the record persisted after the user confirms a product."""

    return ShoppingScan(
        id=scan_id,
        user_id=user_id,
        scan_method=scan_method,
        product_name=candidate.name,
        product_brand=candidate.brand,
        product_url=product_url,
        product_image_url=product_image_url,
        category=candidate.category,
        color=candidate.primary_color,
        secondary_colors=list(candidate.secondary_colors),
        style=candidate.style or None,
        material=candidate.material,
        pattern=candidate.pattern,
        season=list(candidate.seasons),
        formality=candidate.formality,
        price_amount=price_amount,
        price_currency=price_currency or DEFAULT_CURRENCY,
        compatibility_score=result.score,
        matching_item_ids=list(result.matching_item_ids),
        ai_insights=list(result.insights),
        created_at=created_at,
        updated_at=created_at,
    )


def apply_result(scan: ShoppingScan, result: CompatibilityResult, updated_at: str) -> ShoppingScan:
    """Return a copy of ``scan`` carrying ``result`` in place of the stored one."""

    return replace(
        scan,
        compatibility_score=result.score,
        ai_insights=list(result.insights),
        matching_item_ids=list(result.matching_item_ids),
        updated_at=updated_at,
    )


def reanalyze_scan(scan: ShoppingScan, wardrobe: Iterable[WardrobeItem], updated_at: str) -> ShoppingScan:
    """Recompute a stored scan against a fresh wardrobe snapshot.

    Identical wardrobe state always yields the same score, insights and matches.
    """

    result = build_result(candidate_from_scan(scan), wardrobe)
    return apply_result(scan, result, updated_at)


__all__ = [
    "CONFIRMED_CONFIDENCE",
    "build_result",
    "candidate_from_scan",
    "new_scan",
    "apply_result",
    "reanalyze_scan",
]
