"""Deterministic compatibility scoring of a candidate product against a wardrobe.

Each factor returns ``None`` when it does not apply to the candidate (unknown
color, no seasons, no style). The final score is the mean of the factors that
did apply, rounded half-up and clamped to 0..100.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from logic.match_finder import find_matches
from models.candidate import CandidateProduct
from models.color_theory import any_neutral, normalize_colors
from models.compatibility import (
    INSIGHT_GAP,
    INSIGHT_MATCH,
    INSIGHT_TIP,
    INSIGHT_WARNING,
    MAX_INSIGHTS,
    Insight,
    round_half_up,
)
from models.taxonomy import complement_categories, occasions_for_style
from models.wardrobe_item import WardrobeItem, complete_items

logger = logging.getLogger(__name__)

EMPTY_WARDROBE_SCORE = 50
EMPTY_WARDROBE_TIP = "Add more items to your wardrobe for better compatibility analysis."

COLOR_NEUTRAL_SCORE = 90
COLOR_SHARED_SCORE = 80
COLOR_WARDROBE_NEUTRALS_SCORE = 65
COLOR_NEW_SCORE = 35

CATEGORY_MANY_SCORE = 90
CATEGORY_ONE_SCORE = 65
CATEGORY_NONE_SCORE = 30

SEASON_FULL_SCORE = 85
SEASON_PARTIAL_SCORE = 65
SEASON_NONE_SCORE = 40

STYLE_MATCH_SCORE = 80
STYLE_UNTAGGED_SCORE = 60
STYLE_MISMATCH_SCORE = 40

HIGH_VERSATILITY_MATCHES = 5
LIMITED_PAIRING_MATCHES = 1
LIMITED_PAIRING_MIN_WARDROBE = 5


@dataclass(frozen=True)
class FactorOutcome:
    """Contribution of one applicable factor."""

    name: str
    score: int
    insights: List[Insight] = field(default_factory=list)


@dataclass(frozen=True)
class ScoreOutcome:
    score: int
    insights: List[Insight] = field(default_factory=list)


def _color_factor(candidate: CandidateProduct, wardrobe: Sequence[WardrobeItem]) -> Optional[FactorOutcome]:
    if not candidate.color_known:
        return None

    product_colors = candidate.colors
    wardrobe_colors = {color for item in wardrobe for color in normalize_colors(item.colors)}
    shared = [color for color in product_colors if color in wardrobe_colors]

    if any_neutral(product_colors):
        insight = Insight(INSIGHT_MATCH, "Neutral color - pairs with almost anything in your wardrobe.")
        return FactorOutcome("color", COLOR_NEUTRAL_SCORE, [insight])
    if shared:
        text = f"You already have {candidate.primary_color} items - great for coordinated looks."
        return FactorOutcome("color", COLOR_SHARED_SCORE, [Insight(INSIGHT_MATCH, text)])
    if any_neutral(wardrobe_colors):
        text = f"Your neutral items will pair well with this {candidate.primary_color} piece."
        return FactorOutcome("color", COLOR_WARDROBE_NEUTRALS_SCORE, [Insight(INSIGHT_TIP, text)])
    text = f"{candidate.primary_color} is a new color for your wardrobe - fewer pairing options."
    return FactorOutcome("color", COLOR_NEW_SCORE, [Insight(INSIGHT_WARNING, text)])


def _matched_complements(candidate: CandidateProduct, wardrobe: Sequence[WardrobeItem]) -> List[str]:
    wardrobe_categories = {item.category for item in wardrobe if item.category}
    return [category for category in complement_categories(candidate.category) if category in wardrobe_categories]


def _category_factor(candidate: CandidateProduct, matched: Sequence[str]) -> FactorOutcome:
    if len(matched) >= 2:
        text = f"You have plenty of {' and '.join(matched)} to pair with this."
        return FactorOutcome("category", CATEGORY_MANY_SCORE, [Insight(INSIGHT_MATCH, text)])
    if len(matched) == 1:
        text = f"Pairs with your {matched[0]} collection."
        return FactorOutcome("category", CATEGORY_ONE_SCORE, [Insight(INSIGHT_TIP, text)])
    text = f"You might need complementary items to go with this {candidate.category} piece."
    return FactorOutcome("category", CATEGORY_NONE_SCORE, [Insight(INSIGHT_GAP, text)])


def _season_factor(candidate: CandidateProduct, wardrobe: Sequence[WardrobeItem]) -> Optional[FactorOutcome]:
    if not candidate.seasons:
        return None

    wardrobe_seasons = {season.lower() for item in wardrobe for season in item.seasons}
    overlap = [season for season in candidate.seasons if season.lower() in wardrobe_seasons]

    if len(overlap) == len(candidate.seasons):
        return FactorOutcome("season", SEASON_FULL_SCORE)
    if overlap:
        text = f"Fits your wardrobe for {', '.join(overlap)}."
        return FactorOutcome("season", SEASON_PARTIAL_SCORE, [Insight(INSIGHT_TIP, text)])
    text = "Most of your wardrobe is for different seasons."
    return FactorOutcome("season", SEASON_NONE_SCORE, [Insight(INSIGHT_WARNING, text)])


def _style_factor(candidate: CandidateProduct, wardrobe: Sequence[WardrobeItem]) -> Optional[FactorOutcome]:
    if not candidate.style:
        return None

    wardrobe_occasions = {occasion.lower() for item in wardrobe for occasion in item.occasions}
    related = occasions_for_style(candidate.style)

    if any(occasion in wardrobe_occasions for occasion in related):
        return FactorOutcome("style", STYLE_MATCH_SCORE)
    if not wardrobe_occasions:
        return FactorOutcome("style", STYLE_UNTAGGED_SCORE)
    text = f"This {candidate.style} style differs from your usual pieces."
    return FactorOutcome("style", STYLE_MISMATCH_SCORE, [Insight(INSIGHT_WARNING, text)])


def _derived_insights(
    candidate: CandidateProduct,
    wardrobe: Sequence[WardrobeItem],
    matched_complements: Sequence[str],
    matching_ids: Sequence[str],
) -> List[Insight]:
    """Insights that qualify the score without changing it."""

    insights: List[Insight] = []
    count = len(matching_ids)
    if count > 0:
        plural = "s" if count > 1 else ""
        insights.append(Insight(INSIGHT_MATCH, f"{count} item{plural} in your wardrobe would pair well with this."))

    if count >= HIGH_VERSATILITY_MATCHES:
        insights.append(
            Insight(INSIGHT_TIP, "High versatility - this pairs with many items. Great cost-per-wear potential.")
        )
    elif count <= LIMITED_PAIRING_MATCHES and len(wardrobe) >= LIMITED_PAIRING_MIN_WARDROBE:
        insights.append(Insight(INSIGHT_WARNING, "Limited pairing options. You might not wear this often."))

    if candidate.color_known:
        primary = candidate.primary_color.strip().lower()
        for item in wardrobe:
            if item.category == candidate.category and primary in normalize_colors(item.colors):
                insights.append(
                    Insight(INSIGHT_WARNING, f"This overlaps with your {item.display_name}. Do you need both?")
                )
                break

    if not matched_complements:
        # Nothing matched, so every complement is missing; name the first.
        missing = complement_categories(candidate.category)
        if missing:
            insights.append(
                Insight(
                    INSIGHT_GAP,
                    f"You don't have {missing[0]} to match this. Consider adding some to complete outfits.",
                )
            )
    return insights


def format_insight_text(text: str) -> str:
    """Capitalise the first letter and make sure the sentence ends with punctuation."""

    text = text.strip()
    if not text:
        return text
    text = text[0].upper() + text[1:]
    if text[-1] not in ".!?":
        text += "."
    return text


def finalize_insights(insights: Iterable[Insight], limit: int = MAX_INSIGHTS) -> List[Insight]:
    """Order by category priority, keeping computation order within a category, then cap."""

    indexed = list(enumerate(insights))
    indexed.sort(key=lambda pair: (pair[1].priority, pair[0]))
    return [Insight(insight.category, format_insight_text(insight.text)) for _, insight in indexed[:limit]]


def score_compatibility(candidate: CandidateProduct, wardrobe: Iterable[WardrobeItem]) -> ScoreOutcome:
    """Score how well ``candidate`` fits the complete items of ``wardrobe``.

    Returns the 0..100 score together with at most five priority-ordered
    insights. Never raises for degraded candidate fields.
    """

    items = complete_items(wardrobe)
    if not items:
        logger.debug("empty wardrobe, returning fixed score %s", EMPTY_WARDROBE_SCORE)
        return ScoreOutcome(EMPTY_WARDROBE_SCORE, [Insight(INSIGHT_TIP, EMPTY_WARDROBE_TIP)])

    matched_complements = _matched_complements(candidate, items)
    factors = [
        _color_factor(candidate, items),
        _category_factor(candidate, matched_complements),
        _season_factor(candidate, items),
        _style_factor(candidate, items),
    ]
    applied = [factor for factor in factors if factor is not None]

    if applied:
        raw_score = round_half_up(sum(factor.score for factor in applied) / len(applied))
    else:
        raw_score = EMPTY_WARDROBE_SCORE
    final_score = max(0, min(100, raw_score))

    insights: List[Insight] = [insight for factor in applied for insight in factor.insights]
    matching_ids = find_matches(candidate, items)
    insights.extend(_derived_insights(candidate, items, matched_complements, matching_ids))

    logger.debug(
        "compatibility factors %s -> %s",
        {factor.name: factor.score for factor in applied},
        final_score,
    )
    return ScoreOutcome(final_score, finalize_insights(insights))


__all__ = [
    "FactorOutcome",
    "ScoreOutcome",
    "EMPTY_WARDROBE_SCORE",
    "EMPTY_WARDROBE_TIP",
    "format_insight_text",
    "finalize_insights",
    "score_compatibility",
]
