"""Shopping scan records, scraped product metadata and history statistics."""

from __future__ import annotations

from collections import Counter
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from models.compatibility import Insight, round_half_up

SCAN_METHODS = ("screenshot", "url")
DEFAULT_CURRENCY = "GBP"


@dataclass(frozen=True)
class ScrapedProduct:
    """Metadata pulled from a retailer product page before visual analysis."""

    url: str
    image_url: Optional[str] = None
    name: Optional[str] = None
    brand: Optional[str] = None
    price_amount: Optional[float] = None
    price_currency: Optional[str] = None
    color: Optional[str] = None


@dataclass
class ShoppingScan:
    """A persisted scan: the confirmed product fields plus its latest compatibility result.

    The product fields are kept so the scan can be re-analysed later against
    the current wardrobe.
    """

    id: str
    user_id: str
    scan_method: str = "screenshot"
    product_name: Optional[str] = None
    product_brand: Optional[str] = None
    product_url: Optional[str] = None
    product_image_url: Optional[str] = None
    category: Optional[str] = None
    color: Optional[str] = None
    secondary_colors: List[str] = field(default_factory=list)
    style: Optional[str] = None
    material: Optional[str] = None
    pattern: Optional[str] = None
    season: List[str] = field(default_factory=list)
    formality: Optional[int] = None
    price_amount: Optional[float] = None
    price_currency: str = DEFAULT_CURRENCY
    compatibility_score: Optional[int] = None
    matching_item_ids: List[str] = field(default_factory=list)
    ai_insights: Optional[List[Insight]] = None
    user_rating: Optional[int] = None
    is_wishlisted: bool = False
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def __post_init__(self) -> None:
        if self.scan_method not in SCAN_METHODS:
            raise ValueError(f"Unsupported scan method '{self.scan_method}'. Allowed: {list(SCAN_METHODS)}")
        if self.formality is not None and not 1 <= self.formality <= 10:
            raise ValueError("formality must be between 1 and 10")
        if self.compatibility_score is not None and not 0 <= self.compatibility_score <= 100:
            raise ValueError("compatibility_score must be between 0 and 100")
        if self.user_rating is not None and not 1 <= self.user_rating <= 5:
            raise ValueError("user_rating must be between 1 and 5")
        if self.ai_insights is not None:
            self.ai_insights = [
                insight if isinstance(insight, Insight) else Insight(**insight) for insight in self.ai_insights
            ]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ScanStatistics:
    total_scans: int
    avg_score: int
    wishlisted_count: int
    top_category: Optional[str]


def compute_scan_statistics(scans: Iterable[ShoppingScan]) -> ScanStatistics:
    """Summarise scan history for the history screen header."""

    scans = list(scans)
    scored = [scan.compatibility_score for scan in scans if scan.compatibility_score is not None]
    avg_score = round_half_up(sum(scored) / len(scored)) if scored else 0

    # Counter keeps first-seen order, so most_common breaks ties by first appearance.
    category_counts = Counter(scan.category for scan in scans if scan.category)
    top_category = category_counts.most_common(1)[0][0] if category_counts else None

    return ScanStatistics(
        total_scans=len(scans),
        avg_score=avg_score,
        wishlisted_count=sum(1 for scan in scans if scan.is_wishlisted),
        top_category=top_category,
    )


def filter_scans(
    scans: Iterable[ShoppingScan],
    min_score: Optional[int] = None,
    wishlisted_only: bool = False,
    created_since: Optional[str] = None,
) -> List[ShoppingScan]:
    """Filter scan history by minimum score, wishlist flag and creation time.

    ``created_since`` is an ISO-8601 timestamp in the same format the scan
    store writes, so string comparison orders correctly.
    """

    kept: List[ShoppingScan] = []
    for scan in scans:
        if min_score is not None and (scan.compatibility_score is None or scan.compatibility_score < min_score):
            continue
        if wishlisted_only and not scan.is_wishlisted:
            continue
        if created_since and (scan.created_at is None or scan.created_at < created_since):
            continue
        kept.append(scan)
    return kept


__all__ = [
    "SCAN_METHODS",
    "DEFAULT_CURRENCY",
    "ScrapedProduct",
    "ShoppingScan",
    "ScanStatistics",
    "compute_scan_statistics",
    "filter_scans",
]
