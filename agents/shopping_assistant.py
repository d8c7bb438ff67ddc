"""Shopping assistant: analyse a product, score it against the wardrobe and keep scan history."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Tuple

from logic.match_finder import get_match_reason
from logic.scan_record import build_result, new_scan, reanalyze_scan
from models.candidate import CandidateProduct
from models.compatibility import CompatibilityResult
from models.scan import ScanStatistics, ScrapedProduct, ShoppingScan, compute_scan_statistics
from models.wardrobe_item import WardrobeItem
from scanner_app.config import ScannerConfig
from scanner_app.logging_config import get_logger, log_event, operation_context
from tools.product_analyzer import ProductAnalysisError, ProductAnalyzer, merge_scraped_analysis
from tools.product_page_fetcher import (
    InvalidProductURLError,
    ProductPageFetchError,
    fetch_product_image,
    fetch_product_page,
    validate_product_url,
)
from tools.product_parser import parse_product_html
from tools.scan_store import ScanStore
from tools.wardrobe_store import WardrobeStore

logger = get_logger(__name__)


class ScanNotFoundError(LookupError):
    """Raised when a scan id does not exist for the requesting user."""


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ScanOutcome:
    """What the results screen needs after a product is confirmed and scored."""

    scan: ShoppingScan
    result: CompatibilityResult
    matching_items: List[WardrobeItem] = field(default_factory=list)
    match_reasons: Dict[str, str] = field(default_factory=dict)


class ShoppingAssistant:
    """Coordinates collaborators around the pure compatibility engine.

    Wardrobe fetches and scan writes happen strictly before and after the
    engine runs; the engine itself never performs I/O.
    """

    def __init__(
        self,
        config: ScannerConfig,
        wardrobe_store: WardrobeStore,
        scan_store: ScanStore,
        analyzer: Optional[ProductAnalyzer] = None,
        page_fetcher: Callable[..., str] = fetch_product_page,
        image_fetcher: Callable[..., Tuple[bytes, str]] = fetch_product_image,
        clock: Callable[[], datetime] = _utc_now,
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
    ) -> None:
        self.config = config
        self.wardrobe_store = wardrobe_store
        self.scan_store = scan_store
        self.analyzer = analyzer or ProductAnalyzer(api_key=config.gemini_api_key, model_name=config.model)
        self.page_fetcher = page_fetcher
        self.image_fetcher = image_fetcher
        self.clock = clock
        self.id_factory = id_factory

    def _timestamp(self) -> str:
        return self.clock().isoformat()

    def analyze_image(self, image_bytes: bytes, mime_type: str = "image/jpeg") -> CandidateProduct:
        """Describe a screenshot; the caller shows the result for confirmation."""

        with operation_context("agent:shopping.analyze_image") as correlation_id:
            candidate = self.analyzer.analyze_image(image_bytes, mime_type)
            log_event(
                logger,
                logging.INFO,
                "product_analyzed",
                method="screenshot",
                category=candidate.category,
                confidence=candidate.confidence,
                correlation_id=correlation_id,
            )
            return candidate

    def analyze_url(self, url: str) -> Tuple[ScrapedProduct, CandidateProduct]:
        """Scrape a retailer page, analyse its image if possible and merge both.

        Raises:
            InvalidProductURLError: With a user-facing message for bad or unsupported URLs.
            ProductPageFetchError: When the page cannot be loaded.
        """

        url = (url or "").strip()
        error = validate_product_url(url, self.config.supported_domains)
        if error:
            raise InvalidProductURLError(error)

        with operation_context("agent:shopping.analyze_url") as correlation_id:
            html = self.page_fetcher(url, timeout=self.config.scrape_timeout)
            product = parse_product_html(html, url)

            analysis: Optional[CandidateProduct] = None
            if product.image_url and self.analyzer.configured:
                try:
                    image_bytes, mime_type = self.image_fetcher(product.image_url, timeout=self.config.scrape_timeout)
                    analysis = self.analyzer.analyze_image(image_bytes, mime_type)
                except (ProductAnalysisError, ProductPageFetchError, InvalidProductURLError) as exc:
                    logger.warning(
                        "Image analysis failed for scraped product",
                        extra={"error": str(exc), "correlation_id": correlation_id},
                    )

            candidate = merge_scraped_analysis(product, analysis)
            log_event(
                logger,
                logging.INFO,
                "product_analyzed",
                method="url",
                category=candidate.category,
                confidence=candidate.confidence,
                visual_analysis=analysis is not None,
                correlation_id=correlation_id,
            )
            return product, candidate

    def score(self, user_id: str, candidate: CandidateProduct) -> CompatibilityResult:
        """Score a candidate against the user's current wardrobe without saving."""

        wardrobe = self.wardrobe_store.list_items_for_user(user_id)
        return build_result(candidate, wardrobe)

    def confirm_and_score(
        self,
        user_id: str,
        candidate: CandidateProduct,
        scan_method: str = "screenshot",
        product_url: Optional[str] = None,
        product_image_url: Optional[str] = None,
        price_amount: Optional[float] = None,
        price_currency: Optional[str] = None,
    ) -> ScanOutcome:
        """Score the confirmed product and persist it as a new scan."""

        with operation_context("agent:shopping.confirm_and_score") as correlation_id:
            wardrobe = self.wardrobe_store.list_items_for_user(user_id)
            result = build_result(candidate, wardrobe)

            scan = new_scan(
                scan_id=self.id_factory(),
                user_id=user_id,
                candidate=candidate,
                result=result,
                created_at=self._timestamp(),
                scan_method=scan_method,
                product_url=product_url,
                product_image_url=product_image_url,
                price_amount=price_amount,
                price_currency=price_currency,
            )
            saved = self.scan_store.save_scan(scan)

            matching_ids = set(result.matching_item_ids)
            matching_items = [item for item in wardrobe if item.id in matching_ids]
            log_event(
                logger,
                logging.INFO,
                "scan_scored",
                user_id=user_id,
                scan_id=saved.id,
                score=result.score,
                matches=len(matching_items),
                wardrobe_size=len(wardrobe),
                correlation_id=correlation_id,
            )
            return ScanOutcome(
                scan=saved,
                result=result,
                matching_items=matching_items,
                match_reasons={item.id: get_match_reason(candidate, item) for item in matching_items},
            )

    def _require_scan(self, user_id: str, scan_id: str) -> ShoppingScan:
        scan = self.scan_store.get_scan(user_id, scan_id)
        if scan is None:
            raise ScanNotFoundError(f"Scan {scan_id} not found")
        return scan

    def reanalyze(self, user_id: str, scan_id: str) -> ShoppingScan:
        """Recompute a stored scan against the wardrobe as it is now."""

        with operation_context("agent:shopping.reanalyze") as correlation_id:
            scan = self._require_scan(user_id, scan_id)
            wardrobe = self.wardrobe_store.list_items_for_user(user_id)
            updated = self.scan_store.update_scan(reanalyze_scan(scan, wardrobe, self._timestamp()))
            log_event(
                logger,
                logging.INFO,
                "scan_reanalyzed",
                scan_id=scan_id,
                previous_score=scan.compatibility_score,
                score=updated.compatibility_score,
                correlation_id=correlation_id,
            )
            return updated

    def history(self, user_id: str, limit: Optional[int] = None) -> List[ShoppingScan]:
        return self.scan_store.list_scans(user_id, limit=limit or self.config.history_limit)

    def wishlist(self, user_id: str) -> List[ShoppingScan]:
        return self.scan_store.list_wishlist(user_id)

    def set_wishlisted(self, user_id: str, scan_id: str, is_wishlisted: bool) -> ShoppingScan:
        updated = self.scan_store.set_wishlisted(user_id, scan_id, is_wishlisted)
        if updated is None:
            raise ScanNotFoundError(f"Scan {scan_id} not found")
        return updated

    def toggle_wishlist(self, user_id: str, scan_id: str) -> ShoppingScan:
        scan = self._require_scan(user_id, scan_id)
        return self.set_wishlisted(user_id, scan_id, not scan.is_wishlisted)

    def rate_scan(self, user_id: str, scan_id: str, rating: int) -> ShoppingScan:
        updated = self.scan_store.set_rating(user_id, scan_id, rating)
        if updated is None:
            raise ScanNotFoundError(f"Scan {scan_id} not found")
        return updated

    def delete_scan(self, user_id: str, scan_id: str) -> None:
        if not self.scan_store.delete_scan(user_id, scan_id):
            raise ScanNotFoundError(f"Scan {scan_id} not found")

    def statistics(self, user_id: str) -> ScanStatistics:
        return compute_scan_statistics(self.history(user_id))


__all__ = ["ShoppingAssistant", "ScanOutcome", "ScanNotFoundError"]
