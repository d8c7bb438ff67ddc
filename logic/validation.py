"""Pydantic schemas and helpers for validating API and tool payloads."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from models.candidate import CandidateProduct
from models.compatibility import CompatibilityResult, compatibility_rating
from models.scan import ScanStatistics, ShoppingScan
from models.taxonomy import CATEGORIES
from models.wardrobe_item import WardrobeItem


class CandidateProductInput(BaseModel):
    """Product fields as confirmed (and possibly edited) by the user."""

    product_name: str = "Unknown Product"
    product_brand: Optional[str] = None
    category: str = "tops"
    color: str = "Unknown"
    secondary_colors: List[str] = []
    style: str = ""
    material: Optional[str] = None
    pattern: str = "solid"
    season: List[str] = []
    formality: int = Field(5, ge=1, le=10)
    confidence: float = Field(1.0, ge=0.0, le=1.0)

    @field_validator("category")
    @classmethod
    def _validate_category(cls, value: str) -> str:
        key = value.strip().lower()
        if key not in CATEGORIES:
            raise ValueError(f"Unsupported category '{value}'. Allowed: {list(CATEGORIES)}")
        return key

    def to_candidate(self) -> CandidateProduct:
        return CandidateProduct.from_raw_analysis(self.model_dump())


class WardrobeItemInput(BaseModel):
    """Inline wardrobe item for stateless scoring requests."""

    id: str = Field(min_length=1)
    status: Literal["pending", "processing", "complete"] = "complete"
    name: Optional[str] = None
    brand: Optional[str] = None
    category: Optional[str] = None
    colors: List[str] = []
    seasons: List[str] = []
    occasions: List[str] = []

    def to_item(self) -> WardrobeItem:
        return WardrobeItem(**self.model_dump())


class CompatibilityRequest(BaseModel):
    candidate: CandidateProductInput
    wardrobe: List[WardrobeItemInput] = []


class ConfirmScanRequest(BaseModel):
    """Confirmed product plus the scan context gathered before confirmation."""

    candidate: CandidateProductInput
    scan_method: Literal["screenshot", "url"] = "screenshot"
    product_url: Optional[str] = None
    product_image_url: Optional[str] = None
    price_amount: Optional[float] = Field(None, ge=0)
    price_currency: Optional[str] = None


class AnalyzeUrlRequest(BaseModel):
    url: str = Field(min_length=1)


class RatingRequest(BaseModel):
    rating: int = Field(ge=1, le=5)


class WishlistRequest(BaseModel):
    is_wishlisted: bool


class InsightOut(BaseModel):
    category: Literal["match", "gap", "tip", "warning"]
    text: str


class CompatibilityResponse(BaseModel):
    score: int = Field(ge=0, le=100)
    rating: str
    insights: List[InsightOut]
    matching_item_ids: List[str]
    explanation: str

    @classmethod
    def from_result(cls, result: CompatibilityResult) -> "CompatibilityResponse":
        return cls(
            score=result.score,
            rating=compatibility_rating(result.score).label,
            insights=[InsightOut(**insight.to_dict()) for insight in result.insights],
            matching_item_ids=list(result.matching_item_ids),
            explanation=result.explanation,
        )


class ScanOut(BaseModel):
    """Serialised shopping scan returned by the API."""

    id: str
    user_id: str
    scan_method: str
    product_name: Optional[str] = None
    product_brand: Optional[str] = None
    product_url: Optional[str] = None
    product_image_url: Optional[str] = None
    category: Optional[str] = None
    color: Optional[str] = None
    secondary_colors: List[str] = []
    style: Optional[str] = None
    material: Optional[str] = None
    pattern: Optional[str] = None
    season: List[str] = []
    formality: Optional[int] = None
    price_amount: Optional[float] = None
    price_currency: str
    compatibility_score: Optional[int] = None
    matching_item_ids: List[str] = []
    ai_insights: Optional[List[InsightOut]] = None
    user_rating: Optional[int] = None
    is_wishlisted: bool = False
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_scan(cls, scan: ShoppingScan) -> "ScanOut":
        return cls.model_validate(scan.to_dict())


class StatisticsOut(BaseModel):
    total_scans: int
    avg_score: int
    wishlisted_count: int
    top_category: Optional[str] = None

    @classmethod
    def from_statistics(cls, stats: ScanStatistics) -> "StatisticsOut":
        return cls(
            total_scans=stats.total_scans,
            avg_score=stats.avg_score,
            wishlisted_count=stats.wishlisted_count,
            top_category=stats.top_category,
        )


__all__ = [
    "CandidateProductInput",
    "WardrobeItemInput",
    "CompatibilityRequest",
    "ConfirmScanRequest",
    "AnalyzeUrlRequest",
    "RatingRequest",
    "WishlistRequest",
    "InsightOut",
    "CompatibilityResponse",
    "ScanOut",
    "StatisticsOut",
]
