"""Vision-model product analysis and merging with scraped page metadata."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, Optional

from google import generativeai as genai

from models.candidate import UNKNOWN_COLOR, CandidateProduct
from models.scan import ScrapedProduct

logger = logging.getLogger(__name__)

ANALYSIS_PROMPT = """You are a fashion product analyst. Analyze this product image and extract detailed information.

Return ONLY valid JSON in this exact format, no other text:
{
  "product_name": "Short descriptive name of the product",
  "product_brand": "Brand name if visible, or null",
  "category": "One of: tops, bottoms, dresses, outerwear, shoes, accessories",
  "color": "Primary color name (e.g. Black, Navy, Red)",
  "secondary_colors": ["Array of other colors if multi-colored, empty if solid"],
  "style": "One of: casual, formal, smart-casual, sporty, bohemian, streetwear, classic, minimalist",
  "material": "Best guess of material (e.g. cotton, denim, leather, polyester, silk, wool) or null",
  "pattern": "One of: solid, striped, plaid, floral, polka-dot, checkered, geometric, abstract, animal-print, camo, tie-dye",
  "season": ["Array of suitable seasons: spring, summer, autumn, winter"],
  "formality": 5,
  "confidence": 0.9
}

Rules:
- "formality" is 1-10 where 1=very casual, 10=black-tie formal
- "confidence" is 0.0-1.0 for how confident you are in the analysis
- Focus on the PRODUCT, not the model wearing it or background
- If the image is not a clothing/fashion item, set confidence to 0"""

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


class ProductAnalysisError(RuntimeError):
    """Raised when the vision model cannot produce a usable product description."""


def parse_analysis_text(text: Optional[str]) -> Dict[str, Any]:
    """Extract the JSON object from a model reply, tolerating markdown fences."""

    if not text:
        raise ProductAnalysisError("No response from the vision model")
    match = _JSON_OBJECT.search(text)
    if not match:
        raise ProductAnalysisError("Failed to parse AI response")
    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        raise ProductAnalysisError("Failed to parse AI response") from exc
    if not isinstance(parsed, dict):
        raise ProductAnalysisError("Failed to parse AI response")
    return parsed


class ProductAnalyzer:
    """Turns a product photo into a :class:`CandidateProduct` via Gemini."""

    def __init__(self, api_key: Optional[str], model_name: str, model: Any | None = None) -> None:
        self.api_key = api_key
        self.model_name = model_name
        self._model = model

    @property
    def configured(self) -> bool:
        return self._model is not None or bool(self.api_key)

    def _get_model(self) -> Any:
        if self._model is None:
            if not self.api_key:
                raise ProductAnalysisError("Gemini API key not configured")
            genai.configure(api_key=self.api_key)
            self._model = genai.GenerativeModel(self.model_name)
        return self._model

    def analyze_image(self, image_bytes: bytes, mime_type: str = "image/jpeg") -> CandidateProduct:
        """Ask the vision model to describe the garment in ``image_bytes``."""

        model = self._get_model()
        gemini_mime = mime_type if mime_type and mime_type.startswith("image/") else "image/jpeg"
        try:
            response = model.generate_content([ANALYSIS_PROMPT, {"mime_type": gemini_mime, "data": image_bytes}])
        except Exception as exc:
            logger.error("Vision model call failed", extra={"model": self.model_name, "error": str(exc)})
            raise ProductAnalysisError(f"Product analysis failed: {exc}") from exc

        raw = parse_analysis_text(getattr(response, "text", None))
        candidate = CandidateProduct.from_raw_analysis(raw)
        logger.info(
            "Analyzed product image",
            extra={"category": candidate.category, "confidence": candidate.confidence},
        )
        return candidate


def merge_scraped_analysis(product: ScrapedProduct, analysis: Optional[CandidateProduct]) -> CandidateProduct:
    """Combine page metadata with visual analysis.

    The vision model owns visual attributes; the page owns name and brand.
    Without an analysis, confidence is 0.5 when the page had a name, else 0.2.
    """

    if analysis is None:
        return CandidateProduct(
            name=product.name or "Unknown Product",
            brand=product.brand,
            category="tops",
            primary_color=product.color or UNKNOWN_COLOR,
            style="casual",
            confidence=0.5 if product.name else 0.2,
        )

    primary_color = analysis.primary_color if analysis.color_known else (product.color or UNKNOWN_COLOR)
    return CandidateProduct(
        name=product.name or analysis.name,
        brand=product.brand or analysis.brand,
        category=analysis.category,
        primary_color=primary_color,
        secondary_colors=list(analysis.secondary_colors),
        style=analysis.style or "casual",
        material=analysis.material,
        pattern=analysis.pattern,
        seasons=list(analysis.seasons),
        formality=analysis.formality,
        confidence=analysis.confidence,
    )


__all__ = [
    "ANALYSIS_PROMPT",
    "ProductAnalysisError",
    "ProductAnalyzer",
    "parse_analysis_text",
    "merge_scraped_analysis",
]
