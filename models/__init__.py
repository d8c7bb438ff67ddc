"""Model package exports."""

from models.taxonomy import *  # noqa: F401,F403
from models.candidate import CandidateProduct
from models.compatibility import CompatibilityResult, Insight
from models.scan import ScrapedProduct, ShoppingScan
from models.wardrobe_item import WardrobeItem, from_raw_metadata

__all__ = [
    "CandidateProduct",
    "CompatibilityResult",
    "Insight",
    "ScrapedProduct",
    "ShoppingScan",
    "WardrobeItem",
    "from_raw_metadata",
]
