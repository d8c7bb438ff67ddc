"""Wardrobe item data model and helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from models.taxonomy import ITEM_STATUSES

STATUS_COMPLETE = "complete"


def _ensure_list(value: Any) -> List[Any]:
    """Coerce a scalar or iterable into a list."""

    if value is None:
        return []
    if isinstance(value, (list, tuple, set)):
        return list(value)
    return [value]


def _clean_tags(values: Iterable[Any]) -> List[str]:
    """Strip blanks from a list of tags while keeping their original order."""

    return [str(value).strip() for value in values if value is not None and str(value).strip()]


@dataclass
class WardrobeItem:
    """Represents an item in the user's wardrobe.

    Only items whose ``status`` is ``complete`` take part in compatibility
    scoring; pending and processing items are still being photographed or
    categorised.
    """

    id: str
    status: str = STATUS_COMPLETE
    name: Optional[str] = None
    brand: Optional[str] = None
    category: Optional[str] = None
    colors: List[str] = field(default_factory=list)
    seasons: List[str] = field(default_factory=list)
    occasions: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.colors = _clean_tags(_ensure_list(self.colors))
        self.seasons = _clean_tags(_ensure_list(self.seasons))
        self.occasions = _clean_tags(_ensure_list(self.occasions))
        if self.category is not None:
            self.category = self.category.strip().lower() or None

    @property
    def is_complete(self) -> bool:
        return self.status == STATUS_COMPLETE

    @property
    def display_name(self) -> str:
        """Human readable label used in insight text."""

        if self.name:
            return self.name
        first_color = self.colors[0] if self.colors else ""
        return f"{first_color} {self.category or ''}".strip()


def complete_items(items: Iterable[WardrobeItem]) -> List[WardrobeItem]:
    """Return only the items that finished processing."""

    return [item for item in items if item.is_complete]


def from_raw_metadata(metadata: Dict[str, Any]) -> WardrobeItem:
    """Factory to build a :class:`WardrobeItem` from a loose persistence row."""

    item_id = metadata.get("id") or metadata.get("item_id")
    if not item_id:
        raise ValueError("Missing required field for WardrobeItem: id")

    status = str(metadata.get("status") or STATUS_COMPLETE).strip().lower()
    if status not in ITEM_STATUSES:
        raise ValueError(f"Unsupported status '{status}'. Allowed: {list(ITEM_STATUSES)}")

    return WardrobeItem(
        id=str(item_id),
        status=status,
        name=metadata.get("name"),
        brand=metadata.get("brand"),
        category=metadata.get("category"),
        colors=_ensure_list(metadata.get("colors")),
        seasons=_ensure_list(metadata.get("seasons")),
        occasions=_ensure_list(metadata.get("occasions")),
    )


__all__ = ["WardrobeItem", "STATUS_COMPLETE", "complete_items", "from_raw_metadata"]
