"""SQLite wardrobe and scan store tests."""

from __future__ import annotations

import sys
from dataclasses import replace
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from models.compatibility import Insight
from models.scan import ShoppingScan
from models.wardrobe_item import WardrobeItem
from tools.scan_store import SQLiteScanStore
from tools.wardrobe_store import SQLiteWardrobeStore


@pytest.fixture()
def wardrobe_store(tmp_path: Path) -> SQLiteWardrobeStore:
    return SQLiteWardrobeStore(tmp_path / "scanner.db")


@pytest.fixture()
def scan_store(tmp_path: Path) -> SQLiteScanStore:
    return SQLiteScanStore(tmp_path / "scanner.db")


def _scan(scan_id: str, created_at: str, **overrides) -> ShoppingScan:
    fields = dict(
        id=scan_id,
        user_id="user-1",
        scan_method="url",
        product_name="Camel Coat",
        product_url="https://www.mango.com/coat",
        category="outerwear",
        color="Camel",
        secondary_colors=["Black"],
        style="classic",
        pattern="solid",
        season=["autumn", "winter"],
        formality=6,
        price_amount=129.99,
        compatibility_score=72,
        matching_item_ids=["w1", "w2"],
        ai_insights=[Insight("match", "Pairs with your tops collection.")],
        created_at=created_at,
        updated_at=created_at,
    )
    fields.update(overrides)
    return ShoppingScan(**fields)


def test_wardrobe_round_trip_keeps_insertion_order(wardrobe_store: SQLiteWardrobeStore) -> None:
    first = WardrobeItem(id="z-item", category="bottoms", colors=["blue"], occasions=["casual"])
    second = WardrobeItem(id="a-item", status="pending", category="shoes", colors=["white"])

    wardrobe_store.create_item("user-1", first)
    wardrobe_store.create_item("user-1", second)

    assert wardrobe_store.list_items_for_user("user-1") == [first, second]
    assert wardrobe_store.get_item("user-1", "a-item") == second
    assert wardrobe_store.list_items_for_user("user-2") == []


def test_wardrobe_replace_keeps_position(wardrobe_store: SQLiteWardrobeStore) -> None:
    wardrobe_store.create_item("user-1", WardrobeItem(id="one", category="tops"))
    wardrobe_store.create_item("user-1", WardrobeItem(id="two", category="tops"))
    wardrobe_store.create_item("user-1", WardrobeItem(id="one", category="bottoms"))

    items = wardrobe_store.list_items_for_user("user-1")
    assert [item.id for item in items] == ["one", "two"]
    assert items[0].category == "bottoms"


def test_wardrobe_delete(wardrobe_store: SQLiteWardrobeStore) -> None:
    wardrobe_store.create_item("user-1", WardrobeItem(id="one"))
    assert wardrobe_store.delete_item("user-1", "one") is True
    assert wardrobe_store.delete_item("user-1", "one") is False
    assert wardrobe_store.get_item("user-1", "one") is None


def test_scan_round_trip(scan_store: SQLiteScanStore) -> None:
    scan = _scan("s1", "2024-05-01T10:00:00+00:00")
    scan_store.save_scan(scan)

    assert scan_store.get_scan("user-1", "s1") == scan
    assert scan_store.get_scan("user-2", "s1") is None


def test_list_scans_newest_first_with_limit(scan_store: SQLiteScanStore) -> None:
    scan_store.save_scan(_scan("old", "2024-05-01T10:00:00+00:00"))
    scan_store.save_scan(_scan("new", "2024-05-03T10:00:00+00:00"))
    scan_store.save_scan(_scan("mid", "2024-05-02T10:00:00+00:00"))

    assert [scan.id for scan in scan_store.list_scans("user-1")] == ["new", "mid", "old"]
    assert [scan.id for scan in scan_store.list_scans("user-1", limit=2)] == ["new", "mid"]


def test_wishlist_and_rating_updates(scan_store: SQLiteScanStore) -> None:
    scan_store.save_scan(_scan("s1", "2024-05-01T10:00:00+00:00"))
    scan_store.save_scan(_scan("s2", "2024-05-02T10:00:00+00:00"))

    assert scan_store.set_wishlisted("user-1", "s1", True).is_wishlisted is True
    assert [scan.id for scan in scan_store.list_wishlist("user-1")] == ["s1"]
    assert scan_store.set_rating("user-1", "s2", 4).user_rating == 4

    assert scan_store.set_wishlisted("user-1", "missing", True) is None
    assert scan_store.set_rating("user-1", "missing", 3) is None
    with pytest.raises(ValueError):
        scan_store.set_rating("user-1", "s2", 6)


def test_update_requires_existing_scan(scan_store: SQLiteScanStore) -> None:
    scan = _scan("s1", "2024-05-01T10:00:00+00:00")
    with pytest.raises(LookupError):
        scan_store.update_scan(scan)

    scan_store.save_scan(scan)
    updated = scan_store.update_scan(replace(scan, compatibility_score=91, ai_insights=None))
    assert scan_store.get_scan("user-1", "s1") == updated


def test_delete_scan(scan_store: SQLiteScanStore) -> None:
    scan_store.save_scan(_scan("s1", "2024-05-01T10:00:00+00:00"))
    assert scan_store.delete_scan("user-2", "s1") is False
    assert scan_store.delete_scan("user-1", "s1") is True
    assert scan_store.list_scans("user-1") == []
