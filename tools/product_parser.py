"""HTML parsing utilities for retailer product pages."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from models.scan import ScrapedProduct
from models.taxonomy import extract_color_from_text

logger = logging.getLogger(__name__)


def _get_meta_content(soup: BeautifulSoup, key: str, attr: str = "property") -> str:
    tag = soup.find("meta", attrs={attr: key})
    return tag["content"].strip() if tag and tag.get("content") else ""


def _parse_price(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(str(value).replace(",", ""))
    except ValueError:
        return None


def _find_json_ld_product(soup: BeautifulSoup) -> Optional[Dict[str, Any]]:
    """Return the first schema.org Product, either top-level or inside ``@graph``."""

    for script in soup.find_all("script", attrs={"type": "application/ld+json"}):
        try:
            parsed = json.loads(script.string or script.get_text() or "")
        except (json.JSONDecodeError, TypeError):
            logger.debug("Skipping invalid JSON-LD block")
            continue
        if not isinstance(parsed, dict):
            continue
        if parsed.get("@type") == "Product":
            return parsed
        graph = parsed.get("@graph")
        if isinstance(graph, list):
            for entry in graph:
                if isinstance(entry, dict) and entry.get("@type") == "Product":
                    return entry
    return None


def _json_ld_brand(product: Dict[str, Any]) -> Optional[str]:
    brand = product.get("brand")
    if isinstance(brand, str):
        return brand or None
    if isinstance(brand, dict):
        return brand.get("name") or None
    return None


def _json_ld_image(product: Dict[str, Any]) -> Optional[str]:
    image = product.get("image")
    if isinstance(image, list):
        image = image[0] if image else None
    if isinstance(image, dict):
        image = image.get("url")
    return image or None


def parse_product_html(html: str, url: str) -> ScrapedProduct:
    """Parse retailer HTML into :class:`ScrapedProduct` metadata.

    Open Graph tags win over schema.org JSON-LD. Relative image URLs are
    resolved against the page URL, and a color is guessed from the product
    name, description and JSON-LD color.
    """

    soup = BeautifulSoup(html, "html.parser")
    json_ld = _find_json_ld_product(soup) or {}

    offers = json_ld.get("offers")
    if isinstance(offers, list):
        offers = offers[0] if offers else None
    offers = offers if isinstance(offers, dict) else {}

    image_url = _get_meta_content(soup, "og:image") or _json_ld_image(json_ld)
    if image_url and not image_url.startswith("http"):
        image_url = urljoin(url, image_url)

    name = _get_meta_content(soup, "og:title") or json_ld.get("name") or None
    brand = _get_meta_content(soup, "product:brand") or _json_ld_brand(json_ld)
    og_price = _parse_price(_get_meta_content(soup, "product:price:amount"))
    price_amount = og_price if og_price is not None else _parse_price(offers.get("price"))
    price_currency = _get_meta_content(soup, "product:price:currency") or offers.get("priceCurrency") or None

    description_text = " ".join(
        str(part) for part in (name, json_ld.get("description"), json_ld.get("color")) if part
    )

    product = ScrapedProduct(
        url=url,
        image_url=image_url or None,
        name=name,
        brand=brand or None,
        price_amount=price_amount,
        price_currency=price_currency,
        color=extract_color_from_text(description_text),
    )

    logger.info(
        "Parsed product HTML",
        extra={"url": url, "fields": {key: value is not None for key, value in product.__dict__.items()}},
    )
    return product


__all__ = ["parse_product_html"]
