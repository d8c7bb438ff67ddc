"""Validation and fetching of retailer product page URLs."""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Tuple
from urllib.parse import urlparse

import requests

from tools.observability import instrument_tool

logger = logging.getLogger(__name__)

MOBILE_USER_AGENT = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.0 Mobile/15E148 Safari/604.1"
)
TIMEOUT_MESSAGE = "This is taking too long. Try screenshot instead."


class InvalidProductURLError(ValueError):
    """Raised when the provided URL is not a valid or supported product URL."""


class ProductPageFetchError(RuntimeError):
    """Raised when the product page cannot be retrieved successfully."""


def _is_http_url(url: str) -> bool:
    parsed = urlparse(url)
    return parsed.scheme in {"http", "https"} and bool(parsed.netloc)


def _is_supported(url: str, supported_domains: Iterable[str]) -> bool:
    hostname = (urlparse(url).hostname or "").lower()
    return any(hostname == domain or hostname.endswith("." + domain) for domain in supported_domains)


def validate_product_url(url: str, supported_domains: Iterable[str]) -> Optional[str]:
    """Return a user-facing error message, or ``None`` when the URL is acceptable."""

    trimmed = (url or "").strip()
    if not trimmed:
        return "Please enter a product URL"
    if not _is_http_url(trimmed):
        return "Please enter a valid product URL"
    if not _is_supported(trimmed, supported_domains):
        return "We don't support this site yet. Try screenshot instead."
    return None


@instrument_tool("fetch_product_page")
def fetch_product_page(url: str, timeout: Optional[float] = 10.0) -> str:
    """Fetch the raw HTML for a retailer product page.

    Args:
        url: HTTP or HTTPS URL pointing to a retailer product page.
        timeout: Optional network timeout in seconds.

    Returns:
        The HTML content of the page as text.

    Raises:
        InvalidProductURLError: If the URL is not HTTP/HTTPS or missing a host.
        ProductPageFetchError: On timeouts, network issues or non-2xx responses.
    """

    if not _is_http_url(url):
        raise InvalidProductURLError(f"Unsupported or invalid URL: {url}")
    logger.info("Fetching product page", extra={"url": url})
    try:
        response = requests.get(url, timeout=timeout, headers={"User-Agent": MOBILE_USER_AGENT})
    except requests.Timeout as exc:
        logger.warning("Timed out fetching product page", extra={"url": url})
        raise ProductPageFetchError(TIMEOUT_MESSAGE) from exc
    except requests.RequestException as exc:
        logger.error("Network error fetching product page", extra={"url": url, "error": str(exc)})
        raise ProductPageFetchError(f"Network error fetching {url}: {exc}") from exc

    if not 200 <= response.status_code < 300:
        logger.warning(
            "Non-success status when fetching product page",
            extra={"url": url, "status_code": response.status_code},
        )
        raise ProductPageFetchError(f"Could not load page ({response.status_code})")

    logger.debug(
        "Fetched product page successfully",
        extra={"url": url, "status_code": response.status_code, "length": len(response.text)},
    )
    return response.text


@instrument_tool("fetch_product_image")
def fetch_product_image(url: str, timeout: Optional[float] = 10.0) -> Tuple[bytes, str]:
    """Download a product image, returning its bytes and mime type."""

    if not _is_http_url(url):
        raise InvalidProductURLError(f"Unsupported or invalid URL: {url}")
    try:
        response = requests.get(url, timeout=timeout, headers={"User-Agent": MOBILE_USER_AGENT})
    except requests.Timeout as exc:
        raise ProductPageFetchError(TIMEOUT_MESSAGE) from exc
    except requests.RequestException as exc:
        raise ProductPageFetchError(f"Network error fetching {url}: {exc}") from exc

    if not 200 <= response.status_code < 300:
        raise ProductPageFetchError(f"Could not load image ({response.status_code})")

    content_type = response.headers.get("content-type", "")
    mime_type = content_type.split(";")[0].strip() or "image/jpeg"
    return response.content, mime_type


__all__ = [
    "InvalidProductURLError",
    "ProductPageFetchError",
    "TIMEOUT_MESSAGE",
    "validate_product_url",
    "fetch_product_page",
    "fetch_product_image",
]
