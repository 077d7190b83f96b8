"""URL checks shared by extraction and the dashboard, plus the raw page fetch
used when the hosted scraper is bypassed."""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import urlparse

import requests

from fitroom_app.errors import UpstreamServiceError
from tools.observability import instrument_tool

logger = logging.getLogger(__name__)

# Retailers commonly serve bot-walls to the default python-requests agent.
BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml",
    "Accept-Language": "en-US,en;q=0.9",
}


class InvalidProductURLError(ValueError):
    """The clothing URL is not an absolute http(s) address."""


class ProductPageFetchError(UpstreamServiceError):
    """The retailer page could not be downloaded as HTML."""


def is_valid_product_url(url: str) -> bool:
    parsed = urlparse((url or "").strip())
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def validate_url(url: str) -> None:
    if not is_valid_product_url(url):
        raise InvalidProductURLError(f"Invalid clothing URL: {url!r}")


@instrument_tool("fetch_product_page")
def fetch_product_page(url: str, timeout: Optional[float] = 10.0) -> str:
    """Download a retailer product page and return its HTML.

    Raises:
        InvalidProductURLError: for anything but an absolute http(s) URL.
        ProductPageFetchError: on network failure, a non-2xx status or a
            response that is not HTML.
    """

    validate_url(url)
    try:
        response = requests.get(url, headers=BROWSER_HEADERS, timeout=timeout)
    except requests.RequestException as exc:
        raise ProductPageFetchError(f"Could not reach {urlparse(url).netloc}: {exc}") from exc

    if not 200 <= response.status_code < 300:
        raise ProductPageFetchError(
            f"Failed to fetch URL: {response.status_code}", status_code=response.status_code
        )
    content_type = response.headers.get("Content-Type", "text/html")
    if "html" not in content_type.lower():
        raise ProductPageFetchError(f"Expected an HTML page, got {content_type}")

    logger.debug("Fetched product page", extra={"host": urlparse(url).netloc, "bytes": len(response.text)})
    return response.text


__all__ = [
    "BROWSER_HEADERS",
    "InvalidProductURLError",
    "ProductPageFetchError",
    "fetch_product_page",
    "is_valid_product_url",
    "validate_url",
]
