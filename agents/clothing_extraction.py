"""Clothing extraction agent turning retailer URLs into ClothingItems."""

from __future__ import annotations

import logging

from fitroom_app.errors import MissingCredentialError, UpstreamServiceError
from fitroom_app.logging_config import get_logger, log_event, operation_context
from models.clothing_item import ClothingItem, from_scraped_payload
from tools.product_page_fetcher import fetch_product_page, validate_url
from tools.product_parser import parse_product_html
from tools.scraper_client import ScraperClient

logger = get_logger(__name__)

_SCRAPED_HTML_PREVIEW = 1000


class ClothingExtractionAgent:
    """Forwards a product URL to the scraper and normalises the result.

    When ``html_fallback`` is enabled a missing scraper credential or a
    scraper failure falls through to fetching and parsing the page directly;
    otherwise those errors propagate unchanged.
    """

    def __init__(
        self,
        scraper: ScraperClient,
        html_fallback: bool = False,
        fetch_timeout: float = 10.0,
    ) -> None:
        self.scraper = scraper
        self.html_fallback = html_fallback
        self.fetch_timeout = fetch_timeout

    def extract(self, url: str) -> ClothingItem:
        with operation_context("agent:clothing_extraction.extract") as correlation_id:
            url = url.strip()
            validate_url(url)
            try:
                data = self.scraper.scrape(url)
            except (MissingCredentialError, UpstreamServiceError) as exc:
                if not self.html_fallback:
                    raise
                log_event(
                    logger,
                    logging.WARNING,
                    "scraper_unavailable_using_html_fallback",
                    correlation_id=correlation_id,
                    reason=str(exc),
                )
                return self._extract_from_html(url)

            item = from_scraped_payload(
                data.get("extract") or {},
                metadata=data.get("metadata") or {},
                markdown=data.get("markdown") or "",
                source_url=url,
            )
            log_event(
                logger,
                logging.INFO,
                "clothing_extracted",
                correlation_id=correlation_id,
                source="scraper",
                sizes=len(item.sizes),
                images=len(item.images),
                has_size_chart=bool(item.size_chart),
            )
            return item

    def _extract_from_html(self, url: str) -> ClothingItem:
        html = fetch_product_page(url, timeout=self.fetch_timeout)
        raw = parse_product_html(html, url)
        item = from_scraped_payload(raw, markdown=html[:_SCRAPED_HTML_PREVIEW], source_url=url)
        log_event(
            logger,
            logging.INFO,
            "clothing_extracted",
            source="html_fallback",
            sizes=len(item.sizes),
            images=len(item.images),
            has_size_chart=bool(item.size_chart),
        )
        return item


__all__ = ["ClothingExtractionAgent"]
