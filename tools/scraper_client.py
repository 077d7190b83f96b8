"""Client for the hosted scraping service used to extract product data."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from fitroom_app.errors import MissingCredentialError, UpstreamServiceError
from tools.observability import instrument_tool

logger = logging.getLogger(__name__)

_MEASUREMENTS = (
    "chest",
    "waist",
    "hips",
    "length",
    "shoulders",
    "sleeves",
    "inseam",
    "neck",
    "armhole",
    "bicep",
    "thigh",
    "knee",
    "ankle",
    "bust",
    "natural_waist",
    "low_waist",
    "rise",
    "outseam",
    "cuff",
)

EXTRACTION_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "name": {"type": "string", "description": "Product name or title"},
        "price": {"type": "string", "description": "Product price in any format"},
        "sizes": {
            "type": "array",
            "items": {"type": "string"},
            "description": "Available sizes (XS, S, M, L, XL, etc.)",
        },
        "images": {
            "type": "array",
            "items": {"type": "string"},
            "description": "Product image URLs",
        },
        "description": {"type": "string", "description": "Product description"},
        "material": {"type": "string", "description": "Material/fabric information"},
        "brand": {"type": "string", "description": "Brand name"},
        "sizeChart": {
            "type": "object",
            "description": (
                "Size chart with measurements for every available size, keyed by size "
                "label, including every measurement listed on the page."
            ),
            "additionalProperties": {
                "type": "object",
                "properties": {
                    name: {
                        "type": "string",
                        "description": f"{name.replace('_', ' ').capitalize()} measurement in inches",
                    }
                    for name in _MEASUREMENTS
                },
            },
        },
        "color": {"type": "string", "description": "Primary color of the item"},
        "style": {"type": "string", "description": "Style information (casual, formal, athletic, etc.)"},
        "fit": {"type": "string", "description": "Fit information (slim, regular, loose, etc.)"},
        "care": {"type": "string", "description": "Care instructions"},
        "features": {"type": "string", "description": "Special features or details"},
    },
    "required": ["name"],
}


class ScraperClient:
    """Thin wrapper over the scraper's ``/scrape`` endpoint."""

    def __init__(
        self,
        api_key: Optional[str],
        api_url: str = "https://api.firecrawl.dev/v1/scrape",
        timeout_seconds: float = 60.0,
    ) -> None:
        self.api_key = api_key
        self.api_url = api_url
        self.timeout_seconds = timeout_seconds

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    @instrument_tool("scrape_product")
    def scrape(self, url: str) -> Dict[str, Any]:
        """Return the scraper's ``data`` block (``extract``, ``metadata``, ``markdown``).

        Raises:
            MissingCredentialError: If no API key is configured.
            UpstreamServiceError: On network errors or non-2xx responses.
        """

        if not self.api_key:
            raise MissingCredentialError("Firecrawl API key not configured")

        payload = {
            "url": url,
            "formats": ["extract", "markdown"],
            "extract": {"schema": EXTRACTION_SCHEMA},
        }
        try:
            response = requests.post(
                self.api_url,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                json=payload,
                timeout=self.timeout_seconds,
            )
        except requests.RequestException as exc:
            raise UpstreamServiceError(f"Firecrawl API unreachable: {exc}") from exc

        if not 200 <= response.status_code < 300:
            logger.warning(
                "Non-success status from scraper",
                extra={"status_code": response.status_code},
            )
            raise UpstreamServiceError(
                f"Firecrawl API error: {response.status_code} - {response.text}",
                status_code=response.status_code,
            )

        body = response.json()
        return body.get("data") or {}


__all__ = ["EXTRACTION_SCHEMA", "ScraperClient"]
