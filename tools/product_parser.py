"""HTML parsing utilities for retailer product pages."""

from __future__ import annotations

import logging
import re
from typing import Dict, List
from urllib.parse import urljoin

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

LETTER_SIZES = ("XXS", "XS", "S", "M", "L", "XL", "XXL", "XXXL")
_SIZE_TEXT_PATTERN = re.compile(r"\bsize\s*[:\-]?\s*(XXXL|XXL|XL|XXS|XS|S|M|L|\d+(?:[-/]\d+)?)\b", re.I)
_PRICE_PATTERN = re.compile(r"[$£€]\s?[\d,]+(?:\.\d{2})?")
_FIT_PATTERN = re.compile(r"\bfit\s*[:\-]?\s*(slim|regular|loose|relaxed|oversized)\b", re.I)
_MEASUREMENT_NAMES = {
    "chest",
    "bust",
    "waist",
    "hips",
    "hip",
    "length",
    "shoulders",
    "shoulder",
    "sleeves",
    "sleeve",
    "inseam",
    "neck",
    "rise",
    "thigh",
}


def _get_meta_content(soup: BeautifulSoup, key: str, attr: str = "property") -> str:
    tag = soup.find("meta", attrs={attr: key})
    return tag["content"].strip() if tag and tag.get("content") else ""


def _extract_image_url(soup: BeautifulSoup, base_url: str) -> str:
    og_image = _get_meta_content(soup, "og:image")
    if og_image:
        return urljoin(base_url, og_image)

    link_image = soup.find("link", rel="image_src")
    if link_image and link_image.get("href"):
        return urljoin(base_url, link_image["href"])

    first_img = soup.find("img", src=True)
    if first_img:
        return urljoin(base_url, first_img["src"])

    return ""


def _size_sort_key(size: str) -> tuple:
    if size in LETTER_SIZES:
        return (0, LETTER_SIZES.index(size), size)
    digits = re.match(r"\d+", size)
    return (1, int(digits.group()) if digits else 0, size)


def _extract_sizes(soup: BeautifulSoup) -> List[str]:
    found: set[str] = set()
    for select in soup.find_all("select"):
        label = " ".join(
            str(select.get(attr, "")) for attr in ("name", "id", "aria-label")
        ).lower()
        if "size" not in label:
            continue
        for option in select.find_all("option"):
            value = option.get_text(strip=True).upper()
            if value in LETTER_SIZES or value.isdigit():
                found.add(value)
    for match in _SIZE_TEXT_PATTERN.finditer(soup.get_text(" ")):
        found.add(match.group(1).upper())
    return sorted(found, key=_size_sort_key)


def _extract_size_chart(soup: BeautifulSoup) -> Dict[str, Dict[str, str]]:
    """Read the first table whose header row names body measurements."""

    for table in soup.find_all("table"):
        rows = table.find_all("tr")
        if len(rows) < 2:
            continue
        headers = [cell.get_text(strip=True).lower() for cell in rows[0].find_all(["th", "td"])]
        if not _MEASUREMENT_NAMES.intersection(headers[1:]):
            continue
        chart: Dict[str, Dict[str, str]] = {}
        for row in rows[1:]:
            cells = [cell.get_text(strip=True) for cell in row.find_all(["th", "td"])]
            if not cells or not cells[0]:
                continue
            chart[cells[0].upper()] = {
                header: value for header, value in zip(headers[1:], cells[1:]) if header and value
            }
        if chart:
            return chart
    return {}


def parse_product_html(html: str, url: str) -> Dict[str, object]:
    """Parse retailer HTML into the same shape the scraper's extraction returns.

    Structured metadata such as Open Graph tags is preferred; headings, price
    tokens and size selectors are used when it is missing.
    """

    soup = BeautifulSoup(html, "html.parser")
    title_tag = soup.find("title")
    name = _get_meta_content(soup, "og:title") or (title_tag.get_text(strip=True) if title_tag else "")
    if not name:
        heading = soup.find("h1")
        name = heading.get_text(strip=True) if heading else ""

    price = _get_meta_content(soup, "product:price:amount")
    if price:
        currency = _get_meta_content(soup, "product:price:currency")
        price = f"{price} {currency}".strip()
    else:
        match = _PRICE_PATTERN.search(soup.get_text(" "))
        price = match.group(0) if match else ""

    description = _get_meta_content(soup, "og:description") or _get_meta_content(
        soup, "description", attr="name"
    )
    image_url = _extract_image_url(soup, base_url=url)
    fit_match = _FIT_PATTERN.search(soup.get_text(" "))

    parsed = {
        "name": name,
        "price": price,
        "sizes": _extract_sizes(soup),
        "images": [image_url] if image_url else [],
        "sizeChart": _extract_size_chart(soup),
        "description": description or "No description available",
        "material": _get_meta_content(soup, "product:material"),
        "brand": _get_meta_content(soup, "product:brand") or _get_meta_content(soup, "og:site_name"),
        "color": _get_meta_content(soup, "product:color"),
        "fit": fit_match.group(1).lower() if fit_match else "",
    }

    logger.info(
        "Parsed product HTML", extra={"url": url, "fields": {k: bool(v) for k, v in parsed.items()}}
    )
    return parsed


__all__ = ["LETTER_SIZES", "parse_product_html"]
