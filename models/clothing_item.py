"""Clothing item data model produced by the extraction service."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from uuid import uuid4

DEFAULT_SIZES = ["S", "M", "L", "XL"]
UNKNOWN_ITEM_NAME = "Unknown Item"
PRICE_NOT_FOUND = "Price not found"


def _ensure_list(value: Any) -> List[str]:
    """Coerce a scalar or iterable into a list of non-empty strings."""

    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value if v not in (None, "")]
    return [str(value)] if str(value) else []


def _normalise_size_chart(raw: Any) -> Dict[str, Dict[str, str]]:
    if not isinstance(raw, dict):
        return {}
    chart: Dict[str, Dict[str, str]] = {}
    for size, measurements in raw.items():
        if not isinstance(measurements, dict):
            continue
        chart[str(size)] = {
            str(name): str(value) for name, value in measurements.items() if value not in (None, "")
        }
    return chart


@dataclass
class ClothingItem:
    """A garment extracted from a retailer page.

    Lives only in the client's in-progress outfit unless it is added to the
    wardrobe.
    """

    name: str
    price: str
    sizes: List[str] = field(default_factory=lambda: list(DEFAULT_SIZES))
    images: List[str] = field(default_factory=list)
    size_chart: Dict[str, Dict[str, str]] = field(default_factory=dict)
    selected_size: Optional[str] = None
    id: str = field(default_factory=lambda: uuid4().hex)
    description: str = ""
    material: str = ""
    brand: str = ""
    color: str = ""
    style: str = ""
    fit: str = ""
    care: str = ""
    features: str = ""
    scraped_content: str = ""
    source_url: str = ""

    def select_size(self, size: str) -> None:
        if size not in self.sizes:
            raise ValueError(f"Size {size!r} is not offered for {self.name}")
        self.selected_size = size

    @property
    def primary_image(self) -> Optional[str]:
        return self.images[0] if self.images else None

    def to_payload(self) -> Dict[str, Any]:
        """Serialise using the camelCase keys of the HTTP contract."""

        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "sizes": list(self.sizes),
            "images": list(self.images),
            "sizeChart": {size: dict(m) for size, m in self.size_chart.items()},
            "selectedSize": self.selected_size,
            "description": self.description,
            "material": self.material,
            "brand": self.brand,
            "color": self.color,
            "style": self.style,
            "fit": self.fit,
            "care": self.care,
            "features": self.features,
            "scrapedContent": self.scraped_content,
            "sourceUrl": self.source_url,
        }

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "ClothingItem":
        """Rebuild an item from a contract payload, filling safe defaults."""

        sizes = _ensure_list(payload.get("sizes")) or list(DEFAULT_SIZES)
        kwargs: Dict[str, Any] = {}
        if payload.get("id"):
            kwargs["id"] = str(payload["id"])
        return cls(
            name=str(payload.get("name") or UNKNOWN_ITEM_NAME),
            price=str(payload.get("price") or PRICE_NOT_FOUND),
            sizes=sizes,
            images=_ensure_list(payload.get("images")),
            size_chart=_normalise_size_chart(payload.get("sizeChart")),
            selected_size=payload.get("selectedSize"),
            description=str(payload.get("description") or ""),
            material=str(payload.get("material") or ""),
            brand=str(payload.get("brand") or ""),
            color=str(payload.get("color") or ""),
            style=str(payload.get("style") or ""),
            fit=str(payload.get("fit") or ""),
            care=str(payload.get("care") or ""),
            features=str(payload.get("features") or ""),
            scraped_content=str(payload.get("scrapedContent") or ""),
            source_url=str(payload.get("sourceUrl") or ""),
            **kwargs,
        )


def from_scraped_payload(
    extracted: Dict[str, Any],
    metadata: Optional[Dict[str, Any]] = None,
    markdown: str = "",
    source_url: str = "",
) -> ClothingItem:
    """Normalise a scraper ``extract`` block into a :class:`ClothingItem`.

    Page metadata (title, ogImage, description) fills gaps left by the
    structured extraction.
    """

    metadata = metadata or {}
    images = _ensure_list(extracted.get("images"))
    if not images:
        images = _ensure_list(metadata.get("ogImage"))

    return ClothingItem(
        name=str(extracted.get("name") or metadata.get("title") or UNKNOWN_ITEM_NAME),
        price=str(extracted.get("price") or PRICE_NOT_FOUND),
        sizes=_ensure_list(extracted.get("sizes")) or list(DEFAULT_SIZES),
        images=images,
        size_chart=_normalise_size_chart(extracted.get("sizeChart")),
        description=str(extracted.get("description") or metadata.get("description") or ""),
        material=str(extracted.get("material") or ""),
        brand=str(extracted.get("brand") or ""),
        color=str(extracted.get("color") or ""),
        style=str(extracted.get("style") or ""),
        fit=str(extracted.get("fit") or ""),
        care=str(extracted.get("care") or ""),
        features=str(extracted.get("features") or ""),
        scraped_content=markdown or "",
        source_url=source_url,
    )


__all__ = [
    "ClothingItem",
    "DEFAULT_SIZES",
    "PRICE_NOT_FOUND",
    "UNKNOWN_ITEM_NAME",
    "from_scraped_payload",
]
