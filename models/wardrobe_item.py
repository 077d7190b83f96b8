"""Wardrobe item data model and helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

REQUIRED_NEW_ITEM_FIELDS = ("photoUrl", "name", "category")


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class WardrobeItem:
    """A previously-owned garment stored for one user."""

    user_id: str
    name: str
    photo_url: str
    category: Optional[str] = None
    color: Optional[str] = None
    size: Optional[str] = None
    ai_analysis: Optional[Dict[str, Any]] = None
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: str = field(default_factory=utc_now_iso)

    def __post_init__(self) -> None:
        if not self.user_id:
            raise ValueError("WardrobeItem requires a user_id")
        self.name = str(self.name).strip() or "Unnamed Item"
        if self.category is not None:
            self.category = str(self.category).strip().lower() or None

    @property
    def style(self) -> Optional[str]:
        return (self.ai_analysis or {}).get("style")

    @property
    def material(self) -> Optional[str]:
        return (self.ai_analysis or {}).get("material")

    @property
    def estimated_size(self) -> Optional[str]:
        return (self.ai_analysis or {}).get("estimatedSize")

    @property
    def measurements(self) -> Optional[Dict[str, Any]]:
        return (self.ai_analysis or {}).get("measurements")

    def to_row(self) -> Dict[str, Any]:
        """Flatten into a ``user_wardrobe`` row."""

        return {
            "id": self.id,
            "user_id": self.user_id,
            "name": self.name,
            "category": self.category,
            "color": self.color,
            "size": self.size,
            "photo_url": self.photo_url,
            "ai_analysis": self.ai_analysis,
            "style": self.style,
            "material": self.material,
            "estimated_size": self.estimated_size,
            "patterns": (self.ai_analysis or {}).get("patterns"),
            "description": (self.ai_analysis or {}).get("description"),
            "measurements": self.measurements,
            "created_at": self.created_at,
        }

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "WardrobeItem":
        return cls(
            id=str(row["id"]),
            user_id=str(row["user_id"]),
            name=str(row.get("name") or ""),
            photo_url=str(row.get("photo_url") or ""),
            category=row.get("category"),
            color=row.get("color"),
            size=row.get("size"),
            ai_analysis=row.get("ai_analysis"),
            created_at=str(row.get("created_at") or utc_now_iso()),
        )


def missing_new_item_fields(item_data: Dict[str, Any]) -> List[str]:
    """Return the required add-item fields that are absent or blank."""

    return [key for key in REQUIRED_NEW_ITEM_FIELDS if not str(item_data.get(key) or "").strip()]


def from_item_data(
    user_id: str, item_data: Dict[str, Any], ai_analysis: Optional[Dict[str, Any]] = None
) -> WardrobeItem:
    """Build a :class:`WardrobeItem` from the add-item form.

    User-entered values win; the classifier fills the blanks.
    """

    missing = missing_new_item_fields(item_data)
    if missing:
        raise ValueError(f"Missing required fields for wardrobe item: {missing}")

    analysis = ai_analysis or {}
    return WardrobeItem(
        user_id=user_id,
        name=str(item_data["name"]),
        photo_url=str(item_data["photoUrl"]),
        category=item_data.get("category") or analysis.get("category"),
        color=item_data.get("color") or analysis.get("color"),
        size=item_data.get("size") or analysis.get("estimatedSize"),
        ai_analysis=ai_analysis,
    )


__all__ = ["WardrobeItem", "from_item_data", "missing_new_item_fields", "utc_now_iso"]
