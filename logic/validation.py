"""Pydantic schemas for the HTTP request payloads."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ScrapeRequest(_CamelModel):
    """Body of ``POST /scrape-clothing``."""

    url: str = Field(min_length=1)

    @field_validator("url")
    @classmethod
    def _strip(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("url must not be blank")
        return stripped


class UserDataPayload(_CamelModel):
    height: float = Field(ge=1, description="Height in inches")
    weight: float = Field(ge=1, description="Weight in pounds")
    preferred_size: str = Field("M", alias="preferredSize")


class AnalyzeFitRequest(_CamelModel):
    """Body of ``POST /analyze-fit``.

    ``items`` plus ``multiItem`` select the outfit mode; otherwise
    ``clothingData`` describes the single garment.
    """

    user_photo: Optional[str] = Field(None, alias="userPhoto")
    clothing_data: Optional[Dict[str, Any]] = Field(None, alias="clothingData")
    user_data: UserDataPayload = Field(alias="userData")
    items: List[Dict[str, Any]] = Field(default_factory=list)
    multi_item: bool = Field(False, alias="multiItem")

    @field_validator("items")
    @classmethod
    def _items_are_objects(cls, value: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return [item for item in value if item]

    def garments(self) -> List[Dict[str, Any]]:
        if self.multi_item and self.items:
            return self.items
        if self.clothing_data:
            return [self.clothing_data]
        if self.items:
            return self.items[:1]
        raise ValueError("clothingData or items is required")


class WardrobeRequest(_CamelModel):
    """Body of ``POST /wardrobe-management``."""

    action: str = Field(min_length=1)
    item_data: Dict[str, Any] = Field(default_factory=dict, alias="itemData")
    item_id: Optional[str] = Field(None, alias="itemId")


class ProfilePhotoRequest(_CamelModel):
    photo_url: Optional[str] = Field(None, alias="photoUrl")


class CreateAnalysisRequest(_CamelModel):
    clothing_url: str = Field(alias="clothingUrl", min_length=1)
    clothing_name: Optional[str] = Field(None, alias="clothingName")
    preferred_size: str = Field("M", alias="preferredSize")


class MagicLinkRequest(_CamelModel):
    email: str = Field(min_length=3, pattern=r"^[^@\s]+@[^@\s]+$")
    redirect_to: Optional[str] = Field(None, alias="redirectTo")


__all__ = [
    "AnalyzeFitRequest",
    "CreateAnalysisRequest",
    "MagicLinkRequest",
    "ProfilePhotoRequest",
    "ScrapeRequest",
    "UserDataPayload",
    "WardrobeRequest",
]
