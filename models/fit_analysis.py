"""Persisted fit analysis records and user profiles."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional
from uuid import uuid4

from models.wardrobe_item import utc_now_iso

# Lower bound (inclusive) of the score band for each label, best first.
RECOMMENDATION_BANDS = (
    (90, "Definitely Yes"),
    (80, "Probably Yes"),
    (70, "Maybe"),
    (60, "Probably No"),
    (0, "Definitely No"),
)


def recommendation_for_score(score: int) -> str:
    for lower_bound, label in RECOMMENDATION_BANDS:
        if score >= lower_bound:
            return label
    return RECOMMENDATION_BANDS[-1][1]


@dataclass
class FitAnalysisRecord:
    """A row of the ``fit_analyses`` table shown on the dashboard."""

    user_id: str
    clothing_name: str
    clothing_url: str
    preferred_size: str
    fit_score: int
    recommendation: str
    overlay_image: Optional[str] = None
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: str = field(default_factory=utc_now_iso)
    likes: int = 0
    comments: int = 0
    views: int = 0

    def __post_init__(self) -> None:
        if not self.user_id:
            raise ValueError("FitAnalysisRecord requires a user_id")
        if not 0 <= int(self.fit_score) <= 100:
            raise ValueError(f"fit_score must be within 0-100, got {self.fit_score}")
        self.fit_score = int(self.fit_score)

    def to_row(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "FitAnalysisRecord":
        return cls(
            id=str(row["id"]),
            user_id=str(row["user_id"]),
            clothing_name=str(row.get("clothing_name") or ""),
            clothing_url=str(row.get("clothing_url") or ""),
            preferred_size=str(row.get("preferred_size") or ""),
            fit_score=int(row.get("fit_score") or 0),
            recommendation=str(row.get("recommendation") or ""),
            overlay_image=row.get("overlay_image"),
            created_at=str(row.get("created_at") or utc_now_iso()),
            likes=int(row.get("likes") or 0),
            comments=int(row.get("comments") or 0),
            views=int(row.get("views") or 0),
        )


@dataclass
class UserProfile:
    """One ``user_profiles`` row; upserted by ``user_id``."""

    user_id: str
    photo_url: Optional[str] = None
    updated_at: str = field(default_factory=utc_now_iso)

    def to_row(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "UserProfile":
        return cls(
            user_id=str(row["user_id"]),
            photo_url=row.get("photo_url"),
            updated_at=str(row.get("updated_at") or utc_now_iso()),
        )


__all__ = [
    "FitAnalysisRecord",
    "RECOMMENDATION_BANDS",
    "UserProfile",
    "recommendation_for_score",
]
