"""Transient fit assessment returned by the fit scoring service."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


def clamp_score(value: Any, default: int) -> int:
    """Coerce a model-provided score into an int within 0-100."""

    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return default
    score = int(round(number))
    return max(0, min(100, score))


@dataclass
class ItemScore:
    """Per-garment result inside a multi-item assessment."""

    name: str
    size: str
    fit_score: int
    recommendation: str = ""

    def to_payload(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "size": self.size,
            "fitScore": self.fit_score,
            "recommendation": self.recommendation,
        }


@dataclass
class FitAssessment:
    fit_score: int
    recommendation: str
    size_advice: str
    alternative_size: Optional[str] = None
    fit_details: str = ""
    body_analysis: Optional[str] = None
    overall_score: Optional[int] = None
    item_scores: List[ItemScore] = field(default_factory=list)
    outfit_compatibility: Optional[str] = None
    overlay_image: Optional[str] = None

    @property
    def is_multi_item(self) -> bool:
        return bool(self.item_scores)

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "fitScore": self.fit_score,
            "recommendation": self.recommendation,
            "sizeAdvice": self.size_advice,
            "alternativeSize": self.alternative_size,
            "fitDetails": self.fit_details,
            "bodyAnalysis": self.body_analysis,
        }
        if self.is_multi_item:
            payload.update(
                {
                    "overallScore": self.overall_score,
                    "itemScores": [item.to_payload() for item in self.item_scores],
                    "outfitCompatibility": self.outfit_compatibility,
                    "overlayImage": self.overlay_image,
                }
            )
        return payload

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "FitAssessment":
        item_scores = [
            ItemScore(
                name=str(entry.get("name", "")),
                size=str(entry.get("size", "")),
                fit_score=clamp_score(entry.get("fitScore"), 0),
                recommendation=str(entry.get("recommendation") or ""),
            )
            for entry in payload.get("itemScores") or []
            if isinstance(entry, dict) and entry.get("fitScore") is not None
        ]
        overall = payload.get("overallScore")
        return cls(
            fit_score=clamp_score(payload.get("fitScore"), 0),
            recommendation=str(payload.get("recommendation") or ""),
            size_advice=str(payload.get("sizeAdvice") or ""),
            alternative_size=payload.get("alternativeSize"),
            fit_details=str(payload.get("fitDetails") or ""),
            body_analysis=payload.get("bodyAnalysis"),
            overall_score=clamp_score(overall, 0) if overall is not None else None,
            item_scores=item_scores,
            outfit_compatibility=payload.get("outfitCompatibility"),
            overlay_image=payload.get("overlayImage"),
        )


__all__ = ["FitAssessment", "ItemScore", "clamp_score"]
