"""Self-reported body measurements and unit helpers."""

from __future__ import annotations

from dataclasses import dataclass

INCHES_PER_FOOT = 12
CM_PER_INCH = 2.54
LBS_PER_KG = 2.20462


def total_inches(feet: int, inches: int) -> int:
    """Combine a feet + inches height entry into total inches."""

    if feet < 0 or inches < 0:
        raise ValueError("height components must be non-negative")
    if inches >= INCHES_PER_FOOT:
        raise ValueError("inches must be below 12; carry the remainder into feet")
    return feet * INCHES_PER_FOOT + inches


def split_inches(height_inches: int) -> tuple[int, int]:
    return divmod(height_inches, INCHES_PER_FOOT)


def cm_to_inches(cm: float) -> int:
    return round(cm / CM_PER_INCH)


def kg_to_lbs(kg: float) -> int:
    return round(kg * LBS_PER_KG)


@dataclass
class UserMeasurements:
    """Height in inches, weight in pounds and the preferred size label."""

    height_inches: int = cm_to_inches(170)
    weight_lbs: int = kg_to_lbs(70)
    preferred_size: str = "M"

    def __post_init__(self) -> None:
        if self.height_inches <= 0:
            raise ValueError("height must be positive")
        if self.weight_lbs <= 0:
            raise ValueError("weight must be positive")
        self.preferred_size = str(self.preferred_size).strip() or "M"

    @classmethod
    def from_feet_inches(
        cls, feet: int, inches: int, weight_lbs: int, preferred_size: str = "M"
    ) -> "UserMeasurements":
        return cls(
            height_inches=total_inches(feet, inches),
            weight_lbs=weight_lbs,
            preferred_size=preferred_size,
        )

    def to_payload(self) -> dict:
        return {
            "height": self.height_inches,
            "weight": self.weight_lbs,
            "preferredSize": self.preferred_size,
        }


__all__ = [
    "UserMeasurements",
    "cm_to_inches",
    "kg_to_lbs",
    "split_inches",
    "total_inches",
]
