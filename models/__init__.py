"""Model package exports."""

from models.clothing_item import ClothingItem, from_scraped_payload
from models.fit_analysis import FitAnalysisRecord, UserProfile, recommendation_for_score
from models.fit_assessment import FitAssessment, ItemScore
from models.measurements import UserMeasurements
from models.wardrobe_item import WardrobeItem, from_item_data

__all__ = [
    "ClothingItem",
    "FitAnalysisRecord",
    "FitAssessment",
    "ItemScore",
    "UserMeasurements",
    "UserProfile",
    "WardrobeItem",
    "from_item_data",
    "from_scraped_payload",
    "recommendation_for_score",
]
