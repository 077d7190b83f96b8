"""Dashboard analyses and profile photo operations for a signed-in user."""

from __future__ import annotations

import logging
import random
from typing import List, Optional
from urllib.parse import unquote, urlparse

from fitroom_app.logging_config import get_logger, log_event
from memory.analysis_store import FitAnalysisStore
from memory.user_profile import ProfileStore
from models.fit_analysis import FitAnalysisRecord, UserProfile, recommendation_for_score
from tools.product_page_fetcher import validate_url

logger = get_logger(__name__)

PLACEHOLDER_SCORE_RANGE = (60, 100)


def clothing_name_from_url(url: str) -> str:
    """Derive a readable garment name from the last path segment of a URL."""

    parsed = urlparse(url)
    segments = [segment for segment in parsed.path.split("/") if segment]
    if not segments:
        return parsed.netloc or "Clothing Item"
    slug = unquote(segments[-1]).rsplit(".", 1)[0]
    words = [word for word in slug.replace("_", "-").split("-") if word and not word.isdigit()]
    return " ".join(words).title() or "Clothing Item"


class DashboardAgent:
    """Creates and lists ``fit_analyses`` rows and manages the stored photo.

    Records created here carry a locally generated placeholder score; the
    wizard's live fit assessment is never persisted.
    """

    def __init__(
        self,
        analyses: FitAnalysisStore,
        profiles: ProfileStore,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.analyses = analyses
        self.profiles = profiles
        self.rng = rng or random.Random()

    def create_analysis(
        self,
        user_id: str,
        clothing_url: str,
        preferred_size: str = "M",
        clothing_name: Optional[str] = None,
    ) -> FitAnalysisRecord:
        validate_url(clothing_url)
        score = self.rng.randint(*PLACEHOLDER_SCORE_RANGE)
        record = FitAnalysisRecord(
            user_id=user_id,
            clothing_name=clothing_name or clothing_name_from_url(clothing_url),
            clothing_url=clothing_url,
            preferred_size=preferred_size,
            fit_score=score,
            recommendation=recommendation_for_score(score),
        )
        stored = self.analyses.create_analysis(record)
        log_event(logger, logging.INFO, "fit_analysis_created", user_id=user_id, fit_score=score)
        return stored

    def list_analyses(self, user_id: str) -> List[FitAnalysisRecord]:
        return self.analyses.list_analyses(user_id)

    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        return self.profiles.get_profile(user_id)

    def save_photo(self, user_id: str, photo_url: Optional[str]) -> UserProfile:
        return self.profiles.upsert_photo(user_id, photo_url)


__all__ = ["DashboardAgent", "PLACEHOLDER_SCORE_RANGE", "clothing_name_from_url"]
