"""Two-stage fit scoring: body estimation, then per-garment fit comparison."""

from __future__ import annotations

import logging
from statistics import mean
from typing import List, Optional

from fitroom_app.logging_config import get_logger, log_event, operation_context
from logic.prompts import FIT_ANALYSIS_SYSTEM, body_analysis_prompts, fit_analysis_prompt
from logic.response_parsing import extract_json_object
from models.clothing_item import ClothingItem
from models.fit_assessment import FitAssessment, ItemScore, clamp_score
from models.measurements import UserMeasurements
from tools.chat_model import ChatModel, system_message, user_message

logger = get_logger(__name__)

FALLBACK_FIT_SCORE = 85
DEFAULT_PARSED_SCORE = 75
BODY_ANALYSIS_MAX_TOKENS = 500
FIT_ANALYSIS_MAX_TOKENS = 800
_RECOMMENDATION_PREVIEW = 200


class FitScoringAgent:
    """Scores how garments fit a user from a photo and measurements.

    Both model calls run sequentially. A reply that does not contain a JSON
    object degrades to a fixed score of 85 instead of failing.
    """

    def __init__(self, model: ChatModel) -> None:
        self.model = model

    def estimate_body(self, photo: Optional[str], measurements: UserMeasurements) -> str:
        system_text, user_text = body_analysis_prompts(measurements)
        reply = self.model.complete(
            [system_message(system_text), user_message(user_text, image_url=photo)],
            max_tokens=BODY_ANALYSIS_MAX_TOKENS,
        )
        return reply.strip()

    def score_item(
        self, item: ClothingItem, body_analysis: str, measurements: UserMeasurements
    ) -> FitAssessment:
        reply = self.model.complete(
            [
                system_message(FIT_ANALYSIS_SYSTEM),
                user_message(fit_analysis_prompt(item, body_analysis, measurements)),
            ],
            max_tokens=FIT_ANALYSIS_MAX_TOKENS,
        )
        size = item.selected_size or measurements.preferred_size
        try:
            parsed = extract_json_object(reply)
        except ValueError:
            log_event(logger, logging.WARNING, "fit_reply_not_json", reply_length=len(reply))
            return self._fallback_assessment(reply, size, measurements, body_analysis)

        raw_score = parsed.get("fitScore")
        return FitAssessment(
            fit_score=clamp_score(raw_score, DEFAULT_PARSED_SCORE),
            recommendation=str(parsed.get("recommendation") or "Good fit expected"),
            size_advice=str(parsed.get("sizeAdvice") or f"Size {size} recommended"),
            alternative_size=parsed.get("alternativeSize") or None,
            fit_details=str(parsed.get("fitDetails") or ""),
            body_analysis=body_analysis,
        )

    @staticmethod
    def _fallback_assessment(
        reply: str, size: str, measurements: UserMeasurements, body_analysis: str
    ) -> FitAssessment:
        content = reply.strip()
        recommendation = content[:_RECOMMENDATION_PREVIEW] or (
            f"Size {size} should be a comfortable fit for your measurements."
        )
        return FitAssessment(
            fit_score=FALLBACK_FIT_SCORE,
            recommendation=recommendation,
            size_advice=(
                f"Based on your measurements ({measurements.height_inches}in, "
                f"{measurements.weight_lbs}lbs), size {size} should work well."
            ),
            alternative_size=None,
            fit_details=content,
            body_analysis=body_analysis,
        )

    def analyze(
        self,
        photo: Optional[str],
        items: List[ClothingItem],
        measurements: UserMeasurements,
        multi_item: bool = False,
    ) -> FitAssessment:
        """Run the pipeline for one garment, or for an outfit when ``multi_item``."""

        if not items:
            raise ValueError("At least one clothing item is required")

        with operation_context("agent:fit_scoring.analyze") as correlation_id:
            body_analysis = self.estimate_body(photo, measurements)
            if not multi_item or len(items) == 1:
                assessment = self.score_item(items[0], body_analysis, measurements)
            else:
                assessment = self._score_outfit(items, body_analysis, measurements)

            log_event(
                logger,
                logging.INFO,
                "fit_analysis_completed",
                correlation_id=correlation_id,
                items=len(items),
                multi_item=multi_item,
                fit_score=assessment.fit_score,
            )
            return assessment

    def _score_outfit(
        self, items: List[ClothingItem], body_analysis: str, measurements: UserMeasurements
    ) -> FitAssessment:
        per_item = [self.score_item(item, body_analysis, measurements) for item in items]
        item_scores = [
            ItemScore(
                name=item.name,
                size=item.selected_size or measurements.preferred_size,
                fit_score=result.fit_score,
                recommendation=result.recommendation,
            )
            for item, result in zip(items, per_item)
        ]
        overall = round(mean(score.fit_score for score in item_scores))
        summary = outfit_compatibility_summary(item_scores)
        return FitAssessment(
            fit_score=overall,
            recommendation=summary,
            size_advice="; ".join(f"{score.name}: size {score.size}" for score in item_scores),
            alternative_size=None,
            fit_details="\n\n".join(
                f"{item.name}: {result.fit_details}" for item, result in zip(items, per_item) if result.fit_details
            ),
            body_analysis=body_analysis,
            overall_score=overall,
            item_scores=item_scores,
            outfit_compatibility=summary,
            overlay_image=None,
        )


def outfit_compatibility_summary(item_scores: List[ItemScore]) -> str:
    weakest = min(item_scores, key=lambda score: score.fit_score)
    lowest, highest = weakest.fit_score, max(score.fit_score for score in item_scores)
    if lowest >= 80:
        verdict = "Every piece in this outfit should fit you well."
    elif lowest >= 60:
        verdict = f"Most pieces fit well; check the sizing on {weakest.name}."
    else:
        verdict = f"{weakest.name} is unlikely to fit in size {weakest.size}; consider another size."
    return f"{len(item_scores)} items scored {lowest}-{highest}. {verdict}"


__all__ = ["FALLBACK_FIT_SCORE", "FitScoringAgent", "outfit_compatibility_summary"]
