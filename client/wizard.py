"""Three-step virtual fitting wizard.

Step 1 collects garments by URL, each confirmed through a size-selection
modal. Step 2 takes the user photo and measurements. Step 3 shows the
assessment. Forward moves happen only through each step's primary action;
going back to an earlier step is always allowed.
"""

from __future__ import annotations

import enum
import logging
import random
from collections import Counter
from typing import Any, Dict, List, Optional, Protocol

from client.api_client import ApiError
from client.notifications import ClientValidationError, ToastQueue
from client.progress import ProgressTracker
from fitroom_app.logging_config import get_logger, log_event
from models.clothing_item import ClothingItem
from models.fit_assessment import FitAssessment, ItemScore
from models.fit_analysis import recommendation_for_score
from models.measurements import UserMeasurements

LOGGER = get_logger(__name__)

PLACEHOLDER_ITEM_SCORE_RANGE = (60, 100)


class WizardBackend(Protocol):
    def scrape_clothing(self, url: str) -> Dict[str, Any]: ...

    def analyze_fit(
        self, user_photo: str, items: List[Dict[str, Any]], measurements: UserMeasurements
    ) -> Dict[str, Any]: ...

    def get_profile(self) -> Optional[Dict[str, Any]]: ...


class WizardStep(enum.IntEnum):
    COLLECT_ITEMS = 1
    UPLOAD_PHOTO = 2
    RESULTS = 3


class FitWizard:
    """State machine behind the try-on flow."""

    def __init__(
        self,
        backend: WizardBackend,
        toasts: Optional[ToastQueue] = None,
        rng: Optional[random.Random] = None,
        progress_interval: Optional[float] = None,
    ) -> None:
        self.backend = backend
        self.toasts = toasts or ToastQueue()
        self.rng = rng or random.Random()
        self.progress_interval = progress_interval
        self.reset()

    def reset(self) -> None:
        self.step = WizardStep.COLLECT_ITEMS
        self.outfit: List[ClothingItem] = []
        self.pending_item: Optional[ClothingItem] = None
        self.user_photo: Optional[str] = None
        self.measurements: Optional[UserMeasurements] = None
        self.assessment: Optional[FitAssessment] = None
        self.progress: Optional[ProgressTracker] = None

    @property
    def size_modal_open(self) -> bool:
        return self.pending_item is not None

    def _reject(self, title: str, message: str) -> None:
        self.toasts.error(title, message)
        raise ClientValidationError(title, message)

    def _new_progress(self) -> ProgressTracker:
        self.progress = ProgressTracker(interval=self.progress_interval, rng=self.rng)
        return self.progress

    # Step 1 -----------------------------------------------------------------

    def extract_item(self, url: str) -> Optional[ClothingItem]:
        """Scrape ``url`` and open the size modal for the extracted garment."""

        if self.step is not WizardStep.COLLECT_ITEMS:
            self._reject("Wrong step", "Go back to the first step to add clothing")
        if not url or not url.strip():
            self._reject("URL required", "Please enter a clothing URL")

        try:
            with self._new_progress():
                payload = self.backend.scrape_clothing(url.strip())
        except ApiError as exc:
            log_event(LOGGER, logging.WARNING, "wizard_extract_failed", error=str(exc))
            self.toasts.error("Extraction failed", str(exc))
            return None

        self.pending_item = ClothingItem.from_payload(payload)
        return self.pending_item

    def select_size(self, size: str) -> None:
        if self.pending_item is None:
            self._reject("No item", "Extract a clothing item first")
        try:
            self.pending_item.select_size(size)
        except ValueError as exc:
            self._reject("Invalid size", str(exc))

    def confirm_size(self) -> ClothingItem:
        item = self.pending_item
        if item is None:
            self._reject("No item", "Extract a clothing item first")
        if not item.selected_size:
            self._reject("Size required", "Please select a size")
        self.outfit.append(item)
        self.pending_item = None
        self.toasts.success("Item added", f"{item.name} ({item.selected_size}) added to your outfit")
        return item

    def dismiss_size_modal(self) -> None:
        self.pending_item = None

    def remove_item(self, index: int) -> ClothingItem:
        return self.outfit.pop(index)

    def continue_to_photo(self) -> None:
        if self.step is not WizardStep.COLLECT_ITEMS:
            self._reject("Wrong step", "Already past item selection")
        if not self.outfit:
            self._reject("No items", "Add at least one clothing item with a size")
        self.step = WizardStep.UPLOAD_PHOTO
        if self.user_photo is None:
            self.load_stored_photo()

    # Step 2 -----------------------------------------------------------------

    def load_stored_photo(self) -> Optional[str]:
        try:
            profile = self.backend.get_profile()
        except ApiError as exc:
            self.toasts.error("Profile unavailable", str(exc))
            return None
        if profile and profile.get("photo_url"):
            self.user_photo = profile["photo_url"]
        return self.user_photo

    def upload_photo(self, photo: str) -> None:
        if not photo:
            self._reject("Photo required", "Please choose a photo to upload")
        self.user_photo = photo

    def set_measurements(
        self, feet: int, inches: int, weight_lbs: int, preferred_size: str = "M"
    ) -> UserMeasurements:
        try:
            self.measurements = UserMeasurements.from_feet_inches(
                feet, inches, weight_lbs, preferred_size
            )
        except ValueError as exc:
            self._reject("Invalid measurements", str(exc))
        return self.measurements

    def analyze(self) -> Optional[FitAssessment]:
        if self.step is not WizardStep.UPLOAD_PHOTO:
            self._reject("Wrong step", "Add your photo before analyzing")
        if not self.user_photo:
            self._reject("Photo required", "Please upload a photo first")
        if self.measurements is None:
            self._reject("Measurements required", "Please enter your height and weight")
        if not self.outfit:
            self._reject("No items", "Add at least one clothing item with a size")

        payloads = [item.to_payload() for item in self.outfit]
        try:
            with self._new_progress():
                result = self.backend.analyze_fit(self.user_photo, payloads, self.measurements)
        except ApiError as exc:
            log_event(LOGGER, logging.WARNING, "wizard_analysis_failed", error=str(exc))
            self.toasts.error("Analysis failed", str(exc))
            return None

        assessment = FitAssessment.from_payload(result)
        if len(self.outfit) > 1:
            self._fill_missing_item_scores(assessment)
        self.assessment = assessment
        self.step = WizardStep.RESULTS
        return assessment

    def _fill_missing_item_scores(self, assessment: FitAssessment) -> None:
        scored = Counter((entry.name, entry.size) for entry in assessment.item_scores)
        for item in self.outfit:
            key = (item.name, item.selected_size or "")
            if scored[key]:
                scored[key] -= 1
                continue
            score = self.rng.randint(*PLACEHOLDER_ITEM_SCORE_RANGE)
            assessment.item_scores.append(
                ItemScore(
                    name=item.name,
                    size=item.selected_size or "",
                    fit_score=score,
                    recommendation=recommendation_for_score(score),
                )
            )
        if assessment.overall_score is None:
            scores = [entry.fit_score for entry in assessment.item_scores]
            assessment.overall_score = round(sum(scores) / len(scores))

    # Navigation -------------------------------------------------------------

    def go_to(self, step: WizardStep) -> None:
        """Move back to an earlier step; forward jumps are refused."""

        if step == self.step:
            return
        if step > self.step:
            self._reject("Step locked", "Complete the current step first")
        self.step = step


__all__ = ["FitWizard", "PLACEHOLDER_ITEM_SCORE_RANGE", "WizardBackend", "WizardStep"]
