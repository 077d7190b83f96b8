"""Dashboard, wardrobe and landing page controllers."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from client.api_client import ApiError, FitRoomClient
from client.notifications import ClientValidationError, ToastQueue
from fitroom_app.logging_config import get_logger, log_event
from memory.auth_session import AuthSessionProvider
from models.fit_analysis import recommendation_for_score
from tools.product_page_fetcher import is_valid_product_url

LOGGER = get_logger(__name__)

# Badge colour per recommendation label.
RECOMMENDATION_COLOURS = {
    "Definitely Yes": "green",
    "Probably Yes": "blue",
    "Maybe": "yellow",
    "Probably No": "orange",
    "Definitely No": "red",
}

WARDROBE_FORM_FIELDS = ("photoUrl", "name", "category", "color", "size")


def recommendation_badge(score: int) -> Dict[str, str]:
    label = recommendation_for_score(score)
    return {"label": label, "colour": RECOMMENDATION_COLOURS[label]}


def landing_content() -> Dict[str, Any]:
    """Static copy for the signed-out landing page."""

    return {
        "title": "Virtual Fitting Room",
        "tagline": "See how clothes fit before you buy.",
        "features": [
            {
                "title": "Paste any product link",
                "description": "We pull the name, price, sizes and size chart from the store page.",
            },
            {
                "title": "AI fit analysis",
                "description": "Your photo and measurements are compared against the size chart.",
            },
            {
                "title": "Build full outfits",
                "description": "Try several pieces together and get an overall outfit score.",
            },
            {
                "title": "Digital wardrobe",
                "description": "Keep the clothes you own, auto-tagged from a single photo.",
            },
        ],
        "steps": ["Add clothing", "Upload your photo", "Get your fit score"],
        "cta": "Sign in with a magic link",
    }


class _Page:
    def __init__(self, backend: FitRoomClient, toasts: Optional[ToastQueue] = None) -> None:
        self.backend = backend
        self.toasts = toasts or ToastQueue()

    def _reject(self, title: str, message: str) -> None:
        self.toasts.error(title, message)
        raise ClientValidationError(title, message)


class DashboardPage(_Page):
    """Gallery of the user's saved fit analyses."""

    def __init__(
        self,
        backend: FitRoomClient,
        auth: AuthSessionProvider,
        toasts: Optional[ToastQueue] = None,
    ) -> None:
        super().__init__(backend, toasts)
        self.auth = auth
        self.analyses: List[Dict[str, Any]] = []

    def load(self) -> List[Dict[str, Any]]:
        if not self.auth.is_authenticated:
            self.analyses = []
            return self.analyses
        try:
            self.analyses = self.backend.list_analyses()
        except ApiError as exc:
            self.toasts.error("Could not load analyses", str(exc))
        return self.analyses

    def create_analysis(self, clothing_url: str, preferred_size: str = "M") -> Optional[Dict[str, Any]]:
        if not self.auth.is_authenticated:
            self._reject("Sign in required", "Please sign in to analyze clothing")
        if not is_valid_product_url(clothing_url or ""):
            self._reject("Invalid URL", "Please enter a valid http(s) clothing URL")
        try:
            record = self.backend.create_analysis(clothing_url.strip(), preferred_size)
        except ApiError as exc:
            self.toasts.error("Analysis failed", str(exc))
            return None
        self.analyses.insert(0, record)
        self.toasts.success("Analysis saved", f"Fit score: {record['fit_score']}")
        return record


class WardrobePage(_Page):
    """Wardrobe listing plus the add-item form."""

    def __init__(self, backend: FitRoomClient, toasts: Optional[ToastQueue] = None) -> None:
        super().__init__(backend, toasts)
        self.items: List[Dict[str, Any]] = []
        self.profile_photo: Optional[str] = None
        self.form: Dict[str, Any] = {field: "" for field in WARDROBE_FORM_FIELDS}

    def load(self) -> List[Dict[str, Any]]:
        try:
            self.items = self.backend.manage_wardrobe("get_items").get("items", [])
        except ApiError as exc:
            self.toasts.error("Could not load wardrobe", str(exc))
        try:
            profile = self.backend.get_profile()
        except ApiError as exc:
            log_event(LOGGER, logging.WARNING, "wardrobe_profile_fetch_failed", error=str(exc))
        else:
            self.profile_photo = (profile or {}).get("photo_url")
        return self.items

    def analyze_photo(self, photo_url: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """Classify the form photo and fill any blank form fields from the result."""

        photo = photo_url or self.form.get("photoUrl")
        if not photo:
            self._reject("Photo required", "Please add a photo to analyze")
        self.form["photoUrl"] = photo
        try:
            analysis = self.backend.manage_wardrobe("analyze_photo", {"photoUrl": photo}).get("analysis")
        except ApiError as exc:
            self.toasts.error("Analysis failed", str(exc))
            return None
        if not analysis:
            self.toasts.error("Analysis failed", "Could not read the clothing photo")
            return None
        if not self.form.get("name") and analysis.get("description"):
            self.form["name"] = str(analysis["description"])[:60]
        for field in ("category", "color"):
            if not self.form.get(field) and analysis.get(field):
                self.form[field] = analysis[field]
        return analysis

    def add_item(self, analyze_with_ai: bool = False) -> Optional[Dict[str, Any]]:
        if not self.form.get("photoUrl"):
            self._reject("Photo required", "Please add a photo of the item")
        if not str(self.form.get("name") or "").strip():
            self._reject("Name required", "Please enter a name for the item")
        if not self.form.get("category"):
            self._reject("Category required", "Please choose a category")

        item_data = {key: value for key, value in self.form.items() if value}
        item_data["analyzeWithAI"] = analyze_with_ai
        try:
            result = self.backend.manage_wardrobe("add_item", item_data)
        except ApiError as exc:
            self.toasts.error("Could not save item", str(exc))
            return None
        if result.get("analysisError"):
            self.toasts.error("AI analysis skipped", result["analysisError"])
        item = result["item"]
        self.items.insert(0, item)
        self.form = {field: "" for field in WARDROBE_FORM_FIELDS}
        self.toasts.success("Item added", f"{item['name']} added to your wardrobe")
        return item

    def delete_item(self, item_id: str) -> bool:
        try:
            result = self.backend.manage_wardrobe("delete_item", item_id=item_id)
        except ApiError as exc:
            self.toasts.error("Could not delete item", str(exc))
            return False
        self.items = [item for item in self.items if item.get("id") != item_id]
        return bool(result.get("deleted", True))


__all__ = [
    "DashboardPage",
    "RECOMMENDATION_COLOURS",
    "WardrobePage",
    "landing_content",
    "recommendation_badge",
]
