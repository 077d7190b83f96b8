"""Application bootstrap wiring stores, model clients and agents together."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from agents.clothing_extraction import ClothingExtractionAgent
from agents.dashboard import DashboardAgent
from agents.fit_scoring import FitScoringAgent
from agents.photo_classifier import PhotoClassifierAgent
from agents.wardrobe_manager import WardrobeManagerAgent
from fitroom_app.config import AppConfig
from fitroom_app.logging_config import configure_logging, get_logger, log_event
from logic.validation import AnalyzeFitRequest, WardrobeRequest
from memory.analysis_store import (
    FitAnalysisStore,
    SQLiteFitAnalysisStore,
    SupabaseFitAnalysisStore,
)
from memory.user_profile import ProfileStore, SQLiteProfileStore, SupabaseProfileStore
from models.clothing_item import ClothingItem
from models.measurements import UserMeasurements
from tools.chat_model import ChatModel, build_chat_model
from tools.identity import (
    AuthenticatedUser,
    IdentityProvider,
    MockIdentityProvider,
    SupabaseIdentityProvider,
)
from tools.scraper_client import ScraperClient
from tools.supabase_client import build_supabase_client
from tools.wardrobe_store import SQLiteWardrobeStore, SupabaseWardrobeStore, WardrobeStore

LOGGER = get_logger(__name__)


class FitRoomApp:
    """Wires configuration, stores, model clients and agents.

    Collaborators can be injected for tests; anything left out is built from
    ``config``.
    """

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        identity: IdentityProvider | None = None,
        wardrobe_store: WardrobeStore | None = None,
        profile_store: ProfileStore | None = None,
        analysis_store: FitAnalysisStore | None = None,
        fit_model: ChatModel | None = None,
        classifier_model: ChatModel | None = None,
        scraper: ScraperClient | None = None,
    ) -> None:
        self.config = config or AppConfig.from_env()
        configure_logging()

        self._supabase = None
        if self.config.store_backend == "supabase":
            self._supabase = build_supabase_client(
                self.config.supabase_url, self.config.supabase_service_key
            )

        self.identity = identity or self._build_identity()
        self.wardrobe_store = wardrobe_store or self._build_wardrobe_store()
        self.profile_store = profile_store or self._build_profile_store()
        self.analysis_store = analysis_store or self._build_analysis_store()

        timeout = self.config.request_timeout_seconds
        self.fit_model = fit_model or build_chat_model(self.config.fit_model, timeout)
        self.classifier_model = classifier_model or build_chat_model(
            self.config.classifier_model, timeout
        )
        self.scraper = scraper or ScraperClient(
            api_key=self.config.scraper_api_key,
            api_url=self.config.scraper_url,
            timeout_seconds=timeout,
        )

        self.extraction = ClothingExtractionAgent(
            self.scraper, html_fallback=self.config.scrape_html_fallback
        )
        self.fit_scoring = FitScoringAgent(self.fit_model)
        self.photo_classifier = PhotoClassifierAgent(self.classifier_model)
        self.wardrobe = WardrobeManagerAgent(self.wardrobe_store, self.photo_classifier)
        self.dashboard = DashboardAgent(self.analysis_store, self.profile_store)

    def _build_identity(self) -> IdentityProvider:
        if self._supabase is not None:
            return SupabaseIdentityProvider(self._supabase)
        LOGGER.warning("No Supabase backend configured; using the offline identity provider")
        return MockIdentityProvider()

    def _build_wardrobe_store(self) -> WardrobeStore:
        if self._supabase is not None:
            return SupabaseWardrobeStore(self._supabase)
        return SQLiteWardrobeStore(self.config.sqlite_path)

    def _build_profile_store(self) -> ProfileStore:
        if self._supabase is not None:
            return SupabaseProfileStore(self._supabase)
        return SQLiteProfileStore(self.config.sqlite_path)

    def _build_analysis_store(self) -> FitAnalysisStore:
        if self._supabase is not None:
            return SupabaseFitAnalysisStore(self._supabase)
        return SQLiteFitAnalysisStore(self.config.sqlite_path)

    def authenticate(self, authorization: Optional[str]) -> AuthenticatedUser:
        return self.identity.resolve_bearer(authorization)

    def scrape_clothing(self, url: str) -> Dict[str, Any]:
        item = self.extraction.extract(url)
        return {"success": True, "data": item.to_payload()}

    def analyze_fit(self, request: AnalyzeFitRequest) -> Dict[str, Any]:
        measurements = UserMeasurements(
            height_inches=round(request.user_data.height),
            weight_lbs=round(request.user_data.weight),
            preferred_size=request.user_data.preferred_size,
        )
        items = [ClothingItem.from_payload(payload) for payload in request.garments()]
        log_event(
            LOGGER,
            logging.INFO,
            "analyze_fit_requested",
            items=len(items),
            multi_item=request.multi_item,
            has_photo=bool(request.user_photo),
        )
        assessment = self.fit_scoring.analyze(
            request.user_photo, items, measurements, multi_item=request.multi_item
        )
        return {"success": True, "analysis": assessment.to_payload()}

    def manage_wardrobe(self, authorization: Optional[str], request: WardrobeRequest) -> Dict[str, Any]:
        user = self.authenticate(authorization)
        return self.wardrobe.handle(user.id, request)


__all__ = ["FitRoomApp"]
