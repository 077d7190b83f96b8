"""Wardrobe management actions dispatched from the wardrobe endpoint."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

from agents.photo_classifier import PhotoClassifierAgent
from fitroom_app.errors import MissingCredentialError, StoreError, UpstreamServiceError
from fitroom_app.logging_config import get_logger, log_event, operation_context
from logic.validation import WardrobeRequest
from models.wardrobe_item import from_item_data, missing_new_item_fields
from tools.observability import instrument_tool
from tools.wardrobe_store import WardrobeStore

logger = get_logger(__name__)


class WardrobeManagerAgent:
    """Add, list, delete and analyze wardrobe items for one authenticated user."""

    def __init__(self, store: WardrobeStore, classifier: PhotoClassifierAgent) -> None:
        self.store = store
        self.classifier = classifier
        self._actions: Dict[str, Callable[[str, WardrobeRequest], Dict[str, Any]]] = {
            "add_item": lambda user_id, req: self.add_item(user_id, req.item_data),
            "get_items": lambda user_id, req: self.list_items(user_id),
            "delete_item": lambda user_id, req: self.delete_item(user_id, req.item_id),
            "analyze_photo": lambda user_id, req: self.analyze_photo(req.item_data.get("photoUrl")),
        }

    def handle(self, user_id: str, request: WardrobeRequest) -> Dict[str, Any]:
        handler = self._actions.get(request.action)
        if handler is None:
            raise ValueError(f"Unknown action: {request.action}")
        with operation_context(f"agent:wardrobe.{request.action}"):
            return handler(user_id, request)

    @instrument_tool("add_wardrobe_item")
    def add_item(self, user_id: str, item_data: Dict[str, Any]) -> Dict[str, Any]:
        missing = missing_new_item_fields(item_data)
        if missing:
            raise ValueError(f"Missing required fields: {', '.join(missing)}")

        ai_analysis: Optional[Dict[str, Any]] = None
        analysis_error: Optional[str] = None
        if item_data.get("analyzeWithAI"):
            try:
                ai_analysis = self.classifier.classify(str(item_data["photoUrl"]))
            except (MissingCredentialError, UpstreamServiceError) as exc:
                log_event(
                    logger,
                    logging.WARNING,
                    "wardrobe_ai_analysis_failed",
                    user_id=user_id,
                    error=str(exc),
                )
                analysis_error = str(exc)

        item = from_item_data(user_id, item_data, ai_analysis=ai_analysis)
        try:
            stored = self.store.create_item(item)
        except StoreError as exc:
            log_event(logger, logging.ERROR, "wardrobe_insert_failed", user_id=user_id, error=str(exc))
            return {"success": False, "error": str(exc), "item": item.to_row()}

        response: Dict[str, Any] = {"success": True, "item": stored.to_row()}
        if analysis_error:
            response["analysisError"] = analysis_error
        return response

    @instrument_tool("list_wardrobe_items")
    def list_items(self, user_id: str) -> Dict[str, Any]:
        items = self.store.list_items_for_user(user_id)
        return {"success": True, "items": [item.to_row() for item in items]}

    @instrument_tool("delete_wardrobe_item")
    def delete_item(self, user_id: str, item_id: Optional[str]) -> Dict[str, Any]:
        if not item_id:
            raise ValueError("itemId is required")
        deleted = self.store.delete_item(user_id, item_id)
        if not deleted:
            log_event(logger, logging.INFO, "wardrobe_delete_no_match", user_id=user_id, item_id=item_id)
            return {"success": True, "message": "No matching item found", "deleted": False}
        return {"success": True, "message": "Item deleted successfully", "deleted": True}

    @instrument_tool("analyze_wardrobe_photo")
    def analyze_photo(self, photo_url: Optional[str]) -> Dict[str, Any]:
        analysis = self.classifier.classify(str(photo_url or ""))
        return {"success": True, "analysis": analysis}


__all__ = ["WardrobeManagerAgent"]
