"""Clothing photo classification shared by wardrobe add and analyze."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fitroom_app.logging_config import get_logger, log_event
from logic.prompts import CLASSIFY_PHOTO_PROMPT
from logic.response_parsing import parse_strict_json
from tools.chat_model import ChatModel, user_message

logger = get_logger(__name__)

CLASSIFY_MAX_TOKENS = 1000


class PhotoClassifierAgent:
    """Asks a vision model for a strict-JSON description of one garment photo.

    A reply that is not a single JSON object yields ``None``; there is no
    partial-field recovery.
    """

    def __init__(self, model: ChatModel) -> None:
        self.model = model

    def classify(self, photo_url: str) -> Optional[Dict[str, Any]]:
        if not photo_url:
            raise ValueError("photoUrl is required for photo analysis")
        reply = self.model.complete(
            [user_message(CLASSIFY_PHOTO_PROMPT, image_url=photo_url)],
            max_tokens=CLASSIFY_MAX_TOKENS,
        )
        parsed = parse_strict_json(reply)
        if parsed is None:
            log_event(logger, logging.WARNING, "photo_analysis_unparseable", reply=reply)
        return parsed


__all__ = ["PhotoClassifierAgent"]
