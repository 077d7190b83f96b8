"""Chat-completion model clients used by the fit scorer and photo classifier."""

from __future__ import annotations

import base64
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import google.generativeai as genai
import requests
from google.api_core import exceptions as google_exceptions

from fitroom_app.config import ModelSettings
from fitroom_app.errors import MissingCredentialError, UpstreamServiceError
from tools.observability import instrument_tool

LOGGER = logging.getLogger(__name__)

Message = Dict[str, Any]


def system_message(text: str) -> Message:
    return {"role": "system", "content": text}


def user_message(text: str, image_url: Optional[str] = None) -> Message:
    """Build a user turn, attaching an image part when a photo is given."""

    if not image_url:
        return {"role": "user", "content": text}
    return {
        "role": "user",
        "content": [
            {"type": "text", "text": text},
            {"type": "image_url", "image_url": {"url": image_url}},
        ],
    }


class ChatModel(ABC):
    """Abstract chat model: a list of messages in, reply text out."""

    def __init__(self, settings: ModelSettings, timeout_seconds: float = 60.0) -> None:
        self.settings = settings
        self.timeout_seconds = timeout_seconds

    def _require_key(self) -> str:
        if not self.settings.api_key:
            raise MissingCredentialError(f"{self.settings.label} API key not configured")
        return self.settings.api_key

    @abstractmethod
    def complete(self, messages: List[Message], max_tokens: Optional[int] = None) -> str:
        """Return the text of the first reply choice."""


class OpenAICompatibleChatModel(ChatModel):
    """Client for any OpenAI-style ``/chat/completions`` endpoint (OpenAI, Groq)."""

    @instrument_tool("chat_completion")
    def complete(self, messages: List[Message], max_tokens: Optional[int] = None) -> str:
        api_key = self._require_key()
        body = {
            "model": self.settings.model,
            "messages": messages,
            "max_tokens": max_tokens or self.settings.max_tokens,
        }
        try:
            response = requests.post(
                self.settings.api_url,
                headers={
                    "Authorization": f"Bearer {api_key}",
                    "Content-Type": "application/json",
                },
                json=body,
                timeout=self.timeout_seconds,
            )
        except requests.RequestException as exc:
            raise UpstreamServiceError(f"{self.settings.label} API unreachable: {exc}") from exc

        if not 200 <= response.status_code < 300:
            LOGGER.warning(
                "Non-success status from chat model",
                extra={"provider": self.settings.label, "status_code": response.status_code},
            )
            raise UpstreamServiceError(
                f"{self.settings.label} API error: {response.status_code} - {response.text}",
                status_code=response.status_code,
            )

        payload = response.json()
        choices = payload.get("choices") or [{}]
        message = choices[0].get("message") or {}
        return message.get("content") or ""


def _image_part(url: str, timeout: float) -> Dict[str, Any]:
    """Turn a data URI or hosted image URL into an inline Gemini blob."""

    if url.startswith("data:"):
        header, _, encoded = url.partition(",")
        mime_type = header[len("data:"):].split(";")[0] or "image/jpeg"
        return {"mime_type": mime_type, "data": base64.b64decode(encoded)}

    response = requests.get(url, timeout=timeout)
    if not 200 <= response.status_code < 300:
        raise UpstreamServiceError(
            f"Failed to fetch image {url}: HTTP {response.status_code}",
            status_code=response.status_code,
        )
    mime_type = response.headers.get("Content-Type", "image/jpeg").split(";")[0]
    return {"mime_type": mime_type, "data": response.content}


class GeminiChatModel(ChatModel):
    """Google Gemini backend speaking the same message format."""

    def _to_gemini(self, messages: List[Message]) -> tuple[Optional[str], List[Any]]:
        system_parts: List[str] = []
        parts: List[Any] = []
        for message in messages:
            content = message.get("content")
            if message.get("role") == "system":
                system_parts.append(str(content))
                continue
            if isinstance(content, str):
                parts.append(content)
                continue
            for part in content or []:
                if part.get("type") == "text":
                    parts.append(part["text"])
                elif part.get("type") == "image_url":
                    parts.append(_image_part(part["image_url"]["url"], self.timeout_seconds))
        return ("\n\n".join(system_parts) or None), parts

    @instrument_tool("gemini_generate_content")
    def complete(self, messages: List[Message], max_tokens: Optional[int] = None) -> str:
        api_key = self._require_key()
        genai.configure(api_key=api_key)
        system_instruction, parts = self._to_gemini(messages)
        model = genai.GenerativeModel(self.settings.model, system_instruction=system_instruction)
        try:
            response = model.generate_content(
                parts,
                generation_config={"max_output_tokens": max_tokens or self.settings.max_tokens},
                request_options={"timeout": self.timeout_seconds},
            )
        except google_exceptions.GoogleAPICallError as exc:
            raise UpstreamServiceError(
                f"{self.settings.label} API error: {exc.code} - {exc.message}",
                status_code=int(exc.code) if exc.code else None,
            ) from exc
        return response.text or ""


def build_chat_model(settings: ModelSettings, timeout_seconds: float = 60.0) -> ChatModel:
    if settings.provider == "gemini":
        return GeminiChatModel(settings, timeout_seconds=timeout_seconds)
    if settings.provider == "openai":
        return OpenAICompatibleChatModel(settings, timeout_seconds=timeout_seconds)
    raise ValueError(f"Unsupported model provider: {settings.provider}")


__all__ = [
    "ChatModel",
    "GeminiChatModel",
    "OpenAICompatibleChatModel",
    "build_chat_model",
    "system_message",
    "user_message",
]
