"""Shared fakes for the fitting room tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

from fitroom_app.app import FitRoomApp
from fitroom_app.config import AppConfig, ModelSettings
from tools.chat_model import ChatModel
from tools.identity import AuthenticatedUser, MockIdentityProvider
from tools.scraper_client import ScraperClient


class FakeChatModel(ChatModel):
    """Returns canned replies in order and records every call."""

    def __init__(self, replies: Optional[List[str]] = None, label: str = "Fake") -> None:
        super().__init__(ModelSettings(api_key="test-key", label=label))
        self.replies = list(replies or [])
        self.calls: List[Dict[str, Any]] = []

    def complete(self, messages, max_tokens=None) -> str:
        self.calls.append({"messages": messages, "max_tokens": max_tokens})
        if not self.replies:
            return ""
        return self.replies.pop(0)


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, text: str = "") -> None:
        self.status_code = status_code
        self._payload = payload if payload is not None else {}
        self.text = text
        self.headers: Dict[str, str] = {}
        self.content = b""

    def json(self) -> Any:
        return self._payload


ALICE = AuthenticatedUser(id="user-alice", email="alice@example.com")
BOB = AuthenticatedUser(id="user-bob", email="bob@example.com")


@pytest.fixture()
def identity() -> MockIdentityProvider:
    return MockIdentityProvider({"alice-token": ALICE, "bob-token": BOB})


@pytest.fixture()
def fit_model() -> FakeChatModel:
    return FakeChatModel(label="Groq")


@pytest.fixture()
def classifier_model() -> FakeChatModel:
    return FakeChatModel(label="OpenAI")


@pytest.fixture()
def fitroom(
    tmp_path: Path,
    identity: MockIdentityProvider,
    fit_model: FakeChatModel,
    classifier_model: FakeChatModel,
) -> FitRoomApp:
    config = AppConfig(sqlite_path=str(tmp_path / "fitroom.db"))
    return FitRoomApp(
        config,
        identity=identity,
        fit_model=fit_model,
        classifier_model=classifier_model,
        scraper=ScraperClient(api_key=None),
    )
