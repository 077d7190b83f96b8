"""Wardrobe store and the wardrobe management actions."""

import json
from pathlib import Path

import pytest

from agents.photo_classifier import PhotoClassifierAgent
from agents.wardrobe_manager import WardrobeManagerAgent
from fitroom_app.errors import StoreError, UpstreamServiceError
from logic.validation import WardrobeRequest
from models.wardrobe_item import WardrobeItem
from tools.wardrobe_store import SQLiteWardrobeStore

from conftest import FakeChatModel

PHOTO = "data:image/jpeg;base64,/9j/AAAA"
CLASSIFIED = {
    "category": "tops",
    "color": "navy",
    "style": "casual",
    "material": "cotton",
    "patterns": "solid",
    "estimatedSize": "M",
    "description": "Navy cotton tee",
    "measurements": {"chest": "40"},
}


class FailingStore(SQLiteWardrobeStore):
    def create_item(self, item: WardrobeItem) -> WardrobeItem:
        raise StoreError("insert rejected")


class RaisingModel(FakeChatModel):
    def complete(self, messages, max_tokens=None) -> str:
        raise UpstreamServiceError("OpenAI API error: 500 - down", status_code=500)


def _manager(tmp_path: Path, replies=None, store=None) -> WardrobeManagerAgent:
    store = store or SQLiteWardrobeStore(tmp_path / "wardrobe.db")
    return WardrobeManagerAgent(store, PhotoClassifierAgent(FakeChatModel(replies)))


def _add(manager: WardrobeManagerAgent, user_id: str, name: str, **extra) -> dict:
    item_data = {"photoUrl": PHOTO, "name": name, "category": "tops", **extra}
    return manager.handle(user_id, WardrobeRequest(action="add_item", itemData=item_data))


def test_sqlite_store_lists_newest_first_per_user(tmp_path: Path) -> None:
    store = SQLiteWardrobeStore(tmp_path / "wardrobe.db")
    store.create_item(WardrobeItem(user_id="a", name="Old", photo_url=PHOTO, created_at="2024-01-01T00:00:00+00:00"))
    store.create_item(WardrobeItem(user_id="a", name="New", photo_url=PHOTO, created_at="2024-02-01T00:00:00+00:00"))
    store.create_item(WardrobeItem(user_id="b", name="Other", photo_url=PHOTO))

    assert [item.name for item in store.list_items_for_user("a")] == ["New", "Old"]


def test_cross_user_delete_removes_nothing(tmp_path: Path) -> None:
    manager = _manager(tmp_path)
    item_id = _add(manager, "alice", "Tee")["item"]["id"]

    result = manager.handle("bob", WardrobeRequest(action="delete_item", itemId=item_id))

    assert result == {"success": True, "message": "No matching item found", "deleted": False}
    assert len(manager.handle("alice", WardrobeRequest(action="get_items"))["items"]) == 1

    own = manager.handle("alice", WardrobeRequest(action="delete_item", itemId=item_id))
    assert own["deleted"] is True
    assert manager.handle("alice", WardrobeRequest(action="get_items"))["items"] == []


def test_add_item_requires_photo_name_and_category(tmp_path: Path) -> None:
    manager = _manager(tmp_path)
    with pytest.raises(ValueError, match="photoUrl"):
        manager.handle("alice", WardrobeRequest(action="add_item", itemData={"name": "Tee", "category": "tops"}))


def test_add_item_with_ai_analysis_fills_blank_fields(tmp_path: Path) -> None:
    manager = _manager(tmp_path, replies=[json.dumps(CLASSIFIED)])

    result = _add(manager, "alice", "Tee", analyzeWithAI=True)

    item = result["item"]
    assert result["success"] is True
    assert item["color"] == "navy"
    assert item["size"] == "M"
    assert item["style"] == "casual"
    assert item["measurements"] == {"chest": "40"}
    stored = manager.handle("alice", WardrobeRequest(action="get_items"))["items"][0]
    assert stored["ai_analysis"]["patterns"] == "solid"


def test_add_item_survives_classifier_failure(tmp_path: Path) -> None:
    store = SQLiteWardrobeStore(tmp_path / "wardrobe.db")
    manager = WardrobeManagerAgent(store, PhotoClassifierAgent(RaisingModel()))

    result = _add(manager, "alice", "Tee", analyzeWithAI=True)

    assert result["success"] is True
    assert result["analysisError"].startswith("OpenAI API error: 500")
    assert result["item"]["ai_analysis"] is None


def test_store_failure_returns_unsuccessful_envelope(tmp_path: Path) -> None:
    manager = _manager(tmp_path, store=FailingStore(tmp_path / "wardrobe.db"))

    result = _add(manager, "alice", "Tee")

    assert result["success"] is False
    assert result["error"] == "insert rejected"
    assert result["item"]["name"] == "Tee"


def test_analyze_photo_returns_null_on_unparseable_reply(tmp_path: Path) -> None:
    manager = _manager(tmp_path, replies=["It looks like a blue shirt, category tops."])
    result = manager.handle("alice", WardrobeRequest(action="analyze_photo", itemData={"photoUrl": PHOTO}))
    assert result == {"success": True, "analysis": None}


def test_analyze_photo_returns_classification(tmp_path: Path) -> None:
    manager = _manager(tmp_path, replies=[json.dumps(CLASSIFIED)])
    result = manager.handle("alice", WardrobeRequest(action="analyze_photo", itemData={"photoUrl": PHOTO}))
    assert result["analysis"]["category"] == "tops"


def test_unknown_action_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="Unknown action: wear_item"):
        _manager(tmp_path).handle("alice", WardrobeRequest(action="wear_item"))
