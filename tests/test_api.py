"""HTTP surface: envelopes, CORS, auth and the proxy endpoints."""

import json

import pytest
from fastapi.testclient import TestClient

from fitroom_app.app import FitRoomApp
from server.api import create_app

from conftest import FakeChatModel

ALICE = {"Authorization": "Bearer alice-token"}
BOB = {"Authorization": "Bearer bob-token"}
PHOTO = "data:image/jpeg;base64,/9j/AAAA"


@pytest.fixture()
def client(fitroom: FitRoomApp) -> TestClient:
    return TestClient(create_app(fitroom))


def _analyze_body(**overrides) -> dict:
    body = {
        "userPhoto": PHOTO,
        "clothingData": {"name": "Oxford Shirt", "price": "$60", "sizes": ["S", "M"], "selectedSize": "M"},
        "userData": {"height": 67, "weight": 150, "preferredSize": "M"},
    }
    body.update(overrides)
    return body


def test_preflight_returns_cors_headers(client: TestClient) -> None:
    response = client.options("/analyze-fit")
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"
    assert response.headers["access-control-allow-headers"] == "authorization, x-client-info, apikey, content-type"


def test_healthcheck(client: TestClient) -> None:
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.headers["access-control-allow-origin"] == "*"


def test_missing_scraper_key_is_a_500_envelope(client: TestClient) -> None:
    response = client.post("/scrape-clothing", json={"url": "https://shop.example.com/p/1"})

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Firecrawl API key not configured"}
    assert response.headers["access-control-allow-origin"] == "*"


def test_invalid_body_is_a_500_envelope(client: TestClient) -> None:
    response = client.post("/analyze-fit", json={"userPhoto": PHOTO})
    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert "userData" in body["error"]


def test_sub_inch_height_is_rejected_before_any_model_call(client: TestClient, fit_model: FakeChatModel) -> None:
    body = _analyze_body(userData={"height": 0.4, "weight": 150, "preferredSize": "M"})

    response = client.post("/analyze-fit", json=body)

    assert response.status_code == 500
    assert "userData.height" in response.json()["error"]
    assert fit_model.calls == []


def test_analyze_fit_degrades_on_malformed_reply(client: TestClient, fit_model: FakeChatModel) -> None:
    fit_model.replies.extend(["Average build.", "Looks like a comfortable fit"])

    response = client.post("/analyze-fit", json=_analyze_body())

    assert response.status_code == 200
    analysis = response.json()["analysis"]
    assert response.json()["success"] is True
    assert analysis["fitScore"] == 85
    assert analysis["recommendation"] == "Looks like a comfortable fit"


def test_analyze_fit_multi_item(client: TestClient, fit_model: FakeChatModel) -> None:
    fit_model.replies.extend(
        ["body", json.dumps({"fitScore": 88}), json.dumps({"fitScore": 62, "recommendation": "Tight"})]
    )
    items = [
        {"name": "Shirt", "selectedSize": "M"},
        {"name": "Chinos", "selectedSize": "L", "sizes": ["M", "L"]},
    ]

    response = client.post("/analyze-fit", json=_analyze_body(items=items, multiItem=True))

    analysis = response.json()["analysis"]
    assert analysis["overallScore"] == 75
    assert [entry["name"] for entry in analysis["itemScores"]] == ["Shirt", "Chinos"]


def test_wardrobe_requires_bearer_token(client: TestClient) -> None:
    response = client.post("/wardrobe-management", json={"action": "get_items"})
    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "No authorization header"}

    rejected = client.post(
        "/wardrobe-management", json={"action": "get_items"}, headers={"Authorization": "Bearer nope"}
    )
    assert rejected.json()["error"] == "Invalid user"


def test_wardrobe_delete_is_scoped_to_the_caller(client: TestClient) -> None:
    added = client.post(
        "/wardrobe-management",
        json={"action": "add_item", "itemData": {"photoUrl": PHOTO, "name": "Tee", "category": "tops"}},
        headers=ALICE,
    ).json()
    item_id = added["item"]["id"]

    client.post("/wardrobe-management", json={"action": "delete_item", "itemId": item_id}, headers=BOB)

    items = client.post("/wardrobe-management", json={"action": "get_items"}, headers=ALICE).json()["items"]
    assert [item["id"] for item in items] == [item_id]
    assert client.post("/wardrobe-management", json={"action": "get_items"}, headers=BOB).json()["items"] == []


def test_unknown_wardrobe_action(client: TestClient) -> None:
    response = client.post("/wardrobe-management", json={"action": "fold"}, headers=ALICE)
    assert response.status_code == 500
    assert response.json()["error"] == "Unknown action: fold"


def test_profile_and_fit_analyses(client: TestClient) -> None:
    assert client.get("/profile", headers=ALICE).json() == {"success": True, "profile": None}
    saved = client.put("/profile", json={"photoUrl": PHOTO}, headers=ALICE).json()
    assert saved["profile"]["photo_url"] == PHOTO

    created = client.post(
        "/fit-analyses",
        json={"clothingUrl": "https://shop.example.com/p/wool-coat", "preferredSize": "L"},
        headers=ALICE,
    ).json()["analysis"]
    assert 60 <= created["fit_score"] <= 100
    assert created["clothing_name"] == "Wool Coat"

    listed = client.get("/fit-analyses", headers=ALICE).json()["analyses"]
    assert [row["id"] for row in listed] == [created["id"]]
    assert client.get("/fit-analyses", headers=BOB).json()["analyses"] == []


def test_magic_link_is_sent(client: TestClient, fitroom: FitRoomApp) -> None:
    response = client.post("/auth/magic-link", json={"email": "carol@example.com", "redirectTo": "https://app"})
    assert response.json()["success"] is True
    assert fitroom.identity.magic_links == [{"email": "carol@example.com", "redirect_to": "https://app"}]
