"""Two-stage fit scoring and the chat model clients."""

import json

import pytest
import requests

from agents.fit_scoring import FALLBACK_FIT_SCORE, FitScoringAgent, outfit_compatibility_summary
from fitroom_app.config import ModelSettings
from fitroom_app.errors import MissingCredentialError, UpstreamServiceError
from logic.response_parsing import extract_json_object, parse_strict_json
from models.clothing_item import ClothingItem
from models.fit_assessment import ItemScore
from models.measurements import UserMeasurements
from tools.chat_model import OpenAICompatibleChatModel, build_chat_model, GeminiChatModel, user_message

from conftest import FakeChatModel, FakeResponse

MEASUREMENTS = UserMeasurements(height_inches=67, weight_lbs=150, preferred_size="M")


def _item(name: str = "Oxford Shirt", size: str = "M") -> ClothingItem:
    item = ClothingItem(name=name, price="$60", size_chart={"M": {"chest": "40"}})
    item.select_size(size)
    return item


def test_malformed_fit_reply_degrades_to_fallback_score() -> None:
    model = FakeChatModel(["Broad shoulders, average build.", "This shirt will fit nicely overall."])
    assessment = FitScoringAgent(model).analyze("data:image/jpeg;base64,AAA", [_item()], MEASUREMENTS)

    assert assessment.fit_score == FALLBACK_FIT_SCORE == 85
    assert assessment.recommendation == "This shirt will fit nicely overall."
    assert assessment.size_advice == "Based on your measurements (67in, 150lbs), size M should work well."
    assert assessment.body_analysis == "Broad shoulders, average build."


def test_empty_fit_reply_still_has_recommendation() -> None:
    assessment = FitScoringAgent(FakeChatModel(["body", ""])).analyze(None, [_item()], MEASUREMENTS)
    assert assessment.fit_score == 85
    assert assessment.recommendation


def test_fit_reply_json_is_parsed_from_surrounding_text() -> None:
    reply = 'Here you go:\n{"fitScore": 91, "recommendation": "Great", "sizeAdvice": "Take M", "alternativeSize": "L", "fitDetails": "Roomy chest"}'
    model = FakeChatModel(["body notes", reply])
    assessment = FitScoringAgent(model).analyze("https://img.example.com/me.jpg", [_item()], MEASUREMENTS)

    assert assessment.fit_score == 91
    assert assessment.alternative_size == "L"
    assert assessment.fit_details == "Roomy chest"
    body_call, fit_call = model.calls
    assert body_call["max_tokens"] == 500
    assert fit_call["max_tokens"] == 800
    assert body_call["messages"][1]["content"][1]["image_url"]["url"] == "https://img.example.com/me.jpg"
    assert "body notes" in fit_call["messages"][1]["content"]


def test_missing_score_in_json_defaults_to_75() -> None:
    model = FakeChatModel(["body", json.dumps({"recommendation": "ok"})])
    assert FitScoringAgent(model).analyze(None, [_item()], MEASUREMENTS).fit_score == 75


def test_multi_item_scores_each_garment_and_averages() -> None:
    model = FakeChatModel(
        [
            "body",
            json.dumps({"fitScore": 90, "recommendation": "Shirt fits"}),
            json.dumps({"fitScore": 71, "recommendation": "Trousers snug"}),
        ]
    )
    items = [_item("Shirt"), _item("Trousers", "L")]
    assessment = FitScoringAgent(model).analyze(None, items, MEASUREMENTS, multi_item=True)
    payload = assessment.to_payload()

    assert len(model.calls) == 3
    assert payload["overallScore"] == 80
    assert payload["fitScore"] == 80
    assert [entry["fitScore"] for entry in payload["itemScores"]] == [90, 71]
    assert payload["itemScores"][1]["size"] == "L"
    assert payload["overlayImage"] is None
    assert "Trousers" in payload["outfitCompatibility"]


def test_outfit_summary_when_everything_fits() -> None:
    summary = outfit_compatibility_summary([ItemScore("A", "M", 85), ItemScore("B", "M", 92)])
    assert summary.startswith("2 items scored 85-92.")


def test_analyze_requires_items() -> None:
    with pytest.raises(ValueError):
        FitScoringAgent(FakeChatModel()).analyze(None, [], MEASUREMENTS)


def test_chat_model_requires_api_key() -> None:
    model = OpenAICompatibleChatModel(ModelSettings(api_key=None, label="Groq"))
    with pytest.raises(MissingCredentialError, match="Groq API key not configured"):
        model.complete([user_message("hi")])


def test_chat_model_raises_upstream_error_with_status(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(requests, "post", lambda *_, **__: FakeResponse(status_code=429, text="slow down"))
    model = OpenAICompatibleChatModel(ModelSettings(api_key="k", label="OpenAI"))
    with pytest.raises(UpstreamServiceError, match="OpenAI API error: 429 - slow down"):
        model.complete([user_message("hi")])


def test_chat_model_returns_first_choice(monkeypatch: pytest.MonkeyPatch) -> None:
    seen = {}

    def fake_post(url, headers=None, json=None, timeout=None):
        seen.update(json)
        return FakeResponse(payload={"choices": [{"message": {"content": "hello"}}]})

    monkeypatch.setattr(requests, "post", fake_post)
    model = OpenAICompatibleChatModel(ModelSettings(api_key="k", model="gpt-4o-mini"))
    assert model.complete([user_message("hi")], max_tokens=42) == "hello"
    assert seen["model"] == "gpt-4o-mini"
    assert seen["max_tokens"] == 42


def test_build_chat_model_selects_provider() -> None:
    assert isinstance(build_chat_model(ModelSettings(provider="gemini")), GeminiChatModel)
    assert isinstance(build_chat_model(ModelSettings()), OpenAICompatibleChatModel)
    with pytest.raises(ValueError):
        build_chat_model(ModelSettings(provider="nope"))


def test_response_parsing_helpers() -> None:
    assert extract_json_object('noise {"a": 1} trailing') == {"a": 1}
    with pytest.raises(ValueError):
        extract_json_object("no json here")
    assert parse_strict_json('```json\n{"category": "tops"}\n```') == {"category": "tops"}
    assert parse_strict_json('Sure! {"category": "tops"}') is None


def test_non_finite_score_falls_back_to_default() -> None:
    model = FakeChatModel(["body", '{"fitScore": Infinity, "recommendation": "ok"}'])
    assessment = FitScoringAgent(model).analyze(None, [_item()], MEASUREMENTS)

    assert assessment.fit_score == 75
    assert assessment.recommendation == "ok"


def test_deeply_nested_reply_degrades_to_fallback_score() -> None:
    reply = '{"fitScore": ' + "[" * 100_000 + "]" * 100_000 + "}"
    assessment = FitScoringAgent(FakeChatModel(["body", reply])).analyze(None, [_item()], MEASUREMENTS)

    assert assessment.fit_score == FALLBACK_FIT_SCORE
    with pytest.raises(ValueError):
        extract_json_object(reply)
    assert parse_strict_json(reply) is None
