"""Data model helpers: measurements, extracted items and score labels."""

import pytest

from models.clothing_item import DEFAULT_SIZES, ClothingItem, from_scraped_payload
from models.fit_analysis import FitAnalysisRecord, recommendation_for_score
from models.fit_assessment import FitAssessment, clamp_score
from models.measurements import UserMeasurements, cm_to_inches, split_inches, total_inches
from models.wardrobe_item import from_item_data, missing_new_item_fields


def test_feet_and_inches_convert_to_total_inches() -> None:
    assert total_inches(5, 7) == 67
    assert split_inches(67) == (5, 7)
    measurements = UserMeasurements.from_feet_inches(5, 7, 150, "L")
    assert measurements.to_payload() == {"height": 67, "weight": 150, "preferredSize": "L"}


@pytest.mark.parametrize("feet,inches", [(-1, 0), (5, 12), (5, -1)])
def test_total_inches_rejects_out_of_range_values(feet: int, inches: int) -> None:
    with pytest.raises(ValueError):
        total_inches(feet, inches)


def test_metric_defaults_are_close_to_170cm() -> None:
    assert cm_to_inches(170) == 67


def test_scraped_payload_without_sizes_gets_default_sizes() -> None:
    item = from_scraped_payload({"name": "Linen Shirt", "price": "$40"})
    assert item.sizes == ["S", "M", "L", "XL"]
    assert item.sizes is not DEFAULT_SIZES


def test_scraped_payload_falls_back_to_metadata() -> None:
    item = from_scraped_payload(
        {},
        metadata={"title": "Page Title", "ogImage": "https://cdn.example.com/a.jpg"},
        markdown="# Page",
        source_url="https://shop.example.com/p/1",
    )
    assert item.name == "Page Title"
    assert item.price == "Price not found"
    assert item.images == ["https://cdn.example.com/a.jpg"]
    assert item.scraped_content == "# Page"


def test_empty_scrape_uses_unknown_item() -> None:
    assert from_scraped_payload({}).name == "Unknown Item"


def test_selected_size_must_be_offered() -> None:
    item = ClothingItem(name="Tee", price="$10", sizes=["M", "L"])
    item.select_size("L")
    assert item.to_payload()["selectedSize"] == "L"
    with pytest.raises(ValueError):
        item.select_size("XXL")


def test_payload_roundtrip_keeps_identity_and_size_chart() -> None:
    item = ClothingItem(name="Tee", price="$10", size_chart={"M": {"chest": "40"}})
    rebuilt = ClothingItem.from_payload(item.to_payload())
    assert rebuilt.id == item.id
    assert rebuilt.size_chart == {"M": {"chest": "40"}}


@pytest.mark.parametrize(
    "score,label",
    [(95, "Definitely Yes"), (90, "Definitely Yes"), (85, "Probably Yes"), (70, "Maybe"), (61, "Probably No"), (12, "Definitely No")],
)
def test_recommendation_labels(score: int, label: str) -> None:
    assert recommendation_for_score(score) == label


def test_clamp_score() -> None:
    assert clamp_score("88", 0) == 88
    assert clamp_score(140, 0) == 100
    assert clamp_score(None, 75) == 75
    assert clamp_score("great", 75) == 75
    assert clamp_score(float("inf"), 75) == 75
    assert clamp_score("-Infinity", 75) == 75
    assert clamp_score(float("nan"), 75) == 75


def test_fit_analysis_record_rejects_out_of_range_score() -> None:
    with pytest.raises(ValueError):
        FitAnalysisRecord(
            user_id="u",
            clothing_name="Tee",
            clothing_url="https://example.com",
            preferred_size="M",
            fit_score=101,
            recommendation="",
        )


def test_single_item_assessment_payload_omits_outfit_fields() -> None:
    payload = FitAssessment(fit_score=80, recommendation="ok", size_advice="M").to_payload()
    assert "itemScores" not in payload
    assert payload["fitScore"] == 80


def test_wardrobe_item_prefers_user_values_over_ai() -> None:
    item = from_item_data(
        "u1",
        {"photoUrl": "data:image/png;base64,AA", "name": "Jacket", "category": "Outerwear"},
        ai_analysis={"category": "tops", "color": "navy", "estimatedSize": "L"},
    )
    assert item.category == "outerwear"
    assert item.color == "navy"
    assert item.size == "L"
    assert missing_new_item_fields({"name": " "}) == ["photoUrl", "name", "category"]
