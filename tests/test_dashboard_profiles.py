"""Dashboard analyses, profile photos and configuration loading."""

import random
from pathlib import Path

import pytest

from agents.dashboard import DashboardAgent, clothing_name_from_url
from fitroom_app.config import AppConfig
from memory.analysis_store import SQLiteFitAnalysisStore
from memory.user_profile import SQLiteProfileStore
from models.fit_analysis import recommendation_for_score
from tools.product_page_fetcher import InvalidProductURLError


@pytest.fixture()
def dashboard(tmp_path: Path) -> DashboardAgent:
    db_path = tmp_path / "fitroom.db"
    return DashboardAgent(SQLiteFitAnalysisStore(db_path), SQLiteProfileStore(db_path), rng=random.Random(7))


def test_create_analysis_scores_within_placeholder_range(dashboard: DashboardAgent) -> None:
    for _ in range(20):
        record = dashboard.create_analysis("alice", "https://shop.example.com/products/blue-denim-jacket")
        assert 60 <= record.fit_score <= 100
        assert record.recommendation == recommendation_for_score(record.fit_score)
        assert record.likes == record.comments == record.views == 0


def test_create_analysis_rejects_invalid_url(dashboard: DashboardAgent) -> None:
    with pytest.raises(InvalidProductURLError):
        dashboard.create_analysis("alice", "not a url")


def test_analyses_are_listed_per_user_newest_first(dashboard: DashboardAgent) -> None:
    first = dashboard.create_analysis("alice", "https://shop.example.com/p/first-item")
    second = dashboard.create_analysis("alice", "https://shop.example.com/p/second-item", preferred_size="L")
    dashboard.create_analysis("bob", "https://shop.example.com/p/bobs-item")

    listed = dashboard.list_analyses("alice")

    assert [record.id for record in listed] == [second.id, first.id]
    assert listed[0].preferred_size == "L"
    assert listed[0].clothing_name == "Second Item"


def test_profile_photo_upsert_keeps_one_row(dashboard: DashboardAgent) -> None:
    assert dashboard.get_profile("alice") is None
    dashboard.save_photo("alice", "data:image/png;base64,AAA")
    dashboard.save_photo("alice", "https://cdn.example.com/me.png")

    profile = dashboard.get_profile("alice")
    assert profile is not None
    assert profile.photo_url == "https://cdn.example.com/me.png"


@pytest.mark.parametrize(
    "url,name",
    [
        ("https://shop.example.com/products/blue-denim-jacket", "Blue Denim Jacket"),
        ("https://shop.example.com/p/linen_shirt-12345.html", "Linen Shirt"),
        ("https://shop.example.com/", "shop.example.com"),
    ],
)
def test_clothing_name_from_url(url: str, name: str) -> None:
    assert clothing_name_from_url(url) == name


def test_config_reads_environment_over_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_file = tmp_path / "dev.yaml"
    config_file.write_text(
        "# local settings\nstore_backend: sqlite\nsqlite_path: 'from-file.db'\nscrape_html_fallback: true\n"
    )
    monkeypatch.setenv("APP_CONFIG_PATH", str(config_file))
    monkeypatch.setenv("SQLITE_PATH", "from-env.db")
    monkeypatch.setenv("GROQ_API_KEY", "gsk-test")
    monkeypatch.delenv("FIT_MODEL_PROVIDER", raising=False)

    config = AppConfig.from_env()

    assert config.sqlite_path == "from-env.db"
    assert config.scrape_html_fallback is True
    assert config.fit_model.api_key == "gsk-test"
    assert config.fit_model.label == "Groq"
    assert config.classifier_model.model == "gpt-4o-mini"
