"""Configuration helpers for the virtual fitting room backend."""

from dataclasses import dataclass, field
from pathlib import Path
import os
from typing import Optional

DEFAULT_FIT_MODEL_URL = "https://api.groq.com/openai/v1/chat/completions"
DEFAULT_FIT_MODEL = "meta-llama/llama-4-scout-17b-16e-instruct"
DEFAULT_CLASSIFIER_MODEL_URL = "https://api.openai.com/v1/chat/completions"
DEFAULT_CLASSIFIER_MODEL = "gpt-4o-mini"
DEFAULT_GEMINI_MODEL = "gemini-1.5-flash"
DEFAULT_SCRAPER_URL = "https://api.firecrawl.dev/v1/scrape"


@dataclass
class ModelSettings:
    """Connection settings for one chat-completion model.

    ``provider`` is either ``openai`` (any OpenAI-compatible chat completions
    endpoint such as Groq or OpenAI) or ``gemini``.
    """

    provider: str = "openai"
    api_url: str = DEFAULT_FIT_MODEL_URL
    api_key: Optional[str] = None
    model: str = DEFAULT_FIT_MODEL
    max_tokens: int = 800
    label: str = "Model"


@dataclass
class AppConfig:
    """Configuration values for the fitting room app.

    Values come from environment variables, optionally seeded by a YAML-style
    file in ``config/environments/<env>.yaml``. Secrets should always be
    injected via the environment.
    """

    fit_model: ModelSettings = field(default_factory=ModelSettings)
    classifier_model: ModelSettings = field(
        default_factory=lambda: ModelSettings(
            api_url=DEFAULT_CLASSIFIER_MODEL_URL,
            model=DEFAULT_CLASSIFIER_MODEL,
            max_tokens=1000,
            label="OpenAI",
        )
    )
    scraper_api_key: Optional[str] = None
    scraper_url: str = DEFAULT_SCRAPER_URL
    scrape_html_fallback: bool = False
    store_backend: str = "sqlite"
    sqlite_path: str = "data/fitroom.db"
    supabase_url: Optional[str] = None
    supabase_service_key: Optional[str] = None
    supabase_anon_key: Optional[str] = None
    request_timeout_seconds: float = 60.0
    environment: str | None = None

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Build a config from environment variables or an environment YAML file."""

        env_name = os.getenv("APP_ENV")
        config_path = os.getenv("APP_CONFIG_PATH")
        config_dir = Path(os.getenv("FITROOM_CONFIG_DIR", "config/environments"))
        yaml_config: dict = {}

        if config_path:
            path = Path(config_path)
        elif env_name:
            path = config_dir / f"{env_name}.yaml"
        else:
            path = None

        if path and path.exists():
            yaml_config = cls._load_yaml_config(path)

        def get_value(key: str, default: Optional[str] = None) -> Optional[str]:
            env_key = key.upper()
            return os.getenv(env_key, yaml_config.get(key, default))

        fit_provider = str(get_value("fit_model_provider", "openai")).lower()
        classifier_provider = str(get_value("classifier_model_provider", "openai")).lower()
        google_api_key = get_value("google_api_key")

        fit_model = ModelSettings(
            provider=fit_provider,
            api_url=str(get_value("fit_model_url", DEFAULT_FIT_MODEL_URL)),
            api_key=google_api_key if fit_provider == "gemini" else get_value("groq_api_key"),
            model=str(
                get_value(
                    "fit_model",
                    DEFAULT_GEMINI_MODEL if fit_provider == "gemini" else DEFAULT_FIT_MODEL,
                )
            ),
            max_tokens=_int_value(get_value("fit_model_max_tokens"), 800),
            label="Gemini" if fit_provider == "gemini" else "Groq",
        )
        classifier_model = ModelSettings(
            provider=classifier_provider,
            api_url=str(get_value("classifier_model_url", DEFAULT_CLASSIFIER_MODEL_URL)),
            api_key=google_api_key if classifier_provider == "gemini" else get_value("openai_api_key"),
            model=str(
                get_value(
                    "classifier_model",
                    DEFAULT_GEMINI_MODEL if classifier_provider == "gemini" else DEFAULT_CLASSIFIER_MODEL,
                )
            ),
            max_tokens=_int_value(get_value("classifier_model_max_tokens"), 1000),
            label="Gemini" if classifier_provider == "gemini" else "OpenAI",
        )

        return cls(
            fit_model=fit_model,
            classifier_model=classifier_model,
            scraper_api_key=get_value("firecrawl_api_key"),
            scraper_url=str(get_value("firecrawl_url", DEFAULT_SCRAPER_URL)),
            scrape_html_fallback=_bool_value(get_value("scrape_html_fallback"), False),
            store_backend=str(get_value("store_backend", "sqlite")).lower(),
            sqlite_path=str(get_value("sqlite_path", "data/fitroom.db")),
            supabase_url=get_value("supabase_url"),
            supabase_service_key=get_value("supabase_service_role_key"),
            supabase_anon_key=get_value("supabase_anon_key"),
            request_timeout_seconds=_float_value(get_value("request_timeout_seconds"), 60.0),
            environment=env_name,
        )

    @staticmethod
    def _load_yaml_config(path: Path) -> dict:
        """Parse a flat ``key: value`` config file."""

        config: dict[str, str] = {}
        for line in path.read_text().splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            if ":" not in stripped:
                continue
            key, raw_value = stripped.split(":", 1)
            value = raw_value.strip()
            if (value.startswith("\"") and value.endswith("\"")) or (
                value.startswith("'") and value.endswith("'")
            ):
                value = value[1:-1]
            config[key.strip()] = value
        return config


def _bool_value(value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _int_value(value: Optional[str], default: int) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise RuntimeError(f"Invalid integer value: {value}") from exc


def _float_value(value: Optional[str], default: float) -> float:
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise RuntimeError(f"Invalid float value: {value}") from exc
