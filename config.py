"""
config.py — Single source of truth for all news summarizer settings.

pydantic-settings reads .env at import time, typed everywhere. Every field has
a default so the app (and the test suite) imports without any credentials —
a missing key is reported as a ConfigurationError at the moment a component
actually needs it, not as an import crash.

KEY SETTINGS:

  1. Two ways to reach the completion API:
       openai_api_key    — plain OpenAI (or any compatible base URL)
       foundry_endpoint  — Azure AI Foundry, with a key or DefaultAzureCredential

     Summaries and topic extraction both use summary_model. They are one call
     each per request, so there is no model tiering here.

  2. News search (NewsAPI):
       news_api_key is optional at start-up. Without it the related-articles
       feature degrades to an error message; summarization still works.

  3. Explicit timeouts on every outbound call:
       fetch_timeout_seconds  — article page fetch (10s)
       llm_timeout_seconds    — chat completion
       search_timeout_seconds — NewsAPI

  4. Content thresholds:
       min_content_chars          — below this there is nothing to summarize
       min_related_content_chars  — below this topic extraction is pointless

USAGE:
  from config import settings
  print(settings.summary_model)        # "gpt-4o-mini"
  print(settings.fetch_timeout_seconds) # 10.0

  # Tests build their own instance and inject it:
  test_settings = Settings(news_api_key="test", save_traces=False)
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── Completion API ────────────────────────────────────────────────────────
    openai_api_key: str = Field(
        default="",
        description="OpenAI API key — sent as a bearer token",
    )
    openai_base_url: str = Field(
        default="",
        description="Optional OpenAI-compatible base URL (blank = api.openai.com)",
    )
    foundry_endpoint: str = Field(
        default="",
        description="Azure AI Foundry endpoint — used instead of OpenAI when set",
    )
    foundry_api_key: str = Field(
        default="",
        description="Foundry API key — leave blank to use DefaultAzureCredential",
    )
    api_version: str = Field(
        default="2025-04-01-preview",
        description="Azure OpenAI API version for cognitiveservices endpoints",
    )
    summary_model: str = Field(
        default="gpt-4o-mini",
        description="Chat model for summaries and topic extraction",
    )
    llm_timeout_seconds: float = Field(
        default=60.0,
        description="Max seconds for one completion call",
    )
    # The SDK retries connection errors, 429 and 5xx with exponential backoff.
    llm_max_retries: int = Field(
        default=2,
        ge=0,
        le=5,
        description="Retry budget for transient completion failures",
    )

    # ── News search (NewsAPI) ─────────────────────────────────────────────────
    news_api_key: str = Field(
        default="",
        description="NewsAPI key — newsapi.org (related articles are disabled without it)",
    )
    news_api_url: str = Field(
        default="https://newsapi.org/v2/everything",
        description="NewsAPI 'everything' endpoint",
    )
    search_timeout_seconds: float = Field(
        default=30.0,
        description="Max seconds to wait for one NewsAPI search",
    )
    related_lookback_days: int = Field(
        default=30,
        ge=1,
        description="Only articles published in the last N days are returned",
    )
    related_page_size: int = Field(
        default=5,
        ge=1,
        le=100,
        description="Max related articles requested from NewsAPI",
    )
    related_language: str = Field(
        default="en",
        description="NewsAPI language filter (ISO 639-1)",
    )

    # ── URL fetching ──────────────────────────────────────────────────────────
    fetch_timeout_seconds: float = Field(
        default=10.0,
        description="Max seconds to wait for an article page — exceeded = FetchError",
    )

    # ── Content thresholds ────────────────────────────────────────────────────
    min_content_chars: int = Field(
        default=100,
        description="Minimum characters of article text worth summarizing",
    )
    min_related_content_chars: int = Field(
        default=50,
        description="Minimum characters of content for related-article lookup",
    )
    max_text_chars: int = Field(
        default=50_000,
        description="Maximum characters of raw text accepted for summarization",
    )
    topic_content_chars: int = Field(
        default=2000,
        description="Only the first N characters are sent for topic extraction",
    )
    topic_max_tokens: int = Field(
        default=100,
        description="Token cap on the topic-extraction completion",
    )
    topic_temperature: float = Field(
        default=0.3,
        description="Low temperature keeps extracted topics stable between calls",
    )

    # ── HTTP API ──────────────────────────────────────────────────────────────
    cors_origins: list[str] = Field(
        default=["*"],
        description="Origins allowed to call the JSON API from a browser",
    )

    # ── Observability ─────────────────────────────────────────────────────────
    log_dir: str = Field(
        default="logs/",
        description="Directory for structured JSON request traces",
    )
    save_traces: bool = Field(
        default=True,
        description="Write one trace file per request under {log_dir}/traces/",
    )

    @property
    def has_llm_credentials(self) -> bool:
        return bool(self.openai_api_key or self.foundry_endpoint)

    @property
    def has_news_credentials(self) -> bool:
        return bool(self.news_api_key)


# Module-level singleton — import this everywhere, inject a fresh Settings in tests.
settings = Settings()
