"""
tools/search.py — NewsAPI wrapper for related-article search.

THE CORE CONCEPT: Related coverage, not web search
  After a summary is shown, the UI offers "related articles": recent news
  about the same people, places and events. The topic extractor turns the
  article into a short query ("OpenAI, Sam Altman, board ouster"); this
  module asks NewsAPI for the most relevant recent stories matching it.

NEWSAPI:
  GET https://newsapi.org/v2/everything
  Params: {
    "q": "OpenAI, Sam Altman",
    "from": "2026-09-17",          ← 30-day lookback window
    "to": "2026-10-17",
    "sortBy": "relevancy",
    "pageSize": 5,
    "language": "en",
    "apiKey": "..."
  }
  Response: {
    "status": "ok",
    "totalResults": 123,
    "articles": [
      {
        "source": {"id": null, "name": "Reuters"},
        "title": "...",
        "description": "...",       ← sometimes null
        "url": "https://...",
        "urlToImage": "https://...",
        "publishedAt": "2026-10-16T09:30:00Z"
      }
    ]
  }
  Errors: {"status": "error", "code": "rateLimited", "message": "..."}

ERROR POLICY (deliberately asymmetric):
  - Missing API key   → ConfigurationError, before any network call
  - Rate limited      → RateLimitError — the user should know to wait
  - Anything else     → logged, return []

  Related articles are a supplementary feature. A flaky search API must
  never turn a good summary into an error screen, but "try again later"
  is actionable information worth surfacing.

USAGE:
  from tools.search import search_news
  articles = search_news("Artemis II, NASA, Orion capsule")
  for a in articles:
      print(a.title, a.source)
"""

from datetime import date, datetime, timedelta, timezone

import httpx

from config import Settings, settings as default_settings
from pipeline.errors import ConfigurationError, RateLimitError
from pipeline.state import RelatedArticle


RATE_LIMIT_CODE = "rateLimited"


# ── Search function ───────────────────────────────────────────────────────────

def search_news(
    query: str,
    settings: Settings | None = None,
    *,
    today: date | None = None,
) -> list[RelatedArticle]:
    """
    Search NewsAPI for recent articles matching query.

    Args:
        query:    Comma-separated topic terms.
        settings: Injected Settings (defaults to the module singleton).
        today:    End of the lookback window. Defaults to today in UTC.

    Returns:
        Up to related_page_size RelatedArticle objects in NewsAPI's relevancy
        order, each with a title, description and url.
        Empty list on any failure other than rate limiting.

    Raises:
        ConfigurationError: news_api_key is not set.
        RateLimitError:     NewsAPI reported rate limiting.
    """
    settings = settings or default_settings

    if not settings.news_api_key:
        raise ConfigurationError("NEWS_API_KEY not configured")

    params = build_search_params(query, settings, today=today)

    _log(f"Searching NewsAPI for: {query!r}")
    try:
        response = httpx.get(
            settings.news_api_url,
            params=params,
            timeout=settings.search_timeout_seconds,
        )
    except httpx.TimeoutException:
        _log(f"NewsAPI timeout for query: {query!r}")
        return []
    except httpx.HTTPError as e:
        _log(f"NewsAPI transport error ({type(e).__name__}) for query: {query!r}")
        return []

    data = _json_or_empty(response)

    if response.status_code == 429 or data.get("code") == RATE_LIMIT_CODE:
        _log(f"NewsAPI rate limited: {data.get('message', response.status_code)}")
        raise RateLimitError(
            "NewsAPI rate limit reached. Please try again later.",
            context={"status": response.status_code, "code": data.get("code")},
        )

    if not response.is_success or data.get("status") == "error":
        _log(
            f"NewsAPI HTTP {response.status_code} "
            f"({data.get('code', 'unknown')}: {data.get('message', '')}) for query: {query!r}"
        )
        return []

    _log(f"Found {data.get('totalResults', 0)} articles")
    return parse_articles(data.get("articles") or [])


def build_search_params(
    query: str,
    settings: Settings | None = None,
    *,
    today: date | None = None,
) -> dict:
    """Query parameters for one /v2/everything call."""
    settings = settings or default_settings
    to_date = today or datetime.now(timezone.utc).date()
    from_date = to_date - timedelta(days=settings.related_lookback_days)

    return {
        "q": query,
        "from": from_date.isoformat(),
        "to": to_date.isoformat(),
        "sortBy": "relevancy",
        "pageSize": settings.related_page_size,
        "language": settings.related_language,
        "apiKey": settings.news_api_key,
    }


def parse_articles(items: list) -> list[RelatedArticle]:
    """
    Keep only articles with a title, description and url — in order.

    NewsAPI regularly returns items with a null description; those are
    dropped silently.
    """
    articles = []
    for item in items:
        if not isinstance(item, dict):
            continue

        title = _text(item.get("title"))
        description = _text(item.get("description"))
        url = _text(item.get("url"))
        if not (title and description and url):
            continue

        source = item.get("source")
        source_name = _text(source.get("name")) if isinstance(source, dict) else ""

        articles.append(RelatedArticle(
            title=title,
            description=description,
            url=url,
            source=source_name,
            published_at=_text(item.get("publishedAt")),
            image_url=_text(item.get("urlToImage")) or None,
        ))

    return articles


# ── Private helpers ───────────────────────────────────────────────────────────

def _json_or_empty(response: httpx.Response) -> dict:
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def _text(value) -> str:
    return value.strip() if isinstance(value, str) else ""


def _log(message: str) -> None:
    print(f"[search] {message}")
