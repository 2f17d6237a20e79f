"""
tests/unit/test_server.py — HTTP contract tests for api/server.py

Uses FastAPI's TestClient against create_app() with injected Settings and
a MagicMock LLM client. Outbound fetch/search calls are patched.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

import pytest
from fastapi.testclient import TestClient
from unittest.mock import MagicMock, patch

from api.server import SUMMARY_FAILURE_MESSAGE, create_app
from config import Settings
from pipeline.errors import FetchError, RateLimitError, UpstreamError
from pipeline.runner import RATE_LIMIT_MESSAGE, RELATED_FAILURE_MESSAGE
from pipeline.state import ExtractedContent, RelatedArticle


ARTICLE = (
    "The central bank held interest rates steady on Wednesday, citing cooling "
    "inflation and a labor market that has begun to show signs of slowing."
)


def make_llm(reply: str = "Rates held steady as inflation cools.") -> MagicMock:
    llm = MagicMock()
    llm.complete.return_value = reply
    llm.model = "gpt-4o-mini"
    llm.last_usage = {}
    return llm


@pytest.fixture
def llm():
    return make_llm()


@pytest.fixture
def client(llm):
    settings = Settings(
        _env_file=None,
        openai_api_key="sk-test",
        news_api_key="news-key",
        save_traces=False,
    )
    return TestClient(create_app(settings, client=llm))


# ── Info endpoints ────────────────────────────────────────────────────────────

class TestInfo:
    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["health"] == "/health"

    def test_health(self, client):
        data = client.get("/health").json()
        assert data["status"] == "ok"
        assert data["llm_configured"] is True
        assert data["news_search_configured"] is True


# ── POST /summarize ───────────────────────────────────────────────────────────

class TestSummarize:
    def test_text_summary(self, client):
        response = client.post("/summarize", json={"text": ARTICLE, "language": "English", "format": "paragraph"})
        assert response.status_code == 200
        assert response.json() == {"summary": "Rates held steady as inflation cools."}

    def test_defaults_when_language_and_format_missing(self, client, llm):
        response = client.post("/summarize", json={"text": ARTICLE})
        assert response.status_code == 200
        assert llm.complete.call_args.kwargs["max_tokens"] == 500

    def test_url_summary(self, client):
        extracted = ExtractedContent(url="https://news.example.com/rates", text=ARTICLE, selector="article")
        with patch("pipeline.summarizer.fetch_article", return_value=extracted):
            response = client.post("/summarize", json={"url": "https://news.example.com/rates"})
        assert response.status_code == 200
        assert "summary" in response.json()

    def test_missing_input_is_400(self, client, llm):
        response = client.post("/summarize", json={"language": "English"})
        assert response.status_code == 400
        assert response.json() == {"error": "No text or URL provided"}
        llm.complete.assert_not_called()

    def test_short_text_is_400(self, client, llm):
        response = client.post("/summarize", json={"text": "Too short."})
        assert response.status_code == 400
        assert "Text too short" in response.json()["error"]
        llm.complete.assert_not_called()

    def test_unknown_format_is_400(self, client):
        response = client.post("/summarize", json={"text": ARTICLE, "format": "poem"})
        assert response.status_code == 400

    def test_bad_url_is_400(self, client):
        response = client.post("/summarize", json={"url": "file:///etc/passwd"})
        assert response.status_code == 400
        assert "Invalid URL" in response.json()["error"]

    def test_fetch_failure_is_400_with_message(self, client):
        with patch("pipeline.summarizer.fetch_article", side_effect=FetchError("Failed to fetch the URL (HTTP 403)")):
            response = client.post("/summarize", json={"url": "https://news.example.com/paywalled"})
        assert response.status_code == 400
        assert response.json() == {"error": "Failed to fetch the URL (HTTP 403)"}

    def test_upstream_failure_is_generic_500(self, client, llm):
        llm.complete.side_effect = UpstreamError("Completion API error: AuthenticationError", context={"secret": "x"})
        response = client.post("/summarize", json={"text": ARTICLE})
        assert response.status_code == 500
        assert response.json() == {"error": SUMMARY_FAILURE_MESSAGE}

    def test_unexpected_failure_is_generic_500(self, client, llm):
        llm.complete.side_effect = RuntimeError("kaboom")
        response = client.post("/summarize", json={"text": ARTICLE})
        assert response.status_code == 500
        assert response.json() == {"error": SUMMARY_FAILURE_MESSAGE}

    def test_malformed_json_is_400(self, client):
        response = client.post(
            "/summarize",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["error"].startswith("Invalid request")

    def test_wrong_field_type_is_400(self, client):
        response = client.post("/summarize", json={"text": ["not", "a", "string"]})
        assert response.status_code == 400
        assert "text" in response.json()["error"]


# ── POST /related-articles ────────────────────────────────────────────────────

class TestRelatedArticles:
    def test_success_shape(self, client, llm):
        llm.complete.return_value = "central bank, interest rates"
        article = RelatedArticle(
            title="Fed pauses",
            description="Rates unchanged",
            url="https://news.example.com/fed",
            source="Reuters",
            published_at="2026-10-15T12:00:00Z",
            image_url="https://img.example.com/fed.jpg",
        )
        with patch("pipeline.related.search_news", return_value=[article]):
            response = client.post("/related-articles", json={"content": ARTICLE})
        assert response.status_code == 200
        data = response.json()
        assert data["searchQuery"] == "central bank, interest rates"
        assert data["relatedArticles"] == [{
            "title": "Fed pauses",
            "description": "Rates unchanged",
            "url": "https://news.example.com/fed",
            "source": "Reuters",
            "publishedAt": "2026-10-15T12:00:00Z",
            "imageUrl": "https://img.example.com/fed.jpg",
        }]

    def test_short_content_is_400(self, client):
        response = client.post("/related-articles", json={"content": "short"})
        assert response.status_code == 400
        assert response.json() == {"error": "Content too short to extract topics"}

    def test_missing_content_is_400(self, client):
        response = client.post("/related-articles", json={})
        assert response.status_code == 400

    def test_no_topics_message(self, client, llm):
        llm.complete.return_value = ""
        with patch("pipeline.related.search_news") as mock_search:
            response = client.post("/related-articles", json={"content": ARTICLE})
        mock_search.assert_not_called()
        assert response.status_code == 200
        assert response.json() == {
            "relatedArticles": [],
            "searchQuery": "",
            "message": "Could not extract topics from content",
        }

    def test_rate_limit_is_200_with_error(self, client):
        with patch("pipeline.related.search_news", side_effect=RateLimitError("throttled")):
            response = client.post("/related-articles", json={"content": ARTICLE})
        assert response.status_code == 200
        assert response.json() == {"relatedArticles": [], "error": RATE_LIMIT_MESSAGE}

    def test_failure_is_200_with_generic_error(self, client, llm):
        llm.complete.side_effect = UpstreamError("Completion API error: APITimeoutError")
        response = client.post("/related-articles", json={"content": ARTICLE})
        assert response.status_code == 200
        assert response.json() == {"relatedArticles": [], "error": RELATED_FAILURE_MESSAGE}
