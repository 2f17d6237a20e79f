"""
tests/unit/test_app.py — Streamlit page tests for app.py

Runs the page headless with streamlit.testing.v1.AppTest. The two runner
entry points are patched — no network, no credentials.
"""

import sys
from pathlib import Path

ROOT = Path(__file__).parent.parent.parent
sys.path.insert(0, str(ROOT))

from unittest.mock import patch

from streamlit.testing.v1 import AppTest

from pipeline.errors import FetchError
from pipeline.state import RelatedArticle, RelatedArticlesResult, SummaryFormat, SummaryResult


APP = str(ROOT / "app.py")

ARTICLE = (
    "The regional airline said on Thursday it would add twelve new routes next "
    "spring after a record summer, hiring 300 pilots and cabin crew to staff them."
)


def make_summary(text: str = "Airline adds twelve routes.") -> SummaryResult:
    return SummaryResult(text=text, language="Original", format=SummaryFormat.PARAGRAPH, input_chars=len(ARTICLE))


def make_related() -> RelatedArticlesResult:
    return RelatedArticlesResult(
        articles=[RelatedArticle(
            title="Airline expands",
            description="Twelve new routes",
            url="https://news.example.com/airline",
            source="Reuters",
            published_at="2026-10-15T12:00:00Z",
            image_url="https://img.example.com/airline.jpg",
        )],
        search_query="airline, routes",
    )


class TestPage:
    def test_renders_without_errors(self):
        at = AppTest.from_file(APP).run()
        assert not at.exception
        assert at.button[0].label == "✨ Summarize"

    def test_summary_and_related_articles_shown(self):
        with patch("pipeline.runner.run_summarize", return_value=make_summary()) as mock_summarize, \
             patch("pipeline.runner.run_related_articles", return_value=make_related()) as mock_related:
            at = AppTest.from_file(APP).run()
            at.text_area(key="news_text").input(ARTICLE)
            at.button[0].click().run()

        assert not at.exception
        mock_summarize.assert_called_once()
        mock_related.assert_called_once_with(ARTICLE)
        assert at.text[0].value == "Airline adds twelve routes."
        assert any("Airline expands" in m.value for m in at.markdown)

    def test_fetch_error_shown_and_related_skipped(self):
        error = FetchError("Failed to fetch the URL (HTTP 403)")
        with patch("pipeline.runner.run_summarize", side_effect=error), \
             patch("pipeline.runner.run_related_articles") as mock_related:
            at = AppTest.from_file(APP).run()
            at.radio(key="input_mode").set_value("url").run()
            at.text_input(key="news_url").input("https://news.example.com/paywalled")
            at.button[0].click().run()

        assert not at.exception
        mock_related.assert_not_called()
        assert at.text[0].value == "Error: Failed to fetch the URL (HTTP 403)"
