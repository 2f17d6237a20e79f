"""
Unit tests for tools/fetch.py

What we test (no real HTTP calls — pages are served by httpx.MockTransport):
  - fetch_html(): timeout, transport error, non-2xx, headers
  - fetch_html(): redirects are followed hop by hop and every hop is validated
  - fetch_article(): URL validation before any request, extraction,
    insufficient-content detection, length cap on extracted text
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

import httpx
import pytest

from config import Settings
from pipeline.errors import FetchError, InsufficientContentError, ValidationError
from tools.fetch import BROWSER_HEADERS, MAX_REDIRECTS, fetch_article, fetch_html


URL = "https://news.example.com/story"

STORY = (
    "Engineers at the port authority confirmed on Monday that the new container "
    "terminal will open in March, doubling capacity for the region's exporters."
)


@pytest.fixture
def settings():
    return Settings(_env_file=None, save_traces=False, fetch_timeout_seconds=10.0)


def serve(pages: dict[str, httpx.Response], seen: list | None = None) -> httpx.MockTransport:
    """Transport answering from a url → response map; unknown URLs are 404."""
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return pages.get(str(request.url), httpx.Response(404, text="not found"))
    return httpx.MockTransport(handler)


def page(html: str, status: int = 200) -> httpx.Response:
    return httpx.Response(status, text=html)


def redirect(location: str, status: int = 302) -> httpx.Response:
    return httpx.Response(status, headers={"Location": location})


def failing(exc: Exception) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        raise exc
    return httpx.MockTransport(handler)


# ── fetch_html() ──────────────────────────────────────────────────────────────

class TestFetchHtml:
    def test_returns_body_on_success(self, settings):
        transport = serve({URL: page("<p>hi</p>")})
        assert fetch_html(URL, settings, transport=transport) == "<p>hi</p>"

    def test_sends_browser_headers(self, settings):
        seen = []
        fetch_html(URL, settings, transport=serve({URL: page("<p>hi</p>")}, seen))
        assert seen[0].headers["User-Agent"] == BROWSER_HEADERS["User-Agent"]

    def test_timeout_raises_fetch_error(self, settings):
        with pytest.raises(FetchError, match="Timed out fetching the URL after 10s"):
            fetch_html(URL, settings, transport=failing(httpx.ReadTimeout("slow")))

    def test_transport_error_raises_fetch_error(self, settings):
        with pytest.raises(FetchError, match="ConnectError") as exc_info:
            fetch_html(URL, settings, transport=failing(httpx.ConnectError("dns")))
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    @pytest.mark.parametrize("status", [403, 404, 500, 503])
    def test_non_2xx_raises_fetch_error(self, settings, status):
        transport = serve({URL: page("nope", status=status)})
        with pytest.raises(FetchError, match=f"HTTP {status}") as exc_info:
            fetch_html(URL, settings, transport=transport)
        assert exc_info.value.context["status"] == status


class TestRedirects:
    def test_public_redirect_followed(self, settings):
        transport = serve({
            URL: redirect("https://www.example.com/moved"),
            "https://www.example.com/moved": page("<p>moved here</p>"),
        })
        assert fetch_html(URL, settings, transport=transport) == "<p>moved here</p>"

    def test_relative_location_resolved(self, settings):
        transport = serve({
            URL: redirect("/amp/story", status=301),
            "https://news.example.com/amp/story": page("<p>amp</p>"),
        })
        assert fetch_html(URL, settings, transport=transport) == "<p>amp</p>"

    @pytest.mark.parametrize("target", [
        "http://169.254.169.254/latest/meta-data/",
        "http://127.0.0.1:8080/admin",
        "http://2130706433/admin",
        "file:///etc/passwd",
    ])
    def test_redirect_to_unsafe_url_not_requested(self, settings, target):
        seen = []
        transport = serve({
            URL: redirect(target),
            target: page("<article>INTERNAL-METADATA</article>"),
        }, seen)
        with pytest.raises(ValidationError):
            fetch_article(URL, settings, transport=transport)
        assert [str(r.url) for r in seen] == [URL]

    def test_redirect_loop_stops(self, settings):
        transport = serve({URL: redirect(URL)})
        with pytest.raises(FetchError, match="redirects"):
            fetch_html(URL, settings, transport=transport)

    def test_hop_count_is_bounded(self, settings):
        seen = []
        pages = {
            f"https://news.example.com/{i}": redirect(f"https://news.example.com/{i + 1}")
            for i in range(MAX_REDIRECTS + 3)
        }
        with pytest.raises(FetchError):
            fetch_html("https://news.example.com/0", settings, transport=serve(pages, seen))
        assert len(seen) == MAX_REDIRECTS + 1


# ── fetch_article() ───────────────────────────────────────────────────────────

class TestFetchArticle:
    def test_extracts_article_text(self, settings):
        html = f"<html><body><nav>Menu</nav><article><p>{STORY}</p></article></body></html>"
        content = fetch_article(URL, settings, transport=serve({URL: page(html)}))
        assert content.url == URL
        assert content.text == STORY
        assert content.selector == "article"
        assert content.char_count == len(STORY)

    def test_invalid_url_makes_no_request(self, settings):
        seen = []
        with pytest.raises(ValidationError):
            fetch_article("ftp://example.com/file", settings, transport=serve({}, seen))
        assert seen == []

    def test_internal_url_makes_no_request(self, settings):
        seen = []
        with pytest.raises(ValidationError, match="not allowed"):
            fetch_article("http://169.254.169.254/latest", settings, transport=serve({}, seen))
        assert seen == []

    def test_short_page_raises_insufficient_content(self, settings):
        html = "<html><body><div id='app'></div><p>Loading...</p></body></html>"
        with pytest.raises(InsufficientContentError, match="try pasting the article text") as exc_info:
            fetch_article(URL, settings, transport=serve({URL: page(html)}))
        assert exc_info.value.context["chars"] < settings.min_content_chars

    def test_long_page_is_capped(self):
        s = Settings(_env_file=None, save_traces=False, max_text_chars=5000)
        html = "<article><p>" + "word " * 60_000 + "</p></article>"
        content = fetch_article(URL, s, transport=serve({URL: page(html)}))
        assert content.char_count == 5000
        assert content.text.startswith("word word")

    def test_fetch_errors_propagate(self, settings):
        with pytest.raises(FetchError):
            fetch_article(URL, settings, transport=serve({URL: page("", status=404)}))
