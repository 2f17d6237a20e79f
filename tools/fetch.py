"""
tools/fetch.py — Fetch an article URL and return its readable text.

THE CORE CONCEPT: URL in, article text out
  The user can paste a link instead of the article. Before anything is
  summarized we have to turn that link into plain text:

    validate URL → GET the page → strip boilerplate → check length

  Every step has exactly one failure kind, so the HTTP layer can tell the
  user precisely what went wrong:

    ValidationError          — "ftp://x", "not a url", "http://localhost"
    FetchError               — timeout, DNS failure, 403/404/500
    InsufficientContentError — the page loaded but held < 100 chars of text
                               (JavaScript-only sites, paywalls, image pages)

WHY A BROWSER USER-AGENT:
  Many news sites return 403 or a stripped page to unknown clients.
  A standard desktop browser User-Agent gets the same HTML a reader sees.

WHY REDIRECTS ARE FOLLOWED BY HAND:
  validate_url() only sees the URL the user typed. A public page can answer
  302 → http://169.254.169.254/, so every Location is validated again
  before it is requested, for at most MAX_REDIRECTS hops.

WHY A TIMEOUT:
  A slow site must not hold a request handler forever. 10 seconds is
  generous for one HTML document; past that, the user is better served by
  an error telling them to paste the text instead.

USAGE:
  from tools.fetch import fetch_article

  content = fetch_article("https://example.com/article")
  print(content.text[:500])
  print(content.selector)   # "article", "main", ..., or "body"
"""

import httpx

from config import Settings, settings as default_settings
from pipeline.errors import FetchError, InsufficientContentError
from pipeline.guardrails import validate_url
from pipeline.state import ExtractedContent
from tools.extract import extract_article_text, truncate_chars


BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/124.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}

MAX_REDIRECTS = 5


# ── Main function ─────────────────────────────────────────────────────────────

def fetch_article(
    url: str,
    settings: Settings | None = None,
    transport: httpx.BaseTransport | None = None,
) -> ExtractedContent:
    """
    Fetch a URL and extract its article text.

    Args:
        url:       Any user-supplied string — validated here.
        settings:  Injected Settings (defaults to the module singleton).
        transport: Optional httpx transport (tests pass httpx.MockTransport).

    Returns:
        ExtractedContent with at least min_content_chars of text and at most
        max_text_chars — longer pages are cut, like pasted text is bounded.

    Raises:
        ValidationError, FetchError, InsufficientContentError.
    """
    settings = settings or default_settings

    url = validate_url(url)
    html = fetch_html(url, settings, transport=transport)
    text, selector = extract_article_text(html)

    if len(text) < settings.min_content_chars:
        raise InsufficientContentError(
            "Could not extract enough content from the URL. "
            "The page may require JavaScript or be behind a paywall — "
            "try pasting the article text instead.",
            context={"url": url, "chars": len(text), "selector": selector},
        )

    if len(text) > settings.max_text_chars:
        _log(f"Truncating {len(text)} chars to {settings.max_text_chars} for {url}")
        text = truncate_chars(text, settings.max_text_chars)

    _log(f"Extracted {len(text)} chars from {url} via {selector!r}")
    return ExtractedContent(url=url, text=text, selector=selector)


def fetch_html(
    url: str,
    settings: Settings | None = None,
    transport: httpx.BaseTransport | None = None,
) -> str:
    """
    GET the page and return its HTML.

    Redirects are followed by hand, at most MAX_REDIRECTS hops, and every
    Location is run through validate_url() before it is requested — a public
    page must not be able to bounce the fetch to an internal address.

    Raises:
        ValidationError: a redirect points at an unsafe URL.
        FetchError:      timeout, transport failure, non-2xx, too many redirects.
    """
    settings = settings or default_settings

    with httpx.Client(
        headers=BROWSER_HEADERS,
        timeout=settings.fetch_timeout_seconds,
        follow_redirects=False,
        transport=transport,
    ) as client:
        current = url
        for _ in range(MAX_REDIRECTS + 1):
            response = _get(client, current, settings)
            if not response.is_redirect:
                break
            target = str(response.url.join(response.headers["location"]))
            _log(f"Redirect {response.status_code}: {current} → {target}")
            current = validate_url(target)
        else:
            raise FetchError(
                f"Failed to fetch the URL (more than {MAX_REDIRECTS} redirects)",
                context={"url": url, "last": current},
            )

    if not response.is_success:
        raise FetchError(
            f"Failed to fetch the URL (HTTP {response.status_code})",
            context={"url": current, "status": response.status_code},
        )

    return response.text


# ── Private helpers ───────────────────────────────────────────────────────────

def _get(client: httpx.Client, url: str, settings: Settings) -> httpx.Response:
    try:
        return client.get(url)
    except httpx.TimeoutException as e:
        raise FetchError(
            f"Timed out fetching the URL after {settings.fetch_timeout_seconds:g}s",
            context={"url": url},
        ) from e
    except httpx.HTTPError as e:
        raise FetchError(
            f"Failed to fetch the URL ({type(e).__name__})",
            context={"url": url, "error": str(e)},
        ) from e


def _log(message: str) -> None:
    print(f"[fetch] {message}")
