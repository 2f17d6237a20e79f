"""
tools/extract.py — Extract readable article text from raw HTML.

THE CORE CONCEPT: From messy HTML to LLM-ready text
  Raw HTML is full of noise: navigation menus, cookie banners, ads,
  sidebars, footers, embedded players, scripts.

  An LLM fed raw HTML wastes tokens on this noise and summarizes the menu
  instead of the story. The extractor's job: find the article and discard
  everything else.

HOW:
  1. Parse with BeautifulSoup (html.parser — no native dependency)
  2. Decompose non-content elements: script, style, nav, header, footer,
     aside, iframe, and friends
  3. Try a prioritized list of content selectors. The FIRST selector whose
     element has text wins — an <article> beats a [role="main"] region even
     when both exist, because article is the most specific signal.
  4. No selector matched → fall back to the whole <body>
  5. clean_text(): collapse every whitespace run to one space, drop
     zero-width/soft-hyphen noise, trim

  The output is one line of text. Paragraph structure does not matter to the
  summarization prompt, and a single line makes the 100-character threshold
  mean the same thing on every site.

USAGE:
  from tools.extract import extract_article_text, clean_text

  text, selector = extract_article_text(html_string)
  print(selector)   # "article", "main", ..., or "body"
"""

import re

from bs4 import BeautifulSoup, Comment


# ── Selectors ─────────────────────────────────────────────────────────────────

# Removed before any text is read.
NON_CONTENT_TAGS = [
    "script",
    "style",
    "noscript",
    "template",
    "nav",
    "header",
    "footer",
    "aside",
    "iframe",
    "form",
    "svg",
]

# Tried in order — most specific first.
CONTENT_SELECTORS = [
    "article",
    '[role="main"]',
    "main",
    ".article-content",
    ".article-body",
    ".post-content",
    ".entry-content",
    ".story-body",
    ".content",
    "#content",
]

BODY_FALLBACK = "body"


# ── Main extraction function ──────────────────────────────────────────────────

def extract_article_text(html: str) -> tuple[str, str]:
    """
    Extract the main article text from raw HTML.

    Returns (text, selector) where selector names the content container that
    matched, or "body" when the fallback was used. text is "" when the page
    has no readable text at all — the caller decides what is too short.
    """
    if not html:
        return "", BODY_FALLBACK

    soup = BeautifulSoup(html, "html.parser")
    strip_non_content(soup)

    for selector in CONTENT_SELECTORS:
        element = soup.select_one(selector)
        if element is None:
            continue
        text = clean_text(element.get_text(separator=" "))
        if text:
            return text, selector

    root = soup.body or soup
    return clean_text(root.get_text(separator=" ")), BODY_FALLBACK


def strip_non_content(soup: BeautifulSoup) -> None:
    """Remove boilerplate elements and HTML comments in place."""
    for element in soup(NON_CONTENT_TAGS):
        element.decompose()

    for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
        comment.extract()


# ── Text cleanup ──────────────────────────────────────────────────────────────

_INVISIBLE = re.compile(r"[\u00ad\u200b\u200c\u200d\u2060\ufeff]")
_WHITESPACE = re.compile(r"\s+")


def clean_text(text: str) -> str:
    """
    Normalize extracted text for LLM consumption.

    Operations (in order):
      1. Remove soft hyphens and zero-width characters
      2. Collapse every whitespace run (spaces, tabs, newlines, nbsp) to one space
      3. Strip leading/trailing whitespace

    Does NOT remove words or truncate — callers decide the length budget.
    """
    if not text:
        return ""

    text = _INVISIBLE.sub("", text)
    text = _WHITESPACE.sub(" ", text)
    return text.strip()


def truncate_chars(text: str, max_chars: int) -> str:
    """
    Return the first max_chars characters of text.

    Used to cap what is sent for topic extraction: the opening of a news
    article names the people, places and events it is about.
    """
    if max_chars <= 0:
        return ""
    return text[:max_chars]
