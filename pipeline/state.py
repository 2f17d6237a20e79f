"""
pipeline/state.py — Request/response dataclasses + SummaryFormat enum.

Design principles:
  - Dataclasses, not dicts — typos become AttributeError, not silent new keys
  - Everything here lives for one request and is then discarded
  - JSON shapes for the HTTP API are produced by to_dict(), in one place

Key design decisions:

  SummaryFormat is a str Enum:
    The wire values ("paragraph", "bullets", "keyTakeaways") are the enum
    values, so SummaryFormat("bullets") parses API input directly and the
    prompt/token lookup tables can be keyed by the enum.

  RelatedArticle is filtered at ingestion:
    tools/search.py only builds a RelatedArticle when title, description and
    url are all present. Nothing downstream re-checks.

USAGE:
  from pipeline.state import SummarizationRequest, SummaryFormat

  request = SummarizationRequest(text="...", language="English",
                                 format=SummaryFormat.BULLETS)
  print(request.input_mode)   # "text"
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from pipeline.errors import ValidationError


# ── Format enum ───────────────────────────────────────────────────────────────

class SummaryFormat(str, Enum):
    """
    How the summary is laid out.

    PARAGRAPH      → one concise paragraph
    BULLETS        → bullet points of the key points
    KEY_TAKEAWAYS  → 3-5 takeaways ranked by importance
    """
    PARAGRAPH     = "paragraph"
    BULLETS       = "bullets"
    KEY_TAKEAWAYS = "keyTakeaways"

    @property
    def label(self) -> str:
        return _FORMAT_LABELS[self]

    @classmethod
    def parse(cls, value: str | SummaryFormat | None) -> SummaryFormat:
        """Parse API input. None/empty → PARAGRAPH, unknown → ValidationError."""
        if value is None or value == "":
            return cls.PARAGRAPH
        try:
            return cls(value)
        except ValueError:
            allowed = ", ".join(f.value for f in cls)
            raise ValidationError(
                f"Unknown format {value!r}. Expected one of: {allowed}"
            ) from None


_FORMAT_LABELS = {
    SummaryFormat.PARAGRAPH: "Paragraph",
    SummaryFormat.BULLETS: "Bullets",
    SummaryFormat.KEY_TAKEAWAYS: "Key Takeaways",
}


# ── Summarization ─────────────────────────────────────────────────────────────

@dataclass
class SummarizationRequest:
    """
    One summarize call, as submitted.

    Exactly one of text/url must carry content — pipeline/guardrails.py
    enforces that before anything is fetched or sent.
    """
    text: str | None = None
    url: str | None = None
    language: str = "Original"
    format: SummaryFormat = SummaryFormat.PARAGRAPH

    @property
    def input_mode(self) -> str:
        """'url' when a URL was given, otherwise 'text'."""
        return "url" if isinstance(self.url, str) and self.url.strip() else "text"


@dataclass
class ExtractedContent:
    """Readable article text pulled from a web page."""
    url: str
    text: str
    selector: str          # which content selector matched — "body" for the fallback
    fetched_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    @property
    def char_count(self) -> int:
        return len(self.text)


@dataclass
class SummaryPrompt:
    """A ready-to-send completion request: two messages + token cap."""
    system: str
    user: str
    max_tokens: int
    language: str
    format: SummaryFormat


@dataclass
class SummaryResult:
    text: str
    language: str
    format: SummaryFormat
    input_chars: int
    source_url: str | None = None

    def to_dict(self) -> dict:
        return {"summary": self.text}


# ── Related articles ──────────────────────────────────────────────────────────

@dataclass
class RelatedArticle:
    """
    One news-search hit, reshaped for the UI.

    title, description and url are always non-empty. source, published_at and
    image_url are whatever the search API supplied (possibly empty/None).
    """
    title: str
    description: str
    url: str
    source: str = ""
    published_at: str = ""
    image_url: str | None = None

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "description": self.description,
            "url": self.url,
            "source": self.source,
            "publishedAt": self.published_at,
            "imageUrl": self.image_url,
        }


@dataclass
class RelatedArticlesResult:
    """
    The outcome of one related-articles lookup.

    articles keeps the search API's relevancy order.
    message explains an empty-but-successful result ("no topics", "no articles").
    error is set only on the degraded path — the HTTP layer still answers 200.
    """
    articles: list[RelatedArticle] = field(default_factory=list)
    search_query: str = ""
    message: str = ""
    error: str = ""

    def to_dict(self) -> dict:
        if self.error:
            return {
                "relatedArticles": [a.to_dict() for a in self.articles],
                "error": self.error,
            }
        data: dict = {
            "relatedArticles": [a.to_dict() for a in self.articles],
            "searchQuery": self.search_query,
        }
        if self.message:
            data["message"] = self.message
        return data

    @property
    def is_degraded(self) -> bool:
        return bool(self.error)
