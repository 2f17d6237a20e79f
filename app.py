"""
app.py — Streamlit single-page UI for the News Summarizer.

One page, two round-trips:
  1. Summarize — paste text or a URL, pick format + language
  2. Related articles — fetched right after a successful summary, using the
     original text (text mode) or the summary (URL mode)

Run with:
  uv run streamlit run app.py
"""

import sys
from datetime import datetime
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

import streamlit as st

from config import settings
from pipeline.errors import FetchError, InsufficientContentError, ValidationError
from pipeline.prompt_builder import SUPPORTED_LANGUAGES
from pipeline.runner import content_for_related, run_related_articles, run_summarize
from pipeline.state import SummarizationRequest, SummaryFormat

# ── Page config ───────────────────────────────────────────────────────────────

st.set_page_config(
    page_title="AI News Summarizer",
    layout="centered",
    page_icon="📰",
)

FORMAT_OPTIONS = {
    SummaryFormat.PARAGRAPH: "📄 Paragraph",
    SummaryFormat.BULLETS: "• Bullet Points",
    SummaryFormat.KEY_TAKEAWAYS: "🔑 Key Takeaways",
}

# ── Sidebar ───────────────────────────────────────────────────────────────────

with st.sidebar:
    st.title("📰 News Summarizer")
    st.divider()

    st.subheader("Configuration")
    st.caption(f"**Model:** {settings.summary_model}")
    st.caption(f"**Completion API:** {'configured' if settings.has_llm_credentials else 'missing key'}")
    st.caption(f"**News search:** {'configured' if settings.has_news_credentials else 'missing key'}")
    st.caption(f"**Related window:** last {settings.related_lookback_days} days")

# ── Helpers ───────────────────────────────────────────────────────────────────

def _summarize(request: SummarizationRequest) -> None:
    """Round-trip 1. Stores the summary (or an error line) in session state."""
    st.session_state["summary"] = ""
    st.session_state["related"] = None
    st.session_state["related_content"] = ""

    try:
        result = run_summarize(request)
    except (ValidationError, FetchError, InsufficientContentError) as e:
        st.session_state["summary"] = f"Error: {e.message}"
        return
    except Exception:
        st.session_state["summary"] = "Error: Failed to generate summary"
        return

    st.session_state["summary"] = result.text or "No summary generated."
    st.session_state["summary_label"] = f"{request.language} - {result.format.label}"
    st.session_state["related_content"] = content_for_related(request, result.text)


def _load_related() -> None:
    """Round-trip 2. Never raises — the related section is optional."""
    content = st.session_state.get("related_content", "")
    try:
        result = run_related_articles(content)
    except ValidationError:
        st.session_state["related"] = []
        return
    st.session_state["related"] = [] if result.is_degraded else result.articles


def _format_date(published_at: str) -> str:
    try:
        return datetime.fromisoformat(published_at.replace("Z", "+00:00")).strftime("%b %d, %Y")
    except ValueError:
        return published_at


def _render_article(article) -> None:
    with st.container(border=True):
        col_img, col_text = st.columns([1, 4]) if article.image_url else (None, st.container())
        if col_img is not None:
            col_img.image(article.image_url, width="stretch")
        with col_text:
            st.markdown(f"**[{article.title}]({article.url})**")
            st.caption(article.description or "No description available")
            meta = article.source
            if article.published_at:
                meta = f"{meta} • {_format_date(article.published_at)}" if meta else _format_date(article.published_at)
            if meta:
                st.caption(meta)


# ── Form ──────────────────────────────────────────────────────────────────────

st.header("📰 AI News Summarizer")

input_mode = st.radio(
    "Input",
    options=["text", "url"],
    format_func=lambda m: "📝 Text Input" if m == "text" else "🔗 URL Input",
    horizontal=True,
    key="input_mode",
)

if input_mode == "text":
    news_input = st.text_area(
        label="Article text",
        placeholder="Paste your news article text here...",
        height=160,
        key="news_text",
    )
else:
    news_input = st.text_input(
        label="Article URL",
        placeholder="Enter article URL (e.g., https://example.com/article)",
        key="news_url",
    )

summary_format = st.selectbox(
    "Summary Format",
    options=list(FORMAT_OPTIONS),
    format_func=lambda f: FORMAT_OPTIONS[f],
    key="summary_format",
)

language = st.selectbox(
    "Summary Language",
    options=list(SUPPORTED_LANGUAGES),
    format_func=lambda code: SUPPORTED_LANGUAGES[code],
    key="language",
)

if st.button("✨ Summarize", type="primary", width="stretch"):
    if news_input.strip():
        request = SummarizationRequest(
            text=news_input if input_mode == "text" else None,
            url=news_input if input_mode == "url" else None,
            language=language,
            format=summary_format,
        )
        with st.spinner("✨ Summarizing..."):
            _summarize(request)
        if st.session_state.get("related_content"):
            with st.spinner("Finding related articles..."):
                _load_related()

# ── Summary ───────────────────────────────────────────────────────────────────

summary = st.session_state.get("summary", "")

if summary:
    with st.container(border=True):
        label = st.session_state.get("summary_label", "")
        st.subheader(f"📄 Summary ({label}):" if label and not summary.startswith("Error:") else "📄 Summary:")
        st.text(summary)

    # ── Related articles ──────────────────────────────────────────────────────
    st.subheader("🔗 Related Articles")
    related = st.session_state.get("related")

    if related:
        for article in related:
            _render_article(article)
    elif st.session_state.get("related_content"):
        st.info("No related articles found. Try a different article.")
    else:
        st.info("Related articles will appear here after summarization.")
