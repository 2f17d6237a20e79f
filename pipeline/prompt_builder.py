"""
pipeline/prompt_builder.py — Turn content + options into a completion request.

Two lookup tables drive everything here, kept as plain mappings so the
policy can be read (and tested) at a glance:

  FORMAT_INSTRUCTIONS   SummaryFormat → format directive for the system prompt
  token_budget()        (language, format) → max_tokens

TOKEN BUDGET:
  keyTakeaways                → 300   (3-5 full sentences, any language)
  English                     → 200
  any other language/Original → 500   (non-English output costs more tokens
                                       per unit of meaning)

USAGE:
  from pipeline.prompt_builder import build_summary_prompt
  from pipeline.state import SummaryFormat

  prompt = build_summary_prompt(article_text, "Spanish", SummaryFormat.BULLETS)
  prompt.system       # language + format directives
  prompt.user         # "Summarize the following news article in Spanish: ..."
  prompt.max_tokens   # 500
"""

from pipeline.state import SummaryFormat, SummaryPrompt
from prompts.summarizer import (
    FORMAT_BULLETS,
    FORMAT_KEY_TAKEAWAYS,
    FORMAT_PARAGRAPH,
    ORIGINAL_LANGUAGE,
    SYSTEM_PROMPT,
    USER_PROMPT,
)


ORIGINAL = "Original"
ENGLISH = "English"

# Offered by the UI. The API accepts any language name.
SUPPORTED_LANGUAGES = {
    "Original": "Original Language",
    "English": "English",
    "Spanish": "Spanish (Español)",
    "French": "French (Français)",
    "German": "German (Deutsch)",
    "Italian": "Italian (Italiano)",
    "Portuguese": "Portuguese (Português)",
    "Chinese": "Chinese (中文)",
    "Japanese": "Japanese (日本語)",
    "Korean": "Korean (한국어)",
    "Arabic": "Arabic (العربية)",
}

FORMAT_INSTRUCTIONS = {
    SummaryFormat.PARAGRAPH: FORMAT_PARAGRAPH,
    SummaryFormat.BULLETS: FORMAT_BULLETS,
    SummaryFormat.KEY_TAKEAWAYS: FORMAT_KEY_TAKEAWAYS,
}

FORMAT_TOKEN_BUDGETS = {
    SummaryFormat.KEY_TAKEAWAYS: 300,
}

LANGUAGE_TOKEN_BUDGETS = {
    ENGLISH: 200,
}

DEFAULT_TOKEN_BUDGET = 500


# ── Lookups ───────────────────────────────────────────────────────────────────

def is_original(language: str | None) -> bool:
    return not language or language.strip().lower() == ORIGINAL.lower()


def language_directive(language: str | None) -> str:
    """'Original' keeps the article's language; anything else is named as-is."""
    if is_original(language):
        return ORIGINAL_LANGUAGE
    return language.strip()


def token_budget(language: str | None, fmt: SummaryFormat) -> int:
    """Fixed max_tokens lookup — format first, then language."""
    if fmt in FORMAT_TOKEN_BUDGETS:
        return FORMAT_TOKEN_BUDGETS[fmt]
    return LANGUAGE_TOKEN_BUDGETS.get((language or "").strip(), DEFAULT_TOKEN_BUDGET)


# ── Builder ───────────────────────────────────────────────────────────────────

def build_summary_prompt(content: str, language: str | None, fmt: SummaryFormat) -> SummaryPrompt:
    """Build the system/user pair and token cap for one summary."""
    fmt = SummaryFormat(fmt)
    target = language_directive(language)

    return SummaryPrompt(
        system=SYSTEM_PROMPT.format(
            language=target,
            format_instruction=FORMAT_INSTRUCTIONS[fmt],
        ),
        user=USER_PROMPT.format(language=target, content=content),
        max_tokens=token_budget(language, fmt),
        language=language or ORIGINAL,
        format=fmt,
    )
