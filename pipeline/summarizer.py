"""
pipeline/summarizer.py — Content in, summary out.

THE CORE CONCEPT:
  A summarize request carries either raw text or a URL. The Summarizer
  resolves that to article text, builds the prompt for the requested
  language and format, and makes exactly one completion call.

    text ──────────────────────────────┐
                                       ├─→ build_summary_prompt → complete → SummaryResult
    url ──→ fetch_article (extract) ───┘

  No retries here — the SDK's bounded retry loop is the only one. A failed
  summary is surfaced to the user, never papered over: summarization is the
  primary feature.

USAGE:
  from pipeline.summarizer import Summarizer
  from llm.client import LLMClient

  summarizer = Summarizer(client=LLMClient())
  result = summarizer.summarize(request)
  print(result.text)
"""

from config import Settings, settings as default_settings
from llm.client import LLMClient
from pipeline.errors import UpstreamError
from pipeline.guardrails import validate_summarization_request
from pipeline.prompt_builder import build_summary_prompt
from pipeline.state import ExtractedContent, SummarizationRequest, SummaryPrompt, SummaryResult
from observability.tracer import Tracer, maybe_span
from tools.fetch import fetch_article


class Summarizer:
    """
    Resolves request content, builds the prompt, calls the completion API.

    Raises pipeline errors — the caller (runner / HTTP layer) decides how
    each kind is reported.
    """

    def __init__(self, client: LLMClient, settings: Settings | None = None) -> None:
        self._client = client
        self._settings = settings or default_settings

    def summarize(self, request: SummarizationRequest, tracer: Tracer | None = None) -> SummaryResult:
        """
        Validate, resolve content and summarize in one go.

        With a tracer, the fetch (url mode) and completion steps are recorded
        as spans.
        """
        request = validate_summarization_request(request, self._settings)

        if request.input_mode == "url":
            with maybe_span(tracer, "fetch") as span:
                span.metadata["url"] = request.url
                extracted = self.fetch(request.url)
                span.metadata["selector"] = extracted.selector
                span.metadata["chars"] = extracted.char_count
            content = extracted.text
        else:
            content = request.text

        with maybe_span(tracer, "summarize") as span:
            span.metadata["input_mode"] = request.input_mode
            span.metadata["language"] = request.language
            span.metadata["format"] = request.format.value
            result = self.summarize_content(content, request)
            span.metadata["model"] = self._client.model
            span.metadata["usage"] = self._client.last_usage
            span.metadata["summary_chars"] = len(result.text)
        return result

    def fetch(self, url: str) -> ExtractedContent:
        return fetch_article(url, self._settings)

    def summarize_content(self, content: str, request: SummarizationRequest) -> SummaryResult:
        """One completion call for already-resolved content."""
        prompt = build_summary_prompt(content, request.language, request.format)
        _log(f"Summarizing {len(content)} chars → {prompt.language} / {prompt.format.value} (max_tokens={prompt.max_tokens})")
        text = self._complete(prompt)

        return SummaryResult(
            text=text,
            language=prompt.language,
            format=prompt.format,
            input_chars=len(content),
            source_url=request.url if request.input_mode == "url" else None,
        )

    # ── Private ───────────────────────────────────────────────────────────────

    def _complete(self, prompt: SummaryPrompt) -> str:
        # Summaries use the provider's default temperature.
        text = self._client.complete(
            prompt.system,
            prompt.user,
            max_tokens=prompt.max_tokens,
        )
        if not text:
            raise UpstreamError("Completion API returned an empty summary")
        return text


def _log(message: str) -> None:
    print(f"[summarizer] {message}")
