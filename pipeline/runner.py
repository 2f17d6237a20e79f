"""
pipeline/runner.py — The two request round-trips, with tracing and error policy.

THE TWO ROUND-TRIPS:
  1. run_summarize()         request → (fetch) → summary
  2. run_related_articles()  content → topics → NewsAPI → related articles

  They are independent: the UI calls the second after the first succeeds,
  passing content_for_related() — the original text in text mode, the
  generated summary in URL mode (the extracted page never reaches the UI).

ERROR POLICY:
  Summarization is the primary feature: every failure propagates to the
  caller, which reports it (400 for input/URL problems, 500 otherwise).

  Related articles are supplementary: only ValidationError propagates.
  Everything else becomes a RelatedArticlesResult with an error message
  and an empty list, so the UI never blocks on it:
    RateLimitError → "NewsAPI rate limit reached. Please try again later."
    anything else  → "Failed to find related articles" (detail logged here)

TRACING:
  Each call opens a Tracer, the pipeline records its spans, and the trace
  is saved to {log_dir}/traces/ when settings.save_traces is on.

USAGE:
  from pipeline.runner import run_summarize, run_related_articles

  result = run_summarize(SummarizationRequest(url="https://..."))
  related = run_related_articles(content_for_related(request, result.text))
"""

from pathlib import Path

from config import Settings, settings as default_settings
from llm.client import LLMClient
from observability.tracer import Tracer
from pipeline.errors import RateLimitError, SummarizerError, ValidationError
from pipeline.related import find_related_articles
from pipeline.state import RelatedArticlesResult, SummarizationRequest, SummaryResult
from pipeline.summarizer import Summarizer


RATE_LIMIT_MESSAGE = "NewsAPI rate limit reached. Please try again later."
RELATED_FAILURE_MESSAGE = "Failed to find related articles"


# ── Round-trip 1: summarize ───────────────────────────────────────────────────

def run_summarize(
    request: SummarizationRequest,
    settings: Settings | None = None,
    client: LLMClient | None = None,
) -> SummaryResult:
    """
    Summarize raw text or a URL.

    Raises every pipeline error (ValidationError, FetchError,
    InsufficientContentError, UpstreamError, ConfigurationError).
    """
    settings = settings or default_settings
    client = client or LLMClient(settings)
    tracer = Tracer(operation="summarize")

    try:
        result = Summarizer(client, settings).summarize(request, tracer=tracer)
        tracer.finish(
            status="success",
            input_mode=request.input_mode,
            input_chars=result.input_chars,
            summary_chars=len(result.text),
        )
        _log(f"Summary complete — {len(result.text)} chars ({result.format.value}, {result.language})")
        return result

    except SummarizerError as e:
        tracer.finish(status="error", error=f"{type(e).__name__}: {e}", input_mode=request.input_mode)
        _log_failure("summarize", e)
        raise

    except Exception as e:
        tracer.finish(status="error", error=f"{type(e).__name__}: {e}", input_mode=request.input_mode)
        _log(f"Unexpected error in summarize: {type(e).__name__}: {e}")
        raise

    finally:
        _save_trace(tracer, settings)


# ── Round-trip 2: related articles ────────────────────────────────────────────

def run_related_articles(
    content: str,
    settings: Settings | None = None,
    client: LLMClient | None = None,
) -> RelatedArticlesResult:
    """
    Find related articles for content.

    Raises ValidationError for content that is too short. Every other
    failure is folded into the returned result's error field.
    """
    settings = settings or default_settings
    client = client or LLMClient(settings)
    tracer = Tracer(operation="related-articles")

    try:
        result = find_related_articles(content, client, settings, tracer=tracer)
        tracer.finish(
            status="success",
            search_query=result.search_query,
            n_articles=len(result.articles),
        )
        _log(f"Related articles — {len(result.articles)} for {result.search_query!r}")
        return result

    except ValidationError as e:
        tracer.finish(status="error", error=str(e))
        raise

    except RateLimitError as e:
        tracer.finish(status="degraded", error=str(e))
        _log_failure("related-articles", e)
        return RelatedArticlesResult(error=RATE_LIMIT_MESSAGE)

    except Exception as e:
        tracer.finish(status="degraded", error=f"{type(e).__name__}: {e}")
        _log_failure("related-articles", e)
        return RelatedArticlesResult(error=RELATED_FAILURE_MESSAGE)

    finally:
        _save_trace(tracer, settings)


def content_for_related(request: SummarizationRequest, summary: str) -> str:
    """Text mode → the original text. URL mode → the summary."""
    if request.input_mode == "url":
        return summary
    return request.text or ""


# ── Private helpers ───────────────────────────────────────────────────────────

def _save_trace(tracer: Tracer, settings: Settings) -> None:
    if not settings.save_traces:
        return
    try:
        path = tracer.save(Path(settings.log_dir) / "traces")
    except OSError as e:
        _log(f"Could not save trace {tracer.run_id}: {e}")
        return
    _log(f"Trace saved → {path}")


def _log_failure(operation: str, error: Exception) -> None:
    """Full detail for the server log — including context callers never see."""
    context = getattr(error, "context", None)
    cause = error.__cause__
    detail = f"{type(error).__name__}: {error}"
    if context:
        detail += f" | context={context}"
    if cause is not None:
        detail += f" | cause={type(cause).__name__}: {cause}"
    _log(f"{operation} failed — {detail}")


def _log(message: str) -> None:
    print(f"[runner] {message}")
