"""
api/server.py — JSON HTTP API for the news summarizer.

Endpoints:
  GET  /                  service info
  GET  /health            liveness + which credentials are configured
  POST /summarize         {text? | url?, language?, format?} → {summary}
  POST /related-articles  {content} → {relatedArticles, searchQuery, message?}

STATUS CODES:
  /summarize
    200 {summary}
    400 {error}  bad input, URL could not be fetched, page had no article
                 (message shown verbatim — the user can act on it)
    500 {error}  completion API or configuration failure
                 (generic message — provider detail stays in the server log)

  /related-articles
    400 {error}  content shorter than 50 characters
    200 always otherwise — {relatedArticles: [], error} on failure, so the
                 UI never blocks on a supplementary feature

  Malformed JSON and wrongly typed fields are reported as 400 {error}, not
  FastAPI's default 422 — the same shape as every other input problem.

The handlers are plain `def`: every outbound call (httpx, openai) is
synchronous, so FastAPI runs them in its worker thread pool.

Run with:
  uv run uvicorn api.server:app --reload
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from config import Settings, settings as default_settings
from llm.client import LLMClient
from pipeline.errors import (
    FetchError,
    InsufficientContentError,
    SummarizerError,
    ValidationError,
)
from pipeline.runner import RELATED_FAILURE_MESSAGE, run_related_articles, run_summarize
from pipeline.state import SummarizationRequest


API_VERSION = "1.0.0"
SUMMARY_FAILURE_MESSAGE = "Failed to generate summary"


# ── Request models ────────────────────────────────────────────────────────────

class SummarizeRequest(BaseModel):
    """Body of POST /summarize. Exactly one of text/url must carry content."""

    text: str | None = None
    url: str | None = None
    language: str | None = None
    format: str | None = None


class RelatedArticlesRequest(BaseModel):
    """Body of POST /related-articles."""

    content: str | None = None


# ── App factory ───────────────────────────────────────────────────────────────

def create_app(settings: Settings | None = None, client: LLMClient | None = None) -> FastAPI:
    """
    Build the FastAPI application.

    settings/client are injected into app.state; tests pass their own.
    Without a client, each request gets a fresh LLMClient so no per-call
    state is shared between concurrent requests.
    """
    settings = settings or default_settings

    app = FastAPI(
        title="News Summarizer",
        description="Summarize news articles from text or URL and find related coverage",
        version=API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings
    app.state.client = client

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, _request_validation_handler)

    @app.get("/")
    def root():
        """Root endpoint with API information."""
        return {
            "message": "News Summarizer API",
            "version": API_VERSION,
            "docs": "/docs",
            "health": "/health",
        }

    @app.get("/health")
    def health(request: Request):
        """Liveness check. Makes no outbound calls."""
        s: Settings = request.app.state.settings
        return {
            "status": "ok",
            "model": s.summary_model,
            "llm_configured": s.has_llm_credentials,
            "news_search_configured": s.has_news_credentials,
        }

    @app.post("/summarize")
    def summarize(body: SummarizeRequest, request: Request):
        """Summarize raw text or the article at a URL."""
        s: Settings = request.app.state.settings
        summarization_request = SummarizationRequest(
            text=body.text,
            url=body.url,
            language=body.language,
            format=body.format,
        )

        try:
            result = run_summarize(summarization_request, s, _client_for(request))
        except (ValidationError, FetchError, InsufficientContentError) as e:
            return JSONResponse({"error": e.message}, status_code=400)
        except SummarizerError:
            # Already logged with full detail by the runner.
            return JSONResponse({"error": SUMMARY_FAILURE_MESSAGE}, status_code=500)
        except Exception as e:
            _log(f"Unexpected error in /summarize: {type(e).__name__}: {e}")
            return JSONResponse({"error": SUMMARY_FAILURE_MESSAGE}, status_code=500)

        return result.to_dict()

    @app.post("/related-articles")
    def related_articles(body: RelatedArticlesRequest, request: Request):
        """Extract topics from content and return related recent news."""
        s: Settings = request.app.state.settings

        try:
            result = run_related_articles(body.content, s, _client_for(request))
        except ValidationError as e:
            return JSONResponse({"error": e.message}, status_code=400)
        except Exception as e:
            _log(f"Unexpected error in /related-articles: {type(e).__name__}: {e}")
            return {"relatedArticles": [], "error": RELATED_FAILURE_MESSAGE}

        return result.to_dict()

    return app


# ── Private helpers ───────────────────────────────────────────────────────────

def _client_for(request: Request) -> LLMClient:
    injected = request.app.state.client
    return injected if injected is not None else LLMClient(request.app.state.settings)


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"Invalid request: {field + ': ' if field else ''}{first.get('msg', 'invalid value')}"
    else:
        message = "Invalid request body"
    return JSONResponse({"error": message}, status_code=400)


def _log(message: str) -> None:
    print(f"[api] {message}")


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api.server:app", host="0.0.0.0", port=8000)
