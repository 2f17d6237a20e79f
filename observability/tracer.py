"""
observability/tracer.py — Span-based tracing for one request.

THE CORE CONCEPT:
  Every meaningful step of a request is a Span: a named unit of work with a
  start time, end time, status, and metadata dict.

  A Trace collects all spans for one request and saves them to disk as JSON.
  This gives you a permanent record of exactly what happened:
    - Which URL was fetched, which selector matched, how many chars came back
    - Which model was called, with what token budget, and what it used
    - Which topics were extracted and how many articles survived filtering
    - Where a failure happened and why — including provider detail that the
      caller never sees

WHAT GETS TRACED:
  summarize         → fetch (url mode only), summarize
  related-articles  → topics, search

USAGE:
  tracer = Tracer(operation="summarize")

  with tracer.span("fetch") as span:
      content = summarizer.fetch(url)
      span.metadata["chars"] = content.char_count

  tracer.finish(status="success")
  path = tracer.save(Path("logs/traces"))
"""

import json
import time
import uuid
from contextlib import contextmanager, nullcontext
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from pathlib import Path


# ── Span ──────────────────────────────────────────────────────────────────────

@dataclass
class Span:
    """
    One named step in the pipeline.

    status is "success" or "error".
    metadata holds step-specific data (url, max_tokens, n_articles, etc.).
    """
    name: str
    step: int
    started_at: float       # time.monotonic() — for duration math
    ended_at: float = 0.0
    duration_ms: float = 0.0
    status: str = "success"
    metadata: dict = field(default_factory=dict)
    error: str = ""

    def finish(self, status: str = "success", error: str = "") -> None:
        self.ended_at = time.monotonic()
        self.duration_ms = round((self.ended_at - self.started_at) * 1000, 2)
        self.status = status
        self.error = error


# ── Trace ─────────────────────────────────────────────────────────────────────

@dataclass
class Trace:
    """
    Complete record of one request: all spans + outcome.

    status: "running" → "success" | "degraded" | "error"
    Saved to {log_dir}/traces/{run_id}.json after the request completes.
    """
    run_id: str
    operation: str
    started_at: str         # ISO timestamp
    completed_at: str = ""
    spans: list[Span] = field(default_factory=list)

    status: str = "running"
    error: str = ""
    summary: dict = field(default_factory=dict)
    total_duration_ms: float = 0.0

    def to_dict(self) -> dict:
        return asdict(self)


# ── Tracer ────────────────────────────────────────────────────────────────────

class Tracer:
    """
    Collects spans for one request and saves the trace to disk.

    Context manager interface:
        with tracer.span("topics") as span:
            span.metadata["topics"] = "..."
        # span is automatically finished when the with-block exits

    On error inside the with-block: span status is set to "error"
    and the exception is re-raised — the tracer never swallows errors.
    """

    def __init__(self, operation: str, run_id: str | None = None) -> None:
        self._run_id = run_id or uuid.uuid4().hex[:12]
        self._started = time.monotonic()
        self._trace = Trace(
            run_id=self._run_id,
            operation=operation,
            started_at=datetime.now(timezone.utc).isoformat(),
        )
        self._step_counter = 0

    @property
    def run_id(self) -> str:
        return self._run_id

    @property
    def trace(self) -> Trace:
        return self._trace

    @contextmanager
    def span(self, name: str):
        """
        Context manager that creates, times, and closes a span.

        On exception: span is marked "error", exception is re-raised.
        """
        self._step_counter += 1
        s = Span(name=name, step=self._step_counter, started_at=time.monotonic())
        self._trace.spans.append(s)
        try:
            yield s
            s.finish(status="success")
        except Exception as exc:
            s.finish(status="error", error=f"{type(exc).__name__}: {exc}")
            raise

    def finish(self, status: str, error: str = "", **summary) -> None:
        """Record the request outcome. Call after all spans are done."""
        elapsed = time.monotonic() - self._started
        self._trace.completed_at = datetime.now(timezone.utc).isoformat()
        self._trace.total_duration_ms = round(elapsed * 1000, 2)
        self._trace.status = status
        self._trace.error = error
        self._trace.summary.update(summary)

    def save(self, log_dir: Path | None = None) -> Path:
        """
        Write the trace to {log_dir}/{run_id}.json.
        Returns the path written. Creates the directory if needed.
        """
        if log_dir is None:
            log_dir = Path(__file__).parent.parent / "logs" / "traces"
        log_dir.mkdir(parents=True, exist_ok=True)

        path = log_dir / f"{self._run_id}.json"
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self._trace.to_dict(), f, indent=2, default=str)

        return path


def maybe_span(tracer: Tracer | None, name: str):
    """tracer.span(name), or a throwaway span when there is no tracer."""
    if tracer is None:
        return nullcontext(Span(name=name, step=0, started_at=time.monotonic()))
    return tracer.span(name)
