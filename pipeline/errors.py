"""
pipeline/errors.py — Every failure the pipeline can report, by kind.

Each kind maps to one caller-facing behaviour:

  ValidationError          → 400, message shown verbatim (user must fix input)
  FetchError               → 400, message shown verbatim (URL could not be read)
  InsufficientContentError → 400, message shown verbatim (page had no article)
  UpstreamError            → 500, generic message (provider detail is logged only)
  RateLimitError           → related articles report "try again later"
  ConfigurationError       → generic failure, logged (a credential is missing)

ValidationError is also a ValueError, so code that validates with plain
`except ValueError` keeps working.

USAGE:
  from pipeline.errors import ValidationError, UpstreamError

  raise ValidationError("No text provided")
  raise UpstreamError("Completion API returned 503", context={"model": "gpt-4o-mini"})
"""

from typing import Any


class SummarizerError(Exception):
    """Base for all pipeline errors. context carries log-only detail."""

    def __init__(self, message: str, context: Any | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context


class ValidationError(SummarizerError, ValueError):
    """Missing or malformed user input. Raised before any network call."""


class FetchError(SummarizerError):
    """The article URL could not be fetched (timeout, network, non-2xx)."""


class InsufficientContentError(SummarizerError):
    """The page was fetched but yielded too little readable text."""


class UpstreamError(SummarizerError):
    """The completion API failed or returned nothing usable."""


class RateLimitError(SummarizerError):
    """The news-search API is throttling us. Distinct so the user knows to wait."""


class ConfigurationError(SummarizerError):
    """A required credential or setting is absent."""
