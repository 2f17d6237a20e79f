"""
pipeline/guardrails.py — Input validation before any network call.

WHAT GUARDRAILS DO:
  They catch bad inputs before they waste a fetch or an LLM call.

  Without guardrails:
    - summarize("") → an empty prompt is sent to the completion API
    - summarize(url="file:///etc/passwd") → the server reads a local file
    - related("ok") → topic extraction on two words returns garbage

  With guardrails:
    - Bad input is rejected immediately with a clear ValidationError
    - The HTTP layer turns that into a 400 with the message verbatim

LAYERS COVERED:
  1. Summarization input   — exactly one of text/url, text long enough
  2. URL safety            — well-formed http(s), no internal hosts
  3. Language / format     — bounded language name, known format
  4. Related-article input — content long enough to extract topics from

USAGE:
  from pipeline.guardrails import validate_summarization_request, validate_url

  request = validate_summarization_request(raw_request, settings)
  url = validate_url("https://example.com/story")
"""

import ipaddress
import re
import socket
from dataclasses import replace
from urllib.parse import urlparse

from config import Settings, settings as default_settings
from pipeline.errors import ValidationError
from pipeline.state import SummarizationRequest, SummaryFormat


MAX_LANGUAGE_LENGTH = 40
DEFAULT_LANGUAGE = "Original"


# ── Summarization input ───────────────────────────────────────────────────────

def validate_summarization_request(
    request: SummarizationRequest,
    settings: Settings | None = None,
) -> SummarizationRequest:
    """
    Validate and normalize a summarization request.

    Returns a new request with stripped text/url, a cleaned language and a
    parsed SummaryFormat. Raises ValidationError on bad input.

    Checks:
      - Exactly one of text/url is non-empty
      - URL is a safe http/https URL (see validate_url)
      - Text is at least min_content_chars and at most max_text_chars
      - Language is a short name (see validate_language)
    """
    settings = settings or default_settings

    text = (request.text or "").strip() if isinstance(request.text, str) else request.text
    url = (request.url or "").strip() if isinstance(request.url, str) else request.url

    if text is not None and not isinstance(text, str):
        raise ValidationError(f"text must be a string, got {type(text).__name__}")
    if url is not None and not isinstance(url, str):
        raise ValidationError(f"url must be a string, got {type(url).__name__}")

    if not text and not url:
        raise ValidationError("No text or URL provided")
    if text and url:
        raise ValidationError("Provide either text or a URL, not both")

    language = validate_language(request.language)
    fmt = SummaryFormat.parse(request.format)

    if url:
        return replace(request, text=None, url=validate_url(url), language=language, format=fmt)

    return replace(
        request,
        text=validate_text(text, settings),
        url=None,
        language=language,
        format=fmt,
    )


def validate_text(text: str, settings: Settings | None = None) -> str:
    """Strip text and enforce the content length bounds."""
    settings = settings or default_settings
    text = text.strip()

    if len(text) < settings.min_content_chars:
        raise ValidationError(
            f"Text too short ({len(text)} chars). "
            f"Minimum is {settings.min_content_chars} characters."
        )

    if len(text) > settings.max_text_chars:
        raise ValidationError(
            f"Text too long ({len(text)} chars). "
            f"Maximum is {settings.max_text_chars} characters."
        )

    return text


def validate_language(language: str | None) -> str:
    """
    Return a clean language name. None/empty → "Original".

    Any name is accepted (the model understands it), but it is embedded in
    the system prompt, so it must be short and single-line.
    """
    if language is None:
        return DEFAULT_LANGUAGE
    if not isinstance(language, str):
        raise ValidationError(f"language must be a string, got {type(language).__name__}")

    language = language.strip()
    if not language:
        return DEFAULT_LANGUAGE

    if len(language) > MAX_LANGUAGE_LENGTH or "\n" in language:
        raise ValidationError(
            f"Invalid language {language[:MAX_LANGUAGE_LENGTH]!r}. "
            f"Use a language name such as 'English' or 'Original'."
        )

    return language


# ── URL safety ────────────────────────────────────────────────────────────────

_HOSTNAME = re.compile(r"^[a-z0-9]([a-z0-9\-]{0,61}[a-z0-9])?(\.[a-z0-9]([a-z0-9\-]{0,61}[a-z0-9])?)*$")
_BLOCKED_NAMES = {"localhost", "localhost.localdomain", "ip6-localhost"}


def validate_url(candidate: str) -> str:
    """
    Return the stripped URL if it is safe to fetch. Raises ValidationError otherwise.

    Blocks:
      - Empty or non-string URLs
      - Non-http/https schemes (file://, ftp://, data://, etc.)
      - Missing or malformed host
      - Localhost, private, loopback and link-local addresses (SSRF prevention),
        including numeric shorthand like 2130706433, 0x7f000001 or 127.1

    Internationalized host names are checked in their IDNA (punycode) form.
    This is a structural check — it does not resolve DNS.
    """
    if not candidate or not isinstance(candidate, str):
        raise ValidationError("No URL provided")

    url = candidate.strip()
    parsed = urlparse(url)

    if parsed.scheme.lower() not in ("http", "https"):
        raise ValidationError(f"Invalid URL: {url[:200]} (must start with http:// or https://)")

    try:
        host = (parsed.hostname or "").lower()
        parsed.port  # raises ValueError on a non-numeric port
    except ValueError:
        raise ValidationError(f"Invalid URL: {url[:200]}") from None

    # One trailing dot is the fully-qualified form of the same name.
    if host.endswith("."):
        host = host[:-1]

    if not host:
        raise ValidationError(f"Invalid URL: {url[:200]} (no host)")

    ip = _as_ip(host)
    if host in _BLOCKED_NAMES or (ip is not None and _is_internal(ip)):
        raise ValidationError(f"URL not allowed: {host} is an internal address")

    if ip is None and not _HOSTNAME.match(_idna(host)):
        raise ValidationError(f"Invalid URL: {url[:200]} (bad host name)")

    return url


def is_safe_url(url: str) -> bool:
    """Boolean form of validate_url()."""
    try:
        validate_url(url)
    except ValidationError:
        return False
    return True


def _as_ip(host: str) -> ipaddress.IPv4Address | ipaddress.IPv6Address | None:
    """
    Parse host as an IP address, or None for a name.

    inet_aton accepts the legacy IPv4 spellings (decimal, hex, octal,
    fewer than four parts) that resolvers also accept.
    """
    try:
        return ipaddress.ip_address(host)
    except ValueError:
        pass
    try:
        return ipaddress.IPv4Address(socket.inet_aton(host))
    except (OSError, ValueError):
        return None


def _is_internal(ip: ipaddress.IPv4Address | ipaddress.IPv6Address) -> bool:
    if isinstance(ip, ipaddress.IPv6Address) and ip.ipv4_mapped is not None:
        ip = ip.ipv4_mapped
    return ip.is_private or ip.is_loopback or ip.is_link_local or ip.is_unspecified or ip.is_reserved


def _idna(host: str) -> str:
    try:
        return host.encode("idna").decode("ascii")
    except UnicodeError:
        return ""


# ── Related-article input ─────────────────────────────────────────────────────

def validate_related_content(content: str | None, settings: Settings | None = None) -> str:
    """
    Content for topic extraction must be a string of at least
    min_related_content_chars after stripping.
    """
    settings = settings or default_settings

    if content is not None and not isinstance(content, str):
        raise ValidationError(f"content must be a string, got {type(content).__name__}")

    content = (content or "").strip()
    if len(content) < settings.min_related_content_chars:
        raise ValidationError("Content too short to extract topics")

    return content
