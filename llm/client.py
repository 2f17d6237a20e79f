"""
llm/client.py — The ONLY file that imports the OpenAI/Azure SDKs.

ONE API SHAPE:
  client.complete(system, user, max_tokens=..., temperature=...) → plain string

  Summarization and topic extraction are both single-turn and stateless:
  one system message, one user message, one answer. Chat Completions is the
  simplest API that does exactly that and works with every model.

THREE AUTH PATHS (first match wins):
  A. openai_api_key set          → OpenAI (optionally a compatible base URL)
  B. foundry_endpoint + key      → AzureOpenAI with API key
  C. foundry_endpoint, no key    → AIProjectClient + DefaultAzureCredential
  None of the above              → ConfigurationError on first use

  The SDK client is built lazily, on the first complete() call. Requests
  that fail validation never need credentials, and the test suite can
  construct an LLMClient without any environment.

ERRORS:
  Every SDK failure (connection, timeout, 4xx/5xx) becomes UpstreamError,
  chained to the original exception so the server log keeps the detail.
  The SDK's own retry loop (llm_max_retries, exponential backoff on
  connection errors, 429 and 5xx) runs before that.

USAGE:
  from llm.client import LLMClient
  client = LLMClient()

  summary = client.complete(
      "You are an AI that summarizes news articles in English.",
      "Summarize the following news article in English:\n\n...",
      max_tokens=200,
  )
  print(summary)            # plain string
  print(client.last_usage)  # {"prompt_tokens": 812, "completion_tokens": 143}
"""

import openai
from openai import AzureOpenAI, OpenAI

from azure.ai.projects import AIProjectClient
from azure.identity import DefaultAzureCredential

from config import Settings, settings as default_settings
from pipeline.errors import ConfigurationError, UpstreamError


class LLMClient:
    """
    Thin wrapper around the Chat Completions API.

    Same auth paths as the Foundry setup, plus plain OpenAI keys.
    Carries its own Settings so tests can inject one.
    """

    def __init__(self, settings: Settings | None = None, sdk_client: OpenAI | None = None) -> None:
        self._settings = settings or default_settings
        self._client: OpenAI | None = sdk_client
        self._model = self._settings.summary_model
        self.last_usage: dict = {}

    @property
    def model(self) -> str:
        return self._model

    # ── Chat Completions ──────────────────────────────────────────────────────

    def complete(
        self,
        system: str,
        user: str,
        *,
        max_tokens: int,
        temperature: float | None = None,
    ) -> str:
        """
        Send one system + user message pair and return the reply text, trimmed.

        temperature is only sent when given — None means provider default.

        Raises:
            ConfigurationError: no completion credentials are configured.
            UpstreamError:      the API call failed or returned no choices.
        """
        kwargs: dict = {
            "model": self._model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            "max_tokens": max_tokens,
        }
        if temperature is not None:
            kwargs["temperature"] = temperature

        client = self._get_client()
        try:
            response = client.chat.completions.create(**kwargs)
        except openai.OpenAIError as e:
            raise UpstreamError(
                f"Completion API error: {type(e).__name__}",
                context={"model": self._model, "error": str(e)},
            ) from e

        if not response.choices:
            raise UpstreamError(
                "Completion API returned no choices",
                context={"model": self._model},
            )

        usage = getattr(response, "usage", None)
        self.last_usage = {
            "prompt_tokens": getattr(usage, "prompt_tokens", 0) or 0,
            "completion_tokens": getattr(usage, "completion_tokens", 0) or 0,
        }

        return (response.choices[0].message.content or "").strip()

    # ── Private ───────────────────────────────────────────────────────────────

    def _get_client(self) -> OpenAI:
        if self._client is None:
            self._client = self._build_client()
        return self._client

    def _build_client(self) -> OpenAI:
        s = self._settings

        if s.openai_api_key:
            # Path A: OpenAI key auth
            return OpenAI(
                api_key=s.openai_api_key,
                base_url=s.openai_base_url or None,
                timeout=s.llm_timeout_seconds,
                max_retries=s.llm_max_retries,
            )

        if s.foundry_endpoint and s.foundry_api_key:
            # Path B: Foundry API key auth
            return AzureOpenAI(
                api_key=s.foundry_api_key,
                azure_endpoint=s.foundry_endpoint,
                api_version=s.api_version,
                timeout=s.llm_timeout_seconds,
                max_retries=s.llm_max_retries,
            )

        if s.foundry_endpoint:
            # Path C: Managed identity / az login
            project_client = AIProjectClient(
                endpoint=s.foundry_endpoint,
                credential=DefaultAzureCredential(),
            )
            return project_client.get_openai_client().with_options(
                timeout=s.llm_timeout_seconds,
                max_retries=s.llm_max_retries,
            )

        raise ConfigurationError("OPENAI_API_KEY (or FOUNDRY_ENDPOINT) not configured")
