"""
pipeline/topics.py — Article content → short search query.

The related-articles search needs a query, not an article. The topic
extractor asks the model for the 3-5 most specific, newsworthy terms
(people, places, organizations, events), comma separated:

  "Artemis II, NASA, Orion capsule, Kennedy Space Center"

Settings that matter:
  topic_content_chars (2000) — only the opening of the article is sent;
                               that is where a news story names its subjects
  topic_max_tokens    (100)  — a handful of terms, never prose
  topic_temperature   (0.3)  — the same article gives the same query

An empty answer is a valid result ("no usable topics"), not an error.
"""

from config import Settings, settings as default_settings
from llm.client import LLMClient
from prompts.topics import TOPICS_SYSTEM_PROMPT, TOPICS_USER_PROMPT
from tools.extract import truncate_chars


class TopicExtractor:
    def __init__(self, client: LLMClient, settings: Settings | None = None) -> None:
        self._client = client
        self._settings = settings or default_settings

    def extract(self, content: str) -> str:
        """
        Return comma-separated topic terms, trimmed. "" means none found.
        UpstreamError / ConfigurationError propagate.
        """
        excerpt = truncate_chars(content, self._settings.topic_content_chars)

        topics = self._client.complete(
            TOPICS_SYSTEM_PROMPT,
            TOPICS_USER_PROMPT.format(content=excerpt),
            max_tokens=self._settings.topic_max_tokens,
            temperature=self._settings.topic_temperature,
        )
        return (topics or "").strip()
