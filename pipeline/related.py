"""
pipeline/related.py — Content → topics → related news.

THE CORE CONCEPT:
  Two steps, strictly in order:
    1. TopicExtractor turns the article into a short query
    2. search_news() asks NewsAPI for recent coverage of that query

  If step 1 finds nothing, step 2 never runs — an empty query would either
  fail or return random headlines.

  This class reports failures by raising. The decision to degrade (empty
  list, 200) rather than fail belongs to the caller — see
  pipeline/runner.py.

USAGE:
  from pipeline.related import find_related_articles

  result = find_related_articles(article_text, client=LLMClient())
  print(result.search_query)
  for a in result.articles:
      print(a.title)
"""

from config import Settings, settings as default_settings
from llm.client import LLMClient
from observability.tracer import Tracer, maybe_span
from pipeline.guardrails import validate_related_content
from pipeline.state import RelatedArticlesResult
from pipeline.topics import TopicExtractor
from tools.search import search_news


NO_TOPICS_MESSAGE = "Could not extract topics from content"
NO_ARTICLES_MESSAGE = "No recent articles found for these topics"


class RelatedArticleFinder:
    """Extracts topics from content and searches for related articles."""

    def __init__(
        self,
        client: LLMClient,
        settings: Settings | None = None,
        topic_extractor: TopicExtractor | None = None,
    ) -> None:
        self._settings = settings or default_settings
        self._topics = topic_extractor or TopicExtractor(client, self._settings)

    def find(self, content: str, tracer: Tracer | None = None) -> RelatedArticlesResult:
        """
        Validate content, extract topics, search.

        With a tracer, topic extraction and search are recorded as spans.

        Raises:
            ValidationError:    content shorter than min_related_content_chars.
            UpstreamError:      topic extraction failed.
            ConfigurationError: no NewsAPI key.
            RateLimitError:     NewsAPI throttled the search.
        """
        content = validate_related_content(content, self._settings)

        with maybe_span(tracer, "topics") as span:
            span.metadata["content_chars"] = len(content)
            topics = self.extract_topics(content)
            span.metadata["topics"] = topics

        if not topics:
            _log("No topics extracted — skipping search")
            return RelatedArticlesResult(search_query="", message=NO_TOPICS_MESSAGE)

        with maybe_span(tracer, "search") as span:
            span.metadata["query"] = topics
            result = self.search(topics)
            span.metadata["n_articles"] = len(result.articles)
        return result

    def extract_topics(self, content: str) -> str:
        return self._topics.extract(content)

    def search(self, topics: str) -> RelatedArticlesResult:
        articles = search_news(topics, self._settings)
        return RelatedArticlesResult(
            articles=articles,
            search_query=topics,
            message="" if articles else NO_ARTICLES_MESSAGE,
        )


def find_related_articles(
    content: str,
    client: LLMClient,
    settings: Settings | None = None,
    tracer: Tracer | None = None,
) -> RelatedArticlesResult:
    """Module-level shortcut for RelatedArticleFinder(client, settings).find(content)."""
    return RelatedArticleFinder(client, settings).find(content, tracer=tracer)


def _log(message: str) -> None:
    print(f"[related] {message}")
