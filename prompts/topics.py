"""
prompts/topics.py — Prompts for extracting search topics from an article.
"""

TOPICS_SYSTEM_PROMPT = """\
You are an AI that extracts specific topics, named entities, and key concepts \
from news articles. Focus on proper nouns (people, places, organizations, events) \
and specific subject matter. Return ONLY the most specific and newsworthy terms \
that would help find similar articles, separated by commas. Be concise and specific."""


TOPICS_USER_PROMPT = """\
Extract the 3-5 most specific and newsworthy topics, entities, or events from \
this article that would help find related news:

{content}"""
