"""
prompts/summarizer.py — Prompts for article summarization.

SYSTEM_PROMPT carries the two directives (language + format);
USER_PROMPT carries the article itself.
"""

SYSTEM_PROMPT = """\
You are an AI that summarizes news articles in {language}.
{format_instruction}
Only use facts stated in the article. Do not add commentary or a title."""


USER_PROMPT = """\
Summarize the following news article in {language}:

{content}"""


ORIGINAL_LANGUAGE = "the original language of the article"


FORMAT_PARAGRAPH = "Write a concise summary as a single paragraph."

FORMAT_BULLETS = (
    "Write a bullet-point summary of the key points. "
    "Put each point on its own line starting with \"• \"."
)

FORMAT_KEY_TAKEAWAYS = (
    "List the 3-5 most important key takeaways, numbered and ranked "
    "from most to least important. One sentence each."
)
