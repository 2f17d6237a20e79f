"""
prompts/ — All LLM prompt templates for the news summarizer.

One file per pipeline step. Import the prompt constant you need:

    from prompts.summarizer import SYSTEM_PROMPT, USER_PROMPT
    from prompts.topics import TOPICS_SYSTEM_PROMPT, TOPICS_USER_PROMPT
"""
