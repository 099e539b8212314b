# app/ai_summarizer.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from openai import OpenAI, OpenAIError

import config

logger = logging.getLogger(__name__)


GREETING_PROMPT = (
    "Briefly! Greet the user and advise that an uploaded transcript will be summarized."
)

SUMMARY_PROMPT = """
First, provide a bullet-point list of all course codes and their corresponding grades (e.g., - MATH 101: A+).
If a student has attempted a course multiple times, please only list the attempt that resulted in a passing grade.
If the awarded grade = 'W' do not include.
If multiple attempts were passing, list the one with the highest grade.
If no attempt resulted in a passing grade, you may list the latest attempt or indicate that all attempts were unsuccessful for that course.

Following the list, please provide a concise general summary of the following academic transcript.
Highlight key aspects such as overall performance, number of terms/years attended, CGPA, and any notable trends or repeated courses.

Transcript:

{transcript}
"""


class SummarizationError(Exception):
    """The AI service did not return a usable reply."""


def get_client() -> Optional[OpenAI]:
    """
    OpenAI client, or None if it cannot be created (usually a missing
    OPENAI_API_KEY).
    """
    try:
        return OpenAI()  # reads OPENAI_API_KEY from env/.env
    except OpenAIError as e:
        logger.error("Failed to initialize OpenAI client: %s", e)
        return None


def _message_text(resp: Any) -> str:
    """Normalize chat completion content to a plain string."""
    raw_content = resp.choices[0].message.content

    if isinstance(raw_content, str):
        text = raw_content
    elif isinstance(raw_content, list):
        text = "".join(
            part.get("text", "") for part in raw_content if isinstance(part, dict)
        )
    else:
        text = str(raw_content or "")

    return text.strip()


def _complete(client: OpenAI, messages: List[Dict[str, Any]]) -> str:
    try:
        resp = client.chat.completions.create(
            model=config.OPENAI_MODEL,
            temperature=config.OPENAI_TEMPERATURE,
            messages=messages,
        )
    except OpenAIError as e:
        logger.exception("OpenAI request failed")
        raise SummarizationError(str(e)) from e

    text = _message_text(resp)
    if not text:
        raise SummarizationError("empty response from model")
    return text


def build_summary_prompt(transcript_text: str) -> str:
    return SUMMARY_PROMPT.format(transcript=transcript_text).strip()


def generate_greeting(client: OpenAI) -> str:
    return _complete(client, [{"role": "user", "content": GREETING_PROMPT}])


def summarize_transcript(transcript_text: str, client: OpenAI) -> str:
    """
    Ask the model for the course/grade bullet list plus a prose summary.
    """
    logger.info("Requesting summary for %d characters of transcript text", len(transcript_text))
    return _complete(
        client,
        [{"role": "user", "content": build_summary_prompt(transcript_text)}],
    )
