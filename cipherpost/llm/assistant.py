"""Message rewriting suggestions from a chat model.

Runs on the plaintext before it is encoded; nothing here touches the
pipeline or the store except the shared rate counter.
"""
from __future__ import annotations

import json
import logging
import re
from typing import List, Optional

import openai
from pydantic import BaseModel, Field

from ..config import Settings
from ..errors import AssistantError, InputError
from ..store.ratelimit import RateLimiter
from .openai_provider import OpenAIProvider

logger = logging.getLogger(__name__)

MAX_SUGGESTIONS = 3

SYSTEM_REWRITER = """You are a writing assistant that improves short email messages.
Rules:
- Keep the original intent and meaning.
- Be professional, clear and concise.
- Each suggestion must be ready to send and under 200 words.
- Respond ONLY with a JSON array of exactly 3 strings. No markdown fences.
"""

FALLBACK_TIPS = [
    "Start with a clear greeting and state your main point in the first sentence.",
    "Break longer ideas into short paragraphs or a bulleted list so they are easy to scan.",
    "Close with a clear call to action or next step for the recipient.",
]

GENERIC_SUGGESTIONS = [
    "Here is a more polished version that keeps your original intent while improving clarity.",
    "Consider an alternative structure: greeting, main point, supporting detail, closing.",
    "Try a shorter version that leads with the request and drops filler words.",
]


class RewriteSuggestions(BaseModel):
    suggestions: List[str] = Field(default_factory=list, max_length=MAX_SUGGESTIONS)
    original_message: str
    note: Optional[str] = None


def build_prompt(message: str, recipient: str) -> str:
    return (
        f'Original message: "{message}"\n'
        f"Recipient: {recipient}\n\n"
        f"Provide {MAX_SUGGESTIONS} improved versions of this message as a JSON array:\n"
        '["suggestion1", "suggestion2", "suggestion3"]'
    )


def _split_lines(text: str) -> List[str]:
    out = []
    for line in text.splitlines():
        line = re.sub(r"^\d+\.\s*", "", line.strip())
        line = re.sub(r"""^["']|["']$""", "", line).strip()
        if line:
            out.append(line)
    return out[:MAX_SUGGESTIONS]


def parse_suggestions(text: str) -> List[str]:
    """Pull a JSON array of strings out of model output, else fall back to its lines."""
    match = re.search(r"\[.*\]", text, re.DOTALL)
    if match:
        try:
            parsed = json.loads(match.group(0))
        except json.JSONDecodeError:
            return _split_lines(text)
        if isinstance(parsed, list):
            return [str(s) for s in parsed if str(s).strip()][:MAX_SUGGESTIONS]
    return _split_lines(text)


def suggest_rewrites(
    settings: Settings,
    *,
    identity: str,
    message: str,
    recipient: str,
    provider: Optional[OpenAIProvider] = None,
    limiter: Optional[RateLimiter] = None,
) -> RewriteSuggestions:
    if not message or not message.strip() or not recipient or not recipient.strip():
        raise InputError("Message and recipient are required")

    if limiter is not None:
        limiter.hit(identity)

    if provider is None:
        if not settings.openai_api_key and not settings.openrouter_api_key:
            raise AssistantError("No OpenAI or OpenRouter API key configured")
        provider = OpenAIProvider(
            api_key=settings.openai_api_key,
            openrouter_api_key=settings.openrouter_api_key,
        )

    use_openrouter = provider.openrouter_client is not None
    model = settings.openrouter_model_fast if use_openrouter else settings.openai_model_fast

    try:
        result = provider.generate_text_chat(
            model=model,
            system=SYSTEM_REWRITER,
            user=build_prompt(message, recipient),
            temperature=0.7,
            max_tokens=1024,
            use_openrouter=use_openrouter,
        )
    except (
        openai.RateLimitError,
        openai.NotFoundError,
        openai.APIConnectionError,
        openai.InternalServerError,
    ) as e:
        logger.warning("Assistant unavailable (%s); returning writing tips", type(e).__name__)
        return RewriteSuggestions(
            suggestions=list(FALLBACK_TIPS),
            original_message=message,
            note="Fallback suggestions provided because the AI service is unavailable",
        )
    except openai.APIError as e:
        raise AssistantError(f"AI service error: {e}") from e

    suggestions = parse_suggestions(result.text) or list(GENERIC_SUGGESTIONS)
    return RewriteSuggestions(suggestions=suggestions, original_message=message)
