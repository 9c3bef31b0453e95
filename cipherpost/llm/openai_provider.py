from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from openai import OpenAI


@dataclass
class LLMResult:
    model: str
    text: str


class OpenAIProvider:
    """Thin wrapper over the OpenAI SDK.

    * Standard OpenAI client.
    * Optional OpenRouter client (same SDK, different base URL) for
      DeepSeek chat models.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        openrouter_api_key: Optional[str] = None,
        timeout: float = 30.0,
    ):
        self.client = OpenAI(api_key=api_key, timeout=timeout, max_retries=0)
        self.openrouter_client: Optional[OpenAI] = None
        if openrouter_api_key:
            self.openrouter_client = OpenAI(
                api_key=openrouter_api_key,
                base_url="https://openrouter.ai/api/v1",
                timeout=timeout,
                max_retries=0,
            )

    def generate_text_chat(
        self,
        *,
        model: str,
        system: str,
        user: str,
        temperature: float = 0.7,
        max_tokens: int = 1024,
        use_openrouter: bool = False,
    ) -> LLMResult:
        client = self.openrouter_client if use_openrouter and self.openrouter_client else self.client
        resp = client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            temperature=temperature,
            max_tokens=max_tokens,
        )
        choice = resp.choices[0]
        return LLMResult(model=model, text=choice.message.content or "")
