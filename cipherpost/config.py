from __future__ import annotations

import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field


class Settings(BaseModel):
    # Store
    redis_url: str = Field(default="memory://", description="redis:// URL or memory:// for in-process")
    store_timeout_seconds: float = Field(default=2.0, gt=0.0, le=60.0)
    message_ttl_seconds: int = Field(default=86400, ge=1)

    # Rate limiting (assistant)
    rate_limit_requests: int = Field(default=3, ge=1)
    rate_limit_window_seconds: int = Field(default=60, ge=1)

    # OpenAI / OpenRouter
    openai_api_key: Optional[str] = Field(default=None, description="OpenAI API key")
    openai_model_fast: str = Field(default="gpt-4.1-mini")
    openrouter_api_key: Optional[str] = Field(default=None, description="OpenRouter API key")
    openrouter_model_fast: str = Field(default="deepseek/deepseek-chat-v3-0324")

    # Recipient links
    base_url: str = Field(default="http://localhost:3000")

    # SMTP
    smtp_host: Optional[str] = Field(default=None)
    smtp_port: int = Field(default=587, ge=1, le=65535)
    smtp_secure: bool = Field(default=False)
    smtp_user: Optional[str] = Field(default=None)
    smtp_pass: Optional[str] = Field(default=None)
    smtp_from: Optional[str] = Field(default=None)


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    # Load .env if present
    load_dotenv()

    def _bool(name: str, default: bool) -> bool:
        v = os.getenv(name)
        if v is None:
            return default
        return v.strip().lower() in {"1", "true", "yes", "y", "on"}

    return Settings(
        redis_url=os.getenv("REDIS_URL", "memory://"),
        store_timeout_seconds=float(os.getenv("STORE_TIMEOUT_SECONDS", "2.0")),
        message_ttl_seconds=int(os.getenv("MESSAGE_TTL_SECONDS", "86400")),
        rate_limit_requests=int(os.getenv("RATE_LIMIT_REQUESTS", "3")),
        rate_limit_window_seconds=int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "60")),
        openai_api_key=os.getenv("OPENAI_API_KEY"),
        openai_model_fast=os.getenv("OPENAI_MODEL_FAST", "gpt-4.1-mini"),
        openrouter_api_key=os.getenv("OPENROUTER_API_KEY"),
        openrouter_model_fast=os.getenv("OPENROUTER_MODEL_FAST", "deepseek/deepseek-chat-v3-0324"),
        base_url=os.getenv("BASE_URL", "http://localhost:3000"),
        smtp_host=os.getenv("SMTP_HOST"),
        smtp_port=int(os.getenv("SMTP_PORT", "587")),
        smtp_secure=_bool("SMTP_SECURE", False),
        smtp_user=os.getenv("SMTP_USER"),
        smtp_pass=os.getenv("SMTP_PASS"),
        smtp_from=os.getenv("SMTP_FROM"),
    )
