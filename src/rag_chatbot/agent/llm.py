"""LLM initialisation — single place to swap providers.

Uses the OpenAI cloud by default.  Setting ``LLM_BASE_URL`` points the
client at any OpenAI-compatible ``/v1/chat/completions`` endpoint instead.
"""

from __future__ import annotations

import logging

from langchain_openai import ChatOpenAI

from rag_chatbot.config import settings

logger = logging.getLogger(__name__)


def get_llm(
    temperature: float = settings.llm_temperature,
    max_tokens: int = settings.llm_max_tokens,
) -> ChatOpenAI:
    """Return the configured chat model."""
    kwargs: dict = {
        "model": settings.llm_model_name,
        "temperature": temperature,
        "max_tokens": max_tokens,
    }

    if settings.llm_base_url:
        logger.info("Using OpenAI-compatible endpoint: %s", settings.llm_base_url)
        kwargs["base_url"] = settings.llm_base_url
        # Self-hosted endpoints may not need a key; the client requires a non-empty value.
        kwargs["api_key"] = settings.openai_api_key or "EMPTY"
    else:
        kwargs["api_key"] = settings.openai_api_key

    return ChatOpenAI(**kwargs)
