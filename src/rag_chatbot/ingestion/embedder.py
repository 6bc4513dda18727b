"""Embedding model factory."""

from __future__ import annotations

from langchain_openai import OpenAIEmbeddings

from rag_chatbot.config import settings


def get_embedding_function() -> OpenAIEmbeddings:
    """Return the configured OpenAI embedding function.

    ``dimensions`` is pinned so vectors always fit the store's column.
    """
    kwargs: dict = {
        "model": settings.embedding_model,
        "dimensions": settings.embedding_dimensions,
        "api_key": settings.openai_api_key,
    }
    if settings.llm_base_url:
        kwargs["base_url"] = settings.llm_base_url
    return OpenAIEmbeddings(**kwargs)
