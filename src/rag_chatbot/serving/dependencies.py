"""FastAPI dependency providers.

Each provider builds its service once per process.  Tests replace them
through ``app.dependency_overrides``.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from rag_chatbot.agent.chat import RAGAgent
from rag_chatbot.config import settings
from rag_chatbot.ingestion.embedder import get_embedding_function
from rag_chatbot.ingestion.processor import DocumentProcessor
from rag_chatbot.retrieval.base import VectorStoreBase
from rag_chatbot.retrieval.retriever import SemanticRetriever


@lru_cache(maxsize=1)
def get_store() -> VectorStoreBase:
    from rag_chatbot.retrieval.pgvector_store import PgVectorStore

    return PgVectorStore()


@lru_cache(maxsize=1)
def get_processor() -> DocumentProcessor:
    return DocumentProcessor(get_store(), get_embedding_function())


@lru_cache(maxsize=1)
def get_agent() -> RAGAgent:
    return RAGAgent(SemanticRetriever(get_store(), get_embedding_function()))


def get_documents_dir() -> Path:
    return Path(settings.documents_dir)
