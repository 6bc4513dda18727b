"""
Retrieval — the pgvector chunk store and similarity search.

Public surface
--------------
- :class:`SemanticRetriever` — embed a query and fetch the nearest chunks.
- :class:`VectorStoreBase` — abstract backend.
- :class:`PgVectorStore` — default PostgreSQL + pgvector backend.
- :class:`DocumentChunk`, :class:`SearchResult`, :class:`DocumentStats` — data models.
"""

from rag_chatbot.retrieval.base import VectorStoreBase
from rag_chatbot.retrieval.models import DocumentChunk, DocumentStats, SearchResult, build_chunk_id
from rag_chatbot.retrieval.retriever import SemanticRetriever

__all__ = [
    "DocumentChunk",
    "DocumentStats",
    "PgVectorStore",
    "SearchResult",
    "SemanticRetriever",
    "VectorStoreBase",
    "build_chunk_id",
]


def __getattr__(name: str):  # noqa: ANN001
    """Lazy-import PgVectorStore to avoid pulling in SQLAlchemy at import time."""
    if name == "PgVectorStore":
        from rag_chatbot.retrieval.pgvector_store import PgVectorStore

        return PgVectorStore
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
