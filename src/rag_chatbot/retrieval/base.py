"""Abstract base class for vector-store backends.

The ingestion pipeline and the chat agent only talk to
:class:`VectorStoreBase`; the pgvector implementation lives in
:mod:`rag_chatbot.retrieval.pgvector_store`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from rag_chatbot.retrieval.models import DocumentChunk, DocumentStats, SearchResult


class VectorStoreBase(ABC):
    """Backend-agnostic vector-store interface.

    Parameters
    ----------
    table_name:
        Logical name of the table / collection holding the chunks.
    """

    def __init__(self, table_name: str) -> None:
        self.table_name = table_name

    # -- required overrides ---------------------------------------------------

    @abstractmethod
    def initialize(self) -> None:
        """Create whatever schema the backend needs.  Must be idempotent."""
        ...

    @abstractmethod
    def store_chunk(self, chunk: DocumentChunk) -> None:
        """Insert *chunk*, or overwrite its content and embedding if the id exists."""
        ...

    @abstractmethod
    def similarity_search(
        self,
        query_embedding: list[float],
        *,
        k: int = 5,
        document: str | None = None,
    ) -> list[SearchResult]:
        """Return the top-*k* chunks nearest to *query_embedding*.

        Results are ordered by descending similarity.

        Parameters
        ----------
        query_embedding:
            Dense vector for the query.
        k:
            Number of results to return.
        document:
            Restrict the search to chunks of this document.
        """
        ...

    @abstractmethod
    def list_documents(self) -> list[str]:
        """Return the distinct names of all ingested documents."""
        ...

    @abstractmethod
    def health_check(self) -> bool:
        """Return ``True`` when the backend is reachable and ready."""
        ...

    # -- optional overrides ---------------------------------------------------

    def describe_document(self, document: str) -> DocumentStats | None:
        """Return chunk / page counts for *document*.  Optional; raises by default."""
        raise NotImplementedError(f"{type(self).__name__} does not support describe_document")
