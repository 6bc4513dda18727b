"""Semantic retriever — embeds a query and searches the vector store.

Usage::

    from rag_chatbot.retrieval.retriever import SemanticRetriever

    retriever = SemanticRetriever()
    results   = retriever.search("What does Buffett say about moats?", k=5)
    for r in results:
        print(r.short_ref(), r.similarity, r.content[:80])
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rag_chatbot.config import settings
from rag_chatbot.retrieval.base import VectorStoreBase
from rag_chatbot.retrieval.models import SearchResult

if TYPE_CHECKING:
    from langchain_core.embeddings import Embeddings

logger = logging.getLogger(__name__)


class SemanticRetriever:
    """High-level retriever that pairs an embedding model with a :class:`VectorStoreBase`.

    Parameters
    ----------
    store:
        A concrete vector-store backend.  When *None*, a default
        :class:`~rag_chatbot.retrieval.pgvector_store.PgVectorStore`
        is created from the global settings.
    embedder:
        LangChain embeddings used for queries.  When *None*, the
        configured OpenAI embedding model is used.
    default_k:
        Default number of results returned by :meth:`search`.
    score_threshold:
        Minimum similarity; results below this are discarded.  *None*
        keeps every hit the store returns.
    """

    def __init__(
        self,
        store: VectorStoreBase | None = None,
        embedder: Embeddings | None = None,
        *,
        default_k: int = settings.retrieval_top_k,
        score_threshold: float | None = None,
    ) -> None:
        if store is None:
            from rag_chatbot.retrieval.pgvector_store import PgVectorStore

            store = PgVectorStore()
        if embedder is None:
            from rag_chatbot.ingestion.embedder import get_embedding_function

            embedder = get_embedding_function()
        self._store = store
        self._embedder = embedder
        self.default_k = default_k
        self.score_threshold = score_threshold

    @property
    def store(self) -> VectorStoreBase:
        return self._store

    # -- public API -----------------------------------------------------------

    def search(
        self,
        query: str,
        *,
        k: int | None = None,
        document: str | None = None,
    ) -> list[SearchResult]:
        """Embed *query* and return the nearest chunks, most similar first.

        Parameters
        ----------
        query:
            Natural-language query string.
        k:
            Number of results (defaults to ``self.default_k``).
        document:
            Optional document name to restrict the search to.
        """
        embedding = self._embedder.embed_query(query)
        return self.search_by_embedding(embedding, k=k, document=document)

    def search_by_embedding(
        self,
        embedding: list[float],
        *,
        k: int | None = None,
        document: str | None = None,
    ) -> list[SearchResult]:
        """Same as :meth:`search` but accepts a pre-computed embedding."""
        k = k if k is not None else self.default_k
        hits = self._store.similarity_search(embedding, k=k, document=document)
        results = list(hits)
        if self.score_threshold is not None:
            results = [h for h in results if h.similarity >= self.score_threshold]
        results.sort(key=lambda r: r.similarity, reverse=True)
        logger.info("Retrieved %d/%d chunk(s)", len(results), len(hits))
        return results
