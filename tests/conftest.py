"""Shared pytest configuration and fixtures."""

from __future__ import annotations

import math

import pytest
from langchain_core.embeddings import DeterministicFakeEmbedding

from rag_chatbot.retrieval.base import VectorStoreBase
from rag_chatbot.retrieval.models import DocumentChunk, DocumentStats, SearchResult


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests requiring external services")


def _cosine_similarity(a: list[float], b: list[float]) -> float:
    dot = sum(x * y for x, y in zip(a, b))
    norm = math.sqrt(sum(x * x for x in a)) * math.sqrt(sum(y * y for y in b))
    return dot / norm if norm else 0.0


class InMemoryVectorStore(VectorStoreBase):
    """Dict-backed store with the same upsert / cosine-ranking semantics as pgvector."""

    def __init__(self) -> None:
        super().__init__("document_chunks")
        self.rows: dict[str, DocumentChunk] = {}
        self.initialize_calls = 0
        self.write_count = 0

    def initialize(self) -> None:
        self.initialize_calls += 1

    def store_chunk(self, chunk: DocumentChunk) -> None:
        self.write_count += 1
        existing = self.rows.get(chunk.id)
        if existing is None:
            self.rows[chunk.id] = chunk
        else:
            self.rows[chunk.id] = existing.model_copy(
                update={"content": chunk.content, "embedding": chunk.embedding}
            )

    def similarity_search(
        self,
        query_embedding: list[float],
        *,
        k: int = 5,
        document: str | None = None,
    ) -> list[SearchResult]:
        scored = [
            SearchResult(
                id=row.id,
                content=row.content,
                document=row.document,
                page=row.page,
                similarity=_cosine_similarity(query_embedding, row.embedding),
            )
            for row in self.rows.values()
            if document is None or row.document == document
        ]
        scored.sort(key=lambda r: r.similarity, reverse=True)
        return scored[:k]

    def list_documents(self) -> list[str]:
        return sorted({row.document for row in self.rows.values()})

    def describe_document(self, document: str) -> DocumentStats | None:
        rows = [r for r in self.rows.values() if r.document == document]
        if not rows:
            return None
        return DocumentStats(document=document, chunks=len(rows), pages=len({r.page for r in rows}))

    def health_check(self) -> bool:
        return True


@pytest.fixture()
def memory_store() -> InMemoryVectorStore:
    return InMemoryVectorStore()


@pytest.fixture()
def fake_embedder() -> DeterministicFakeEmbedding:
    return DeterministicFakeEmbedding(size=16)
