"""Domain models for stored chunks and retrieval results."""

from __future__ import annotations

from pydantic import BaseModel, Field


def build_chunk_id(document: str, index: int) -> str:
    """Return the deterministic id of the *index*-th chunk of *document*."""
    return f"{document}-chunk-{index}"


class DocumentChunk(BaseModel):
    """One row of the ``document_chunks`` table.

    Attributes
    ----------
    id:
        ``"{document}-chunk-{index}"``, stable across re-ingestion so that
        writes are upserts rather than duplicates.
    content:
        The chunk text.
    document:
        Source document name (PDF file name without extension).
    page:
        1-based page number the chunk starts on.
    embedding:
        Dense vector; its length must match the store's column definition.
    """

    id: str
    content: str
    document: str
    page: int = 1
    embedding: list[float] = Field(default_factory=list, repr=False)


class SearchResult(BaseModel):
    """A chunk returned by a similarity query.

    ``similarity`` is ``1 - cosine_distance`` (higher = more similar).
    """

    id: str
    content: str
    document: str
    page: int
    similarity: float

    def short_ref(self) -> str:
        """Return a compact ``[document p.page]`` reference string."""
        return f"[{self.document} p.{self.page}]"


class DocumentStats(BaseModel):
    """Summary of one ingested document."""

    document: str
    chunks: int
    pages: int
