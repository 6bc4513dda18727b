"""PostgreSQL + pgvector implementation of the vector-store abstraction."""

from __future__ import annotations

import logging

from sqlalchemy import Engine, create_engine, text

from rag_chatbot.config import settings
from rag_chatbot.retrieval.base import VectorStoreBase
from rag_chatbot.retrieval.models import DocumentChunk, DocumentStats, SearchResult

logger = logging.getLogger(__name__)


def to_vector_literal(embedding: list[float]) -> str:
    """Render *embedding* in pgvector's text input format, e.g. ``[0.1,0.2]``."""
    return "[" + ",".join(str(v) for v in embedding) + "]"


class PgVectorStore(VectorStoreBase):
    """pgvector-backed store over a single ``document_chunks`` table.

    Every statement runs in its own transaction; connection pooling is left
    to the SQLAlchemy engine.

    Parameters
    ----------
    database_url:
        SQLAlchemy URL, e.g. ``postgresql+psycopg://user:pw@host/db``.
    table_name:
        Name of the chunk table.
    dimensions:
        Width of the ``vector`` column; must match the embedding model.
    engine:
        Pre-built engine (takes precedence over *database_url*).
    """

    def __init__(
        self,
        database_url: str = settings.database_url,
        *,
        table_name: str = "document_chunks",
        dimensions: int = settings.embedding_dimensions,
        engine: Engine | None = None,
    ) -> None:
        super().__init__(table_name)
        self.dimensions = dimensions
        self._engine = engine or create_engine(database_url, pool_pre_ping=True)

    # -- VectorStoreBase overrides --------------------------------------------

    def initialize(self) -> None:
        statements = [
            "CREATE EXTENSION IF NOT EXISTS vector",
            f"""
            CREATE TABLE IF NOT EXISTS {self.table_name} (
                id TEXT PRIMARY KEY,
                content TEXT NOT NULL,
                document TEXT NOT NULL,
                page INTEGER NOT NULL,
                embedding vector({self.dimensions})
            )
            """,
            f"""
            CREATE INDEX IF NOT EXISTS {self.table_name}_embedding_idx
            ON {self.table_name}
            USING ivfflat (embedding vector_cosine_ops)
            WITH (lists = 100)
            """,
            f"""
            CREATE INDEX IF NOT EXISTS {self.table_name}_document_idx
            ON {self.table_name} (document)
            """,
        ]
        with self._engine.begin() as conn:
            for stmt in statements:
                conn.execute(text(stmt))
        logger.info("Vector store table %s is ready (dim=%d)", self.table_name, self.dimensions)

    def store_chunk(self, chunk: DocumentChunk) -> None:
        sql = text(f"""
            INSERT INTO {self.table_name} (id, content, document, page, embedding)
            VALUES (:id, :content, :document, :page, CAST(:embedding AS vector))
            ON CONFLICT (id) DO UPDATE SET
                content = EXCLUDED.content,
                embedding = EXCLUDED.embedding
        """)
        with self._engine.begin() as conn:
            conn.execute(
                sql,
                {
                    "id": chunk.id,
                    "content": chunk.content,
                    "document": chunk.document,
                    "page": chunk.page,
                    "embedding": to_vector_literal(chunk.embedding),
                },
            )

    def similarity_search(
        self,
        query_embedding: list[float],
        *,
        k: int = 5,
        document: str | None = None,
    ) -> list[SearchResult]:
        where = "WHERE document = :document" if document is not None else ""
        sql = text(f"""
            SELECT
                id,
                content,
                document,
                page,
                1 - (embedding <=> CAST(:embedding AS vector)) AS similarity
            FROM {self.table_name}
            {where}
            ORDER BY embedding <=> CAST(:embedding AS vector)
            LIMIT :k
        """)
        params: dict[str, object] = {"embedding": to_vector_literal(query_embedding), "k": k}
        if document is not None:
            params["document"] = document

        with self._engine.connect() as conn:
            rows = conn.execute(sql, params).mappings().all()

        results = [
            SearchResult(
                id=row["id"],
                content=row["content"],
                document=row["document"],
                page=row["page"],
                similarity=float(row["similarity"]),
            )
            for row in rows
        ]
        logger.debug("Similarity search returned %d chunk(s)", len(results))
        return results

    def list_documents(self) -> list[str]:
        sql = text(f"SELECT DISTINCT document FROM {self.table_name} ORDER BY document")
        with self._engine.connect() as conn:
            return [row[0] for row in conn.execute(sql)]

    def describe_document(self, document: str) -> DocumentStats | None:
        sql = text(f"""
            SELECT COUNT(*) AS chunks, COUNT(DISTINCT page) AS pages
            FROM {self.table_name}
            WHERE document = :document
        """)
        with self._engine.connect() as conn:
            row = conn.execute(sql, {"document": document}).mappings().one()
        if not row["chunks"]:
            return None
        return DocumentStats(document=document, chunks=row["chunks"], pages=row["pages"])

    def health_check(self) -> bool:
        try:
            with self._engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception:
            logger.warning("pgvector health-check failed", exc_info=True)
            return False

    def dispose(self) -> None:
        """Close all pooled connections."""
        self._engine.dispose()
