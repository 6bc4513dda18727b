"""Document processing — PDF → chunks → embeddings → vector store.

Documents are processed strictly one after another and every chunk is
embedded and upserted on its own.  A failure anywhere inside a document
marks that document as ``"error"`` and the batch moves on; chunks already
written for it are left in place.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any

from rag_chatbot.config import settings
from rag_chatbot.ingestion.chunker import chunk_documents
from rag_chatbot.ingestion.loader import list_pdf_files, load_pdf
from rag_chatbot.ingestion.models import ProcessedDocument
from rag_chatbot.retrieval.models import DocumentChunk, build_chunk_id

if TYPE_CHECKING:
    from langchain_core.documents import Document
    from langchain_core.embeddings import Embeddings

    from rag_chatbot.retrieval.base import VectorStoreBase

logger = logging.getLogger(__name__)


def _page_number(metadata: dict[str, Any]) -> int:
    """Convert a loader's 0-based ``page`` metadata into a 1-based page number."""
    page = metadata.get("page")
    if isinstance(page, int) and page >= 0:
        return page + 1
    return 1


class DocumentProcessor:
    """Ingest PDFs into a :class:`VectorStoreBase`.

    Parameters
    ----------
    store:
        Destination vector store.
    embedder:
        LangChain embeddings used for each chunk.
    loader:
        Callable turning a file path into page documents (``load_pdf`` by default).
    chunk_size, chunk_overlap:
        Forwarded to :func:`chunk_documents`.
    delay_seconds:
        Pause between two documents of a batch.
    """

    def __init__(
        self,
        store: VectorStoreBase,
        embedder: Embeddings,
        *,
        loader: Callable[[Path], list[Document]] = load_pdf,
        chunk_size: int = settings.chunk_size,
        chunk_overlap: int = settings.chunk_overlap,
        delay_seconds: float = settings.ingestion_delay_seconds,
    ) -> None:
        self._store = store
        self._embedder = embedder
        self._loader = loader
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.delay_seconds = delay_seconds
        self._store_ready = False

    def process_document(self, path: str | Path) -> ProcessedDocument:
        """Ingest a single PDF and report how many chunks were stored."""
        path = Path(path)
        name = path.stem
        try:
            pages = self._loader(path)
            chunks = chunk_documents(
                pages,
                chunk_size=self.chunk_size,
                chunk_overlap=self.chunk_overlap,
            )
            self._ensure_store()

            stored = 0
            for index, chunk in enumerate(chunks):
                embedding = self._embedder.embed_documents([chunk.page_content])[0]
                self._store.store_chunk(
                    DocumentChunk(
                        id=build_chunk_id(name, index),
                        content=chunk.page_content,
                        document=name,
                        page=_page_number(chunk.metadata),
                        embedding=embedding,
                    )
                )
                stored += 1
        except Exception:
            logger.exception("Error processing document %s", path)
            return ProcessedDocument.failed(name)

        logger.info("Processed %s: %d chunk(s) from %d page(s)", name, stored, len(pages))
        return ProcessedDocument(name=name, chunks=stored, status="processed")

    def process_all_documents(self, directory: str | Path) -> list[ProcessedDocument]:
        """Ingest every ``.pdf`` file in *directory*, one at a time."""
        results: list[ProcessedDocument] = []
        try:
            pdf_files = list_pdf_files(directory)
        except OSError:
            logger.exception("Error reading documents directory %s", directory)
            return results

        logger.info("Found %d PDF file(s) to process", len(pdf_files))
        for i, pdf in enumerate(pdf_files):
            if i and self.delay_seconds > 0:
                time.sleep(self.delay_seconds)
            logger.info("Processing document: %s", pdf.name)
            results.append(self.process_document(pdf))

        failed = sum(1 for r in results if r.status == "error")
        logger.info("Processed %d document(s), %d failed", len(results), failed)
        return results

    # -- internals ------------------------------------------------------------

    def _ensure_store(self) -> None:
        if not self._store_ready:
            self._store.initialize()
            self._store_ready = True
