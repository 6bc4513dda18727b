"""Text chunking strategies."""

from __future__ import annotations

from typing import TYPE_CHECKING

from langchain_text_splitters import MarkdownTextSplitter

if TYPE_CHECKING:
    from langchain_core.documents import Document


def chunk_documents(
    documents: list[Document],
    chunk_size: int = 1000,
    chunk_overlap: int = 200,
) -> list[Document]:
    """Split *documents* into overlapping chunks on markdown boundaries.

    Splits prefer headings, code fences, horizontal rules and blank lines,
    then fall back to lines, words and characters.  A separator stays at the
    start of the piece it introduces, so a heading opens its own section.

    Parameters
    ----------
    documents:
        Source documents produced by a loader (typically one per PDF page).
    chunk_size:
        Maximum number of characters per chunk.
    chunk_overlap:
        Number of overlapping characters between consecutive chunks.

    Returns
    -------
    list[Document]
        Chunks in document order, each inheriting its parent's metadata.
    """
    if chunk_overlap >= chunk_size:
        raise ValueError(
            f"chunk_overlap ({chunk_overlap}) must be < chunk_size ({chunk_size})"
        )
    splitter = MarkdownTextSplitter(
        chunk_size=chunk_size,
        chunk_overlap=chunk_overlap,
        length_function=len,
        is_separator_regex=True,
        keep_separator="start",
    )
    return splitter.split_documents(documents)
