"""Document loaders — thin wrappers around LangChain document loaders."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from langchain_community.document_loaders import PyPDFLoader

if TYPE_CHECKING:
    from langchain_core.documents import Document


def load_pdf(path: str | Path) -> list[Document]:
    """Load a single PDF file, one ``Document`` per page.

    Each page carries ``source`` and a 0-based ``page`` in its metadata.
    """
    return PyPDFLoader(str(path)).load()


def list_pdf_files(directory: str | Path) -> list[Path]:
    """Return the ``.pdf`` files directly inside *directory*, sorted by name."""
    return sorted(p for p in Path(directory).iterdir() if p.is_file() and p.name.endswith(".pdf"))
