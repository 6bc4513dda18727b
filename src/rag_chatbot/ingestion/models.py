"""Ingestion result models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class ProcessedDocument(BaseModel):
    """Outcome of ingesting one PDF.

    ``chunks`` is the number of chunks written; it is ``0`` whenever
    ``status`` is ``"error"``.
    """

    name: str
    chunks: int = 0
    status: Literal["processed", "error"] = "processed"

    @classmethod
    def failed(cls, name: str) -> ProcessedDocument:
        return cls(name=name, chunks=0, status="error")
