"""Request / response schemas of the HTTP API."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from rag_chatbot.agent.state import ChatMessage
from rag_chatbot.ingestion.models import ProcessedDocument
from rag_chatbot.retrieval.models import SearchResult


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class ChatRequest(BaseModel):
    """Incoming chat turn from the frontend."""

    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(min_length=1)
    conversation_history: list[ChatMessage] = Field(default_factory=list, alias="conversationHistory")


class ChatResponse(BaseModel):
    """Answer returned for a non-streaming chat request."""

    response: str
    sources: list[SearchResult] = []
    timestamp: str = Field(default_factory=utc_now)


class HealthResponse(BaseModel):
    status: str = "OK"
    timestamp: str = Field(default_factory=utc_now)
    port: int
    environment: str


class ProcessedDocumentsResponse(BaseModel):
    documents: list[str]
    count: int
    timestamp: str = Field(default_factory=utc_now)


class ProcessDocumentsResponse(BaseModel):
    message: str = "Document processing completed"
    results: list[ProcessedDocument]
    timestamp: str = Field(default_factory=utc_now)
