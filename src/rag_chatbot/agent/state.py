"""Agent state and chat message models.

:class:`AgentState` flows through the graph nodes; :class:`ChatMessage`
and :class:`ChatAnswer` are the request/response shapes exchanged with
callers.  Nothing here is persisted.
"""

from __future__ import annotations

from typing import Literal, TypedDict

from pydantic import BaseModel, Field

from rag_chatbot.retrieval.models import SearchResult


class ChatMessage(BaseModel):
    """One turn of the conversation as held by the frontend."""

    role: Literal["user", "assistant"]
    content: str
    sources: list[SearchResult] | None = None


class ChatAnswer(BaseModel):
    """The agent's answer together with the chunks it was grounded on."""

    response: str
    sources: list[SearchResult] = Field(default_factory=list)


class AgentState(TypedDict):
    """Typed state that flows through the chat graph.

    Attributes
    ----------
    query:
        The user's current message.
    history:
        Earlier turns of the conversation, oldest first.
    sources:
        Chunks retrieved for ``query`` (set by the ``retrieve`` node).
    answer:
        The buffered completion text (set by the ``generate`` node).
    """

    query: str
    history: list[ChatMessage]
    sources: list[SearchResult]
    answer: str
