"""High-level chat agent used by the HTTP layer."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rag_chatbot.agent.graph import build_graph, create_initial_state
from rag_chatbot.agent.state import ChatAnswer, ChatMessage
from rag_chatbot.config import settings

if TYPE_CHECKING:
    from langchain_core.language_models import BaseChatModel

    from rag_chatbot.retrieval.retriever import SemanticRetriever

logger = logging.getLogger(__name__)


class RAGAgent:
    """Answer questions over the ingested corpus.

    Each call performs one embedding, one similarity search and one chat
    completion.  Errors from any of them propagate to the caller.

    Parameters
    ----------
    retriever:
        Retriever used for context.  Defaults to a :class:`SemanticRetriever`
        over the configured pgvector store.
    llm:
        Chat model.  Defaults to :func:`~rag_chatbot.agent.llm.get_llm`.
    k:
        Number of chunks passed as context.
    """

    def __init__(
        self,
        retriever: SemanticRetriever | None = None,
        llm: BaseChatModel | None = None,
        *,
        k: int = settings.retrieval_top_k,
    ) -> None:
        if retriever is None:
            from rag_chatbot.retrieval.retriever import SemanticRetriever

            retriever = SemanticRetriever()
        if llm is None:
            from rag_chatbot.agent.llm import get_llm

            llm = get_llm()
        self._graph = build_graph(retriever, llm, k=k)

    def generate_response(
        self,
        message: str,
        history: list[ChatMessage] | None = None,
    ) -> ChatAnswer:
        """Return the model's answer to *message* and the chunks it was given."""
        logger.info("Answering question (%d prior turn(s))", len(history or []))
        result = self._graph.invoke(create_initial_state(message, history))
        return ChatAnswer(response=result["answer"], sources=result["sources"])
