"""Graph nodes — each function is one step of the chat workflow.

Node contract
-------------
* Accepts the full :class:`AgentState` dict plus its injected dependency.
* Returns a *partial* dict with **only the keys that changed**.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from rag_chatbot.agent.prompts import build_chat_prompt
from rag_chatbot.agent.state import AgentState

if TYPE_CHECKING:
    from langchain_core.language_models import BaseChatModel

    from rag_chatbot.retrieval.retriever import SemanticRetriever

logger = logging.getLogger(__name__)


def retrieve(state: AgentState, *, retriever: SemanticRetriever, k: int) -> dict[str, Any]:
    """Embed the user's message and fetch the top-*k* chunks."""
    sources = retriever.search(state["query"], k=k)
    logger.info("Retrieved %d source chunk(s) for the question", len(sources))
    return {"sources": sources}


def generate(state: AgentState, *, llm: BaseChatModel) -> dict[str, Any]:
    """Request one completion and buffer the streamed tokens into the answer."""
    prompt = build_chat_prompt(
        state["query"],
        state.get("sources", []),
        state.get("history", []),
    )
    answer = "".join(_chunk_text(chunk.content) for chunk in llm.stream(prompt))
    logger.info("Generated answer of %d chars", len(answer))
    return {"answer": answer}


def _chunk_text(content: Any) -> str:
    """Flatten a streamed message chunk's content to plain text."""
    if isinstance(content, str):
        return content
    # Content blocks: [{"type": "text", "text": ...}, ...]
    return "".join(
        block.get("text", "") if isinstance(block, dict) else str(block) for block in content
    )
