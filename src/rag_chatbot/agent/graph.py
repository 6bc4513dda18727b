"""LangGraph graph definition — the chat workflow.

Graph topology::

    START → retrieve → generate → END

``retrieve`` embeds the question and fetches the nearest chunks;
``generate`` sends system prompt + history + context to the chat model.
Dependencies are bound into the nodes at build time so the graph can be
tested with a fake retriever and a fake chat model.
"""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING, Any

from langgraph.graph import END, StateGraph

from rag_chatbot.agent.nodes import generate, retrieve
from rag_chatbot.agent.state import AgentState, ChatMessage
from rag_chatbot.config import settings

if TYPE_CHECKING:
    from langchain_core.language_models import BaseChatModel

    from rag_chatbot.retrieval.retriever import SemanticRetriever


def build_graph(
    retriever: SemanticRetriever,
    llm: BaseChatModel,
    *,
    k: int = settings.retrieval_top_k,
) -> Any:
    """Construct and return the compiled chat graph."""
    workflow = StateGraph(AgentState)

    workflow.add_node("retrieve", partial(retrieve, retriever=retriever, k=k))
    workflow.add_node("generate", partial(generate, llm=llm))

    workflow.set_entry_point("retrieve")
    workflow.add_edge("retrieve", "generate")
    workflow.add_edge("generate", END)

    return workflow.compile()


def create_initial_state(
    query: str,
    history: list[ChatMessage] | None = None,
) -> dict[str, Any]:
    """Build the initial state dict for ``graph.invoke()``."""
    return {
        "query": query,
        "history": list(history or []),
        "sources": [],
        "answer": "",
    }
