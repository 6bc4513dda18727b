"""
Agent — the retrieval-augmented chat workflow, built with LangGraph.

Public API
----------
- :class:`RAGAgent` — ``generate_response(message, history)``.
- :func:`build_graph` — compile the retrieve → generate workflow.
- :class:`ChatMessage`, :class:`ChatAnswer` — conversation models.
"""

from rag_chatbot.agent.chat import RAGAgent
from rag_chatbot.agent.graph import build_graph, create_initial_state
from rag_chatbot.agent.state import AgentState, ChatAnswer, ChatMessage

__all__ = [
    "AgentState",
    "ChatAnswer",
    "ChatMessage",
    "RAGAgent",
    "build_graph",
    "create_initial_state",
]
