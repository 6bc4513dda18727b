"""Prompt templates for the chat agent.

Keeping prompts in one place makes them easy to audit and version.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from rag_chatbot.config import settings

if TYPE_CHECKING:
    from langchain_core.messages import BaseMessage

    from rag_chatbot.agent.state import ChatMessage
    from rag_chatbot.retrieval.models import SearchResult

SYSTEM_PROMPT = """\
You are a knowledgeable financial analyst specializing in Warren Buffett's \
investment philosophy and Berkshire Hathaway's business strategy. Your \
expertise comes from analyzing years of Berkshire Hathaway annual shareholder \
letters.

Core Responsibilities:
- Answer questions about Warren Buffett's investment principles and philosophy
- Provide insights into Berkshire Hathaway's business strategies and decisions
- Reference specific examples from the shareholder letters when appropriate
- Maintain context across conversations for follow-up questions

Guidelines:
- Always ground your responses in the provided shareholder letter content
- Quote directly from the letters when relevant, with proper citations
- If information isn't available in the documents, clearly state this limitation
- Provide year-specific context when discussing how views or strategies evolved
- For numerical data or specific acquisitions, cite the exact source letter and year
- Explain complex financial concepts in accessible terms while maintaining accuracy

Response Format:
- Provide comprehensive, well-structured answers
- Include relevant quotes from the letters with year attribution
- List source documents used for your response
- For follow-up questions, reference previous conversation context appropriately

Remember: Your authority comes from the shareholder letters. Stay grounded in \
this source material and be transparent about the scope and limitations of \
your knowledge.
"""


def format_context(sources: list[SearchResult]) -> str:
    """Render retrieved chunks as the context block of the user turn."""
    return "\n\n".join(
        f"From {s.document}, page {s.page}:\n{s.content}" for s in sources
    )


def history_to_messages(history: list[ChatMessage]) -> list[BaseMessage]:
    """Convert prior chat turns to LangChain messages (role and content only)."""
    messages: list[BaseMessage] = []
    for turn in history:
        if turn.role == "assistant":
            messages.append(AIMessage(content=turn.content))
        else:
            messages.append(HumanMessage(content=turn.content))
    return messages


def build_chat_prompt(
    question: str,
    sources: list[SearchResult],
    history: list[ChatMessage] | None = None,
    *,
    corpus_description: str = settings.corpus_description,
) -> list[BaseMessage]:
    """Build the full message list for one chat completion.

    Layout: system prompt, then the conversation so far, then the current
    question prefixed by the retrieved context.
    """
    context = format_context(sources)
    return [
        SystemMessage(content=SYSTEM_PROMPT),
        *history_to_messages(history or []),
        HumanMessage(
            content=f"Context from {corpus_description}:\n{context}\n\nQuestion: {question}"
        ),
    ]
