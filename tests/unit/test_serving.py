"""Unit tests for the serving layer."""

from __future__ import annotations

import importlib
import json
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from rag_chatbot.agent.state import ChatAnswer, ChatMessage
from rag_chatbot.ingestion.models import ProcessedDocument
from rag_chatbot.retrieval.models import DocumentChunk, SearchResult
from rag_chatbot.serving.app import AVAILABLE_ENDPOINTS, INVALID_MESSAGE_ERROR, app
from rag_chatbot.serving.dependencies import (
    get_agent,
    get_documents_dir,
    get_processor,
    get_store,
)

SOURCES = [
    SearchResult(id="2008-chunk-4", content="Be fearful...", document="2008", page=5, similarity=0.91),
]


@pytest.fixture()
def fake_agent() -> MagicMock:
    agent = MagicMock()
    agent.generate_response.return_value = ChatAnswer(response="Stay greedy when others are fearful.", sources=SOURCES)
    return agent


@pytest.fixture()
def fake_processor() -> MagicMock:
    processor = MagicMock()
    processor.process_all_documents.return_value = [
        ProcessedDocument(name="2008", chunks=42),
        ProcessedDocument.failed("broken"),
    ]
    return processor


@pytest.fixture()
def client(memory_store, fake_agent, fake_processor, tmp_path):
    app.dependency_overrides[get_store] = lambda: memory_store
    app.dependency_overrides[get_agent] = lambda: fake_agent
    app.dependency_overrides[get_processor] = lambda: fake_processor
    app.dependency_overrides[get_documents_dir] = lambda: tmp_path
    yield TestClient(app)
    app.dependency_overrides.clear()


# ── Health & routing ───────────────────────────────────────────────────


def test_health_endpoint(client: TestClient) -> None:
    """GET /api/health should return 200 with status OK."""
    response = client.get("/api/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "OK"
    assert set(body) == {"status", "timestamp", "port", "environment"}


def test_unknown_route_lists_endpoints(client: TestClient) -> None:
    response = client.get("/api/nope")
    assert response.status_code == 404
    assert response.json() == {
        "error": "Route not found",
        "method": "GET",
        "path": "/api/nope",
        "availableEndpoints": AVAILABLE_ENDPOINTS,
    }


def test_unknown_route_lists_document_stats_endpoint(client: TestClient) -> None:
    endpoints = client.post("/api/nope").json()["availableEndpoints"]
    assert "GET /api/processed-documents/{name}" in endpoints


def test_cors_allows_frontend_origin(client: TestClient) -> None:
    response = client.options(
        "/api/chat",
        headers={"Origin": "http://localhost:3000", "Access-Control-Request-Method": "POST"},
    )
    assert response.headers["access-control-allow-origin"] == "http://localhost:3000"


# ── Processed documents ────────────────────────────────────────────────


def test_processed_documents_lists_names(client: TestClient, memory_store) -> None:
    for name in ("2008", "1988"):
        memory_store.store_chunk(DocumentChunk(id=f"{name}-chunk-0", content="c", document=name, embedding=[1.0]))

    response = client.get("/api/processed-documents")

    assert response.status_code == 200
    body = response.json()
    assert body["documents"] == ["1988", "2008"]
    assert body["count"] == 2


def test_processed_documents_store_failure(client: TestClient) -> None:
    broken = MagicMock()
    broken.list_documents.side_effect = RuntimeError("connection refused")
    app.dependency_overrides[get_store] = lambda: broken

    response = client.get("/api/processed-documents")

    assert response.status_code == 500
    assert response.json()["error"] == "Failed to fetch processed documents"
    assert response.json()["details"] == "connection refused"


def test_processed_document_stats(client: TestClient, memory_store) -> None:
    for i, page in enumerate([1, 1, 2]):
        memory_store.store_chunk(DocumentChunk(id=f"2008-chunk-{i}", content="c", document="2008", page=page))

    response = client.get("/api/processed-documents/2008")

    assert response.status_code == 200
    assert response.json() == {"document": "2008", "chunks": 3, "pages": 2}


def test_processed_document_stats_unknown(client: TestClient) -> None:
    response = client.get("/api/processed-documents/1850")
    assert response.status_code == 404
    assert response.json() == {"error": "Document not found", "document": "1850"}


def test_processed_document_stats_store_failure(client: TestClient) -> None:
    broken = MagicMock()
    broken.describe_document.side_effect = RuntimeError("connection refused")
    app.dependency_overrides[get_store] = lambda: broken

    response = client.get("/api/processed-documents/2008")

    assert response.status_code == 500
    body = response.json()
    assert body["error"] == "Failed to describe document"
    assert body["details"] == "connection refused"
    assert "timestamp" in body


# ── Process documents ──────────────────────────────────────────────────


def test_process_documents_returns_results(client: TestClient, fake_processor, tmp_path: Path) -> None:
    response = client.post("/api/process-documents")

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Document processing completed"
    assert body["results"] == [
        {"name": "2008", "chunks": 42, "status": "processed"},
        {"name": "broken", "chunks": 0, "status": "error"},
    ]
    fake_processor.process_all_documents.assert_called_once_with(tmp_path)


def test_process_documents_missing_directory(client: TestClient, tmp_path: Path) -> None:
    missing = tmp_path / "documents"
    app.dependency_overrides[get_documents_dir] = lambda: missing

    response = client.post("/api/process-documents")

    assert response.status_code == 400
    assert response.json() == {"error": "Documents directory not found", "path": str(missing)}


def test_process_documents_unexpected_failure(client: TestClient, fake_processor) -> None:
    fake_processor.process_all_documents.side_effect = RuntimeError("boom")
    response = client.post("/api/process-documents")
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to process documents", "details": "boom"}


# ── Chat ───────────────────────────────────────────────────────────────


@pytest.mark.parametrize(
    "payload",
    [{"message": 42}, {"message": ["a"]}, {"message": ""}, {"message": None}, {}],
)
def test_chat_rejects_invalid_message(client: TestClient, fake_agent, payload) -> None:
    response = client.post("/api/chat", json=payload)
    assert response.status_code == 400
    assert response.json() == {"error": INVALID_MESSAGE_ERROR}
    fake_agent.generate_response.assert_not_called()


def test_chat_rejects_malformed_history(client: TestClient) -> None:
    response = client.post(
        "/api/chat",
        json={"message": "hi", "conversationHistory": [{"role": "system", "content": "x"}]},
    )
    assert response.status_code == 400


def test_chat_json_response(client: TestClient, fake_agent) -> None:
    response = client.post(
        "/api/chat",
        json={
            "message": "What did Buffett say in 2008?",
            "conversationHistory": [{"role": "user", "content": "Hello"}],
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body["response"] == "Stay greedy when others are fearful."
    assert body["sources"] == [s.model_dump() for s in SOURCES]
    assert "timestamp" in body

    message, history = fake_agent.generate_response.call_args.args
    assert message == "What did Buffett say in 2008?"
    assert history == [ChatMessage(role="user", content="Hello")]


def test_chat_history_defaults_to_empty(client: TestClient, fake_agent) -> None:
    client.post("/api/chat", json={"message": "hi"})
    assert fake_agent.generate_response.call_args.args == ("hi", [])


def test_chat_agent_failure_returns_500(client: TestClient, fake_agent) -> None:
    fake_agent.generate_response.side_effect = RuntimeError("OpenAI timeout")
    response = client.post("/api/chat", json={"message": "hi"})
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to generate response", "details": "OpenAI timeout"}


def _parse_sse(text: str) -> list[dict]:
    frames = [f for f in text.split("\n\n") if f]
    assert all(f.startswith("data: ") for f in frames)
    return [json.loads(f[len("data: "):]) for f in frames]


def test_chat_event_stream_single_frame(client: TestClient) -> None:
    response = client.post(
        "/api/chat",
        json={"message": "hi"},
        headers={"Accept": "text/event-stream"},
    )

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/event-stream")
    assert response.headers["cache-control"] == "no-cache"
    frames = _parse_sse(response.text)
    assert len(frames) == 1
    frame = frames[0]
    assert frame["chunk"] == "Stay greedy when others are fearful."
    assert frame["done"] is True
    assert frame["sources"][0]["id"] == "2008-chunk-4"
    assert "timestamp" in frame


def test_chat_event_stream_error_frame(client: TestClient, fake_agent) -> None:
    fake_agent.generate_response.side_effect = RuntimeError("OpenAI timeout")
    response = client.post(
        "/api/chat",
        json={"message": "hi"},
        headers={"Accept": "text/event-stream"},
    )
    assert response.status_code == 200
    assert _parse_sse(response.text) == [{"error": "Failed to generate response", "done": True}]


def test_dependencies_import_does_not_load_pgvector_store(monkeypatch) -> None:
    monkeypatch.delitem(sys.modules, "rag_chatbot.serving.dependencies")
    monkeypatch.delitem(sys.modules, "rag_chatbot.retrieval.pgvector_store", raising=False)

    importlib.import_module("rag_chatbot.serving.dependencies")

    assert "rag_chatbot.retrieval.pgvector_store" not in sys.modules
