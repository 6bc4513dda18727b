"""FastAPI application exposing ingestion, document listing and chat."""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator, Iterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Annotated

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from rag_chatbot.agent.chat import RAGAgent
from rag_chatbot.config import configure_logging, settings
from rag_chatbot.ingestion.processor import DocumentProcessor
from rag_chatbot.retrieval.base import VectorStoreBase
from rag_chatbot.serving.dependencies import (
    get_agent,
    get_documents_dir,
    get_processor,
    get_store,
)
from rag_chatbot.serving.schemas import (
    ChatRequest,
    ChatResponse,
    HealthResponse,
    ProcessDocumentsResponse,
    ProcessedDocumentsResponse,
    utc_now,
)

logger = logging.getLogger(__name__)

AVAILABLE_ENDPOINTS = [
    "GET /api/health",
    "GET /api/processed-documents",
    "GET /api/processed-documents/{name}",
    "POST /api/process-documents",
    "POST /api/chat",
]

INVALID_MESSAGE_ERROR = "Invalid request: message is required and must be a string"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    configure_logging()
    store = get_store()
    try:
        store.initialize()
        logger.info("Database initialized successfully")
    except Exception:
        # Keep serving; ingestion will retry initialization on first use.
        logger.exception("Failed to initialize database")
    yield
    dispose = getattr(store, "dispose", None)
    if dispose is not None:
        dispose()


app = FastAPI(
    title="RAG Chatbot API",
    version="0.1.0",
    description="Chat with a PDF corpus through retrieval-augmented generation.",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Accept"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):  # noqa: ANN001, ANN201
    logger.info("%s %s", request.method, request.url.path)
    return await call_next(request)


# ── Error handlers ────────────────────────────────────────────────────
@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    if any("conversationHistory" in err.get("loc", ()) for err in exc.errors()):
        return JSONResponse(
            status_code=400,
            content={
                "error": "Invalid request: conversationHistory is malformed",
                "details": jsonable_errors(exc),
            },
        )
    # Missing body, missing message, empty or non-string message.
    return JSONResponse(status_code=400, content={"error": INVALID_MESSAGE_ERROR})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        logger.warning("Unhandled route: %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=404,
            content={
                "error": "Route not found",
                "method": request.method,
                "path": request.url.path,
                "availableEndpoints": AVAILABLE_ENDPOINTS,
            },
        )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "message": str(exc), "timestamp": utc_now()},
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    return [{"loc": list(err.get("loc", ())), "msg": err.get("msg", "")} for err in exc.errors()]


# ── Routes ────────────────────────────────────────────────────────────
@app.get("/api/health", response_model=HealthResponse)
def health() -> HealthResponse:
    """Liveness probe."""
    return HealthResponse(port=settings.port, environment=settings.environment)


@app.get("/api/processed-documents", response_model=ProcessedDocumentsResponse)
def processed_documents(
    store: Annotated[VectorStoreBase, Depends(get_store)],
):
    """List the names of all documents that have chunks in the store."""
    try:
        documents = store.list_documents()
    except Exception as exc:
        logger.exception("Error fetching processed documents")
        return JSONResponse(
            status_code=500,
            content={
                "error": "Failed to fetch processed documents",
                "details": str(exc),
                "timestamp": utc_now(),
            },
        )
    logger.info("Found %d processed document(s)", len(documents))
    return ProcessedDocumentsResponse(documents=documents, count=len(documents))


@app.get("/api/processed-documents/{name}")
def processed_document_stats(
    name: str,
    store: Annotated[VectorStoreBase, Depends(get_store)],
):
    """Return chunk and page counts of one ingested document."""
    try:
        stats = store.describe_document(name)
    except Exception as exc:
        logger.exception("Error getting stats for document %s", name)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Failed to describe document",
                "details": str(exc),
                "timestamp": utc_now(),
            },
        )
    if stats is None:
        return JSONResponse(status_code=404, content={"error": "Document not found", "document": name})
    return stats


@app.post("/api/process-documents", response_model=ProcessDocumentsResponse)
def process_documents(
    processor: Annotated[DocumentProcessor, Depends(get_processor)],
    documents_dir: Annotated[Path, Depends(get_documents_dir)],
):
    """Ingest every PDF of the configured documents directory."""
    if not documents_dir.is_dir():
        return JSONResponse(
            status_code=400,
            content={"error": "Documents directory not found", "path": str(documents_dir)},
        )
    try:
        logger.info("Starting document processing in %s", documents_dir)
        results = processor.process_all_documents(documents_dir)
    except Exception as exc:
        logger.exception("Error processing documents")
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to process documents", "details": str(exc)},
        )
    return ProcessDocumentsResponse(results=results)


@app.post("/api/chat", response_model=ChatResponse)
def chat(
    body: ChatRequest,
    request: Request,
    agent: Annotated[RAGAgent, Depends(get_agent)],
):
    """Answer a question; ``Accept: text/event-stream`` gets a single SSE frame."""
    logger.info("Processing chat request: %.50s...", body.message)

    if "text/event-stream" not in request.headers.get("accept", ""):
        try:
            answer = agent.generate_response(body.message, body.conversation_history)
        except Exception as exc:
            logger.exception("Chat error")
            return JSONResponse(
                status_code=500,
                content={"error": "Failed to generate response", "details": str(exc)},
            )
        return ChatResponse(response=answer.response, sources=answer.sources)

    return StreamingResponse(
        _sse_frames(agent, body),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
    )


def _sse_frames(agent: RAGAgent, body: ChatRequest) -> Iterator[str]:
    """Yield the whole answer as one ``data:`` frame, or an error frame."""
    try:
        answer = agent.generate_response(body.message, body.conversation_history)
        payload = {
            "chunk": answer.response,
            "done": True,
            "sources": [s.model_dump() for s in answer.sources],
            "timestamp": utc_now(),
        }
    except Exception:
        logger.exception("Chat error")
        payload = {"error": "Failed to generate response", "done": True}
    yield f"data: {json.dumps(payload)}\n\n"


def main() -> None:
    """Run the API with uvicorn."""
    import uvicorn

    configure_logging()
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
