"""
Kanoon Gateway — FastAPI Backend v1.0
Keeps the Indian Kanoon API token on the server for the legal assistant frontend.

Routes:
  1. POST /api/search               case-law search, normalized result set
  2. POST /api/doc/{docId}          single judgment / section with citations
  3. POST /api/doc/{docId}/summary  same document, summarized by the LLM
  4. POST /api/summarize            plain-language summary of a legal section
  5. POST /api/chat                 legal Q&A assistant
  6. GET  /health

Every failure is returned as {"error": str, "details"?: any}.
"""

import logging
from typing import Optional

import httpx
import uvicorn
from fastapi import Depends, FastAPI, Query, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import kanoon_client
from kanoon_client import ConfigurationError, GatewayError, InvalidQueryError, ensure_configured
from schemas import (
    ChatRequest,
    ChatResponse,
    DocumentRecord,
    DocumentRequest,
    DocumentSummary,
    ErrorResponse,
    SearchFilters,
    SearchQuery,
    SearchResultSet,
    SummaryRequest,
    SummaryResponse,
)
from settings import Settings, load_settings
from summarizer import Summarizer, build_summarizer

# ---------------------------------------------------------------------------
# Bootstrap
# ---------------------------------------------------------------------------

settings = load_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("kanoon.gateway")

if not settings.upstream_configured:
    logger.warning("INDIANKANOON_API_TOKEN is not set; case-law routes will answer 500.")

summarizer: Optional[Summarizer] = build_summarizer(settings) if settings.summarizer_configured else None

app = FastAPI(title="Kanoon Gateway API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
}


@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.info("%s %s", request.method, request.url.path)
    return await call_next(request)


# ---------------------------------------------------------------------------
# Dependencies (overridden in tests)
# ---------------------------------------------------------------------------


def get_settings() -> Settings:
    return settings


def get_transport() -> Optional[httpx.AsyncBaseTransport]:
    """None means httpx's default network transport."""
    return None


def require_upstream(settings: Settings = Depends(get_settings)) -> Settings:
    """Declared first on case-law routes so a missing token wins over bad params."""
    ensure_configured(settings)
    return settings


def get_summarizer() -> Summarizer:
    if summarizer is None:
        raise ConfigurationError("Summarizer not configured")
    return summarizer


# ---------------------------------------------------------------------------
# Error contract
# ---------------------------------------------------------------------------


@app.exception_handler(GatewayError)
async def gateway_error_handler(request: Request, exc: GatewayError):
    body = {"error": exc.message}
    if exc.details is not None:
        body["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=body)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content={"error": "Invalid request parameters", "details": jsonable_encoder(exc.errors())},
    )


# ---------------------------------------------------------------------------
# Route 1 — /api/search
# ---------------------------------------------------------------------------


@app.post(
    "/api/search",
    response_model=SearchResultSet,
    response_model_exclude_unset=True,
    responses=ERROR_RESPONSES,
)
async def search(
    settings: Settings = Depends(require_upstream),
    form_input: Optional[str] = Query(default=None, alias="formInput"),
    pagenum: int = Query(default=0, ge=0),
    maxcites: int = Query(default=5, ge=0),
    filters: SearchFilters = Depends(),
    transport: Optional[httpx.AsyncBaseTransport] = Depends(get_transport),
):
    """?formInput=murder&pagenum=0&maxcites=5[&doctypes=...&fromdate=...]"""
    if not form_input or not form_input.strip():
        raise InvalidQueryError("formInput is required")

    query = SearchQuery(form_input=form_input, pagenum=pagenum, maxcites=maxcites, filters=filters)
    return await kanoon_client.search(query, settings, transport)


# ---------------------------------------------------------------------------
# Route 2 — /api/doc/{docId}
# ---------------------------------------------------------------------------


@app.post(
    "/api/doc/{doc_id}",
    response_model=DocumentRecord,
    response_model_exclude_unset=True,
    responses=ERROR_RESPONSES,
)
async def get_document(
    doc_id: str,
    request: Request,
    settings: Settings = Depends(require_upstream),
    transport: Optional[httpx.AsyncBaseTransport] = Depends(get_transport),
):
    """Query parameters (maxcites, maxcitedby, ...) go upstream as-is, repeats included."""
    doc_request = DocumentRequest(doc_id=doc_id, params=request.query_params.multi_items())
    return await kanoon_client.fetch_document(doc_request, settings, transport)


# ---------------------------------------------------------------------------
# Route 3 — /api/doc/{docId}/summary
# ---------------------------------------------------------------------------


@app.post("/api/doc/{doc_id}/summary", response_model=DocumentSummary, responses=ERROR_RESPONSES)
async def summarize_document(
    doc_id: str,
    request: Request,
    settings: Settings = Depends(require_upstream),
    transport: Optional[httpx.AsyncBaseTransport] = Depends(get_transport),
    summarizer: Summarizer = Depends(get_summarizer),
):
    doc_request = DocumentRequest(doc_id=doc_id, params=request.query_params.multi_items())
    record = await kanoon_client.fetch_document(doc_request, settings, transport)
    summary = await summarizer.summarize_judgment(record.title, record.doc)
    return DocumentSummary(tid=record.tid, title=record.title, summary=summary)


# ---------------------------------------------------------------------------
# Route 4 — /api/summarize
# ---------------------------------------------------------------------------


@app.post("/api/summarize", response_model=SummaryResponse, responses=ERROR_RESPONSES)
async def summarize_section(
    payload: SummaryRequest,
    summarizer: Summarizer = Depends(get_summarizer),
):
    if not payload.text.strip():
        raise InvalidQueryError("text is required")
    return SummaryResponse(summary=await summarizer.summarize_section(payload.text))


# ---------------------------------------------------------------------------
# Route 5 — /api/chat
# ---------------------------------------------------------------------------


@app.post("/api/chat", response_model=ChatResponse, responses=ERROR_RESPONSES)
async def chat(
    payload: ChatRequest,
    summarizer: Summarizer = Depends(get_summarizer),
):
    """One question in, one answer out; no conversation state is kept."""
    if not payload.question.strip():
        raise InvalidQueryError("question is required")
    return ChatResponse(answer=await summarizer.answer_question(payload.question))


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


@app.get("/health")
async def health(settings: Settings = Depends(get_settings)):
    return {
        "status": "ok",
        "upstream_configured": settings.upstream_configured,
        "summarizer_configured": settings.summarizer_configured,
    }


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=settings.port)
