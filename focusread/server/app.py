"""FastAPI application exposing the reader's text pipeline over HTTP.

WHY: A web front end renders words itself but still needs the server-side
pieces: pivot segmentation with per-word delays, PDF text extraction, and
the AI refine/summarize actions (which need the API key kept server-side).

HOW: A single FastAPI app with five endpoints grouped by tags. Document
extraction runs in the threadpool because pypdf is blocking. AI actions
look up a transformer in TRANSFORMERS and await it.

RULES:
- Error responses use a consistent ErrorResponse schema
- Unsupported document types → 400; unreadable documents → 422
- AI failures → 502 with the failure message; the caller keeps its text
- Python 3.9+ compatible (no match/case, no PEP 604 unions)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

from fastapi import FastAPI, File, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool

from focusread import __version__
from focusread.ai.client import TransformError
from focusread.ai.transformers import TRANSFORMERS
from focusread.config import DEFAULT_SPEED, SPEED_CHOICES, SUPPORTED_DOCUMENT_FORMATS, load_api_key
from focusread.core.clock import compute_delay_ms
from focusread.core.words import segment
from focusread.server.models import (
    DocumentResponse,
    ErrorResponse,
    HealthResponse,
    SegmentRequest,
    SegmentResponse,
    SpeedsResponse,
    TransformKind,
    TransformRequest,
    TransformResponse,
    WordModel,
)
from focusread.sources.documents import (
    DocumentExtractionError,
    extract_pdf_text,
    normalize_whitespace,
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="FocusRead RSVP API",
    description=(
        "Text pipeline for the FocusRead speed reader: split text into "
        "pivot-aligned words with punctuation-aware delays, extract text "
        "from PDFs, and refine or summarize text with AI."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _extract_upload_text(filename: str, content: bytes) -> str:
    """Turn uploaded bytes into normalized text based on the file extension."""
    ext = Path(filename).suffix.lower()
    if ext == ".pdf":
        return extract_pdf_text(content)
    try:
        return normalize_whitespace(content.decode("utf-8"))
    except UnicodeDecodeError as exc:
        raise DocumentExtractionError("Text file is not valid UTF-8.") from exc


# ---------------------------------------------------------------------------
# Endpoints: Reading
# ---------------------------------------------------------------------------


@app.post(
    "/segment",
    response_model=SegmentResponse,
    tags=["reading"],
    summary="Split text into pivot-aligned words",
    description=(
        "Splits text on whitespace, computes each word's Optimal Recognition "
        "Point split, and the delay the word stays on screen at the given speed."
    ),
)
async def segment_text(request: SegmentRequest) -> SegmentResponse:
    words = []
    total_ms = 0.0
    for record in segment(request.text):
        delay = compute_delay_ms(record.text, request.speed)
        total_ms += delay
        words.append(WordModel(
            text=record.text,
            prefix=record.prefix,
            pivot=record.pivot,
            suffix=record.suffix,
            delay_ms=delay,
        ))
    return SegmentResponse(
        speed=request.speed,
        word_count=len(words),
        total_ms=total_ms,
        words=words,
    )


@app.get(
    "/speeds",
    response_model=SpeedsResponse,
    tags=["reading"],
    summary="List selectable reading speeds",
)
async def list_speeds() -> SpeedsResponse:
    return SpeedsResponse(speeds=list(SPEED_CHOICES), default=DEFAULT_SPEED)


# ---------------------------------------------------------------------------
# Endpoints: Sources
# ---------------------------------------------------------------------------


@app.post(
    "/documents",
    response_model=DocumentResponse,
    tags=["sources"],
    summary="Extract text from a document",
    description="Upload a PDF or UTF-8 .txt file and receive its whitespace-normalized text.",
    responses={
        400: {"model": ErrorResponse, "description": "Unsupported file type"},
        422: {"model": ErrorResponse, "description": "Document could not be read"},
    },
)
async def extract_document(
    file: Annotated[UploadFile, File(description="PDF or .txt document")],
) -> DocumentResponse:
    # Sanitize filename to prevent path tricks in logs and responses
    filename = Path(file.filename or "upload").name
    ext = Path(filename).suffix.lower()
    if ext not in SUPPORTED_DOCUMENT_FORMATS:
        raise HTTPException(
            status_code=400,
            detail="Unsupported file type '{}'. Supported formats: {}".format(
                ext, ", ".join(sorted(SUPPORTED_DOCUMENT_FORMATS))
            ),
        )

    content = await file.read()
    try:
        text = await run_in_threadpool(_extract_upload_text, filename, content)
    except DocumentExtractionError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    logger.info("Extracted %d characters from %s", len(text), filename)
    return DocumentResponse(filename=filename, text=text, word_count=len(text.split()))


@app.post(
    "/transform/{kind}",
    response_model=TransformResponse,
    tags=["sources"],
    summary="Refine or summarize text with AI",
    description=(
        "Runs the text through the AI service. On failure the response is "
        "502 and the caller should keep its current text."
    ),
    responses={
        502: {"model": ErrorResponse, "description": "AI service failed"},
    },
)
async def transform_text(kind: TransformKind, request: TransformRequest) -> TransformResponse:
    transformer = TRANSFORMERS[kind.value]()
    try:
        text = await transformer.transform(request.text)
    except TransformError as exc:
        logger.warning("%s failed: %s", transformer.name, exc)
        raise HTTPException(status_code=502, detail=str(exc))
    return TransformResponse(kind=kind, text=text, word_count=len(text.split()))


# ---------------------------------------------------------------------------
# Endpoints: Health
# ---------------------------------------------------------------------------


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["health"],
    summary="Health check",
)
async def health_check() -> HealthResponse:
    try:
        load_api_key()
        ai_configured = True
    except ValueError:
        ai_configured = False
    return HealthResponse(status="ok", version=__version__, ai_configured=ai_configured)


def run_api():
    """Entry point for the focusread-api console script."""
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    uvicorn.run(app, host="0.0.0.0", port=8000)
