"""FastAPI application for the travel document OCR service.

Accepts document batches for background processing and exposes a
health check. Results are delivered through the progress channel and
the result webhook, never in the HTTP response.
"""

import shutil
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from functools import lru_cache

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from travel_ocr.pipeline.factory import build_orchestrator
from travel_ocr.pipeline.orchestrator import BatchOrchestrator
from travel_ocr.utils.config import AppConfig, load_config
from travel_ocr.utils.logger import get_logger

from .schemas import HealthResponse, ProcessDocumentsRequest, ProcessDocumentsResponse

logger = get_logger(__name__)

SERVICE_NAME = "travel-document-ocr"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Drain queued batches when the server stops."""
    yield
    shutdown_orchestrator()


app = FastAPI(
    title="Travel Document OCR API",
    description="Extract passport, flight ticket and hotel booking data per order",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def configure(config: AppConfig) -> None:
    """Use ``config`` instead of the default config file for this app."""
    app.state.config = config
    get_orchestrator.cache_clear()


@lru_cache(maxsize=1)
def get_orchestrator() -> BatchOrchestrator:
    """Build the shared orchestrator on first use."""
    config = getattr(app.state, "config", None) or load_config()
    return build_orchestrator(config)


def shutdown_orchestrator() -> None:
    """Wait for in-flight batches and drop the shared orchestrator."""
    if get_orchestrator.cache_info().currsize:
        logger.info("Waiting for queued batches to finish")
        get_orchestrator().shutdown(wait=True)
        get_orchestrator.cache_clear()


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Return service health status."""
    return HealthResponse(
        status="ok",
        service=SERVICE_NAME,
        tesseract_available=shutil.which("tesseract") is not None,
    )


@app.post("/process/documents", status_code=202, response_model=ProcessDocumentsResponse)
def process_documents(request: ProcessDocumentsRequest) -> ProcessDocumentsResponse:
    """Queue an order's documents for OCR and acknowledge immediately.

    Args:
        request: Order id and its uploaded documents.

    Returns:
        Acknowledgement; outcomes are published asynchronously.
    """
    if not request.order_id.strip():
        raise HTTPException(status_code=400, detail="order_id is required")

    logger.info(
        "Received %d documents for order %s", len(request.documents), request.order_id
    )
    get_orchestrator().submit(request.to_batch())

    return ProcessDocumentsResponse(
        message="Document processing started",
        order_id=request.order_id,
    )
