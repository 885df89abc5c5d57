"""FastAPI application – language detection microservice.

Endpoints
---------
POST /detect    – most probable language of a text, with confidence
GET  /health    – liveness / readiness check (empty 200)
"""

from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware

from lexis.config import Settings
from lexis.errors import LexisError
from lexis.models import DetectionResponse, ErrorResponse
from lexis.pipeline.detector import LanguageDetector
from lexis.pipeline.orchestrator import DetectionPipeline

_log = logging.getLogger("lexis.http")


# ── Middleware ──────────────────────────────────────────────────────────────

class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and duration of every request.

    Also the fault boundary: an unexpected exception becomes a 500
    ``INTERNAL_ERROR`` body here, inside CORS, so the response is logged and
    carries the usual headers while the process keeps serving.
    """

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        try:
            response = await call_next(request)
        except Exception:
            _log.exception("Unhandled error on %s %s", request.method, request.url.path)
            response = _error_response(500, LexisError.message, LexisError.code)
        processing_time = time.time() - start_time

        _log.info(
            "%s %s - %d - %.3fs",
            request.method,
            request.url.path,
            response.status_code,
            processing_time,
        )
        response.headers["X-Process-Time"] = f"{processing_time:.3f}"
        return response


# ── Error handlers ──────────────────────────────────────────────────────────

def _error_response(status_code: int, message: str, code: str) -> JSONResponse:
    body = ErrorResponse(error=message, code=code)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def add_error_handlers(app: FastAPI) -> None:
    """Render domain errors as ``{"error", "code"}`` bodies."""

    @app.exception_handler(LexisError)
    async def lexis_error_handler(request: Request, exc: LexisError) -> JSONResponse:
        return _error_response(exc.status_code, exc.message, exc.code)


# ── Application ─────────────────────────────────────────────────────────────

def create_app(detector: LanguageDetector, settings: Settings) -> FastAPI:
    """Build the application around an already-initialised detector."""
    app = FastAPI(
        title="Lexis Language Detection API",
        version="1.0.0",
        docs_url=None,
        redoc_url=None,
    )
    app.state.pipeline = DetectionPipeline(detector, settings.max_char_process)
    app.state.settings = settings

    # Last added runs outermost: CORS wraps the logging / fault boundary
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    add_error_handlers(app)

    @app.get("/health")
    def health() -> Response:
        """Return 200 once the service is serving."""
        return Response(status_code=200)

    @app.post(
        "/detect",
        response_model=DetectionResponse,
        responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    )
    async def detect(request: Request) -> DetectionResponse:
        """Detect the language of ``{"text": ...}``."""
        raw_body = await request.body()
        pipeline: DetectionPipeline = request.app.state.pipeline
        # Scoring is CPU-bound; keep it off the event loop
        return await run_in_threadpool(pipeline.handle, raw_body)

    return app
