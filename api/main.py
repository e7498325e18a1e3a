"""
Docforge API — Main Application

POST /validate            — Score a document against its type's rubric
POST /validate/batch      — Score several documents concurrently
POST /slop                — Slop analysis only
POST /detect              — Raw detector outputs for a document type
GET  /plugins             — List registered document types
GET  /plugins/{doc_type}  — Rubric metadata for one document type
GET  /health              — Health check
"""

from __future__ import annotations

import asyncio
import time
from concurrent.futures import ThreadPoolExecutor
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.requests import Request

from docforge import __version__
from docforge.config import settings
from docforge.errors import UnknownDocumentTypeError
from docforge.logging import get_logger, setup_logging
from docforge.registry import get_registry
from docforge.slop import analyze_slop
from docforge.validator import detect, validate
from docforge.schemas.validate import (
    DetectRequest,
    DetectResponse,
    HealthResponse,
    PluginListResponse,
    PluginResponse,
    SlopRequest,
    SlopResponse,
    ValidateBatchRequest,
    ValidateBatchResponse,
    ValidateRequest,
    ValidationResponse,
)

logger = get_logger("api")

_executor = ThreadPoolExecutor(max_workers=settings.BATCH_WORKERS, thread_name_prefix="docforge")


# ============================================================
# STARTUP / SHUTDOWN
# ============================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging and build the rubric registry before serving."""
    setup_logging()
    registry = get_registry()
    logger.info("Docforge API starting",
                extra={"plugin_count": len(registry), "doc_type": registry.get_default().id})
    yield
    logger.info("Docforge API shutting down")


app = FastAPI(
    title="Docforge API",
    description="Rubric-based quality scoring for business documents",
    version=f"{__version__} (engine {settings.ENGINE_VERSION})",
    lifespan=lifespan,
)

# CORS: set DOCFORGE_CORS_ORIGINS in production
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.CORS_ORIGINS.split(",")],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
    allow_credentials=False,
)


@app.get("/", include_in_schema=False)
async def root():
    return JSONResponse({"message": "Docforge API", "docs": "/docs"})


# ============================================================
# ERROR HANDLERS
# ============================================================

@app.exception_handler(UnknownDocumentTypeError)
async def unknown_doc_type_handler(request: Request, exc: UnknownDocumentTypeError):
    """Unknown document type is a caller error, not a server fault."""
    return JSONResponse(
        status_code=404,
        content={"detail": str(exc), "known": exc.known},
    )


@app.exception_handler(Exception)
async def global_error_handler(request: Request, exc: Exception):
    """Catch unhandled exceptions — return structured error, don't leak internals."""
    logger.error(
        f"Unhandled exception: {type(exc).__name__}",
        extra={"error": str(exc), "path": request.url.path, "method": request.method},
        exc_info=True,
    )
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error. The document could not be scored."},
    )


async def _run(fn, *args):
    """Run a CPU-bound engine call on the worker pool."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(_executor, fn, *args)


def _error_item(item: ValidateRequest, exc: BaseException) -> dict:
    return {
        "doc_type": item.doc_type or settings.DEFAULT_DOC_TYPE,
        "total_score": 0,
        "max_score": 100,
        "grade": "F",
        "label": "Incomplete",
        "color": "red",
        "dimensions": {},
        "slop_detection": {},
        "issues": ["Scoring failed for this item."],
        "strengths": [],
        "is_prompt_detected": False,
        "truncated": False,
        "error": str(exc) if isinstance(exc, UnknownDocumentTypeError) else type(exc).__name__,
    }


# ============================================================
# ROUTES
# ============================================================

@app.post("/validate", response_model=ValidationResponse)
async def validate_document(request: ValidateRequest):
    """Score one document."""
    start = time.time()
    result = await _run(validate, request.text, request.doc_type)

    logger.info(
        f"Validation complete: score={result.total_score} type={result.doc_type}",
        extra={
            "doc_type": result.doc_type,
            "total_score": result.total_score,
            "slop_severity": result.slop_detection.get("severity"),
            "duration_ms": int((time.time() - start) * 1000),
        },
    )
    return result.to_dict()


@app.post("/validate/batch", response_model=ValidateBatchResponse)
async def validate_batch(request: ValidateBatchRequest):
    """Score several documents concurrently; failed items come back zero-shaped."""
    results = await asyncio.gather(
        *[_run(validate, item.text, item.doc_type) for item in request.items],
        return_exceptions=True,
    )

    clean_results = []
    scored = 0
    for item, r in zip(request.items, results):
        if isinstance(r, BaseException):
            logger.warning(
                "Batch item failed",
                extra={"doc_type": item.doc_type, "error": str(r), "error_type": type(r).__name__},
            )
            clean_results.append(_error_item(item, r))
        else:
            scored += 1
            clean_results.append(r.to_dict())

    logger.info(
        f"Batch complete: {scored}/{len(request.items)} scored",
        extra={"items": len(request.items)},
    )
    return {"results": clean_results, "total": len(request.items), "scored": scored}


@app.post("/slop", response_model=SlopResponse)
async def slop(request: SlopRequest):
    """Slop analysis without rubric scoring."""
    report = await _run(analyze_slop, request.text)
    return report.to_dict()


@app.post("/detect", response_model=DetectResponse)
async def detect_signals(request: DetectRequest):
    """Raw detector outputs for one document type."""
    registry = get_registry()
    plugin = registry.get_default() if request.doc_type is None else registry.get_plugin(request.doc_type)
    detectors = await _run(detect, request.text, plugin.id)
    return {"doc_type": plugin.id, "detectors": detectors}


@app.get("/plugins", response_model=PluginListResponse)
async def list_plugins():
    registry = get_registry()
    plugins = [p.to_dict() for p in registry.get_all()]
    return {"default": registry.get_default().id, "total": len(plugins), "plugins": plugins}


@app.get("/plugins/{doc_type}", response_model=PluginResponse)
async def get_plugin(doc_type: str):
    return get_registry().get_plugin(doc_type).to_dict()


@app.get("/health", response_model=HealthResponse)
async def health():
    """Health check."""
    registry = get_registry()
    return {
        "status": "operational",
        "version": __version__,
        "engine_version": settings.ENGINE_VERSION,
        "plugin_count": len(registry),
        "default_doc_type": registry.get_default().id,
    }


# --- Security + Version Headers Middleware ---
@app.middleware("http")
async def add_version_headers(request: Request, call_next):
    """Add security and version headers to all responses."""
    response = await call_next(request)
    response.headers["X-Docforge-Version"] = __version__
    response.headers["X-Engine-Version"] = settings.ENGINE_VERSION
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    return response


# --- Body Size Limit Middleware ---
_MAX_BODY_BYTES = 1_048_576  # 1 MB


@app.middleware("http")
async def enforce_body_size_limit(request: Request, call_next):
    """Reject requests exceeding 1MB — guards both Content-Length and chunked bodies."""
    content_length = request.headers.get("content-length")
    if content_length:
        try:
            if int(content_length) > _MAX_BODY_BYTES:
                return JSONResponse(
                    status_code=413,
                    content={"detail": "Request body too large."},
                )
        except ValueError:
            pass  # Malformed content-length; let the framework handle it

    if request.method in ("POST", "PUT", "PATCH"):
        body = await request.body()
        if len(body) > _MAX_BODY_BYTES:
            return JSONResponse(
                status_code=413,
                content={"detail": "Request body too large."},
            )

    return await call_next(request)


# --- Request Logging Middleware ---
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every API request with method, path, status, duration."""
    path = request.url.path
    if path == "/health":
        return await call_next(request)

    start = time.time()
    response = await call_next(request)
    duration_ms = round((time.time() - start) * 1000, 1)

    logger.info(
        f"{request.method} {path} → {response.status_code} ({duration_ms}ms)",
        extra={
            "method": request.method,
            "path": path,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        },
    )
    return response
