"""Global exception handlers mapping domain exceptions to ``{"error": ...}`` responses.

Provider bodies and stack traces are logged, never returned.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from consult_ai.exceptions import (
    ConsultError,
    DocumentExtractionError,
    EmptyDocumentError,
    JSONParseError,
    NotFoundError,
    PersistenceError,
    SynthesisSchemaError,
    UploadTooLargeError,
    UpstreamProviderError,
    ValidationError,
)
from consult_ai.services.document_text import ExtractorUnavailableError

log = logging.getLogger(__name__)


def _describe(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg', 'invalid')}" if loc else str(err.get("msg", "invalid")))
    return "Invalid request body: " + "; ".join(parts)


def register_error_handlers(app: FastAPI) -> None:
    """Register exception-to-HTTP-status mappings."""

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)}, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": _describe(exc)})

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(UploadTooLargeError)
    async def handle_too_large(request: Request, exc: UploadTooLargeError) -> JSONResponse:
        return JSONResponse(status_code=413, content={"error": str(exc)})

    @app.exception_handler(EmptyDocumentError)
    async def handle_empty_document(request: Request, exc: EmptyDocumentError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"error": str(exc)})

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"error": str(exc)})

    @app.exception_handler(SynthesisSchemaError)
    async def handle_schema_error(request: Request, exc: SynthesisSchemaError) -> JSONResponse:
        content: dict[str, object] = {"error": str(exc)}
        if exc.missing:
            content["missing"] = exc.missing
        return JSONResponse(status_code=500, content=content)

    @app.exception_handler(UpstreamProviderError)
    async def handle_provider_error(request: Request, exc: UpstreamProviderError) -> JSONResponse:
        log.error("Upstream provider failure: %s", exc, extra={"path": request.url.path})
        return JSONResponse(status_code=500, content={"error": "Upstream model provider failed"})

    @app.exception_handler(JSONParseError)
    async def handle_parse_error(request: Request, exc: JSONParseError) -> JSONResponse:
        log.error("Model output not parseable: %s", exc, extra={"path": request.url.path})
        return JSONResponse(status_code=500, content={"error": "AI model produced invalid JSON"})

    @app.exception_handler(PersistenceError)
    async def handle_persistence_error(request: Request, exc: PersistenceError) -> JSONResponse:
        log.error("Persistence failure: %s", exc, extra={"path": request.url.path})
        return JSONResponse(status_code=500, content={"error": "Failed to persist report"})

    @app.exception_handler(DocumentExtractionError)
    async def handle_extraction_error(request: Request, exc: DocumentExtractionError) -> JSONResponse:
        return JSONResponse(status_code=500, content={"error": str(exc)})

    @app.exception_handler(ExtractorUnavailableError)
    async def handle_extractor_unavailable(request: Request, exc: ExtractorUnavailableError) -> JSONResponse:
        return JSONResponse(
            status_code=501,
            content={"error": f"{exc}. Install with: pip install consult-ai[extract]"},
        )

    @app.exception_handler(ConsultError)
    async def handle_generic_error(request: Request, exc: ConsultError) -> JSONResponse:
        log.error("Unhandled consult-ai error: %s", exc, extra={"path": request.url.path})
        return JSONResponse(status_code=500, content={"error": "Internal Server Error"})

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        log.exception("Unexpected error", extra={"path": request.url.path})
        return JSONResponse(status_code=500, content={"error": "Internal Server Error"})
