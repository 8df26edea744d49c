from __future__ import annotations

import logging
import time
import uuid

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from lightchat.app.api.chat import router as chat_router
from lightchat.app.api.health import router as health_router
from lightchat.app.api.providers import router as providers_router
from lightchat.app.config.settings import settings
from lightchat.app.core.logging import request_id_var, setup_logging
from lightchat.app.core.security import cors_kwargs, redacted_body_preview
from lightchat.app.version import __version__

setup_logging(
    level=settings.log_level,
    json_output=settings.log_json,
    log_file=settings.log_file or None,
)
logger = logging.getLogger("lightchat")

_HEADER_ALLOWLIST = {
    "user-agent",
    "origin",
    "referer",
    "content-type",
    "x-forwarded-for",
    "x-real-ip",
    "x-request-id",
}


def _safe_headers(request: Request) -> dict:
    return {key: value for key, value in request.headers.items() if key.lower() in _HEADER_ALLOWLIST}


async def _request_context(request: Request) -> dict:
    context = {
        "method": request.method,
        "path": request.url.path,
        "query": request.url.query,
        "client_ip": request.client.host if request.client else None,
        "headers": _safe_headers(request),
    }
    try:
        body = await request.body()
    except RuntimeError:
        # Body already consumed by a streaming route
        body = b""
    preview = redacted_body_preview(body, request.headers.get("content-type", ""))
    if preview:
        context["body_preview"] = preview
    return context


app = FastAPI(title="LightChat", version=__version__)

app.add_middleware(CORSMiddleware, **cors_kwargs(settings.cors_origins_list))


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "no-referrer"
        return response


app.add_middleware(SecurityHeadersMiddleware)
app.include_router(health_router)
app.include_router(providers_router)
app.include_router(chat_router)


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id

        token = request_id_var.set(request_id)
        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            request_id_var.reset(token)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()

        response = await call_next(request)

        route = getattr(request.scope.get("route"), "path", request.url.path)
        # Streaming responses are still open here; latency covers time to headers.
        logger.info(
            "Request completed",
            extra={
                "request_id": getattr(request.state, "request_id", "unknown"),
                "method": request.method,
                "route": route,
                "status": response.status_code,
                "latency_ms": round((time.time() - start_time) * 1000, 2),
            },
        )
        return response


app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(RequestIDMiddleware)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    request_id = getattr(request.state, "request_id", "unknown")
    detail = exc.detail if isinstance(exc.detail, dict) else {"code": "HTTP_ERROR", "message": str(exc.detail)}
    context = await _request_context(request)
    logger.warning(
        "HTTPException",
        extra={
            "request_id": request_id,
            "status_code": exc.status_code,
            "error_code": detail.get("code"),
            "error_message": detail.get("message"),
            **context,
        },
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "code": detail.get("code", "HTTP_ERROR"),
            "message": detail.get("message", "Request failed"),
            "request_id": request_id,
        },
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    request_id = getattr(request.state, "request_id", "unknown")
    context = await _request_context(request)
    logger.warning(
        "RequestValidationError",
        extra={"request_id": request_id, "error_detail": exc.errors(), **context},
    )
    return JSONResponse(
        status_code=400,
        content={
            "code": "VALIDATION_ERROR",
            "message": "Invalid request",
            "detail": exc.errors(),
            "request_id": request_id,
        },
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    request_id = getattr(request.state, "request_id", "unknown")
    context = await _request_context(request)
    logger.error("Unhandled exception", extra={"request_id": request_id, **context}, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "code": "INTERNAL_ERROR",
            "message": "An internal error occurred",
            "request_id": request_id,
        },
    )
