from __future__ import annotations

import json
import logging
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from guideline_qa.api.routes.chat import router as chat_router
from guideline_qa.api.routes.health import APP_NAME, APP_VERSION, router as health_router
from guideline_qa.core import config
from guideline_qa.core.errors import error_payload
from guideline_qa.core.logging_utils import configure_logging
from guideline_qa.middleware.security import (
    BodySizeLimitMiddleware,
    RateLimitMiddleware,
    RequestIdMiddleware,
    RequestTraceMiddleware,
    SecurityHeadersMiddleware,
)

logger = logging.getLogger(__name__)


def _sanitize_validation_errors(errors: list[dict[str, Any]]) -> list[dict[str, Any]]:
    sanitized: list[dict[str, Any]] = []
    for err in errors:
        entry = dict(err)
        entry.pop("input", None)
        ctx = entry.get("ctx")
        if isinstance(ctx, dict):
            safe_ctx: dict[str, Any] = {}
            for key, value in ctx.items():
                try:
                    json.dumps(value)
                    safe_ctx[key] = value
                except TypeError:
                    safe_ctx[key] = repr(value)
            entry["ctx"] = safe_ctx
        sanitized.append(entry)
    return sanitized


def normalize_http_exception_detail(detail: Any) -> Dict[str, Any] | None:
    if not isinstance(detail, dict):
        return None
    code = detail.get("code")
    message = detail.get("message")
    if isinstance(code, str) and isinstance(message, str):
        return error_payload(code, message, detail.get("details"))
    return None


def _cors_origins(raw: str) -> list[str]:
    origins: list[str] = []
    for value in (raw or "").split(","):
        cleaned = value.strip().rstrip("/") or value.strip()
        if cleaned:
            origins.append(cleaned)
    return origins


def create_app() -> FastAPI:
    """
    Application factory: middleware, unified error JSON, health and chat routes.
    """
    configure_logging()
    app = FastAPI(title=APP_NAME, version=APP_VERSION)

    # add_middleware wraps, so the last one added runs first
    app.add_middleware(RequestTraceMiddleware)
    app.add_middleware(BodySizeLimitMiddleware)
    app.add_middleware(RateLimitMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIdMiddleware)

    # ---- Exception handlers (unified error JSON) ----
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        normalized = normalize_http_exception_detail(exc.detail)
        if normalized is None:
            code = "NOT_FOUND" if exc.status_code == 404 else "HTTP_ERROR"
            normalized = error_payload(code, str(exc.detail))
        return JSONResponse(status_code=exc.status_code, content=normalized)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        payload = error_payload(
            "VALIDATION_ERROR",
            "Request validation failed.",
            details={"errors": _sanitize_validation_errors(list(exc.errors()))},
        )
        return JSONResponse(status_code=422, content=jsonable_encoder(payload))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        rid = getattr(request.state, "request_id", "")
        logger.error(json.dumps({"event": "unhandled_exception", "request_id": rid, "error": repr(exc)}))
        return JSONResponse(
            status_code=500,
            content=error_payload("INTERNAL_ERROR", "Internal server error."),
        )

    # ---- CORS ----
    origins = _cors_origins(config.settings.cors_origin)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    # ---- Routers ----
    api_prefix = "/api"
    app.include_router(health_router, prefix=api_prefix, tags=["health"])
    app.include_router(chat_router, prefix=api_prefix, tags=["chat"])

    return app


app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run(app, host=config.settings.host, port=config.settings.port)


if __name__ == "__main__":
    run()
