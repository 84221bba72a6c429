from __future__ import annotations

import json
import logging
import os
import re
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from guideline_qa.core.rate_limit import enforce_rate_limit

REQUEST_ID_RE = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")
DEFAULT_MAX_REQUEST_BYTES = 65_536

trace_logger = logging.getLogger("guideline_qa.trace")

_TOO_LARGE_BODY = json.dumps(
    {"error": {"code": "PAYLOAD_TOO_LARGE", "message": "Request body too large"}}
).encode("utf-8")


def max_request_bytes() -> int:
    try:
        return int(os.getenv("MAX_REQUEST_BYTES", DEFAULT_MAX_REQUEST_BYTES))
    except ValueError:
        return DEFAULT_MAX_REQUEST_BYTES


def _header(scope: Scope, name: bytes) -> str | None:
    for key, value in scope.get("headers") or []:
        if key.lower() == name:
            return value.decode("latin-1")
    return None


class RequestIdMiddleware:
    """Accept a well-formed inbound x-request-id or mint one; echo it on the response."""

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        inbound = _header(scope, b"x-request-id")
        request_id = inbound if inbound and REQUEST_ID_RE.match(inbound) else str(uuid.uuid4())
        scope.setdefault("state", {})["request_id"] = request_id
        rid_bytes = request_id.encode("ascii", "ignore")

        async def send_wrapper(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = [
                    (k, v) for (k, v) in message.get("headers", []) if k.lower() != b"x-request-id"
                ]
                headers.append((b"x-request-id", rid_bytes))
                message["headers"] = headers
            await send(message)

        await self.app(scope, receive, send_wrapper)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, headers: dict[str, str] | None = None):
        super().__init__(app)
        self.headers = headers or {
            "X-Content-Type-Options": "nosniff",
            "Referrer-Policy": "no-referrer",
            "X-Frame-Options": "DENY",
            "Cross-Origin-Resource-Policy": "same-site",
        }

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        for key, value in self.headers.items():
            response.headers.setdefault(key, value)
        return response


class BodySizeLimitMiddleware:
    """Reject request bodies larger than MAX_REQUEST_BYTES with a 413."""

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope.get("type") != "http" or scope.get("method", "").upper() not in {"POST", "PUT", "PATCH"}:
            await self.app(scope, receive, send)
            return

        limit = max_request_bytes()
        if limit <= 0:
            await self.app(scope, receive, send)
            return

        declared = _header(scope, b"content-length")
        if declared and declared.isdigit() and int(declared) > limit:
            await self._reject(send)
            return

        body = bytearray()
        more_body = True
        while more_body:
            message = await receive()
            if message["type"] != "http.request":
                continue
            body.extend(message.get("body", b"") or b"")
            more_body = bool(message.get("more_body", False))
            if len(body) > limit:
                await self._reject(send)
                return

        replayed = False

        async def replay() -> Message:
            nonlocal replayed
            if replayed:
                return {"type": "http.request", "body": b"", "more_body": False}
            replayed = True
            return {"type": "http.request", "body": bytes(body), "more_body": False}

        await self.app(scope, replay, send)

    async def _reject(self, send: Send) -> None:
        await send(
            {
                "type": "http.response.start",
                "status": 413,
                "headers": [(b"content-type", b"application/json")],
            }
        )
        await send({"type": "http.response.body", "body": _TOO_LARGE_BODY, "more_body": False})


class RateLimitMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = enforce_rate_limit(request)
        if response is not None:
            return response
        return await call_next(request)


class RequestTraceMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = getattr(request.state, "request_id", None) or str(uuid.uuid4())
        t0 = time.time()
        try:
            return await call_next(request)
        finally:
            trace_logger.info(
                json.dumps(
                    {
                        "event": "request_done",
                        "request_id": request_id,
                        "method": request.method,
                        "path": request.url.path,
                        "ms_total": int((time.time() - t0) * 1000),
                    },
                    ensure_ascii=False,
                )
            )
