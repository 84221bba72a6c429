from __future__ import annotations

import os
import time
from collections import deque
from typing import Deque, Dict

from fastapi import Request
from fastapi.responses import JSONResponse

from guideline_qa.core.errors import error_payload

RATE_LIMITED_PATHS = {"/api/chat"}
RATE_LIMIT_WINDOW = 60.0  # seconds

_REQUEST_BUCKETS: Dict[str, Deque[float]] = {}


def rate_limit_enabled() -> bool:
    return os.getenv("RATE_LIMIT_ENABLED", "0") == "1"


def rate_limit_rpm() -> int:
    try:
        return max(1, int(os.getenv("RATE_LIMIT_RPM", "60") or "60"))
    except ValueError:
        return 60


def trust_forwarded_for() -> bool:
    """Only honour x-forwarded-for behind a proxy that overwrites it."""
    return os.getenv("RATE_LIMIT_TRUST_FORWARDED", "0") == "1"


def _client_key(request: Request) -> str:
    if trust_forwarded_for():
        fwd = request.headers.get("x-forwarded-for")
        if fwd and fwd.split(",")[0].strip():
            return fwd.split(",")[0].strip()
    if request.client:
        return request.client.host or "unknown"
    return "unknown"


def _prune(now: float) -> None:
    for key in list(_REQUEST_BUCKETS):
        bucket = _REQUEST_BUCKETS[key]
        while bucket and now - bucket[0] > RATE_LIMIT_WINDOW:
            bucket.popleft()
        if not bucket:
            del _REQUEST_BUCKETS[key]


def enforce_rate_limit(request: Request) -> JSONResponse | None:
    if not rate_limit_enabled():
        return None
    if request.method != "POST" or request.url.path not in RATE_LIMITED_PATHS:
        return None
    limit = rate_limit_rpm()
    now = time.monotonic()
    _prune(now)
    bucket = _REQUEST_BUCKETS.setdefault(_client_key(request), deque())
    if len(bucket) >= limit:
        return JSONResponse(
            status_code=429,
            content=error_payload("RATE_LIMITED", "Rate limit exceeded"),
        )
    bucket.append(now)
    return None
