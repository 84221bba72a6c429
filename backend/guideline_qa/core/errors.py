from __future__ import annotations

from typing import Any


class GuidelineError(Exception):
    """Base class for failures raised by the guideline chat service."""

    code = "INTERNAL_ERROR"


class QuestionRejected(GuidelineError):
    code = "INVALID_QUESTION"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class CorpusUnavailable(GuidelineError):
    code = "CORPUS_UNAVAILABLE"


class ProviderFailure(GuidelineError):
    code = "PROVIDER_FAILURE"


def error_payload(code: str, message: str, details: dict[str, Any] | None = None) -> dict[str, Any]:
    payload: dict[str, Any] = {"error": {"code": code, "message": message}}
    if details is not None:
        payload["error"]["details"] = details
    return payload
