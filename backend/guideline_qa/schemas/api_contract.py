from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class HealthResponse(BaseModel):
    app: str
    version: str
    status: Literal["ok", "degraded"] | str = Field(..., description="Overall health status")
    time_utc: str
    app_env: str
    llm_enabled: bool
    openai_offline: bool
    openai_key_present: bool
    corpus_available: bool


class ChatRequest(BaseModel):
    # Left untyped so a non-string question reaches the input guard instead of a 422.
    question: Any = Field(default=None)


class ChatResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    question: str
    answer: str
    references: list[str] = Field(default_factory=list)
    used_provider: bool = Field(False, alias="usedProvider")


class ErrorDetail(BaseModel):
    code: str
    message: str
    details: dict[str, Any] | None = None


class ErrorResponse(BaseModel):
    error: ErrorDetail
