from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter

from guideline_qa.core import config
from guideline_qa.core.llm_status import is_llm_enabled, is_openai_offline, openai_key_present
from guideline_qa.schemas.api_contract import HealthResponse

APP_NAME = "Guideline QA"
APP_VERSION = "0.1.0"

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    corpus_available = config.settings.resolved_guide_path().is_file()
    return HealthResponse(
        app=APP_NAME,
        version=APP_VERSION,
        status="ok" if corpus_available else "degraded",
        time_utc=datetime.now(timezone.utc).isoformat(),
        app_env=config.settings.app_env,
        llm_enabled=is_llm_enabled(),
        openai_offline=is_openai_offline(),
        openai_key_present=openai_key_present(),
        corpus_available=corpus_available,
    )
