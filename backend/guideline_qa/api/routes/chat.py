from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request

from guideline_qa.core import config
from guideline_qa.core.errors import CorpusUnavailable, QuestionRejected
from guideline_qa.core.limits import Limits
from guideline_qa.schemas.api_contract import ChatRequest, ChatResponse, ErrorResponse
from guideline_qa.services.answering import answer_question
from guideline_qa.services.corpus import CorpusLoader, get_corpus_loader
from guideline_qa.services.generation import TextGenerator, get_generator

router = APIRouter()
logger = logging.getLogger(__name__)
audit_logger = logging.getLogger("audit")

CORPUS_READ_FAILED = "서버에서 가이드라인을 읽는 데 실패했습니다."


def get_limits() -> Limits:
    return config.settings.limits()


def _emit_audit_event(request_id: str | None, question: Any, *, status: str, **fields: Any) -> None:
    event: dict[str, Any] = {
        "event": "chat_ask",
        "request_id": request_id,
        "question_len": len(question) if isinstance(question, str) else None,
        "status": status,
    }
    event.update(fields)
    audit_logger.info(json.dumps(event, ensure_ascii=False, sort_keys=True))


# ============================================================
# Route
# ============================================================

@router.post(
    "/chat",
    response_model=ChatResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def chat(
    payload: ChatRequest,
    request: Request,
    load_corpus: CorpusLoader = Depends(get_corpus_loader),
    generator: TextGenerator | None = Depends(get_generator),
    limits: Limits = Depends(get_limits),
) -> ChatResponse:
    req_id = getattr(request.state, "request_id", None)

    try:
        result = await answer_question(payload.question, load_corpus, generator, limits)
    except QuestionRejected as exc:
        _emit_audit_event(req_id, payload.question, status="rejected", error_code=exc.code)
        raise HTTPException(status_code=400, detail={"code": exc.code, "message": exc.message})
    except CorpusUnavailable as exc:
        logger.exception("guideline corpus unavailable", extra={"request_id": req_id})
        _emit_audit_event(req_id, payload.question, status="error", error_code=exc.code)
        raise HTTPException(status_code=500, detail={"code": exc.code, "message": CORPUS_READ_FAILED})

    _emit_audit_event(
        req_id,
        payload.question,
        status="ok",
        matched_lines=result.matched_lines,
        used_provider=result.used_provider,
        provider_failed=result.provider_failed,
    )
    return ChatResponse(
        question=result.question,
        answer=result.answer,
        references=result.references,
        used_provider=result.used_provider,
    )
