from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from guideline_qa.core.context import build_context_snippet
from guideline_qa.core.errors import QuestionRejected
from guideline_qa.core.input_guard import validate_question
from guideline_qa.core.limits import DEFAULT_LIMITS, Limits
from guideline_qa.core.output_guard import sanitize_output
from guideline_qa.core.prompts import build_guideline_prompt
from guideline_qa.core.scoring import rank_lines
from guideline_qa.services.corpus import CorpusLoader
from guideline_qa.services.generation import TextGenerator

logger = logging.getLogger(__name__)

NO_MATCH_ANSWER = "관련 가이드라인을 찾지 못했습니다."


@dataclass
class Retrieval:
    ranked: list[str]
    context: str

    @property
    def references(self) -> list[str]:
        return self.context.split("\n") if self.context else []

    @property
    def fallback_answer(self) -> str:
        return self.context or NO_MATCH_ANSWER


@dataclass
class ChatAnswer:
    question: str
    answer: str
    references: list[str] = field(default_factory=list)
    used_provider: bool = False
    provider_failed: bool = False
    matched_lines: int = 0


def accept_question(question: object, limits: Limits = DEFAULT_LIMITS) -> str:
    """Validate and return the trimmed question, or raise QuestionRejected."""
    error = validate_question(question, limits=limits)
    if error is not None:
        raise QuestionRejected(error)
    return str(question).strip()


def retrieve(question: str, lines: Sequence[str], limits: Limits = DEFAULT_LIMITS) -> Retrieval:
    ranked = rank_lines(question, lines)
    return Retrieval(ranked=ranked, context=build_context_snippet(ranked, limits))


async def generate_answer(generator: TextGenerator, question: str, context: str) -> str:
    raw = await generator.generate(build_guideline_prompt(question, context))
    return sanitize_output(raw)


async def answer_question(
    question: object,
    load_corpus: CorpusLoader,
    generator: TextGenerator | None,
    limits: Limits = DEFAULT_LIMITS,
) -> ChatAnswer:
    """
    Validate, rank the corpus, bound the context and answer.

    The corpus is loaded only after the question is accepted. When a generator
    is configured its sanitized reply is the answer; any failure from it falls
    back to the local context snippet.
    """
    accepted = accept_question(question, limits)
    retrieval = retrieve(accepted, load_corpus(), limits)

    result = ChatAnswer(
        question=accepted,
        answer=retrieval.fallback_answer,
        references=retrieval.references,
        used_provider=generator is not None,
        matched_lines=len(retrieval.ranked),
    )
    if generator is None:
        return result

    try:
        answer = await generate_answer(generator, accepted, retrieval.context)
    except Exception:
        logger.warning("generation failed, using local fallback", exc_info=True)
        result.provider_failed = True
        return result

    if answer:
        result.answer = answer
    else:
        result.provider_failed = True
    return result
