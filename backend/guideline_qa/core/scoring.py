from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from guideline_qa.core.text_utils import light_normalize, strip_whitespace
from guideline_qa.core.tokenizer import MIN_TOKEN_LENGTH, tokenize

DIRECT_MATCH_SCORE = 3
SHORT_QUESTION_TOKENS = 4


@dataclass(frozen=True)
class ScoredLine:
    line: str
    score: int


def is_direct_match(question: str, line: str) -> bool:
    q_light = light_normalize(question.strip())
    line_light = light_normalize(line)
    if q_light in line_light:
        return True
    q_collapsed = strip_whitespace(q_light)
    return bool(q_collapsed) and q_collapsed in strip_whitespace(line_light)


def _tokens_overlap(question_token: str, line_token: str) -> bool:
    if question_token == line_token:
        return True
    if len(question_token) >= MIN_TOKEN_LENGTH and len(line_token) >= MIN_TOKEN_LENGTH:
        return question_token in line_token or line_token in question_token
    return False


def overlap_score(question_tokens: Sequence[str], line_tokens: Sequence[str]) -> int:
    if not question_tokens or not line_tokens:
        return 0
    shared = sum(
        1
        for qt in question_tokens
        if any(_tokens_overlap(qt, lt) for lt in line_tokens)
    )
    min_required = 1 if len(question_tokens) <= SHORT_QUESTION_TOKENS else 2
    return shared if shared >= min_required else 0


def score_line(question: str, line: str, *, question_tokens: Sequence[str] | None = None) -> int:
    """
    Relevance of one corpus line to the question.

    A direct (substring) match scores DIRECT_MATCH_SCORE. Otherwise the score is
    the number of distinct question tokens that match some line token, or 0 when
    that count is below the threshold for the question's length.
    """
    if is_direct_match(question, line):
        return DIRECT_MATCH_SCORE
    if question_tokens is None:
        question_tokens = tokenize(question)
    if not question_tokens:
        return 0
    return overlap_score(question_tokens, tokenize(line))


def score_lines(question: str, lines: Iterable[str]) -> list[ScoredLine]:
    question_tokens = tokenize(question)
    return [
        ScoredLine(line=line, score=score_line(question, line, question_tokens=question_tokens))
        for line in lines
    ]


def rank_scored(question: str, lines: Iterable[str]) -> list[ScoredLine]:
    matched = [s for s in score_lines(question, lines) if s.score > 0]
    # sorted() is stable: equal scores keep corpus order
    return sorted(matched, key=lambda s: s.score, reverse=True)


def rank_lines(question: str, lines: Iterable[str]) -> list[str]:
    return [s.line for s in rank_scored(question, lines)]
