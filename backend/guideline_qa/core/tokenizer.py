from __future__ import annotations

import re

from guideline_qa.core.text_utils import normalize_for_search

MIN_TOKEN_LENGTH = 2

# Applied to the whole token, in order.
SPELLING_SUBSTITUTIONS: tuple[tuple[str, str], ...] = (
    ("돼", "되"),
    ("됐", "되었"),
)

FORMAL_ENDINGS: tuple[str, ...] = (
    "입니다",
    "입니까",
    "합니다",
    "합니까",
    "했나요",
    "했습니까",
)

PARTICLE_SUFFIXES: tuple[str, ...] = (
    "은", "는", "이", "가", "을", "를", "에", "에서", "으로", "로",
    "와", "과", "도", "만", "뿐", "부터", "까지", "에게", "께", "한테",
    "이나", "나", "라고", "이라고", "이라", "라서", "랑", "이랑", "하고", "하며",
    "이고", "거나", "지만", "라도", "라도요", "네요", "나요", "죠", "요", "다",
    "까",
)


def _suffix_pattern(suffixes: tuple[str, ...]) -> re.Pattern[str]:
    # Alternation anchored at the end: the earliest-starting suffix wins,
    # so "이라고" beats "라고" on "학생이라고".
    return re.compile("(?:" + "|".join(re.escape(s) for s in suffixes) + r")\Z")


_FORMAL_ENDING_RE = _suffix_pattern(FORMAL_ENDINGS)
_PARTICLE_RE = _suffix_pattern(PARTICLE_SUFFIXES)


def strip_suffix(token: str) -> str:
    if not token:
        return token

    result = token
    for old, new in SPELLING_SUBSTITUTIONS:
        result = result.replace(old, new)
    result = _FORMAL_ENDING_RE.sub("", result, count=1)
    result = _PARTICLE_RE.sub("", result, count=1)

    if len(result) >= MIN_TOKEN_LENGTH:
        return result
    return token


def tokenize(text: str) -> list[str]:
    """Normalized, suffix-stripped, deduplicated tokens in first-seen order."""
    tokens: dict[str, None] = {}
    for piece in normalize_for_search(text).split(" "):
        token = strip_suffix(piece)
        if len(token) >= MIN_TOKEN_LENGTH:
            tokens.setdefault(token, None)
    return list(tokens)
