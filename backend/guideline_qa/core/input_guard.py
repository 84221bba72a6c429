from __future__ import annotations

import re
from typing import Any, Sequence

from guideline_qa.core.limits import DEFAULT_LIMITS, Limits
from guideline_qa.core.rules import PatternRule, rule

MSG_NOT_STRING = "질문은 문자열이어야 합니다."
MSG_EMPTY = "빈 질문은 허용되지 않습니다."
MSG_TOO_LONG = "질문은 최대 {limit}자까지 허용됩니다."
MSG_BLOCKED = "허용되지 않는 패턴이 감지되었습니다."

BLOCKED_PATTERNS: tuple[PatternRule, ...] = (
    rule(r"system\s*prompt", "system prompt disclosure"),
    rule(r"ignore\s+previous\s+instructions", "instruction override"),
    rule(r"reset\s+instruction", "instruction override"),
    rule(r"/etc/", "path traversal"),
    rule(r"\.\.", "path traversal", flags=0),
    rule(r"<\s*script", "script tag"),
    rule(r"forget\s+all\s+previous\s+rules", "instruction override"),
    rule(r"unfiltered\s+mode", "jailbreak mode"),
    rule(r"sudo\s+", "privilege escalation"),
    # ASCII word boundaries so Hangul directly before the keyword still counts as a break.
    rule(r"\b(base64|hex)\b\s*(decode|decoding)", "encoded exfiltration", flags=re.IGNORECASE | re.ASCII),
    rule(r"prompt\s*injection", "prompt injection mention"),
    rule(
        r"\b(get|read|show)\b[^\n]+(password|secret|token|credential)",
        "credential retrieval",
        flags=re.IGNORECASE | re.ASCII,
    ),
    rule(r"(?:이전|모든)\s*(지시|규칙)\s*(무시|잊|삭제)", "instruction override (ko)"),
    rule(r"이전\s*규칙\s*따르지\s*마", "instruction override (ko)"),
    rule(r"이전\s*명령을\s*상쇄", "instruction override (ko)"),
    rule(r"ignore\s+the\s+rules", "instruction override"),
)


def matched_rule(text: str, rules: Sequence[PatternRule] = BLOCKED_PATTERNS) -> PatternRule | None:
    for r in rules:
        if r.search(text):
            return r
    return None


def validate_question(
    question: Any,
    *,
    limits: Limits = DEFAULT_LIMITS,
    rules: Sequence[PatternRule] = BLOCKED_PATTERNS,
) -> str | None:
    """
    Return an error message for a disallowed question, or None when it is accepted.
    The blocked-pattern message is generic on purpose and never names the rule.
    """
    if not isinstance(question, str):
        return MSG_NOT_STRING

    trimmed = question.strip()
    if not trimmed:
        return MSG_EMPTY

    if len(trimmed) > limits.max_question_length:
        return MSG_TOO_LONG.format(limit=limits.max_question_length)

    if matched_rule(trimmed, rules) is not None:
        return MSG_BLOCKED

    return None
