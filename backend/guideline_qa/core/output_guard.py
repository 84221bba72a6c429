from __future__ import annotations

from typing import Sequence

from guideline_qa.core.rules import PatternRule, rule

REDACTION_MARKER = "[검열됨]"

REDACTION_RULES: tuple[PatternRule, ...] = (
    rule(r"system\s*prompt", "system prompt mention"),
    rule(r"internal\s*(instruction|guideline)", "internal instruction mention"),
    rule(r"api\s*(key|token)", "api key mention"),
    rule(r"password", "password mention"),
    rule(r"credential", "credential mention"),
    rule(r"secret", "secret mention"),
    rule(r"ignore\s+all\s+previous\s+instructions", "override confirmation"),
    rule(r"이전\s*지시를\s*무시", "override confirmation (ko)"),
)


def sanitize_output(
    text: str | None,
    rules: Sequence[PatternRule] = REDACTION_RULES,
    marker: str = REDACTION_MARKER,
) -> str:
    if not text:
        return ""
    sanitized = text.strip()
    for r in rules:
        sanitized = r.pattern.sub(marker, sanitized)
    return sanitized
