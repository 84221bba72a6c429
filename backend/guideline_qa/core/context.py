from __future__ import annotations

from typing import Sequence

from guideline_qa.core.limits import DEFAULT_LIMITS, Limits

TRUNCATION_MARKER = "\n..."


def build_context_snippet(ranked_lines: Sequence[str], limits: Limits = DEFAULT_LIMITS) -> str:
    if not ranked_lines:
        return ""
    lines = [line.strip() for line in ranked_lines[: limits.max_context_lines]]
    snippet = "\n".join(line for line in lines if line)
    if len(snippet) > limits.max_context_chars:
        return snippet[: limits.max_context_chars] + TRUNCATION_MARKER
    return snippet
