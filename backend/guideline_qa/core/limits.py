from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Limits:
    max_question_length: int = 500
    max_context_lines: int = 20
    max_context_chars: int = 4000


DEFAULT_LIMITS = Limits()
