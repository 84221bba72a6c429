from __future__ import annotations

import re
from dataclasses import dataclass
from os import PathLike
from pathlib import Path
from typing import Iterable, Union


@dataclass
class Violation:
    pattern_name: str
    snippet: str
    line_no: int


FORBIDDEN_REGEXES: list[tuple[str, re.Pattern[str]]] = [
    ("bearer_header", re.compile(r"Authorization:\s*Bearer\s+(?!REDACTED)\S+", re.IGNORECASE)),
    ("openai_key", re.compile(r"\bsk-(?:proj-)?(?!REDACTED)[A-Za-z0-9_-]{20,}")),
    ("google_api_key", re.compile(r"\bAIza[0-9A-Za-z_-]{30,}")),
    ("private_key_block", re.compile(r"BEGIN\s+(?:RSA\s+)?PRIVATE\s+KEY")),
    ("key_assignment", re.compile(r"(OPENAI_API_KEY|GEMINI_API_KEY)\s*[:=]\s*(?!REDACTED)\S+", re.IGNORECASE)),
]

REDACT_PREFIX = 8
REDACT_SUFFIX = 4


def _redact(value: str) -> str:
    if len(value) <= REDACT_PREFIX + REDACT_SUFFIX:
        return value[:4] + "…"
    return value[:REDACT_PREFIX] + "…" + value[-REDACT_SUFFIX:]


def scan_lines(lines: Iterable[str]) -> list[Violation]:
    violations: list[Violation] = []
    for idx, line in enumerate(lines, start=1):
        for name, pattern in FORBIDDEN_REGEXES:
            for match in pattern.finditer(line):
                violations.append(Violation(name, _redact(match.group(0)), idx))
    return violations


def scan_text(text: str) -> list[Violation]:
    return scan_lines(text.splitlines())


PathInput = Union[str, PathLike[str], Path]


def scan_file(path: PathInput) -> list[Violation]:
    file_path = Path(path)
    content = file_path.read_text(errors="ignore") if file_path.exists() else ""
    return scan_text(content)


def format_report(violations: list[Violation]) -> str:
    if not violations:
        return ""
    lines = ["Credential-like strings found in test logs:"]
    for v in violations:
        lines.append(f"- pattern={v.pattern_name} line={v.line_no} snippet={v.snippet}")
    return "\n".join(lines)
