#!/usr/bin/env python3
from __future__ import annotations

import argparse
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Mapping

BACKEND_DIR = Path(__file__).resolve().parents[1]
LIMIT_KEYS = ("MAX_QUESTION_LENGTH", "MAX_CONTEXT_LINES", "MAX_CONTEXT_CHARS")


@dataclass
class CheckResult:
    name: str
    ok: bool
    message: str
    warning: bool = False


def _truthy(value: str | None) -> bool:
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _redact(value: str | None, prefix: int = 4, suffix: int = 2) -> str:
    if not value:
        return "<empty>"
    if len(value) <= prefix + suffix:
        return value[:prefix] + "…"
    return value[:prefix] + "…" + value[-suffix:]


def format_report(results: Iterable[CheckResult]) -> str:
    lines: list[str] = []
    for res in results:
        status = "WARN" if res.warning else ("OK" if res.ok else "FAIL")
        lines.append(f"[{status}] {res.name}: {res.message}")
    return "\n".join(lines) if lines else "No checks executed."


def _guide_path(raw: str | None) -> Path:
    path = Path(raw or "data/guide.txt").expanduser()
    return path if path.is_absolute() else BACKEND_DIR / path


def validate_env(strict: bool = False, env: Mapping[str, str] | None = None) -> tuple[bool, list[CheckResult]]:
    env_map = dict(os.environ if env is None else env)
    checks: list[CheckResult] = []

    def add(name: str, ok: bool, message: str, *, warning: bool = False) -> None:
        checks.append(CheckResult(name=name, ok=ok, message=message, warning=warning))

    guide = _guide_path(env_map.get("GUIDE_PATH"))
    if guide.is_file():
        add("guide_path", True, f"found {guide.name}")
    else:
        add("guide_path", False, f"guideline file not found: {guide}")

    app_env = (env_map.get("APP_ENV") or "dev").strip().lower()
    offline = _truthy(env_map.get("OPENAI_OFFLINE"))
    openai_key = env_map.get("OPENAI_API_KEY")
    if not openai_key:
        add(
            "openai_api_key",
            True,
            "OPENAI_API_KEY not set; answers use the local fallback",
            warning=not offline,
        )
    else:
        valid = openai_key.startswith(("sk-", "sk-proj-"))
        add(
            "openai_api_key",
            valid,
            f"format={'valid' if valid else 'invalid'} ({_redact(openai_key)})",
        )

    if app_env == "prod" and offline:
        add("prod_offline", False, "OPENAI_OFFLINE must not be enabled when APP_ENV=prod")

    for key in LIMIT_KEYS:
        raw = env_map.get(key)
        if raw is None or raw == "":
            continue
        try:
            ok = int(raw) > 0
        except ValueError:
            ok = False
        add(key.lower(), ok, f"{key}={raw}" if ok else f"{key} must be a positive integer")

    failed = [c for c in checks if not c.ok]
    warned = [c for c in checks if c.warning]
    ok = not failed and not (strict and warned)
    return ok, checks


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Validate guideline QA environment variables.")
    parser.add_argument("--strict", action="store_true", help="treat warnings as failures")
    args = parser.parse_args(argv)

    ok, checks = validate_env(strict=args.strict)
    print(format_report(checks))
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
