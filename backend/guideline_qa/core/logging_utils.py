from __future__ import annotations

import logging
import os
import re

LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

_NOISY_LOGGERS = ("openai", "openai._base_client", "httpx", "httpcore")

_REPLACEMENTS = [
    (re.compile(r"sk-proj-[A-Za-z0-9_-]{20,}"), "sk-proj-REDACTED"),
    (re.compile(r"sk-(?!proj-REDACTED)[A-Za-z0-9-]{10,}"), "sk-REDACTED"),
    (re.compile(r"AIza[0-9A-Za-z_-]{30,}"), "AIza-REDACTED"),
    (re.compile(r"Bearer\s+[A-Za-z0-9._-]+"), "Bearer REDACTED"),
]

_PATCHED = False


def redact_secrets(text: str) -> str:
    sanitized = text
    for pattern, repl in _REPLACEMENTS:
        sanitized = pattern.sub(repl, sanitized)
    return sanitized


def install_log_redaction_filter() -> None:
    """Patch LogRecord.getMessage so every handler sees redacted text."""
    global _PATCHED
    if _PATCHED or os.getenv("DISABLE_LOG_REDACTION", "0") == "1":
        return
    original_get_message = logging.LogRecord.getMessage

    def redacted_get_message(self: logging.LogRecord) -> str:  # type: ignore[override]
        return redact_secrets(original_get_message(self))

    logging.LogRecord.getMessage = redacted_get_message  # type: ignore[assignment]
    _PATCHED = True


def configure_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATEFMT)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    install_log_redaction_filter()
