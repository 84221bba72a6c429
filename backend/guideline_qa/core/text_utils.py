from __future__ import annotations

import re
import unicodedata

_QUOTE_BRACKET_RE = re.compile(r"[\"'`“”‘’\[\]{}()<>]")
_WHITESPACE_RE = re.compile(r"\s+")


def _keep_char(ch: str) -> bool:
    # letters, digits and whitespace survive; everything else becomes a space
    if ch.isspace():
        return True
    return unicodedata.category(ch)[0] in ("L", "N")


def normalize_for_search(text: str) -> str:
    """
    Strong normalization used for token overlap:
    lowercase, drop quotes/brackets and every non letter/digit character,
    collapse whitespace and trim.
    """
    lowered = _QUOTE_BRACKET_RE.sub(" ", (text or "").lower())
    kept = "".join(ch if _keep_char(ch) else " " for ch in lowered)
    return _WHITESPACE_RE.sub(" ", kept).strip()


def light_normalize(text: str) -> str:
    """Lowercase + collapse whitespace. Punctuation is retained."""
    return _WHITESPACE_RE.sub(" ", (text or "").lower())


def strip_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub("", text or "")
