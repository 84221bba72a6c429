from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Callable

from guideline_qa.core import config
from guideline_qa.core.errors import CorpusUnavailable

logger = logging.getLogger(__name__)

_LINE_SPLIT_RE = re.compile(r"\r?\n")

CorpusLoader = Callable[[], list[str]]


def split_corpus(text: str) -> list[str]:
    """Split on line breaks and drop empty lines; order is preserved."""
    return [line for line in _LINE_SPLIT_RE.split(text) if line]


def load_guideline_lines(path: Path) -> list[str]:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise CorpusUnavailable(f"failed to read guideline file: {path.name}") from exc
    return split_corpus(text)


def file_corpus_loader(path: Path) -> CorpusLoader:
    def _load() -> list[str]:
        return load_guideline_lines(path)

    return _load


def get_corpus_loader() -> CorpusLoader:
    """FastAPI dependency: the guideline file is re-read on every request."""
    return file_corpus_loader(config.settings.resolved_guide_path())
