from __future__ import annotations

import pytest

from guideline_qa.core.errors import CorpusUnavailable
from guideline_qa.services.corpus import file_corpus_loader, load_guideline_lines, split_corpus


def test_split_corpus_drops_empty_lines():
    assert split_corpus("a\r\nb\n\nc\n") == ["a", "b", "c"]
    assert split_corpus("") == []


def test_whitespace_only_lines_are_kept():
    assert split_corpus("a\n  \nb") == ["a", "  ", "b"]


def test_load_missing_file_raises(tmp_path):
    with pytest.raises(CorpusUnavailable):
        load_guideline_lines(tmp_path / "missing.txt")


def test_loader_reads_fresh_each_call(tmp_path):
    guide = tmp_path / "guide.txt"
    guide.write_text("첫 줄\n", encoding="utf-8")
    load = file_corpus_loader(guide)
    assert load() == ["첫 줄"]
    guide.write_text("첫 줄\n둘째 줄\n", encoding="utf-8")
    assert load() == ["첫 줄", "둘째 줄"]
