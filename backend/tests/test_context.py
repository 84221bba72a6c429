from guideline_qa.core.context import TRUNCATION_MARKER, build_context_snippet
from guideline_qa.core.limits import Limits


def test_empty_input_gives_empty_snippet():
    assert build_context_snippet([]) == ""


def test_lines_are_trimmed_and_blank_lines_dropped():
    assert build_context_snippet(["  a  ", "   ", "b"]) == "a\nb"


def test_at_most_twenty_lines():
    lines = [f"line {i}" for i in range(25)]
    snippet = build_context_snippet(lines)
    assert snippet.split("\n") == lines[:20]


def test_truncates_to_char_limit_with_marker():
    lines = ["가" * 300 for _ in range(20)]
    snippet = build_context_snippet(lines)
    assert snippet.endswith(TRUNCATION_MARKER)
    assert len(snippet) == 4000 + len(TRUNCATION_MARKER)
    assert snippet[:4000] == "\n".join(lines)[:4000]


def test_limits_are_threaded_explicitly():
    limits = Limits(max_context_lines=2, max_context_chars=5)
    assert build_context_snippet(["abc", "def", "ghi"], limits) == "abc\nd" + TRUNCATION_MARKER


def test_snippet_at_exact_limit_is_not_truncated():
    limits = Limits(max_context_chars=7)
    assert build_context_snippet(["abc", "def"], limits) == "abc\ndef"
