"""Unit tests for code-point truncation."""

from __future__ import annotations

import pytest

from lexis.pipeline.truncate import truncate_text


def test_short_text_is_unchanged():
    text = "Hello, world"
    assert truncate_text(text, 1000) is text


def test_text_at_limit_is_unchanged():
    assert truncate_text("abcde", 5) == "abcde"


def test_long_text_keeps_exact_prefix():
    assert truncate_text("abcdefghij", 4) == "abcd"


@pytest.mark.parametrize(
    "text",
    [
        "héllo wörld ünïcödé",
        "Привет, это тест программной инженерии",
        "مرحبا، هذا اختبار هندسة البرمجيات.",
        "これはソフトウェアエンジニアリングのテストです。",
        "😀🎉🚀👍🔥💡",
    ],
)
def test_multibyte_text_is_cut_between_code_points(text: str):
    """The prefix re-encodes cleanly and matches the input's first code points."""
    limit = 4
    result = truncate_text(text, limit)

    assert len(result) == limit
    assert result == "".join(list(text)[:limit])
    encoded = result.encode("utf-8")
    assert encoded.decode("utf-8") == result
    assert text.encode("utf-8").startswith(encoded)


def test_non_positive_limit_is_rejected():
    with pytest.raises(ValueError):
        truncate_text("abc", 0)
