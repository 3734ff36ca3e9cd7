from __future__ import annotations

import logging
import unicodedata

import pytest

from compar.comparison import (
    ClassificationResult,
    build_index,
    classify,
    classify_lines,
    comparison_key,
    index_lines,
    split_lines,
)

COMPOSED = "Caf\u00e9123"
DECOMPOSED = "Cafe\u0301123"


def test_split_lines_recognizes_lf_crlf_and_lone_cr() -> None:
    assert split_lines("a\nb\r\nc\rd") == ["a", "b", "c", "d"]


def test_split_lines_trailing_break_does_not_add_line() -> None:
    assert split_lines("") == []
    assert split_lines("a\n") == ["a"]
    assert split_lines("a\r\n") == ["a"]
    assert split_lines("\n") == [""]
    assert split_lines("a\n\nb\n\n") == ["a", "", "b", ""]


def test_comparison_key_is_deterministic() -> None:
    line = "  Straße \t"

    assert comparison_key(line, 3) == comparison_key(line, 3)
    assert comparison_key(line) == "Straße"


def test_key_trims_then_normalizes_then_truncates() -> None:
    assert unicodedata.normalize("NFC", DECOMPOSED) == COMPOSED

    composed = comparison_key("  " + COMPOSED, 4)
    decomposed = comparison_key("  " + DECOMPOSED, 4)

    assert composed == "Caf\u00e9"
    assert decomposed == "Caf\u00e9"
    # truncating the raw decomposed string first would drop the accent
    assert DECOMPOSED.strip()[:4] == "Cafe"


def test_truncation_counts_code_points_not_bytes() -> None:
    assert comparison_key("\u00e9\u00e9\u00e9\u00e9", 2) == "\u00e9\u00e9"
    assert comparison_key("\U0001f600\U0001f601x", 2) == "\U0001f600\U0001f601"


def test_truncation_may_split_a_grapheme_cluster() -> None:
    # flag emoji is two regional indicators with no composed form
    assert comparison_key("\U0001f1e9\U0001f1ea", 1) == "\U0001f1e9"


def test_set_collapse() -> None:
    index = build_index("x\nx\ny\n")

    assert index == frozenset({"x", "y"})
    assert len(index) == 2
    assert classify("x", index).found == ["x"]


def test_index_skips_blank_keys() -> None:
    index = index_lines(["", "   ", "\t", "a"])

    assert index == frozenset({"a"})


def test_order_preservation_and_original_text() -> None:
    index = build_index("a\nc\n")

    result = classify("  a\n b \nc\t\n", index)

    assert result.missing == [" b "]
    assert result.found == ["  a", "c\t"]


def test_blank_needles_are_found_regardless_of_haystack() -> None:
    result = classify("\n   \n\t\n", frozenset())

    assert result.found == ["", "   ", "\t"]
    assert result.missing == []


def test_end_to_end_example() -> None:
    index = build_index("foo\nbaz\n")

    result = classify("foo\nbar\n\n", index)

    assert result.missing == ["bar"]
    assert result.found == ["foo", ""]


def test_length_limited_match() -> None:
    index = build_index("hello-999", length_limit=5)

    result = classify("hello-123", index, length_limit=5)

    assert result.found == ["hello-123"]
    assert result.missing == []


def test_nfc_equivalent_lines_match() -> None:
    index = build_index(DECOMPOSED + "\n")

    assert classify(COMPOSED, index).found == [COMPOSED]


def test_interior_whitespace_is_significant() -> None:
    index = build_index("a b\n")

    assert classify("a  b", index).missing == ["a  b"]


def test_classify_accepts_any_iterable() -> None:
    index = frozenset({"a"})

    result = classify_lines(iter(["a", "b"]), index)

    assert result.found == ["a"]
    assert result.missing == ["b"]
    assert len(result) == 2


def test_select_returns_requested_partition() -> None:
    result = ClassificationResult(found=["f"], missing=["m"])

    assert result.select(found=True) == ["f"]
    assert result.select(found=False) == ["m"]


def test_debug_trace_does_not_change_result(caplog: pytest.LogCaptureFixture) -> None:
    index = build_index("foo\n")
    quiet = classify("foo\nbar\n", index)

    with caplog.at_level(logging.DEBUG, logger="compar.comparison"):
        traced = classify("foo\nbar\n", index)

    assert traced == quiet
    messages = [record.getMessage() for record in caplog.records]
    assert messages == [
        "line 0: 'foo'",
        "hex: 66 6f 6f",
        "found",
        "line 1: 'bar'",
        "hex: 62 61 72",
        "not found",
    ]
