"""
Unit tests for brace and escape helpers.

Tests mathpad.utils.text_processing.
"""

import pytest

from mathpad.utils.text_processing import (
    brace_depth,
    count_unescaped,
    extract_balanced_delimiters,
    find_matching_close,
    find_matching_open,
    is_balanced,
    is_escaped,
)


class TestIsEscaped:
    """Tests for is_escaped function."""

    def test_single_backslash_escapes(self):
        assert is_escaped(r"a\$", 2)

    def test_double_backslash_does_not_escape(self):
        """\\\\ is a line break; the character after it is live."""
        assert not is_escaped(r"a\\$", 3)

    def test_triple_backslash_escapes(self):
        assert is_escaped(r"\\\{", 3)

    def test_start_of_text(self):
        assert not is_escaped("$", 0)


class TestCountUnescaped:
    """Tests for count_unescaped function."""

    def test_skips_escaped_dollar(self):
        assert count_unescaped(r"$x$ costs \$5", "$") == 2

    def test_respects_end(self):
        assert count_unescaped("$x$y$", "$", end=3) == 2

    def test_none_present(self):
        assert count_unescaped("plain text", "$") == 0


class TestExtractBalancedDelimiters:
    """Tests for extract_balanced_delimiters function."""

    def test_nested_content(self):
        text = "foo {bar {nested} baz} qux"
        content, end = extract_balanced_delimiters(text, 5)

        assert content == "bar {nested} baz"
        assert text[end:] == " qux"

    def test_escaped_close_is_skipped(self):
        content, end = extract_balanced_delimiters(r"{a\}b}", 1)

        assert content == r"a\}b"
        assert end == 6

    def test_unmatched_raises(self):
        with pytest.raises(ValueError, match="Unmatched"):
            extract_balanced_delimiters("{abc", 1)


class TestMatchingBraces:
    """Tests for find_matching_close and find_matching_open."""

    def test_close_of_outer_group(self):
        assert find_matching_close("x{a{b}}y", 1) == 6

    def test_close_of_inner_group(self):
        assert find_matching_close("x{a{b}}y", 3) == 5

    def test_close_unmatched(self):
        assert find_matching_close("x{a", 1) is None

    def test_open_of_outer_group(self):
        assert find_matching_open("x{a{b}}y", 6) == 1

    def test_open_skips_escaped_brace(self):
        assert find_matching_open(r"{\{}", 3) == 0

    def test_open_unmatched(self):
        assert find_matching_open("a}", 1) is None


class TestBalance:
    """Tests for brace_depth and is_balanced."""

    def test_depth_of_open_fraction(self):
        assert brace_depth(r"\frac{a}{") == 1

    def test_nested_groups_balanced(self):
        assert is_balanced(r"\sqrt{x^{2}}")

    def test_escaped_brace_ignored(self):
        assert is_balanced(r"\{")

    def test_close_before_open(self):
        assert not is_balanced("}{")

    def test_escaped_close_leaves_group_open(self):
        assert not is_balanced(r"{\}")
