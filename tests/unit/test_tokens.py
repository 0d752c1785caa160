"""
Unit tests for the token boundary resolver.
"""

import pytest

from mathpad.contexts.editing.buffer import Mode
from mathpad.contexts.editing.tokens import (
    AtomicSpan,
    Direction,
    SpanKind,
    command_end,
    command_start,
    resolve_span,
)

LEFT, RIGHT = Direction.LEFT, Direction.RIGHT

FRACTION = r"$\frac{a}{b}$"


@pytest.mark.unit
class TestCommandLocation:
    """Tests for command_start and command_end."""

    def test_named_command_start(self):
        assert command_start(r"x\alpha", 7) == (1, True)

    def test_control_symbol_start(self):
        assert command_start(r"a\\", 3) == (1, False)

    def test_letters_without_backslash(self):
        assert command_start("xyz", 3) is None

    def test_escaped_backslash_is_not_a_command(self):
        """In \\\\alpha the second backslash is consumed by the line break."""
        assert command_start(r"\\alpha", 7) is None

    def test_named_command_end(self):
        assert command_end(r"\frac{a}{b}", 0) == (5, True)

    def test_control_symbol_end(self):
        assert command_end(r"\{x", 0) == (2, False)

    def test_lone_trailing_backslash(self):
        assert command_end("x\\", 1) is None


@pytest.mark.unit
class TestCommandSpans:
    """A command hops together with its trailing space or opening brace."""

    def test_right_into_first_argument(self):
        assert resolve_span(FRACTION, 1, RIGHT, Mode.MATH) == AtomicSpan(1, 7, SpanKind.COMMAND)

    def test_left_out_of_first_argument(self):
        assert resolve_span(FRACTION, 7, LEFT, Mode.MATH) == AtomicSpan(1, 7, SpanKind.COMMAND)

    def test_symbol_with_trailing_space(self):
        text = r"$\alpha x$"
        assert resolve_span(text, 1, RIGHT, Mode.MATH) == AtomicSpan(1, 8, SpanKind.COMMAND)
        assert resolve_span(text, 8, LEFT, Mode.MATH) == AtomicSpan(1, 8, SpanKind.COMMAND)

    def test_control_symbol_is_atomic(self):
        text = r"$a\\b$"
        assert resolve_span(text, 2, RIGHT, Mode.MATH) == AtomicSpan(2, 4, SpanKind.COMMAND)
        assert resolve_span(text, 4, LEFT, Mode.MATH) == AtomicSpan(2, 4, SpanKind.COMMAND)


@pytest.mark.unit
class TestBoundarySpans:
    """Group-boundary patterns are crossed in one step."""

    def test_between_arguments(self):
        assert resolve_span(FRACTION, 8, RIGHT, Mode.MATH) == AtomicSpan(8, 10, SpanKind.BOUNDARY)
        assert resolve_span(FRACTION, 10, LEFT, Mode.MATH) == AtomicSpan(8, 10, SpanKind.BOUNDARY)

    def test_script_opener(self):
        assert resolve_span("$x^{2}$", 2, RIGHT, Mode.MATH) == AtomicSpan(2, 4, SpanKind.SCRIPT)

    def test_longest_pattern_wins(self):
        text = r"$\int_{a}^{b}$"
        assert resolve_span(text, 11, LEFT, Mode.MATH) == AtomicSpan(8, 11, SpanKind.SCRIPT)

    def test_closing_brace_alone_is_literal(self):
        assert resolve_span("$x^{2}$", 5, RIGHT, Mode.MATH) == AtomicSpan(5, 6, SpanKind.LITERAL)


@pytest.mark.unit
class TestDelimiterAndLiteralSpans:

    def test_dollar_from_text_mode(self):
        assert resolve_span("a$x$", 1, RIGHT, Mode.TEXT) == AtomicSpan(1, 2, SpanKind.DELIMITER)

    def test_dollar_from_math_mode(self):
        assert resolve_span("a$x$", 2, LEFT, Mode.MATH) == AtomicSpan(1, 2, SpanKind.DELIMITER)

    def test_escaped_dollar_is_literal(self):
        assert resolve_span(r"\$", 2, LEFT, Mode.TEXT) == AtomicSpan(1, 2, SpanKind.LITERAL)

    def test_text_mode_ignores_commands(self):
        assert resolve_span(r"\alpha", 0, RIGHT, Mode.TEXT) == AtomicSpan(0, 1, SpanKind.LITERAL)

    @pytest.mark.parametrize("cursor,direction", [(0, LEFT), (3, RIGHT)])
    def test_buffer_boundary(self, cursor, direction):
        assert resolve_span("abc", cursor, direction, Mode.TEXT) is None
