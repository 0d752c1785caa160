"""
Unit tests for the mode transition handler.
"""

import pytest

from mathpad.contexts.editing.buffer import EditBuffer
from mathpad.contexts.editing.config import EditorConfig
from mathpad.contexts.editing.keys import ARROW_LEFT, BACKSPACE, ENTER
from mathpad.contexts.editing.modes import (
    TRIGGER,
    Transition,
    handle_mode_key,
    script_language,
)

CONFIG = EditorConfig(
    alphabet=frozenset("abcxyz0123456789+- "),
    scripts={"CYRILLIC": "bulgarian", "GREEK": "greek"},
)


def _apply(marked, key, **kwargs):
    buffer = EditBuffer.from_marked(marked)
    transition = handle_mode_key(buffer, key, CONFIG, **kwargs)
    return transition, buffer


@pytest.mark.unit
class TestMathSpans:

    def test_dollar_opens_math_span(self):
        transition, buffer = _apply("ab|", "$")

        assert transition is Transition.MATH_SPAN
        assert buffer.text == "ab$$"
        assert buffer.cursor == 3

    def test_dollar_rejected_in_math(self):
        transition, buffer = _apply(r"$x\vert $", "$")

        assert transition is Transition.REJECTED
        assert buffer.text == "$x$"


@pytest.mark.unit
class TestTrigger:

    def test_backslash_inserts_trigger(self):
        transition, buffer = _apply(r"$\vert $", "\\")

        assert transition is Transition.TRIGGER
        assert buffer.text == "$" + TRIGGER + "$"
        assert buffer.cursor == 1 + len(TRIGGER)

    def test_backslash_rejected_in_text(self):
        transition, buffer = _apply("a|", "\\")

        assert transition is Transition.REJECTED
        assert buffer.text == "a"


@pytest.mark.unit
class TestScripts:

    @pytest.mark.parametrize("key,expected", [("^", "$x^{}$"), ("_", "$x_{}$")])
    def test_script_opens_group(self, key, expected):
        transition, buffer = _apply(r"$x\vert $", key)

        assert transition is Transition.SCRIPT
        assert buffer.text == expected
        assert buffer.cursor == 4

    def test_script_rejected_in_text(self):
        transition, buffer = _apply("x|", "^")

        assert transition is Transition.REJECTED
        assert buffer.text == "x"


@pytest.mark.unit
class TestBreaks:

    def test_enter_in_text_starts_paragraph(self):
        transition, buffer = _apply("a|", ENTER)

        assert transition is Transition.BREAK
        assert buffer.text == "a\n\n"

    def test_enter_in_math_breaks_line(self):
        _, buffer = _apply(r"$a\vert $", ENTER)

        assert buffer.text == r"$a\\$"
        assert buffer.cursor == 4


@pytest.mark.unit
class TestCharacters:

    def test_alphabet_character_inserted(self):
        transition, buffer = _apply("a|", "b")

        assert transition is Transition.INSERT
        assert buffer.render() == "ab|"

    def test_language_letter_in_text(self):
        languages = []
        transition, buffer = _apply("|", "ж", on_language=languages.append)

        assert transition is Transition.LANGUAGE_INSERT
        assert buffer.text == "ж"
        assert languages == ["bulgarian"]

    def test_language_letter_rejected_in_math(self):
        languages = []
        transition, buffer = _apply(r"$\vert $", "ж", on_language=languages.append)

        assert transition is Transition.REJECTED
        assert buffer.text == "$$"
        assert languages == []

    def test_unsupported_character(self):
        transition, buffer = _apply("|", "€")

        assert transition is Transition.REJECTED
        assert buffer.text == ""

    @pytest.mark.parametrize("key", [ARROW_LEFT, BACKSPACE])
    def test_non_inserting_keys_pass_through(self, key):
        transition, buffer = _apply("a|", key)

        assert transition is None
        assert buffer.render() == "a|"


@pytest.mark.unit
@pytest.mark.parametrize(
    "char,expected",
    [("ж", "bulgarian"), ("α", "greek"), ("a", None), ("7", None), ("中", None)],
)
def test_script_language(char, expected):
    assert script_language(char, CONFIG.scripts) == expected
