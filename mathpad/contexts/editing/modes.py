"""
Mode Transition Handler

Handles the keys that insert content: the command trigger, math spans,
scripts, line breaks and printable characters.
"""

import unicodedata
from enum import Enum
from typing import Callable, Dict, Optional

from mathpad.contexts.editing.buffer import MATH_DELIMITER, EditBuffer, Mode
from mathpad.contexts.editing.config import EditorConfig
from mathpad.contexts.editing.keys import ENTER
from mathpad.contexts.editing.logger import _log_debug

TRIGGER = "\\backslash "
PARAGRAPH_BREAK = "\n\n"
LINE_BREAK = "\\\\"
SCRIPT_OPENERS = {"^": "^{", "_": "_{"}


class Transition(Enum):
    """What a handled key did."""

    TRIGGER = "trigger"
    MATH_SPAN = "math_span"
    SCRIPT = "script"
    BREAK = "break"
    INSERT = "insert"
    LANGUAGE_INSERT = "language_insert"
    REJECTED = "rejected"


def script_language(char: str, scripts: Dict[str, str]) -> Optional[str]:
    """
    Babel language for a non-Latin letter, or None if its script is not configured.

    Example:
        >>> script_language("ж", {"CYRILLIC": "bulgarian"})
        'bulgarian'
    """
    if char.isascii() or not char.isalpha():
        return None
    name = unicodedata.name(char, "")
    for prefix, language in scripts.items():
        if name.startswith(prefix + " "):
            return language
    return None


def handle_mode_key(
    buffer: EditBuffer,
    key: str,
    config: EditorConfig,
    on_language: Optional[Callable[[str], object]] = None,
) -> Optional[Transition]:
    """
    Apply an inserting key to the buffer.

    Args:
        buffer: Buffer with an active cursor
        key: Key identity (single character or named key)
        config: Editor configuration (alphabet, scripts)
        on_language: Called with the babel language when a non-Latin letter is
                     typed in text mode

    Returns:
        The transition taken, Transition.REJECTED for ignored input, or None
        when the key is not an inserting key (navigation, deletion, unknown)
    """
    if key != ENTER and len(key) != 1:
        return None

    mode = buffer.mode

    if key == ENTER:
        buffer.insert(LINE_BREAK if mode is Mode.MATH else PARAGRAPH_BREAK)
        return Transition.BREAK

    if key == "\\":
        if mode is not Mode.MATH:
            return Transition.REJECTED
        buffer.insert(TRIGGER)
        return Transition.TRIGGER

    if key == MATH_DELIMITER:
        if mode is not Mode.TEXT:
            return Transition.REJECTED
        buffer.insert(MATH_DELIMITER * 2, cursor_offset=1)
        return Transition.MATH_SPAN

    if key in SCRIPT_OPENERS:
        if mode is not Mode.MATH:
            return Transition.REJECTED
        opener = SCRIPT_OPENERS[key]
        buffer.insert(opener + "}", cursor_offset=len(opener))
        return Transition.SCRIPT

    if key in config.alphabet:
        buffer.insert(key)
        return Transition.INSERT

    language = script_language(key, config.scripts)
    if language is None:
        _log_debug(f"Ignoring unsupported character {key!r}")
        return Transition.REJECTED

    if mode is Mode.MATH:
        _log_debug(f"Rejecting {key!r} in math mode ({language} text only)")
        return Transition.REJECTED

    if on_language is not None:
        on_language(language)
    buffer.insert(key)
    return Transition.LANGUAGE_INSERT
