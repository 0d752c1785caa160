"""
Token Boundary Resolver

Computes the atomic span adjacent to the cursor: a backslash command, a
group-boundary pattern (}{, ^{, _{, }^{, }_{), a math delimiter, or a single
character. Rules are local and heuristic; the buffer is never parsed as a
whole.

Rules (first match wins, mirrored for LEFT/RIGHT):
    1. command name plus one trailing delimiter (math mode)
    2. group-boundary pattern (math mode)
    3. math delimiter '$' (crossing it flips the mode)
    4. single character
"""

import string
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from mathpad.contexts.editing.buffer import MATH_DELIMITER, Mode, mode_at
from mathpad.utils.text_processing import is_escaped

NAME_CHARS = frozenset(string.ascii_letters)

# Longest first so '}^{' wins over '^{' when both end at the cursor
BOUNDARY_PATTERNS = ("}^{", "}_{", "}{", "^{", "_{")

# Characters that terminate a command name and are hopped together with it
COMMAND_TERMINATORS = " {"


class Direction(Enum):
    LEFT = "left"
    RIGHT = "right"


class SpanKind(Enum):
    LITERAL = "literal"
    COMMAND = "command"
    GROUP = "group"
    SCRIPT = "script"
    BOUNDARY = "boundary"
    DELIMITER = "delimiter"


@dataclass(frozen=True)
class AtomicSpan:
    """Half-open range [start, end) of one atomic unit."""

    start: int
    end: int
    kind: SpanKind

    @property
    def width(self) -> int:
        return self.end - self.start

    def text_of(self, text: str) -> str:
        return text[self.start:self.end]


def command_start(text: str, end: int) -> Optional[Tuple[int, bool]]:
    """
    Find the backslash command that ends exactly at end.

    Returns:
        (start, named) where named is True for \\name commands and False for
        two-character control symbols (\\\\, \\$, \\{, \\}), or None

    Example:
        >>> command_start(r"x\\alpha", 7)
        (1, True)
        >>> command_start(r"a\\\\", 3)
        (1, False)
    """
    i = end
    while i > 0 and text[i - 1] in NAME_CHARS:
        i -= 1

    if i < end:
        if i > 0 and text[i - 1] == "\\" and not is_escaped(text, i - 1):
            return i - 1, True
        return None

    if end >= 2 and text[end - 2] == "\\" and not is_escaped(text, end - 2):
        return end - 2, False
    return None


def command_end(text: str, start: int) -> Optional[Tuple[int, bool]]:
    """
    Find the end of the backslash command starting at start.

    Returns:
        (end, named) mirroring command_start(), or None when text[start] is a
        trailing lone backslash

    Example:
        >>> command_end(r"\\frac{a}{b}", 0)
        (5, True)
    """
    j = start + 1
    while j < len(text) and text[j] in NAME_CHARS:
        j += 1
    if j > start + 1:
        return j, True
    if start + 1 < len(text):
        return start + 2, False
    return None


def boundary_kind(pattern: str) -> SpanKind:
    return SpanKind.BOUNDARY if pattern == "}{" else SpanKind.SCRIPT


def _boundary_at(text: str, start: int) -> Optional[str]:
    """Group-boundary pattern beginning at start, if any."""
    for pattern in BOUNDARY_PATTERNS:
        if text.startswith(pattern, start) and not is_escaped(text, start):
            return pattern
    return None


def _boundary_ending_at(text: str, end: int) -> Optional[str]:
    """Group-boundary pattern ending at end, if any."""
    for pattern in BOUNDARY_PATTERNS:
        start = end - len(pattern)
        if start >= 0 and text.startswith(pattern, start) and not is_escaped(text, start):
            return pattern
    return None


def _is_delimiter(text: str, index: int) -> bool:
    return text[index] == MATH_DELIMITER and not is_escaped(text, index)


def _span_right(text: str, cursor: int, mode: Mode) -> Optional[AtomicSpan]:
    if cursor >= len(text):
        return None

    if mode is Mode.MATH:
        if text[cursor] == "\\" and not is_escaped(text, cursor):
            found = command_end(text, cursor)
            if found is not None:
                end, named = found
                if named and end < len(text) and text[end] in COMMAND_TERMINATORS:
                    end += 1
                return AtomicSpan(cursor, end, SpanKind.COMMAND)

        pattern = _boundary_at(text, cursor)
        if pattern is not None:
            return AtomicSpan(cursor, cursor + len(pattern), boundary_kind(pattern))

    if _is_delimiter(text, cursor):
        return AtomicSpan(cursor, cursor + 1, SpanKind.DELIMITER)

    return AtomicSpan(cursor, cursor + 1, SpanKind.LITERAL)


def _span_left(text: str, cursor: int, mode: Mode) -> Optional[AtomicSpan]:
    if cursor <= 0:
        return None

    if mode is Mode.MATH:
        # Command followed by its terminator: "\alpha |" or "\frac{|"
        if text[cursor - 1] in COMMAND_TERMINATORS:
            found = command_start(text, cursor - 1)
            if found is not None and found[1]:
                return AtomicSpan(found[0], cursor, SpanKind.COMMAND)

        found = command_start(text, cursor)
        if found is not None:
            return AtomicSpan(found[0], cursor, SpanKind.COMMAND)

        pattern = _boundary_ending_at(text, cursor)
        if pattern is not None:
            return AtomicSpan(cursor - len(pattern), cursor, boundary_kind(pattern))

    if _is_delimiter(text, cursor - 1):
        return AtomicSpan(cursor - 1, cursor, SpanKind.DELIMITER)

    return AtomicSpan(cursor - 1, cursor, SpanKind.LITERAL)


def resolve_span(
    text: str, cursor: int, direction: Direction, mode: Mode
) -> Optional[AtomicSpan]:
    """
    Atomic span adjacent to cursor on the given side.

    Args:
        text: Buffer content (no in-band marker)
        cursor: Cursor index
        direction: Side of the cursor to inspect
        mode: Mode at the cursor; text mode only knows delimiters and characters

    Returns:
        AtomicSpan, or None at the buffer boundary

    Example:
        >>> resolve_span(r"$\\frac{a}{b}$", 1, Direction.RIGHT, Mode.MATH)
        AtomicSpan(start=1, end=7, kind=<SpanKind.COMMAND: 'command'>)
    """
    if direction is Direction.LEFT:
        return _span_left(text, cursor, mode)
    return _span_right(text, cursor, mode)


def is_stop(text: str, cursor: int) -> bool:
    """
    True if hopping away from cursor and back returns to it, in both directions.

    Positions inside an atomic span (between '}' and '^{', or inside a command
    name) are not stops.
    """
    left = resolve_span(text, cursor, Direction.LEFT, mode_at(text, cursor))
    if left is not None:
        back = resolve_span(text, left.start, Direction.RIGHT, mode_at(text, left.start))
        if back is None or back.end != cursor:
            return False

    right = resolve_span(text, cursor, Direction.RIGHT, mode_at(text, cursor))
    if right is not None:
        back = resolve_span(text, right.end, Direction.LEFT, mode_at(text, right.end))
        if back is None or back.start != cursor:
            return False
    return True


def settle_cursor(text: str, cursor: int) -> int:
    """
    Nearest stop at or before cursor.

    Example:
        >>> settle_cursor("$x_{a}^{}$", 6)
        5
    """
    while cursor > 0 and not is_stop(text, cursor):
        cursor = resolve_span(text, cursor, Direction.LEFT, mode_at(text, cursor)).start
    return cursor
