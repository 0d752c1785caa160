"""
Structural Edit Engine

Backspace/Delete remove one atomic unit while keeping braces balanced:

- A closing brace takes its whole group with it, chained across adjacent
  groups and scripts, plus the command the chain belongs to (\\sqrt{x},
  \\frac{a}{b} and \\int_{a}^{b} each vanish in one keystroke).
- A space that terminates a command name takes the command with it.
- '{' and '$' are anchors: they are never removed by cascading spans, and a
  Backspace directly after one (or Delete directly before '}' or '$') does
  nothing in math mode.
- Everything else goes one character at a time.
"""

from typing import Optional

from mathpad.contexts.editing.buffer import MATH_DELIMITER, Edit, EditBuffer, Mode
from mathpad.contexts.editing.exceptions import UnbalancedDeletionError
from mathpad.contexts.editing.logger import _log_warning
from mathpad.contexts.editing.tokens import (
    AtomicSpan,
    Direction,
    SpanKind,
    command_end,
    command_start,
    settle_cursor,
)
from mathpad.utils.text_processing import (
    find_matching_close,
    find_matching_open,
    is_balanced,
    is_escaped,
)

SCRIPT_OPERATORS = "^_"


def _is_unescaped(text: str, index: int, chars: str) -> bool:
    return text[index] in chars and not is_escaped(text, index)


def text_without(text: str, span: AtomicSpan) -> str:
    return text[:span.start] + text[span.end:]


def _group_chain_start(text: str, close_pos: int) -> Optional[int]:
    """
    Start of the group chain ending with the '}' at close_pos.

    Walks back over adjacent groups ({a}{b}) and script operators (^{..}, _{..})
    until neither precedes the chain.
    """
    start = find_matching_open(text, close_pos)
    if start is None:
        return None

    while start > 0:
        if _is_unescaped(text, start - 1, "}"):
            previous = find_matching_open(text, start - 1)
            if previous is None:
                break
            start = previous
        elif _is_unescaped(text, start - 1, SCRIPT_OPERATORS):
            start -= 1
        else:
            break
    return start


def _group_chain_end(text: str, pos: int) -> int:
    """
    End of the group chain starting at pos (pos itself if no group starts there).

    Mirrors _group_chain_start(): consumes {..} groups and ^{..}/_{..} scripts.
    """
    end = pos
    while end < len(text):
        if _is_unescaped(text, end, "{"):
            open_pos = end
        elif (
            _is_unescaped(text, end, SCRIPT_OPERATORS)
            and end + 1 < len(text)
            and text[end + 1] == "{"
        ):
            open_pos = end + 1
        else:
            break

        close = find_matching_close(text, open_pos)
        if close is None:
            break
        end = close + 1
    return end


def _backward_math(text: str, cursor: int) -> Optional[AtomicSpan]:
    previous = text[cursor - 1]

    found = command_start(text, cursor)
    if found is not None and not found[1]:
        return AtomicSpan(found[0], cursor, SpanKind.COMMAND)

    if previous == "}":
        start = _group_chain_start(text, cursor - 1)
        if start is None:
            return None
        kind = SpanKind.SCRIPT if text[start] in SCRIPT_OPERATORS else SpanKind.GROUP
        found = command_start(text, start)
        if found is not None and found[1]:
            return AtomicSpan(found[0], cursor, SpanKind.COMMAND)
        return AtomicSpan(start, cursor, kind)

    if previous == " ":
        found = command_start(text, cursor - 1)
        if found is not None and found[1]:
            return AtomicSpan(found[0], cursor, SpanKind.COMMAND)

    if previous in "{" + MATH_DELIMITER:
        return None

    return AtomicSpan(cursor - 1, cursor, SpanKind.LITERAL)


def _forward_math(text: str, cursor: int) -> Optional[AtomicSpan]:
    following = text[cursor]

    if following == "\\":
        found = command_end(text, cursor)
        if found is None:
            return AtomicSpan(cursor, cursor + 1, SpanKind.LITERAL)
        end, named = found
        if named:
            if end < len(text) and text[end] == " ":
                end += 1
            else:
                end = _group_chain_end(text, end)
        return AtomicSpan(cursor, end, SpanKind.COMMAND)

    if following == "{":
        end = _group_chain_end(text, cursor)
        if end == cursor:
            return None
        return AtomicSpan(cursor, end, SpanKind.GROUP)

    if following in SCRIPT_OPERATORS:
        end = _group_chain_end(text, cursor)
        if end > cursor:
            return AtomicSpan(cursor, end, SpanKind.SCRIPT)

    if following in "}" + MATH_DELIMITER:
        return None

    return AtomicSpan(cursor, cursor + 1, SpanKind.LITERAL)


def _candidate_span(
    text: str, cursor: int, direction: Direction, mode: Mode
) -> Optional[AtomicSpan]:
    if direction is Direction.LEFT:
        if cursor <= 0:
            return None
        if mode is Mode.MATH:
            return _backward_math(text, cursor)
        index = cursor - 1
    else:
        if cursor >= len(text):
            return None
        if mode is Mode.MATH:
            return _forward_math(text, cursor)
        index = cursor

    # Text mode: one character, but never a lone brace
    if _is_unescaped(text, index, "{}"):
        return None
    return AtomicSpan(index, index + 1, SpanKind.LITERAL)


def deletion_span(
    text: str, cursor: int, direction: Direction, mode: Mode
) -> Optional[AtomicSpan]:
    """
    Span removed by Backspace (LEFT) or Delete (RIGHT).

    A candidate span that would leave a balanced buffer unbalanced (for
    instance removing the backslash of \\{) is refused.

    Args:
        text: Buffer content
        cursor: Cursor index
        direction: LEFT for Backspace, RIGHT for Delete
        mode: Mode at the cursor

    Returns:
        The span to remove, or None when nothing may be deleted

    Example:
        >>> deletion_span(r"$\\sqrt{x}$", 9, Direction.LEFT, Mode.MATH)
        AtomicSpan(start=1, end=9, kind=<SpanKind.COMMAND: 'command'>)
    """
    span = _candidate_span(text, cursor, direction, mode)
    if span is None:
        return None

    if is_balanced(text) and not is_balanced(text_without(text, span)):
        _log_warning(f"Refusing deletion of {span.text_of(text)!r}: would unbalance braces")
        return None
    return span


def delete(buffer: EditBuffer, direction: Direction) -> bool:
    """
    Remove the atomic span on the given side of the cursor.

    The cursor lands where the span started, or on the nearest stop before
    it when the removal fused its neighbours into one span.

    Args:
        buffer: Buffer with an active cursor
        direction: LEFT for Backspace, RIGHT for Delete

    Returns:
        True if anything was removed

    Raises:
        NoMarkerFoundError: If the buffer has no cursor
    """
    cursor = buffer.require_cursor()
    span = deletion_span(buffer.text, cursor, direction, buffer.mode)
    if span is None:
        return False
    text = text_without(buffer.text, span)
    buffer.apply(Edit(span.start, span.end, "", settle_cursor(text, span.start)))
    return True


def assert_balanced(buffer: EditBuffer) -> None:
    """
    Check that the buffer's braces are balanced.

    Raises:
        UnbalancedDeletionError: If an unescaped brace is unmatched
    """
    text = buffer.text
    if not is_balanced(text):
        raise UnbalancedDeletionError("Buffer braces are unbalanced", text)
