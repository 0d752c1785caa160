"""
Navigation Engine

Moves the cursor across one atomic span. The buffer text is never modified,
so a LEFT move followed by a RIGHT move from a stop returns the
cursor to where it started.
"""

from mathpad.contexts.editing.buffer import EditBuffer
from mathpad.contexts.editing.logger import _log_debug
from mathpad.contexts.editing.tokens import Direction, SpanKind, resolve_span, settle_cursor


def move(buffer: EditBuffer, direction: Direction) -> bool:
    """
    Move the cursor across the atomic span on the given side.

    Args:
        buffer: Buffer with an active cursor
        direction: Direction to move

    Returns:
        True if the cursor moved, False at the buffer boundary

    Raises:
        NoMarkerFoundError: If the buffer has no cursor
    """
    cursor = buffer.require_cursor()
    span = resolve_span(buffer.text, cursor, direction, buffer.mode)
    if span is None:
        return False

    buffer.move_to(span.start if direction is Direction.LEFT else span.end)

    if span.kind is SpanKind.DELIMITER:
        _log_debug(f"Crossed math delimiter, now in {buffer.mode.value} mode")
    return True


def settle(buffer: EditBuffer) -> bool:
    """
    Pull the cursor back onto the nearest hop stop after an edit.

    An edit can leave the cursor inside what is now one atomic span, e.g.
    deleting y from $x_{a}y^{}$ puts it between '}' and '^{'. From such a
    position a LEFT/RIGHT pair would not return to it.

    Returns:
        True if the cursor moved
    """
    cursor = buffer.require_cursor()
    stop = settle_cursor(buffer.text, cursor)
    if stop == cursor:
        return False

    _log_debug(f"Settled cursor {cursor} -> {stop}")
    buffer.move_to(stop)
    return True
