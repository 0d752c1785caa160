"""Error taxonomy for the editing context."""

from typing import Optional


class MathpadError(Exception):
    """Base class for all MATHPAD errors."""

    pass


class NoActiveCursorError(MathpadError):
    """
    Raised when an edit or navigation event arrives with no focused block.

    The session treats this as a silent no-op; it is raised only by
    helpers that require a focused block.
    """

    pass


class NoMarkerFoundError(MathpadError):
    """
    Raised when a buffer being edited has no valid cursor.

    Indicates a programming-logic fault: a focused block always carries a
    cursor inside its buffer.

    Attributes:
        cursor: The offending cursor value (None when missing)
        length: Buffer length at the time of the check
    """

    def __init__(self, cursor: Optional[int], length: int):
        self.cursor = cursor
        self.length = length
        if cursor is None:
            message = "No cursor in buffer"
        else:
            message = f"Cursor {cursor} outside buffer of length {length}"
        super().__init__(message)


class UnbalancedDeletionError(MathpadError):
    """
    Raised by balance checks when an edit would strand an unmatched brace.

    The structural edit engine never produces such an edit; this exists for
    assertion helpers and debugging tools.

    Attributes:
        text: Buffer content after the offending edit
    """

    def __init__(self, message: str, text: Optional[str] = None):
        self.message = message
        self.text = text

        parts = [message]
        if text is not None:
            snippet = text[:200] + "..." if len(text) > 200 else text
            parts.append(f"\nBuffer:\n{snippet}")

        super().__init__("\n".join(parts))


class ReplacementTableError(MathpadError, ValueError):
    """
    Raised when the replacement table configuration is invalid.

    For example: empty trigger keys, non-letter keys, or canonical markup
    without exactly one cursor slot.
    """

    pass
