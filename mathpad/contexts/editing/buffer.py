"""
Buffer & Cursor Model

Owns the character sequence of one editable block and the position of its
single edit cursor. The cursor lives outside the text; the in-band marker
glyphs only appear when the buffer is serialized for rendering.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from mathpad.contexts.editing.exceptions import NoMarkerFoundError
from mathpad.utils.text_processing import count_unescaped

TEXT_MARKER = "|"
MATH_MARKER = "\\vert "
MATH_DELIMITER = "$"


class Mode(Enum):
    """Typesetting mode at the cursor."""

    TEXT = "text"
    MATH = "math"


@dataclass(frozen=True)
class Edit:
    """
    A (range, replacement) edit.

    Attributes:
        start: First replaced index
        end: One past the last replaced index
        text: Replacement text
        cursor: Cursor index after the edit is applied
    """

    start: int
    end: int
    text: str
    cursor: int


def mode_at(text: str, index: int) -> Mode:
    """Mode at index: math after an odd number of unescaped '$'."""
    if count_unescaped(text, MATH_DELIMITER, index) % 2 == 1:
        return Mode.MATH
    return Mode.TEXT


def marker_for(mode: Mode) -> str:
    """Renderable cursor placeholder for a mode."""
    return MATH_MARKER if mode is Mode.MATH else TEXT_MARKER


def strip_markers(text: str) -> str:
    """Remove legacy in-band cursor markers from text."""
    return text.replace(TEXT_MARKER, "").replace(MATH_MARKER, "")


class EditBuffer:
    """
    Mutable character sequence with an explicit cursor.

    The cursor is None while the owning block is not focused. All mutation
    goes through apply(), which splices a single (range, replacement) edit.
    """

    def __init__(self, text: str = "", cursor: Optional[int] = None):
        self._chars: List[str] = list(text)
        self.cursor = cursor

    def __repr__(self) -> str:
        return f"EditBuffer({self.text!r}, cursor={self.cursor})"

    def __len__(self) -> int:
        return len(self._chars)

    @property
    def text(self) -> str:
        return "".join(self._chars)

    @property
    def mode(self) -> Mode:
        return mode_at(self.text, self.require_cursor())

    @property
    def has_cursor(self) -> bool:
        return self.cursor is not None and 0 <= self.cursor <= len(self._chars)

    def require_cursor(self) -> int:
        """
        Resolved cursor index.

        Raises:
            NoMarkerFoundError: If the cursor is missing or out of range
        """
        if not self.has_cursor:
            raise NoMarkerFoundError(self.cursor, len(self._chars))
        return self.cursor

    def apply(self, edit: Edit) -> None:
        """Splice edit.text over [edit.start, edit.end) and move the cursor."""
        self._chars[edit.start:edit.end] = list(edit.text)
        self.cursor = edit.cursor

    def insert(self, text: str, cursor_offset: Optional[int] = None) -> None:
        """
        Insert text at the cursor.

        Args:
            text: Text to insert
            cursor_offset: Cursor position relative to the start of the inserted
                           text (default: just after it)
        """
        cursor = self.require_cursor()
        if cursor_offset is None:
            cursor_offset = len(text)
        self.apply(Edit(cursor, cursor, text, cursor + cursor_offset))

    def delete(self, start: int, end: int) -> None:
        """Remove [start, end) and leave the cursor at start."""
        self.apply(Edit(start, end, "", start))

    def move_to(self, index: int) -> None:
        if not 0 <= index <= len(self._chars):
            raise NoMarkerFoundError(index, len(self._chars))
        self.cursor = index

    def render(self, with_marker: bool = True) -> str:
        """
        Serialize the buffer for a render request.

        The cursor is spliced in as a marker valid in its mode: a plain glyph in
        text mode, a typesettable placeholder inside math.
        """
        text = self.text
        if not with_marker or not self.has_cursor:
            return text
        cursor = self.cursor
        return text[:cursor] + marker_for(mode_at(text, cursor)) + text[cursor:]

    @classmethod
    def from_marked(cls, marked: str) -> "EditBuffer":
        """
        Build a buffer from text carrying an in-band marker.

        The text-mode marker is searched first, then the math-mode marker. Text
        without either marker yields an unfocused buffer.

        Example:
            >>> EditBuffer.from_marked("$x^{\\\\vert }$")
            EditBuffer('$x^{}$', cursor=4)
        """
        for marker in (TEXT_MARKER, MATH_MARKER):
            index = marked.find(marker)
            if index != -1:
                return cls(marked[:index] + marked[index + len(marker):], index)
        return cls(marked)
