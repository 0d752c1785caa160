"""
Editor session: focus handling and key dispatch.

Each key is processed to completion before the next one. Dispatch order:
Mode Transition Handler, Navigation Engine, Structural Edit Engine, then the
autoreplacement pass. The cursor is then settled onto a hop stop, so a
LEFT/RIGHT pair from wherever a key leaves it returns to the same place.
The render callback runs last.
"""

from typing import Callable, Iterable, Optional, Tuple

from mathpad.contexts.assembly.document import Document, TextBlock
from mathpad.contexts.editing.autoreplace import Autoreplacer, ReplacementTable
from mathpad.contexts.editing.config import EditorConfig, get_editor_config
from mathpad.contexts.editing.deletion import delete
from mathpad.contexts.editing.exceptions import NoActiveCursorError, NoMarkerFoundError
from mathpad.contexts.editing.keys import ARROW_LEFT, ARROW_RIGHT, BACKSPACE, DELETE
from mathpad.contexts.editing.logger import _log_debug, _log_error, log_key, log_replacement
from mathpad.contexts.editing.modes import Transition, handle_mode_key
from mathpad.contexts.editing.navigation import move, settle
from mathpad.contexts.editing.tokens import Direction

NAVIGATION_KEYS = {ARROW_LEFT: Direction.LEFT, ARROW_RIGHT: Direction.RIGHT}
DELETION_KEYS = {BACKSPACE: Direction.LEFT, DELETE: Direction.RIGHT}


class EditorSession:
    """
    Single-cursor editing session over one document.

    At most one block is focused at a time. Key events with no focused block
    are ignored.

    Attributes:
        document: Document whose blocks are edited
        config: Editor configuration (alphabet, scripts)
        autoreplacer: Shorthand resolver shared by all blocks of the session
        active_block: Focused block, or None
        on_edit: Called with the block after every key that changed it
    """

    def __init__(
        self,
        document: Optional[Document] = None,
        table: Optional[ReplacementTable] = None,
        config: Optional[EditorConfig] = None,
        on_edit: Optional[Callable[[TextBlock], object]] = None,
    ):
        self.document = document if document is not None else Document()
        self.config = config if config is not None else get_editor_config()
        self.autoreplacer = Autoreplacer(table)
        self.active_block: Optional[TextBlock] = None
        self.on_edit = on_edit

    def _notify(self, block: TextBlock) -> None:
        if self.on_edit is not None:
            self.on_edit(block)

    def require_active_block(self) -> TextBlock:
        """
        Raises:
            NoActiveCursorError: If no block is focused
        """
        if self.active_block is None:
            raise NoActiveCursorError("No block is focused")
        return self.active_block

    def focus(self, block: TextBlock) -> None:
        """
        Focus a block for editing.

        The cursor goes to the end of the block unless the buffer already
        carries a valid cursor.
        """
        if self.active_block is not None and self.active_block is not block:
            self.blur()

        if not block.buffer.has_cursor:
            block.buffer.cursor = len(block.buffer)
        self.active_block = block
        _log_debug(f"Focused {block.block_id}")
        self._notify(block)

    def blur(self) -> None:
        """Release the focused block; its buffer keeps no cursor at rest."""
        block = self.active_block
        if block is None:
            return
        block.buffer.cursor = None
        self.autoreplacer.disarm()
        self.active_block = None
        _log_debug(f"Blurred {block.block_id}")
        self._notify(block)

    def new_block(self, text: str = "") -> TextBlock:
        """Create a text block in the document and focus it."""
        block = self.document.new_text_block(text)
        self.focus(block)
        return block

    def _dispatch(self, block: TextBlock, key: str) -> Tuple[str, bool]:
        buffer = block.buffer

        transition = handle_mode_key(
            buffer, key, self.config, on_language=self.document.require_language
        )
        if transition is not None:
            if transition is Transition.TRIGGER:
                self.autoreplacer.arm()
            return transition.value, transition is not Transition.REJECTED

        if key in NAVIGATION_KEYS:
            return "navigation", move(buffer, NAVIGATION_KEYS[key])

        if key in DELETION_KEYS:
            return "deletion", delete(buffer, DELETION_KEYS[key])

        return "unhandled", False

    def handle_key(self, key: str) -> bool:
        """
        Process one key event.

        Args:
            key: Single character or named key (see keys.py)

        Returns:
            True if the buffer or cursor changed
        """
        block = self.active_block
        if block is None:
            _log_debug(f"No focused block, ignoring {key!r}")
            return False

        buffer = block.buffer
        try:
            cursor = buffer.require_cursor()
        except NoMarkerFoundError as e:
            _log_error(f"{block.block_id}: {e}")
            return False

        mode = buffer.mode
        handled_by, changed = self._dispatch(block, key)
        log_key(block.block_id, key, handled_by, cursor, mode.value)

        match = self.autoreplacer.resolve(buffer)
        if match is not None:
            log_replacement(block.block_id, match.replacement.shorthand, match.replacement.markup)
            changed = True

        if settle(buffer):
            changed = True

        if changed:
            self._notify(block)
        return changed

    def type_keys(self, keys: Iterable[str]) -> None:
        """Process a sequence of key events in order."""
        for key in keys:
            self.handle_key(key)
