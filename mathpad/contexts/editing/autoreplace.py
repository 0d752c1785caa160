"""
Autoreplacement Engine

Rewrites backslash shorthand into canonical markup. Typing \\ in math mode
inserts the trigger (\\backslash ) and arms the engine; after every edit the
text between the last trigger and the cursor is looked up in a trie of
shorthand keys. A match replaces trigger and shorthand in one edit and puts
the cursor at the canonical cursor slot.

Examples:
    \\backslash frac|   ->  \\frac{|}{}
    \\backslash alpha|  ->  \\alpha |
    \\backslash sqrt|   ->  \\sqrt{|}
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Iterator, List, Optional

from mathpad.contexts.editing.buffer import Edit, EditBuffer
from mathpad.contexts.editing.config import EditorConfig, get_editor_config
from mathpad.contexts.editing.exceptions import ReplacementTableError
from mathpad.contexts.editing.logger import _log_debug
from mathpad.contexts.editing.modes import TRIGGER

CURSOR_SLOT = "<cursor>"


@dataclass(frozen=True)
class Replacement:
    """
    One table entry.

    Attributes:
        shorthand: Typed key (letters only)
        markup: Canonical markup with the cursor slot removed
        cursor: Offset of the cursor slot within markup
    """

    shorthand: str
    markup: str
    cursor: int

    @property
    def canonical(self) -> str:
        """Canonical markup with the cursor slot restored."""
        return self.markup[:self.cursor] + CURSOR_SLOT + self.markup[self.cursor:]


@dataclass(frozen=True)
class Match:
    """
    Lookup result.

    Attributes:
        replacement: The longest entry whose key prefixes the typed text
        remainder: Typed text after that key, reinserted at the cursor slot
    """

    replacement: Replacement
    remainder: str = ""


class _TrieNode:
    __slots__ = ("children", "replacement")

    def __init__(self):
        self.children: Dict[str, "_TrieNode"] = {}
        self.replacement: Optional[Replacement] = None


def _parse_canonical(shorthand: str, canonical: str) -> Replacement:
    if not shorthand or not shorthand.isascii() or not shorthand.isalpha():
        raise ReplacementTableError(f"Shorthand must be ASCII letters, got {shorthand!r}")
    if canonical.count(CURSOR_SLOT) != 1:
        raise ReplacementTableError(
            f"Canonical markup for {shorthand!r} must contain exactly one {CURSOR_SLOT} slot: "
            f"{canonical!r}"
        )
    cursor = canonical.index(CURSOR_SLOT)
    markup = canonical.replace(CURSOR_SLOT, "")
    return Replacement(shorthand=shorthand, markup=markup, cursor=cursor)


class ReplacementTable:
    """
    Immutable shorthand -> canonical markup mapping backed by a trie.

    Lookup is longest-match: a key that is a proper prefix of a longer key only
    resolves once the typed text can no longer grow into the longer key.
    """

    def __init__(self, entries: Dict[str, str]):
        """
        Build the table.

        Args:
            entries: Shorthand -> canonical markup containing one <cursor> slot

        Raises:
            ReplacementTableError: On invalid keys or canonical markup
        """
        self._root = _TrieNode()
        self._size = 0
        for shorthand, canonical in entries.items():
            self._add(_parse_canonical(shorthand, canonical))

    @classmethod
    def from_config(cls, config: EditorConfig) -> "ReplacementTable":
        """
        Build the table from its three configured sources.

        Raises:
            ReplacementTableError: If a shorthand appears in more than one source
        """
        entries: Dict[str, str] = {}
        sources = [
            {name: f"\\{name} {CURSOR_SLOT}" for name in config.symbols},
            {name: f"\\{name}{{{CURSOR_SLOT}}}" for name in config.one_argument},
            dict(config.macros),
        ]
        for source in sources:
            for shorthand, canonical in source.items():
                if shorthand in entries:
                    raise ReplacementTableError(f"Duplicate shorthand {shorthand!r}")
                entries[shorthand] = canonical
        return cls(entries)

    def _add(self, replacement: Replacement) -> None:
        node = self._root
        for char in replacement.shorthand:
            node = node.children.setdefault(char, _TrieNode())
        if node.replacement is None:
            self._size += 1
        node.replacement = replacement

    def __len__(self) -> int:
        return self._size

    def __contains__(self, shorthand: str) -> bool:
        return self.get(shorthand) is not None

    def __iter__(self) -> Iterator[Replacement]:
        stack = [self._root]
        found: List[Replacement] = []
        while stack:
            node = stack.pop()
            if node.replacement is not None:
                found.append(node.replacement)
            stack.extend(node.children.values())
        return iter(sorted(found, key=lambda r: r.shorthand))

    def get(self, shorthand: str) -> Optional[Replacement]:
        """Exact entry for shorthand, if any."""
        node = self._root
        for char in shorthand:
            node = node.children.get(char)
            if node is None:
                return None
        return node.replacement

    def lookup(self, typed: str) -> Optional[Match]:
        """
        Longest-match lookup of the text typed after the trigger.

        Args:
            typed: Text between the trigger and the cursor

        Returns:
            Match, or None when nothing matches yet (or a longer key may still match)

        Example:
            >>> table = ReplacementTable({"in": "\\\\in <cursor>", "int": "\\\\int_{<cursor>}^{}"})
            >>> table.lookup("in") is None      # could still become "int"
            True
            >>> table.lookup("in ").remainder
            ' '
        """
        node = self._root
        best: Optional[Replacement] = None
        best_length = 0

        for i, char in enumerate(typed):
            node = node.children.get(char)
            if node is None:
                break
            if node.replacement is not None:
                best, best_length = node.replacement, i + 1
        else:
            # Every typed character matched; wait while a longer key is possible
            if node.children:
                return None

        if best is None:
            return None
        return Match(replacement=best, remainder=typed[best_length:])


@lru_cache(maxsize=1)
def get_default_table() -> ReplacementTable:
    """Process-wide replacement table built once from editor.yaml."""
    return ReplacementTable.from_config(get_editor_config())


class Autoreplacer:
    """
    Two-state shorthand resolver (armed / idle).

    Arming happens when the trigger is typed. It clears on a successful
    replacement, or when the trigger is no longer found before the cursor
    (deleted or consumed by another edit). There is no timeout.
    """

    def __init__(self, table: Optional[ReplacementTable] = None):
        self.table = table if table is not None else get_default_table()
        self.armed = False

    def arm(self) -> None:
        self.armed = True

    def disarm(self) -> None:
        self.armed = False

    def resolve(self, buffer: EditBuffer) -> Optional[Match]:
        """
        Try to rewrite the pending shorthand.

        Args:
            buffer: Buffer with an active cursor

        Returns:
            The applied Match, or None (buffer untouched)
        """
        if not self.armed:
            return None

        cursor = buffer.require_cursor()
        text = buffer.text
        trigger = text.rfind(TRIGGER, 0, cursor)
        if trigger == -1:
            _log_debug("Trigger gone, disarming autoreplacement")
            self.armed = False
            return None

        typed = text[trigger + len(TRIGGER):cursor]
        match = self.table.lookup(typed)
        if match is None:
            return None

        replacement = match.replacement
        slot = replacement.cursor
        markup = replacement.markup[:slot] + match.remainder + replacement.markup[slot:]
        buffer.apply(Edit(trigger, cursor, markup, trigger + slot + len(match.remainder)))
        self.armed = False
        return match
