"""
Key identities and key-sequence parsing.

Keys are either a single printable character or one of the named keys below.
"""

import re
from typing import List

ARROW_LEFT = "ArrowLeft"
ARROW_RIGHT = "ArrowRight"
BACKSPACE = "Backspace"
DELETE = "Delete"
ENTER = "Enter"

NAMED_KEYS = (ARROW_LEFT, ARROW_RIGHT, BACKSPACE, DELETE, ENTER)

KEY_ALIASES = {
    "left": ARROW_LEFT,
    "right": ARROW_RIGHT,
    "bs": BACKSPACE,
    "del": DELETE,
    "cr": ENTER,
    "ret": ENTER,
}

_NAMED_KEY_PATTERN = re.compile(r"<([A-Za-z]+)>")


def normalize_key(name: str) -> str:
    """Resolve a named key or alias (case-insensitive) to its canonical name."""
    for key in NAMED_KEYS:
        if key.lower() == name.lower():
            return key
    return KEY_ALIASES.get(name.lower(), name)


def parse_keys(sequence: str) -> List[str]:
    """
    Split a key sequence into key identities.

    Named keys are written in angle brackets (<ArrowLeft>, <Left>, <BS>);
    every other character is one key. Bracketed text that is not a known key
    is typed literally.

    Example:
        >>> parse_keys("$x<Left><BS>")
        ['$', 'x', 'ArrowLeft', 'Backspace']
    """
    keys = []
    pos = 0
    for match in _NAMED_KEY_PATTERN.finditer(sequence):
        key = normalize_key(match.group(1))
        if key not in NAMED_KEYS:
            continue
        keys.extend(sequence[pos:match.start()])
        keys.append(key)
        pos = match.end()
    keys.extend(sequence[pos:])
    return keys
