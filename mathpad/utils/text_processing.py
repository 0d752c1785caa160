"""
Text processing utilities for brace-delimited LaTeX markup.

Every helper here treats a delimiter preceded by an odd number of backslashes
as escaped (\\{ is a literal brace, \\\\{ is a line break followed by a group).
"""

from typing import Optional, Tuple


def is_escaped(text: str, pos: int, escape_char: str = "\\") -> bool:
    """
    Check whether the character at pos is escaped.

    A character is escaped when it is preceded by an odd-length run of
    escape characters.

    Example:
        >>> is_escaped(r"a\\$", 2)
        True
        >>> is_escaped(r"a\\\\$", 3)
        False
    """
    run = 0
    i = pos - 1
    while i >= 0 and text[i] == escape_char:
        run += 1
        i -= 1
    return run % 2 == 1


def count_unescaped(text: str, char: str, end: Optional[int] = None) -> int:
    """
    Count unescaped occurrences of char in text[:end].

    Example:
        >>> count_unescaped(r"$x$ costs \\$5", "$")
        2
    """
    if end is None:
        end = len(text)
    return sum(1 for i in range(end) if text[i] == char and not is_escaped(text, i))


def extract_balanced_delimiters(
    text: str,
    start_pos: int,
    open_char: str = '{',
    close_char: str = '}',
    escape_char: str = '\\'
) -> Tuple[str, int]:
    """
    Extract content between balanced delimiters, handling escaped characters.

    Assumes start_pos is just AFTER an opening delimiter. Counts nested delimiters
    to find the matching closing delimiter, skipping escaped characters.

    Args:
        text: Text containing delimited content
        start_pos: Position just after the opening delimiter
        open_char: Opening delimiter character (default: '{')
        close_char: Closing delimiter character (default: '}')
        escape_char: Character used for escaping (default: '\\')

    Returns:
        (content, end_pos) where:
        - content: Text between the delimiters (excluding delimiters themselves)
        - end_pos: Position after the closing delimiter

    Raises:
        ValueError: If delimiters are unmatched

    Example:
        >>> text = "foo {bar {nested} baz} qux"
        >>> content, end = extract_balanced_delimiters(text, 5)
        >>> content
        'bar {nested} baz'
    """
    depth = 1  # Start at 1 (already inside opening delimiter)
    pos = start_pos

    while pos < len(text) and depth > 0:
        if text[pos] == escape_char:
            # Skip escaped character
            pos += 2
            continue
        elif text[pos] == open_char:
            depth += 1
        elif text[pos] == close_char:
            depth -= 1
        pos += 1

    if depth != 0:
        raise ValueError(
            f"Unmatched {open_char}{close_char} delimiters starting at position {start_pos}"
        )

    content = text[start_pos:pos - 1]
    return content, pos


def find_matching_close(text: str, open_pos: int) -> Optional[int]:
    """
    Index of the '}' matching the '{' at open_pos, or None if unmatched.

    Example:
        >>> find_matching_close("x{a{b}}y", 1)
        6
    """
    try:
        _, end_pos = extract_balanced_delimiters(text, open_pos + 1)
    except ValueError:
        return None
    return end_pos - 1


def find_matching_open(text: str, close_pos: int) -> Optional[int]:
    """
    Index of the '{' matching the '}' at close_pos, or None if unmatched.

    Scans backward with a depth counter, ignoring escaped braces.

    Example:
        >>> find_matching_open("x{a{b}}y", 6)
        1
    """
    depth = 0
    for i in range(close_pos, -1, -1):
        if text[i] not in "{}" or is_escaped(text, i):
            continue
        depth += 1 if text[i] == "}" else -1
        if depth == 0:
            return i
    return None


def brace_depth(text: str) -> int:
    """
    Net brace depth of text (opens minus closes), ignoring escaped braces.

    Example:
        >>> brace_depth(r"\\frac{a}{")
        1
    """
    depth = 0
    for i, char in enumerate(text):
        if char in "{}" and not is_escaped(text, i):
            depth += 1 if char == "{" else -1
    return depth


def is_balanced(text: str) -> bool:
    """
    Check that every unescaped brace in text is matched.

    Example:
        >>> is_balanced(r"\\sqrt{x^{2}}")
        True
        >>> is_balanced("}{")
        False
    """
    depth = 0
    for i, char in enumerate(text):
        if char in "{}" and not is_escaped(text, i):
            depth += 1 if char == "{" else -1
            if depth < 0:
                return False
    return depth == 0
