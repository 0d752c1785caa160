"""
Editing Context

Responsibilities:
- Holds each block's buffer and its single cursor
- Resolves atomic token spans (commands, groups, scripts, delimiters)
- Moves the cursor and deletes one atomic unit at a time, keeping braces balanced
- Inserts math spans, scripts, breaks and characters by mode
- Resolves backslash shorthand into canonical markup

Owns: Buffer content, cursor position, key dispatch
Never: Renders or exports
"""
