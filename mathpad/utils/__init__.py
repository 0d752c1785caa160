"""
Shared utilities for MATHPAD.

Common functionality used across contexts:
- Brace/escape helpers for LaTeX text
- Logger setup
- Timestamps for log directories
"""

from mathpad.utils.timestamp import now

__all__ = ["now"]
