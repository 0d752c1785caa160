"""
MATHPAD - Structural editor for positioned LaTeX math/text blocks

A keystroke-driven editing engine that treats LaTeX commands, brace groups,
scripts and math spans as atomic units, with live previews rendered through
an external LaTeX toolchain.

Architecture:
- Editing Context: Buffer, cursor, token boundaries, navigation, deletion, autoreplacement
- Rendering Context: LaTeX -> DVI -> PNG previews for a single block
- Assembly Context: Preamble construction and whole-document export
"""

__version__ = "0.1.0"
