"""
Assembly Context

Responsibilities:
- Models the document: positioned text and image blocks
- Tracks the capabilities the document needs (babel languages, graphics)
- Builds the preamble from those capabilities
- Assembles single-block preview sources and the full export document

Owns: Block layout, preamble, export format
Never: Edits block content
"""

from mathpad.contexts.assembly.assembler import assemble_document, render_block_document
from mathpad.contexts.assembly.document import (
    Document,
    Geometry,
    ImageBlock,
    TextBlock,
    load_layout,
)

__all__ = [
    "assemble_document",
    "render_block_document",
    "Document",
    "Geometry",
    "ImageBlock",
    "TextBlock",
    "load_layout",
]
