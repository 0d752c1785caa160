"""
Rendering Context

Responsibilities:
- Compiles a single block's LaTeX source to a PNG preview (latex -> dvi -> png)
- Tracks render requests per block so superseded previews are discarded
- Reports compilation errors without touching the edited buffer

Owns: Preview compilation, preview state
Never: Modifies block content
"""

from mathpad.contexts.rendering.bridge import Preview, RenderBridge
from mathpad.contexts.rendering.compiler import RenderResult, compile_snippet
from mathpad.contexts.rendering.exceptions import RenderError

__all__ = ["Preview", "RenderBridge", "RenderError", "RenderResult", "compile_snippet"]
