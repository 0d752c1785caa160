"""Custom exceptions for the rendering context."""

from mathpad.contexts.editing.exceptions import MathpadError
from mathpad.contexts.rendering.compiler import RenderResult


class RenderError(MathpadError):
    """
    Exception raised when a caller insists on a successful render.

    The bridge itself never raises this; a failed render is reported as a
    preview that falls back to the raw markup.

    Attributes:
        block_id: Block that failed to render
        result: The failed RenderResult
    """

    def __init__(self, block_id: str, result: RenderResult):
        self.block_id = block_id
        self.result = result

        parts = [f"Rendering {block_id} failed"]
        for error in result.errors[:5]:
            parts.append(f"  - {error}")
        if len(result.errors) > 5:
            parts.append(f"  ... and {len(result.errors) - 5} more")

        super().__init__("\n".join(parts))
