"""
Document assembly.

Wraps each block in a positioned textblock* region and concatenates the
regions between the preamble and \\end{document}. Templates live in
templates/ and use custom Jinja2 delimiters so LaTeX braces pass through:
- Variable: <<< var >>>
- Block: <%% block %%>
"""

from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from mathpad.contexts.assembly.document import Document, Geometry, TextBlock, px_to_cm
from mathpad.contexts.assembly.preamble import build_preamble

TEMPLATES_PATH = Path(__file__).resolve().parent / "templates"


def format_cm(px: float) -> str:
    """Pixels rendered as centimetres with three decimals."""
    return f"{px_to_cm(px):.3f}"


@lru_cache(maxsize=1)
def get_environment() -> Environment:
    """Jinja2 environment for the assembly templates, created once."""
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATES_PATH)),
        # Catches silent failures
        undefined=StrictUndefined,
        # Custom delimiters to avoid LaTeX brace conflicts
        variable_start_string="<<<",
        variable_end_string=">>>",
        block_start_string="<%%",
        block_end_string="%%>",
        comment_start_string="<#",
        comment_end_string="#>",
        # Block tags sit on their own lines; drop those lines from the output
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=False,
    )
    env.filters["cm"] = format_cm
    return env


def render_region(content: str, geometry: Geometry) -> str:
    """Wrap content in a textblock* region at the block's position."""
    template = get_environment().get_template("textblock.tex.jinja")
    return template.render(
        content=content,
        width=geometry.width,
        left=geometry.left,
        top=geometry.top,
    )


def _render_document(preamble: str, regions: list) -> str:
    template = get_environment().get_template("document.tex.jinja")
    return template.render(preamble=preamble, regions=regions)


def assemble_document(document: Document) -> str:
    """
    Assemble the full export document.

    Text blocks come first (cursor markers never appear: buffers hold no
    marker at rest), then image blocks as \\includegraphics regions.

    Args:
        document: Document to export

    Returns:
        Complete LaTeX source ending with \\end{document}
    """
    image_template = get_environment().get_template("image.tex.jinja")

    regions = [render_region(block.latex, block.geometry) for block in document.text_blocks]
    regions.extend(
        render_region(image_template.render(filename=block.filename), block.geometry)
        for block in document.image_blocks
    )

    preamble = build_preamble(document.languages, graphics=document.needs_graphics)
    return _render_document(preamble, regions)


def render_block_document(block: TextBlock, document: Document, with_marker: bool = True) -> str:
    """
    Standalone document containing a single text block, for preview rendering.

    Args:
        block: Block to render
        document: Owning document (supplies the language capabilities)
        with_marker: Splice the cursor marker into the content

    Returns:
        Complete LaTeX source for the block
    """
    preamble = build_preamble(document.languages)
    content = block.buffer.render(with_marker=with_marker)
    return _render_document(preamble, [render_region(content, block.geometry)])
