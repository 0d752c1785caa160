"""
Integration tests for rendering - real latex + dvipng runs.
"""

import shutil

import pytest

from mathpad.contexts.assembly import Document, assemble_document
from mathpad.contexts.editing.engine import EditorSession
from mathpad.contexts.editing.keys import parse_keys
from mathpad.contexts.rendering import RenderBridge, compile_snippet

# Check if the preview toolchain is available
LATEX_AVAILABLE = shutil.which("latex") is not None and shutil.which("dvipng") is not None
skip_if_no_latex = pytest.mark.skipif(
    not LATEX_AVAILABLE,
    reason="latex/dvipng not installed - install TeX Live, MiKTeX, or MacTeX"
)


@pytest.mark.integration
@pytest.mark.latex
@skip_if_no_latex
@pytest.mark.parametrize(
    "keys",
    [
        "$\\frac",
        "$\\sqrtx<Right>+\\alpha",
        "$\\int0<Right>1<Right>x^2",
        "Some text $x_1",
    ],
)
def test_typed_block_renders_with_marker(keys, tmp_path):
    """Every intermediate state of a typed block is valid LaTeX, marker included."""
    session = EditorSession(Document())
    block = session.new_block()
    session.type_keys(parse_keys(keys))

    bridge = RenderBridge(work_root=tmp_path)
    preview = bridge.render(block, session.document)
    bridge.shutdown()

    assert preview.success, f"Render failed with errors: {preview.result.errors}"
    assert preview.image_path.exists()
    assert preview.image_path.stat().st_size > 0


@pytest.mark.integration
@pytest.mark.latex
@skip_if_no_latex
def test_render_with_intentional_error(tmp_path):
    """Compilation errors are reported, not raised."""
    broken = "\n".join(
        [
            r"\documentclass{article}",
            r"\begin{document}",
            r"$\undefinedmacro{x}$",
            r"\end{document}",
        ]
    )

    result = compile_snippet(broken, tmp_path)

    assert not result.success
    assert result.png_path is None
    assert any("Undefined control sequence" in error for error in result.errors)


@pytest.mark.integration
@pytest.mark.latex
@skip_if_no_latex
def test_exported_document_compiles(tmp_path):
    document = Document()
    document.new_text_block(r"$\frac{a}{b} + \sqrt{x}$")
    document.new_text_block("Plain text block")

    result = compile_snippet(assemble_document(document), tmp_path, stem="page")

    assert result.success, f"Compilation failed with errors: {result.errors}"
