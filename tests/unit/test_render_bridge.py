"""
Unit tests for the render bridge and compiler plumbing.

Compilation is replaced by fakes; see tests/integration for real LaTeX runs.
"""

import threading

import pytest

from mathpad.contexts.assembly.document import Document
from mathpad.contexts.rendering import RenderBridge, RenderError, RenderResult
from mathpad.contexts.rendering import compiler
from mathpad.contexts.rendering.compiler import _parse_latex_log, compile_snippet


def _succeed(source, work_dir):
    return RenderResult(success=True, png_path=work_dir / "main.png")


def _fail(source, work_dir):
    return RenderResult(success=False, errors=["Undefined control sequence."])


@pytest.fixture
def block_and_document():
    document = Document()
    block = document.new_text_block(r"$\frac{a}{b}$")
    block.buffer.cursor = 8
    return block, document


@pytest.mark.unit
def test_successful_preview(tmp_path, block_and_document):
    block, document = block_and_document
    shown = []
    bridge = RenderBridge(compile_fn=_succeed, work_root=tmp_path, on_preview=shown.append)

    preview = bridge.render(block, document)

    assert preview.success
    assert preview.image_path == tmp_path / "block-0" / "1" / "main.png"
    assert preview.fallback is None
    assert shown == [preview]
    assert bridge.preview("block-0") is preview
    bridge.shutdown()


@pytest.mark.unit
def test_failed_render_falls_back_to_markup(tmp_path, block_and_document):
    """A render failure never touches the buffer."""
    block, document = block_and_document
    bridge = RenderBridge(compile_fn=_fail, work_root=tmp_path)

    preview = bridge.render(block, document)

    assert not preview.success
    assert preview.fallback == r"$\frac{a\vert }{b}$"
    assert block.buffer.text == r"$\frac{a}{b}$"
    assert block.buffer.cursor == 8
    with pytest.raises(RenderError, match="Undefined control sequence"):
        preview.raise_for_status()
    bridge.shutdown()


@pytest.mark.unit
def test_source_is_a_standalone_document(tmp_path, block_and_document):
    block, document = block_and_document
    sources = []

    def record(source, work_dir):
        sources.append(source)
        return _succeed(source, work_dir)

    RenderBridge(compile_fn=record, work_root=tmp_path).render(block, document)

    assert sources[0].startswith(r"\documentclass[12pt]{article}")
    assert r"$\frac{a\vert }{b}$" in sources[0]
    assert sources[0].endswith(r"\end{document}")


@pytest.mark.unit
def test_superseded_response_is_discarded(tmp_path, block_and_document):
    """An older request finishing last must not replace the newer preview."""
    block, document = block_and_document
    release = threading.Event()

    def compile_fn(source, work_dir):
        if r"a\vert " in source:
            release.wait(timeout=5)
        return _succeed(source, work_dir)

    bridge = RenderBridge(compile_fn=compile_fn, work_root=tmp_path, max_workers=2)
    older = bridge.submit(block, document)

    block.buffer.insert("c")
    newer = bridge.submit(block, document)

    newest_preview = newer.result(timeout=5)
    release.set()

    assert newest_preview.generation == 2
    assert older.result(timeout=5) is None
    assert bridge.preview(block.block_id).generation == 2
    bridge.shutdown()


@pytest.mark.unit
def test_generations_are_per_block(tmp_path):
    document = Document()
    first = document.new_text_block("a")
    second = document.new_text_block("b")
    bridge = RenderBridge(compile_fn=_succeed, work_root=tmp_path)

    bridge.render(first, document)
    bridge.render(first, document)
    preview = bridge.render(second, document)

    assert bridge.preview(first.block_id).generation == 2
    assert preview.generation == 1
    bridge.shutdown()


@pytest.mark.unit
def test_compiler_exception_falls_back_to_markup(tmp_path, block_and_document):
    block, document = block_and_document

    def compile_fn(source, work_dir):
        raise OSError("No space left on device")

    bridge = RenderBridge(compile_fn=compile_fn, work_root=tmp_path)

    preview = bridge.render(block, document)
    queued = bridge.submit(block, document).result(timeout=5)

    assert not preview.success
    assert preview.fallback == r"$\frac{a\vert }{b}$"
    assert preview.result.errors == ["No space left on device"]
    assert not queued.success
    assert bridge.preview(block.block_id).generation == 2
    with pytest.raises(RenderError, match="No space left"):
        queued.raise_for_status()
    bridge.shutdown()


@pytest.mark.unit
def test_missing_compiler_fails_soft(tmp_path, monkeypatch):
    monkeypatch.setattr(compiler, "LATEX_COMPILER", "mathpad-no-such-latex")

    result = compile_snippet(r"\documentclass{article}", tmp_path)

    assert not result.success
    assert result.png_path is None
    assert result.errors
    assert (tmp_path / "main.tex").exists()


@pytest.mark.unit
def test_parse_latex_log():
    log = "\n".join(
        [
            "! Undefined control sequence.",
            "LaTeX Warning: Reference `x' on page 1 undefined.",
            "Overfull \\hbox (1.2pt too wide) in paragraph",
        ]
    )

    errors, warnings = _parse_latex_log(log)

    assert errors == ["Undefined control sequence."]
    assert warnings == ["Reference `x' on page 1 undefined.", "1.2pt too wide"]
