"""
Render Bridge

Turns a block into a preview image. Requests are snapshotted at submission
(the buffer keeps changing while a render runs) and tagged with a per-block
generation number. Responses may complete out of order; a response older than
the preview already shown is discarded. A failed render shows the raw markup
instead, including when the compiler itself raises. The bridge never writes
to a buffer.
"""

import os
import shutil
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Optional

from dotenv import load_dotenv

from mathpad.contexts.assembly.assembler import render_block_document
from mathpad.contexts.assembly.document import Document, TextBlock
from mathpad.contexts.rendering.compiler import RenderResult, compile_snippet
from mathpad.contexts.rendering.exceptions import RenderError
from mathpad.contexts.rendering.logger import (
    _log_debug,
    _log_error,
    log_render_result,
    log_render_start,
)

load_dotenv()

RENDER_PATH = Path(os.getenv("RENDER_PATH", "outs/render"))

CompileFn = Callable[[str, Path], RenderResult]


@dataclass(frozen=True)
class RenderRequest:
    """Snapshot of one block taken when a render was requested."""

    block_id: str
    generation: int
    source: str
    markup: str


@dataclass
class Preview:
    """
    What is displayed for a block.

    Attributes:
        block_id: Block identifier
        generation: Request the preview came from
        result: Render result (image path, diagnostics)
        markup: Block markup at request time, shown when rendering failed
    """

    block_id: str
    generation: int
    result: RenderResult
    markup: str

    @property
    def success(self) -> bool:
        return self.result.success

    @property
    def image_path(self) -> Optional[Path]:
        return self.result.png_path

    @property
    def fallback(self) -> Optional[str]:
        """Raw markup to display instead of an image, None on success."""
        return None if self.result.success else self.markup

    def raise_for_status(self) -> "Preview":
        """
        Raises:
            RenderError: If the render failed
        """
        if not self.result.success:
            raise RenderError(self.block_id, self.result)
        return self


class RenderBridge:
    """
    Per-block preview renderer with superseding requests.

    Args:
        compile_fn: Function (latex_source, work_dir) -> RenderResult
        work_root: Directory under which each request gets its own work dir
        max_workers: Concurrent renders for submit()
        on_preview: Called with each Preview that gets displayed
    """

    def __init__(
        self,
        compile_fn: CompileFn = compile_snippet,
        work_root: Path = RENDER_PATH,
        max_workers: int = 2,
        on_preview: Optional[Callable[[Preview], object]] = None,
    ):
        self.compile_fn = compile_fn
        self.work_root = Path(work_root)
        self.on_preview = on_preview
        self._executor = ThreadPoolExecutor(max_workers=max_workers)
        self._lock = threading.Lock()
        self._generations: Dict[str, int] = {}
        self._previews: Dict[str, Preview] = {}

    def snapshot(self, block: TextBlock, document: Document) -> RenderRequest:
        """Capture the block's current source under a new generation number."""
        with self._lock:
            generation = self._generations.get(block.block_id, 0) + 1
            self._generations[block.block_id] = generation
        return RenderRequest(
            block_id=block.block_id,
            generation=generation,
            source=render_block_document(block, document),
            markup=block.buffer.render(),
        )

    def _work_dir(self, request: RenderRequest) -> Path:
        return self.work_root / request.block_id / str(request.generation)

    def _execute(self, request: RenderRequest) -> Optional[Preview]:
        work_dir = self._work_dir(request)
        log_render_start(request.block_id, request.generation, work_dir)

        start_time = time.time()
        try:
            result = self.compile_fn(request.source, work_dir)
        except Exception as e:
            _log_error(f"{request.block_id}: compiler raised {type(e).__name__}: {e}")
            result = RenderResult(success=False, errors=[str(e)])
        log_render_result(request.block_id, result, time.time() - start_time)

        return self._accept(request, result)

    def _accept(self, request: RenderRequest, result: RenderResult) -> Optional[Preview]:
        preview = Preview(
            block_id=request.block_id,
            generation=request.generation,
            result=result,
            markup=request.markup,
        )
        with self._lock:
            shown = self._previews.get(request.block_id)
            if shown is not None and shown.generation > request.generation:
                _log_debug(
                    f"{request.block_id}: discarding request {request.generation}, "
                    f"request {shown.generation} already shown"
                )
                shutil.rmtree(self._work_dir(request), ignore_errors=True)
                return None
            self._previews[request.block_id] = preview

        if shown is not None:
            shutil.rmtree(self._work_dir(_request_of(shown)), ignore_errors=True)
        if self.on_preview is not None:
            self.on_preview(preview)
        return preview

    def render(self, block: TextBlock, document: Document) -> Optional[Preview]:
        """
        Render synchronously.

        Returns:
            The displayed Preview, or None if a newer one was already shown
        """
        return self._execute(self.snapshot(block, document))

    def submit(self, block: TextBlock, document: Document) -> "Future[Optional[Preview]]":
        """Snapshot the block now and render it in the background."""
        return self._executor.submit(self._execute, self.snapshot(block, document))

    def preview(self, block_id: str) -> Optional[Preview]:
        """Preview currently displayed for a block."""
        with self._lock:
            return self._previews.get(block_id)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)


def _request_of(preview: Preview) -> RenderRequest:
    return RenderRequest(preview.block_id, preview.generation, source="", markup=preview.markup)
