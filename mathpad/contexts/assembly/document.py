"""
Document model: positioned blocks and the capability set they require.

A Document owns its blocks. Each text block owns its own EditBuffer; nothing
is shared between blocks except the document's capability set (languages that
need babel support), which is updated idempotently.
"""

import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from omegaconf import OmegaConf

from mathpad.contexts.editing.buffer import EditBuffer
from mathpad.contexts.editing.config import get_editor_config
from mathpad.contexts.editing.modes import script_language

# CSS pixels per centimetre (96 dpi)
PX_PER_CM = 75.59


def px_to_cm(px: float) -> float:
    """Convert CSS pixels to centimetres."""
    return float(px) / PX_PER_CM


@dataclass
class Geometry:
    """Block position and size in CSS pixels, relative to the page origin."""

    left: float = 50.0
    top: float = 50.0
    width: float = 200.0
    height: float = 50.0


@dataclass
class TextBlock:
    """Editable markup block."""

    block_id: str
    buffer: EditBuffer = field(default_factory=EditBuffer)
    geometry: Geometry = field(default_factory=Geometry)

    @property
    def latex(self) -> str:
        """Block content without any cursor marker."""
        return self.buffer.text


@dataclass
class ImageBlock:
    """Positioned image, referenced by file name at export time."""

    block_id: str
    filename: str
    geometry: Geometry = field(default_factory=Geometry)


Block = Union[TextBlock, ImageBlock]


class Document:
    """
    Ordered collection of blocks plus a language capability set.

    Attributes:
        blocks: Blocks in creation order
    """

    def __init__(self):
        self.blocks: List[Block] = []
        self._counter = 0
        self._languages: List[str] = []
        self._lock = threading.Lock()

    def _next_id(self, prefix: str) -> str:
        block_id = f"{prefix}-{self._counter}"
        self._counter += 1
        return block_id

    def new_text_block(self, text: str = "", geometry: Optional[Geometry] = None) -> TextBlock:
        block = TextBlock(
            block_id=self._next_id("block"),
            buffer=EditBuffer(text),
            geometry=geometry or Geometry(),
        )
        self.blocks.append(block)
        return block

    def add_image_block(self, filename: str, geometry: Optional[Geometry] = None) -> ImageBlock:
        block = ImageBlock(
            block_id=self._next_id("image-block"),
            filename=filename,
            geometry=geometry or Geometry(),
        )
        self.blocks.append(block)
        return block

    def get_block(self, block_id: str) -> Block:
        """
        Raises:
            KeyError: If no block has this id
        """
        for block in self.blocks:
            if block.block_id == block_id:
                return block
        raise KeyError(f"No block with id {block_id!r}")

    @property
    def text_blocks(self) -> List[TextBlock]:
        return [block for block in self.blocks if isinstance(block, TextBlock)]

    @property
    def image_blocks(self) -> List[ImageBlock]:
        return [block for block in self.blocks if isinstance(block, ImageBlock)]

    def require_language(self, language: str) -> bool:
        """
        Record that the document needs babel support for language.

        Returns:
            True if the language was newly added
        """
        with self._lock:
            if language in self._languages:
                return False
            self._languages.append(language)
            return True

    @property
    def languages(self) -> List[str]:
        """Required languages in the order they were first needed."""
        with self._lock:
            return list(self._languages)

    @property
    def needs_graphics(self) -> bool:
        return bool(self.image_blocks)


def load_layout(layout_path: Path) -> Document:
    """
    Load a YAML layout file into a Document.

    Expected structure:
        languages: [bulgarian]          # optional
        blocks:
          - type: text                  # default
            content: '$\\frac{a}{b}$'
            geometry: {left: 50, top: 50, width: 200, height: 50}
          - type: image
            filename: plot.png

    Args:
        layout_path: Path to the layout YAML

    Returns:
        Document with blocks in file order

    Raises:
        ValueError: If the layout has no 'blocks' list or an unknown block type
    """
    raw = OmegaConf.to_container(OmegaConf.load(layout_path), resolve=True)
    if not isinstance(raw, dict) or not isinstance(raw.get("blocks"), list):
        raise ValueError(f"Layout must contain a 'blocks' list: {layout_path}")

    scripts = get_editor_config().scripts
    document = Document()
    for language in raw.get("languages") or []:
        document.require_language(language)

    for entry in raw["blocks"]:
        geometry = Geometry(**(entry.get("geometry") or {}))
        block_type = entry.get("type", "text")
        if block_type == "text":
            content = entry.get("content") or ""
            document.new_text_block(content, geometry)
            for char in content:
                language = script_language(char, scripts)
                if language is not None:
                    document.require_language(language)
        elif block_type == "image":
            document.add_image_block(entry["filename"], geometry)
        else:
            raise ValueError(f"Unknown block type {block_type!r} in {layout_path}")

    return document
