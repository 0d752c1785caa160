"""
Rendering context logger.

Provides logging interface for rendering context with automatic [render] prefix.
All rendering modules should import from this module, not from utils.logger directly.
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from loguru import logger

from mathpad.utils.logger import setup_logger as _setup_logger

load_dotenv()

CONTEXT_PREFIX = "[render]"


def setup_rendering_logger(log_dir: Optional[Path] = None, console: bool = True) -> Path:
    """
    Setup logger for rendering context.

    Configures loguru with provenance tracking and rendering-specific context.

    Args:
        log_dir: Directory for this rendering session (default: timestamped under LOGS_PATH)
        console: Also log INFO and above to stdout

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="render",
        log_dir=log_dir,
        extra_provenance={
            "LaTeX compiler": os.getenv("LATEX_COMPILER", "latex"),
            "DVI converter": os.getenv("DVIPNG", "dvipng"),
        },
        console=console,
    )


# Wrapper functions with automatic [render] prefix


def _log_success(message: str) -> None:
    """Log success message with [render] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [render] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [render] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [render] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level rendering-specific logging helpers


def log_render_start(block_id: str, generation: int, work_dir: Path) -> None:
    """Log start of a preview render."""
    _log_debug(f"Rendering {block_id} (request {generation}) in {work_dir}")


def log_render_result(
    block_id: str,
    result,  # RenderResult
    elapsed_time: float,
    verbose: bool = False,
) -> None:
    """
    Log render result with diagnostics.

    Args:
        block_id: Block identifier
        result: RenderResult from compile_snippet()
        elapsed_time: Time taken to render
        verbose: Show compiler stdout/stderr on success too
    """
    if result.success:
        _log_success(f"{block_id}: rendered ({elapsed_time:.2f}s)")
        if result.png_path:
            _log_debug(f"  PNG: {result.png_path}")
    else:
        _log_warning(f"{block_id}: render failed, showing raw markup ({elapsed_time:.2f}s)")
        for i, err in enumerate(result.errors[:5], 1):
            _log_warning(f"  Error {i}: {err}")
        if len(result.errors) > 5:
            _log_warning(f"  ... and {len(result.errors) - 5} more errors")

    for i, warn in enumerate(result.warnings[:3], 1):
        _log_debug(f"  Warning {i}: {warn}")

    # opt(raw=True) keeps multi-line compiler output unformatted
    if verbose or not result.success:
        if result.stdout:
            logger.opt(raw=True).debug(
                f"\n{'=' * 80}\nLATEX STDOUT:\n{'=' * 80}\n{result.stdout}\n"
            )
        if result.stderr:
            logger.opt(raw=True).debug(
                f"\n{'=' * 80}\nLATEX STDERR:\n{'=' * 80}\n{result.stderr}\n"
            )
