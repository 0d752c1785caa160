"""
Editing context logger.

Provides logging interface for editing context with automatic [edit] prefix.
All editing modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path
from typing import Optional

from loguru import logger

from mathpad.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[edit]"


def setup_editing_logger(log_dir: Optional[Path] = None, console: bool = True) -> Path:
    """
    Setup logger for editing context.

    Args:
        log_dir: Directory for this editing session (default: timestamped under LOGS_PATH)
        console: Also log INFO and above to stdout

    Returns:
        Path to log file
    """
    return _setup_logger(context_name="edit", log_dir=log_dir, console=console)


# Wrapper functions with automatic [edit] prefix


def _log_success(message: str) -> None:
    """Log success message with [edit] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [edit] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [edit] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [edit] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level editing-specific logging helpers


def log_key(block_id: str, key: str, handled_by: str, cursor: int, mode: str) -> None:
    """Log one dispatched keystroke."""
    _log_debug(f"{block_id}: {key!r} -> {handled_by} (cursor={cursor}, mode={mode})")


def log_replacement(block_id: str, shorthand: str, canonical: str) -> None:
    """Log a successful shorthand resolution."""
    _log_success(f"{block_id}: resolved \\{shorthand} -> {canonical}")
