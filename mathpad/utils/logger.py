"""
Logging setup shared by the editing and rendering contexts.

Each context logs through its own prefixed wrappers (contexts/{context}/logger.py);
this module only configures loguru sinks for a session and writes the
provenance header.
"""

import os
import sys
from pathlib import Path
from typing import Dict, Optional

from dotenv import load_dotenv
from loguru import logger

from mathpad import __version__
from mathpad.utils.timestamp import now

load_dotenv()

LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <7} | {thread.name} | {message}"
CONSOLE_FORMAT = "{time:HH:mm:ss} | <level>{level: <7}</level> | <level>{message}</level>"

# Console colors; renders and keystrokes stay readable next to warnings
LEVEL_COLORS = {
    "DEBUG": "<dim>",
    "WARNING": "<yellow>",
    "ERROR": "<red>",
    "CRITICAL": "<bold><red>",
}


def session_log_dir(context_name: str) -> Path:
    """Fresh log directory for one session, e.g. outs/logs/edit_20251114_123456."""
    return LOGS_PATH / f"{context_name}_{now()}"


def setup_logger(
    context_name: str,
    log_dir: Optional[Path] = None,
    extra_provenance: Optional[Dict[str, object]] = None,
    level_colors: Optional[Dict[str, str]] = None,
    console: bool = True,
) -> Path:
    """
    Configure loguru sinks for a session.

    DEBUG and above go to <log_dir>/<context_name>.log; INFO and above also go
    to stdout unless console is False. Render threads log concurrently, so
    the file sink is enqueued.

    Args:
        context_name: Context identifier ("edit", "render")
        log_dir: Directory for this session (default: session_log_dir(context_name))
        extra_provenance: Additional key-value pairs for the provenance header
        level_colors: Console color overrides, e.g. {"INFO": "<cyan>"}
        console: Also log to stdout

    Returns:
        Path to the log file

    Example:
        log_file = setup_logger("render", extra_provenance={"DPI": 192})
    """
    if log_dir is None:
        log_dir = session_log_dir(context_name)
    log_dir.mkdir(exist_ok=True, parents=True)
    log_file = log_dir / f"{context_name}.log"

    logger.remove()

    for level_name, color in {**LEVEL_COLORS, **(level_colors or {})}.items():
        logger.level(level_name, color=color)

    logger.add(log_file, format=FILE_FORMAT, level="DEBUG", enqueue=True)
    if console:
        logger.add(sys.stdout, format=CONSOLE_FORMAT, level="INFO", colorize=True)

    log_provenance(context_name, extra_provenance)
    return log_file


def log_provenance(context_name: str, extra_context: Optional[Dict[str, object]] = None) -> None:
    """
    Write the session header: what ran, where, and with which versions.

    Args:
        context_name: Context identifier
        extra_context: Additional key-value pairs to log
    """
    header = {
        "Context": context_name,
        "mathpad": __version__,
        "Command": " ".join(sys.argv),
        "Working directory": Path.cwd(),
        "Python": sys.version.split()[0],
        **(extra_context or {}),
    }

    logger.info("=" * 80)
    for key, value in header.items():
        logger.info(f"{key}: {value}")
    logger.info("=" * 80)
