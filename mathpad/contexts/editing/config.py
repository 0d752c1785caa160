"""
Editor configuration loading.

Reads config/editor.yaml (or the file named by MATHPAD_EDITOR_CONFIG) with
OmegaConf and exposes it as a plain dataclass.
"""

import os
import string
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional

from dotenv import load_dotenv
from omegaconf import OmegaConf

load_dotenv()

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "config" / "editor.yaml"
EDITOR_CONFIG_PATH = Path(os.getenv("MATHPAD_EDITOR_CONFIG", str(DEFAULT_CONFIG_PATH)))


@dataclass(frozen=True)
class EditorConfig:
    """
    Editor configuration.

    Attributes:
        symbols: Zero-argument command names (\\name -> \\name<space>)
        one_argument: One-argument command names (\\name -> \\name{<cursor>})
        macros: Explicit shorthand -> canonical markup with a <cursor> slot
        alphabet: Characters inserted literally in either mode
        scripts: Unicode name prefix -> babel language for text-mode input
    """

    symbols: List[str] = field(default_factory=list)
    one_argument: List[str] = field(default_factory=list)
    macros: Dict[str, str] = field(default_factory=dict)
    alphabet: frozenset = frozenset(string.ascii_letters + string.digits)
    scripts: Dict[str, str] = field(default_factory=dict)


def load_editor_config(config_path: Optional[Path] = None) -> EditorConfig:
    """
    Load editor.yaml into an EditorConfig.

    Args:
        config_path: Optional path to config file (defaults to MATHPAD_EDITOR_CONFIG
                     environment variable, then the packaged editor.yaml)

    Returns:
        EditorConfig with replacement sources and input alphabet
    """
    if config_path is None:
        config_path = EDITOR_CONFIG_PATH

    raw = OmegaConf.to_container(OmegaConf.load(config_path), resolve=True)

    replacements = raw.get("replacements") or {}
    input_config = raw.get("input") or {}

    alphabet = frozenset(
        string.ascii_letters + string.digits + (input_config.get("punctuation") or "")
    )

    return EditorConfig(
        symbols=list(replacements.get("symbols") or []),
        one_argument=list(replacements.get("one_argument") or []),
        macros=dict(replacements.get("macros") or {}),
        alphabet=alphabet,
        scripts=dict(input_config.get("scripts") or {}),
    )


@lru_cache(maxsize=1)
def get_editor_config() -> EditorConfig:
    """Process-wide editor configuration, loaded once."""
    return load_editor_config()
