"""
LaTeX Preview Compilation

Compiles a standalone LaTeX source to a tightly cropped PNG:
latex (DVI output) followed by dvipng.
"""

import os
import re
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()

LATEX_COMPILER = os.getenv("LATEX_COMPILER", "latex")
DVIPNG = os.getenv("DVIPNG", "dvipng")
RENDER_DPI = int(os.getenv("RENDER_DPI", "192"))
KEEP_LATEX_ARTIFACTS = os.getenv("KEEP_LATEX_ARTIFACTS", "false").lower() == "true"

# LaTeX intermediate files created during compilation
LATEX_ARTIFACTS = [".aux", ".log", ".dvi"]


@dataclass
class RenderResult:
    """
    Result of a preview render.

    Attributes:
        success: Whether a PNG was produced
        png_path: Path to the PNG (None if failed)
        stdout: Standard output of the tools that ran
        stderr: Standard error of the tools that ran
        errors: List of parsed LaTeX or tool errors
        warnings: List of parsed LaTeX warnings
    """

    success: bool
    png_path: Optional[Path] = None
    stdout: str = ""
    stderr: str = ""
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


def _parse_latex_log(log_content: str) -> tuple[List[str], List[str]]:
    """
    Parse LaTeX log file for errors and warnings.

    Args:
        log_content: Content of the .log file

    Returns:
        Tuple of (errors, warnings)
    """
    errors = []
    warnings = []

    # LaTeX error pattern: "! Error message"
    error_pattern = re.compile(r"^! (.+)$", re.MULTILINE)
    for match in error_pattern.finditer(log_content):
        errors.append(match.group(1).strip())

    warning_patterns = [
        r"LaTeX Warning: (.+)",
        r"Package \w+ Warning: (.+)",
        r"Overfull \\hbox \((.+)\)",
        r"Underfull \\hbox \((.+)\)",
    ]
    for pattern in warning_patterns:
        compiled = re.compile(pattern, re.MULTILINE)
        for match in compiled.finditer(log_content):
            warnings.append(match.group(1).strip())

    return errors, warnings


def _run(cmd: List[str], cwd: Path) -> subprocess.CompletedProcess:
    """Run a tool, turning a missing executable into a failed process."""
    try:
        return subprocess.run(
            cmd,
            cwd=cwd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",  # Replace invalid UTF-8 bytes instead of crashing
            stdin=subprocess.DEVNULL,
        )
    except FileNotFoundError as e:
        return subprocess.CompletedProcess(cmd, returncode=127, stdout="", stderr=str(e))


def _remove_artifacts(work_dir: Path, stem: str) -> None:
    for ext in LATEX_ARTIFACTS:
        artifact_path = work_dir / f"{stem}{ext}"
        if artifact_path.exists():
            artifact_path.unlink()


def compile_snippet(
    latex_source: str,
    work_dir: Path,
    stem: str = "main",
    dpi: int = RENDER_DPI,
    keep_artifacts: bool = KEEP_LATEX_ARTIFACTS,
) -> RenderResult:
    """
    Compile a standalone LaTeX document to PNG.

    Args:
        latex_source: Complete LaTeX document
        work_dir: Directory for the .tex file and outputs (created if missing)
        stem: Base file name (default: main)
        dpi: dvipng resolution (default: RENDER_DPI env, 192)
        keep_artifacts: Keep .aux/.log/.dvi (default: KEEP_LATEX_ARTIFACTS env)

    Returns:
        RenderResult with success status and diagnostic information
    """
    work_dir = Path(work_dir).resolve()
    work_dir.mkdir(parents=True, exist_ok=True)
    tex_file = work_dir / f"{stem}.tex"
    dvi_file = work_dir / f"{stem}.dvi"
    png_file = work_dir / f"{stem}.png"
    log_file = work_dir / f"{stem}.log"

    # Stale outputs would make a failed run look successful
    for old_file in [dvi_file, png_file, log_file]:
        if old_file.exists():
            old_file.unlink()

    tex_file.write_text(latex_source, encoding="utf-8")

    latex_cmd = [
        LATEX_COMPILER,
        "-interaction=nonstopmode",
        "-output-format=dvi",
        f"-output-directory={work_dir}",
        tex_file.name,
    ]
    latex_run = _run(latex_cmd, work_dir)
    stdout = [latex_run.stdout]
    stderr = [latex_run.stderr]

    errors: List[str] = []
    warnings: List[str] = []
    if log_file.exists():
        # latex writes log files in latin-1 (font metadata contains non-UTF-8)
        errors, warnings = _parse_latex_log(log_file.read_text(encoding="latin-1"))

    if latex_run.returncode != 0 or not dvi_file.exists():
        if not errors:
            errors.append(
                latex_run.stderr.strip() or f"{LATEX_COMPILER} exited with {latex_run.returncode}"
            )
        if not keep_artifacts:
            _remove_artifacts(work_dir, stem)
        return RenderResult(
            success=False,
            stdout="\n".join(stdout),
            stderr="\n".join(stderr),
            errors=errors,
            warnings=warnings,
        )

    dvipng_cmd = [DVIPNG, dvi_file.name, "-o", png_file.name, "-T", "tight", "-D", str(dpi)]
    dvipng_run = _run(dvipng_cmd, work_dir)
    stdout.append(dvipng_run.stdout)
    stderr.append(dvipng_run.stderr)

    success = dvipng_run.returncode == 0 and png_file.exists()
    if not success:
        errors.append(
            dvipng_run.stderr.strip() or f"{DVIPNG} exited with {dvipng_run.returncode}"
        )

    if not keep_artifacts:
        _remove_artifacts(work_dir, stem)

    return RenderResult(
        success=success,
        png_path=png_file if success else None,
        stdout="\n".join(stdout),
        stderr="\n".join(stderr),
        errors=errors,
        warnings=warnings,
    )
