"""
Preamble construction.

The preamble is derived from the document's capability set instead of being
mutated while typing: languages add a babel line, image blocks add graphicx.
"""

from typing import Iterable, List

DOCUMENT_CLASS = r"\documentclass[12pt]{article}"
BASE_PACKAGES = [
    r"\usepackage[T1]{fontenc}",
    r"\usepackage[absolute,overlay]{textpos}",
]
GRAPHICS_PACKAGE = r"\usepackage{graphicx}"
BEGIN_DOCUMENT = [
    r"\begin{document}",
    r"\pagenumbering{gobble}",
]
END_DOCUMENT = r"\end{document}"


def babel_line(languages: Iterable[str]) -> str:
    """
    Babel declaration for the given languages, English first.

    Example:
        >>> babel_line(["bulgarian"])
        '\\\\usepackage[english,bulgarian]{babel}'
    """
    options = ["english"] + [language for language in languages if language != "english"]
    return rf"\usepackage[{','.join(options)}]{{babel}}"


def build_preamble(languages: Iterable[str] = (), graphics: bool = False) -> str:
    """
    Build the document preamble up to and including \\pagenumbering{gobble}.

    Args:
        languages: Languages that need babel support
        graphics: Include graphicx (needed for image blocks)

    Returns:
        Preamble text, one declaration per line, without a trailing newline
    """
    languages = list(languages)
    lines: List[str] = [DOCUMENT_CLASS]
    if languages:
        lines.append(babel_line(languages))
    lines.extend(BASE_PACKAGES)
    if graphics:
        lines.append(GRAPHICS_PACKAGE)
    lines.extend(BEGIN_DOCUMENT)
    return "\n".join(lines)
