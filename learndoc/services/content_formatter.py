"""Chapter content normalization.

Best-effort syntactic cleanup of model-written LaTeX. Never rejects input:
whatever comes in leaves as a chapter with a heading and tidy spacing.
"""

from __future__ import annotations

import re

_EXCESS_NEWLINES = re.compile(r"\n{4,}")
# Allows one level of nested braces in the title, e.g. \section{The \emph{Core} Idea}
_HEADING = re.compile(r"\\(section|subsection|subsubsection)\{((?:[^{}]|\{[^{}]*\})+)\}")
_BEGIN_ENV = re.compile(r"\\begin\{([^}]+)\}")
_END_ENV = re.compile(r"\\end\{([^}]+)\}")
_DOLLAR_DISPLAY_MATH = re.compile(r"\$\$([^$]+)\$\$")
_BLANK_LINE_RUNS = re.compile(r"\n\s*\n\s*\n")

_LATEX_SPECIALS = {
    "\\": r"\textbackslash{}",
    "&": r"\&",
    "%": r"\%",
    "$": r"\$",
    "#": r"\#",
    "_": r"\_",
    "{": r"\{",
    "}": r"\}",
    "~": r"\textasciitilde{}",
    "^": r"\textasciicircum{}",
}


def escape_latex(text: str) -> str:
    """Escape LaTeX special characters in plain text (titles, topics)."""
    return "".join(_LATEX_SPECIALS.get(ch, ch) for ch in text)


def format_chapter_content(generated_content: str, chapter_title: str) -> str:
    """Normalize raw chapter LaTeX.

    - inserts ``\\section{title}`` when the model left it out
    - limits newline runs, then ends every heading with a blank line
    - puts environments on their own lines
    - rewrites ``$$...$$`` as ``\\[ ... \\]``
    - collapses leftover blank-line runs and ends with exactly one newline

    Args:
        generated_content: Raw model output for one chapter.
        chapter_title: Title used for the inserted heading.

    Returns:
        Formatted chapter text.
    """
    formatted = generated_content or ""

    if "\\section{" not in formatted:
        formatted = f"\\section{{{escape_latex(chapter_title)}}}\n\n{formatted}"

    formatted = _EXCESS_NEWLINES.sub("\n\n\n", formatted)
    formatted = _HEADING.sub(lambda m: f"\\{m.group(1)}{{{m.group(2)}}}\n", formatted)
    formatted = _BEGIN_ENV.sub(lambda m: f"\n\\begin{{{m.group(1)}}}", formatted)
    formatted = _END_ENV.sub(lambda m: f"\\end{{{m.group(1)}}}\n", formatted)
    formatted = _DOLLAR_DISPLAY_MATH.sub(lambda m: f"\n\\[\n{m.group(1)}\n\\]\n", formatted)
    formatted = _BLANK_LINE_RUNS.sub("\n\n", formatted)

    return formatted.strip() + "\n"
