"""LaTeX assembly, validation and PDF compilation.

Assembles ordered chapter contents into a full document, sanity-checks its
structure, and compiles it with an external TeX engine.

Build files live in {OUTPUT_DIR}/{job_id}/ (document.tex, document.pdf).
Compilation never raises: every failure is reported in the CompileResult.
"""

from __future__ import annotations

import asyncio
import logging
import os
import re
import shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Sequence

import aiofiles

from learndoc.models import CompileResult, DocumentRequest, LatexValidation

from .content_formatter import escape_latex

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_DIR = "/tmp/learndoc/output"
DEFAULT_COMPILER = "pdflatex"
DEFAULT_COMPILE_TIMEOUT_SECONDS = 120.0

TEX_FILENAME = "document.tex"
PDF_FILENAME = "document.pdf"

# Two passes so the table of contents is populated
COMPILE_PASSES = 2

DOCUMENT_TEMPLATE = r"""\documentclass[11pt,a4paper]{article}

\usepackage[utf8]{inputenc}
\usepackage[T1]{fontenc}
\usepackage{amsmath,amssymb}
\usepackage{graphicx}
\usepackage{listings}
\usepackage{enumitem}
\usepackage{geometry}
\usepackage{hyperref}
\geometry{margin=1in}

\hypersetup{
  colorlinks=true,
  linkcolor=blue,
  urlcolor=blue
}

\lstset{
  basicstyle=\ttfamily\small,
  breaklines=true,
  frame=single
}

\title{<<TITLE>>}
\author{<<AUTHOR>>}
\date{<<DATE>>}

\begin{document}

\maketitle

\begin{center}
<<METADATA>>
\end{center}

\begin{abstract}
<<ABSTRACT>>
\end{abstract}

\tableofcontents
\newpage

<<BODY>>

\end{document}
"""

DOCUMENT_AUTHOR = "Learning Document Generator"

_BEGIN_ENV = re.compile(r"\\begin\{([^}]+)\}")
_END_ENV = re.compile(r"\\end\{([^}]+)\}")


def _count_unescaped_braces(text: str) -> tuple[int, int]:
    """Count { and } that are not escaped with a backslash."""
    opening = closing = 0
    escaped = False
    for ch in text:
        if escaped:
            escaped = False
            continue
        if ch == "\\":
            escaped = True
        elif ch == "{":
            opening += 1
        elif ch == "}":
            closing += 1
    return opening, closing


class LatexService:
    """Document assembly and compilation.

    Configuration (env vars):
    - OUTPUT_DIR: Where build directories are created
    - LATEX_COMPILER: TeX engine executable (default: pdflatex)
    - LATEX_COMPILE_TIMEOUT_SECONDS: Per-pass timeout (default: 120)
    """

    def __init__(
        self,
        output_dir: Optional[str | Path] = None,
        compiler: Optional[str] = None,
        compile_timeout: Optional[float] = None,
    ):
        self._output_dir = Path(output_dir or os.environ.get("OUTPUT_DIR", DEFAULT_OUTPUT_DIR))
        self._compiler = compiler or os.environ.get("LATEX_COMPILER", DEFAULT_COMPILER)
        self._compile_timeout = (
            compile_timeout
            if compile_timeout is not None
            else float(os.environ.get("LATEX_COMPILE_TIMEOUT_SECONDS", DEFAULT_COMPILE_TIMEOUT_SECONDS))
        )

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    def get_job_dir(self, job_id: str) -> Path:
        return self._output_dir / job_id

    def get_tex_path(self, job_id: str) -> Path:
        return self.get_job_dir(job_id) / TEX_FILENAME

    def get_pdf_path(self, job_id: str) -> Path:
        return self.get_job_dir(job_id) / PDF_FILENAME

    # ------------------------------------------------------------------
    # Assembly
    # ------------------------------------------------------------------

    def generate_document(
        self,
        request: DocumentRequest,
        chapter_contents: Sequence[str],
    ) -> str:
        """Assemble chapter contents into a complete LaTeX document.

        Args:
            request: The originating request (title, level, chapter count).
            chapter_contents: Chapter LaTeX in outline order.

        Returns:
            Full document text.
        """
        level = request.complexity.value.capitalize()
        article = "An" if level[0] in "AEIOU" else "A"
        title = f"{escape_latex(request.topic)}: {article} {level} Learning Guide"
        abstract = (
            f"This {len(chapter_contents)}-chapter document introduces "
            f"{escape_latex(request.topic)} at the {request.complexity.value} level. "
            "Each chapter builds on the previous ones and closes with exercises "
            "and a summary."
        )
        metadata = (
            f"\\textit{{Complexity: {level} \\textbar{{}} "
            f"Chapters: {len(chapter_contents)}}}"
        )
        body = "\n\\newpage\n\n".join(chapter.strip() for chapter in chapter_contents)

        return (
            DOCUMENT_TEMPLATE
            .replace("<<TITLE>>", title)
            .replace("<<AUTHOR>>", DOCUMENT_AUTHOR)
            .replace("<<DATE>>", datetime.now(timezone.utc).strftime("%B %d, %Y"))
            .replace("<<METADATA>>", metadata)
            .replace("<<ABSTRACT>>", abstract)
            .replace("<<BODY>>", body)
        )

    def validate_latex_content(self, content: str) -> LatexValidation:
        """Structural sanity check. Reports problems, never raises."""
        errors: list[str] = []

        if "\\documentclass" not in content:
            errors.append("Missing \\documentclass declaration")
        if "\\begin{document}" not in content:
            errors.append("Missing \\begin{document}")
        if "\\end{document}" not in content:
            errors.append("Missing \\end{document}")

        opening, closing = _count_unescaped_braces(content)
        if opening != closing:
            errors.append(f"Unbalanced braces: {opening} opening vs {closing} closing")

        begins: dict[str, int] = {}
        for env in _BEGIN_ENV.findall(content):
            begins[env] = begins.get(env, 0) + 1
        ends: dict[str, int] = {}
        for env in _END_ENV.findall(content):
            ends[env] = ends.get(env, 0) + 1

        for env in sorted(set(begins) | set(ends)):
            if begins.get(env, 0) != ends.get(env, 0):
                errors.append(
                    f"Unmatched environment '{env}': "
                    f"{begins.get(env, 0)} \\begin vs {ends.get(env, 0)} \\end"
                )

        return LatexValidation(valid=not errors, errors=errors)

    # ------------------------------------------------------------------
    # Compilation
    # ------------------------------------------------------------------

    async def write_tex(self, content: str, job_id: str) -> Path:
        """Write the document into the job's build directory."""
        job_dir = self.get_job_dir(job_id)
        job_dir.mkdir(parents=True, exist_ok=True)
        tex_path = self.get_tex_path(job_id)
        async with aiofiles.open(tex_path, "w", encoding="utf-8") as f:
            await f.write(content)
        return tex_path

    async def compile_to_pdf(self, content: str, job_id: str) -> CompileResult:
        """Compile the document to PDF.

        Args:
            content: Full LaTeX document.
            job_id: Correlation key; names the build directory.

        Returns:
            CompileResult with the PDF path on success, or the failure reason.
        """
        compiler_path = shutil.which(self._compiler)
        if not compiler_path:
            message = f"LaTeX compiler '{self._compiler}' not found on PATH"
            logger.warning(f"[{job_id}] {message}")
            return CompileResult(success=False, error=message)

        try:
            tex_path = await self.write_tex(content, job_id)
        except OSError as e:
            logger.error(f"[{job_id}] Could not write LaTeX source: {e}")
            return CompileResult(success=False, error=f"Could not write LaTeX source: {e}")

        cmd = [
            compiler_path,
            "-interaction=nonstopmode",
            "-halt-on-error",
            f"-output-directory={tex_path.parent}",
            tex_path.name,
        ]

        for attempt in range(1, COMPILE_PASSES + 1):
            logger.info(f"[{job_id}] Running {self._compiler} (pass {attempt}/{COMPILE_PASSES})")
            error = await self._run_compiler(cmd, tex_path.parent)
            if error:
                logger.warning(f"[{job_id}] LaTeX compilation failed: {error}")
                return CompileResult(success=False, error=error)

        pdf_path = self.get_pdf_path(job_id)
        if not pdf_path.exists():
            return CompileResult(
                success=False,
                error=f"Compilation did not produce {PDF_FILENAME}",
            )

        logger.info(f"[{job_id}] PDF generated: {pdf_path}")
        return CompileResult(success=True, pdf_path=str(pdf_path))

    async def _run_compiler(self, cmd: list[str], cwd: Path) -> Optional[str]:
        """Run one compiler pass. Returns an error description, or None on success."""
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                cwd=str(cwd),
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except OSError as e:
            return f"Could not start {self._compiler}: {e}"

        try:
            stdout, _ = await asyncio.wait_for(proc.communicate(), timeout=self._compile_timeout)
        except asyncio.TimeoutError:
            return f"{self._compiler} timed out after {self._compile_timeout:.0f}s"
        finally:
            # Timeout or cancellation: never leave the compiler running
            if proc.returncode is None:
                proc.kill()
                await proc.wait()

        if proc.returncode != 0:
            output = stdout.decode("utf-8", errors="replace") if stdout else ""
            tail = "\n".join(output.strip().splitlines()[-15:])
            return f"{self._compiler} exited with code {proc.returncode}\n{tail}".strip()

        return None

    def cleanup_job_files(self, job_id: str) -> bool:
        """Remove a job's build directory.

        Returns:
            True if something was removed.
        """
        job_dir = self.get_job_dir(job_id)
        if not job_dir.exists():
            return False
        try:
            shutil.rmtree(job_dir)
        except OSError as e:
            logger.warning(f"Failed to clean up build files for job {job_id}: {e}")
            return False
        logger.info(f"Cleaned up build files for job {job_id}")
        return True
