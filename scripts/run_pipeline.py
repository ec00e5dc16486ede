#!/usr/bin/env python3
"""Pipeline runner CLI for generating a learning document without the API.

Runs one job through the same orchestrator the API uses, prints progress
while polling, and writes the LaTeX source (and PDF, when compilation
succeeds) to the output directory.

Usage:
    # Default: 6 beginner chapters, local Ollama
    python scripts/run_pipeline.py --topic "Graph Theory"

    # Advanced, 8 chapters, custom output directory
    python scripts/run_pipeline.py --topic "Compilers" --complexity advanced --chapters 8 --out build/

    # Use OpenAI instead of Ollama
    LLM_DEFAULT_PROVIDER=openai python scripts/run_pipeline.py --topic "Linear Algebra"
"""

import argparse
import asyncio
import logging
import shutil
import sys
from pathlib import Path

from dotenv import load_dotenv

from learndoc.models import ComplexityLevel, DEFAULT_CHAPTERS, DocumentRequest, JobStatus
from learndoc.services import DocumentGenerator, LatexService

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

POLL_INTERVAL_SECONDS = 2.0


async def run_pipeline(request: DocumentRequest, out_dir: Path) -> int:
    """Run one job to completion and copy its deliverables to ``out_dir``.

    Returns:
        Process exit code.
    """
    generator = DocumentGenerator(latex_service=LatexService(output_dir=out_dir / "build"))
    job = await generator.create_job(request)
    logger.info(f"Job {job.id}: submitted")

    last_progress = -1.0
    while not job.is_terminal():
        await asyncio.sleep(POLL_INTERVAL_SECONDS)
        job = await generator.get_job(job.id)
        if job.progress != last_progress:
            print(f"[{job.status.value:>10}] {job.progress:5.1f}%")
            last_progress = job.progress

    job = await generator.wait_for_job(job.id)

    if job.status == JobStatus.failed:
        logger.error(f"Job {job.id}: failed: {job.error}")
        return 1

    out_dir.mkdir(parents=True, exist_ok=True)
    tex_path = out_dir / "document.tex"
    tex_path.write_text(job.result.latex_content, encoding="utf-8")
    print(f"LaTeX written to {tex_path}")

    if job.result.pdf_generated and job.result.pdf_path:
        pdf_path = out_dir / "document.pdf"
        shutil.copyfile(job.result.pdf_path, pdf_path)
        print(f"PDF written to {pdf_path}")
    else:
        print(f"PDF not generated: {job.result.pdf_error}")

    print(f"Chapters: {', '.join(job.chapter_titles)}")
    return 0


def main():
    load_dotenv()

    parser = argparse.ArgumentParser(
        description="Generate a structured LaTeX learning document",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--topic",
        required=True,
        help="Subject of the document",
    )
    parser.add_argument(
        "--complexity",
        choices=[level.value for level in ComplexityLevel],
        default=ComplexityLevel.beginner.value,
        help="Audience level (default: beginner)",
    )
    parser.add_argument(
        "--chapters",
        type=int,
        default=DEFAULT_CHAPTERS,
        help=f"Number of chapters (default: {DEFAULT_CHAPTERS})",
    )
    parser.add_argument(
        "--out",
        type=Path,
        default=Path("learndoc_output"),
        help="Output directory (default: learndoc_output/)",
    )

    args = parser.parse_args()

    try:
        request = DocumentRequest(
            topic=args.topic,
            complexity=ComplexityLevel(args.complexity),
            chapters=args.chapters,
        )
    except ValueError as e:
        print(f"Invalid request: {e}", file=sys.stderr)
        sys.exit(2)

    sys.exit(asyncio.run(run_pipeline(request, args.out)))


if __name__ == "__main__":
    main()
