"""Document generation endpoints.

Async job-based API for learning document generation:
- POST /api/generate-document: Start generation (returns job_id)
- GET /api/job-status/{job_id}: Poll generation progress
- GET /api/download/{job_id}: Download the LaTeX source (or a JSON export)
- GET /api/download-pdf/{job_id}: Download the compiled PDF
- GET /api/jobs, GET /api/jobs/stats, DELETE /api/jobs/{job_id}: Administration

All JSON responses use the { data, error } envelope pattern.
"""

import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import FileResponse, JSONResponse, Response

from learndoc.api.dependencies import get_document_generator
from learndoc.api.exceptions import JobNotFoundError, ValidationError
from learndoc.api.response import (
    DOCUMENT_NOT_READY,
    INVALID_FORMAT,
    PDF_NOT_AVAILABLE,
    error_json,
    success_response,
)
from learndoc.models import (
    ComplexityLevel,
    DocumentRequest,
    GenerateDocumentData,
    GenerateDocumentRequest,
    GenerationJob,
    JobStatus,
    JobStatusData,
    MAX_CHAPTERS,
    MIN_CHAPTERS,
)
from learndoc.services import DocumentGenerator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Documents"])

MINUTES_PER_CHAPTER = 3

DOWNLOAD_FORMATS = ("latex", "tex", "json")


def download_filename(job: GenerationJob, extension: str) -> str:
    """Attachment name: topic with non-alphanumerics as ``_``, then complexity."""
    topic = re.sub(r"[^a-zA-Z0-9]", "_", job.request.topic)
    return f"{topic}_{job.request.complexity.value}.{extension}"


def format_elapsed(job: GenerationJob, now: Optional[datetime] = None) -> str:
    """Elapsed time rounded to whole minutes, e.g. "1 minute", "3 minutes"."""
    minutes = round(job.elapsed_ms(now) / 60000)
    return f"{minutes} minute{'' if minutes == 1 else 's'}"


def validate_generate_request(body: GenerateDocumentRequest) -> DocumentRequest:
    """Turn the raw body into a DocumentRequest or raise ValidationError."""
    topic = (body.topic or "").strip()
    if not topic or not body.complexity or body.chapters in (None, ""):
        raise ValidationError(
            "Missing required fields: topic, complexity, and chapters are required"
        )

    try:
        complexity = ComplexityLevel(body.complexity)
    except ValueError:
        allowed = ", ".join(level.value for level in ComplexityLevel)
        raise ValidationError(f"Invalid complexity level. Must be one of: {allowed}")

    try:
        chapters = int(str(body.chapters).strip())
    except ValueError:
        chapters = None
    if chapters is None or not MIN_CHAPTERS <= chapters <= MAX_CHAPTERS:
        raise ValidationError(
            f"Invalid chapter count. Must be between {MIN_CHAPTERS} and {MAX_CHAPTERS}"
        )

    return DocumentRequest(topic=topic, complexity=complexity, chapters=chapters)


async def _get_job_or_404(generator: DocumentGenerator, job_id: str) -> GenerationJob:
    job = await generator.get_job(job_id)
    if not job:
        raise JobNotFoundError(job_id)
    return job


def _document_not_ready(job: GenerationJob) -> JSONResponse:
    return error_json(
        400,
        DOCUMENT_NOT_READY,
        f"Job status: {job.status.value}. Document generation must be completed before download.",
    )


@router.post("/generate-document")
async def generate_document(
    body: GenerateDocumentRequest,
    generator: DocumentGenerator = Depends(get_document_generator),
) -> dict:
    """Start async document generation.

    Creates a background job and returns immediately with job_id.
    Poll /api/job-status/{job_id} for progress updates.
    """
    request = validate_generate_request(body)

    logger.info(
        f"Document generation request received: topic={request.topic!r}, "
        f"complexity={request.complexity.value}, chapters={request.chapters}"
    )

    job = await generator.create_job(request)

    data = GenerateDocumentData(
        job_id=job.id,
        status=job.status,
        progress=job.progress,
        estimated_time_minutes=request.chapters * MINUTES_PER_CHAPTER,
        request=request,
    )
    return success_response(data.model_dump(mode="json"))


@router.get("/job-status/{job_id}")
async def get_job_status(
    job_id: str,
    generator: DocumentGenerator = Depends(get_document_generator),
) -> dict:
    """Get generation job status."""
    job = await _get_job_or_404(generator, job_id)

    data = JobStatusData(
        job_id=job.id,
        status=job.status,
        progress=job.progress,
        start_time=job.start_time,
        end_time=job.end_time,
        elapsed_time=format_elapsed(job),
        request=job.request,
        chapter_titles=job.chapter_titles,
        error=job.error,
        has_result=job.result is not None,
        result_size=len(job.result.latex_content) if job.result else 0,
        pdf_generated=job.result.pdf_generated if job.result else None,
    )
    return success_response(data.model_dump(mode="json"))


@router.get("/download/{job_id}")
async def download_document(
    job_id: str,
    format: str = Query(default="latex", description="Download format: latex, tex or json"),
    generator: DocumentGenerator = Depends(get_document_generator),
):
    """Download the generated document.

    Returns:
        - latex/tex: the LaTeX source as an attachment
        - json: job metadata plus the LaTeX source as an attachment

    Errors:
        - JOB_NOT_FOUND: Job doesn't exist
        - DOCUMENT_NOT_READY: Job is not completed
        - INVALID_FORMAT: Unsupported format
    """
    job = await _get_job_or_404(generator, job_id)

    if job.status != JobStatus.completed or not job.result:
        return _document_not_ready(job)

    if format in ("latex", "tex"):
        filename = download_filename(job, "tex")
        logger.info(f"Serving LaTeX download for job {job_id}: {filename}")
        return Response(
            content=job.result.latex_content,
            media_type="application/x-latex",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    if format == "json":
        filename = download_filename(job, "json")
        logger.info(f"Serving JSON download for job {job_id}: {filename}")
        export = {
            "job": {
                "id": job.id,
                "status": job.status.value,
                "progress": job.progress,
                "start_time": job.start_time.isoformat(),
                "end_time": job.end_time.isoformat() if job.end_time else None,
                "request": job.request.model_dump(mode="json"),
                "chapter_titles": job.chapter_titles,
            },
            "latex_content": job.result.latex_content,
            "generated_at": datetime.now(timezone.utc).isoformat(),
        }
        return JSONResponse(
            content=export,
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    return error_json(
        400,
        INVALID_FORMAT,
        f"Unsupported format '{format}'. Supported formats: {', '.join(DOWNLOAD_FORMATS)}",
    )


@router.get("/download-pdf/{job_id}")
async def download_pdf(
    job_id: str,
    generator: DocumentGenerator = Depends(get_document_generator),
):
    """Download the compiled PDF.

    Errors:
        - JOB_NOT_FOUND: Job doesn't exist
        - DOCUMENT_NOT_READY: Job is not completed
        - PDF_NOT_AVAILABLE: Compilation failed or the file is gone
    """
    job = await _get_job_or_404(generator, job_id)

    if job.status != JobStatus.completed or not job.result:
        return _document_not_ready(job)

    pdf_path = Path(job.result.pdf_path) if job.result.pdf_path else None
    if not job.result.pdf_generated or pdf_path is None or not pdf_path.exists():
        reason = job.result.pdf_error or "PDF file is missing"
        return error_json(404, PDF_NOT_AVAILABLE, f"PDF not available: {reason}")

    filename = download_filename(job, "pdf")
    logger.info(f"Serving PDF download for job {job_id}: {filename}")

    return FileResponse(
        path=str(pdf_path),
        media_type="application/pdf",
        filename=filename,
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
        },
    )


@router.get("/jobs")
async def list_jobs(
    status: Optional[JobStatus] = Query(default=None, description="Filter by status"),
    limit: int = Query(default=100, ge=1, le=1000),
    generator: DocumentGenerator = Depends(get_document_generator),
) -> dict:
    """List jobs, newest first."""
    jobs = await generator.list_jobs(status=status, limit=limit)
    return success_response([
        {
            "job_id": job.id,
            "status": job.status.value,
            "progress": job.progress,
            "start_time": job.start_time.isoformat(),
            "end_time": job.end_time.isoformat() if job.end_time else None,
            "request": job.request.model_dump(mode="json"),
        }
        for job in jobs
    ])


@router.get("/jobs/stats")
async def get_jobs_stats(
    generator: DocumentGenerator = Depends(get_document_generator),
) -> dict:
    """Job counts per status."""
    stats = await generator.get_jobs_stats()
    return success_response(stats.model_dump())


@router.delete("/jobs/{job_id}")
async def delete_job(
    job_id: str,
    generator: DocumentGenerator = Depends(get_document_generator),
) -> dict:
    """Delete a job and its build files."""
    if not await generator.delete_job(job_id):
        raise JobNotFoundError(job_id)
    return success_response({"job_id": job_id, "deleted": True})
