"""Document generation orchestrator.

Owns the job registry and drives each job through the pipeline:

    connectivity -> outline -> chapters (sequential) -> assembly
    -> validation -> compile -> finalize

Jobs run as background asyncio tasks; callers poll snapshots by id.
Chapters are generated strictly in order because every prompt carries the
titles already written.
"""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Optional

from learndoc.llm import InferenceUnavailableError
from learndoc.models import (
    DocumentRequest,
    GenerationJob,
    JobResult,
    JobStats,
    JobStatus,
)

from .generation_client import GenerationClient
from .job_store import JobStore
from .latex_service import LatexService

logger = logging.getLogger(__name__)

DEFAULT_CHAPTER_PAUSE_SECONDS = 0.1

# Progress checkpoints
PROGRESS_STARTED = 10
PROGRESS_OUTLINE_REQUESTED = 20
PROGRESS_OUTLINE_READY = 30
PROGRESS_CHAPTERS_SPAN = 50
PROGRESS_ASSEMBLING = 85
PROGRESS_COMPILING = 90
PROGRESS_FINALIZING = 95
PROGRESS_DONE = 100


def chapter_progress(completed: int, total: int) -> float:
    """Progress after ``completed`` of ``total`` chapters (30..80)."""
    if total <= 0:
        return float(PROGRESS_OUTLINE_READY + PROGRESS_CHAPTERS_SPAN)
    fraction = min(max(completed / total, 0.0), 1.0)
    return PROGRESS_OUTLINE_READY + fraction * PROGRESS_CHAPTERS_SPAN


def _env_max_concurrent_jobs() -> Optional[int]:
    value = os.environ.get("MAX_CONCURRENT_JOBS")
    if not value:
        return None
    return int(value)


class DocumentGenerator:
    """Job orchestrator.

    Constructed explicitly and shared by whoever needs it (the API keeps one
    on ``app.state``).

    Configuration (env vars, overridden by constructor arguments):
    - CHAPTER_PAUSE_SECONDS: Pause between chapter calls (default: 0.1)
    - MAX_CONCURRENT_JOBS: Bound on concurrently running pipelines (default: unbounded)
    """

    def __init__(
        self,
        generation_client: Optional[GenerationClient] = None,
        latex_service: Optional[LatexService] = None,
        store: Optional[JobStore] = None,
        chapter_pause_seconds: Optional[float] = None,
        max_concurrent_jobs: Optional[int] = None,
    ):
        self._generation_client = generation_client or GenerationClient()
        self._latex_service = latex_service or LatexService()
        self._store = store or JobStore()

        if chapter_pause_seconds is None:
            chapter_pause_seconds = float(
                os.environ.get("CHAPTER_PAUSE_SECONDS", DEFAULT_CHAPTER_PAUSE_SECONDS)
            )
        self._chapter_pause_seconds = chapter_pause_seconds

        if max_concurrent_jobs is None:
            max_concurrent_jobs = _env_max_concurrent_jobs()
        self._semaphore: Optional[asyncio.Semaphore] = (
            asyncio.Semaphore(max_concurrent_jobs) if max_concurrent_jobs else None
        )

        self._tasks: dict[str, asyncio.Task] = {}

    @property
    def generation_client(self) -> GenerationClient:
        return self._generation_client

    @property
    def latex_service(self) -> LatexService:
        return self._latex_service

    @property
    def store(self) -> JobStore:
        return self._store

    # ==========================================================================
    # Public API
    # ==========================================================================

    async def create_job(self, request: DocumentRequest) -> GenerationJob:
        """Register a job and start its pipeline in the background.

        Returns immediately; the pipeline is never awaited here.

        Args:
            request: A validated request.

        Returns:
            Snapshot of the new job (status pending, progress 0).
        """
        job = await self._store.create_job(request)

        logger.info(
            f"Starting document generation job {job.id} "
            f"(topic={request.topic!r}, complexity={request.complexity.value}, "
            f"chapters={request.chapters})"
        )

        task = asyncio.create_task(
            self._run(job.id, request),
            name=f"document_generation_{job.id}",
        )
        self._tasks[job.id] = task
        task.add_done_callback(lambda _t, job_id=job.id: self._tasks.pop(job_id, None))

        return job

    async def get_job(self, job_id: str) -> Optional[GenerationJob]:
        """Snapshot of a job, or None if unknown."""
        return await self._store.get_job(job_id)

    async def list_jobs(
        self,
        status: Optional[JobStatus] = None,
        limit: int = 100,
    ) -> list[GenerationJob]:
        return await self._store.list_jobs(status=status, limit=limit)

    async def delete_job(self, job_id: str) -> bool:
        """Remove a job and its build files.

        A job still running is cancelled first.

        Returns:
            True if the job existed.
        """
        task = self._tasks.get(job_id)
        if task and not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)

        deleted = await self._store.delete_job(job_id)
        if deleted:
            self._latex_service.cleanup_job_files(job_id)
            logger.info(f"Job {job_id}: deleted")
        return deleted

    async def get_jobs_stats(self) -> JobStats:
        return await self._store.get_stats()

    async def wait_for_job(self, job_id: str) -> Optional[GenerationJob]:
        """Wait until the job's pipeline finishes and return its final snapshot."""
        task = self._tasks.get(job_id)
        if task:
            await asyncio.gather(task, return_exceptions=True)
        return await self._store.get_job(job_id)

    async def shutdown(self, timeout: Optional[float] = None) -> None:
        """Wait for in-flight pipelines, cancelling whatever outlives ``timeout``."""
        tasks = [t for t in self._tasks.values() if not t.done()]
        if not tasks:
            return

        logger.info(f"Waiting for {len(tasks)} running generation job(s)")
        _, pending = await asyncio.wait(tasks, timeout=timeout)
        for task in pending:
            task.cancel()
        if pending:
            logger.warning(f"Cancelled {len(pending)} generation job(s) on shutdown")
            await asyncio.gather(*pending, return_exceptions=True)

    # ==========================================================================
    # Background Generation Task
    # ==========================================================================

    async def _run(self, job_id: str, request: DocumentRequest) -> None:
        if self._semaphore is None:
            await self._process_generation(job_id, request)
            return

        # Cancelled while queued: still pending, so fail it here
        try:
            await self._semaphore.acquire()
        except asyncio.CancelledError:
            await self._mark_cancelled(job_id)
            raise

        try:
            await self._process_generation(job_id, request)
        finally:
            self._semaphore.release()

    async def _mark_cancelled(self, job_id: str) -> None:
        logger.info(f"Job {job_id}: Cancelled")
        await self._store.update_job(
            job_id,
            status=JobStatus.failed,
            error="Job was cancelled",
        )

    async def _process_generation(self, job_id: str, request: DocumentRequest) -> None:
        """Run the pipeline for one job, recording progress as it goes.

        Any unexpected exception fails the job with its message; no partial
        result is attached.
        """
        client = self._generation_client
        latex = self._latex_service

        try:
            await self._store.update_job(
                job_id,
                status=JobStatus.processing,
                progress=PROGRESS_STARTED,
            )
            logger.info(f"Job {job_id}: Checking inference service connectivity")

            if not await client.check_connection():
                raise InferenceUnavailableError(
                    "Cannot connect to the inference service. "
                    "Please make sure it is running and reachable."
                )

            # Phase 1: Outline
            await self._store.update_job(job_id, progress=PROGRESS_OUTLINE_REQUESTED)
            logger.info(f"Job {job_id}: Generating chapter outline")

            chapter_titles = await client.generate_chapter_outline(
                request.topic,
                request.complexity,
                request.chapters,
                correlation_id=job_id,
            )
            await self._store.update_job(
                job_id,
                progress=PROGRESS_OUTLINE_READY,
                chapter_titles=chapter_titles,
            )
            logger.info(f"Job {job_id}: Outline ready ({len(chapter_titles)} chapters)")

            # Phase 2: Chapters
            chapter_contents: list[str] = []
            completed_titles: list[str] = []
            total = len(chapter_titles)

            for i, title in enumerate(chapter_titles, start=1):
                logger.info(f"Job {job_id}: Generating chapter {i}/{total}: {title}")

                content = await client.generate_chapter_content(
                    request.topic,
                    title,
                    request.complexity,
                    i,
                    total,
                    previous_chapters=list(completed_titles),
                    chapter_outline=chapter_titles,
                    correlation_id=job_id,
                )
                chapter_contents.append(content)
                completed_titles.append(title)

                await self._store.update_job(job_id, progress=chapter_progress(i, total))

                if i < total and self._chapter_pause_seconds > 0:
                    await asyncio.sleep(self._chapter_pause_seconds)

            # Phase 3: Assembly
            await self._store.update_job(job_id, progress=PROGRESS_ASSEMBLING)
            logger.info(f"Job {job_id}: Assembling document")

            latex_content = latex.generate_document(request, chapter_contents)

            validation = latex.validate_latex_content(latex_content)
            if not validation.valid:
                logger.warning(
                    f"Job {job_id}: LaTeX validation issues: {'; '.join(validation.errors)}"
                )

            # Phase 4: Compile
            await self._store.update_job(job_id, progress=PROGRESS_COMPILING)
            logger.info(f"Job {job_id}: Compiling PDF")

            compile_result = await latex.compile_to_pdf(latex_content, job_id)
            if not compile_result.success:
                logger.warning(f"Job {job_id}: PDF compilation failed: {compile_result.error}")

            await self._store.update_job(job_id, progress=PROGRESS_FINALIZING)

            await self._store.update_job(
                job_id,
                status=JobStatus.completed,
                progress=PROGRESS_DONE,
                result=JobResult(
                    latex_content=latex_content,
                    pdf_path=compile_result.pdf_path,
                    pdf_generated=compile_result.success,
                    pdf_error=compile_result.error,
                ),
            )

            logger.info(f"Job {job_id}: Generation completed")

        except asyncio.CancelledError:
            await self._mark_cancelled(job_id)
            raise

        except Exception as e:
            logger.error(f"Job {job_id}: Generation failed: {e}", exc_info=True)
            await self._store.update_job(
                job_id,
                status=JobStatus.failed,
                error=str(e),
            )
