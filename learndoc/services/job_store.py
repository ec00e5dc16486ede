"""In-memory job store for document generation jobs.

Jobs are lost on server restart and are only removed by explicit deletion.

Features:
- Safe concurrent access via an asyncio lock
- Snapshot reads: callers never hold a reference to live job state
- Lifecycle guards: terminal jobs are immutable, progress never goes back
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from learndoc.models import (
    DocumentRequest,
    GenerationJob,
    JobStats,
    JobStatus,
    TERMINAL_STATUSES,
)

logger = logging.getLogger(__name__)


class JobStore:
    """In-memory job registry.

    Usage:
        store = JobStore()
        job = await store.create_job(request)
        await store.update_job(job.id, status=JobStatus.processing, progress=10)
        snapshot = await store.get_job(job.id)
    """

    def __init__(self):
        self._jobs: dict[str, GenerationJob] = {}
        self._lock = asyncio.Lock()

    async def create_job(self, request: DocumentRequest) -> GenerationJob:
        """Create a pending job for an accepted request.

        Args:
            request: The validated request.

        Returns:
            Snapshot of the new job (status pending, progress 0).
        """
        job = GenerationJob(id=str(uuid4()), request=request)

        async with self._lock:
            self._jobs[job.id] = job
            snapshot = job.model_copy(deep=True)

        logger.debug(f"Created job {job.id}")
        return snapshot

    async def get_job(self, job_id: str) -> Optional[GenerationJob]:
        """Get a snapshot of a job by ID.

        Returns:
            Copy of the job if found, None otherwise.
        """
        async with self._lock:
            job = self._jobs.get(job_id)
            return job.model_copy(deep=True) if job else None

    async def update_job(
        self,
        job_id: str,
        **updates,
    ) -> Optional[GenerationJob]:
        """Update a job's fields.

        Updates to terminal jobs are rejected. Progress is clamped to
        [0, 100] and never decreases. ``end_time`` is set once, when the
        job first enters a terminal status.

        Args:
            job_id: The job identifier.
            **updates: Field updates to apply.

        Returns:
            Snapshot of the updated job, or None if not found or terminal.
        """
        async with self._lock:
            job = self._jobs.get(job_id)
            if not job:
                return None

            if job.is_terminal():
                logger.warning(
                    f"Job {job_id}: ignoring update to terminal job ({job.status.value})"
                )
                return None

            for key, value in updates.items():
                if key == "progress":
                    value = float(value)
                    if value < job.progress:
                        logger.warning(
                            f"Job {job_id}: ignoring progress regression {job.progress} -> {value}"
                        )
                    value = min(100.0, max(value, job.progress, 0.0))
                if key in GenerationJob.model_fields:
                    setattr(job, key, value)
                else:
                    logger.warning(f"Unknown field {key} for job update")

            if job.status in TERMINAL_STATUSES and job.end_time is None:
                job.end_time = datetime.now(timezone.utc)

            return job.model_copy(deep=True)

    async def delete_job(self, job_id: str) -> bool:
        """Delete a job.

        Returns:
            True if deleted, False if not found.
        """
        async with self._lock:
            if job_id in self._jobs:
                del self._jobs[job_id]
                logger.debug(f"Deleted job {job_id}")
                return True
            return False

    async def list_jobs(
        self,
        status: Optional[JobStatus] = None,
        limit: int = 100,
    ) -> list[GenerationJob]:
        """List job snapshots, newest first.

        Args:
            status: Filter by status (optional).
            limit: Maximum number of jobs to return.
        """
        async with self._lock:
            jobs = list(self._jobs.values())

            if status:
                jobs = [j for j in jobs if j.status == status]

            jobs.sort(key=lambda j: j.start_time, reverse=True)

            return [j.model_copy(deep=True) for j in jobs[:limit]]

    async def get_stats(self) -> JobStats:
        """Count jobs per status."""
        async with self._lock:
            counts = {status: 0 for status in JobStatus}
            for job in self._jobs.values():
                counts[job.status] += 1

        return JobStats(
            total=sum(counts.values()),
            pending=counts[JobStatus.pending],
            processing=counts[JobStatus.processing],
            completed=counts[JobStatus.completed],
            failed=counts[JobStatus.failed],
        )

    def __len__(self) -> int:
        """Return total number of jobs in store."""
        return len(self._jobs)
