"""Generation job model for async document generation.

This model tracks the state of one document generation job.
Used by the job store for in-memory job management.

Pydantic v2. Extra fields are forbidden to prevent drift.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .document_request import DocumentRequest


def _utcnow() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


class JobStatus(str, Enum):
    """Status of a document generation job."""
    pending = "pending"
    processing = "processing"
    completed = "completed"
    failed = "failed"


TERMINAL_STATUSES = (JobStatus.completed, JobStatus.failed)


class JobResult(BaseModel):
    """Deliverables of a completed job.

    The LaTeX text is always present; the PDF may be missing when
    compilation failed.
    """
    model_config = ConfigDict(extra="forbid")

    latex_content: str = Field(description="Assembled LaTeX document")
    pdf_path: Optional[str] = Field(default=None, description="Compiled PDF location")
    pdf_generated: bool = Field(default=False, description="Whether compilation succeeded")
    pdf_error: Optional[str] = Field(default=None, description="Compiler failure description")


class GenerationJob(BaseModel):
    """State of one document generation job.

    Only the job's own pipeline task writes to it; everybody else reads
    snapshots handed out by the job store.
    """
    model_config = ConfigDict(extra="forbid")

    # Identity
    id: str = Field(description="UUID identifier for this job")
    request: DocumentRequest = Field(description="The accepted request")

    # Status
    status: JobStatus = Field(default=JobStatus.pending, description="Current job status")
    progress: float = Field(default=0, ge=0, le=100, description="Coarse completion estimate")
    start_time: datetime = Field(default_factory=_utcnow, description="Job creation timestamp")
    end_time: Optional[datetime] = Field(
        default=None,
        description="Set once, when the job reaches a terminal status"
    )

    chapter_titles: List[str] = Field(
        default_factory=list,
        description="Chapter outline, once generated"
    )

    # Outcome
    result: Optional[JobResult] = Field(default=None, description="Present only when completed")
    error: Optional[str] = Field(default=None, description="Present only when failed")

    def is_terminal(self) -> bool:
        """Check if job is in a terminal state (no more updates expected)."""
        return self.status in TERMINAL_STATUSES

    def elapsed_ms(self, now: Optional[datetime] = None) -> int:
        """Milliseconds between start and end (or ``now`` for running jobs)."""
        end = self.end_time or now or _utcnow()
        return max(0, int((end - self.start_time).total_seconds() * 1000))
