"""API models for document generation.

These models define the async job pattern for long-running generation:
1. POST /api/generate-document -> pending response with job_id
2. GET /api/job-status/:job_id -> progress updates
3. GET /api/download/:job_id, /api/download-pdf/:job_id -> deliverables

Pydantic v2.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .document_request import DocumentRequest
from .generation_job import JobStatus


class GenerateDocumentRequest(BaseModel):
    """Raw request body for document generation.

    Fields are loosely typed on purpose: the route validates them and
    reports problems in the error envelope.
    """
    model_config = ConfigDict(extra="ignore")

    topic: Optional[str] = None
    complexity: Optional[str] = None
    chapters: Optional[Union[int, str]] = None


class GenerateDocumentData(BaseModel):
    """Payload returned when a job is accepted."""
    model_config = ConfigDict(extra="forbid")

    job_id: str
    status: JobStatus
    progress: float
    message: str = "Document generation started successfully"
    estimated_time_minutes: int = Field(ge=0, description="Rough estimate: 3 minutes per chapter")
    request: DocumentRequest


class JobStatusData(BaseModel):
    """Payload for GET /api/job-status/:job_id."""
    model_config = ConfigDict(extra="forbid")

    job_id: str
    status: JobStatus
    progress: float
    start_time: datetime
    end_time: Optional[datetime] = None
    elapsed_time: str
    request: DocumentRequest
    chapter_titles: List[str] = Field(default_factory=list)
    error: Optional[str] = None
    has_result: bool = False
    result_size: int = 0
    pdf_generated: Optional[bool] = None


class JobStats(BaseModel):
    """Job counts per status."""
    model_config = ConfigDict(extra="forbid")

    total: int = 0
    pending: int = 0
    processing: int = 0
    completed: int = 0
    failed: int = 0
