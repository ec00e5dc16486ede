"""Pydantic models for requests, jobs and API payloads."""

from .document_request import (
    ComplexityLevel,
    DocumentRequest,
    DEFAULT_CHAPTERS,
    MAX_CHAPTERS,
    MIN_CHAPTERS,
)
from .generation_job import (
    GenerationJob,
    JobResult,
    JobStatus,
    TERMINAL_STATUSES,
)
from .latex import CompileResult, LatexValidation
from .api_responses import (
    GenerateDocumentData,
    GenerateDocumentRequest,
    JobStats,
    JobStatusData,
)

__all__ = [
    "ComplexityLevel",
    "DocumentRequest",
    "DEFAULT_CHAPTERS",
    "MAX_CHAPTERS",
    "MIN_CHAPTERS",
    "GenerationJob",
    "JobResult",
    "JobStatus",
    "TERMINAL_STATUSES",
    "CompileResult",
    "LatexValidation",
    "GenerateDocumentData",
    "GenerateDocumentRequest",
    "JobStats",
    "JobStatusData",
]
