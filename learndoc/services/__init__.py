"""Services package for document generation logic."""

from .document_generator import DocumentGenerator
from .generation_client import GenerationClient
from .job_store import JobStore
from .latex_service import LatexService

__all__ = [
    "DocumentGenerator",
    "GenerationClient",
    "JobStore",
    "LatexService",
]
