"""FastAPI dependencies."""

from fastapi import Request

from learndoc.services import DocumentGenerator


def get_document_generator(request: Request) -> DocumentGenerator:
    """Return the orchestrator owned by the running app."""
    return request.app.state.document_generator
