"""{ data, error } envelope used by every JSON endpoint."""

from typing import Any

from fastapi.responses import JSONResponse

# Error codes
JOB_NOT_FOUND = "JOB_NOT_FOUND"
VALIDATION_ERROR = "VALIDATION_ERROR"
DOCUMENT_NOT_READY = "DOCUMENT_NOT_READY"
INVALID_FORMAT = "INVALID_FORMAT"
PDF_NOT_AVAILABLE = "PDF_NOT_AVAILABLE"
LLM_UNAVAILABLE = "LLM_UNAVAILABLE"
INTERNAL_ERROR = "INTERNAL_ERROR"


def success_response(data: Any) -> dict[str, Any]:
    """Create a success response envelope."""
    return {"data": data, "error": None}


def error_response(code: str, message: str) -> dict[str, Any]:
    """Create an error response envelope."""
    return {"data": None, "error": {"code": code, "message": message}}


def error_json(status_code: int, code: str, message: str) -> JSONResponse:
    """Error envelope as a response with the given HTTP status."""
    return JSONResponse(status_code=status_code, content=error_response(code, message))
