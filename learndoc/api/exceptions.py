"""Exceptions the routes raise; main.py turns them into error envelopes."""

from learndoc.api.response import INTERNAL_ERROR, JOB_NOT_FOUND, VALIDATION_ERROR


class ApiError(Exception):
    """Error with an HTTP status and an envelope code."""

    status_code = 500
    code = INTERNAL_ERROR

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class JobNotFoundError(ApiError):
    """No job with the requested id."""

    status_code = 404
    code = JOB_NOT_FOUND

    def __init__(self, job_id: str):
        self.job_id = job_id
        super().__init__(f"Job with ID '{job_id}' not found")


class ValidationError(ApiError):
    """Request body failed validation."""

    status_code = 400
    code = VALIDATION_ERROR
