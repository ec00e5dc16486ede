"""Unit tests for document route helpers."""

from datetime import datetime, timedelta, timezone

import pytest

from learndoc.api.exceptions import JobNotFoundError, ValidationError
from learndoc.api.routes.documents import (
    download_filename,
    format_elapsed,
    validate_generate_request,
)
from learndoc.models import ComplexityLevel, DocumentRequest, GenerateDocumentRequest, GenerationJob


def make_job(topic: str = "Graph Theory", **kwargs) -> GenerationJob:
    return GenerationJob(
        id="job-1",
        request=DocumentRequest(topic=topic, complexity=ComplexityLevel.intermediate, chapters=4),
        **kwargs,
    )


class TestValidateGenerateRequest:
    """Tests for request validation."""

    def test_valid(self):
        request = validate_generate_request(
            GenerateDocumentRequest(topic=" Rust ", complexity="advanced", chapters="12")
        )
        assert request.topic == "Rust"
        assert request.complexity == ComplexityLevel.advanced
        assert request.chapters == 12

    def test_error_carries_code(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_generate_request(GenerateDocumentRequest(topic="X", complexity="expert", chapters=3))

        assert exc_info.value.status_code == 400
        assert exc_info.value.code == "VALIDATION_ERROR"
        assert exc_info.value.message == (
            "Invalid complexity level. Must be one of: beginner, intermediate, advanced"
        )

    def test_empty_string_chapters_is_missing(self):
        with pytest.raises(ValidationError, match="Missing required fields"):
            validate_generate_request(GenerateDocumentRequest(topic="X", complexity="beginner", chapters=""))


class TestHelpers:
    """Tests for filename and elapsed-time formatting."""

    def test_download_filename(self):
        job = make_job(topic="C++ & Templates: Part 1")
        assert download_filename(job, "tex") == "C_____Templates__Part_1_intermediate.tex"

    @pytest.mark.parametrize("seconds,expected", [
        (0, "0 minutes"),
        (40, "1 minute"),
        (60, "1 minute"),
        (170, "3 minutes"),
    ])
    def test_format_elapsed(self, seconds, expected):
        start = datetime(2026, 1, 1, tzinfo=timezone.utc)
        job = make_job(start_time=start, end_time=start + timedelta(seconds=seconds))
        assert format_elapsed(job) == expected

    def test_job_not_found_message(self):
        error = JobNotFoundError("abc")
        assert error.status_code == 404
        assert str(error) == "Job with ID 'abc' not found"
