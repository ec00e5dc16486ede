"""Unit tests for LLM models and errors."""

import pytest
from pydantic import ValidationError

from learndoc.llm.errors import (
    AuthenticationError,
    ContentFilterError,
    InferenceUnavailableError,
    InvalidRequestError,
    LLMError,
    ModelNotFoundError,
    ProviderError,
    RateLimitError,
    error_for_status,
)
from learndoc.llm.models import (
    GenerationOptions,
    GenerationOutcome,
    LLMRequest,
    LLMResponse,
)


class TestLLMRequest:
    """Tests for LLMRequest model."""

    def test_minimal_request(self):
        """Test creating a minimal request."""
        request = LLMRequest(prompt="Hello")
        assert request.model is None
        assert request.options.temperature == 0.7
        assert request.options.top_p == 0.9
        assert request.options.num_predict is None
        assert request.options.stop is None

    def test_temperature_bounds(self):
        """Test temperature validation."""
        GenerationOptions(temperature=0.0)
        GenerationOptions(temperature=2.0)
        with pytest.raises(ValidationError):
            GenerationOptions(temperature=-0.1)
        with pytest.raises(ValidationError):
            GenerationOptions(temperature=2.1)

    def test_num_predict_positive(self):
        with pytest.raises(ValidationError):
            GenerationOptions(num_predict=0)


class TestGenerationOutcome:
    """Tests for GenerationOutcome."""

    def test_success(self):
        outcome = GenerationOutcome.success(
            LLMResponse(text="Hi", model="m", provider="ollama", latency_ms=1)
        )
        assert outcome.ok
        assert outcome.text == "Hi"

    def test_failure(self):
        outcome = GenerationOutcome.failure("boom", error_type="ProviderError")
        assert not outcome.ok
        assert outcome.text == ""
        assert outcome.error == "boom"
        assert outcome.error_type == "ProviderError"

    def test_success_with_null_text(self):
        outcome = GenerationOutcome.success(
            LLMResponse(text=None, model="m", provider="openai", latency_ms=1)
        )
        assert outcome.ok
        assert outcome.text == ""


class TestLLMError:
    """Tests for LLMError base class."""

    def test_basic_error(self):
        """Test creating a basic LLM error."""
        error = LLMError("Something went wrong")
        assert str(error) == "Something went wrong"
        assert error.provider is None
        assert error.request_id is None

    def test_error_with_context(self):
        """Test creating an error with context."""
        error = LLMError(
            "API call failed",
            provider="openai",
            request_id="req_123",
            correlation_id="corr_456",
        )
        assert "API call failed" in str(error)
        assert "provider=openai" in str(error)
        assert "request_id=req_123" in str(error)
        assert error.correlation_id == "corr_456"

    def test_rate_limit_error(self):
        error = RateLimitError("Rate limit exceeded", provider="ollama")
        assert error.provider == "ollama"
        assert isinstance(error, LLMError)

    @pytest.mark.parametrize("cls", [
        AuthenticationError,
        ContentFilterError,
        ModelNotFoundError,
        InferenceUnavailableError,
    ])
    def test_hierarchy(self, cls):
        assert issubclass(cls, LLMError)


class TestErrorForStatus:
    """Tests for the shared HTTP status mapping."""

    @pytest.mark.parametrize("status,cls", [
        (401, AuthenticationError),
        (403, AuthenticationError),
        (400, InvalidRequestError),
        (404, ModelNotFoundError),
        (429, RateLimitError),
        (500, ProviderError),
        (502, ProviderError),
    ])
    def test_mapping(self, status, cls):
        error = error_for_status(status, "nope", provider="ollama")
        assert type(error) is cls
        assert error.provider == "ollama"

    def test_unmapped_status_is_base_error(self):
        error = error_for_status(418, "teapot", provider="openai")
        assert type(error) is LLMError
        assert "OpenAI error (418)" in str(error)

