"""Unit tests for LLM client.

Tests cover:
- Configuration from arguments and environment variables
- Provider access
- Conversion of provider errors into failed outcomes (single attempt)
- Liveness probe
- Correlation ID tracking
"""

import os
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from learndoc.llm.client import LLMClient
from learndoc.llm.errors import (
    AuthenticationError,
    ProviderError,
    RateLimitError,
    TimeoutError,
)
from learndoc.llm.models import LLMRequest, LLMResponse, Usage
from learndoc.llm.providers.base import LLMProvider


def create_mock_response(text: str = "Test response", provider: str = "ollama") -> LLMResponse:
    """Create a mock LLMResponse for testing."""
    return LLMResponse(
        text=text,
        finish_reason="stop",
        usage=Usage(prompt_tokens=10, completion_tokens=5, total_tokens=15),
        model="test-model",
        provider=provider,
        latency_ms=100,
    )


def create_mock_provider(name: str = "ollama") -> MagicMock:
    provider = MagicMock(spec=LLMProvider)
    provider.name = name
    provider.default_model = "test-model"
    provider.generate = AsyncMock(return_value=create_mock_response(provider=name))
    provider.ping = AsyncMock(return_value=True)
    return provider


class TestLLMClientInit:
    """Tests for LLM client initialization."""

    def test_default_configuration(self):
        """Test default configuration values."""
        with patch.dict(os.environ, {}, clear=True):
            client = LLMClient()
        assert client.provider_name == "ollama"
        assert client._timeout == 60.0

    def test_custom_configuration(self):
        """Test custom configuration values."""
        client = LLMClient(default_provider="openai", timeout=120.0)
        assert client.provider_name == "openai"
        assert client._timeout == 120.0

    def test_environment_configuration(self):
        """Test configuration from environment variables."""
        with patch.dict(os.environ, {
            "LLM_DEFAULT_PROVIDER": "openai",
            "LLM_TIMEOUT_SECONDS": "90",
        }):
            client = LLMClient()
            assert client.provider_name == "openai"
            assert client._timeout == 90.0

    def test_builtin_providers(self):
        """Test that both built-in providers are available."""
        client = LLMClient()
        assert client.get_provider("ollama").name == "ollama"
        assert client.get_provider("openai").name == "openai"

    def test_get_unknown_provider(self):
        client = LLMClient()
        with pytest.raises(ValueError, match="Unknown provider"):
            client.get_provider("nope")

    def test_injected_providers(self):
        provider = create_mock_provider("fake")
        client = LLMClient(default_provider="fake", providers={"fake": provider})
        assert client.get_default_provider() is provider

    def test_unknown_default_provider_rejected(self):
        """Test that a bad provider name fails at construction, not per call."""
        with patch.dict(os.environ, {"LLM_DEFAULT_PROVIDER": "anthropic"}):
            with pytest.raises(ValueError, match="Unknown provider: anthropic"):
                LLMClient()

        with pytest.raises(ValueError, match="Unknown provider"):
            LLMClient(default_provider="ollama", providers={"fake": create_mock_provider("fake")})


class TestLLMClientGenerate:
    """Tests for generate outcomes."""

    @pytest.mark.asyncio
    async def test_success(self):
        provider = create_mock_provider()
        client = LLMClient(providers={"ollama": provider}, default_provider="ollama")

        outcome = await client.generate(LLMRequest(prompt="Hi"))

        assert outcome.ok
        assert outcome.text == "Test response"
        assert outcome.error is None
        provider.generate.assert_awaited_once()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [
        TimeoutError("timed out", provider="ollama"),
        ProviderError("connection refused", provider="ollama"),
        RateLimitError("slow down", provider="ollama"),
        AuthenticationError("bad key", provider="ollama"),
    ])
    async def test_llm_errors_become_failures(self, error):
        """Test that provider errors are reported, not raised, after one attempt."""
        provider = create_mock_provider()
        provider.generate = AsyncMock(side_effect=error)
        client = LLMClient(providers={"ollama": provider}, default_provider="ollama")

        outcome = await client.generate(LLMRequest(prompt="Hi"))

        assert not outcome.ok
        assert outcome.text == ""
        assert outcome.error_type == type(error).__name__
        assert provider.generate.await_count == 1

    @pytest.mark.asyncio
    async def test_unexpected_errors_become_failures(self):
        provider = create_mock_provider()
        provider.generate = AsyncMock(side_effect=RuntimeError("socket exploded"))
        client = LLMClient(providers={"ollama": provider}, default_provider="ollama")

        outcome = await client.generate(LLMRequest(prompt="Hi"))

        assert not outcome.ok
        assert outcome.error == "socket exploded"
        assert outcome.error_type == "RuntimeError"

    @pytest.mark.asyncio
    async def test_correlation_id_passed_to_errors(self):
        """Test that correlation ID is attached to the raised error."""
        error = ProviderError("boom", provider="ollama")
        provider = create_mock_provider()
        provider.generate = AsyncMock(side_effect=error)
        client = LLMClient(providers={"ollama": provider}, default_provider="ollama")

        await client.generate(LLMRequest(prompt="Hi"), correlation_id="corr-123")

        assert error.correlation_id == "corr-123"


class TestLLMClientCheckConnection:
    """Tests for the liveness probe."""

    @pytest.mark.asyncio
    async def test_ping_result_passed_through(self):
        provider = create_mock_provider()
        provider.ping = AsyncMock(return_value=False)
        client = LLMClient(providers={"ollama": provider}, default_provider="ollama")

        assert await client.check_connection() is False

    @pytest.mark.asyncio
    async def test_ping_error_is_false(self):
        provider = create_mock_provider()
        provider.ping = AsyncMock(side_effect=AuthenticationError("no key"))
        client = LLMClient(providers={"ollama": provider}, default_provider="ollama")

        assert await client.check_connection() is False
