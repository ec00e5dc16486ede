"""Unit tests for Ollama provider.

Uses httpx.MockTransport so no server is needed.
"""

import json

import httpx
import pytest

from learndoc.llm.errors import (
    InvalidRequestError,
    ModelNotFoundError,
    ProviderError,
    RateLimitError,
    TimeoutError,
)
from learndoc.llm.models import GenerationOptions, LLMRequest
from learndoc.llm.providers.ollama import OllamaProvider


def make_provider(handler, **kwargs) -> OllamaProvider:
    return OllamaProvider(
        base_url="http://ollama.test",
        default_model="mistral:7b",
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


class TestOllamaProviderInit:
    """Tests for Ollama provider initialization."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("OLLAMA_BASE_URL", raising=False)
        monkeypatch.delenv("OLLAMA_MODEL", raising=False)
        provider = OllamaProvider()

        assert provider.name == "ollama"
        assert provider.base_url == "http://localhost:11434"
        assert provider.default_model == "mistral:7b"

    def test_env_config(self, monkeypatch):
        monkeypatch.setenv("OLLAMA_BASE_URL", "http://gpu-box:11434/")
        monkeypatch.setenv("OLLAMA_MODEL", "llama3:8b")
        provider = OllamaProvider()

        assert provider.base_url == "http://gpu-box:11434"
        assert provider.default_model == "llama3:8b"


class TestOllamaGenerate:
    """Tests for generate."""

    @pytest.mark.asyncio
    async def test_generate_success(self):
        """Test request body and response parsing."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={
                "model": "mistral:7b",
                "response": "1. Graphs\n2. Paths",
                "done": True,
                "done_reason": "stop",
                "prompt_eval_count": 12,
                "eval_count": 8,
            })

        provider = make_provider(handler)
        response = await provider.generate(LLMRequest(
            prompt="Outline please",
            options=GenerationOptions(num_predict=3000, stop=["\n\n\n\n"]),
        ))

        assert seen["path"] == "/api/generate"
        assert seen["body"]["model"] == "mistral:7b"
        assert seen["body"]["prompt"] == "Outline please"
        assert seen["body"]["stream"] is False
        assert seen["body"]["options"] == {
            "temperature": 0.7,
            "top_p": 0.9,
            "num_predict": 3000,
            "stop": ["\n\n\n\n"],
        }

        assert response.text == "1. Graphs\n2. Paths"
        assert response.provider == "ollama"
        assert response.usage.total_tokens == 20

    @pytest.mark.asyncio
    async def test_options_omit_unset_fields(self):
        seen = {}

        def handler(request):
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"response": "ok"})

        await make_provider(handler).generate(LLMRequest(prompt="x", model="phi3"))

        assert seen["body"]["model"] == "phi3"
        assert seen["body"]["options"] == {"temperature": 0.7, "top_p": 0.9}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status,error_type", [
        (400, InvalidRequestError),
        (404, ModelNotFoundError),
        (429, RateLimitError),
        (500, ProviderError),
        (503, ProviderError),
    ])
    async def test_status_mapping(self, status, error_type):
        """Test that HTTP errors map onto the LLMError hierarchy."""
        provider = make_provider(lambda request: httpx.Response(status, json={"error": "nope"}))

        with pytest.raises(error_type) as exc_info:
            await provider.generate(LLMRequest(prompt="x"))

        assert exc_info.value.provider == "ollama"

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(TimeoutError):
            await make_provider(handler).generate(LLMRequest(prompt="x"))

    @pytest.mark.asyncio
    async def test_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(ProviderError):
            await make_provider(handler).generate(LLMRequest(prompt="x"))

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [
        b"not json",
        b'{"done": true}',
        b'{"response": 42}',
        b'["response"]',
    ])
    async def test_malformed_payload(self, body):
        """Test that a body without a string 'response' is a provider error."""
        provider = make_provider(lambda request: httpx.Response(200, content=body))

        with pytest.raises(ProviderError):
            await provider.generate(LLMRequest(prompt="x"))


class TestOllamaPing:
    """Tests for the liveness probe."""

    @pytest.mark.asyncio
    async def test_ping_ok(self):
        seen = {}

        def handler(request):
            seen["method"] = request.method
            seen["path"] = request.url.path
            return httpx.Response(200, json={"models": []})

        assert await make_provider(handler).ping() is True
        assert seen == {"method": "GET", "path": "/api/tags"}

    @pytest.mark.asyncio
    async def test_ping_bad_status(self):
        assert await make_provider(lambda request: httpx.Response(500)).ping() is False

    @pytest.mark.asyncio
    async def test_ping_unreachable(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        assert await make_provider(handler).ping() is False
