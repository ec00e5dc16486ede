"""Ollama provider implementation.

Implements the LLMProvider interface for a local Ollama server:
- POST /api/generate (non-streaming) for text generation
- GET /api/tags as the liveness probe
"""

import logging
import os
import time
from typing import Any, Optional

import httpx

from ..errors import ProviderError, TimeoutError, error_for_status
from ..models import LLMRequest, LLMResponse, Usage
from .base import LLMProvider

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:11434"
DEFAULT_MODEL = "mistral:7b"


class OllamaProvider(LLMProvider):
    """Ollama /api/generate provider."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = 60.0,
        default_model: str | None = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize Ollama provider.

        Args:
            base_url: Server URL. Defaults to OLLAMA_BASE_URL env var.
            timeout: Request timeout in seconds (applies to every call).
            default_model: Model to use if not specified. Defaults to OLLAMA_MODEL env var.
            transport: Optional httpx transport (tests inject a MockTransport).
        """
        self._base_url = (
            base_url or os.environ.get("OLLAMA_BASE_URL", DEFAULT_BASE_URL)
        ).rstrip("/")
        self._timeout = timeout
        self._default_model = default_model or os.environ.get("OLLAMA_MODEL", DEFAULT_MODEL)
        self._transport = transport

    @property
    def name(self) -> str:
        """Provider identifier."""
        return "ollama"

    @property
    def default_model(self) -> str:
        return self._default_model

    @property
    def base_url(self) -> str:
        return self._base_url

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
            headers={"Content-Type": "application/json"},
        )

    async def generate(self, request: LLMRequest) -> LLMResponse:
        """Send a generation request to Ollama.

        Raises:
            Various LLMError subclasses based on the failure.
        """
        start_time = time.perf_counter()
        payload = self._build_request(request)

        try:
            async with self._client() as client:
                response = await client.post("/api/generate", json=payload)
        except httpx.TimeoutException as e:
            raise TimeoutError(
                f"Ollama request timed out after {self._timeout}s",
                provider=self.name,
            ) from e
        except httpx.RequestError as e:
            raise ProviderError(
                f"Failed to connect to Ollama at {self._base_url}: {e}",
                provider=self.name,
            ) from e

        if response.status_code >= 400:
            self._handle_api_error(response)

        latency_ms = int((time.perf_counter() - start_time) * 1000)
        return self._parse_response(response, payload["model"], latency_ms)

    async def ping(self) -> bool:
        """Probe GET /api/tags."""
        try:
            async with self._client() as client:
                response = await client.get("/api/tags")
        except httpx.HTTPError as e:
            logger.error(f"Failed to connect to Ollama at {self._base_url}: {e}")
            return False

        if response.status_code != 200:
            logger.error(
                f"Ollama at {self._base_url} answered liveness probe with {response.status_code}"
            )
            return False

        logger.info(f"Successfully connected to Ollama at {self._base_url}")
        return True

    def _build_request(self, request: LLMRequest) -> dict[str, Any]:
        """Convert LLMRequest to the Ollama /api/generate body."""
        options: dict[str, Any] = {
            "temperature": request.options.temperature,
            "top_p": request.options.top_p,
        }
        if request.options.num_predict:
            options["num_predict"] = request.options.num_predict
        if request.options.stop:
            options["stop"] = request.options.stop

        return {
            "model": self.model_for(request),
            "prompt": request.prompt,
            "stream": False,
            "options": options,
        }

    def _parse_response(
        self,
        response: httpx.Response,
        model: str,
        latency_ms: int,
    ) -> LLMResponse:
        """Convert an Ollama JSON body to LLMResponse."""
        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError(
                "Ollama returned a non-JSON payload",
                provider=self.name,
            ) from e

        if not isinstance(data, dict) or not isinstance(data.get("response"), str):
            raise ProviderError(
                "Ollama payload is missing the 'response' field",
                provider=self.name,
            )

        prompt_tokens = int(data.get("prompt_eval_count") or 0)
        completion_tokens = int(data.get("eval_count") or 0)

        return LLMResponse(
            text=data["response"],
            finish_reason=data.get("done_reason") or "stop",
            usage=Usage(
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
                total_tokens=prompt_tokens + completion_tokens,
            ),
            model=data.get("model") or model,
            provider=self.name,
            latency_ms=latency_ms,
        )

    def _handle_api_error(self, response: httpx.Response) -> None:
        """Convert Ollama HTTP errors to LLMError types."""
        try:
            message = response.json().get("error", response.text)
        except (ValueError, AttributeError):
            message = response.text

        raise error_for_status(
            response.status_code,
            message,
            provider=self.name,
        )
