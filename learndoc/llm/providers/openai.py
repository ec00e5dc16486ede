"""OpenAI provider implementation.

Implements the LLMProvider interface on top of the Chat Completions API.
The prompt is sent as a single user message; the model list endpoint
serves as the liveness probe.
"""

import logging
import os
import time
from typing import Any

from openai import AsyncOpenAI, APIConnectionError, APIStatusError, APITimeoutError, OpenAIError

from ..errors import (
    AuthenticationError,
    ContentFilterError,
    LLMError,
    ProviderError,
    TimeoutError,
    error_for_status,
)
from ..models import LLMRequest, LLMResponse, Usage
from .base import LLMProvider

logger = logging.getLogger(__name__)


class OpenAIProvider(LLMProvider):
    """OpenAI Chat Completions API provider."""

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float = 60.0,
        default_model: str | None = None,
    ):
        """Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key. Defaults to OPENAI_API_KEY env var.
            timeout: Request timeout in seconds.
            default_model: Default model. Defaults to OPENAI_MODEL env var.
        """
        self._api_key = api_key or os.environ.get("OPENAI_API_KEY")
        self._timeout = timeout
        self._default_model = default_model or os.environ.get("OPENAI_MODEL", "gpt-4o-mini")
        self._client: AsyncOpenAI | None = None

    @property
    def name(self) -> str:
        """Provider identifier."""
        return "openai"

    @property
    def default_model(self) -> str:
        return self._default_model

    @property
    def client(self) -> AsyncOpenAI:
        """Lazy-initialized OpenAI client."""
        if self._client is None:
            if not self._api_key:
                raise AuthenticationError(
                    "OpenAI API key not configured. Set OPENAI_API_KEY environment variable.",
                    provider=self.name,
                )
            self._client = AsyncOpenAI(api_key=self._api_key, timeout=self._timeout)
        return self._client

    async def generate(self, request: LLMRequest) -> LLMResponse:
        """Send a completion request to OpenAI.

        Raises:
            Various LLMError subclasses based on the error type.
        """
        start_time = time.perf_counter()
        openai_request = self._build_request(request)

        try:
            response = await self.client.chat.completions.create(**openai_request)
        except APITimeoutError as e:
            raise TimeoutError(
                f"OpenAI request timed out after {self._timeout}s",
                provider=self.name,
            ) from e
        except APIConnectionError as e:
            raise ProviderError(
                f"Failed to connect to OpenAI: {e}",
                provider=self.name,
            ) from e
        except APIStatusError as e:
            self._handle_api_error(e)

        latency_ms = int((time.perf_counter() - start_time) * 1000)
        return self._parse_response(response, latency_ms)

    async def ping(self) -> bool:
        """Probe the model list endpoint."""
        try:
            await self.client.models.list()
        except (LLMError, OpenAIError) as e:
            logger.error(f"Failed to reach OpenAI: {e}")
            return False
        return True

    def _build_request(self, request: LLMRequest) -> dict[str, Any]:
        """Convert LLMRequest to OpenAI API format."""
        openai_request: dict[str, Any] = {
            "model": self.model_for(request),
            "messages": [{"role": "user", "content": request.prompt}],
            "temperature": request.options.temperature,
            "top_p": request.options.top_p,
        }

        if request.options.num_predict:
            openai_request["max_tokens"] = request.options.num_predict

        if request.options.stop:
            openai_request["stop"] = request.options.stop

        return openai_request

    def _parse_response(self, response: Any, latency_ms: int) -> LLMResponse:
        """Convert OpenAI response to LLMResponse."""
        if not response.choices:
            raise ProviderError("OpenAI returned no choices", provider=self.name)

        choice = response.choices[0]
        if choice.finish_reason == "content_filter":
            raise ContentFilterError(
                "Content blocked by OpenAI safety filters",
                provider=self.name,
                request_id=response.id,
            )

        usage = Usage()
        if response.usage is not None:
            usage = Usage(
                prompt_tokens=response.usage.prompt_tokens,
                completion_tokens=response.usage.completion_tokens,
                total_tokens=response.usage.total_tokens,
            )

        return LLMResponse(
            text=choice.message.content,
            finish_reason=choice.finish_reason or "stop",
            usage=usage,
            model=response.model,
            provider=self.name,
            latency_ms=latency_ms,
            request_id=response.id,
        )

    def _handle_api_error(self, error: APIStatusError) -> None:
        """Convert OpenAI API errors to LLMError types."""
        status_code = error.status_code
        message = str(error.message) if hasattr(error, "message") else str(error)
        request_id = getattr(error, "request_id", None)

        if status_code == 400 and ("content_filter" in message.lower() or "safety" in message.lower()):
            raise ContentFilterError(
                f"Content blocked by OpenAI safety filters: {message}",
                provider=self.name,
                request_id=request_id,
            ) from error

        raise error_for_status(
            status_code,
            message,
            provider=self.name,
            request_id=request_id,
        ) from error
