"""High-level LLM client returning explicit outcomes.

Wraps a single configured provider. Call-level failures never propagate:
they come back as failed GenerationOutcomes so callers can substitute a
deterministic fallback. There is no retry layer; one attempt per call,
bounded by the provider's timeout.
"""

import logging
import os
import uuid

from .errors import LLMError
from .models import GenerationOutcome, LLMRequest
from .providers.base import LLMProvider
from .providers.ollama import OllamaProvider
from .providers.openai import OpenAIProvider

logger = logging.getLogger(__name__)


class LLMClient:
    """High-level inference client.

    Configuration (env vars):
    - LLM_DEFAULT_PROVIDER: "ollama" (default) or "openai"
    - LLM_TIMEOUT_SECONDS: Request timeout (default: 60)
    """

    DEFAULT_PROVIDER = "ollama"
    DEFAULT_TIMEOUT = 60.0

    def __init__(
        self,
        default_provider: str | None = None,
        timeout: float | None = None,
        providers: dict[str, LLMProvider] | None = None,
    ):
        """Initialize LLM client.

        Args:
            default_provider: Provider name. Defaults to LLM_DEFAULT_PROVIDER env var.
            timeout: Request timeout in seconds. Defaults to LLM_TIMEOUT_SECONDS env var.
            providers: Pre-built providers keyed by name (overrides the built-ins).

        Raises:
            ValueError: If the default provider is not one of the providers.
        """
        self._default_provider = (
            default_provider
            or os.environ.get("LLM_DEFAULT_PROVIDER", self.DEFAULT_PROVIDER)
        )
        self._timeout = (
            timeout
            if timeout is not None
            else float(os.environ.get("LLM_TIMEOUT_SECONDS", self.DEFAULT_TIMEOUT))
        )

        self._providers: dict[str, LLMProvider] = (
            dict(providers)
            if providers is not None
            else {
                "ollama": OllamaProvider(timeout=self._timeout),
                "openai": OpenAIProvider(timeout=self._timeout),
            }
        )
        # Misconfiguration fails here, not inside generation calls
        self.get_provider(self._default_provider)

    def get_provider(self, name: str) -> LLMProvider:
        """Get a specific provider by name.

        Raises:
            ValueError: If provider name is not recognized.
        """
        if name not in self._providers:
            raise ValueError(f"Unknown provider: {name}. Available: {list(self._providers.keys())}")
        return self._providers[name]

    def get_default_provider(self) -> LLMProvider:
        """Get the configured provider."""
        return self.get_provider(self._default_provider)

    @property
    def provider_name(self) -> str:
        return self._default_provider

    async def check_connection(self) -> bool:
        """Probe the configured provider. Never raises."""
        provider = self.get_default_provider()
        try:
            return await provider.ping()
        except LLMError as e:
            logger.error(f"Liveness probe for {provider.name} failed: {e}")
            return False

    async def generate(
        self,
        request: LLMRequest,
        correlation_id: str | None = None,
    ) -> GenerationOutcome:
        """Run one generation call.

        Args:
            request: Request to send.
            correlation_id: Optional ID for log correlation.

        Returns:
            A successful outcome with the response, or a failed outcome
            carrying the error message and type.
        """
        correlation_id = correlation_id or str(uuid.uuid4())
        provider = self.get_default_provider()

        try:
            response = await provider.generate(request)
        except LLMError as e:
            e.correlation_id = correlation_id
            logger.warning(
                "Provider %s failed: %s",
                provider.name,
                str(e),
                extra={
                    "correlation_id": correlation_id,
                    "provider": provider.name,
                    "error_type": type(e).__name__,
                },
            )
            return GenerationOutcome.failure(str(e), error_type=type(e).__name__)
        except Exception as e:
            # Unmapped client-library failures count as call-level failures
            logger.error(
                f"Unexpected error from provider {provider.name}: {e}",
                exc_info=True,
                extra={"correlation_id": correlation_id},
            )
            return GenerationOutcome.failure(str(e) or type(e).__name__, error_type=type(e).__name__)

        logger.info(
            "LLM request succeeded",
            extra={
                "correlation_id": correlation_id,
                "provider": response.provider,
                "model": response.model,
                "latency_ms": response.latency_ms,
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
                "finish_reason": response.finish_reason,
            },
        )
        return GenerationOutcome.success(response)
