"""Provider interface.

A provider knows one wire protocol. It raises LLMError subclasses on
failure and leaves retry, fallback and logging policy to its callers.
"""

from abc import ABC, abstractmethod

from ..models import LLMRequest, LLMResponse


class LLMProvider(ABC):
    """Inference backend (Ollama, OpenAI)."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider identifier: 'ollama', 'openai'."""
        ...

    @property
    @abstractmethod
    def default_model(self) -> str:
        """Model used when the request does not name one."""
        ...

    def model_for(self, request: LLMRequest) -> str:
        """Model named by the request, else the provider default."""
        return request.model or self.default_model

    @abstractmethod
    async def generate(self, request: LLMRequest) -> LLMResponse:
        """Send a generation request and return the response.

        Args:
            request: Vendor-neutral request.

        Returns:
            Vendor-neutral response.

        Raises:
            AuthenticationError: Invalid or missing credentials.
            RateLimitError: Rate limit exceeded.
            TimeoutError: Request timed out.
            InvalidRequestError: Malformed request.
            ModelNotFoundError: Unknown model.
            ProviderError: Connection failure, server error, or malformed payload.
        """
        ...

    @abstractmethod
    async def ping(self) -> bool:
        """Lightweight liveness probe.

        Returns:
            True if the service answered, False on any network error.
            Never raises.
        """
        ...
