"""Errors raised by inference providers.

Providers raise these; LLMClient turns them into failed GenerationOutcomes,
so nothing in this module ever reaches the job pipeline except
InferenceUnavailableError.
"""


class LLMError(Exception):
    """Inference call failed. Carries the provider and ids for log correlation."""

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        request_id: str | None = None,
        correlation_id: str | None = None,
    ):
        super().__init__(message)
        self.provider = provider
        self.request_id = request_id
        self.correlation_id = correlation_id

    def __str__(self) -> str:
        text = super().__str__()
        context = [
            f"{key}={value}"
            for key, value in (("provider", self.provider), ("request_id", self.request_id))
            if value
        ]
        return " ".join([text, *context])


class AuthenticationError(LLMError):
    """Missing or rejected credentials (401/403)."""


class InvalidRequestError(LLMError):
    """Request rejected as malformed (400)."""


class ModelNotFoundError(LLMError):
    """Unknown model, e.g. not pulled into Ollama (404)."""


class ContentFilterError(LLMError):
    """Output withheld by the provider's safety filters."""


class TimeoutError(LLMError):
    """No answer within the service-wide timeout."""


class ProviderError(LLMError):
    """Connection failure, 5xx, or a payload we could not read."""


class RateLimitError(LLMError):
    """Provider is throttling or overloaded (429)."""


class InferenceUnavailableError(LLMError):
    """Liveness probe failed before a pipeline started. Fatal to the job."""


def error_for_status(
    status_code: int,
    message: str,
    provider: str,
    request_id: str | None = None,
) -> LLMError:
    """Map an HTTP error status from a provider onto the error hierarchy."""
    label = provider.capitalize() if provider != "openai" else "OpenAI"

    if status_code in (401, 403):
        return AuthenticationError(
            f"{label} authentication failed: {message}",
            provider=provider,
            request_id=request_id,
        )
    if status_code == 400:
        return InvalidRequestError(
            f"Invalid request to {label}: {message}",
            provider=provider,
            request_id=request_id,
        )
    if status_code == 404:
        return ModelNotFoundError(
            f"Model not found: {message}",
            provider=provider,
            request_id=request_id,
        )
    if status_code == 429:
        return RateLimitError(
            f"{label} rate limit exceeded: {message}",
            provider=provider,
            request_id=request_id,
        )
    if status_code >= 500:
        return ProviderError(
            f"{label} server error ({status_code}): {message}",
            provider=provider,
            request_id=request_id,
        )
    return LLMError(
        f"{label} error ({status_code}): {message}",
        provider=provider,
        request_id=request_id,
    )
