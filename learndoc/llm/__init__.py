"""Inference-service abstraction layer.

This module provides a vendor-neutral interface for text generation
(Ollama, OpenAI) that reports failures as explicit outcomes.
"""

from .client import LLMClient
from .errors import (
    AuthenticationError,
    ContentFilterError,
    InferenceUnavailableError,
    InvalidRequestError,
    LLMError,
    ModelNotFoundError,
    ProviderError,
    RateLimitError,
    TimeoutError,
)
from .models import GenerationOptions, GenerationOutcome, LLMRequest, LLMResponse, Usage

__all__ = [
    "LLMClient",
    "LLMRequest",
    "LLMResponse",
    "GenerationOptions",
    "GenerationOutcome",
    "Usage",
    "LLMError",
    "AuthenticationError",
    "RateLimitError",
    "TimeoutError",
    "InvalidRequestError",
    "ContentFilterError",
    "ProviderError",
    "ModelNotFoundError",
    "InferenceUnavailableError",
]
