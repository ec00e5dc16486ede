"""LLM data models.

Vendor-neutral request, response and outcome models for text generation.
These models abstract away provider-specific details.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class GenerationOptions(BaseModel):
    """Sampling options forwarded to the provider."""

    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    top_p: float = Field(default=0.9, gt=0.0, le=1.0)
    num_predict: Optional[int] = Field(default=None, gt=0, description="Max output tokens")
    stop: Optional[list[str]] = None


class LLMRequest(BaseModel):
    """Vendor-neutral text-generation request."""

    prompt: str
    model: Optional[str] = None
    options: GenerationOptions = Field(default_factory=GenerationOptions)


class Usage(BaseModel):
    """Token usage statistics."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class LLMResponse(BaseModel):
    """Vendor-neutral text-generation response."""

    text: Optional[str]
    finish_reason: str = "stop"
    usage: Usage = Field(default_factory=Usage)
    model: str
    provider: str
    latency_ms: int
    request_id: Optional[str] = None


class GenerationOutcome(BaseModel):
    """Result of one generation call: either a response or a failure reason.

    LLMClient never raises for call-level failures; callers branch on ``ok``
    and substitute their own fallback.
    """

    response: Optional[LLMResponse] = None
    error: Optional[str] = None
    error_type: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.response is not None and self.error is None

    @property
    def text(self) -> str:
        """Generated text, or an empty string for failures."""
        if self.response is None or self.response.text is None:
            return ""
        return self.response.text

    @classmethod
    def success(cls, response: LLMResponse) -> "GenerationOutcome":
        return cls(response=response)

    @classmethod
    def failure(cls, error: str, error_type: str = "LLMError") -> "GenerationOutcome":
        return cls(error=error, error_type=error_type)
