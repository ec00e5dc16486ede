"""Document request model.

A request is accepted once and never changes afterwards.

Pydantic v2. Extra fields are forbidden to prevent drift.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

MIN_CHAPTERS = 3
MAX_CHAPTERS = 12
DEFAULT_CHAPTERS = 6


class ComplexityLevel(str, Enum):
    """Target audience level of the generated document."""
    beginner = "beginner"
    intermediate = "intermediate"
    advanced = "advanced"


class DocumentRequest(BaseModel):
    """Immutable (topic, complexity, chapter count) request."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    topic: str = Field(min_length=1, description="Subject of the document")
    complexity: ComplexityLevel = Field(description="Audience level")
    chapters: int = Field(
        default=DEFAULT_CHAPTERS,
        ge=MIN_CHAPTERS,
        le=MAX_CHAPTERS,
        description="Number of chapters to generate",
    )

    @field_validator("topic")
    @classmethod
    def _strip_topic(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("topic must not be blank")
        return value
