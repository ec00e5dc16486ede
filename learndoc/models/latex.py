"""Result models for the LaTeX assembly and compile steps."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class LatexValidation(BaseModel):
    """Structural sanity check of an assembled document."""
    model_config = ConfigDict(extra="forbid")

    valid: bool
    errors: List[str] = Field(default_factory=list)


class CompileResult(BaseModel):
    """Outcome of one compiler run. Compilation failures are data, not exceptions."""
    model_config = ConfigDict(extra="forbid")

    success: bool
    pdf_path: Optional[str] = None
    error: Optional[str] = None
