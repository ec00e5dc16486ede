"""Inference provider implementations.

This package contains provider-specific implementations of the LLMProvider interface.
"""

from .base import LLMProvider
from .ollama import OllamaProvider
from .openai import OpenAIProvider

__all__ = [
    "LLMProvider",
    "OllamaProvider",
    "OpenAIProvider",
]
