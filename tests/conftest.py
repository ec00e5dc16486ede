"""Pytest fixtures for testing."""

from collections.abc import AsyncGenerator
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from learndoc.api.main import create_app
from learndoc.llm import GenerationOutcome, LLMClient, LLMResponse
from learndoc.models import ComplexityLevel, DocumentRequest
from learndoc.services import DocumentGenerator, GenerationClient, LatexService


SAMPLE_OUTLINE_TEXT = """Here is the outline:
1. Graphs and Vertices
2. Paths and Cycles
3. Trees and Forests
"""

SAMPLE_CHAPTER_TEXT = r"""\section{Graphs and Vertices}
A graph is a set of vertices joined by edges.
\subsection{Definitions}
Let $G = (V, E)$ be a graph.
$$|E| \leq \binom{|V|}{2}$$
"""


def make_outcome(text: str) -> GenerationOutcome:
    """Successful outcome carrying ``text``."""
    return GenerationOutcome.success(
        LLMResponse(text=text, model="mistral:7b", provider="ollama", latency_ms=5)
    )


def make_failure(message: str = "connection refused") -> GenerationOutcome:
    """Failed outcome, as LLMClient reports provider errors."""
    return GenerationOutcome.failure(message, error_type="ProviderError")


@pytest.fixture
def sample_request() -> DocumentRequest:
    """Three-chapter beginner request."""
    return DocumentRequest(topic="Graph Theory", complexity=ComplexityLevel.beginner, chapters=3)


@pytest.fixture
def mock_llm() -> MagicMock:
    """LLMClient double that is reachable but always fails generation."""
    llm = MagicMock(spec=LLMClient)
    llm.provider_name = "ollama"
    llm.check_connection = AsyncMock(return_value=True)
    llm.generate = AsyncMock(return_value=make_failure())
    return llm


@pytest.fixture
def latex_service(tmp_path) -> LatexService:
    """LaTeX service writing to a temp dir, with a compiler that never exists."""
    return LatexService(
        output_dir=tmp_path / "output",
        compiler="learndoc-test-no-such-compiler",
        compile_timeout=5,
    )


@pytest.fixture
def generator(mock_llm: MagicMock, latex_service: LatexService) -> DocumentGenerator:
    """Orchestrator wired to test doubles, with no inter-chapter pause."""
    return DocumentGenerator(
        generation_client=GenerationClient(llm=mock_llm),
        latex_service=latex_service,
        chapter_pause_seconds=0,
    )


@pytest_asyncio.fixture
async def client(generator: DocumentGenerator) -> AsyncGenerator[AsyncClient, None]:
    """Provide an async HTTP client for testing."""
    app = create_app(generator)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    await generator.shutdown()


@pytest.fixture
def sample_generate_payload() -> dict[str, Any]:
    """Valid request body for POST /api/generate-document."""
    return {
        "topic": "Graph Theory",
        "complexity": "beginner",
        "chapters": 3,
    }
