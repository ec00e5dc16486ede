"""Generation client for outline and chapter content.

Owns the calls to the inference service and the fallback policy:
any call-level failure (timeout, non-2xx, malformed payload, blank text)
is logged and replaced by deterministic fallback content. Neither
generation method raises to its caller.
"""

from __future__ import annotations

import logging
import time
from typing import Optional, Sequence

from learndoc.llm import GenerationOptions, LLMClient, LLMRequest
from learndoc.models import ComplexityLevel

from .content_formatter import format_chapter_content
from .fallbacks import generate_fallback_chapter, generate_fallback_outline
from .outline_parser import parse_chapter_outline
from .prompts import build_chapter_prompt, build_outline_prompt

logger = logging.getLogger(__name__)

OUTLINE_OPTIONS = GenerationOptions(temperature=0.7, top_p=0.9)

# Longer responses for detailed chapters; stop at excessive whitespace
CHAPTER_OPTIONS = GenerationOptions(
    temperature=0.7,
    top_p=0.9,
    num_predict=3000,
    stop=["\n\n\n\n"],
)


class GenerationClient:
    """Outline and chapter generation with deterministic fallbacks."""

    def __init__(self, llm: Optional[LLMClient] = None, model: Optional[str] = None):
        """Initialize generation client.

        Args:
            llm: Inference client. Defaults to an LLMClient configured from env.
            model: Model override; the provider default is used when None.
        """
        self._llm = llm or LLMClient()
        self._model = model

    @property
    def llm(self) -> LLMClient:
        return self._llm

    async def check_connection(self) -> bool:
        """Liveness probe. Returns False on any failure, never raises."""
        return await self._llm.check_connection()

    async def generate_chapter_outline(
        self,
        topic: str,
        complexity: ComplexityLevel,
        chapters: int,
        correlation_id: Optional[str] = None,
    ) -> list[str]:
        """Generate exactly ``chapters`` titles.

        Falls back to the generic outline when the call fails or returns
        blank text.
        """
        logger.info(f"Generating chapter outline for: {topic} ({complexity}, {chapters} chapters)")

        request = LLMRequest(
            prompt=build_outline_prompt(topic, complexity, chapters),
            model=self._model,
            options=OUTLINE_OPTIONS,
        )
        outcome = await self._llm.generate(request, correlation_id=correlation_id)

        if not outcome.ok:
            logger.warning(f"Outline generation failed ({outcome.error}); using fallback outline")
            return generate_fallback_outline(topic, chapters)

        if not outcome.text.strip():
            logger.warning("Outline generation returned empty text; using fallback outline")
            return generate_fallback_outline(topic, chapters)

        return parse_chapter_outline(outcome.text, chapters)

    async def generate_chapter_content(
        self,
        topic: str,
        chapter_title: str,
        complexity: ComplexityLevel,
        chapter_number: int,
        total_chapters: int,
        previous_chapters: Sequence[str] = (),
        chapter_outline: Optional[Sequence[str]] = None,
        correlation_id: Optional[str] = None,
    ) -> str:
        """Generate normalized LaTeX for one chapter.

        Args:
            topic: Document subject.
            chapter_title: Title of this chapter.
            complexity: Audience level.
            chapter_number: 1-based chapter position.
            total_chapters: Number of chapters in the document.
            previous_chapters: Titles already written, in order.
            chapter_outline: Full outline, for the look-ahead context.
            correlation_id: Ties the call to its job in the logs.

        Returns:
            Formatted chapter content, or the fallback template when the
            call fails or returns blank text.
        """
        logger.info(f"Generating content for chapter {chapter_number}: {chapter_title}")

        request = LLMRequest(
            prompt=build_chapter_prompt(
                topic,
                chapter_title,
                complexity,
                chapter_number,
                total_chapters,
                previous_chapters,
                chapter_outline,
            ),
            model=self._model,
            options=CHAPTER_OPTIONS,
        )

        start = time.perf_counter()
        outcome = await self._llm.generate(request, correlation_id=correlation_id)
        elapsed_ms = int((time.perf_counter() - start) * 1000)

        if not outcome.ok or not outcome.text.strip():
            reason = outcome.error if not outcome.ok else "empty response"
            logger.warning(
                f"Chapter {chapter_number} generation failed ({reason}); using fallback content"
            )
            return generate_fallback_chapter(topic, chapter_title, complexity, chapter_number)

        logger.info(f"Chapter {chapter_number} generated in {elapsed_ms}ms")
        return format_chapter_content(outcome.text, chapter_title)
