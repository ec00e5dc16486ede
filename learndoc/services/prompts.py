"""Prompt templates for document generation.

Contains the prompts for:
1. Outline generation - a numbered list of chapter titles
2. Chapter generation - LaTeX content for one chapter, with a sliding
   window of context (last 3 chapters back, next 2 ahead)

All functions here are pure: same inputs, same prompt.
"""

from __future__ import annotations

from typing import Optional, Sequence

from learndoc.models import ComplexityLevel

# How many completed chapters are echoed back into a chapter prompt
PREVIOUS_CONTEXT_WINDOW = 3

# How many upcoming chapters are previewed in a chapter prompt
UPCOMING_CONTEXT_WINDOW = 2

PREVIOUS_CHAPTERS_HEADING = "**Previous chapters covered:**"
UPCOMING_CHAPTERS_HEADING = "**Upcoming chapters will cover:**"


# ==============================================================================
# Outline Prompt
# ==============================================================================

OUTLINE_AUDIENCE = {
    ComplexityLevel.beginner: "suitable for newcomers with no prior knowledge",
    ComplexityLevel.intermediate: "assuming basic understanding and some experience",
    ComplexityLevel.advanced: "for experts requiring deep technical details",
}


def build_outline_prompt(
    topic: str,
    complexity: ComplexityLevel,
    chapters: int,
) -> str:
    """Build the prompt asking for a numbered chapter outline.

    Args:
        topic: Document subject.
        complexity: Audience level.
        chapters: Exact number of titles the model must return.

    Returns:
        Formatted prompt string.
    """
    complexity = ComplexityLevel(complexity)
    audience = OUTLINE_AUDIENCE[complexity]

    return f"""Create a comprehensive {chapters}-chapter learning outline for "{topic}" at {complexity.value} level ({audience}).

Requirements:
- Each chapter should build logically upon previous ones
- Cover the topic comprehensively from basics to practical applications
- Use clear, descriptive chapter titles
- Ensure proper progression of difficulty

Format: Return EXACTLY {chapters} chapter titles, one per line, numbered from 1 to {chapters}.

Example format:
1. Introduction to [Topic]
2. Fundamental Concepts
3. [Specific topic area]
...

Generate the outline:"""


# ==============================================================================
# Chapter Prompt
# ==============================================================================

CHAPTER_STYLE_INSTRUCTIONS = {
    ComplexityLevel.beginner: (
        "Use clear, simple language. Define all technical terms. Include basic examples "
        "and step-by-step explanations. Focus on understanding rather than implementation."
    ),
    ComplexityLevel.intermediate: (
        "Assume familiarity with basic concepts. Include technical details and code examples. "
        "Balance theory with practical applications."
    ),
    ComplexityLevel.advanced: (
        "Provide deep technical analysis. Include complex examples, mathematical proofs, "
        "implementation details, and cutting-edge research references."
    ),
}


def build_contextual_instructions(
    chapter_number: int,
    total_chapters: int,
    previous_chapters: Sequence[str] = (),
    chapter_outline: Optional[Sequence[str]] = None,
) -> str:
    """Describe where a chapter sits in the document.

    Args:
        chapter_number: 1-based position of the chapter.
        total_chapters: Number of chapters in the document.
        previous_chapters: Titles of chapters already written, in order.
        chapter_outline: Full ordered outline (for the look-ahead).

    Returns:
        Context block: position framing, the last few completed chapters,
        and a preview of the next ones.
    """
    if chapter_number == 1:
        parts = [
            "This is the introductory chapter. Establish the foundation and "
            "motivate the reader's interest in the topic."
        ]
    elif chapter_number == total_chapters:
        parts = [
            "This is the final chapter. Synthesize previous concepts and provide "
            "closure with future directions."
        ]
    else:
        parts = [
            "This is a middle chapter that should build upon previous concepts "
            "while preparing for advanced topics."
        ]

    if previous_chapters and chapter_number > 1:
        window = list(previous_chapters)[-PREVIOUS_CONTEXT_WINDOW:]
        first_number = len(previous_chapters) - len(window) + 1
        parts.extend(["", PREVIOUS_CHAPTERS_HEADING])
        for offset, title in enumerate(window):
            parts.append(f"- Chapter {first_number + offset}: {title}")
        parts.extend([
            "",
            "Build upon these concepts naturally without repeating content.",
        ])

    if chapter_outline and chapter_number < total_chapters:
        upcoming = list(chapter_outline)[chapter_number:chapter_number + UPCOMING_CONTEXT_WINDOW]
        if upcoming:
            parts.extend(["", UPCOMING_CHAPTERS_HEADING])
            for offset, title in enumerate(upcoming):
                parts.append(f"- Chapter {chapter_number + offset + 1}: {title}")
            parts.extend([
                "",
                "Prepare the reader for these topics by introducing relevant concepts.",
            ])

    return "\n".join(parts)


def build_chapter_prompt(
    topic: str,
    chapter_title: str,
    complexity: ComplexityLevel,
    chapter_number: int,
    total_chapters: int,
    previous_chapters: Sequence[str] = (),
    chapter_outline: Optional[Sequence[str]] = None,
) -> str:
    """Build the prompt for one chapter's LaTeX content.

    Args:
        topic: Document subject.
        chapter_title: Title of the chapter to write.
        complexity: Audience level.
        chapter_number: 1-based chapter position.
        total_chapters: Number of chapters in the document.
        previous_chapters: Titles of chapters already written.
        chapter_outline: Full ordered outline.

    Returns:
        Formatted prompt string.
    """
    complexity = ComplexityLevel(complexity)
    context = build_contextual_instructions(
        chapter_number,
        total_chapters,
        previous_chapters,
        chapter_outline,
    )

    parts = [
        f"You are an expert technical writer creating Chapter {chapter_number} of a "
        f'comprehensive {total_chapters}-chapter learning document on "{topic}".',
        "",
        "## Chapter Details:",
        f"**Title:** {chapter_title}",
        f"**Position:** Chapter {chapter_number} of {total_chapters}",
        f"**Complexity Level:** {complexity.value}",
        "",
        "## Context & Flow:",
        context,
        "",
        "## Writing Instructions:",
        f"- **Style:** {CHAPTER_STYLE_INSTRUCTIONS[complexity]}",
        "- **Format:** Use proper LaTeX formatting throughout",
        "- **Length:** Generate substantial content (2,000-3,000 words equivalent)",
        "- **Structure:** Use \\section{}, \\subsection{}, and \\subsubsection{} appropriately",
        "- **Examples:** Include concrete, relevant examples",
        "- **Exercises:** Add practice problems or thought exercises",
        "- **Mathematical Content:** Use LaTeX math notation where appropriate",
        "",
        "## Required Elements:",
        "1. Clear section structure with logical progression",
        "2. Practical examples that reinforce concepts",
        "3. Key takeaways or summary points",
        "4. Continuity with the surrounding chapters",
        "",
        "## Output Format:",
        "Generate ONLY the LaTeX content for this chapter. "
        f"Start directly with \\section{{{chapter_title}}} and continue with the full chapter content.",
        "",
        "Generate the chapter now:",
    ]

    return "\n".join(parts)
