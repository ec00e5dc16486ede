"""Chapter outline parsing.

Turns free-form model output into exactly N chapter titles. Pure text
processing, no I/O.
"""

from __future__ import annotations

import re

# "1. Title", "1.Title", "Chapter 1: Title", "chapter 2 Title"
OUTLINE_LINE_PATTERN = re.compile(
    r"^(?:\d+\.\s*|Chapter\s*\d+:?\s*)(.+)$",
    re.IGNORECASE,
)

# Markdown emphasis and quotes models like to wrap titles in
_TITLE_WRAPPERS = "*_\"'`"

PLACEHOLDER_TITLE = "Advanced Topic {number}"


def _clean_title(raw: str) -> str:
    """Strip wrapping punctuation and whitespace from a matched title."""
    title = raw.strip().strip(_TITLE_WRAPPERS).strip()
    title = title.lstrip(":-").strip()
    return title


def parse_chapter_outline(generated_text: str, expected_chapters: int) -> list[str]:
    """Extract exactly ``expected_chapters`` titles from model output.

    Lines that do not look like numbered titles are ignored. Missing titles
    are padded with "Advanced Topic k" (k = position), surplus titles are
    dropped.

    Args:
        generated_text: Raw model output.
        expected_chapters: Required number of titles.

    Returns:
        List of non-empty titles, always of length ``expected_chapters``.

    Examples:
        >>> parse_chapter_outline("1. Foo\\n2. Bar\\n", 4)
        ['Foo', 'Bar', 'Advanced Topic 3', 'Advanced Topic 4']
    """
    chapters: list[str] = []

    for line in (generated_text or "").splitlines():
        match = OUTLINE_LINE_PATTERN.match(line.strip())
        if not match:
            continue
        title = _clean_title(match.group(1))
        # Skip matches that are punctuation only
        if title and any(ch.isalnum() for ch in title):
            chapters.append(title)

    while len(chapters) < expected_chapters:
        chapters.append(PLACEHOLDER_TITLE.format(number=len(chapters) + 1))

    return chapters[:max(expected_chapters, 0)]
