"""Deterministic fallback content.

Used when the inference service fails or returns nothing usable. The
pipeline always produces a complete document; these templates trade
content quality for availability.
"""

from __future__ import annotations

from learndoc.models import ComplexityLevel

from .content_formatter import escape_latex
from .outline_parser import PLACEHOLDER_TITLE

# Generic titles that fit any topic; "{topic}" is substituted
FALLBACK_CHAPTER_TITLES = (
    "Introduction to {topic}",
    "Fundamental Concepts",
    "Core Principles",
    "Practical Applications",
    "Advanced Techniques",
    "Case Studies and Examples",
    "Best Practices",
    "Tools and Technologies",
    "Implementation Strategies",
    "Future Trends",
    "Troubleshooting",
    "Conclusion and Next Steps",
)

FALLBACK_COMPLEXITY_INTRO = {
    ComplexityLevel.beginner: (
        "This chapter introduces the basic concepts and provides a foundation for understanding."
    ),
    ComplexityLevel.intermediate: (
        "Building on previous knowledge, this chapter explores the topic in greater detail."
    ),
    ComplexityLevel.advanced: (
        "This advanced chapter provides in-depth analysis and technical implementation details."
    ),
}


def generate_fallback_outline(topic: str, chapters: int) -> list[str]:
    """Build a generic outline of exactly ``chapters`` titles.

    Titles come from FALLBACK_CHAPTER_TITLES in order; beyond its length,
    "Advanced Topic 1", "Advanced Topic 2", ... are appended.
    """
    base = [title.format(topic=topic) for title in FALLBACK_CHAPTER_TITLES]
    if chapters <= len(base):
        return base[:max(chapters, 0)]

    extra = [
        PLACEHOLDER_TITLE.format(number=i + 1)
        for i in range(chapters - len(base))
    ]
    return base + extra


def generate_fallback_chapter(
    topic: str,
    chapter_title: str,
    complexity: ComplexityLevel,
    chapter_number: int,
) -> str:
    """Build the structural template used in place of a generated chapter."""
    complexity = ComplexityLevel(complexity)
    title = escape_latex(chapter_title)
    title_lower = escape_latex(chapter_title.lower())
    topic_tex = escape_latex(topic)

    if chapter_number == 1:
        chapter_context = "This introductory chapter sets the foundation for all subsequent learning."
    else:
        chapter_context = (
            "This chapter builds upon concepts from previous chapters and prepares "
            "for advanced topics ahead."
        )

    return f"""\\section{{{title}}}

{FALLBACK_COMPLEXITY_INTRO[complexity]} {chapter_context}

\\subsection{{Overview}}
This section covers the fundamental aspects of {title} as it relates to {topic_tex}. The concepts presented here are essential for building a comprehensive understanding of the subject matter.

\\subsection{{Key Concepts}}
The main ideas and principles that form the foundation of this topic area include:
\\begin{{itemize}}
\\item Fundamental principle of {title_lower}
\\item Core methodologies and approaches
\\item Essential terminology and definitions
\\item Practical implementation considerations
\\end{{itemize}}

\\subsection{{Detailed Analysis}}
A deeper examination of {title} reveals several important aspects that are crucial for mastery of {topic_tex}. These concepts form the building blocks for more advanced understanding.

\\subsection{{Practical Applications}}
Real-world applications and examples demonstrate how these concepts are used in practice:
\\begin{{enumerate}}
\\item Industry applications and use cases
\\item Common implementation patterns
\\item Best practices and recommendations
\\item Troubleshooting and optimization strategies
\\end{{enumerate}}

\\subsection{{Exercises and Practice}}
\\begin{{itemize}}
\\item Review the key concepts presented in this chapter
\\item Consider how {title_lower} applies to your specific context
\\item Identify potential applications in your field of interest
\\item Prepare for the concepts that will be introduced in upcoming chapters
\\end{{itemize}}

\\subsection{{Summary}}
This chapter has provided a comprehensive overview of {title}, covering the essential aspects needed for understanding more advanced topics. The foundation established here will be built upon in subsequent chapters as we delve deeper into the complexities of {topic_tex}.

\\textbf{{Key Takeaways:}}
\\begin{{itemize}}
\\item Understanding of core {title_lower} principles
\\item Awareness of practical applications and use cases
\\item Preparation for advanced concepts in later chapters
\\item Foundation for hands-on implementation
\\end{{itemize}}
"""
