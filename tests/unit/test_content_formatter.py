"""Unit tests for chapter content normalization."""

from learndoc.services.content_formatter import escape_latex, format_chapter_content


class TestFormatChapterContent:
    """Tests for format_chapter_content function."""

    def test_inserts_missing_heading(self):
        """Test that content without a section gets one for the title."""
        result = format_chapter_content("Some body text.", "Intro")
        assert result.startswith("\\section{Intro}\n")
        assert "Some body text." in result
        assert result.index("\\section{Intro}") < result.index("Some body text.")

    def test_keeps_existing_heading(self):
        """Test that an existing section is not duplicated."""
        result = format_chapter_content("\\section{Graphs}\nBody", "Other Title")
        assert result.count("\\section{") == 1
        assert "Other Title" not in result

    def test_escapes_inserted_title(self):
        """Test that special characters in an inserted title are escaped."""
        result = format_chapter_content("Body", "Costs & Benefits_1")
        assert result.startswith("\\section{Costs \\& Benefits\\_1}")

    def test_collapses_blank_line_runs(self):
        """Test that long newline runs become a single blank line."""
        result = format_chapter_content("\\section{A}\nOne\n\n\n\n\n\nTwo", "A")
        assert "One\n\nTwo" in result
        assert "\n\n\n" not in result

    def test_environments_on_own_lines(self):
        """Test that begin/end markers are split onto their own lines."""
        result = format_chapter_content(
            "\\section{A}\nList: \\begin{itemize}\\item x\\end{itemize} after", "A"
        )
        assert "List: \n\\begin{itemize}" in result
        assert "\\end{itemize}\n after" in result

    def test_rewrites_dollar_display_math(self):
        """Test that $$...$$ becomes \\[ ... \\]."""
        result = format_chapter_content("\\section{A}\nSee $$a^2 + b^2 = c^2$$ here", "A")
        assert "$$" not in result
        assert "\\[\na^2 + b^2 = c^2\n\\]" in result

    def test_nested_braces_in_heading(self):
        """Test headings whose titles contain one level of braces."""
        result = format_chapter_content("\\subsection{The \\emph{Core} Idea}Text", "A")
        assert "\\subsection{The \\emph{Core} Idea}\nText" in result

    def test_ends_with_single_newline(self):
        """Test trailing whitespace normalization."""
        result = format_chapter_content("\\section{A}\nBody\n\n\n   ", "A")
        assert result.endswith("Body\n")

    def test_empty_content(self):
        """Test that empty input still produces a heading."""
        assert format_chapter_content("", "Intro") == "\\section{Intro}\n"


class TestEscapeLatex:
    """Tests for escape_latex function."""

    def test_escapes_specials(self):
        assert escape_latex("50% of $5 & #1") == "50\\% of \\$5 \\& \\#1"

    def test_backslash_and_braces(self):
        assert escape_latex("a\\b{c}") == "a\\textbackslash{}b\\{c\\}"

    def test_plain_text_unchanged(self):
        assert escape_latex("Graph Theory") == "Graph Theory"
