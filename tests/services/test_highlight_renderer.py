"""Tests for highlight rendering of matched segments."""

from services.highlight_renderer import (
    Token,
    TokenStyle,
    created_label,
    render,
    render_first_line,
    render_lines,
    render_note,
    to_console_markup,
)
from services.text_matcher import segment

PLAIN = TokenStyle.PLAIN
HIGHLIGHT = TokenStyle.HIGHLIGHT
STRIKE = TokenStyle.STRIKE


class TestRender:
    """Tests for render function."""

    def test__render__highlights_matches_without_replacement(self) -> None:
        """Test matches are highlighted and surrounding text is plain."""
        tokens = render(segment("say hi", "hi"))
        assert tokens == [
            Token("say ", PLAIN),
            Token("hi", HIGHLIGHT),
            Token("", PLAIN),
        ]

    def test__render__strikes_match_and_highlights_replacement(self) -> None:
        """Test a staged replacement previews as strike + highlighted replacement."""
        tokens = render(segment("cat nap", "cat"), "dog")
        assert tokens == [
            Token("", PLAIN),
            Token("cat", STRIKE),
            Token("dog", HIGHLIGHT),
            Token(" nap", PLAIN),
        ]

    def test__render__empty_replacement_is_not_whitespace(self) -> None:
        """Test an empty replacement previews as an empty highlighted token."""
        tokens = render(segment("axb", "x"), "")
        assert Token("", HIGHLIGHT) in tokens
        assert Token(" ", HIGHLIGHT) not in tokens

    def test__render__non_match_text_is_verbatim(self) -> None:
        """Test plain tokens preserve whitespace exactly."""
        tokens = render(segment("  spaced  ", "zzz"))
        assert tokens == [Token("  spaced  ", PLAIN)]

    def test__render__does_not_change_text_order(self) -> None:
        """Test plain and struck tokens reproduce the original text."""
        text = "one two one"
        tokens = render(segment(text, "one"), "three")
        original = "".join(t.text for t in tokens if t.style != HIGHLIGHT)
        assert original == text


class TestRenderFirstLine:
    """Tests for compact first-line display."""

    def test__render_first_line__trims_and_cuts_at_line_break(self) -> None:
        assert render_first_line("  \n  Title line  \nbody") == "Title line"

    def test__render_first_line__strips_trailing_spaces_of_first_line(self) -> None:
        assert render_first_line("Title   \nbody") == "Title"

    def test__render_first_line__single_line(self) -> None:
        assert render_first_line("just text") == "just text"

    def test__render_first_line__absent_content(self) -> None:
        assert render_first_line(None) == ""


class TestRenderLines:
    """Tests for per-line rendering."""

    def test__render_lines__one_block_per_line_in_order(self) -> None:
        """Test each line is rendered independently and in order."""
        blocks = render_lines("a cat\nno match\ncat", "cat")
        assert len(blocks) == 3
        assert blocks[0] == [Token("a ", PLAIN), Token("cat", HIGHLIGHT), Token("", PLAIN)]
        assert blocks[1] == [Token("no match", PLAIN)]
        assert blocks[2] == [Token("", PLAIN), Token("cat", HIGHLIGHT), Token("", PLAIN)]

    def test__render_lines__preserves_empty_lines(self) -> None:
        blocks = render_lines("a\n\nb", "a")
        assert blocks[1] == [Token("", PLAIN)]


class TestRenderNote:
    """Tests for render_note function."""

    def test__render_note__first_line_mode_without_term(self, note_factory) -> None:
        """Test a note renders as its trimmed first line when no term is active."""
        note = note_factory("n1", "  First\nSecond")
        assert render_note(note) == [[Token("First", PLAIN)]]

    def test__render_note__highlighted_lines_with_term(self, note_factory) -> None:
        """Test every line is rendered when a term is active."""
        note = note_factory("n1", "First\nSecond")
        blocks = render_note(note, "Second", "Third")
        assert blocks[1] == [
            Token("", PLAIN),
            Token("Second", STRIKE),
            Token("Third", HIGHLIGHT),
            Token("", PLAIN),
        ]


class TestCreatedLabel:
    """Tests for created_label function."""

    def test__created_label__formats_timestamp(self, note_factory) -> None:
        label = created_label(note_factory("n1", "x"))
        assert label.startswith("Created: ")
        assert label != "Created: unknown"

    def test__created_label__missing_timestamp(self, note_factory) -> None:
        note = note_factory("n1", "x").model_copy(update={"created_at": None})
        assert created_label(note) == "Created: unknown"


class TestToConsoleMarkup:
    """Tests for terminal markup."""

    def test__to_console_markup__marks_styles(self) -> None:
        tokens = render(segment("cat nap", "cat"), "dog")
        assert to_console_markup(tokens) == "~~cat~~[[dog]] nap"
