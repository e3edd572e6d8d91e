"""
Rendering of matcher segments into display tokens.

Produces a presentation-neutral token stream: callers (the CLI, or any other front end)
map each token style onto their own emphasis. A staged replacement is only previewed;
nothing here modifies note content.
"""
from dataclasses import dataclass
from enum import StrEnum

from schemas.note import Note
from services.text_matcher import Segment, segment


class TokenStyle(StrEnum):
    """How a token should be emphasized."""

    PLAIN = "plain"
    HIGHLIGHT = "highlight"
    STRIKE = "strike"


@dataclass(frozen=True)
class Token:
    """A run of text with a single display style."""

    text: str
    style: TokenStyle


def render(segments: list[Segment], replacement: str | None = None) -> list[Token]:
    """
    Turn segments into display tokens.

    Non-match segments are plain text. A match is highlighted when no replacement is
    staged; otherwise it is struck through and immediately followed by a highlighted
    token carrying the replacement literally (an empty replacement yields an empty
    highlighted token, never whitespace).
    """
    tokens: list[Token] = []
    for seg in segments:
        if not seg.is_match:
            tokens.append(Token(seg.value, TokenStyle.PLAIN))
        elif replacement is None:
            tokens.append(Token(seg.value, TokenStyle.HIGHLIGHT))
        else:
            tokens.append(Token(seg.value, TokenStyle.STRIKE))
            tokens.append(Token(replacement, TokenStyle.HIGHLIGHT))
    return tokens


def render_first_line(content: str | None) -> str:
    """Compact list display: the trimmed text up to the first line break."""
    return (content or "").strip().split("\n")[0].strip()


def render_lines(
    content: str | None,
    term: str | None,
    replacement: str | None = None,
) -> list[list[Token]]:
    """
    Render content line by line.

    Each line is matched and rendered as an independent block, in order. Terms that
    span a line break therefore never match, which keeps every block self-contained.
    """
    return [render(segment(line, term), replacement) for line in (content or "").split("\n")]


def render_note(
    note: Note,
    term: str | None = None,
    replacement: str | None = None,
) -> list[list[Token]]:
    """Render a note for the list: first line only with no term, highlighted lines otherwise."""
    if not term:
        return [[Token(render_first_line(note.content), TokenStyle.PLAIN)]]
    return render_lines(note.content, term, replacement)


def created_label(note: Note) -> str:
    """Secondary list line showing when the note was created, in local time."""
    if note.created_at is None:
        return "Created: unknown"
    return f"Created: {note.created_at.astimezone().strftime('%x, %X')}"


def to_console_markup(tokens: list[Token]) -> str:
    """Flatten tokens for a plain terminal: [[highlight]] and ~~strike~~."""
    parts = []
    for token in tokens:
        if token.style == TokenStyle.HIGHLIGHT:
            parts.append(f"[[{token.text}]]")
        elif token.style == TokenStyle.STRIKE:
            parts.append(f"~~{token.text}~~")
        else:
            parts.append(token.text)
    return "".join(parts)
