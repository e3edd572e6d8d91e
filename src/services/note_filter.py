"""Client-side filtering of the note collection by search term."""
from schemas.note import Note
from services.text_matcher import contains_term


def filter_notes(notes: list[Note], term: str | None) -> list[Note]:
    """
    Return the notes whose content contains term, in collection order.

    With no term the collection itself is returned. Absent content counts as empty.
    """
    if not term:
        return notes
    return [note for note in notes if contains_term(note.content, term)]
