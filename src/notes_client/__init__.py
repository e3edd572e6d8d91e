"""Client for the remote note store with search-and-replace."""

from .note_store import RemoteNoteStore

__all__ = ["RemoteNoteStore"]
