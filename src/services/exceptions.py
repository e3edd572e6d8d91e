"""Exceptions raised by the search-and-replace services."""
from typing import TYPE_CHECKING

from shared.api_errors import ParsedApiError

if TYPE_CHECKING:
    from services.replace_service import ReplacementSummary


class NotesClientError(Exception):
    """
    Base exception for recoverable client failures.

    Attributes:
        operation: Name of the operation that failed (e.g. "reload", "update").
        note_id: ID of the affected note, when the failure concerns a single note.
    """

    def __init__(self, message: str, operation: str, note_id: str | None = None) -> None:
        self.operation = operation
        self.note_id = note_id
        super().__init__(message)


class FetchFailureError(NotesClientError):
    """Raised when the note collection could not be retrieved."""

    def __init__(self, operation: str, error: ParsedApiError) -> None:
        self.error = error
        super().__init__(f"Failed to {operation} notes: {error.message}", operation)


class UpdateFailureError(NotesClientError):
    """Raised when a single note could not be updated."""

    def __init__(self, note_id: str, error: ParsedApiError) -> None:
        self.error = error
        super().__init__(
            f"Failed to update note '{note_id}': {error.message}",
            "update",
            note_id=note_id,
        )


class BatchUpdateError(NotesClientError):
    """
    Raised when a replacement batch settled with one or more failed updates.

    Attributes:
        summary: Per-note outcomes of the settled batch.
        failures: The UpdateFailureError for each note that was not updated.
    """

    def __init__(self, summary: "ReplacementSummary") -> None:
        self.summary = summary
        self.failures = [outcome.error for outcome in summary.failed]
        super().__init__(
            f"{len(self.failures)} of {summary.total} note updates failed",
            "replace",
        )


class ReplacementValidationError(NotesClientError):
    """Raised when a replacement is rejected before any request is made."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "replace")


class InvalidStateError(Exception):
    """Raised when a search controller transition is invalid for its current state."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
