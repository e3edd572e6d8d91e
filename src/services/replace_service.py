"""
Service for replacing a term across many notes (replace-all).

Issues one remote update per target note, all concurrently, and waits for every
update to settle before deciding what happens next:

- All updates succeeded: the caller-supplied reload runs and the job is DONE.
- Any update failed: no reload; the job is FAILED and BatchUpdateError is raised
  with the per-note outcomes. Siblings of a failed update are never cancelled.
- An update raised something other than a store error: once all updates settle it
  is re-raised, with the batch's store failures attached as notes.

The replacement text is used verbatim, so an empty replacement deletes the term.
"""
import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Protocol

from schemas.note import Note, NoteUpdate
from services.exceptions import (
    BatchUpdateError,
    ReplacementValidationError,
    UpdateFailureError,
)
from services.text_matcher import segment

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


class NoteUpdater(Protocol):
    """Anything that can durably update a single note."""

    async def update_note(self, note_id: str, update: NoteUpdate) -> None: ...


class JobState(StrEnum):
    """Lifecycle of a replacement job."""

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    DONE = "done"
    FAILED = "failed"


@dataclass
class ReplacementJob:
    """
    A confirmed replacement.

    target_notes is the filtered view captured at confirmation time; it is never
    re-filtered while the job runs.
    """

    target_notes: tuple[Note, ...]
    term: str
    replacement: str
    completed: int = 0
    state: JobState = JobState.NOT_STARTED

    @property
    def total(self) -> int:
        return len(self.target_notes)


@dataclass(frozen=True)
class UpdateOutcome:
    """Result of the update request for one note."""

    note_id: str
    error: UpdateFailureError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class ReplacementSummary:
    """Aggregate result of a settled batch, in target order."""

    term: str
    replacement: str
    outcomes: list[UpdateOutcome] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> list[UpdateOutcome]:
        return [o for o in self.outcomes if o.ok]

    @property
    def failed(self) -> list[UpdateOutcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def completed(self) -> int:
        return len(self.succeeded)


def replace_all_occurrences(content: str | None, term: str, replacement: str) -> str:
    """
    Replace every non-overlapping occurrence of term with replacement.

    Built on the same segmentation as the highlight preview, so what is written is
    exactly what was previewed.
    """
    return "".join(
        replacement if seg.is_match else seg.value
        for seg in segment(content, term)
    )


def validate_job(job: ReplacementJob) -> None:
    """
    Reject a job before any request is made.

    Raises:
        ReplacementValidationError: If the term is empty, there are no target notes,
            the replacement is missing, or the job has already been started.
    """
    if not job.term:
        raise ReplacementValidationError("Search term cannot be empty")
    if not job.target_notes:
        raise ReplacementValidationError(f"No notes contain '{job.term}'")
    if job.replacement is None:
        raise ReplacementValidationError("Replacement text is required (use '' to delete)")
    if job.state != JobState.NOT_STARTED:
        raise ReplacementValidationError(f"Replacement job is already {job.state}")


async def run_replacement(
    job: ReplacementJob,
    store: NoteUpdater,
    reload: Callable[[], Awaitable[Any]],
    on_progress: ProgressCallback | None = None,
) -> ReplacementSummary:
    """
    Run a replacement job to completion.

    Args:
        job: The confirmed job. Mutated in place (completed count and state).
        store: Note store used for the per-note updates.
        reload: Called once, only after every update succeeded.
        on_progress: Called with (completed, total) after each successful update.

    Returns:
        Summary with one successful outcome per target note.

    Raises:
        ReplacementValidationError: Before any request, if the job is invalid.
        BatchUpdateError: If any update failed; reload is not called.
        Exception: The first non-store error raised by an update, once every update has
            settled. Store failures from the same batch are logged and added as notes.
        FetchFailureError: If the reload failed; the job is FAILED.
    """
    validate_job(job)
    job.state = JobState.IN_PROGRESS
    logger.info(
        "Replacing '%s' in %d notes", job.term, job.total,
    )

    async def _update_one(note: Note) -> None:
        update = NoteUpdate(
            content=replace_all_occurrences(note.content, job.term, job.replacement),
            attachment=note.attachment,
        )
        await store.update_note(note.id, update)
        job.completed += 1
        if on_progress is not None:
            on_progress(job.completed, job.total)

    results = await asyncio.gather(
        *(_update_one(note) for note in job.target_notes),
        return_exceptions=True,
    )

    summary = ReplacementSummary(term=job.term, replacement=job.replacement)
    unexpected: BaseException | None = None
    for note, result in zip(job.target_notes, results, strict=True):
        if isinstance(result, UpdateFailureError):
            logger.warning("Update failed for note %s: %s", note.id, result)
            summary.outcomes.append(UpdateOutcome(note.id, result))
        elif isinstance(result, BaseException):
            logger.error("Unexpected error updating note %s: %r", note.id, result)
            if unexpected is None:
                unexpected = result
        else:
            summary.outcomes.append(UpdateOutcome(note.id))

    if unexpected is not None:
        # First unexpected error wins; store failures are attached to it as notes
        job.state = JobState.FAILED
        for failure in summary.failed:
            unexpected.add_note(str(failure.error))
        raise unexpected

    if summary.failed:
        job.state = JobState.FAILED
        raise BatchUpdateError(summary)

    try:
        await reload()
    except Exception:
        job.state = JobState.FAILED
        raise

    job.state = JobState.DONE
    logger.info("Replaced '%s' in %d notes", job.term, summary.completed)
    return summary
