"""
Search-and-replace controller.

Owns the note collection, the search state, the filtered view and the active
replacement job, and exposes them only through explicit transitions:

    IDLE        --set_search(term)-->        SEARCHING
    SEARCHING   --stage_replacement(text)--> PREVIEWING_REPLACEMENT
    PREVIEWING_REPLACEMENT --cancel_replacement()--> SEARCHING
    PREVIEWING_REPLACEMENT --confirm_replacement()--> REPLACING_IN_FLIGHT
    REPLACING_IN_FLIGHT --all updates succeeded--> RELOADING --> IDLE

LOADING covers the initial fetch. Failures during a replacement or a reload return the
controller to the phase implied by its (preserved) search state so the user can retry.
"""
import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol

from schemas.note import Note
from services.exceptions import InvalidStateError
from services.highlight_renderer import Token, render_note
from services.note_filter import filter_notes
from services.replace_service import (
    NoteUpdater,
    ProgressCallback,
    ReplacementJob,
    ReplacementSummary,
    run_replacement,
    validate_job,
)

logger = logging.getLogger(__name__)


class NoteStore(NoteUpdater, Protocol):
    """Source of the authoritative note collection."""

    async def fetch_notes(self, operation: str = "load") -> list[Note]: ...


class SearchPhase(StrEnum):
    """Phases of the search controller."""

    IDLE = "idle"
    LOADING = "loading"
    SEARCHING = "searching"
    PREVIEWING_REPLACEMENT = "previewing_replacement"
    REPLACING_IN_FLIGHT = "replacing_in_flight"
    RELOADING = "reloading"


_BUSY_PHASES = frozenset({
    SearchPhase.LOADING,
    SearchPhase.REPLACING_IN_FLIGHT,
    SearchPhase.RELOADING,
})


@dataclass(frozen=True)
class SearchState:
    """User-entered search and replacement terms. None means not entered."""

    term: str | None = None
    replacement: str | None = None


@dataclass(frozen=True)
class RenderedNote:
    """A filtered note with its display blocks."""

    note: Note
    blocks: list[list[Token]]


class SearchController:
    """Single owner of all search-and-replace state."""

    def __init__(self, store: NoteStore) -> None:
        self._store = store
        self._notes: list[Note] = []
        self._filtered: list[Note] = self._notes
        self._search = SearchState()
        self._job: ReplacementJob | None = None
        self._phase = SearchPhase.IDLE

    @property
    def phase(self) -> SearchPhase:
        return self._phase

    @property
    def notes(self) -> list[Note]:
        return self._notes

    @property
    def filtered_notes(self) -> list[Note]:
        return self._filtered

    @property
    def search_state(self) -> SearchState:
        return self._search

    @property
    def job(self) -> ReplacementJob | None:
        """The confirmed job while it runs, or the failed job after an unsuccessful batch."""
        return self._job

    @property
    def is_loading(self) -> bool:
        return self._phase == SearchPhase.LOADING

    def _require_not_busy(self, action: str) -> None:
        if self._phase in _BUSY_PHASES:
            raise InvalidStateError(f"Cannot {action} while {self._phase}")

    def _resting_phase(self) -> SearchPhase:
        if not self._search.term:
            return SearchPhase.IDLE
        if self._search.replacement is not None:
            return SearchPhase.PREVIEWING_REPLACEMENT
        return SearchPhase.SEARCHING

    async def load(self) -> list[Note]:
        """
        Initial fetch of the note collection.

        The current search term (if any) is applied to the fetched notes. On failure
        the previous collection is kept and FetchFailureError propagates.
        """
        self._require_not_busy("load notes")
        self._phase = SearchPhase.LOADING
        try:
            notes = await self._store.fetch_notes("load")
        finally:
            self._phase = self._resting_phase()
        self._notes = notes
        self._filtered = filter_notes(notes, self._search.term)
        logger.info("Loaded %d notes", len(notes))
        return notes

    def set_search(self, term: str | None) -> list[Note]:
        """
        Change the search term and recompute the filtered view.

        Clearing the term also drops any staged replacement.
        """
        self._require_not_busy("change the search term")
        if not term:
            self._search = SearchState()
        else:
            self._search = SearchState(term=term, replacement=self._search.replacement)
        self._filtered = filter_notes(self._notes, self._search.term)
        self._phase = self._resting_phase()
        return self._filtered

    def stage_replacement(self, replacement: str | None) -> None:
        """Preview a replacement for the active term. None unstages it."""
        self._require_not_busy("stage a replacement")
        if not self._search.term:
            raise InvalidStateError("Enter a search term before staging a replacement")
        self._search = SearchState(term=self._search.term, replacement=replacement)
        self._phase = self._resting_phase()

    def cancel_replacement(self) -> None:
        """Abandon a staged replacement before it is confirmed."""
        if self._phase != SearchPhase.PREVIEWING_REPLACEMENT:
            raise InvalidStateError(f"No replacement to cancel while {self._phase}")
        self._search = SearchState(term=self._search.term)
        self._job = None
        self._phase = self._resting_phase()

    async def confirm_replacement(
        self,
        on_progress: ProgressCallback | None = None,
    ) -> ReplacementSummary:
        """
        Rewrite the staged replacement into every note in the filtered view.

        The filtered view is snapshotted into a job; once started, the batch cannot be
        cancelled. After all updates succeed the collection is reloaded and the search
        state reset.

        Raises:
            InvalidStateError: If no replacement is staged.
            ReplacementValidationError: If the filtered view is empty. Nothing is sent.
            BatchUpdateError: If any update failed. Notes and search state are kept.
            FetchFailureError: If the reload failed. Notes and search state are kept.
        """
        if self._phase != SearchPhase.PREVIEWING_REPLACEMENT:
            raise InvalidStateError(f"No replacement to confirm while {self._phase}")

        job = ReplacementJob(
            target_notes=tuple(self._filtered),
            term=self._search.term or "",
            replacement=self._search.replacement,
        )
        validate_job(job)

        self._job = job
        self._phase = SearchPhase.REPLACING_IN_FLIGHT

        async def _reload_after_batch() -> None:
            self._phase = SearchPhase.RELOADING
            await self._reconcile()

        try:
            return await run_replacement(job, self._store, _reload_after_batch, on_progress)
        except Exception:
            self._phase = self._resting_phase()
            raise

    async def reload(self) -> list[Note]:
        """
        Fetch the authoritative collection and reset to a clean baseline.

        On failure the previous collection and search state are kept.
        """
        self._require_not_busy("reload notes")
        self._phase = SearchPhase.RELOADING
        try:
            return await self._reconcile()
        except Exception:
            self._phase = self._resting_phase()
            raise

    async def _reconcile(self) -> list[Note]:
        notes = await self._store.fetch_notes("reload")
        self._notes = notes
        self._filtered = notes
        self._search = SearchState()
        self._job = None
        self._phase = SearchPhase.IDLE
        logger.info("Reloaded %d notes", len(notes))
        return notes

    def rendered(self) -> list[RenderedNote]:
        """Display blocks for the filtered view under the current search state."""
        term, replacement = self._search.term, self._search.replacement
        return [
            RenderedNote(note, render_note(note, term, replacement))
            for note in self._filtered
        ]
