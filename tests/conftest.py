"""Pytest fixtures for testing."""
import asyncio
from collections.abc import AsyncGenerator, Callable, Generator
from datetime import UTC, datetime
from typing import Any

import httpx
import pytest
import respx

from core.config import Settings
from notes_client.api_client import create_http_client
from notes_client.note_store import RemoteNoteStore
from schemas.note import Note, NoteUpdate
from services.exceptions import FetchFailureError, UpdateFailureError
from shared.api_errors import ParsedApiError

API_URL = "http://notes.test"


class FakeNoteStore:
    """
    In-memory note store.

    Updates yield to the event loop before settling so concurrently issued updates
    overlap; max_in_flight records how many were pending at once.
    """

    def __init__(self, notes: list[Note], fail_ids: set[str] | None = None) -> None:
        self.notes = {note.id: note for note in notes}
        self.fail_ids = fail_ids or set()
        self.updates: list[tuple[str, NoteUpdate]] = []
        self.fetch_calls: list[str] = []
        self.fetch_error: FetchFailureError | None = None
        self.in_flight = 0
        self.max_in_flight = 0

    async def update_note(self, note_id: str, update: NoteUpdate) -> None:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        await asyncio.sleep(0)
        self.in_flight -= 1
        if note_id in self.fail_ids:
            raise UpdateFailureError(note_id, ParsedApiError("internal", "API error 500", 500))
        self.updates.append((note_id, update))
        old = self.notes[note_id]
        self.notes[note_id] = old.model_copy(
            update={"content": update.content, "attachment": update.attachment},
        )

    async def fetch_notes(self, operation: str = "load") -> list[Note]:
        self.fetch_calls.append(operation)
        if self.fetch_error is not None:
            raise self.fetch_error
        return list(self.notes.values())


def make_note(note_id: str, content: str | None, attachment: Any = None) -> Note:
    """Build a note with a fixed creation time."""
    return Note(
        id=note_id,
        content=content,
        created_at=datetime(2024, 1, 1, tzinfo=UTC),
        attachment=attachment,
    )


@pytest.fixture
def note_factory() -> Callable[..., Note]:
    """Factory for notes with a fixed creation time."""
    return make_note


@pytest.fixture
def store_factory() -> Callable[..., FakeNoteStore]:
    """Factory for in-memory note stores."""
    return FakeNoteStore


@pytest.fixture
def fetch_failure() -> FetchFailureError:
    """A reload failure as raised by the remote store."""
    return FetchFailureError("reload", ParsedApiError("internal", "API error 503", 503))


@pytest.fixture
def settings() -> Settings:
    """Settings pointing at the mocked note store."""
    return Settings(
        _env_file=None,
        NOTES_API_URL=API_URL,
        NOTES_API_TOKEN="test_token",
    )


@pytest.fixture
def mock_api() -> Generator[respx.MockRouter]:
    """Context manager for mocking note store responses."""
    with respx.mock(base_url=API_URL, assert_all_called=False) as respx_mock:
        yield respx_mock


@pytest.fixture
async def http_client(settings: Settings) -> AsyncGenerator[httpx.AsyncClient]:
    """HTTP client configured from settings."""
    async with create_http_client(settings) as client:
        yield client


@pytest.fixture
def remote_store(http_client: httpx.AsyncClient) -> RemoteNoteStore:
    """Remote note store backed by the mocked API."""
    return RemoteNoteStore(http_client, "test_token")


@pytest.fixture
def sample_notes_payload() -> list[dict[str, Any]]:
    """Sample `GET /notes` response data."""
    return [
        {
            "noteId": "n1",
            "content": "hello world",
            "createdAt": 1700000000000,
            "attachment": "n1-photo.png",
        },
        {
            "noteId": "n2",
            "content": "goodbye world",
            "createdAt": 1700000100000,
            "attachment": None,
        },
    ]
