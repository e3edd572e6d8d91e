"""Remote note store: typed note fetch and update over the REST API."""
import logging
from urllib.parse import quote

import httpx
from pydantic import TypeAdapter, ValidationError

from notes_client.api_client import api_get, api_put
from schemas.note import Note, NoteUpdate
from services.exceptions import FetchFailureError, UpdateFailureError
from shared.api_errors import ParsedApiError, parse_http_error, parse_transport_error

logger = logging.getLogger(__name__)

_note_list_adapter = TypeAdapter(list[Note])


class RemoteNoteStore:
    """
    Note store reachable over `GET /notes` and `PUT /notes/{id}`.

    Every non-success response, request error or unreadable body is translated into
    the client's structured errors: FetchFailureError for the collection, UpdateFailureError per note.
    """

    def __init__(self, client: httpx.AsyncClient, token: str = "") -> None:
        self._client = client
        self._token = token

    async def fetch_notes(self, operation: str = "load") -> list[Note]:
        """Fetch the full, server-ordered note collection."""
        try:
            data = await api_get(self._client, "/notes", self._token)
        except httpx.HTTPStatusError as e:
            raise FetchFailureError(operation, parse_http_error(e)) from e
        except httpx.RequestError as e:
            raise FetchFailureError(operation, parse_transport_error(e)) from e
        except ValueError as e:
            logger.warning("Note store returned a body that is not JSON: %s", e)
            raise FetchFailureError(
                operation,
                ParsedApiError("internal", "Note store returned an invalid response"),
            ) from e

        try:
            return _note_list_adapter.validate_python(data)
        except ValidationError as e:
            logger.warning("Note store returned an unexpected payload: %s", e)
            raise FetchFailureError(
                operation,
                ParsedApiError("internal", "Note store returned an invalid note list"),
            ) from e

    async def update_note(self, note_id: str, update: NoteUpdate) -> None:
        """Replace the content of one note, passing its attachment back unchanged."""
        try:
            await api_put(
                self._client,
                f"/notes/{quote(note_id, safe='')}",
                self._token,
                json=update.model_dump(),
            )
        except httpx.HTTPStatusError as e:
            raise UpdateFailureError(note_id, parse_http_error(e, note_id=note_id)) from e
        except httpx.RequestError as e:
            raise UpdateFailureError(note_id, parse_transport_error(e)) from e
