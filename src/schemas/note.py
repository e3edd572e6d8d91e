"""Pydantic schemas for notes exchanged with the remote note store."""
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Note(BaseModel):
    """
    A single note as returned by `GET /notes`.

    Field names on the wire follow the note store (`noteId`, `createdAt`); both the
    wire name and the Python name are accepted when validating. Unknown keys are ignored.
    The attachment is opaque to the client and is passed back unmodified on update.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        coerce_numbers_to_str=True,
        frozen=True,
        extra="ignore",
    )

    id: str = Field(validation_alias="noteId", serialization_alias="noteId")
    content: str | None = None
    created_at: datetime | None = Field(
        default=None,
        validation_alias="createdAt",
        serialization_alias="createdAt",
        description="Epoch milliseconds or ISO 8601 timestamp.",
    )
    attachment: Any = None


class NoteUpdate(BaseModel):
    """Body of `PUT /notes/{id}`."""

    content: str
    attachment: Any = None
