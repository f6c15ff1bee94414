"""
Note Schemas.

The Note entity: an immutable markdown document whose title is always
derived from its content. New values are produced by Note.create and
Note.with_updated_content; rows from the store are read back with
Note.from_storage_record.
"""

from collections.abc import Mapping
from datetime import datetime
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from noteprompt.core.exceptions import DeserializationError
from noteprompt.core.markdown import extract_title, generate_preview
from noteprompt.core.utils import from_epoch_ms, normalize_timestamp, to_epoch_ms, utc_now

_REQUIRED_TEXT_FIELDS = ("id", "content")
_TIMESTAMP_FIELDS = ("created_at", "updated_at")


class Note(BaseModel):
    """
    A markdown note.

    Equality and hashing cover every field. The title is computed from the
    content on access and cannot be assigned.
    """

    id: str = Field(description="Opaque unique identifier, storage primary key")
    content: str = Field(description="Full markdown text")
    created_at: datetime = Field(description="Creation time, naive UTC, millisecond precision")
    updated_at: datetime = Field(description="Last content change, naive UTC, millisecond precision")

    model_config = ConfigDict(frozen=True)

    extract_title = staticmethod(extract_title)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def title(self) -> str:
        """Display title derived from the first line of content."""
        return extract_title(self.content)

    @property
    def preview(self) -> str:
        """Plain-text snippet for list views."""
        return generate_preview(self.content)

    @field_validator("created_at", "updated_at")
    @classmethod
    def _normalize_timestamp(cls, value: datetime) -> datetime:
        # Aware values become naive UTC; precision matches the stored encoding.
        return normalize_timestamp(value)

    @model_validator(mode="after")
    def _check_timestamps(self) -> "Note":
        if self.updated_at < self.created_at:
            raise ValueError("updated_at must not be earlier than created_at")
        return self

    @classmethod
    def create(cls, content: str) -> "Note":
        """
        Create a new note with a fresh identifier.

        Args:
            content: Markdown content, may be empty

        Returns:
            Note with created_at == updated_at == now
        """
        now = utc_now()
        return cls(id=str(uuid4()), content=content, created_at=now, updated_at=now)

    def with_updated_content(self, new_content: str) -> "Note":
        """
        Return a copy carrying new content.

        The title is re-derived and updated_at moves to now. If the clock
        reads earlier than the previous updated_at, the previous value is
        kept so updated_at never goes backwards.
        """
        return Note(
            id=self.id,
            content=new_content,
            created_at=self.created_at,
            updated_at=max(utc_now(), self.updated_at),
        )

    def to_storage_record(self) -> dict[str, Any]:
        """Serialize to a flat row with millisecond epoch timestamps."""
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "created_at": to_epoch_ms(self.created_at),
            "updated_at": to_epoch_ms(self.updated_at),
        }

    @classmethod
    def from_storage_record(cls, record: Mapping[str, Any]) -> "Note":
        """
        Rebuild a note from a stored row.

        The stored title is not trusted: it may be absent or null, and the
        title is always recomputed from content.

        Raises:
            DeserializationError: If id or content is missing, or a
                timestamp is not an integer
        """
        for key in _REQUIRED_TEXT_FIELDS:
            if not isinstance(record.get(key), str):
                raise DeserializationError(f"Stored note is missing required field '{key}'")

        timestamps: dict[str, datetime] = {}
        for key in _TIMESTAMP_FIELDS:
            value = record.get(key)
            if isinstance(value, bool) or not isinstance(value, int):
                raise DeserializationError(
                    f"Stored note has invalid timestamp '{key}': {value!r}"
                )
            try:
                timestamps[key] = from_epoch_ms(value)
            except OverflowError as e:
                raise DeserializationError(
                    f"Stored note has out-of-range timestamp '{key}': {value!r}"
                ) from e

        try:
            return cls(id=record["id"], content=record["content"], **timestamps)
        except PydanticValidationError as e:
            raise DeserializationError(f"Stored note is inconsistent: {e}") from e

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title={self.title!r}, updated_at={self.updated_at})>"
