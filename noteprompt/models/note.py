"""
Note Model.

Table declaration for persisted notes. Rows are plain values; the Note
entity in noteprompt.schemas.note owns all behaviour. Timestamps are stored
as integer milliseconds since the Unix epoch.
"""

from sqlalchemy import Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from noteprompt.models.base import Base


class NoteRecord(Base):
    """Row in the notes table."""

    __tablename__ = "notes"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    title: Mapped[str | None] = mapped_column(Text, nullable=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[int] = mapped_column(Integer, nullable=False)
    updated_at: Mapped[int] = mapped_column(Integer, nullable=False)

    def __repr__(self) -> str:
        return f"<NoteRecord(id={self.id}, title={self.title!r})>"


# Accelerates the default most-recently-modified-first ordering.
Index("idx_notes_updated_at", NoteRecord.updated_at.desc())

notes_table = NoteRecord.__table__
