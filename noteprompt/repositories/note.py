"""
Note Repository.

Data access layer for notes. Translates between Note values and rows in
the notes table, and re-broadcasts the full note collection to watchers
after every mutation made through this instance.
"""

from sqlalchemy import func, or_

from noteprompt.core.database import NoteStore
from noteprompt.core.logging import get_logger
from noteprompt.events.broadcast import BroadcastChannel, Subscription
from noteprompt.models.note import notes_table
from noteprompt.schemas.note import Note

logger = get_logger(__name__)

NotesSubscription = Subscription[list[Note]]

_MOST_RECENT_FIRST = (notes_table.c.updated_at.desc(),)


class NotesRepository:
    """
    Repository for notes.

    Owns no business rules: every method is one store call, and mutations
    are followed by a full reload broadcast to watch_all_notes() listeners.
    Store failures (StorageUnavailableError included) propagate unchanged.

    Precondition: no method is called after dispose().
    """

    def __init__(self, store: NoteStore) -> None:
        self._store = store
        self._channel: BroadcastChannel[list[Note]] = BroadcastChannel("notes")

    @property
    def store(self) -> NoteStore:
        """The store this repository reads and writes."""
        return self._store

    async def get_all_notes(self) -> list[Note]:
        """
        Get every note, most recently modified first.

        Ties on updated_at come back in storage order, which is unspecified.
        """
        rows = await self._store.query(notes_table, order_by=_MOST_RECENT_FIRST)
        return [Note.from_storage_record(row) for row in rows]

    async def get_note_by_id(self, id: str) -> Note | None:
        """Get a single note, or None when no row has this id."""
        rows = await self._store.query(
            notes_table,
            where=notes_table.c.id == id,
            limit=1,
        )
        if not rows:
            return None
        return Note.from_storage_record(rows[0])

    async def insert_note(self, note: Note) -> str:
        """
        Insert a note.

        An existing row with the same id is replaced.

        Returns:
            The note id
        """
        await self._store.insert(notes_table, note.to_storage_record(), replace=True)
        logger.debug("Note inserted", extra={"note_id": note.id})

        await self._notify_listeners()
        return note.id

    async def update_note(self, note: Note) -> int:
        """
        Overwrite the row with this note's id.

        Returns:
            Number of rows affected; 0 means no row had that id
        """
        record = note.to_storage_record()
        rows_affected = await self._store.update(
            notes_table,
            record,
            where=notes_table.c.id == note.id,
        )
        logger.debug(
            "Note updated",
            extra={"note_id": note.id, "rows_affected": rows_affected},
        )

        await self._notify_listeners()
        return rows_affected

    async def delete_note(self, id: str) -> int:
        """
        Delete a note by id.

        Returns:
            Number of rows affected; 0 means no row had that id
        """
        rows_affected = await self._store.delete(notes_table, where=notes_table.c.id == id)
        logger.debug(
            "Note deleted",
            extra={"note_id": id, "rows_affected": rows_affected},
        )

        await self._notify_listeners()
        return rows_affected

    async def delete_all_notes(self) -> int:
        """Delete every note. Intended for tests and resets."""
        rows_affected = await self._store.delete(notes_table)
        logger.info("All notes deleted", extra={"rows_affected": rows_affected})

        await self._notify_listeners()
        return rows_affected

    async def search_notes(self, query: str) -> list[Note]:
        """
        Find notes whose title or content contains query.

        Matching is a case-sensitive substring test. An empty query returns
        every note, exactly like get_all_notes().
        """
        if not query:
            return await self.get_all_notes()

        rows = await self._store.query(
            notes_table,
            where=or_(
                func.instr(notes_table.c.title, query) > 0,
                func.instr(notes_table.c.content, query) > 0,
            ),
            order_by=_MOST_RECENT_FIRST,
        )
        return [Note.from_storage_record(row) for row in rows]

    async def get_notes_count(self) -> int:
        """Total number of notes."""
        return await self._store.count(notes_table)

    async def watch_all_notes(self) -> NotesSubscription:
        """
        Subscribe to the live note collection.

        The current collection is re-queried and broadcast right away, so
        the new subscription's first value is the present state. After that
        every insert, update, delete and delete-all through this repository
        broadcasts the full collection again.

        Returns:
            Subscription to iterate with ``async for``; unsubscribe() or
            leaving ``async with`` detaches only this listener
        """
        subscription = self._channel.subscribe()
        await self._notify_listeners()
        return subscription

    async def _notify_listeners(self) -> None:
        """Reload every note and broadcast it. Skipped when nobody listens."""
        if self._channel.is_closed or self._channel.subscriber_count == 0:
            return
        notes = await self.get_all_notes()
        self._channel.publish(notes)

    def dispose(self) -> None:
        """Close the broadcast channel. All subscriptions end."""
        self._channel.close()
        logger.debug("Notes repository disposed")
