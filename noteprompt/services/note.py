"""
Note Service.

Note workflows used by the editor: creating a note from typed content,
applying edits copy-on-write, and the autosave decision of whether a draft
becomes a new note, updates an existing one, or is not saved at all.
"""

from noteprompt.core.markdown import has_content
from noteprompt.repositories.note import NotesRepository
from noteprompt.schemas.note import Note
from noteprompt.services.base import BaseService


class NoteService(BaseService):
    """Service for note editing workflows."""

    def __init__(self, repository: NotesRepository) -> None:
        super().__init__()
        self.repo = repository

    async def create_note(self, content: str) -> Note:
        """
        Create and persist a new note.

        Args:
            content: Markdown content, may be empty

        Returns:
            The persisted note
        """
        note = Note.create(content)
        self._log_operation("Creating note", note_id=note.id, title=note.title)

        await self.repo.insert_note(note)
        return note

    async def get_note(self, note_id: str) -> Note | None:
        """Get a note by id, or None."""
        return await self.repo.get_note_by_id(note_id)

    async def list_notes(self) -> list[Note]:
        """All notes, most recently modified first."""
        return await self.repo.get_all_notes()

    async def search_notes(self, query: str) -> list[Note]:
        """Case-sensitive search over titles and content."""
        self._log_debug("Searching notes", query=query)
        return await self.repo.search_notes(query)

    async def count_notes(self) -> int:
        return await self.repo.get_notes_count()

    async def update_note_content(self, note_id: str, content: str) -> Note | None:
        """
        Replace a note's content.

        Args:
            note_id: Note to edit
            content: New markdown content

        Returns:
            The updated note, or None if the note no longer exists
        """
        current = await self.repo.get_note_by_id(note_id)
        if current is None:
            self._log_debug("Note to update not found", note_id=note_id)
            return None

        updated = current.with_updated_content(content)
        self._log_operation("Updating note", note_id=note_id, title=updated.title)

        if await self.repo.update_note(updated) == 0:
            # Deleted between the read and the write.
            return None
        return updated

    async def save_draft(self, note_id: str | None, content: str) -> Note | None:
        """
        Persist editor content.

        A draft without an id becomes a new note unless it is blank; a
        draft with an id updates that note.

        Returns:
            The saved note, or None when nothing was saved
        """
        if note_id is None:
            if not has_content(content):
                self._log_debug("Skipping blank draft")
                return None
            return await self.create_note(content)
        return await self.update_note_content(note_id, content)

    async def delete_note(self, note_id: str) -> bool:
        """
        Delete a note.

        Returns:
            True if a note was deleted
        """
        self._log_operation("Deleting note", note_id=note_id)
        return await self.repo.delete_note(note_id) > 0
