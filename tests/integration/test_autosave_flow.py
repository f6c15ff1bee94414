"""
Integration Tests for autosave against a live repository.

The store answers queries slowly so that saves are still running while the
user keeps typing, with a watcher attached so every mutation reloads.
"""

import asyncio

import pytest

from noteprompt.core.database import NoteStore
from noteprompt.editor.autosave import AutosaveSession
from noteprompt.repositories.note import NotesRepository
from noteprompt.services.note import NoteService

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
DELAY = 0.01


class SlowNoteStore(NoteStore):
    """Store whose reads take long enough to overlap with typing."""

    async def query(self, *args, **kwargs):
        await asyncio.sleep(0.05)
        return await super().query(*args, **kwargs)


@pytest.fixture
async def slow_repository():
    store = SlowNoteStore(TEST_DATABASE_URL)
    repository = NotesRepository(store)
    yield repository
    repository.dispose()
    await store.close()


class TestTypingDuringSave:
    async def test_edit_during_running_save_keeps_one_note(self, slow_repository):
        watcher = await slow_repository.watch_all_notes()
        session = AutosaveSession(NoteService(slow_repository), delay_seconds=DELAY)

        session.content_changed("# Draft")
        await asyncio.sleep(0.03)
        session.content_changed("# Draft more")
        await asyncio.sleep(0.5)

        notes = await slow_repository.get_all_notes()
        assert len(notes) == 1
        assert notes[0].content == "# Draft more"
        assert session.note_id == notes[0].id
        assert session.state.has_unsaved_changes is False
        watcher.unsubscribe()

    async def test_close_waits_for_running_save(self, slow_repository):
        await slow_repository.watch_all_notes()
        session = AutosaveSession(NoteService(slow_repository), delay_seconds=DELAY)

        session.content_changed("# Draft")
        await asyncio.sleep(0.03)
        await session.close("# Final")

        notes = await slow_repository.get_all_notes()
        assert [note.content for note in notes] == ["# Final"]
        assert session.note_id == notes[0].id
