"""
Unit Tests for AutosaveSession.

The note service is mocked; timers run with a very short delay.
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from noteprompt.schemas.note import Note
from noteprompt.services.note import NoteService

DELAY = 0.01


async def _settle() -> None:
    await asyncio.sleep(DELAY * 5)


@pytest.fixture
def service(make_note) -> AsyncMock:
    mock = AsyncMock(spec=NoteService)
    mock.save_draft.return_value = make_note("# Draft", id="note-1")
    return mock


@pytest.fixture
def session(service):
    from noteprompt.editor.autosave import AutosaveSession

    return AutosaveSession(service, delay_seconds=DELAY)


class TestDebouncedSave:
    async def test_saves_after_pause(self, session, service):
        session.content_changed("# Draft")
        assert session.state.has_unsaved_changes is True

        await _settle()

        service.save_draft.assert_awaited_once_with(None, "# Draft")
        assert session.note_id == "note-1"
        assert session.state.has_unsaved_changes is False

    async def test_rapid_edits_save_once_with_latest_content(self, session, service):
        session.content_changed("#")
        session.content_changed("# D")
        session.content_changed("# Draft")

        await _settle()

        service.save_draft.assert_awaited_once_with(None, "# Draft")

    async def test_existing_note_id_is_passed(self, service):
        from noteprompt.editor.autosave import AutosaveSession

        session = AutosaveSession(service, note_id="note-1", saved_content="old", delay_seconds=DELAY)
        session.content_changed("new")
        await _settle()

        service.save_draft.assert_awaited_once_with("note-1", "new")

    async def test_failure_is_kept_and_state_stays_dirty(self, session, service):
        service.save_draft.side_effect = RuntimeError("disk full")

        session.content_changed("text")
        await _settle()

        assert isinstance(session.last_error, RuntimeError)
        assert session.state.has_unsaved_changes is True


class TestSave:
    async def test_unchanged_content_is_not_written(self, session, service):
        result = await session.save("")

        assert result is None
        service.save_draft.assert_not_awaited()

    async def test_second_save_of_same_content_is_skipped(self, session, service):
        await session.save("# Draft")
        await session.save("# Draft")

        service.save_draft.assert_awaited_once()

    async def test_blank_new_draft_keeps_no_id(self, session, service):
        service.save_draft.return_value = None

        assert await session.save("   ") is None
        assert session.note_id is None

    async def test_returns_saved_note(self, session):
        note = await session.save("# Draft")
        assert isinstance(note, Note)


class TestClose:
    async def test_close_cancels_timer_and_saves(self, session, service):
        session.content_changed("# Draft")

        await session.close("# Draft")
        await _settle()

        service.save_draft.assert_awaited_once_with(None, "# Draft")

    async def test_close_without_content_discards_pending(self, session, service):
        session.content_changed("# Draft")

        assert await session.close() is None
        await _settle()

        service.save_draft.assert_not_awaited()


class TestDefaults:
    def test_delay_from_editor_config(self, service):
        from noteprompt.core.config import get_app_config
        from noteprompt.editor.autosave import AutosaveSession

        session = AutosaveSession(service)

        assert session._delay == float(get_app_config().editor.autosave_seconds)

    def test_toggle_view(self, session):
        session.toggle_view()
        assert session.state.is_markdown_view is True


class TestOverlappingSaves:
    async def test_saves_run_one_at_a_time(self, session, service, make_note):
        calls: list[str | None] = []

        async def slow_save_draft(note_id, content):
            calls.append(note_id)
            await asyncio.sleep(DELAY)
            return make_note(content, id="note-1")

        service.save_draft.side_effect = slow_save_draft

        await asyncio.gather(session.save("first"), session.save("second"))

        assert calls == [None, "note-1"]

    async def test_new_edit_does_not_cancel_running_save(self, session, service, make_note):
        started = asyncio.Event()

        async def slow_save_draft(note_id, content):
            started.set()
            await asyncio.sleep(DELAY * 3)
            return make_note(content, id="note-1")

        service.save_draft.side_effect = slow_save_draft

        session.content_changed("first")
        await asyncio.wait_for(started.wait(), timeout=1)
        session.content_changed("second")
        await asyncio.sleep(DELAY * 10)

        assert [c.args for c in service.save_draft.await_args_list] == [
            (None, "first"),
            ("note-1", "second"),
        ]
        assert session.state.has_unsaved_changes is False
