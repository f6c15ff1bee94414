"""
Editor Autosave.

Debounced saving for an open editor: each content change restarts a timer,
and when typing pauses for the configured interval the draft is saved
through NoteService. Unchanged content is never written twice.

Only the waiting timer is ever cancelled. Once a save has started it runs
to completion, and saves never overlap, so a draft is created at most once.

Usage:
    session = AutosaveSession(service, note_id=note.id, saved_content=note.content)
    session.content_changed(text)     # on every keystroke
    await session.close(text)         # when the editor is dismissed
"""

import asyncio

from noteprompt.core.logging import get_logger
from noteprompt.editor.state import EditorState
from noteprompt.schemas.note import Note
from noteprompt.services.note import NoteService

logger = get_logger(__name__)


class AutosaveSession:
    """Tracks one editor's state and saves its content after typing pauses."""

    def __init__(
        self,
        service: NoteService,
        note_id: str | None = None,
        saved_content: str = "",
        delay_seconds: float | None = None,
    ) -> None:
        """
        Args:
            service: Service used to persist drafts
            note_id: Note being edited, or None for a new note
            saved_content: Content already persisted for note_id
            delay_seconds: Pause before saving; defaults to editor.yaml
        """
        if delay_seconds is None:
            from noteprompt.core.config import get_app_config

            delay_seconds = float(get_app_config().editor.autosave_seconds)

        self._service = service
        self._delay = delay_seconds
        self._saved_content = saved_content
        self._timer: asyncio.Task[Note | None] | None = None
        self._in_flight: set[asyncio.Task[Note | None]] = set()
        self._save_lock = asyncio.Lock()
        self.state = EditorState(current_note_id=note_id)
        self.last_error: Exception | None = None

    @property
    def note_id(self) -> str | None:
        return self.state.current_note_id

    def toggle_view(self) -> None:
        self.state = self.state.toggle_view()

    def content_changed(self, content: str) -> None:
        """Record an edit and restart the autosave timer."""
        self.state = self.state.mark_as_modified()
        self._cancel_timer()
        self._timer = asyncio.create_task(self._save_after_delay(content))

    async def _save_after_delay(self, content: str) -> Note | None:
        await asyncio.sleep(self._delay)

        task = asyncio.current_task()
        if self._timer is task:
            self._timer = None
        self._in_flight.add(task)
        try:
            return await self.save(content)
        except Exception as exc:
            # Nobody awaits the timer task; keep the failure for the editor to show.
            self.last_error = exc
            logger.error(
                "Autosave failed",
                extra={"note_id": self.note_id, "error": str(exc)},
            )
            return None
        finally:
            self._in_flight.discard(task)

    def _mark_saved(self) -> None:
        # A newer edit still waiting on its timer keeps the editor dirty.
        if self._timer is None:
            self.state = self.state.mark_as_saved()
        else:
            self.state = self.state.mark_as_modified()

    def _cancel_timer(self) -> None:
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None

    async def save(self, content: str) -> Note | None:
        """
        Save content now, after any save already in progress.

        Returns:
            The saved note, or None when content matched the last save or
            a blank new draft was skipped
        """
        async with self._save_lock:
            if content == self._saved_content:
                self._mark_saved()
                return None

            note = await self._service.save_draft(self.note_id, content)
            self._saved_content = content
            self.last_error = None

            if note is not None and note.id != self.note_id:
                self.state = self.state.set_current_note(note.id)
            self._mark_saved()
            logger.debug("Draft saved", extra={"note_id": self.note_id})
            return note

    async def close(self, content: str | None = None) -> Note | None:
        """
        Stop the timer, let a running save finish and, when content is
        given, save it one last time.
        """
        self._cancel_timer()
        if self._in_flight:
            await asyncio.gather(*self._in_flight)
        if content is None:
            return None
        return await self.save(content)
