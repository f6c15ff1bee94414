"""
Application Entry Point.

Wires the note store, repository and service together and owns their
lifecycle. The host app (the mobile shell) opens one NotePromptApp for as
long as it runs and closes it on exit.

Usage:
    from noteprompt.main import open_app

    async with open_app() as app:
        note = await app.notes.create_note("# Groceries\n- milk")
        async with await app.repository.watch_all_notes() as live:
            ...
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from noteprompt.core.database import NoteStore
from noteprompt.core.logging import get_logger
from noteprompt.repositories.note import NotesRepository
from noteprompt.services.note import NoteService

logger = get_logger(__name__)


class NotePromptApp:
    """Holds the long-lived store, repository and service."""

    def __init__(self, store: NoteStore) -> None:
        self.store = store
        self.repository = NotesRepository(store)
        self.notes = NoteService(self.repository)

    async def close(self) -> None:
        """Dispose the repository, then close the store."""
        self.repository.dispose()
        await self.store.close()


@asynccontextmanager
async def open_app(
    store: NoteStore | None = None,
    configure_logging: bool = True,
) -> AsyncGenerator[NotePromptApp, None]:
    """
    Open the application for the duration of the context.

    Args:
        store: Store to use; built from database.yaml when omitted
        configure_logging: Run setup_logging() from logging.yaml first
    """
    if configure_logging:
        from noteprompt.core.logging import setup_logging

        setup_logging()

    if store is None:
        store = NoteStore.from_config()

    app = NotePromptApp(store)
    logger.info("Application starting", extra={"store": store.url})
    try:
        yield app
    finally:
        await app.close()
        logger.info("Application shutting down")
