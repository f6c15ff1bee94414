"""
Root Pytest Fixtures.

Shared fixtures available to all test types.

Test Database Configuration:
    Tests use an in-memory SQLite database. Each test gets a fresh store;
    closing the store discards the database.
"""

from collections.abc import AsyncGenerator, Callable
from datetime import datetime, timedelta
from uuid import uuid4

import pytest

from noteprompt.core.database import NoteStore
from noteprompt.repositories.note import NotesRepository
from noteprompt.schemas.note import Note

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
BASE_TIME = datetime(2024, 1, 15, 9, 30)


# =============================================================================
# Store Fixtures
# =============================================================================


@pytest.fixture
async def note_store() -> AsyncGenerator[NoteStore, None]:
    """
    Provide an empty in-memory note store.

    The schema is created on first use, like in the app.
    """
    store = NoteStore(TEST_DATABASE_URL)
    yield store
    await store.close()


@pytest.fixture
async def notes_repository(note_store: NoteStore) -> AsyncGenerator[NotesRepository, None]:
    """Provide a repository over the test store, disposed after the test."""
    repository = NotesRepository(note_store)
    yield repository
    repository.dispose()


# =============================================================================
# Note Factories
# =============================================================================


@pytest.fixture
def make_note() -> Callable[..., Note]:
    """
    Build notes with controlled timestamps.

    Usage:
        def test_ordering(make_note):
            older = make_note("First", minutes=0)
            newer = make_note("Second", minutes=5)
    """

    def _make(content: str, minutes: int = 0, id: str | None = None) -> Note:
        created = BASE_TIME
        return Note(
            id=id or str(uuid4()),
            content=content,
            created_at=created,
            updated_at=created + timedelta(minutes=minutes),
        )

    return _make
