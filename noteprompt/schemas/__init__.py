# Pydantic schemas package
from noteprompt.schemas.note import Note

__all__ = [
    "Note",
]
