"""
NotePrompt.

- core/: Configuration, logging, exceptions, text and date utilities, store handle
- models/: SQLAlchemy table declarations
- schemas/: Pydantic value types (the Note entity)
- repositories/: Data access and live-query broadcasting
- services/: Note workflows used by the editor
- events/: In-process broadcast channel
- editor/: Cursor-relative markdown editing helpers and editor state
- sharing/: Forwarding note text to iOS Shortcuts
"""
