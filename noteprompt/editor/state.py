"""
Editor State.

Immutable snapshot of the editor's view mode, dirty flag and the note being
edited. Every transition returns a new EditorState.
"""

from pydantic import BaseModel, ConfigDict


class EditorState(BaseModel):
    """Editor view and save status."""

    is_markdown_view: bool = False
    has_unsaved_changes: bool = False
    current_note_id: str | None = None

    model_config = ConfigDict(frozen=True)

    def toggle_view(self) -> "EditorState":
        """Switch between rendered and raw markdown view."""
        return self.model_copy(update={"is_markdown_view": not self.is_markdown_view})

    def mark_as_modified(self) -> "EditorState":
        if self.has_unsaved_changes:
            return self
        return self.model_copy(update={"has_unsaved_changes": True})

    def mark_as_saved(self) -> "EditorState":
        if not self.has_unsaved_changes:
            return self
        return self.model_copy(update={"has_unsaved_changes": False})

    def set_current_note(self, note_id: str) -> "EditorState":
        """Start editing a note; the view mode is kept, the dirty flag cleared."""
        return self.model_copy(update={"current_note_id": note_id, "has_unsaved_changes": False})

    def reset(self) -> "EditorState":
        """State for a closed editor."""
        return EditorState()
