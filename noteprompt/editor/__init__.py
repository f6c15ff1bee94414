"""
Editor Package.

Everything the note editor needs besides widgets:

1. formatting - cursor-relative markdown splices for toolbar actions and Enter
2. state - immutable view mode / dirty flag snapshot
3. autosave - debounced saving through NoteService

Usage:
    from noteprompt.editor.formatting import Selection, wrap_selection, BOLD

    result = wrap_selection(text, Selection(4, 9), BOLD)
"""
